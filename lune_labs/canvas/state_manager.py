"""
Design State Manager
====================

Keeps the generator sessions in memory. Designs are not persisted; a
restart starts every visitor from the defaults.
"""

import logging
import uuid
from collections import OrderedDict
from typing import List, Optional

from .design_session import DesignSession, SessionDefaults

logger = logging.getLogger(__name__)


class StateManager:
    """Manages design sessions."""

    def __init__(self, max_sessions: int = 500, defaults: Optional[SessionDefaults] = None):
        self.max_sessions = max_sessions
        self.defaults = defaults or SessionDefaults()
        self._sessions: "OrderedDict[str, DesignSession]" = OrderedDict()
        logger.info(f"[STATE-MANAGER] Initialized with max_sessions={self.max_sessions}")

    def create_session(self, session_id: Optional[str] = None) -> str:
        """Create a new session with optional ID."""
        if session_id is None:
            session_id = str(uuid.uuid4())

        if session_id not in self._sessions:
            self._sessions[session_id] = DesignSession(session_id, self.defaults)
            self._evict()
        return session_id

    def get_session(self, session_id: str) -> Optional[DesignSession]:
        """Get session state."""
        return self._sessions.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Drop a session."""
        return self._sessions.pop(session_id, None) is not None

    def list_sessions(self) -> List[str]:
        return list(self._sessions)

    def _evict(self) -> None:
        while len(self._sessions) > self.max_sessions:
            session_id, _ = self._sessions.popitem(last=False)
            logger.info(f"[STATE-MANAGER] Evicted session {session_id}")
