"""
Structural-Change Guard
=======================

Changing the canvas size, dot size or spacing moves every grid cell, so any
painted colours would land on the wrong dots. When paint exists, such edits
are held until the user confirms (apply and wipe the paint) or cancels.
"""

import logging
from typing import Optional

from ..models.canvas_models import CanvasConfig, GuardState, PendingChange, StructuralParam
from .overlay_store import ColorOverlayStore

logger = logging.getLogger(__name__)


class StructuralChangeGuard:
    """Single-slot confirmation gate for layout-affecting edits."""

    def __init__(self, overlays: ColorOverlayStore):
        self.overlays = overlays
        self.pending: Optional[PendingChange] = None

    @property
    def state(self) -> GuardState:
        if self.pending is None:
            return GuardState.IDLE
        return GuardState.PENDING_CONFIRMATION

    def request(self, config: CanvasConfig, parameter: StructuralParam, value: float) -> CanvasConfig:
        """
        Ask to change a layout parameter.

        Returns the configuration to use next: the changed one when the edit
        applied straight away, the unchanged one when it is now pending.
        A newer request replaces any pending one.
        """
        change = PendingChange(parameter=parameter, value=value)
        if len(self.overlays) == 0:
            return self._apply(config, change)

        if self.pending is not None:
            logger.info(f"[GUARD] Replacing pending {self.pending.parameter.value}={self.pending.value}")
        self.pending = change
        logger.info(
            f"[GUARD] Holding {change.parameter.value}={change.value} until confirmed "
            f"({len(self.overlays)} painted dots)"
        )
        return config

    def confirm(self, config: CanvasConfig) -> CanvasConfig:
        """Apply the pending change and wipe the paint."""
        if self.pending is None:
            return config
        return self._apply(config, self.pending)

    def cancel(self) -> None:
        """Drop the pending change, leaving configuration and paint untouched."""
        if self.pending is not None:
            logger.info(f"[GUARD] Cancelled {self.pending.parameter.value}={self.pending.value}")
        self.pending = None

    def _apply(self, config: CanvasConfig, change: PendingChange) -> CanvasConfig:
        # An applied change supersedes whatever was waiting
        self.pending = None
        self.overlays.clear()
        logger.info(f"[GUARD] Applied {change.parameter.value}={change.value}")
        return config.with_change(change.parameter, change.value)
