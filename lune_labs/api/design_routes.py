"""
Design Routes
=============

API routes for the Circle of Dots editor: canvas parameters, the
structural-change confirmation, tool mode and pointer painting.
"""

import logging
from enum import Enum
from typing import Optional, Dict, Any, List
from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, field_validator

from ..canvas.design_session import DesignSession
from ..canvas.hit_tester import SurfaceRect
from ..canvas.state_manager import StateManager
from ..models.canvas_models import (
    ColorChangeRequest, PendingChange, StructuralChangeRequest, ToolMode, validate_color
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/logo", tags=["logo"])

# Injected by server
state_manager: Optional[StateManager] = None


def get_state_manager() -> StateManager:
    """Dependency to get state manager."""
    if state_manager is None:
        raise HTTPException(500, "State manager not initialized")
    return state_manager


def require_session(sm: StateManager, session_id: str) -> DesignSession:
    session = sm.get_session(session_id)
    if session is None:
        raise HTTPException(404, f"Session not found: {session_id}")
    return session


class PointerAction(str, Enum):
    """Pointer event phase."""
    DOWN = "down"
    MOVE = "move"
    UP = "up"


class PointerRequest(BaseModel):
    """Pointer event in client coordinates plus the rendered surface rectangle."""
    action: PointerAction
    client_x: float = 0
    client_y: float = 0
    surface: Optional[SurfaceRect] = None


class PointerResponse(BaseModel):
    """Result of a pointer event."""
    painted_key: Optional[str] = None
    painting: bool
    painted_count: int


class ToolRequest(BaseModel):
    """Switch tool mode and/or brush colour."""
    mode: Optional[ToolMode] = None
    brush_color: Optional[str] = None

    @field_validator("brush_color")
    @classmethod
    def _check_color(cls, v: Optional[str]) -> Optional[str]:
        return validate_color(v) if v is not None else v


class StructuralChangeResponse(BaseModel):
    """Outcome of a layout parameter edit."""
    applied: bool
    pending_change: Optional[PendingChange] = None
    config: Dict[str, Any]


@router.post("/session")
async def create_session(sm: StateManager = Depends(get_state_manager)):
    """Create a new design session."""
    session_id = sm.create_session()
    return {"session_id": session_id, "message": "Session created"}


@router.get("/{session_id}")
async def get_design(session_id: str, sm: StateManager = Depends(get_state_manager)) -> Dict[str, Any]:
    """Get the full session state."""
    return require_session(sm, session_id).snapshot()


@router.delete("/{session_id}")
async def delete_design(session_id: str, sm: StateManager = Depends(get_state_manager)):
    """Discard a session."""
    if not sm.delete_session(session_id):
        raise HTTPException(404, f"Session not found: {session_id}")
    return {"message": "Session deleted", "session_id": session_id}


@router.get("/{session_id}/dots")
async def get_dots(session_id: str, sm: StateManager = Depends(get_state_manager)) -> List[Dict[str, Any]]:
    """Get the ordered dot layout."""
    session = require_session(sm, session_id)
    return [
        {"x": dot.x, "y": dot.y, "color": dot.color, "key": dot.key}
        for dot in session.dots
    ]


@router.put("/{session_id}/structure", response_model=StructuralChangeResponse)
async def change_structure(
    session_id: str,
    request: StructuralChangeRequest,
    sm: StateManager = Depends(get_state_manager)
):
    """
    Change canvas width/height, dot size or spacing.

    With painted dots present the change is held for confirmation instead.
    """
    session = require_session(sm, session_id)
    applied = session.request_structural_change(request.parameter, request.value)
    return StructuralChangeResponse(
        applied=applied,
        pending_change=session.guard.pending,
        config=session.config.model_dump()
    )


@router.post("/{session_id}/confirm", response_model=StructuralChangeResponse)
async def confirm_change(session_id: str, sm: StateManager = Depends(get_state_manager)):
    """Apply the pending change and clear painted dots."""
    session = require_session(sm, session_id)
    had_pending = session.guard.pending is not None
    session.confirm_change()
    return StructuralChangeResponse(applied=had_pending, config=session.config.model_dump())


@router.post("/{session_id}/cancel", response_model=StructuralChangeResponse)
async def cancel_change(session_id: str, sm: StateManager = Depends(get_state_manager)):
    """Discard the pending change."""
    session = require_session(sm, session_id)
    session.cancel_change()
    return StructuralChangeResponse(applied=False, config=session.config.model_dump())


@router.put("/{session_id}/color")
async def change_color(
    session_id: str,
    request: ColorChangeRequest,
    sm: StateManager = Depends(get_state_manager)
):
    """Change the default dot colour. Painted dots are kept."""
    session = require_session(sm, session_id)
    session.set_dot_color(request.color)
    return {"message": "Color updated", "config": session.config.model_dump()}


@router.put("/{session_id}/tool")
async def change_tool(
    session_id: str,
    request: ToolRequest,
    sm: StateManager = Depends(get_state_manager)
):
    """Switch between generate and paint mode, or change the brush."""
    session = require_session(sm, session_id)
    session.set_tool(request.mode, request.brush_color)
    return {"tool_mode": session.tool_mode.value, "brush_color": session.brush_color}


@router.post("/{session_id}/pointer", response_model=PointerResponse)
async def pointer_event(
    session_id: str,
    request: PointerRequest,
    sm: StateManager = Depends(get_state_manager)
):
    """Handle a pointer down/move/up on the editor surface."""
    session = require_session(sm, session_id)

    cell = None
    if request.action == PointerAction.UP:
        session.pointer_up()
    else:
        if request.surface is None:
            raise HTTPException(422, "surface is required for down/move events")
        if request.action == PointerAction.DOWN:
            cell = session.pointer_down(request.client_x, request.client_y, request.surface)
        else:
            cell = session.pointer_move(request.client_x, request.client_y, request.surface)

    return PointerResponse(
        painted_key=cell.key if cell else None,
        painting=session.is_painting,
        painted_count=len(session.overlays)
    )


@router.delete("/{session_id}/paint")
async def clear_paint(session_id: str, sm: StateManager = Depends(get_state_manager)):
    """Clear all painted dots."""
    session = require_session(sm, session_id)
    session.clear_drawing()
    return {"message": "Drawing cleared", "session_id": session_id}
