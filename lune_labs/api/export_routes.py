"""
Export Routes
=============

API routes for export settings, presets, preview and download.
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field, field_validator

from ..canvas.state_manager import StateManager
from ..models.canvas_models import validate_color
from ..models.export_models import ExportDimension, ExportPreview, ExportResult
from ..models.preset_models import EXPORT_PRESETS, MODE_DEFAULTS, ExportFormat, ExportMode
from ..services.export_compositor import ExportCompositor
from .design_routes import get_state_manager, require_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/export", tags=["export"])

# Injected by server
compositor: Optional[ExportCompositor] = None


def get_compositor() -> ExportCompositor:
    """Dependency to get the export compositor."""
    if compositor is None:
        raise HTTPException(500, "Export compositor not initialized")
    return compositor


class ModeRequest(BaseModel):
    """Select an export category."""
    mode: ExportMode


class SizeRequest(BaseModel):
    """Edit one export dimension."""
    dimension: ExportDimension
    value: int = Field(ge=16, le=2000)


class SettingsRequest(BaseModel):
    """Partial update of the export settings."""
    padding_percent: Optional[float] = Field(default=None, ge=0, le=40)
    use_background: Optional[bool] = None
    background_color: Optional[str] = None
    format: Optional[ExportFormat] = None
    aspect_locked: Optional[bool] = None

    @field_validator("background_color")
    @classmethod
    def _check_color(cls, v: Optional[str]) -> Optional[str]:
        return validate_color(v) if v is not None else v


def _file_response(result: ExportResult) -> Response:
    if not result.success:
        raise HTTPException(500, f"Export failed: {result.error}")
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'}
    )


@router.get("/presets")
async def list_presets():
    """Get the preset catalog and per-category defaults."""
    return {
        "presets": {
            mode.value: [preset.model_dump() for preset in presets]
            for mode, presets in EXPORT_PRESETS.items()
        },
        "defaults": {
            mode.value: {"format": fmt.value, "padding_percent": padding}
            for mode, (fmt, padding) in MODE_DEFAULTS.items()
        }
    }


@router.put("/{session_id}/mode")
async def set_mode(session_id: str, request: ModeRequest, sm: StateManager = Depends(get_state_manager)):
    """Select social/icon/web/print/custom."""
    session = require_session(sm, session_id)
    session.select_export_mode(request.mode)
    return session.export_settings.model_dump(mode="json")


@router.put("/{session_id}/size")
async def set_size(session_id: str, request: SizeRequest, sm: StateManager = Depends(get_state_manager)):
    """Set export width or height; the aspect lock follows the canvas ratio."""
    session = require_session(sm, session_id)
    session.resize_export(request.dimension, request.value)
    return session.export_settings.model_dump(mode="json")


@router.put("/{session_id}/settings")
async def update_settings(
    session_id: str,
    request: SettingsRequest,
    sm: StateManager = Depends(get_state_manager)
):
    """Update padding, background, format or aspect lock."""
    session = require_session(sm, session_id)
    session.update_export_settings(**request.model_dump(exclude_none=True))
    return session.export_settings.model_dump(mode="json")


@router.get("/{session_id}/preview", response_model=ExportPreview)
async def preview(
    session_id: str,
    sm: StateManager = Depends(get_state_manager),
    ec: ExportCompositor = Depends(get_compositor)
):
    """Summarise the export the current settings would produce."""
    session = require_session(sm, session_id)
    return ec.preview(session.dots, session.config, session.export_settings)


@router.post("/{session_id}")
async def export_image(
    session_id: str,
    sm: StateManager = Depends(get_state_manager),
    ec: ExportCompositor = Depends(get_compositor)
):
    """Export at the current settings and return the file."""
    session = require_session(sm, session_id)
    return _file_response(session.export(ec))


@router.post("/{session_id}/preset/{mode}/{index}")
async def export_preset(
    session_id: str,
    mode: ExportMode,
    index: int,
    sm: StateManager = Depends(get_state_manager),
    ec: ExportCompositor = Depends(get_compositor)
):
    """Export at a preset size without changing the stored export size."""
    session = require_session(sm, session_id)
    try:
        result = session.export_preset(ec, mode, index)
    except KeyError:
        raise HTTPException(404, f"Preset not found: {mode.value}/{index}")
    return _file_response(result)
