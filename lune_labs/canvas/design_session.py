"""
Design Session
==============

One user's interactive generator state: canvas configuration, painted
colours, the pending structural change, tool mode and export settings.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel

from ..models.canvas_models import CanvasConfig, Dot, GridCell, StructuralParam, ToolMode
from ..models.export_models import ExportDimension, ExportResult, ExportSettings
from ..models.preset_models import ExportMode, get_preset
from ..services.export_compositor import ExportCompositor
from .grid_layout import layout
from .hit_tester import SurfaceRect, hit_test, to_canvas_space
from .overlay_store import ColorOverlayStore
from .structural_guard import StructuralChangeGuard

logger = logging.getLogger(__name__)


class SessionDefaults(BaseModel):
    """Initial values for a new design session."""
    canvas: CanvasConfig = CanvasConfig()
    brush_color: str = "#ff0000"
    export: ExportSettings = ExportSettings()


class DesignSession:
    """Interactive generator state for one session."""

    def __init__(self, session_id: str, defaults: Optional[SessionDefaults] = None):
        defaults = defaults or SessionDefaults()
        self.session_id = session_id
        self.config = defaults.canvas
        self.overlays = ColorOverlayStore()
        self.guard = StructuralChangeGuard(self.overlays)
        self.tool_mode = ToolMode.GENERATE
        self.brush_color = defaults.brush_color
        self.is_painting = False
        self.export_settings = defaults.export.model_copy()
        self.created_at = datetime.now()
        self.updated_at: Optional[datetime] = None

        self._dots_key: Optional[Tuple[CanvasConfig, int]] = None
        self._dots: List[Dot] = []

    def _touch(self) -> None:
        self.updated_at = datetime.now()

    @property
    def dots(self) -> List[Dot]:
        """Current layout, recomputed only when the config or paint changed."""
        key = (self.config, self.overlays.revision)
        if key != self._dots_key:
            self._dots = layout(self.config, self.overlays.get)
            self._dots_key = key
        return self._dots

    # Canvas parameters

    def request_structural_change(self, parameter: StructuralParam, value: float) -> bool:
        """Returns True when the change applied immediately, False when it awaits confirmation."""
        self.config = self.guard.request(self.config, parameter, value)
        self._touch()
        return self.guard.pending is None

    def confirm_change(self) -> None:
        self.config = self.guard.confirm(self.config)
        self._touch()

    def cancel_change(self) -> None:
        self.guard.cancel()
        self._touch()

    def set_dot_color(self, color: str) -> None:
        """Default colour edits do not move cells, so painted colours are kept."""
        self.config = self.config.model_copy(update={"dot_color": color})
        self._touch()

    # Painting

    def set_tool(self, mode: Optional[ToolMode] = None, brush_color: Optional[str] = None) -> None:
        if mode is not None:
            self.tool_mode = ToolMode(mode)
            if self.tool_mode != ToolMode.PAINT:
                self.is_painting = False
        if brush_color is not None:
            self.brush_color = brush_color
        self._touch()

    def paint_at(self, x: float, y: float) -> Optional[GridCell]:
        """Paint the dot under a canvas-space point with the brush colour."""
        cell = hit_test(x, y, self.config)
        if cell is not None:
            self.overlays.paint(cell, self.brush_color)
            self._touch()
        return cell

    def pointer_down(self, client_x: float, client_y: float, surface: SurfaceRect) -> Optional[GridCell]:
        if self.tool_mode != ToolMode.PAINT:
            return None
        self.is_painting = True
        return self.paint_at(*to_canvas_space(client_x, client_y, surface, self.config))

    def pointer_move(self, client_x: float, client_y: float, surface: SurfaceRect) -> Optional[GridCell]:
        if self.tool_mode != ToolMode.PAINT or not self.is_painting:
            return None
        return self.paint_at(*to_canvas_space(client_x, client_y, surface, self.config))

    def pointer_up(self) -> None:
        self.is_painting = False

    def clear_drawing(self) -> None:
        self.overlays.clear()
        self._touch()

    # Export

    def select_export_mode(self, mode: ExportMode) -> None:
        self.export_settings.select_mode(mode)
        self._touch()

    def resize_export(self, dimension: ExportDimension, value: int) -> None:
        self.export_settings.resize(dimension, value, self.config)
        self._touch()

    def update_export_settings(self, **changes: Any) -> None:
        for name, value in changes.items():
            if value is not None:
                setattr(self.export_settings, name, value)
        self._touch()

    def export(self, compositor: ExportCompositor) -> ExportResult:
        return compositor.export(self.dots, self.config, self.export_settings)

    def export_preset(self, compositor: ExportCompositor, mode: ExportMode, index: int) -> ExportResult:
        """Export at a preset's size without changing the stored export size."""
        preset = get_preset(mode, index)
        return compositor.export(
            self.dots, self.config, self.export_settings,
            target_width=preset.width, target_height=preset.height
        )

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of the session."""
        pending = self.guard.pending
        return {
            "session_id": self.session_id,
            "config": self.config.model_dump(),
            "tool_mode": self.tool_mode.value,
            "brush_color": self.brush_color,
            "is_painting": self.is_painting,
            "overlays": self.overlays.to_dict(),
            "guard_state": self.guard.state.value,
            "pending_change": pending.model_dump(mode="json") if pending else None,
            "export": self.export_settings.model_dump(mode="json"),
            "stats": {
                "canvas": f"{self.config.canvas_width:g}x{self.config.canvas_height:g}",
                "dot_count": len(self.dots),
                "painted_count": len(self.overlays),
            },
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
