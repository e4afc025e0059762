"""
Export Models for Lune Labs
===========================

Export configuration, computed placement geometry and export results.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from .canvas_models import CanvasConfig
from .preset_models import ExportFormat, ExportMode, MODE_DEFAULTS, get_presets
from ..canvas.snapping import round_half_up


class ExportDimension(str, Enum):
    """Which export dimension is being edited."""
    WIDTH = "width"
    HEIGHT = "height"


MEDIA_TYPES = {
    ExportFormat.SVG: "image/svg+xml",
    ExportFormat.PNG: "image/png",
}


class ExportSettings(BaseModel):
    """Export panel state for one design session."""
    target_width: int = 500
    target_height: int = 500
    padding_percent: float = 15
    use_background: bool = False
    background_color: str = "#ffffff"
    format: ExportFormat = ExportFormat.PNG
    aspect_locked: bool = True
    mode: ExportMode = ExportMode.CUSTOM

    def select_mode(self, mode: ExportMode) -> None:
        """
        Switch the export category.

        Preset categories jump to their first preset and load the recommended
        format and padding. Custom keeps the current size.
        """
        mode = ExportMode(mode)
        self.mode = mode
        if mode == ExportMode.CUSTOM:
            return

        presets = get_presets(mode)
        if presets:
            self.target_width = presets[0].width
            self.target_height = presets[0].height

        self.format, self.padding_percent = MODE_DEFAULTS[mode]

    def resize(self, dimension: ExportDimension, value: int, canvas: CanvasConfig) -> None:
        """Set one export dimension; with the aspect lock on, derive the other from the canvas."""
        if ExportDimension(dimension) == ExportDimension.WIDTH:
            self.target_width = value
            if self.aspect_locked:
                self.target_height = round_half_up(value * canvas.canvas_height / canvas.canvas_width)
        else:
            self.target_height = value
            if self.aspect_locked:
                self.target_width = round_half_up(value * canvas.canvas_width / canvas.canvas_height)


class ExportGeometry(BaseModel):
    """Uniform scale and centring offset that place the canvas in the export frame."""
    target_width: int
    target_height: int
    padding_px: float
    draw_area_width: float
    draw_area_height: float
    scale: float
    offset_x: float
    offset_y: float
    logo_width: float   # canvas_width * scale
    logo_height: float  # canvas_height * scale
    scaled_dot_size: float


class ExportedDot(BaseModel):
    """A dot in export coordinates, snapped to half units."""
    x: float
    y: float
    color: str


class ExportResult(BaseModel):
    """Outcome of an export. Content is only present on success."""
    success: bool
    content: Optional[bytes] = None
    filename: Optional[str] = None
    media_type: Optional[str] = None
    dot_count: int = 0
    error: Optional[str] = None


class ExportPreview(BaseModel):
    """Human-oriented summary shown next to the export button."""
    target_width: int
    target_height: int
    padding_px: int
    padding_percent: float
    logo_width: int
    logo_height: int
    scale_percent: int
    dot_size: float
    background: Optional[str] = None
    format: ExportFormat
    dot_count: int
    estimated_kb: int
    filename: str
