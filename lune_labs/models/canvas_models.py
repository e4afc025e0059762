"""
Canvas Models for Lune Labs
===========================

Models for the Circle of Dots canvas: configuration, grid cells, dots and
pending structural changes.
"""

from enum import Enum
from typing import Tuple
from pydantic import BaseModel, Field, field_validator, model_validator
from PIL import ImageColor


# Input boundaries for the generator controls (min, max)
PARAMETER_LIMITS = {
    "canvas_width": (100, 1000),
    "canvas_height": (100, 1000),
    "dot_size": (2, 50),
    "dot_spacing": (0, 30),
}


def validate_color(value: str) -> str:
    """
    Parse any colour Pillow understands and return it as #rrggbb (or
    #rrggbbaa when it carries alpha), so SVG, PNG and filenames all see the
    same value.
    """
    try:
        channels = ImageColor.getrgb(value.strip())
    except ValueError:
        raise ValueError(f"Invalid color value: {value!r}")
    return "#" + "".join(f"{channel:02x}" for channel in channels)


class StructuralParam(str, Enum):
    """Parameters that change the grid layout and invalidate painted dots."""
    CANVAS_WIDTH = "canvas_width"
    CANVAS_HEIGHT = "canvas_height"
    DOT_SIZE = "dot_size"
    DOT_SPACING = "dot_spacing"


class ToolMode(str, Enum):
    """Interaction mode of the editor surface."""
    GENERATE = "generate"
    PAINT = "paint"


class GuardState(str, Enum):
    """State of the structural-change guard."""
    IDLE = "idle"
    PENDING_CONFIRMATION = "pending_confirmation"


class CanvasConfig(BaseModel):
    """
    Canvas configuration consumed by the layout engine.

    Ranges are enforced by the request models at the API boundary; the core
    only requires a positive grid step.
    """
    canvas_width: float = 500
    canvas_height: float = 500
    dot_size: float = 10
    dot_spacing: float = 5
    dot_color: str = "#000000"

    model_config = {"frozen": True}

    @property
    def step(self) -> float:
        return self.dot_size + self.dot_spacing

    def with_change(self, param: StructuralParam, value: float) -> "CanvasConfig":
        """Return a copy with one layout parameter replaced."""
        return self.model_copy(update={StructuralParam(param).value: value})


class GridCell(BaseModel):
    """Integer grid indices of a dot position."""
    i: int = Field(ge=0)
    j: int = Field(ge=0)

    model_config = {"frozen": True}

    @property
    def key(self) -> str:
        return format_cell_key(self.i, self.j)

    def as_tuple(self) -> Tuple[int, int]:
        return (self.i, self.j)


class Dot(BaseModel):
    """A dot produced by the layout engine, in canvas coordinates."""
    x: float
    y: float
    color: str
    i: int
    j: int

    model_config = {"frozen": True}

    @property
    def key(self) -> str:
        return format_cell_key(self.i, self.j)


class PendingChange(BaseModel):
    """A structural edit waiting for the user to confirm or cancel."""
    parameter: StructuralParam
    value: float


class StructuralChangeRequest(BaseModel):
    """Request to change a layout-affecting parameter."""
    parameter: StructuralParam
    value: float

    @model_validator(mode="after")
    def _within_limits(self) -> "StructuralChangeRequest":
        low, high = PARAMETER_LIMITS[self.parameter.value]
        if not low <= self.value <= high:
            raise ValueError(f"{self.parameter.value} must be between {low} and {high}")
        return self


class ColorChangeRequest(BaseModel):
    """Request to change the default dot colour."""
    color: str

    @field_validator("color")
    @classmethod
    def _check_color(cls, v: str) -> str:
        return validate_color(v)


def format_cell_key(i: int, j: int) -> str:
    """Wire form of a cell key. Indices are non-negative so '-' is unambiguous."""
    return f"{i}-{j}"


def parse_cell_key(key: str) -> Tuple[int, int]:
    """Inverse of format_cell_key."""
    i_text, sep, j_text = key.partition("-")
    if not sep or not i_text.isdigit() or not j_text.isdigit():
        raise ValueError(f"Invalid cell key: {key!r}")
    return int(i_text), int(j_text)
