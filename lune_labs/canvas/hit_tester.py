"""
Hit Tester
==========

Maps pointer positions back to grid cells for painting.
"""

import math
from typing import Optional, Tuple
from pydantic import BaseModel, Field

from ..models.canvas_models import CanvasConfig, GridCell
from .grid_layout import GridGeometry
from .snapping import round_half_up


class SurfaceRect(BaseModel):
    """On-screen rectangle the canvas is rendered into (client coordinates)."""
    left: float = 0
    top: float = 0
    width: float = Field(gt=0)
    height: float = Field(gt=0)


def to_canvas_space(
    client_x: float,
    client_y: float,
    surface: SurfaceRect,
    config: CanvasConfig
) -> Tuple[float, float]:
    """Convert client coordinates to canvas coordinates using the surface's rendered size."""
    scale_x = config.canvas_width / surface.width
    scale_y = config.canvas_height / surface.height
    return (client_x - surface.left) * scale_x, (client_y - surface.top) * scale_y


def hit_test(x: float, y: float, config: CanvasConfig) -> Optional[GridCell]:
    """
    Find the dot under a canvas-space point.

    The point snaps to the nearest grid index; the hit only counts if that
    cell holds a dot in the current layout and the point lies within the
    dot's radius.
    """
    geometry = GridGeometry(config)
    i = round_half_up((x - geometry.start_x) / geometry.step)
    j = round_half_up((y - geometry.start_y) / geometry.step)

    if not geometry.in_range(i, j):
        return None

    dot_x, dot_y = geometry.position(i, j)
    distance = math.sqrt((x - dot_x) ** 2 + (y - dot_y) ** 2)
    if distance > config.dot_size / 2:
        return None

    if not geometry.includes(i, j):
        return None

    return GridCell(i=i, j=j)
