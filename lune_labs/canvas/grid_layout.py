"""
Grid Layout Engine
==================

Lays out a centred square grid of dots on the canvas and keeps the cells that
fall inside the circle.

Cells close to the horizontal or vertical centre line get a larger radius
(step * 0.25 extra), which pushes the silhouette toward a plus shape. This is
part of the look of the logo and must stay.
"""

import logging
import math
from typing import Callable, Iterator, List, Optional, Tuple

from ..models.canvas_models import CanvasConfig, Dot

logger = logging.getLogger(__name__)

# Fraction of the step within which a cell counts as "on" an axis
NEAR_AXIS_FRACTION = 0.4
# Extra radius granted to near-axis cells, as a fraction of the step
AXIS_RADIUS_BONUS = 0.25

OverrideLookup = Callable[[int, int], Optional[str]]


class GridGeometry:
    """Derived grid measurements for one canvas configuration."""

    def __init__(self, config: CanvasConfig):
        self.config = config
        self.step = config.dot_size + config.dot_spacing
        if not self.step > 0:
            raise ValueError(
                f"dot_size + dot_spacing must be positive (got {config.dot_size} + {config.dot_spacing})"
            )

        self.center_x = config.canvas_width / 2
        self.center_y = config.canvas_height / 2
        self.radius = min(config.canvas_width, config.canvas_height) / 2 - config.dot_size / 2

        self.max_dots_x = max(0, math.floor((config.canvas_width - config.dot_size) / self.step) + 1)
        self.max_dots_y = max(0, math.floor((config.canvas_height - config.dot_size) / self.step) + 1)

        grid_width = (self.max_dots_x - 1) * self.step
        grid_height = (self.max_dots_y - 1) * self.step
        self.start_x = self.center_x - grid_width / 2
        self.start_y = self.center_y - grid_height / 2

    def in_range(self, i: int, j: int) -> bool:
        return 0 <= i < self.max_dots_x and 0 <= j < self.max_dots_y

    def position(self, i: int, j: int) -> Tuple[float, float]:
        """Canvas-space centre of cell (i, j)."""
        return self.start_x + i * self.step, self.start_y + j * self.step

    def effective_radius(self, x: float, y: float) -> float:
        dx = x - self.center_x
        dy = y - self.center_y
        near_axis = abs(dx) < self.step * NEAR_AXIS_FRACTION or abs(dy) < self.step * NEAR_AXIS_FRACTION
        if near_axis:
            return self.radius + self.step * AXIS_RADIUS_BONUS
        return self.radius

    def includes(self, i: int, j: int) -> bool:
        """True when cell (i, j) produces a dot."""
        if not self.in_range(i, j):
            return False

        x, y = self.position(i, j)
        half = self.config.dot_size / 2
        if (x < half or x > self.config.canvas_width - half or
                y < half or y > self.config.canvas_height - half):
            return False

        dx = x - self.center_x
        dy = y - self.center_y
        distance = math.sqrt(dx * dx + dy * dy)
        return distance <= self.effective_radius(x, y)

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Included cells in row-major order (i outer, j inner)."""
        for i in range(self.max_dots_x):
            for j in range(self.max_dots_y):
                if self.includes(i, j):
                    yield i, j


def layout(config: CanvasConfig, override_lookup: Optional[OverrideLookup] = None) -> List[Dot]:
    """
    Generate the ordered dot sequence for a configuration.

    Args:
        config: Canvas configuration
        override_lookup: Returns the painted colour for (i, j), or None

    Returns:
        Dots in row-major cell order, each with its resolved colour
    """
    geometry = GridGeometry(config)
    dots = []
    for i, j in geometry.cells():
        x, y = geometry.position(i, j)
        color = override_lookup(i, j) if override_lookup else None
        dots.append(Dot(x=x, y=y, color=color or config.dot_color, i=i, j=j))

    logger.debug(
        f"[LAYOUT] {config.canvas_width}x{config.canvas_height} dot={config.dot_size} "
        f"spacing={config.dot_spacing} -> {len(dots)} dots"
    )
    return dots
