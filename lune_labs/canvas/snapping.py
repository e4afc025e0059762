"""
Rounding helpers shared by the layout, hit testing and both export backends.

Python's round() rounds half to even; the generator always rounds half up so
that the vector and raster outputs land on the same half-unit grid.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity."""
    return int(math.floor(value + 0.5))


def snap_half(value: float) -> float:
    """Snap to the nearest half unit (ties up)."""
    return math.floor(value * 2 + 0.5) / 2
