"""
Grid Layout Engine Tests
========================

Dot counts, ordering, colour resolution and the plus-shaped radius bias.
"""

import math

import pytest

from lune_labs.canvas.grid_layout import GridGeometry, layout
from lune_labs.models.canvas_models import CanvasConfig


DEFAULT = CanvasConfig(canvas_width=500, canvas_height=500, dot_size=10, dot_spacing=5)


def test_default_canvas_produces_845_dots():
    geometry = GridGeometry(DEFAULT)
    assert geometry.step == 15
    assert geometry.max_dots_x == 33
    assert geometry.max_dots_y == 33
    assert geometry.start_x == 10
    assert len(layout(DEFAULT)) == 845


def test_layout_is_deterministic():
    first = layout(DEFAULT)
    second = layout(DEFAULT)
    assert first == second


def test_dots_are_in_row_major_order():
    cells = [(dot.i, dot.j) for dot in layout(DEFAULT)]
    assert cells == sorted(cells)
    assert cells[0][0] < cells[-1][0]


def test_outer_dots_respect_axis_and_off_axis_radii():
    geometry = GridGeometry(DEFAULT)
    radius = 245
    axis_radius = radius + 15 * 0.25
    for dot in layout(DEFAULT):
        dx = dot.x - 250
        dy = dot.y - 250
        distance = math.sqrt(dx * dx + dy * dy)
        if abs(dx) < 15 * 0.4 or abs(dy) < 15 * 0.4:
            assert distance <= axis_radius
        else:
            assert distance <= radius
    assert geometry.radius == radius


def test_axis_bias_keeps_cells_beyond_the_base_radius():
    # Deliberate plus-shaped silhouette: centre-row cells get step * 0.25 of
    # extra radius. Do not "fix" this into a plain disc.
    config = CanvasConfig(canvas_width=200, canvas_height=116, dot_size=10, dot_spacing=0)
    geometry = GridGeometry(config)
    assert geometry.radius == 53
    assert (geometry.start_x, geometry.start_y) == (5, 8)

    cells = set(geometry.cells())
    # (15, 5) sits on the centre row, 55 units from the centre
    assert geometry.position(15, 5) == (155, 58)
    assert (15, 5) in cells
    assert (4, 5) in cells
    # One step further is outside even the boosted radius
    assert (16, 5) not in cells
    # Off-axis cells within the boosted distance are still cut
    assert math.hypot(45, 30) < geometry.radius + geometry.step * 0.25
    assert (14, 8) not in cells
    assert (15, 4) not in cells


def test_overrides_replace_the_default_color_without_reordering():
    painted = {(16, 16): "#ff0000", (0, 16): "#00ff00"}
    plain = layout(DEFAULT)
    dots = layout(DEFAULT, lambda i, j: painted.get((i, j)))

    assert [(d.x, d.y) for d in dots] == [(d.x, d.y) for d in plain]
    colors = {(d.i, d.j): d.color for d in dots}
    assert colors[(16, 16)] == "#ff0000"
    assert colors[(0, 16)] == "#00ff00"
    assert colors[(16, 0)] == "#000000"


def test_canvas_smaller_than_a_dot_yields_no_dots():
    config = CanvasConfig(canvas_width=5, canvas_height=5, dot_size=10, dot_spacing=5)
    assert layout(config) == []


def test_zero_step_is_rejected():
    config = CanvasConfig(dot_size=0, dot_spacing=0)
    with pytest.raises(ValueError):
        layout(config)
