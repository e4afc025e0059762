"""
Export Compositor Tests
=======================

Geometry, half-unit snapping, SVG/PNG agreement and failure handling.
"""

import io
import math
import xml.etree.ElementTree as ET

import pytest
from PIL import Image

from lune_labs.canvas.grid_layout import layout
from lune_labs.models.canvas_models import CanvasConfig, ColorChangeRequest, validate_color
from lune_labs.models.export_models import ExportSettings
from lune_labs.models.preset_models import ExportFormat, ExportMode
from lune_labs.services.export_compositor import (
    ExportCompositor, compute_geometry, estimate_size_kb, export_filename, transform_dots
)
from lune_labs.services.raster_renderer import RasterRenderer, RasterSurfaceError


CANVAS = CanvasConfig(canvas_width=500, canvas_height=500, dot_size=10, dot_spacing=5)
SVG_NS = "{http://www.w3.org/2000/svg}"


def expected_snap(value):
    return math.floor(value * 2 + 0.5) / 2


def settings(**overrides):
    values = {"target_width": 800, "target_height": 800, "padding_percent": 15}
    values.update(overrides)
    return ExportSettings(**values)


def test_geometry_for_800_square_with_15_percent_padding():
    geometry = compute_geometry(CANVAS, 800, 800, 15)
    assert geometry.padding_px == pytest.approx(120)
    assert geometry.draw_area_width == pytest.approx(560)
    assert geometry.draw_area_height == pytest.approx(560)
    assert geometry.scale == pytest.approx(1.12)
    assert geometry.offset_x == pytest.approx(120)
    assert geometry.offset_y == pytest.approx(120)
    assert geometry.scaled_dot_size == 11


def test_transformed_positions_are_snapped_to_half_units():
    geometry = compute_geometry(CANVAS, 800, 800, 15)
    dots = layout(CANVAS)
    placed = transform_dots(dots, geometry)

    assert len(placed) == len(dots)
    for dot, out in zip(dots, placed):
        assert out.x == expected_snap(dot.x * 1.12 + 120)
        assert out.y == expected_snap(dot.y * 1.12 + 120)
        assert (out.x * 2).is_integer() and (out.y * 2).is_integer()

    by_cell = {(d.i, d.j): p for d, p in zip(dots, placed)}
    assert (by_cell[(0, 16)].x, by_cell[(0, 16)].y) == (131.0, 400.0)


def test_scaled_logo_is_centred_in_the_padded_frame():
    geometry = compute_geometry(CANVAS, 800, 400, 10)
    assert geometry.scale == pytest.approx(0.64)
    assert geometry.logo_width == pytest.approx(500 * geometry.scale)
    assert geometry.logo_height == pytest.approx(500 * geometry.scale)
    assert abs(geometry.offset_x + geometry.logo_width / 2 - 400) <= 0.5
    assert abs(geometry.offset_y + geometry.logo_height / 2 - 200) <= 0.5


def test_scaled_dot_size_never_drops_below_one():
    geometry = compute_geometry(CANVAS, 16, 16, 8)
    assert geometry.scaled_dot_size == 1


def test_svg_document_structure():
    result = ExportCompositor().export(layout(CANVAS), CANVAS, settings(format=ExportFormat.SVG))
    assert result.success
    assert result.media_type == "image/svg+xml"

    root = ET.fromstring(result.content.decode("utf-8"))
    assert root.get("width") == "800"
    assert root.get("height") == "800"
    assert root.get("shape-rendering") == "crispEdges"

    circles = root.findall(f"{SVG_NS}circle")
    assert len(circles) == 845
    assert root.find(f"{SVG_NS}rect") is None
    assert {c.get("r") for c in circles} == {"5.5"}
    assert {c.get("stroke") for c in circles} == {"none"}


def test_svg_background_comes_first():
    result = ExportCompositor().export(
        layout(CANVAS), CANVAS,
        settings(format=ExportFormat.SVG, use_background=True, background_color="#ffeecc")
    )
    root = ET.fromstring(result.content.decode("utf-8"))
    first = list(root)[0]
    assert first.tag == f"{SVG_NS}rect"
    assert first.get("fill") == "#ffeecc"
    assert first.get("width") == "800"


def test_png_is_transparent_with_dots_where_the_svg_puts_them():
    dots = layout(CANVAS)
    compositor = ExportCompositor()
    png = compositor.export(dots, CANVAS, settings(format=ExportFormat.PNG))
    svg = compositor.export(dots, CANVAS, settings(format=ExportFormat.SVG))
    assert png.success and png.media_type == "image/png"

    image = Image.open(io.BytesIO(png.content))
    assert image.size == (800, 800)
    assert image.mode == "RGBA"
    assert image.getpixel((0, 0)) == (0, 0, 0, 0)

    root = ET.fromstring(svg.content.decode("utf-8"))
    for circle in root.findall(f"{SVG_NS}circle"):
        x = math.floor(float(circle.get("cx")))
        y = math.floor(float(circle.get("cy")))
        assert image.getpixel((x, y)) == (0, 0, 0, 255)


def test_png_background_and_painted_colour():
    painted = {(16, 16): "#ff0000"}
    dots = layout(CANVAS, lambda i, j: painted.get((i, j)))
    result = ExportCompositor().export(
        dots, CANVAS, settings(use_background=True, background_color="#ffffff")
    )
    image = Image.open(io.BytesIO(result.content))
    assert image.getpixel((0, 0)) == (255, 255, 255, 255)
    assert image.getpixel((400, 400)) == (255, 0, 0, 255)


def test_exports_are_repeatable():
    dots = layout(CANVAS)
    compositor = ExportCompositor()
    for fmt in (ExportFormat.PNG, ExportFormat.SVG):
        first = compositor.export(dots, CANVAS, settings(format=fmt))
        second = compositor.export(dots, CANVAS, settings(format=fmt))
        assert first.content == second.content


def test_empty_layout_exports_background_only():
    result = ExportCompositor().export(
        [], CANVAS, settings(target_width=64, target_height=64, use_background=True, background_color="#000000")
    )
    assert result.success
    image = Image.open(io.BytesIO(result.content))
    assert image.getcolors() == [(64 * 64, (0, 0, 0, 255))]


def test_padding_that_leaves_no_draw_area_degrades_to_empty():
    geometry = compute_geometry(CANVAS, 16, 16, 50)
    assert geometry.scale == 0
    assert transform_dots(layout(CANVAS), geometry) == []

    result = ExportCompositor().export(
        layout(CANVAS), CANVAS, settings(target_width=16, target_height=16, padding_percent=50)
    )
    assert result.success
    assert result.dot_count == 0


def test_surface_failure_returns_a_failed_export(monkeypatch):
    def no_surface(self, width, height, background=None):
        raise RasterSurfaceError("no memory")

    monkeypatch.setattr(RasterRenderer, "create_surface", no_surface)
    result = ExportCompositor().export(layout(CANVAS), CANVAS, settings())
    assert not result.success
    assert result.content is None
    assert "no memory" in result.error


def test_encoding_failure_returns_a_failed_export(monkeypatch):
    def broken_encoder(self, image):
        raise OSError("encoder error")

    monkeypatch.setattr(RasterRenderer, "encode", broken_encoder)
    result = ExportCompositor().export(layout(CANVAS), CANVAS, settings())
    assert not result.success
    assert result.content is None


def test_filenames_describe_the_export():
    custom = ExportSettings()
    assert export_filename(custom, 500, 500) == "logo-500x500-15p-transparent.png"

    social = ExportSettings()
    social.select_mode(ExportMode.SOCIAL)
    assert export_filename(social, 800, 800) == "logo-social-800x800-15p-transparent.png"

    plain = ExportSettings(
        padding_percent=0, use_background=True, background_color="#1a2b3c", format=ExportFormat.SVG
    )
    assert export_filename(plain, 200, 100) == "logo-200x100-1a2b3cbg.svg"

    half = ExportSettings(padding_percent=12.5)
    assert export_filename(half, 64, 64) == "logo-64x64-12.5p-transparent.png"


def test_preview_summary():
    dots = layout(CANVAS)
    preview = ExportCompositor().preview(dots, CANVAS, ExportSettings())
    assert preview.padding_px == 75
    assert (preview.logo_width, preview.logo_height) == (350, 350)
    assert preview.scale_percent == 70
    assert preview.dot_size == 7
    assert preview.dot_count == 845
    assert preview.estimated_kb == 818
    assert preview.background is None

    svg_settings = ExportSettings(format=ExportFormat.SVG)
    assert estimate_size_kb(845, CANVAS, svg_settings, 500, 500) == 42


def test_non_css_colour_forms_render_the_same_in_svg_and_png():
    color = ColorChangeRequest(color="hsv(0,100%,100%)").color
    assert color == "#ff0000"

    canvas = CANVAS.model_copy(update={"dot_color": color})
    dots = layout(canvas)
    compositor = ExportCompositor()
    svg = compositor.export(dots, canvas, settings(format=ExportFormat.SVG))
    png = compositor.export(dots, canvas, settings(format=ExportFormat.PNG))

    root = ET.fromstring(svg.content.decode("utf-8"))
    image = Image.open(io.BytesIO(png.content))
    for circle in root.findall(f"{SVG_NS}circle"):
        assert circle.get("fill") == "#ff0000"
        x = math.floor(float(circle.get("cx")))
        y = math.floor(float(circle.get("cy")))
        assert image.getpixel((x, y)) == (255, 0, 0, 255)


def test_colours_are_normalised_to_hex():
    assert validate_color("  #ABC ") == "#aabbcc"
    assert validate_color("white") == "#ffffff"
    assert validate_color("rgb(1, 2, 3)") == "#010203"
    assert validate_color("#11223380") == "#11223380"
    with pytest.raises(ValueError):
        validate_color("not-a-colour")


def test_background_filename_uses_the_hex_form():
    background = validate_color("rgb(1, 2, 3)")
    named = ExportSettings(use_background=True, background_color=background)
    assert export_filename(named, 500, 500) == "logo-500x500-15p-010203bg.png"
