"""
Export Compositor
=================

Places the canvas inside an export frame and renders it as SVG or PNG.

The canvas is scaled uniformly to fit the padded area and centred in it.
Dot positions and the dot size are snapped to half units once, here, so the
vector and raster outputs agree on where every dot lands.
"""

import logging
from typing import List, Optional

from ..canvas.snapping import round_half_up, snap_half
from ..models.canvas_models import CanvasConfig, Dot
from ..models.export_models import (
    ExportedDot,
    ExportGeometry,
    ExportPreview,
    ExportResult,
    ExportSettings,
    MEDIA_TYPES,
)
from ..models.preset_models import ExportFormat, ExportMode
from .raster_renderer import RasterRenderer, RasterSurfaceError
from .svg_renderer import SvgRenderer, format_number

logger = logging.getLogger(__name__)


def compute_geometry(
    canvas: CanvasConfig,
    target_width: int,
    target_height: int,
    padding_percent: float
) -> ExportGeometry:
    """Scale and offset that fit the canvas, centred, inside the padded frame."""
    padding_px = min(target_width, target_height) * (padding_percent / 100)
    draw_area_width = target_width - padding_px * 2
    draw_area_height = target_height - padding_px * 2

    scale = min(draw_area_width / canvas.canvas_width, draw_area_height / canvas.canvas_height)

    logo_width = canvas.canvas_width * scale
    logo_height = canvas.canvas_height * scale

    return ExportGeometry(
        target_width=target_width,
        target_height=target_height,
        padding_px=padding_px,
        draw_area_width=draw_area_width,
        draw_area_height=draw_area_height,
        scale=scale,
        offset_x=padding_px + (draw_area_width - logo_width) / 2,
        offset_y=padding_px + (draw_area_height - logo_height) / 2,
        logo_width=logo_width,
        logo_height=logo_height,
        scaled_dot_size=max(1, snap_half(canvas.dot_size * scale)),
    )


def transform_dots(dots: List[Dot], geometry: ExportGeometry) -> List[ExportedDot]:
    """Map canvas dots into export coordinates, keeping layout order."""
    if geometry.scale <= 0:
        # Padding swallowed the frame; nothing to draw
        return []
    return [
        ExportedDot(
            x=snap_half(dot.x * geometry.scale + geometry.offset_x),
            y=snap_half(dot.y * geometry.scale + geometry.offset_y),
            color=dot.color,
        )
        for dot in dots
    ]


def export_filename(
    settings: ExportSettings,
    target_width: int,
    target_height: int,
    export_format: Optional[ExportFormat] = None
) -> str:
    """
    Descriptive download name, e.g. 'logo-social-800x800-15p-transparent.png'.

    Encodes mode and size, padding (when non-zero) and the background.
    """
    export_format = ExportFormat(export_format or settings.format)
    size_name = f"{target_width}x{target_height}"
    if settings.mode != ExportMode.CUSTOM:
        size_name = f"{ExportMode(settings.mode).value}-{size_name}"

    padding_suffix = f"-{format_number(settings.padding_percent)}p" if settings.padding_percent > 0 else ""
    if settings.use_background:
        bg_suffix = f"-{settings.background_color.replace('#', '')}bg"
    else:
        bg_suffix = "-transparent"

    return f"logo-{size_name}{padding_suffix}{bg_suffix}.{export_format.value}"


def estimate_size_kb(
    dot_count: int,
    canvas: CanvasConfig,
    settings: ExportSettings,
    target_width: int,
    target_height: int
) -> int:
    """Rough output size shown in the export preview."""
    if ExportFormat(settings.format) == ExportFormat.SVG:
        return round_half_up((dot_count * 50 + 300) / 1024)

    pixels = target_width * target_height
    complexity = dot_count / (canvas.canvas_width * canvas.canvas_height / 100)  # dots per 100px²
    bytes_per_pixel = 3 if settings.use_background else 4
    return round_half_up(pixels * bytes_per_pixel * min(complexity + 0.5, 2) / 1024)


class ExportCompositor:
    """Renders a dot layout to an encoded image."""

    def __init__(self):
        self.svg_renderer = SvgRenderer()
        self.raster_renderer = RasterRenderer()

    def export(
        self,
        dots: List[Dot],
        canvas: CanvasConfig,
        settings: ExportSettings,
        target_width: Optional[int] = None,
        target_height: Optional[int] = None
    ) -> ExportResult:
        """
        Export the layout at the settings' size, or at an explicit size.

        Failures come back as ExportResult(success=False); no partial content
        is returned.
        """
        target_width = target_width or settings.target_width
        target_height = target_height or settings.target_height
        export_format = ExportFormat(settings.format)
        background = settings.background_color if settings.use_background else None

        geometry = compute_geometry(canvas, target_width, target_height, settings.padding_percent)
        placed = transform_dots(dots, geometry)
        filename = export_filename(settings, target_width, target_height)

        logger.info(
            f"[EXPORT] {export_format.value} {target_width}x{target_height} "
            f"scale={geometry.scale:.4f} dots={len(placed)} -> {filename}"
        )

        if export_format == ExportFormat.SVG:
            content = self.svg_renderer.render(geometry, placed, background).encode("utf-8")
        else:
            try:
                content = self.raster_renderer.render(geometry, placed, background)
            except RasterSurfaceError as e:
                logger.warning(f"[EXPORT] Raster surface unavailable: {e}")
                return ExportResult(success=False, filename=filename, error=str(e))
            except OSError as e:
                logger.error(f"[EXPORT] PNG encoding failed: {e}")
                return ExportResult(success=False, filename=filename, error=f"Encoding failed: {e}")

        return ExportResult(
            success=True,
            content=content,
            filename=filename,
            media_type=MEDIA_TYPES[export_format],
            dot_count=len(placed),
        )

    def preview(self, dots: List[Dot], canvas: CanvasConfig, settings: ExportSettings) -> ExportPreview:
        """Summary of what export() would produce with the current settings."""
        geometry = compute_geometry(
            canvas, settings.target_width, settings.target_height, settings.padding_percent
        )
        return ExportPreview(
            target_width=settings.target_width,
            target_height=settings.target_height,
            padding_px=round_half_up(geometry.padding_px),
            padding_percent=settings.padding_percent,
            logo_width=round_half_up(geometry.logo_width),
            logo_height=round_half_up(geometry.logo_height),
            scale_percent=round_half_up(geometry.scale * 100),
            dot_size=geometry.scaled_dot_size,
            background=settings.background_color if settings.use_background else None,
            format=settings.format,
            dot_count=len(dots),
            estimated_kb=estimate_size_kb(
                len(dots), canvas, settings, settings.target_width, settings.target_height
            ),
            filename=export_filename(settings, settings.target_width, settings.target_height),
        )
