"""
Raster Renderer
===============

Paints an export into an RGBA pixel buffer with Pillow and encodes it as PNG.
"""

import io
import logging
import math
from typing import List, Optional

from PIL import Image, ImageColor, ImageDraw

from ..models.export_models import ExportedDot, ExportGeometry

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


class RasterSurfaceError(Exception):
    """Raised when a drawing surface of the requested size cannot be created."""


def dot_bounds(x: float, y: float, radius: float):
    """
    Inclusive pixel bounding box of a dot.

    A pixel is covered when its centre lies inside [center - r, center + r);
    every dot covers at least one pixel.
    """
    x0 = math.ceil(x - radius - 0.5)
    y0 = math.ceil(y - radius - 0.5)
    x1 = max(x0, math.ceil(x + radius - 0.5) - 1)
    y1 = max(y0, math.ceil(y + radius - 0.5) - 1)
    return x0, y0, x1, y1


class RasterRenderer:
    """Renders transformed dots into a PNG."""

    def create_surface(self, width: int, height: int, background: Optional[str] = None) -> Image.Image:
        fill = ImageColor.getcolor(background, "RGBA") if background is not None else TRANSPARENT
        try:
            return Image.new("RGBA", (width, height), fill)
        except (ValueError, MemoryError) as e:
            raise RasterSurfaceError(f"Cannot allocate {width}x{height} surface: {e}") from e

    def paint(self, image: Image.Image, geometry: ExportGeometry, dots: List[ExportedDot]) -> None:
        """Fill every dot in order; later dots overwrite earlier pixels."""
        draw = ImageDraw.Draw(image)
        radius = geometry.scaled_dot_size / 2
        colors = {}
        for dot in dots:
            if dot.color not in colors:
                colors[dot.color] = ImageColor.getcolor(dot.color, "RGBA")
            draw.ellipse(dot_bounds(dot.x, dot.y, radius), fill=colors[dot.color])

    def encode(self, image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    def render(
        self,
        geometry: ExportGeometry,
        dots: List[ExportedDot],
        background: Optional[str] = None
    ) -> bytes:
        """
        Render and encode.

        Raises:
            RasterSurfaceError: the surface could not be allocated
            OSError: PNG encoding failed
        """
        image = self.create_surface(geometry.target_width, geometry.target_height, background)
        self.paint(image, geometry, dots)
        content = self.encode(image)
        logger.debug(f"[RASTER] Rendered {len(dots)} dots at {geometry.target_width}x{geometry.target_height}")
        return content
