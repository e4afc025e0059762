"""
SVG Renderer
============

Writes an export as a minimal standalone SVG document.
"""

import html
import logging
from typing import List, Optional

from ..models.export_models import ExportedDot, ExportGeometry

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def format_number(value: float) -> str:
    """Shortest decimal form: 131.0 -> '131', 131.5 -> '131.5'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class SvgRenderer:
    """Renders transformed dots into SVG markup."""

    def render(
        self,
        geometry: ExportGeometry,
        dots: List[ExportedDot],
        background: Optional[str] = None
    ) -> str:
        """
        Build the SVG document.

        Args:
            geometry: Export placement (target size and scaled dot size)
            dots: Dots already transformed to export coordinates
            background: Fill colour for a full-frame rectangle, or None for transparent

        Returns:
            SVG markup
        """
        width = geometry.target_width
        height = geometry.target_height
        radius = format_number(geometry.scaled_dot_size / 2)

        lines = [
            f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
            f'xmlns="{SVG_NAMESPACE}" shape-rendering="crispEdges">'
        ]

        if background is not None:
            lines.append(
                f'  <rect x="0" y="0" width="{width}" height="{height}" '
                f'fill="{html.escape(background, quote=True)}" />'
            )

        for dot in dots:
            lines.append(
                f'  <circle cx="{format_number(dot.x)}" cy="{format_number(dot.y)}" r="{radius}" '
                f'fill="{html.escape(dot.color, quote=True)}" stroke="none" shape-rendering="crispEdges" />'
            )

        lines.append("</svg>")
        logger.debug(f"[SVG] Rendered {len(dots)} circles at {width}x{height}")
        return "\n".join(lines)
