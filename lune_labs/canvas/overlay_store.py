"""
Color Overlay Store
===================

Painted colours layered over the default dot colour, keyed by grid cell.
"""

import logging
from typing import Dict, Iterator, Optional, Tuple

from ..models.canvas_models import GridCell, format_cell_key, parse_cell_key

logger = logging.getLogger(__name__)


class ColorOverlayStore:
    """Sparse mapping of (i, j) cell indices to override colours."""

    def __init__(self):
        self._colors: Dict[Tuple[int, int], str] = {}
        # Bumped on every mutation so layouts can be cached per revision
        self.revision = 0

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, cell: Tuple[int, int]) -> bool:
        return cell in self._colors

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(self._colors)

    def get(self, i: int, j: int) -> Optional[str]:
        return self._colors.get((i, j))

    def paint(self, cell: GridCell, color: str) -> None:
        """Set or overwrite the colour of a cell."""
        key = cell.as_tuple()
        if self._colors.get(key) == color:
            return
        self._colors[key] = color
        self.revision += 1

    def clear(self) -> None:
        if not self._colors:
            return
        logger.info(f"[OVERLAY] Cleared {len(self._colors)} painted dots")
        self._colors = {}
        self.revision += 1

    def to_dict(self) -> Dict[str, str]:
        """Overlay colours keyed by the 'i-j' wire form."""
        return {format_cell_key(i, j): color for (i, j), color in self._colors.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "ColorOverlayStore":
        store = cls()
        for key, color in data.items():
            i, j = parse_cell_key(key)
            store.paint(GridCell(i=i, j=j), color)
        return store
