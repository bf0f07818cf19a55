from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .errors import ConfigError
from .geometry import Rect


@dataclass(frozen=True)
class Sector:
    col: int
    row: int
    index: int
    bounds: Rect

    def interior(self, margin: int) -> Optional[Rect]:
        return self.bounds.shrink(margin)


def partition_sectors(width: int, height: int, columns: int, rows: int) -> List[Sector]:
    """Split the map into a ``columns`` x ``rows`` grid of sectors.

    Sectors are returned in index order (``col + row * columns``). The last
    column and row absorb the remainder of an uneven division so the sectors
    tile the full map with no gaps or overlaps.
    """
    if columns <= 0 or rows <= 0:
        raise ConfigError("sector grid needs at least one column and one row", "columns" if columns <= 0 else "rows")
    if width <= 0 or height <= 0:
        raise ConfigError("map dimensions must be positive", "width" if width <= 0 else "height")
    sector_w = width // columns
    sector_h = height // rows
    if sector_w == 0 or sector_h == 0:
        raise ConfigError("sector grid is finer than the map", "columns" if sector_w == 0 else "rows")
    sectors: List[Sector] = []
    for row in range(rows):
        y = row * sector_h
        h = height - y if row == rows - 1 else sector_h
        for col in range(columns):
            x = col * sector_w
            w = width - x if col == columns - 1 else sector_w
            sectors.append(Sector(col, row, col + row * columns, Rect(x, y, w, h)))
    return sectors


__all__ = ["Sector", "partition_sectors"]
