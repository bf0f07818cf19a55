from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .geometry import Coord2D
from .hallways import Hallway
from .rooms import Room
from .tiles import EXIT, FLOOR, HALLWAY, WALKABLE, WALL


class TileMap:
    """Dense tile grid, column-major (``grid[x][y]``) like the rest of the generator."""

    __slots__ = ("width", "height", "grid", "exit", "spawn")

    def __init__(self, width: int, height: int, fill: str = WALL):
        self.width = width
        self.height = height
        self.grid: List[List[str]] = [[fill for _ in range(height)] for _ in range(width)]
        self.exit: Optional[Coord2D] = None
        self.spawn: Optional[Coord2D] = None

    def __getitem__(self, pos: Coord2D) -> str:
        x, y = pos
        return self.grid[x][y]

    def __setitem__(self, pos: Coord2D, tile: str) -> None:
        x, y = pos
        self.grid[x][y] = tile

    def __eq__(self, other) -> bool:
        if not isinstance(other, TileMap):
            return NotImplemented
        return self.grid == other.grid and self.exit == other.exit and self.spawn == other.spawn

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_walkable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.grid[x][y] in WALKABLE

    def rows(self) -> List[str]:
        """Row-major view, one string per row (top row first)."""
        return ["".join(self.grid[x][y] for x in range(self.width)) for y in range(self.height)]

    def count(self, tile: str) -> int:
        return sum(col.count(tile) for col in self.grid)

    def positions(self, tile: str) -> List[Coord2D]:
        return [(x, y) for x in range(self.width) for y in range(self.height) if self.grid[x][y] == tile]


def assemble_tilemap(
    width: int,
    height: int,
    rooms: Sequence[Room],
    hallways: Sequence[Hallway],
    rng: random.Random,
) -> TileMap:
    """Rasterize rooms and hallways, then place the exit and the spawn point."""
    tilemap = TileMap(width, height)
    floor: List[Coord2D] = []
    for room in rooms:
        for x, y in room.floor_tiles():
            tilemap.grid[x][y] = FLOOR
            floor.append((x, y))
    for hallway in hallways:
        for x, y in hallway.tiles():
            if tilemap.grid[x][y] == WALL:
                tilemap.grid[x][y] = HALLWAY
    # exit: uniform over every room floor tile
    exit_pos = floor[rng.randrange(len(floor))]
    tilemap[exit_pos] = EXIT
    tilemap.exit = exit_pos
    rest = [p for p in floor if p != exit_pos]
    tilemap.spawn = rest[rng.randrange(len(rest))] if rest else exit_pos
    return tilemap


__all__ = ["TileMap", "assemble_tilemap"]
