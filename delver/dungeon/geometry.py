"""Integer grid geometry shared by every generation phase.

Coordinates are tile indices: x grows to the right, y grows downward.
Rectangles are half-open, covering ``x <= cx < x + w`` and ``y <= cy < y + h``.
"""
from __future__ import annotations

from typing import Iterator, NamedTuple, Optional, Tuple

Coord2D = Tuple[int, int]

# Facing sides of a room boundary
LEFT = "left"
RIGHT = "right"
UP = "up"
DOWN = "down"

OPPOSITE = {LEFT: RIGHT, RIGHT: LEFT, UP: DOWN, DOWN: UP}


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int

    @property
    def x2(self) -> int:
        return self.x + self.w

    @property
    def y2(self) -> int:
        return self.y + self.h

    @property
    def right(self) -> int:
        """Last column inside the rectangle."""
        return self.x + self.w - 1

    @property
    def bottom(self) -> int:
        """Last row inside the rectangle."""
        return self.y + self.h - 1

    @property
    def center(self) -> Coord2D:
        return (self.x + self.w // 2, self.y + self.h // 2)

    @property
    def area(self) -> int:
        return self.w * self.h

    def contains(self, cx: int, cy: int) -> bool:
        return self.x <= cx < self.x2 and self.y <= cy < self.y2

    def contains_rect(self, other: "Rect") -> bool:
        return self.x <= other.x and self.y <= other.y and other.x2 <= self.x2 and other.y2 <= self.y2

    def intersects(self, other: "Rect") -> bool:
        return not (self.x2 <= other.x or self.x >= other.x2 or self.y2 <= other.y or self.y >= other.y2)

    def expand(self, amount: int) -> "Rect":
        return Rect(self.x - amount, self.y - amount, self.w + 2 * amount, self.h + 2 * amount)

    def shrink(self, amount: int) -> Optional["Rect"]:
        w = self.w - 2 * amount
        h = self.h - 2 * amount
        if w <= 0 or h <= 0:
            return None
        return Rect(self.x + amount, self.y + amount, w, h)

    def union(self, other: "Rect") -> "Rect":
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rect(x, y, max(self.x2, other.x2) - x, max(self.y2, other.y2) - y)

    def cells(self) -> Iterator[Coord2D]:
        for ix in range(self.x, self.x2):
            for iy in range(self.y, self.y2):
                yield ix, iy


def segment_cells(a: Coord2D, b: Coord2D) -> Iterator[Coord2D]:
    """Yield the tiles of an axis-aligned segment from ``a`` to ``b`` inclusive."""
    (x1, y1), (x2, y2) = a, b
    if x1 != x2 and y1 != y2:
        raise ValueError(f"segment {a}->{b} is not axis-aligned")
    dx = (x2 > x1) - (x2 < x1)
    dy = (y2 > y1) - (y2 < y1)
    x, y = x1, y1
    yield x, y
    while (x, y) != (x2, y2):
        x += dx
        y += dy
        yield x, y


__all__ = ["Rect", "Coord2D", "segment_cells", "LEFT", "RIGHT", "UP", "DOWN", "OPPOSITE"]
