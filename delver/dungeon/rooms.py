"""Room variants and per-sector room placement.

A room is a tagged record rather than a class hierarchy: ``kind`` is one of
``standard``, ``dummy`` or ``merged`` and the shared helpers below work for
every kind. Merged rooms keep the rectangle of each room they absorbed in
``attachments`` so hallways can still leave from the part of the merged room
that faces their sector neighbour.
"""
from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .config import GenerationConfig
from .geometry import DOWN, LEFT, RIGHT, UP, Coord2D, Rect
from .sectors import Sector

STANDARD = "standard"
DUMMY = "dummy"
MERGED = "merged"


@dataclass
class Room:
    id: int
    kind: str
    bounds: Rect
    sectors: Tuple[int, ...]
    attachments: Dict[int, Rect] = field(default_factory=dict)

    @property
    def is_standard(self) -> bool:
        return self.kind == STANDARD

    @property
    def is_dummy(self) -> bool:
        return self.kind == DUMMY

    @property
    def is_merged(self) -> bool:
        return self.kind == MERGED

    @property
    def center(self) -> Coord2D:
        return self.bounds.center

    def floor_tiles(self) -> Iterator[Coord2D]:
        return self.bounds.cells()

    def facing_span(self, side: str, sector_index: int) -> Tuple[int, range]:
        """Coordinate just outside the edge facing ``side`` and the span along it.

        The span comes from the attachment of ``sector_index`` (the original
        room of that sector); the edge itself is the current bounds, so merged
        rooms stay consistent with their combined rectangle.
        """
        att = self.attachments.get(sector_index, self.bounds)
        b = self.bounds
        if side == RIGHT:
            return b.right + 1, range(att.y, att.y2)
        if side == LEFT:
            return b.x - 1, range(att.y, att.y2)
        if side == DOWN:
            return b.bottom + 1, range(att.x, att.x2)
        if side == UP:
            return b.y - 1, range(att.x, att.x2)
        raise ValueError(f"unknown side {side!r}")

    def exit_candidates(self, side: str, sector_index: int) -> List[Coord2D]:
        """Tiles a hallway may start from when leaving toward ``side``."""
        edge, span = self.facing_span(side, sector_index)
        if side in (LEFT, RIGHT):
            return [(edge, y) for y in span]
        return [(x, edge) for x in span]

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind,
            "x": self.bounds.x,
            "y": self.bounds.y,
            "w": self.bounds.w,
            "h": self.bounds.h,
            "sectors": list(self.sectors),
        }


def make_standard_room(sector: Sector, config: GenerationConfig, rng: random.Random) -> Room:
    interior = sector.interior(config.room_margin)
    w = rng.randint(config.min_room_size, interior.w)
    h = rng.randint(config.min_room_size, interior.h)
    x = rng.randint(interior.x, interior.x2 - w)
    y = rng.randint(interior.y, interior.y2 - h)
    bounds = Rect(x, y, w, h)
    return Room(sector.index, STANDARD, bounds, (sector.index,), {sector.index: bounds})


def make_dummy_room(sector: Sector, config: GenerationConfig, rng: random.Random) -> Room:
    interior = sector.interior(config.room_margin)
    x = rng.randint(interior.x, interior.right)
    y = rng.randint(interior.y, interior.bottom)
    bounds = Rect(x, y, 1, 1)
    return Room(sector.index, DUMMY, bounds, (sector.index,), {sector.index: bounds})


def generate_rooms(
    sectors: Sequence[Sector],
    config: GenerationConfig,
    rng: random.Random,
    workers: int = 1,
) -> List[Room]:
    """Create exactly one room per sector, indexed like ``sectors``.

    Every sector gets its own generator seeded from ``rng`` in sector order,
    so the output does not depend on ``workers`` or thread scheduling.
    """
    sub_seeds = [rng.getrandbits(64) for _ in sectors]
    standard_ids: Optional[Set[int]] = None
    if config.standard_room_count is not None:
        k = min(config.standard_room_count, len(sectors))
        standard_ids = set(rng.sample(range(len(sectors)), k))

    def build(i: int) -> Room:
        local = random.Random(sub_seeds[i])
        sector = sectors[i]
        if standard_ids is None:
            dummy = local.random() < config.dummy_room_probability
        else:
            dummy = i not in standard_ids
        if dummy:
            return make_dummy_room(sector, config, local)
        return make_standard_room(sector, config, local)

    if workers > 1 and len(sectors) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(build, range(len(sectors))))
    return [build(i) for i in range(len(sectors))]


def rooms_overlap(rooms: Sequence[Room]) -> List[Tuple[int, int]]:
    """Return id pairs of rooms whose rectangles intersect."""
    clashes = []
    for i, a in enumerate(rooms):
        for b in rooms[i + 1:]:
            if a.bounds.intersects(b.bounds):
                clashes.append((a.id, b.id))
    return clashes


__all__ = [
    "Room",
    "STANDARD",
    "DUMMY",
    "MERGED",
    "generate_rooms",
    "make_standard_room",
    "make_dummy_room",
    "rooms_overlap",
]
