"""Jagged hallway routing between rooms of neighbouring sectors.

For a horizontal edge the left room exits through its right wall and the
right room through its left wall (vertical edges use bottom/top). Each exit
runs a straight stub outward until it clears the buffer, then a jog line
perpendicular to the stubs joins them:

    room A ]--stub--+
                    |  <- jog line at a random coordinate between the stubs
                    +--stub--[ room B

giving a Z path, or a straight corridor when both exits line up. Paths stay
inside the two endpoint sectors plus the gap between their rooms, and must
keep ``buffer`` tiles away from every other room. When no candidate fits the
router relaxes the buffer one tile at a time; at zero only other rooms' own
floors block the path, which always leaves a route.

Hallways are not checked against each other; two corridors may run side by
side near a dummy room and read as one wide corridor.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..logging_utils import get_logger
from .config import GenerationConfig
from .connectivity import HORIZONTAL, ConnectivityGraph, Edge
from .errors import RoutingInfeasible
from .geometry import DOWN, LEFT, RIGHT, UP, Coord2D, Rect, segment_cells
from .rooms import Room

log = get_logger("delver.dungeon.hallways")


@dataclass(frozen=True)
class Hallway:
    edge: Tuple[int, int]
    points: Tuple[Coord2D, ...]
    buffer: int

    @property
    def start(self) -> Coord2D:
        return self.points[0]

    @property
    def end(self) -> Coord2D:
        return self.points[-1]

    def segments(self) -> List[Tuple[Coord2D, Coord2D]]:
        return list(zip(self.points, self.points[1:]))

    def tiles(self) -> List[Coord2D]:
        out: List[Coord2D] = []
        seen = set()
        if len(self.points) == 1:
            return [self.points[0]]
        for a, b in self.segments():
            for cell in segment_cells(a, b):
                if cell not in seen:
                    seen.add(cell)
                    out.append(cell)
        return out

    def to_dict(self):
        return {"edge": list(self.edge), "points": [list(p) for p in self.points], "buffer": self.buffer}


def _simplify(points: Iterable[Coord2D]) -> Tuple[Coord2D, ...]:
    """Drop repeated and collinear waypoints."""
    out: List[Coord2D] = []
    for p in points:
        if out and out[-1] == p:
            continue
        if len(out) >= 2:
            (x0, y0), (x1, y1) = out[-2], out[-1]
            if (x0 == x1 == p[0]) or (y0 == y1 == p[1]):
                out[-1] = p
                continue
        out.append(p)
    return tuple(out)


class HallwayRouter:
    def __init__(
        self,
        rooms_by_sector: Dict[int, Room],
        config: GenerationConfig,
        rng: random.Random,
        metrics: Optional[dict] = None,
    ):
        self.rooms_by_sector = rooms_by_sector
        self.config = config
        self.rng = rng
        self.metrics = metrics if metrics is not None else {}
        self._rooms = {room.id: room for room in rooms_by_sector.values()}
        self.log = log.bind(seed=config.seed)

    def route(self, edge: Edge) -> Hallway:
        first = self.rooms_by_sector[edge.a]
        second = self.rooms_by_sector[edge.b]
        horizontal = edge.axis == HORIZONTAL
        if horizontal:
            starts = first.exit_candidates(RIGHT, edge.a)
            ends = second.exit_candidates(LEFT, edge.b)
        else:
            starts = first.exit_candidates(DOWN, edge.a)
            ends = second.exit_candidates(UP, edge.b)
        others = [r for rid, r in self._rooms.items() if rid not in (first.id, second.id)]
        buffer = self.config.hallway_buffer
        while True:
            try:
                points = self._route_with_buffer(edge, horizontal, starts, ends, others, buffer)
                return Hallway(edge.key, points, buffer)
            except RoutingInfeasible:
                if buffer == 0:
                    raise
                self.log.warn(event="routing_relaxed", edge=f"{edge.a}-{edge.b}", buffer=buffer)
                self.metrics["routing_relaxations"] = self.metrics.get("routing_relaxations", 0) + 1
                buffer -= 1

    def _route_with_buffer(
        self,
        edge: Edge,
        horizontal: bool,
        starts: Sequence[Coord2D],
        ends: Sequence[Coord2D],
        others: Sequence[Room],
        buffer: int,
    ) -> Tuple[Coord2D, ...]:
        # Work in (along, across) space: along follows the stubs.
        def to_local(p: Coord2D) -> Coord2D:
            return p if horizontal else (p[1], p[0])

        def to_grid(along: int, across: int) -> Coord2D:
            return (along, across) if horizontal else (across, along)

        stub = max(buffer, 1)
        start_along = to_local(starts[0])[0]
        end_along = to_local(ends[0])[0]
        jog_lo = start_along + stub - 1
        jog_hi = end_along - stub + 1
        if jog_lo > jog_hi:
            raise RoutingInfeasible(edge.key, buffer)

        zones = self._zones_near(starts, ends, others, buffer)

        def blocked(cells: Iterable[Coord2D]) -> bool:
            return any(zone.contains(cx, cy) for cx, cy in cells for zone in zones)

        start_opts = list(starts)
        end_opts = list(ends)
        jog_opts = list(range(jog_lo, jog_hi + 1))
        self.rng.shuffle(start_opts)
        self.rng.shuffle(end_opts)
        self.rng.shuffle(jog_opts)
        if zones:
            start_opts = [s for s in start_opts if not blocked(segment_cells(s, to_grid(jog_lo, to_local(s)[1])))]
            end_opts = [e for e in end_opts if not blocked(segment_cells(e, to_grid(jog_hi, to_local(e)[1])))]
        for s in start_opts:
            s_across = to_local(s)[1]
            for e in end_opts:
                e_across = to_local(e)[1]
                for jog in jog_opts:
                    points = (s, to_grid(jog, s_across), to_grid(jog, e_across), e)
                    if zones and blocked(c for a, b in zip(points, points[1:]) for c in segment_cells(a, b)):
                        continue
                    return _simplify(points)
        raise RoutingInfeasible(edge.key, buffer)

    @staticmethod
    def _zones_near(
        starts: Sequence[Coord2D], ends: Sequence[Coord2D], others: Sequence[Room], buffer: int
    ) -> List[Rect]:
        xs = [p[0] for p in starts] + [p[0] for p in ends]
        ys = [p[1] for p in starts] + [p[1] for p in ends]
        band = Rect(min(xs), min(ys), max(xs) - min(xs) + 1, max(ys) - min(ys) + 1)
        zones = []
        for room in others:
            zone = room.bounds.expand(buffer)
            if zone.intersects(band):
                zones.append(zone)
        return zones


def route_hallways(
    graph: ConnectivityGraph,
    rooms_by_sector: Dict[int, Room],
    config: GenerationConfig,
    rng: random.Random,
    metrics: Optional[dict] = None,
) -> List[Hallway]:
    router = HallwayRouter(rooms_by_sector, config, rng, metrics)
    return [router.route(edge) for edge in graph.routable_edges()]


__all__ = ["Hallway", "HallwayRouter", "route_hallways"]
