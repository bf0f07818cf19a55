"""Structural invariant checks for generated levels.

``analyze`` collects every problem it can find and never raises; it feeds
the seed diagnostics script. ``enforce`` raises ``OverlapViolation`` on the
first problem and runs inside the pipeline when debug checks are enabled.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Dict, List, Sequence, Set

from .errors import OverlapViolation
from .geometry import Coord2D
from .rooms import Room, rooms_overlap
from .tiles import EXIT, FLOOR, WALKABLE

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import Level


def flood_walkable(tilemap, start: Coord2D) -> Set[Coord2D]:
    visited = {start}
    q = deque([start])
    while q:
        cx, cy = q.popleft()
        for dx, dy in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            nx, ny = cx + dx, cy + dy
            if (nx, ny) not in visited and tilemap.is_walkable(nx, ny):
                visited.add((nx, ny))
                q.append((nx, ny))
    return visited


def unreachable_rooms(tilemap, rooms: Sequence[Room]) -> List[int]:
    """Ids of rooms whose floor cannot be reached from the first room."""
    if not rooms:
        return []
    reach = flood_walkable(tilemap, rooms[0].center)
    return [r.id for r in rooms if r.center not in reach]


def hallway_clearance_violations(level: "Level") -> List[Dict]:
    problems = []
    for hallway in level.hallways:
        endpoints = {level.rooms_by_sector[hallway.edge[0]].id, level.rooms_by_sector[hallway.edge[1]].id}
        zones = [(r.id, r.bounds.expand(hallway.buffer)) for r in level.rooms if r.id not in endpoints]
        for x, y in hallway.tiles():
            for rid, zone in zones:
                if zone.contains(x, y):
                    problems.append({"edge": list(hallway.edge), "tile": [x, y], "room": rid})
    return problems


def analyze(level: "Level") -> Dict[str, list]:
    tilemap = level.tilemap
    exits = tilemap.positions(EXIT)
    floor_ids = {}
    for room in level.rooms:
        for cell in room.floor_tiles():
            floor_ids[cell] = room.id
    exit_issues = []
    if len(exits) != 1:
        exit_issues.append({"count": len(exits)})
    for pos in exits:
        if pos not in floor_ids:
            exit_issues.append({"tile": list(pos), "reason": "not_in_room"})
    sector_issues = []
    covered = set()
    for sector in level.sectors:
        room = level.rooms_by_sector.get(sector.index)
        if room is None:
            sector_issues.append({"sector": sector.index, "reason": "no_room"})
            continue
        covered.add(sector.index)
        if not room.is_merged and not sector.bounds.contains_rect(room.bounds):
            sector_issues.append({"sector": sector.index, "reason": "room_outside_sector"})
    stray_floor = [
        list(p) for p in tilemap.positions(FLOOR) if p not in floor_ids
    ]
    return {
        "room_overlaps": [list(pair) for pair in rooms_overlap(level.rooms)],
        "original_room_overlaps": [list(pair) for pair in rooms_overlap(level.original_rooms)],
        "sector_issues": sector_issues,
        "disconnected_graph": [] if level.graph.is_connected() else [sorted(level.graph.reachable_from(0))],
        "exit_issues": exit_issues,
        "hallway_clearance": hallway_clearance_violations(level),
        "unreachable_rooms": unreachable_rooms(tilemap, level.rooms),
        "stray_floor": stray_floor,
        "unwalkable_spawn": [] if tilemap.spawn and tilemap[tilemap.spawn] in WALKABLE else [tilemap.spawn],
    }


def enforce(level: "Level") -> None:
    for name, issues in analyze(level).items():
        if issues:
            raise OverlapViolation(f"{name}: {issues[:3]}")


__all__ = ["analyze", "enforce", "flood_walkable", "unreachable_rooms", "hallway_clearance_violations"]
