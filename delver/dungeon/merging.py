from __future__ import annotations

import random
from typing import Dict, List, Sequence

from .config import GenerationConfig
from .connectivity import ConnectivityGraph
from .rooms import MERGED, Room


def merge_rooms(
    rooms: Sequence[Room],
    graph: ConnectivityGraph,
    config: GenerationConfig,
    rng: random.Random,
) -> Dict[int, Room]:
    """Fuse Standard rooms across selected edges; return sector -> current room.

    The merged room covers the union rectangle of both originals and keeps
    their rectangles as attachments. Absorbed edges are flagged on the graph
    and get no hallway. A room merges at most once because a Merged room is
    no longer Standard.
    """
    current: Dict[int, Room] = {room.sectors[0]: room for room in rooms}
    for edge in graph.selected_edges():
        ra, rb = current[edge.a], current[edge.b]
        if not (ra.is_standard and rb.is_standard):
            continue
        if rng.random() >= config.merge_probability:
            continue
        merged = Room(
            ra.id,
            MERGED,
            ra.bounds.union(rb.bounds),
            (edge.a, edge.b),
            {edge.a: ra.bounds, edge.b: rb.bounds},
        )
        current[edge.a] = merged
        current[edge.b] = merged
        edge.absorbed = True
    return current


def unique_rooms(rooms_by_sector: Dict[int, Room]) -> List[Room]:
    """Distinct current rooms ordered by id."""
    seen = {}
    for room in rooms_by_sector.values():
        seen.setdefault(room.id, room)
    return [seen[k] for k in sorted(seen)]


__all__ = ["merge_rooms", "unique_rooms"]
