import random

from delver.dungeon import MERGED, GenerationConfig, generate_level
from delver.dungeon.connectivity import HORIZONTAL, VERTICAL, ConnectivityGraph, Edge
from delver.dungeon.geometry import Rect
from delver.dungeon.merging import merge_rooms, unique_rooms
from delver.dungeon.rooms import DUMMY, STANDARD, Room


def _room(i, rect, kind=STANDARD):
    return Room(i, kind, rect, (i,), {i: rect})


def test_merge_fuses_standard_rooms_into_union():
    a = _room(0, Rect(2, 2, 4, 4))
    b = _room(1, Rect(22, 3, 5, 6))
    graph = ConnectivityGraph(2, [Edge(0, 1, HORIZONTAL, selected=True, in_tree=True)])
    cfg = GenerationConfig(merge_probability=1.0)
    by_sector = merge_rooms([a, b], graph, cfg, random.Random(1))
    merged = by_sector[0]
    assert by_sector[1] is merged
    assert merged.kind == MERGED
    assert merged.id == 0
    assert merged.sectors == (0, 1)
    assert merged.bounds == Rect(2, 2, 25, 7)
    assert merged.bounds.contains_rect(a.bounds) and merged.bounds.contains_rect(b.bounds)
    assert merged.attachments == {0: a.bounds, 1: b.bounds}
    assert graph.edges[0].absorbed
    assert graph.routable_edges() == []


def test_dummy_rooms_never_merge():
    a = _room(0, Rect(2, 2, 4, 4))
    b = _room(1, Rect(22, 5, 1, 1), kind=DUMMY)
    graph = ConnectivityGraph(2, [Edge(0, 1, HORIZONTAL, selected=True)])
    by_sector = merge_rooms([a, b], graph, GenerationConfig(merge_probability=1.0), random.Random(1))
    assert by_sector == {0: a, 1: b}
    assert not graph.edges[0].absorbed


def test_room_merges_at_most_once():
    rooms = [_room(0, Rect(2, 2, 4, 4)), _room(1, Rect(22, 2, 4, 4)), _room(2, Rect(2, 22, 4, 4))]
    edges = [Edge(0, 1, HORIZONTAL, selected=True), Edge(0, 2, VERTICAL, selected=True)]
    graph = ConnectivityGraph(3, edges)
    by_sector = merge_rooms(rooms, graph, GenerationConfig(merge_probability=1.0), random.Random(1))
    assert by_sector[0] is by_sector[1]
    assert by_sector[2] is rooms[2]
    assert [e.absorbed for e in edges] == [True, False]
    assert [r.id for r in unique_rooms(by_sector)] == [0, 2]


def test_unselected_edges_do_not_merge():
    rooms = [_room(0, Rect(2, 2, 4, 4)), _room(1, Rect(22, 2, 4, 4))]
    graph = ConnectivityGraph(2, [Edge(0, 1, HORIZONTAL)])
    by_sector = merge_rooms(rooms, graph, GenerationConfig(merge_probability=1.0), random.Random(1))
    assert all(not r.is_merged for r in by_sector.values())


def test_full_merge_probability_in_level():
    level = generate_level(seed=21, dummy_room_probability=0.0, merge_probability=1.0, debug_checks=True)
    merged = [r for r in level.rooms if r.is_merged]
    assert merged
    originals = {r.id: r for r in level.original_rooms}
    for room in merged:
        for sector in room.sectors:
            assert room.bounds.contains_rect(originals[sector].bounds)
    absorbed = {e.key for e in level.graph.edges if e.absorbed}
    assert len(absorbed) == len(merged)
    assert absorbed.isdisjoint({h.edge for h in level.hallways})
    assert level.metrics["rooms_merged"] == len(merged)
