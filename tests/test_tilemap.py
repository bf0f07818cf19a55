import random

from delver.dungeon import EXIT, FLOOR, HALLWAY, WALL, TileMap
from delver.dungeon.geometry import Rect
from delver.dungeon.hallways import Hallway
from delver.dungeon.rooms import DUMMY, STANDARD, Room
from delver.dungeon.tilemap import assemble_tilemap


def _room(i, rect, kind=STANDARD):
    return Room(i, kind, rect, (i,), {i: rect})


def test_tilemap_starts_as_walls():
    tm = TileMap(4, 3)
    assert tm.rows() == ["WWWW"] * 3
    assert tm.count(WALL) == 12
    assert not tm.in_bounds(4, 0)
    assert not tm.is_walkable(-1, 0)


def test_rows_are_row_major():
    tm = TileMap(3, 2)
    tm[(2, 1)] = FLOOR
    assert tm.grid[2][1] == FLOOR
    assert tm.rows() == ["WWW", "WWF"]
    assert tm.positions(FLOOR) == [(2, 1)]
    assert tm.is_walkable(2, 1)


def test_assemble_carves_rooms_hallways_and_one_exit():
    rooms = [_room(0, Rect(1, 1, 3, 2)), _room(1, Rect(8, 1, 1, 1), kind=DUMMY)]
    hall = Hallway((0, 1), ((4, 1), (7, 1)), 1)
    for seed in range(20):
        tm = assemble_tilemap(10, 4, rooms, [hall], random.Random(seed))
        assert tm.count(EXIT) == 1
        floor = set(rooms[0].bounds.cells()) | {(8, 1)}
        assert tm.exit in floor
        assert tm.spawn in floor and tm.spawn != tm.exit
        assert tm.positions(HALLWAY) == [(4, 1), (5, 1), (6, 1), (7, 1)]
        assert tm.count(FLOOR) + tm.count(EXIT) == 7


def test_hallway_never_overwrites_room_floor():
    rooms = [_room(0, Rect(1, 1, 3, 3))]
    hall = Hallway((0, 1), ((0, 2), (5, 2)), 0)
    tm = assemble_tilemap(6, 5, rooms, [hall], random.Random(1))
    assert tm[(2, 2)] in (FLOOR, EXIT)
    assert tm[(0, 2)] == HALLWAY and tm[(5, 2)] == HALLWAY


def test_single_tile_level_spawns_on_exit():
    tm = assemble_tilemap(5, 5, [_room(0, Rect(2, 2, 1, 1), kind=DUMMY)], [], random.Random(0))
    assert tm.exit == (2, 2)
    assert tm.spawn == tm.exit


def test_exit_spreads_over_rooms():
    rooms = [_room(0, Rect(0, 0, 2, 2)), _room(1, Rect(5, 0, 2, 2))]
    owners = set()
    for seed in range(60):
        tm = assemble_tilemap(8, 3, rooms, [], random.Random(seed))
        owners.add(0 if tm.exit[0] < 3 else 1)
    assert owners == {0, 1}


def test_equality_compares_tiles_and_markers():
    a = TileMap(3, 3)
    b = TileMap(3, 3)
    assert a == b
    b.exit = (1, 1)
    assert a != b
