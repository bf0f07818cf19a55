import pytest

from delver.dungeon import FLOOR, OverlapViolation, WALL, generate_level
from delver.dungeon.geometry import Rect
from delver.dungeon.invariants import analyze, enforce, flood_walkable, unreachable_rooms


@pytest.mark.parametrize("seed", [1, 2, 3, 50, 1000])
def test_generated_levels_have_no_issues(seed):
    level = generate_level(seed=seed, merge_probability=0.3, dummy_room_probability=0.3)
    report = analyze(level)
    assert all(not issues for issues in report.values()), report


def test_report_keys():
    report = analyze(generate_level(seed=4))
    assert set(report) == {
        "room_overlaps",
        "original_room_overlaps",
        "sector_issues",
        "disconnected_graph",
        "exit_issues",
        "hallway_clearance",
        "unreachable_rooms",
        "stray_floor",
        "unwalkable_spawn",
    }


def test_cut_corridor_is_detected():
    level = generate_level(seed=6, dummy_room_probability=0.0, merge_probability=0.0)
    for hall in level.hallways:
        for x, y in hall.tiles():
            level.tilemap.grid[x][y] = WALL
    assert unreachable_rooms(level.tilemap, level.rooms)
    with pytest.raises(OverlapViolation):
        enforce(level)


def test_second_exit_is_detected():
    level = generate_level(seed=7, dummy_room_probability=0.0)
    room = level.rooms[-1]
    spot = next(p for p in room.floor_tiles() if p != level.exit)
    level.tilemap[spot] = "E"
    assert analyze(level)["exit_issues"]


def test_stray_floor_is_detected():
    level = generate_level(seed=8)
    walls = level.tilemap.positions(WALL)
    level.tilemap[walls[0]] = FLOOR
    assert analyze(level)["stray_floor"] == [list(walls[0])]


def test_overlapping_rooms_are_detected():
    level = generate_level(seed=9, dummy_room_probability=0.0, merge_probability=0.0)
    a, b = level.rooms[0], level.rooms[1]
    b.bounds = Rect(a.bounds.x, a.bounds.y, 2, 2)
    assert analyze(level)["room_overlaps"] == [[a.id, b.id]]


def test_flood_stays_on_walkable_tiles():
    level = generate_level(seed=10)
    reach = flood_walkable(level.tilemap, level.rooms[0].center)
    assert all(level.tilemap.is_walkable(*p) for p in reach)
    assert level.exit in reach
