import pytest

from delver.dungeon import ConfigError
from delver.dungeon.geometry import Rect
from delver.dungeon.sectors import partition_sectors


def _covered(sectors):
    cells = []
    for s in sectors:
        cells.extend(s.bounds.cells())
    return cells


def test_even_division_tiles_the_map():
    sectors = partition_sectors(60, 40, 3, 2)
    assert len(sectors) == 6
    assert [s.index for s in sectors] == list(range(6))
    assert sectors[0].bounds == Rect(0, 0, 20, 20)
    assert sectors[5].bounds == Rect(40, 20, 20, 20)
    cells = _covered(sectors)
    assert len(cells) == 60 * 40
    assert len(set(cells)) == len(cells)


def test_remainder_goes_to_last_column_and_row():
    sectors = partition_sectors(56, 33, 3, 2)
    # 56 // 3 == 18, last column is 56 - 36 == 20 wide
    assert [s.bounds.w for s in sectors[:3]] == [18, 18, 20]
    assert [s.bounds.h for s in sectors[::3]] == [16, 17]
    cells = _covered(sectors)
    assert len(cells) == 56 * 33
    assert len(set(cells)) == len(cells)


def test_indices_are_row_major():
    sectors = partition_sectors(40, 40, 4, 3)
    for s in sectors:
        assert s.index == s.col + s.row * 4


def test_single_sector_covers_everything():
    (only,) = partition_sectors(12, 9, 1, 1)
    assert only.bounds == Rect(0, 0, 12, 9)
    assert only.interior(2) == Rect(2, 2, 8, 5)


@pytest.mark.parametrize(
    "args,field",
    [
        ((10, 10, 0, 1), "columns"),
        ((10, 10, 1, 0), "rows"),
        ((0, 10, 1, 1), "width"),
        ((4, 10, 5, 1), "columns"),
        ((10, 3, 1, 4), "rows"),
    ],
)
def test_invalid_grid_raises_config_error(args, field):
    with pytest.raises(ConfigError) as exc:
        partition_sectors(*args)
    assert exc.value.field == field
