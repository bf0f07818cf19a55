import random

import pytest

from delver.dungeon import ConfigError, GenerationConfig, coerce_seed, roll_sector_grid
from delver.dungeon.config import SEED_MAX


def test_defaults_validate():
    cfg = GenerationConfig()
    assert cfg.validate() is cfg
    assert (cfg.width, cfg.height, cfg.columns, cfg.rows) == (56, 32, 3, 2)
    assert cfg.sector_count == 6


@pytest.mark.parametrize(
    "changes,field",
    [
        ({"width": 0}, "width"),
        ({"height": -3}, "height"),
        ({"columns": 0}, "columns"),
        ({"rows": 0}, "rows"),
        ({"min_room_size": 0}, "min_room_size"),
        ({"room_margin": 0}, "room_margin"),
        ({"hallway_buffer": -1}, "hallway_buffer"),
        ({"dummy_room_probability": 1.5}, "dummy_room_probability"),
        ({"extra_connectivity_probability": -0.1}, "extra_connectivity_probability"),
        ({"merge_probability": 2}, "merge_probability"),
        ({"standard_room_count": -1}, "standard_room_count"),
        ({"workers": 0}, "workers"),
        ({"columns": 100}, "columns"),
        ({"rows": 40}, "rows"),
        # 56 // 3 == 18 wide sectors leave 18 - 2*2 == 14 tiles for a room
        ({"min_room_size": 15}, "min_room_size"),
        ({"room_margin": 7}, "min_room_size"),
    ],
)
def test_invalid_settings_name_the_field(changes, field):
    cfg = GenerationConfig(**changes)
    with pytest.raises(ConfigError) as exc:
        cfg.validate()
    assert exc.value.field == field
    assert exc.value.to_dict() == {"error": str(exc.value), "field": field}


def test_config_error_is_a_value_error():
    with pytest.raises(ValueError):
        GenerationConfig(width=-1).validate()


def test_room_must_fit_exactly_inside_interior():
    # 18 wide sector, margin 2 -> 14 interior; 14 is the largest valid min size
    GenerationConfig(min_room_size=12, height=40).validate()
    GenerationConfig(min_room_size=14, height=50).validate()


def test_with_overrides_coerces_strings():
    cfg = GenerationConfig().with_overrides(
        {
            "width": "80",
            "merge_probability": "0.5",
            "standard_room_count": "2",
            "debug_checks": "yes",
            "unknown": "ignored",
            "rows": "",
            "columns": None,
        }
    )
    assert cfg.width == 80
    assert cfg.merge_probability == 0.5
    assert cfg.standard_room_count == 2
    assert cfg.debug_checks is True
    assert cfg.rows == 2
    assert cfg.columns == 3


def test_with_overrides_returns_copy():
    base = GenerationConfig()
    changed = base.with_overrides({"width": 70})
    assert base.width == 56
    assert changed.width == 70


@pytest.mark.parametrize("raw", ["abc", "1.5", True])
def test_with_overrides_rejects_bad_ints(raw):
    with pytest.raises(ConfigError) as exc:
        GenerationConfig().with_overrides({"width": raw})
    assert exc.value.field == "width"


def test_from_env_reads_prefixed_variables():
    env = {
        "DELVER_WIDTH": "64",
        "DELVER_DUMMY_ROOM_PROBABILITY": "0",
        "DELVER_DEBUG_CHECKS": "off",
        "WIDTH": "12",
    }
    cfg = GenerationConfig.from_env(env)
    assert cfg.width == 64
    assert cfg.dummy_room_probability == 0.0
    assert cfg.debug_checks is False


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("DELVER_COLUMNS", "4")
    assert GenerationConfig.from_env().columns == 4


def test_from_env_keyword_defaults_are_overridden_by_env():
    cfg = GenerationConfig.from_env({"DELVER_ROWS": "3"}, rows=1, columns=2)
    assert cfg.rows == 3
    assert cfg.columns == 2


def test_to_dict_round_trips_through_overrides():
    cfg = GenerationConfig(seed=9, merge_probability=0.4)
    assert GenerationConfig().with_overrides(cfg.to_dict()) == cfg


class TestCoerceSeed:
    def test_int_passthrough(self):
        assert coerce_seed(42) == 42
        assert coerce_seed(SEED_MAX + 5) == 5

    def test_digit_string(self):
        assert coerce_seed("  123 ") == 123

    def test_text_is_stable_hash(self):
        a = coerce_seed("crypt-7")
        assert a == coerce_seed("crypt-7")
        assert a != coerce_seed("crypt-8")
        assert 0 <= a < SEED_MAX

    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_missing_draws_random(self, blank):
        assert 1 <= coerce_seed(blank) <= 1_000_000

    @pytest.mark.parametrize("bad", [True, 1.5, [1]])
    def test_rejects_other_types(self, bad):
        with pytest.raises(ConfigError) as exc:
            coerce_seed(bad)
        assert exc.value.field == "seed"


def test_roll_sector_grid_ranges_and_determinism():
    seen = set()
    for seed in range(200):
        cols, rows = roll_sector_grid(random.Random(seed))
        assert 3 <= cols <= 4
        assert 2 <= rows <= 4
        seen.add((cols, rows))
    assert len(seen) == 6
    assert roll_sector_grid(random.Random(7)) == roll_sector_grid(random.Random(7))
