"""
project: Delver
module: dungeon_api.py
License: MIT

Level generation API routes.

Game clients fetch a level for a seed, and ask for the next level (fresh seed)
when the player takes the exit. Maps are returned row-major with each row
run-length encoded (see ``delver.utils.tile_compress``).
"""

import os
import random
import threading

from flask import Blueprint, current_app, jsonify, request

from delver.dungeon import ConfigError, Dungeon, GenerationConfig, coerce_seed, roll_sector_grid
from delver.logging_utils import get_logger
from delver.utils.tile_compress import encode_rows

bp_dungeon = Blueprint("dungeon", __name__)
log = get_logger("delver.api")

# Simple in-process cache config-tuple -> Dungeon. Guarded by a lock because the
# dev server serves requests on threads.
_dungeon_cache = {}
_dungeon_cache_lock = threading.Lock()


def _cache_disabled() -> bool:
    return bool(current_app.config.get("DELVER_DISABLE_CACHE")) or os.environ.get("DELVER_DISABLE_CACHE") == "1"


def get_cached_dungeon(config: GenerationConfig) -> Dungeon:
    if _cache_disabled():
        return Dungeon(config)
    key = tuple(sorted(config.to_dict().items()))
    with _dungeon_cache_lock:
        dungeon = _dungeon_cache.pop(key, None)
        if dungeon is not None:
            # re-insert so eviction drops the least recently used entry
            _dungeon_cache[key] = dungeon
            return dungeon
    dungeon = Dungeon(config)
    cap = current_app.config.get("DELVER_CACHE_MAX", 8)
    with _dungeon_cache_lock:
        _dungeon_cache[key] = dungeon
        while len(_dungeon_cache) > cap:
            first_key = next(iter(_dungeon_cache.keys()))
            _dungeon_cache.pop(first_key, None)
    return dungeon


def _finalize(config: GenerationConfig, seed: int) -> GenerationConfig:
    config.seed = seed
    if current_app.config.get("DELVER_DEBUG_CHECKS"):
        config.debug_checks = True
    # request input is bounded by the server, not the caller
    max_dim = current_app.config.get("DELVER_MAX_DIM", 256)
    for name in ("width", "height"):
        if getattr(config, name) > max_dim:
            raise ConfigError(f"{name} must be at most {max_dim}", name)
    return config.validate()


def _level_payload(dungeon: Dungeon) -> dict:
    data = dungeon.level.to_dict()
    data["rows_rle"] = encode_rows(dungeon.tilemap.rows())
    return data


@bp_dungeon.errorhandler(ConfigError)
def _config_error(e: ConfigError):
    log.warn(event="config_rejected", field=e.field, error=str(e))
    return jsonify(e.to_dict()), 400


@bp_dungeon.route("/api/dungeon/config")
def dungeon_config():
    """Return the effective default generation configuration."""
    return jsonify(GenerationConfig.from_env().to_dict())


@bp_dungeon.route("/api/dungeon/map")
def dungeon_map():
    """
    Return the level for the query's seed and configuration.
    Query: seed (int|str, optional) plus any GenerationConfig field.
    Response: level dict with 'rows_rle', 'exit', 'spawn', 'rooms', 'hallways', 'metrics'.
    """
    args = request.args.to_dict()
    seed = coerce_seed(args.pop("seed", None))
    config = _finalize(GenerationConfig.from_env().with_overrides(args), seed)
    return jsonify(_level_payload(get_cached_dungeon(config)))


@bp_dungeon.route("/api/dungeon/next", methods=["POST"])
def next_level():
    """Generate the next level after the player takes the exit.

    Body JSON (all optional):
      { "seed": <int|str|null>, "config": { <GenerationConfig field>: value } }
    - If seed omitted or null => random seed.
    - If the config names no sector grid, one is rolled from the seed.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ConfigError("body must be a JSON object", "body")
    seed = coerce_seed(data.get("seed"))
    values = data.get("config") or {}
    if not isinstance(values, dict):
        raise ConfigError("config must be an object", "config")
    config = GenerationConfig.from_env().with_overrides(values)
    if "columns" not in values and "rows" not in values:
        config.columns, config.rows = roll_sector_grid(random.Random(seed))
    _finalize(config, seed)
    log.info(event="next_level", seed=seed, columns=config.columns, rows=config.rows)
    return jsonify(_level_payload(get_cached_dungeon(config)))
