"""Pipeline orchestration for level generation.

Runs the generation phases strictly in order (sectors, rooms, connectivity
graph, merges, hallways, tile map) off a single ``random.Random`` seeded once
per level, and records per-phase timing in ``metrics['phase_ms']``. The same
seed and configuration always produce the same level.
"""
from __future__ import annotations

import os
import random
import time
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Optional

from ..logging_utils import get_logger
from .config import GenerationConfig
from .connectivity import ConnectivityGraph, build_graph
from .errors import ConfigError
from .geometry import Coord2D
from .hallways import Hallway, route_hallways
from .invariants import enforce
from .merging import merge_rooms, unique_rooms
from .metrics import init_metrics
from .rooms import Room, generate_rooms
from .sectors import Sector, partition_sectors
from .tilemap import TileMap, assemble_tilemap
from .tiles import FLOOR, HALLWAY, WALL

log = get_logger("delver.dungeon")


@dataclass
class Level:
    seed: int
    config: GenerationConfig
    sectors: List[Sector]
    original_rooms: List[Room]
    rooms_by_sector: Dict[int, Room]
    rooms: List[Room]
    graph: ConnectivityGraph
    hallways: List[Hallway]
    tilemap: TileMap
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def exit(self) -> Coord2D:
        return self.tilemap.exit

    @property
    def spawn(self) -> Coord2D:
        return self.tilemap.spawn

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "width": self.tilemap.width,
            "height": self.tilemap.height,
            "columns": self.config.columns,
            "rows": self.config.rows,
            "exit": list(self.exit),
            "spawn": list(self.spawn),
            "rooms": [r.to_dict() for r in self.rooms],
            "edges": [e.to_dict() for e in self.graph.selected_edges()],
            "hallways": [h.to_dict() for h in self.hallways],
            "metrics": self.metrics,
        }


@dataclass
class Dungeon:
    config: Optional[GenerationConfig] = None
    enable_metrics: bool = True

    def __post_init__(self):
        if self.config is None:
            self.config = GenerationConfig.from_env()
        else:
            self.config = replace(self.config)
        # Environment flag can switch checks on; it never drops checks the caller asked for
        if not self.config.debug_checks and "DELVER_DEBUG_CHECKS" in os.environ:
            val = os.environ.get("DELVER_DEBUG_CHECKS", "").lower()
            self.config.debug_checks = val not in {"0", "false", "no", "off", ""}
        # 0 is a valid deterministic seed; None => random
        if self.config.seed is None:
            self.config.seed = random.randint(0, 2**31 - 1)
        self.config.validate()
        self.seed = self.config.seed
        self.metrics: Dict[str, Any] = init_metrics() if self.enable_metrics else {}
        self._run_pipeline()

    @property
    def tilemap(self) -> TileMap:
        return self.level.tilemap

    @property
    def grid(self) -> List[List[str]]:
        return self.level.tilemap.grid

    @property
    def exit(self) -> Coord2D:
        return self.level.exit

    @property
    def spawn(self) -> Coord2D:
        return self.level.spawn

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    def _run_pipeline(self):
        cfg = self.config
        rng = random.Random(self.seed)
        plog = log.bind(seed=self.seed)
        phase_times: Dict[str, int] = {}

        def _phase(label, fn, *a, **k):
            ps = time.perf_counter()
            r = fn(*a, **k)
            phase_times[label] = int((time.perf_counter() - ps) * 1000)
            plog.debug(event="phase_done", phase=label, ms=phase_times[label])
            return r

        start = time.perf_counter()
        sectors = _phase("partition", partition_sectors, cfg.width, cfg.height, cfg.columns, cfg.rows)
        original_rooms = _phase("rooms", generate_rooms, sectors, cfg, rng, cfg.workers)
        graph = _phase("graph", build_graph, cfg.columns, cfg.rows, cfg, rng)
        rooms_by_sector = _phase("merge", merge_rooms, original_rooms, graph, cfg, rng)
        rooms = unique_rooms(rooms_by_sector)
        hallways = _phase("hallways", route_hallways, graph, rooms_by_sector, cfg, rng, self.metrics)
        tilemap = _phase("tilemap", assemble_tilemap, cfg.width, cfg.height, rooms, hallways, rng)

        self.sectors = sectors
        self.original_rooms = original_rooms
        self.rooms_by_sector = rooms_by_sector
        self.rooms = rooms
        self.graph = graph
        self.hallways = hallways
        self.level = Level(
            self.seed, cfg, sectors, original_rooms, rooms_by_sector, rooms, graph, hallways, tilemap, self.metrics
        )
        if cfg.debug_checks:
            _phase("debug_checks", enforce, self.level)

        if self.enable_metrics:
            self.metrics.update(
                sectors=len(sectors),
                rooms_standard=sum(1 for r in rooms if r.is_standard),
                rooms_dummy=sum(1 for r in rooms if r.is_dummy),
                rooms_merged=sum(1 for r in rooms if r.is_merged),
                edges_candidate=len(graph.edges),
                edges_tree=len(graph.tree_edges()),
                edges_extra=sum(1 for e in graph.edges if e.selected and not e.in_tree),
                edges_absorbed=sum(1 for e in graph.edges if e.absorbed),
                hallways_routed=len(hallways),
                tiles_floor=tilemap.count(FLOOR),
                tiles_hallway=tilemap.count(HALLWAY),
                tiles_wall=tilemap.count(WALL),
                runtime_ms=int((time.perf_counter() - start) * 1000),
                phase_ms=phase_times,
            )
        plog.info(
            event="level_generated",
            sectors=len(sectors),
            rooms=len(rooms),
            hallways=len(hallways),
            exit=tilemap.exit,
        )


_CONFIG_FIELDS = {f.name for f in fields(GenerationConfig)}


def generate_level(
    width: Optional[int] = None,
    height: Optional[int] = None,
    columns: Optional[int] = None,
    rows: Optional[int] = None,
    seed: Optional[int] = None,
    config: Optional[GenerationConfig] = None,
    **options,
) -> Level:
    """Generate one level; the main entry point.

    Explicit arguments and ``options`` (any ``GenerationConfig`` field, such as
    ``min_room_size`` or ``merge_probability``) override ``config``. Raises
    ``ConfigError`` before generating anything if the result is inconsistent.
    """
    unknown = sorted(set(options) - _CONFIG_FIELDS)
    if unknown:
        raise ConfigError(f"unknown option(s): {', '.join(unknown)}", unknown[0])
    base = config if config is not None else GenerationConfig()
    overrides = dict(options)
    for name, value in (("width", width), ("height", height), ("columns", columns), ("rows", rows), ("seed", seed)):
        if value is not None:
            overrides[name] = value
    return Dungeon(replace(base, **overrides)).level


__all__ = ["Dungeon", "Level", "generate_level"]
