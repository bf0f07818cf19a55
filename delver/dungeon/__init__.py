"""Public dungeon package interface."""

from .config import GenerationConfig, coerce_seed, roll_sector_grid
from .errors import ConfigError, GenerationError, OverlapViolation, RoutingInfeasible
from .pipeline import Dungeon, Level, generate_level
from .rooms import DUMMY, MERGED, STANDARD, Room
from .tilemap import TileMap
from .tiles import EXIT, FLOOR, HALLWAY, WALL  # noqa: F401

__all__ = [
    "Dungeon",
    "Level",
    "generate_level",
    "GenerationConfig",
    "roll_sector_grid",
    "coerce_seed",
    "Room",
    "TileMap",
    "STANDARD",
    "DUMMY",
    "MERGED",
    "WALL",
    "FLOOR",
    "HALLWAY",
    "EXIT",
    "ConfigError",
    "GenerationError",
    "OverlapViolation",
    "RoutingInfeasible",
]
