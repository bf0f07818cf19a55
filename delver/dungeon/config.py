from __future__ import annotations

import hashlib
import os
import random
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError


@dataclass
class GenerationConfig:
    width: int = 56
    height: int = 32
    columns: int = 3
    rows: int = 2
    seed: Optional[int] = None
    min_room_size: int = 4
    room_margin: int = 2
    dummy_room_probability: float = 0.25
    extra_connectivity_probability: float = 0.15
    merge_probability: float = 0.1
    hallway_buffer: int = 2
    standard_room_count: Optional[int] = None
    workers: int = 1
    debug_checks: bool = False

    @property
    def sector_count(self) -> int:
        return self.columns * self.rows

    def validate(self) -> "GenerationConfig":
        """Raise ConfigError for any inconsistent setting; return self otherwise."""
        for name in ("width", "height"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive", name)
        for name in ("columns", "rows"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be at least 1", name)
        if self.min_room_size < 1:
            raise ConfigError("min_room_size must be at least 1", "min_room_size")
        if self.room_margin < 1:
            # rooms in neighbouring sectors would be allowed to touch
            raise ConfigError("room_margin must be at least 1", "room_margin")
        if self.hallway_buffer < 0:
            raise ConfigError("hallway_buffer must not be negative", "hallway_buffer")
        for name in ("dummy_room_probability", "extra_connectivity_probability", "merge_probability"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1]", name)
        if self.standard_room_count is not None and self.standard_room_count < 0:
            raise ConfigError("standard_room_count must not be negative", "standard_room_count")
        if self.workers < 1:
            raise ConfigError("workers must be at least 1", "workers")
        # Edge sectors absorb the remainder, so the first column/row is the smallest.
        sector_w = self.width // self.columns
        sector_h = self.height // self.rows
        if sector_w == 0:
            raise ConfigError("more columns than map width", "columns")
        if sector_h == 0:
            raise ConfigError("more rows than map height", "rows")
        if sector_w - 2 * self.room_margin < self.min_room_size:
            raise ConfigError(
                f"sector width {sector_w} cannot hold a {self.min_room_size} wide room with margin {self.room_margin}",
                "min_room_size",
            )
        if sector_h - 2 * self.room_margin < self.min_room_size:
            raise ConfigError(
                f"sector height {sector_h} cannot hold a {self.min_room_size} tall room with margin {self.room_margin}",
                "min_room_size",
            )
        return self

    def with_overrides(self, values: Mapping[str, Any]) -> "GenerationConfig":
        """Return a copy with string/JSON values coerced onto known fields.

        Unknown keys are ignored. Empty strings leave the field unchanged.
        """
        changes: Dict[str, Any] = {}
        for f in fields(self):
            if f.name not in values:
                continue
            raw = values[f.name]
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                continue
            changes[f.name] = _coerce(f.name, raw)
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **defaults) -> "GenerationConfig":
        """Build a config from ``DELVER_<FIELD>`` environment variables."""
        environ = os.environ if environ is None else environ
        base = cls(**defaults)
        env_values = {}
        for f in fields(cls):
            key = "DELVER_" + f.name.upper()
            if key in environ:
                env_values[f.name] = environ[key]
        return base.with_overrides(env_values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_INT_FIELDS = {"width", "height", "columns", "rows", "min_room_size", "room_margin", "hallway_buffer", "workers"}
_OPTIONAL_INT_FIELDS = {"seed", "standard_room_count"}
_FLOAT_FIELDS = {"dummy_room_probability", "extra_connectivity_probability", "merge_probability"}


def _coerce(name: str, raw: Any) -> Any:
    try:
        if name in _INT_FIELDS or name in _OPTIONAL_INT_FIELDS:
            if isinstance(raw, bool):
                raise ValueError(raw)
            return int(raw)
        if name in _FLOAT_FIELDS:
            return float(raw)
        if name == "debug_checks":
            if isinstance(raw, bool):
                return raw
            return str(raw).strip().lower() not in {"0", "false", "no", "off", ""}
    except (TypeError, ValueError):
        raise ConfigError(f"invalid value for {name}: {raw!r}", name) from None
    return raw


SEED_MAX = 9223372036854775807


def coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded non-negative int.

    None or blank strings draw a random seed; digit strings parse as ints; any
    other string hashes through sha256 so names like "crypt-7" are stable seeds.
    """
    if payload_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, bool):
        raise ConfigError("seed must be an integer or string", "seed")
    if isinstance(payload_seed, int):
        return payload_seed % SEED_MAX
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SEED_MAX
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SEED_MAX
    raise ConfigError("seed must be an integer or string", "seed")


def roll_sector_grid(rng: random.Random) -> Tuple[int, int]:
    """Pick a sector grid the way a fresh level does when none is requested."""
    columns = rng.randint(3, 4)
    rows = rng.randint(2, 4)
    return columns, rows


__all__ = ["GenerationConfig", "coerce_seed", "roll_sector_grid"]
