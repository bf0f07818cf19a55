"""Flat event logging for the generator.

Every record is a single line: either ``key=value`` pairs led by ``level`` and
``ts``, or a compact JSON object when ``DELVER_LOG_JSON`` is on. Loggers can
be bound to context (usually the level seed) so each phase of one generation
run carries the same identifying fields without repeating them at call sites.

Usage:
    from delver.logging_utils import get_logger
    log = get_logger("delver.dungeon").bind(seed=42)
    log.info(event="level_generated", rooms=6)

``DELVER_LOG_LEVEL`` (debug | info | warn | error) and ``DELVER_LOG_JSON`` are
read on every call, so tests and the CLI can change them at runtime.
Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
_TRUTHY = ("1", "true", "TRUE", "yes", "on")


def _threshold() -> int:
    return LEVELS.get(os.getenv("DELVER_LOG_LEVEL", "info").lower(), 20)


def _json_mode() -> bool:
    return os.getenv("DELVER_LOG_JSON", "0") in _TRUTHY


def _as_json(level: str, ts: int, fields: dict) -> str:
    rec = {"level": level, "ts": ts}
    rec.update(fields)
    try:
        return json.dumps(rec, separators=(",", ":"), default=str)
    except (TypeError, ValueError):
        return json.dumps({"level": level, "ts": ts, "error": "json_encode_failed"})


def _as_pairs(level: str, ts: int, fields: dict) -> str:
    parts = [f"level={level}", f"ts={ts}"]
    for k, v in fields.items():
        if isinstance(v, bool):
            v = str(v).lower()
        elif isinstance(v, (tuple, list)):
            v = ",".join(str(i) for i in v)
        parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class _Logger:
    """Named logger with optional bound context fields."""

    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "delver"
        self.context = dict(context or {})

    def bind(self, **context) -> "_Logger":
        merged = dict(self.context)
        merged.update(context)
        return _Logger(self.name, merged)

    def _emit(self, lvl: str, fields: dict):
        if LEVELS[lvl] < _threshold():
            return
        record = {"logger": self.name}
        record.update(self.context)
        record.update({k: v for k, v in fields.items() if v is not None})
        ts = int(time.time())
        line = _as_json(lvl, ts, record) if _json_mode() else _as_pairs(lvl, ts, record)
        print(line, file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._emit("debug", fields)

    def info(self, **fields):
        self._emit("info", fields)

    def warn(self, **fields):
        self._emit("warn", fields)

    def error(self, **fields):
        self._emit("error", fields)


_LOGGERS: dict = {}


def get_logger(name: str) -> _Logger:
    logger = _LOGGERS.get(name)
    if logger is None:
        logger = _LOGGERS[name] = _Logger(name)
    return logger


log = get_logger("delver")
