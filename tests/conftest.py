import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from delver import create_app  # noqa: E402
from delver.dungeon import GenerationConfig  # noqa: E402


@pytest.fixture(autouse=True)
def _quiet_generation_env(monkeypatch):
    """Keep DELVER_* variables from the developer shell out of test runs."""
    for key in list(os.environ):
        if key.startswith("DELVER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DELVER_LOG_LEVEL", "warn")
    yield


@pytest.fixture()
def test_app():
    app = create_app({"TESTING": True, "DELVER_DISABLE_CACHE": True, "DELVER_DEBUG_CHECKS": True})
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def small_config():
    """3x2 sectors on the default map, no dummies, no merges."""
    return GenerationConfig(seed=1234, min_room_size=3, dummy_room_probability=0.0, merge_probability=0.0)
