import importlib.util
import json
import os

import pytest

SCRIPT = os.path.join(os.path.dirname(__file__), "..", "scripts", "diagnose_seeds.py")


@pytest.fixture()
def diagnose():
    spec = importlib.util.spec_from_file_location("diagnose_seeds", SCRIPT)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_clean_seeds_exit_zero(diagnose, capsys):
    code = diagnose.main(["3", "4", "--columns", "4", "--rows", "3", "--merge-probability", "0.5"])
    report = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [r["seed"] for r in report["results"]] == [3, 4]
    assert all(r["ok"] for r in report["results"])


def test_range_option(diagnose, capsys):
    diagnose.main(["--range", "10", "13"])
    report = json.loads(capsys.readouterr().out)
    assert [r["seed"] for r in report["results"]] == [10, 11, 12]


def test_run_for_seed_counts_issues(diagnose):
    from delver.dungeon import GenerationConfig

    result = diagnose.run_for_seed(7, GenerationConfig(hallway_buffer=30))
    assert result["ok"]
    assert result["issues"]["routing_relaxations"] > 0
    assert result["issues"]["exit_issues"] == 0
