"""Tests for the stress-test runner and its CLI."""

import json
import random

import pytest

from qmf.benchmark import main, run_benchmark
from qmf.quaternion import InvalidInputError


def test_operation_counts():
    report = run_benchmark(10, rng=random.Random(0))
    assert [r.operation for r in report.results] == [
        "Memory Generation",
        "Hamilton Products",
        "Resonance Scores",
        "Entanglement Detection",
    ]
    assert [r.count for r in report.results] == [10, 100, 50, 30]
    assert report.total_operations == 190
    assert len(report.memories) == 10
    assert 0 <= report.entangled_pairs <= 30


def test_counts_are_capped():
    report = run_benchmark(2000, rng=random.Random(1))
    assert [r.count for r in report.results] == [2000, 10000, 5000, 3000]


def test_timings_are_consistent():
    report = run_benchmark(5, rng=random.Random(2))
    for r in report.results:
        assert r.total_ms >= 0.0
        assert r.avg_ms == pytest.approx(r.total_ms / r.count)
    assert report.total_ms == pytest.approx(sum(r.total_ms for r in report.results))


def test_seeded_run_is_reproducible():
    first = run_benchmark(20, rng=random.Random(9))
    second = run_benchmark(20, rng=random.Random(9))
    assert [m.content for m in first.memories] == [m.content for m in second.memories]
    assert first.entangled_pairs == second.entangled_pairs


def test_threshold_bounds_pairs():
    assert run_benchmark(5, rng=random.Random(3), threshold=0.0).entangled_pairs == 15
    assert run_benchmark(5, rng=random.Random(3), threshold=1.01).entangled_pairs == 0


def test_rejects_empty_field():
    with pytest.raises(InvalidInputError):
        run_benchmark(0)
    with pytest.raises(InvalidInputError):
        run_benchmark(-3)


def test_main_json(capsys):
    assert main(["--memories", "5", "--seed", "3", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["total_operations"] == 95
    assert len(payload["results"]) == 4
    assert payload["results"][0]["operation"] == "Memory Generation"


def test_main_text(capsys):
    assert main(["--memories", "3", "--seed", "1", "--quiet"]) == 0
    out = capsys.readouterr().out
    assert "[BENCH] 3 memories (seed=1)" in out
    assert "Hamilton Products" in out
    assert "Entangled pairs:" in out


def test_main_rejects_zero(capsys):
    with pytest.raises(SystemExit):
        main(["--memories", "0"])
