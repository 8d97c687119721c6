"""Tests for the API-owned memory collection."""

import random

import pytest

from api.field import MemoryField
from qmf.search import SearchOptions

from tests.helpers import SCENARIO_TEXTS


@pytest.fixture
def field():
    f = MemoryField(rng=random.Random(5))
    for i, text in enumerate(SCENARIO_TEXTS):
        f.add(text, memory_id=f"m{i + 1}")
    return f


def test_newest_first(field):
    assert len(field) == 6
    assert [m.id for m in field.list()] == ["m6", "m5", "m4", "m3", "m2", "m1"]


def test_get_and_delete(field):
    assert field.get("m2").content == "machine learning algorithms"
    removed = field.delete("m2")
    assert removed.id == "m2"
    assert len(field) == 5
    with pytest.raises(KeyError):
        field.get("m2")
    with pytest.raises(KeyError):
        field.delete("m2")


def test_duplicate_id(field):
    with pytest.raises(KeyError):
        field.add("something else", memory_id="m1")
    assert len(field) == 6


def test_clear(field):
    assert field.clear() == 6
    assert len(field) == 0
    assert field.search("machine").results == []


def test_cap_drops_oldest():
    f = MemoryField(max_memories=2)
    for i in range(4):
        f.add(f"memory {i}", memory_id=str(i))
    assert [m.id for m in f.list()] == ["3", "2"]


def test_generate_replaces(field):
    memories = field.generate(10)
    assert len(memories) == 10
    assert len(field) == 10
    assert "m1" not in {m.id for m in field.list()}


def test_list_is_a_copy(field):
    snapshot = field.list()
    snapshot.clear()
    assert len(field) == 6


def test_search_uses_default_options():
    f = MemoryField(options=SearchOptions(max_results=2))
    for text in SCENARIO_TEXTS:
        f.add(text)
    report = f.search("machine learning")
    assert len(report.results) == 2
    assert report.results[0].memory.content == "machine learning"
    assert len(f.search("machine learning", SearchOptions(max_results=4)).results) == 4


def test_metrics(field):
    metrics = field.metrics()
    assert metrics["memory_count"] == 6
    assert metrics["lyapunov"] == pytest.approx(-1.2225, abs=1e-3)
    assert field.compression()["raw_bytes"] == sum(len(t) for t in SCENARIO_TEXTS)
