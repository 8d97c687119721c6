"""Tests for memory records and random generation."""

import dataclasses
import random
import uuid

import pytest

from qmf.encoder import encode_text
from qmf.memory import (
    RANDOM_MAX_WORDS,
    RANDOM_MIN_WORDS,
    RANDOM_WORDS,
    create_memory,
    generate_random_memories,
    generate_random_memory,
)
from qmf.quaternion import InvalidInputError


def test_create_memory_fields():
    mem = create_memory("machine learning", memory_id="m1", timestamp=5)
    encoded = encode_text("machine learning")
    assert mem.id == "m1"
    assert mem.content == "machine learning"
    assert mem.quaternion == encoded.quaternion
    assert mem.prime_signature == encoded.prime_signature
    assert mem.timestamp == 5.0


def test_default_id_is_uuid():
    a = create_memory("x")
    b = create_memory("x")
    assert a.id != b.id
    assert uuid.UUID(a.id).version == 4
    assert a.timestamp > 0


def test_memory_is_frozen():
    mem = create_memory("x", memory_id="m1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        mem.content = "y"


def test_rejects_bad_input():
    with pytest.raises(InvalidInputError):
        create_memory(None)
    with pytest.raises(InvalidInputError):
        create_memory("x", memory_id=7)


def test_random_memory_shape():
    rng = random.Random(11)
    for _ in range(100):
        mem = generate_random_memory(rng)
        words = mem.content.split(" ")
        assert RANDOM_MIN_WORDS <= len(words) <= RANDOM_MAX_WORDS
        assert set(words) <= set(RANDOM_WORDS)
        assert uuid.UUID(mem.id).version == 4


def test_random_memories_seeded():
    first = generate_random_memories(5, rng=random.Random(42))
    second = generate_random_memories(5, rng=random.Random(42))
    assert [m.content for m in first] == [m.content for m in second]
    assert [m.id for m in first] == [m.id for m in second]
    assert len({m.id for m in first}) == 5


def test_random_memories_count():
    assert generate_random_memories(0) == []
    assert len(generate_random_memories(3)) == 3
    with pytest.raises(InvalidInputError):
        generate_random_memories(-1)
