"""Shared fixtures for the memory field tests."""

import pytest

from qmf import create_memory

from tests.helpers import SCENARIO_TEXTS


@pytest.fixture
def scenario_memories():
    """The six-memory field used across search and metrics tests, in insertion order."""
    return [
        create_memory(text, memory_id=f"m{i + 1}", timestamp=float(i))
        for i, text in enumerate(SCENARIO_TEXTS)
    ]
