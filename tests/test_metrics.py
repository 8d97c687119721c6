"""Tests for field stability and compression metrics."""

import math

import pytest

from qmf.metrics import (
    calculate_coherence,
    calculate_entropy,
    calculate_lyapunov,
    coherence_status,
    compute_compression_metrics,
    compute_field_metrics,
    entropy_status,
    lyapunov_status,
)
from qmf.quaternion import IDENTITY

from tests.helpers import make_memory


class TestEntropy:
    def test_empty(self):
        assert calculate_entropy([]) == 0.0

    def test_single_prime(self):
        assert calculate_entropy([make_memory(IDENTITY, [7])]) == 0.0

    def test_uniform_is_maximal(self):
        memories = [make_memory(IDENTITY, [2, 3]), make_memory(IDENTITY, [5, 7])]
        assert calculate_entropy(memories) == pytest.approx(1.0)

    def test_repeats_lower_entropy(self):
        memories = [make_memory(IDENTITY, [2, 3]) for _ in range(5)] + [make_memory(IDENTITY, [5])]
        assert 0.0 < calculate_entropy(memories) < 1.0

    def test_empty_signatures(self):
        assert calculate_entropy([make_memory(IDENTITY, [])]) == 0.0


class TestCoherence:
    def test_empty_is_coherent(self):
        assert calculate_coherence([]) == 1.0

    def test_identical_phases(self):
        memories = [make_memory((0.3, 0.9, 0.3, 0.1), [2]) for _ in range(4)]
        assert calculate_coherence(memories) == pytest.approx(1.0)

    def test_opposite_phases_cancel(self):
        memories = [make_memory(IDENTITY, [2]), make_memory((-1, 0, 0, 0), [3])]
        assert calculate_coherence(memories) == pytest.approx(0.0, abs=1e-12)

    def test_clamps_w(self):
        # A non-unit w outside [-1, 1] must not raise from acos
        memories = [make_memory((1.5, 0, 0, 0), [2])]
        assert calculate_coherence(memories) == pytest.approx(1.0)


class TestLyapunov:
    def test_short_collections(self):
        assert calculate_lyapunov([]) == 0.0
        assert calculate_lyapunov([make_memory(IDENTITY, [2])]) == 0.0

    def test_single_step(self):
        memories = [make_memory(IDENTITY, [2]), make_memory((0, 1, 0, 0), [3])]
        assert calculate_lyapunov(memories) == pytest.approx(math.log(math.sqrt(2)))

    def test_tiny_steps_are_skipped(self):
        memories = [make_memory(IDENTITY, [2]) for _ in range(3)]
        assert calculate_lyapunov(memories) == 0.0

    def test_divides_by_all_steps(self):
        memories = [
            make_memory(IDENTITY, [2]),
            make_memory(IDENTITY, [2]),
            make_memory((0, 1, 0, 0), [3]),
        ]
        assert calculate_lyapunov(memories) == pytest.approx(math.log(math.sqrt(2)) / 2)

    def test_order_sensitive(self):
        a = make_memory(IDENTITY, [2])
        b = make_memory((0, 1, 0, 0), [3])
        c = make_memory((0.6, 0.8, 0, 0), [5])
        assert calculate_lyapunov([a, b, c]) != pytest.approx(calculate_lyapunov([b, a, c]))


class TestStatus:
    @pytest.mark.parametrize("value, expected", [
        (0.0, "stable"), (0.29, "stable"), (0.3, "warning"), (0.69, "warning"), (0.7, "critical"), (1.0, "critical"),
    ])
    def test_entropy(self, value, expected):
        assert entropy_status(value) == expected

    @pytest.mark.parametrize("value, expected", [
        (1.0, "stable"), (0.71, "stable"), (0.7, "warning"), (0.31, "warning"), (0.3, "critical"), (0.0, "critical"),
    ])
    def test_coherence(self, value, expected):
        assert coherence_status(value) == expected

    @pytest.mark.parametrize("value, expected", [
        (-1.2, "stable"), (0.0, "warning"), (0.49, "warning"), (0.5, "critical"), (2.0, "critical"),
    ])
    def test_lyapunov(self, value, expected):
        assert lyapunov_status(value) == expected


class TestFieldMetrics:
    def test_scenario(self, scenario_memories):
        metrics = compute_field_metrics(scenario_memories)
        assert metrics["memory_count"] == 6
        assert metrics["entropy"] == pytest.approx(0.9593, abs=1e-3)
        assert metrics["coherence"] == pytest.approx(0.9948, abs=1e-3)
        assert metrics["lyapunov"] == pytest.approx(-1.2225, abs=1e-3)
        assert metrics["entropy_status"] == "critical"
        assert metrics["coherence_status"] == "stable"
        assert metrics["lyapunov_status"] == "stable"

    def test_lyapunov_reverse_invariant_for_scenario(self, scenario_memories):
        forward = calculate_lyapunov(scenario_memories)
        backward = calculate_lyapunov(list(reversed(scenario_memories)))
        assert forward == pytest.approx(backward)

    def test_entropy_bounded(self, scenario_memories):
        assert 0.0 <= calculate_entropy(scenario_memories) <= 1.0 + 1e-12

    def test_empty(self):
        metrics = compute_field_metrics([])
        assert metrics == {
            "memory_count": 0,
            "entropy": 0.0,
            "coherence": 1.0,
            "lyapunov": 0.0,
            "entropy_status": "stable",
            "coherence_status": "stable",
            "lyapunov_status": "warning",
        }


class TestCompression:
    def test_empty(self):
        report = compute_compression_metrics([])
        assert report["encoded_bytes"] == 0
        assert report["compression_ratio"] == 1.0

    def test_byte_accounting(self):
        memories = [
            make_memory(IDENTITY, [2, 3, 5], content="hello world"),
            make_memory(IDENTITY, [5, 7], content="héllo"),
        ]
        report = compute_compression_metrics(memories)
        assert report["raw_bytes"] == 11 + 6
        assert report["quaternion_bytes"] == 64
        # 4 unique primes * 4 bytes + 2 memories * 1 bitmap byte
        assert report["prime_signature_bytes"] == 16 + 2
        assert report["encoded_bytes"] == 82
        assert report["compression_ratio"] == pytest.approx(17 / 82)
        assert report["space_savings"] == pytest.approx((17 - 82) / 17 * 100)
        assert report["bits_per_char"] == pytest.approx(64 * 8 / 16)
        assert report["information_density"] == pytest.approx(2 / 82)
        assert report["unique_primes"] == 4
        assert report["avg_primes_per_memory"] == pytest.approx(2.5)

    def test_long_text_compresses(self):
        memories = [make_memory(IDENTITY, [2, 3], content="x" * 1000)]
        report = compute_compression_metrics(memories)
        assert report["compression_ratio"] > 1.0
        assert report["space_savings"] > 0.0
