"""Tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from api.server import app

from tests.helpers import SCENARIO_TEXTS


ENV_VARS = (
    "QMF_SEED_MEMORIES",
    "QMF_RANDOM_SEED",
    "QMF_MAX_MEMORIES",
    "QMF_MAX_RESULTS",
    "QMF_MIN_RESONANCE",
    "QMF_ALPHA",
    "QMF_BETA",
    "QMF_CLUSTER_THRESHOLD",
    "QMF_ENABLE_CLUSTERING",
)


@pytest.fixture
def client(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def populated(client):
    for i, text in enumerate(SCENARIO_TEXTS):
        response = client.post("/v1/memories", json={"content": text, "id": f"m{i + 1}"})
        assert response.status_code == 201
    return client


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["memory_count"] == 0
        assert body["version"] == "1.0.0"

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"

    def test_seeded_startup(self, monkeypatch):
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("QMF_SEED_MEMORIES", "12")
        monkeypatch.setenv("QMF_RANDOM_SEED", "4")
        with TestClient(app) as c:
            assert c.get("/v1/health").json()["memory_count"] == 12


class TestMemories:
    def test_create(self, client):
        response = client.post("/v1/memories", json={"content": "hello"})
        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "hello"
        assert body["prime_signature"] == [11, 5, 31, 37, 53]
        assert set(body["quaternion"]) == {"w", "x", "y", "z"}
        assert set(body["projection"]) == {"x", "y", "z"}

    def test_list_newest_first(self, populated):
        body = populated.get("/v1/memories").json()
        assert body["count"] == 6
        assert [m["id"] for m in body["memories"]][:2] == ["m6", "m5"]

    def test_get(self, populated):
        assert populated.get("/v1/memories/m3").json()["content"] == "deep learning neural networks"

    def test_get_unknown(self, client):
        response = client.get("/v1/memories/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_delete(self, populated):
        assert populated.delete("/v1/memories/m1").json()["id"] == "m1"
        assert populated.delete("/v1/memories/m1").status_code == 404
        assert populated.get("/v1/health").json()["memory_count"] == 5

    def test_clear(self, populated):
        assert populated.delete("/v1/memories").json() == {"removed": 6}
        assert populated.get("/v1/memories").json()["count"] == 0

    def test_duplicate_id(self, populated):
        response = populated.post("/v1/memories", json={"content": "again", "id": "m1"})
        assert response.status_code == 409

    @pytest.mark.parametrize("payload", [{"content": ""}, {"content": "   "}, {}])
    def test_rejects_blank(self, client, payload):
        assert client.post("/v1/memories", json=payload).status_code == 422

    def test_random(self, client):
        response = client.post("/v1/memories/random", json={"count": 7})
        assert response.status_code == 200
        assert response.json()["count"] == 7
        assert client.get("/v1/health").json()["memory_count"] == 7

    def test_random_bounds(self, client):
        assert client.post("/v1/memories/random", json={"count": 0}).status_code == 422


class TestEncode:
    def test_encode(self, client):
        body = client.post("/v1/encode", json={"text": "machine"}).json()
        assert body["prime_signature"] == [29, 523, 3, 19, 53]
        assert client.get("/v1/health").json()["memory_count"] == 0

    def test_encode_empty(self, client):
        body = client.post("/v1/encode", json={"text": ""}).json()
        assert body["quaternion"] == {"w": 1.0, "x": 0.0, "y": 0.0, "z": 0.0}
        assert body["prime_signature"] == []


class TestSearch:
    def test_search(self, populated):
        response = populated.post("/v1/search", json={"query": "machine learning"})
        assert response.status_code == 200
        body = response.json()
        assert body["total_memories"] == 6
        assert body["results"][0]["memory"]["id"] == "m1"
        assert body["results"][0]["resonance"] == pytest.approx(1.0)
        assert sum(len(c["results"]) for c in body["clusters"]) == 6

    def test_search_options(self, populated):
        body = populated.post("/v1/search", json={
            "query": "machine learning",
            "max_results": 3,
            "cluster_threshold": 0.7,
        }).json()
        assert len(body["results"]) == 3
        first = sorted(r["memory"]["content"] for r in body["clusters"][0]["results"])
        assert first == ["machine learning", "machine learning algorithms"]

    def test_search_without_clustering(self, populated):
        body = populated.post("/v1/search", json={"query": "machine", "enable_clustering": False}).json()
        assert len(body["clusters"]) == 1
        assert all(r["cluster_id"] == 0 for r in body["clusters"][0]["results"])

    def test_search_empty_field(self, client):
        body = client.post("/v1/search", json={"query": "machine"}).json()
        assert body["results"] == []
        assert body["clusters"] == []

    @pytest.mark.parametrize("payload", [
        {"query": "   "},
        {"query": "x", "alpha": 1.5},
        {"query": "x", "cluster_threshold": -0.1},
        {"query": "x", "max_results": 0},
    ])
    def test_search_validation(self, client, payload):
        assert client.post("/v1/search", json=payload).status_code == 422


class TestMetrics:
    def test_metrics(self, populated):
        body = populated.get("/v1/metrics").json()
        assert body["memory_count"] == 6
        assert body["coherence"] == pytest.approx(0.9948, abs=1e-3)
        assert body["lyapunov_status"] == "stable"

    def test_metrics_empty(self, client):
        body = client.get("/v1/metrics").json()
        assert body["entropy"] == 0.0
        assert body["coherence"] == 1.0

    def test_compression(self, populated):
        body = populated.get("/v1/metrics/compression").json()
        assert body["quaternion_bytes"] == 6 * 32
        assert body["raw_bytes"] == sum(len(t) for t in SCENARIO_TEXTS)


class TestAlgebra:
    A = {"w": 0.707, "x": 0.707, "y": 0.0, "z": 0.0}
    B = {"w": 0.707, "x": 0.0, "y": 0.707, "z": 0.0}

    def test_hamilton(self, client):
        body = client.post("/v1/algebra/hamilton", json={"a": self.A, "b": self.B}).json()
        assert body["ab"]["z"] == pytest.approx(0.5)
        assert body["ba"]["z"] == pytest.approx(-0.5)
        assert body["commutator_magnitude"] == pytest.approx(1.0)
        assert body["is_commutative"] is False

    def test_hamilton_overflow(self, client):
        huge = {"w": 1e308, "x": 1e308, "y": 0.0, "z": 0.0}
        response = client.post("/v1/algebra/hamilton", json={"a": huge, "b": huge})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    def test_hamilton_missing_component(self, client):
        response = client.post("/v1/algebra/hamilton", json={"a": {"w": 1, "x": 0, "y": 0}, "b": self.B})
        assert response.status_code == 422

    def test_slerp(self, client):
        body = client.post("/v1/algebra/slerp", json={
            "a": {"w": 1, "x": 0, "y": 0, "z": 0},
            "b": {"w": 0, "x": 1, "y": 0, "z": 0},
            "t": 0.5,
            "steps": 4,
        }).json()
        assert body["result"]["w"] == pytest.approx(0.5 ** 0.5)
        assert body["result"]["x"] == pytest.approx(0.5 ** 0.5)
        assert len(body["path"]) == 5

    def test_slerp_t_out_of_range(self, client):
        response = client.post("/v1/algebra/slerp", json={"a": self.A, "b": self.B, "t": 1.5})
        assert response.status_code == 422

    def test_project(self, client):
        body = client.post("/v1/algebra/project", json={"quaternion": {"w": 0, "x": 1, "y": 0, "z": 0}}).json()
        assert body == {"x": 1.0, "y": 0.0, "z": 0.0}


class TestBenchmark:
    def test_benchmark(self, client):
        body = client.post("/v1/benchmark", json={"memories": 5, "seed": 1}).json()
        assert body["total_operations"] == 95
        assert [r["count"] for r in body["results"]] == [5, 50, 25, 15]
        assert client.get("/v1/health").json()["memory_count"] == 0

    def test_benchmark_loads_field(self, client):
        client.post("/v1/benchmark", json={"memories": 8, "seed": 1, "load_into_field": True})
        assert client.get("/v1/health").json()["memory_count"] == 8
