"""
Memory Field API Client Example

Demonstrates how to interact with the Memory Field API for:
- Encoding and storing memories
- Resonance search with entanglement clustering
- Field stability and compression diagnostics
- The quaternion calculator (Hamilton product, SLERP)

This script provides a simple Python interface to the REST API.
For production use, consider using an async HTTP client (httpx, aiohttp).

Requirements:
    pip install requests

Usage:
    # Start API server first
    uvicorn api.server:app --host 0.0.0.0 --port 8000

    # Run client
    python examples/api_client.py
"""

import requests
import sys
from typing import Optional, Dict, Any


class MemoryFieldClient:
    """
    Python client for the Memory Field API.

    Args:
        base_url: API base URL (default: http://localhost:8000)
        timeout: Request timeout in seconds (default: 30)

    Example:
        >>> client = MemoryFieldClient()
        >>> client.store("machine learning")
        >>> result = client.search("machine")
        >>> print(result["results"][0]["memory"]["content"])
    """

    def __init__(self, base_url: str = "http://localhost:8000", timeout: int = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()

    def _get(self, path: str) -> Dict[str, Any]:
        response = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _delete(self, path: str) -> Dict[str, Any]:
        response = self.session.delete(f"{self.base_url}{path}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> Dict[str, Any]:
        """
        Check API server health.

        Returns:
            Health status dictionary with memory count and uptime
        """
        response = self.session.get(
            f"{self.base_url}/v1/health",
            timeout=10  # Short timeout for health checks
        )
        response.raise_for_status()
        return response.json()

    def encode(self, text: str) -> Dict[str, Any]:
        """Encode text without storing it."""
        return self._post("/v1/encode", {"text": text})

    def store(self, content: str, memory_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Encode and store a memory.

        Raises:
            requests.HTTPError: 409 if memory_id is already taken
        """
        payload = {"content": content}
        if memory_id is not None:
            payload["id"] = memory_id
        return self._post("/v1/memories", payload)

    def list_memories(self) -> Dict[str, Any]:
        return self._get("/v1/memories")

    def delete(self, memory_id: str) -> Dict[str, Any]:
        return self._delete(f"/v1/memories/{memory_id}")

    def clear(self) -> Dict[str, Any]:
        return self._delete("/v1/memories")

    def generate_random(self, count: int = 100) -> Dict[str, Any]:
        """Replace the field with count random memories."""
        return self._post("/v1/memories/random", {"count": count})

    def search(
        self,
        query: str,
        max_results: int = 20,
        min_resonance: float = 0.0,
        alpha: float = 0.5,
        beta: float = 0.5,
        cluster_threshold: float = 0.3,
        enable_clustering: bool = True
    ) -> Dict[str, Any]:
        """
        Resonance search over the stored field.

        Args:
            query: Query text
            max_results: Maximum number of ranked results (1-1000)
            min_resonance: Drop results scoring below this
            alpha: Prime-signature weight (0-1)
            beta: Quaternion alignment weight (0-1)
            cluster_threshold: Entanglement threshold (0-1)
            enable_clustering: Group results by entanglement

        Returns:
            Ranked results, clusters and timing

        Example:
            >>> client = MemoryFieldClient()
            >>> result = client.search("machine", max_results=5)
            >>> for cluster in result["clusters"]:
            ...     print(cluster["id"], [r["memory"]["content"] for r in cluster["results"]])
        """
        return self._post("/v1/search", {
            "query": query,
            "max_results": max_results,
            "min_resonance": min_resonance,
            "alpha": alpha,
            "beta": beta,
            "cluster_threshold": cluster_threshold,
            "enable_clustering": enable_clustering,
        })

    def metrics(self) -> Dict[str, Any]:
        return self._get("/v1/metrics")

    def compression(self) -> Dict[str, Any]:
        return self._get("/v1/metrics/compression")

    def hamilton(self, a: Dict[str, float], b: Dict[str, float]) -> Dict[str, Any]:
        return self._post("/v1/algebra/hamilton", {"a": a, "b": b})

    def slerp(self, a: Dict[str, float], b: Dict[str, float], t: float = 0.5,
              steps: Optional[int] = None) -> Dict[str, Any]:
        payload = {"a": a, "b": b, "t": t}
        if steps is not None:
            payload["steps"] = steps
        return self._post("/v1/algebra/slerp", payload)

    def benchmark(self, memories: int = 1000, seed: Optional[int] = None) -> Dict[str, Any]:
        payload = {"memories": memories}
        if seed is not None:
            payload["seed"] = seed
        return self._post("/v1/benchmark", payload)

    def close(self):
        """Close the HTTP session."""
        self.session.close()


def demo_search():
    """Store a small field and search it."""
    print("=" * 60)
    print("Demo 1: Resonance Search")
    print("=" * 60)

    client = MemoryFieldClient()
    client.clear()

    for text in [
        "machine learning",
        "machine learning algorithms",
        "deep learning neural networks",
        "cooking italian pasta",
        "italian food recipes",
        "quantum physics theory",
    ]:
        memory = client.store(text)
        print(f"Stored {memory['id'][:8]}  {text:<32} primes={len(memory['prime_signature'])}")

    print("\n[1] Search 'machine':")
    result = client.search("machine", max_results=6)
    for i, r in enumerate(result['results'], 1):
        print(f"  {i}. {r['memory']['content']:<32} resonance={r['resonance']:.4f}")
    print(f"Timing: {result['timing_ms']:.2f}ms")

    print("\n[2] Clusters at threshold 0.7:")
    result = client.search("machine learning", cluster_threshold=0.7)
    for cluster in result['clusters']:
        contents = [r['memory']['content'] for r in cluster['results']]
        print(f"  cluster {cluster['id']} (avg {cluster['avg_resonance']:.3f}): {contents}")


def demo_metrics():
    """Field diagnostics."""
    print("\n" + "=" * 60)
    print("Demo 2: Field Metrics")
    print("=" * 60)

    client = MemoryFieldClient()

    metrics = client.metrics()
    print(f"Entropy:   {metrics['entropy']:.4f} ({metrics['entropy_status']})")
    print(f"Coherence: {metrics['coherence']:.4f} ({metrics['coherence_status']})")
    print(f"Lyapunov:  {metrics['lyapunov']:.4f} ({metrics['lyapunov_status']})")

    compression = client.compression()
    print(f"Raw bytes:     {compression['raw_bytes']}")
    print(f"Encoded bytes: {compression['encoded_bytes']}")
    print(f"Ratio:         {compression['compression_ratio']:.2f}x")


def demo_algebra():
    """Quaternion calculator."""
    print("\n" + "=" * 60)
    print("Demo 3: Quaternion Algebra")
    print("=" * 60)

    client = MemoryFieldClient()
    a = {"w": 0.707, "x": 0.707, "y": 0.0, "z": 0.0}
    b = {"w": 0.707, "x": 0.0, "y": 0.707, "z": 0.0}

    result = client.hamilton(a, b)
    print(f"a*b: {result['ab']}")
    print(f"b*a: {result['ba']}")
    print(f"|[a, b]| = {result['commutator_magnitude']:.4f} "
          f"({'commutative' if result['is_commutative'] else 'non-commutative'})")

    result = client.slerp(a, b, t=0.5, steps=4)
    print(f"slerp(a, b, 0.5): {result['result']}")


def demo_error_handling():
    """Demonstrate error handling."""
    print("\n" + "=" * 60)
    print("Demo 4: Error Handling")
    print("=" * 60)

    client = MemoryFieldClient()

    print("\n[1] Unknown memory id:")
    try:
        client.delete("does-not-exist")
    except requests.HTTPError as e:
        print(f"Error: {e.response.status_code}")
        print(f"Message: {e.response.json()['message']}")

    print("\n[2] Invalid cluster threshold:")
    try:
        client.search("test", cluster_threshold=5.0)
    except requests.HTTPError as e:
        print(f"Error: {e.response.status_code}")


def main():
    """Run all demos."""
    print("\n" + "=" * 60)
    print("Memory Field API Client - Demo Suite")
    print("=" * 60)
    print("Make sure the API server is running:")
    print("  uvicorn api.server:app --host 0.0.0.0 --port 8000")
    print()

    try:
        client = MemoryFieldClient()
        health = client.health_check()

        print(f"Server status: {health['status']}")
        print(f"API version: {health['version']}")
        print()

        demo_search()
        demo_metrics()
        demo_algebra()
        demo_error_handling()

        print("\n" + "=" * 60)
        print("All demos completed successfully!")
        print("=" * 60)

    except requests.ConnectionError:
        print("ERROR: Cannot connect to API server!")
        print("Start the server with:")
        print("  uvicorn api.server:app --host 0.0.0.0 --port 8000")
        sys.exit(1)

    except requests.HTTPError as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
