"""
Memory Field Service State

Owns the in-memory collection behind the REST API and exposes high-level
operations over it:
- Encoding and storing memories
- Listing, fetching, deleting and clearing
- Random field generation for stress testing
- Resonance search with clustering
- Field stability and compression metrics

The qmf core never holds on to a collection; this class is the caller that
does. Memories are kept newest first, which is also the order the
Lyapunov estimate walks them in.

Usage:
    from api.field import MemoryField

    field = MemoryField()
    field.add("machine learning")
    field.add("italian food recipes")

    report = field.search("machine", SearchOptions(max_results=5))
    print(report.clusters[0].results[0].memory.content)
"""

import logging
import random
import threading
from typing import Any, Dict, List, Optional

from qmf import (
    Memory,
    SearchOptions,
    compute_compression_metrics,
    compute_field_metrics,
    create_memory,
    decode,
    generate_random_memories,
)
from qmf.search import DecodeReport

logger = logging.getLogger(__name__)


class MemoryField:
    """
    Thread-safe, insertion-ordered memory collection.

    A single lock serialises access so the field can sit behind a
    multi-threaded ASGI worker. It is process-local; nothing is persisted.

    Args:
        options: Default SearchOptions used when a search passes none
        rng: Random source for generated memories (seed it for tests)
        max_memories: Optional cap; the oldest memories are dropped past it
    """

    def __init__(
        self,
        options: Optional[SearchOptions] = None,
        rng: Optional[random.Random] = None,
        max_memories: Optional[int] = None,
    ):
        self.options = options or SearchOptions()
        self.rng = rng if rng is not None else random.Random()
        self.max_memories = max_memories
        self._memories: List[Memory] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._memories)

    def _trim(self) -> None:
        if self.max_memories is not None and len(self._memories) > self.max_memories:
            dropped = len(self._memories) - self.max_memories
            del self._memories[self.max_memories:]
            logger.info(f"[MemoryField] Dropped {dropped} oldest memories (cap {self.max_memories})")

    def add(self, content: str, memory_id: Optional[str] = None) -> Memory:
        """Encode content and store it at the front of the field."""
        memory = create_memory(content, memory_id=memory_id)
        with self._lock:
            if any(m.id == memory.id for m in self._memories):
                raise KeyError(f"Memory id already exists: {memory.id}")
            self._memories.insert(0, memory)
            self._trim()
        logger.debug(f"[MemoryField] Stored {memory.id} ({len(memory.prime_signature)} primes)")
        return memory

    def get(self, memory_id: str) -> Memory:
        with self._lock:
            for memory in self._memories:
                if memory.id == memory_id:
                    return memory
        raise KeyError(memory_id)

    def delete(self, memory_id: str) -> Memory:
        with self._lock:
            for i, memory in enumerate(self._memories):
                if memory.id == memory_id:
                    return self._memories.pop(i)
        raise KeyError(memory_id)

    def clear(self) -> int:
        with self._lock:
            count = len(self._memories)
            self._memories = []
        logger.info(f"[MemoryField] Cleared {count} memories")
        return count

    def list(self) -> List[Memory]:
        with self._lock:
            return list(self._memories)

    def replace(self, memories: List[Memory]) -> None:
        """Swap in a whole field (e.g. the output of a benchmark run)."""
        with self._lock:
            self._memories = list(memories)
            self._trim()

    def generate(self, count: int) -> List[Memory]:
        """Replace the field with count random memories, as the stress test does."""
        memories = generate_random_memories(count, rng=self.rng)
        self.replace(memories)
        logger.info(f"[MemoryField] Generated {count} random memories")
        return memories

    def search(self, query: str, options: Optional[SearchOptions] = None) -> DecodeReport:
        return decode(query, self.list(), options or self.options)

    def metrics(self) -> Dict[str, Any]:
        return compute_field_metrics(self.list())

    def compression(self) -> Dict[str, Any]:
        return compute_compression_metrics(self.list())
