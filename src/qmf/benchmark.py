"""
Memory Field Stress Test

Times the hot paths of the field on randomly generated memories:

    Phase                      Operations
    ------------------------   -----------------------
    Memory Generation          N
    Hamilton Products          min(10·N, 10000)
    Resonance Scores           min(5·N, 5000)
    Entanglement Detection     min(3·N, 3000)

Pairs are drawn uniformly at random from the generated memories. Pass a
seeded random.Random (or --seed on the CLI) for a reproducible run.

Usage:
    qmf-bench --memories 1000 --seed 41
    qmf-bench --memories 200 --json
"""

import argparse
import json
import logging
import random
import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Callable, List, Optional

import tqdm

from .memory import Memory, generate_random_memory
from .quaternion import InvalidInputError, hamilton_product
from .resonance import ENTANGLEMENT_THRESHOLD, entanglement_strength, resonance_score

logger = logging.getLogger(__name__)


HAMILTON_FACTOR, HAMILTON_CAP = 10, 10000
RESONANCE_FACTOR, RESONANCE_CAP = 5, 5000
ENTANGLEMENT_FACTOR, ENTANGLEMENT_CAP = 3, 3000


@dataclass
class BenchmarkResult:
    operation: str
    count: int
    total_ms: float
    avg_ms: float
    ops_per_second: float


@dataclass
class BenchmarkReport:
    """
    Output of run_benchmark().

    Attributes:
        results: One BenchmarkResult per phase, in run order
        entangled_pairs: Random pairs at or above the entanglement threshold
        memories: The generated field (hand it to a MemoryField to explore)
    """
    results: List[BenchmarkResult] = field(default_factory=list)
    entangled_pairs: int = 0
    memories: List[Memory] = field(default_factory=list)

    @property
    def total_operations(self) -> int:
        return sum(r.count for r in self.results)

    @property
    def total_ms(self) -> float:
        return sum(r.total_ms for r in self.results)


def _result(operation: str, count: int, elapsed_s: float) -> BenchmarkResult:
    total_ms = elapsed_s * 1000
    return BenchmarkResult(
        operation=operation,
        count=count,
        total_ms=total_ms,
        avg_ms=total_ms / count if count else 0.0,
        ops_per_second=count / elapsed_s if elapsed_s > 0 else 0.0,
    )


def _timed_pairs(
    label: str,
    memories: List[Memory],
    count: int,
    rng: random.Random,
    op: Callable[[Memory, Memory], None],
    progress: bool,
) -> BenchmarkResult:
    start = time.perf_counter()
    for _ in tqdm.tqdm(range(count), desc=label, disable=not progress, leave=False):
        op(rng.choice(memories), rng.choice(memories))
    return _result(label, count, time.perf_counter() - start)


def run_benchmark(
    memory_count: int,
    rng: Optional[random.Random] = None,
    threshold: float = ENTANGLEMENT_THRESHOLD,
    progress: bool = False,
) -> BenchmarkReport:
    """
    Generate memory_count random memories and time the pairwise operations.

    Args:
        memory_count: Number of memories to generate (≥ 1)
        rng: Random source for contents, ids and pair selection
        threshold: Entanglement strength counted as a linked pair
        progress: Show tqdm progress bars

    Returns:
        BenchmarkReport
    """
    if memory_count < 1:
        raise InvalidInputError(f"memory_count must be at least 1, got {memory_count}")
    rng = rng if rng is not None else random.Random()
    report = BenchmarkReport()

    logger.debug(f"[Benchmark] Generating {memory_count} memories")
    start = time.perf_counter()
    report.memories = [
        generate_random_memory(rng)
        for _ in tqdm.tqdm(range(memory_count), desc="Memory Generation", disable=not progress, leave=False)
    ]
    report.results.append(_result("Memory Generation", memory_count, time.perf_counter() - start))

    memories = report.memories

    report.results.append(_timed_pairs(
        "Hamilton Products", memories,
        min(memory_count * HAMILTON_FACTOR, HAMILTON_CAP), rng,
        lambda a, b: hamilton_product(a.quaternion, b.quaternion),
        progress,
    ))

    report.results.append(_timed_pairs(
        "Resonance Scores", memories,
        min(memory_count * RESONANCE_FACTOR, RESONANCE_CAP), rng,
        resonance_score,
        progress,
    ))

    entangled = 0

    def detect(a, b):
        nonlocal entangled
        if entanglement_strength(a, b) >= threshold:
            entangled += 1

    report.results.append(_timed_pairs(
        "Entanglement Detection", memories,
        min(memory_count * ENTANGLEMENT_FACTOR, ENTANGLEMENT_CAP), rng,
        detect,
        progress,
    ))
    report.entangled_pairs = entangled

    logger.debug(f"[Benchmark] Done: {report.total_operations} ops in {report.total_ms:.2f}ms")
    return report


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Stress test the quaternionic memory field")
    p.add_argument('--memories', type=int, default=1000, help='number of random memories to generate')
    p.add_argument('--seed', type=int, default=None, help='seed for a reproducible run')
    p.add_argument('--threshold', type=float, default=ENTANGLEMENT_THRESHOLD,
                   help='entanglement strength counted as a linked pair')
    p.add_argument('--json', action='store_true', help='print the report as JSON')
    p.add_argument('--quiet', action='store_true', help='hide progress bars')
    args = p.parse_args(argv)

    if args.memories < 1:
        p.error("--memories must be at least 1")

    report = run_benchmark(
        args.memories,
        rng=random.Random(args.seed),
        threshold=args.threshold,
        progress=not (args.quiet or args.json),
    )

    if args.json:
        print(json.dumps({
            "results": [asdict(r) for r in report.results],
            "entangled_pairs": report.entangled_pairs,
            "total_operations": report.total_operations,
            "total_ms": report.total_ms,
        }, indent=2))
        return 0

    print(f"[BENCH] {args.memories} memories (seed={args.seed})")
    for r in report.results:
        print(f"[BENCH] {r.operation:<24} {r.count:>6} ops  "
              f"{r.total_ms:>9.2f}ms  {r.avg_ms * 1000:>8.2f}us/op  {r.ops_per_second:>12,.0f} ops/s")
    print(f"[BENCH] Entangled pairs: {report.entangled_pairs}")
    print(f"[BENCH] Total: {report.total_operations:,} operations in {report.total_ms:.2f}ms")
    return 0


if __name__ == '__main__':
    sys.exit(main())
