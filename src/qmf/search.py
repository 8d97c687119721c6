"""
Memory Field Search and Clustering

Ranks a caller-owned collection against a query and groups the ranked
results by entanglement.

Search:
    1. Encode the query once
    2. Score every memory: R = α·J + β·|dot|
    3. Stable sort by R descending (ties keep collection order)
    4. Drop results below min_resonance (when min_resonance > 0)
    5. Keep the first max_results

Clustering (greedy, seed-only linkage):
    For each unassigned result in rank order, open a cluster seeded by it
    and absorb every later unassigned result whose entanglement with the
    SEED is ≥ threshold. Members are never compared with each other, only
    with the seed. Clusters are returned by descending average resonance.

Inputs are never mutated: results carrying a cluster_id are fresh copies.

Configuration:
    SearchOptions carries every tunable (weights, caps, thresholds).
    SearchOptions.from_env() reads defaults from QMF_* environment variables.
"""

import logging
import math
import os
import time
from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence

import numpy as np

from .encoder import encode_text
from .memory import Memory
from .quaternion import InvalidInputError
from .resonance import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    ENTANGLEMENT_THRESHOLD,
    entanglement_strength,
    resonance_scores,
)

logger = logging.getLogger(__name__)


DEFAULT_MAX_RESULTS = 20


@dataclass(frozen=True)
class SearchOptions:
    """
    Tunables for search() and decode().

    Attributes:
        max_results: Cap on returned results (≥ 1)
        min_resonance: Drop results scoring below this (0 = keep all)
        alpha: Signature (Jaccard) weight
        beta: Quaternion alignment weight
        cluster_threshold: Entanglement needed to join a seed's cluster
        enable_clustering: False returns every result in one cluster
    """
    max_results: int = DEFAULT_MAX_RESULTS
    min_resonance: float = 0.0
    alpha: float = DEFAULT_ALPHA
    beta: float = DEFAULT_BETA
    cluster_threshold: float = ENTANGLEMENT_THRESHOLD
    enable_clustering: bool = True

    def __post_init__(self):
        if isinstance(self.max_results, bool) or not isinstance(self.max_results, int) or self.max_results < 1:
            raise InvalidInputError(f"max_results must be a positive integer, got {self.max_results!r}")
        for name in ("min_resonance", "alpha", "beta", "cluster_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
            object.__setattr__(self, name, float(value))
        if self.alpha < 0 or self.beta < 0:
            raise InvalidInputError("alpha and beta must be non-negative")

    @classmethod
    def from_env(cls, prefix: str = "QMF_") -> "SearchOptions":
        """
        Build options from environment variables.

        Reads {prefix}MAX_RESULTS, {prefix}MIN_RESONANCE, {prefix}ALPHA,
        {prefix}BETA, {prefix}CLUSTER_THRESHOLD and {prefix}ENABLE_CLUSTERING;
        unset variables keep the defaults.
        """
        def read(name, cast, default):
            raw = os.getenv(prefix + name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return cast(raw)
            except ValueError:
                raise InvalidInputError(f"{prefix}{name}={raw!r} is not a valid value") from None

        return cls(
            max_results=read("MAX_RESULTS", int, DEFAULT_MAX_RESULTS),
            min_resonance=read("MIN_RESONANCE", float, 0.0),
            alpha=read("ALPHA", float, DEFAULT_ALPHA),
            beta=read("BETA", float, DEFAULT_BETA),
            cluster_threshold=read("CLUSTER_THRESHOLD", float, ENTANGLEMENT_THRESHOLD),
            enable_clustering=read(
                "ENABLE_CLUSTERING",
                lambda v: v.strip().lower() not in ("0", "false", "no", "off"),
                True,
            ),
        )


@dataclass(frozen=True)
class SearchResult:
    memory: Memory
    resonance: float
    similarity: float
    quaternion_alignment: float
    cluster_id: Optional[int] = None


@dataclass(frozen=True)
class Cluster:
    id: int
    results: List[SearchResult]
    avg_resonance: float


@dataclass(frozen=True)
class DecodeReport:
    """search() + clustering output for one query, with its latency."""
    query: str
    results: List[SearchResult] = field(default_factory=list)
    clusters: List[Cluster] = field(default_factory=list)
    timing_ms: float = 0.0


def search(query: str, memories: Sequence[Memory], options: Optional[SearchOptions] = None) -> List[SearchResult]:
    """
    Rank memories by resonance with the query text.

    Args:
        query: Query text (encoded once)
        memories: Caller-owned collection; not modified
        options: SearchOptions (defaults when None)

    Returns:
        Ranked SearchResult list, at most options.max_results long
    """
    options = options or SearchOptions()
    encoded = encode_text(query)
    if not memories:
        return []

    resonance, similarity, alignment = resonance_scores(
        encoded, memories, alpha=options.alpha, beta=options.beta
    )

    # Stable sort keeps collection order among equal scores
    order = np.argsort(-resonance, kind="stable")
    if options.min_resonance > 0:
        order = order[resonance[order] >= options.min_resonance]
    order = order[:options.max_results]

    results = [
        SearchResult(
            memory=memories[i],
            resonance=float(resonance[i]),
            similarity=float(similarity[i]),
            quaternion_alignment=float(alignment[i]),
        )
        for i in order
    ]
    logger.debug(f"[Search] {query!r}: {len(memories)} memories scored, {len(results)} returned")
    return results


def _average(results: Sequence[SearchResult]) -> float:
    return sum(r.resonance for r in results) / len(results) if results else 0.0


def cluster_results(results: Sequence[SearchResult], threshold: float = ENTANGLEMENT_THRESHOLD) -> List[Cluster]:
    """
    Greedy seed-only clustering of ranked results.

    Each candidate is compared with its cluster's seed only, never with the
    other members, so two members need not be entangled with each other.

    Args:
        results: Ranked results (search() output)
        threshold: Minimum entanglement with the seed to join its cluster

    Returns:
        Clusters sorted by descending avg_resonance; ids follow creation order
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not math.isfinite(threshold):
        raise InvalidInputError(f"threshold must be a finite number, got {threshold!r}")
    if not results:
        return []

    assigned = set()
    clusters: List[Cluster] = []

    for i, seed in enumerate(results):
        if i in assigned:
            continue
        members = [i]
        assigned.add(i)

        for j in range(i + 1, len(results)):
            if j in assigned:
                continue
            if entanglement_strength(seed.memory, results[j].memory) >= threshold:
                members.append(j)
                assigned.add(j)

        cluster_id = len(clusters)
        tagged = [replace(results[k], cluster_id=cluster_id) for k in members]
        clusters.append(Cluster(id=cluster_id, results=tagged, avg_resonance=_average(tagged)))

    logger.debug(f"[Search] Clustered {len(results)} results into {len(clusters)} clusters (threshold={threshold:.3f})")
    return sorted(clusters, key=lambda c: c.avg_resonance, reverse=True)


def single_cluster(results: Sequence[SearchResult]) -> List[Cluster]:
    """Clustering disabled: every result in cluster 0."""
    tagged = [replace(r, cluster_id=0) for r in results]
    return [Cluster(id=0, results=tagged, avg_resonance=_average(tagged))]


def decode(query: str, memories: Sequence[Memory], options: Optional[SearchOptions] = None) -> DecodeReport:
    """
    Search then cluster, as the decoder panel does.

    A blank query or an empty collection gives an empty report.
    """
    options = options or SearchOptions()
    if not isinstance(query, str):
        raise InvalidInputError(f"query must be a str, got {type(query).__name__}")
    if not query.strip() or not memories:
        return DecodeReport(query=query)

    start_time = time.perf_counter()
    results = search(query, memories, options)
    if options.enable_clustering:
        clusters = cluster_results(results, options.cluster_threshold)
    else:
        clusters = single_cluster(results)
    timing_ms = (time.perf_counter() - start_time) * 1000

    return DecodeReport(query=query, results=results, clusters=clusters, timing_ms=timing_ms)
