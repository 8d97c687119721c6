"""
Field Stability Metrics

Aggregate diagnostics over a collection of memories. These are heuristic
signals for a dashboard, not validated estimators.

Metrics:
-------
1. **Entropy** (signature spread):
   Frequency of every prime across all signatures (duplicates across
   memories counted), Shannon entropy in bits, normalized by log2 of the
   number of distinct primes. Low = sharp, repeated vocabulary.
   High = noise.

2. **Coherence** (phase locking):
   φ = acos(clamp(w, −1, 1)) per memory, then the circular mean length
   sqrt((Σcos φ)² + (Σsin φ)²) / N. 1 = phase-locked.

3. **Lyapunov** (trajectory divergence):
   Mean of ln ||q[i] − q[i−1]|| over consecutive memories, skipping steps
   of length ≤ 0.001. Negative = converging, positive = diverging. The
   value depends on the order the caller passes memories in.

Empty or degenerate collections never raise: entropy → 0, coherence → 1,
Lyapunov → 0.

Status bands (from the metrics panel):
    entropy    < 0.3 stable, < 0.7 warning, else critical
    coherence  > 0.7 stable, > 0.3 warning, else critical
    lyapunov   < 0   stable, < 0.5 warning, else critical

Compression report:
    Compares the raw UTF-8 size of the stored text with the size of its
    encoding (4 float64 components per memory plus a shared prime table and
    a per-memory bitmap over it).
"""

import math
from collections import Counter
from typing import Any, Dict, Sequence

from .quaternion import magnitude, Quaternion


LYAPUNOV_MIN_STEP = 0.001

STABLE = "stable"
WARNING = "warning"
CRITICAL = "critical"

QUATERNION_BYTES = 4 * 8  # four float64 components
PRIME_BYTES = 4           # one int32 per unique prime


def calculate_entropy(memories: Sequence) -> float:
    """Normalized Shannon entropy of prime frequencies, in [0, 1]."""
    freq = Counter()
    for mem in memories:
        freq.update(mem.prime_signature)

    total = sum(freq.values())
    if total == 0:
        return 0.0

    entropy = 0.0
    for count in freq.values():
        p = count / total
        if p > 0:
            entropy -= p * math.log2(p)

    max_entropy = math.log2(len(freq) or 1)
    return 0.0 if max_entropy == 0 else entropy / max_entropy


def calculate_coherence(memories: Sequence) -> float:
    if not memories:
        return 1.0

    sum_cos = 0.0
    sum_sin = 0.0
    for mem in memories:
        # w component serves as the phase proxy
        phase = math.acos(max(-1.0, min(1.0, mem.quaternion.w)))
        sum_cos += math.cos(phase)
        sum_sin += math.sin(phase)

    return math.sqrt(sum_cos * sum_cos + sum_sin * sum_sin) / len(memories)


def calculate_lyapunov(memories: Sequence) -> float:
    """
    Order-sensitive divergence estimate between consecutive memories.

    Args:
        memories: Collection in caller order (usually chronological)

    Returns:
        Σ ln(step) / (N − 1) over steps longer than 0.001; 0 for N < 2
    """
    if len(memories) < 2:
        return 0.0

    divergence_sum = 0.0
    for prev, curr in zip(memories, memories[1:]):
        a, b = prev.quaternion, curr.quaternion
        step = magnitude(Quaternion(b.w - a.w, b.x - a.x, b.y - a.y, b.z - a.z))
        if step > LYAPUNOV_MIN_STEP:
            divergence_sum += math.log(step)

    return divergence_sum / (len(memories) - 1)


def entropy_status(value: float) -> str:
    if value < 0.3:
        return STABLE
    if value < 0.7:
        return WARNING
    return CRITICAL


def coherence_status(value: float) -> str:
    if value > 0.7:
        return STABLE
    if value > 0.3:
        return WARNING
    return CRITICAL


def lyapunov_status(value: float) -> str:
    if value < 0:
        return STABLE
    if value < 0.5:
        return WARNING
    return CRITICAL


def compute_field_metrics(memories: Sequence) -> Dict[str, Any]:
    """
    All three stability metrics plus their status bands.

    Returns:
        dict with:
            - memory_count: int
            - entropy, coherence, lyapunov: float
            - entropy_status, coherence_status, lyapunov_status: str
    """
    entropy = calculate_entropy(memories)
    coherence = calculate_coherence(memories)
    lyapunov = calculate_lyapunov(memories)

    return {
        "memory_count": len(memories),
        "entropy": entropy,
        "coherence": coherence,
        "lyapunov": lyapunov,
        "entropy_status": entropy_status(entropy),
        "coherence_status": coherence_status(coherence),
        "lyapunov_status": lyapunov_status(lyapunov),
    }


def compute_compression_metrics(memories: Sequence) -> Dict[str, Any]:
    """
    Storage footprint of the encoded field versus the raw text.

    Returns:
        dict with:
            - raw_bytes: UTF-8 size of all content
            - quaternion_bytes: N · 32
            - prime_signature_bytes: unique primes · 4 + N · ceil(unique / 8)
            - encoded_bytes: quaternion_bytes + prime_signature_bytes
            - compression_ratio: raw / encoded (1 when there is no text)
            - space_savings: percent of raw bytes saved (negative = expansion)
            - bits_per_char: quaternion bits per input character
            - information_density: memories per encoded byte
            - unique_primes: distinct primes across the field
            - avg_primes_per_memory: mean signature length
    """
    if not memories:
        return {
            "raw_bytes": 0,
            "quaternion_bytes": 0,
            "prime_signature_bytes": 0,
            "encoded_bytes": 0,
            "compression_ratio": 1.0,
            "space_savings": 0.0,
            "bits_per_char": 0.0,
            "information_density": 0.0,
            "unique_primes": 0,
            "avg_primes_per_memory": 0.0,
        }

    n = len(memories)
    raw_bytes = sum(len(mem.content.encode("utf-8")) for mem in memories)
    quaternion_bytes = n * QUATERNION_BYTES

    all_primes = set()
    total_primes = 0
    for mem in memories:
        all_primes.update(mem.prime_signature)
        total_primes += len(mem.prime_signature)

    # Shared prime table stored once, plus one membership bitmap per memory
    unique_prime_bytes = len(all_primes) * PRIME_BYTES
    bitmap_bytes = n * math.ceil(len(all_primes) / 8)
    prime_signature_bytes = unique_prime_bytes + bitmap_bytes

    encoded_bytes = quaternion_bytes + prime_signature_bytes

    total_chars = sum(len(mem.content) for mem in memories)

    return {
        "raw_bytes": raw_bytes,
        "quaternion_bytes": quaternion_bytes,
        "prime_signature_bytes": prime_signature_bytes,
        "encoded_bytes": encoded_bytes,
        "compression_ratio": raw_bytes / encoded_bytes if raw_bytes > 0 else 1.0,
        "space_savings": (raw_bytes - encoded_bytes) / raw_bytes * 100 if raw_bytes > 0 else 0.0,
        "bits_per_char": quaternion_bytes * 8 / total_chars if total_chars > 0 else 0.0,
        "information_density": n / encoded_bytes,
        "unique_primes": len(all_primes),
        "avg_primes_per_memory": total_primes / n,
    }
