"""
Resonance and Entanglement Between Memories

Pairwise scores that drive search ranking and clustering.

Jaccard similarity (signature overlap):
    J(A, B) = |A ∩ B| / |A ∪ B|                    (0 when A ∪ B = ∅)

Resonance (query → candidate ranking):
    R = α · J(A, B) + β · |<q_a, q_b>|

Entanglement (symmetric pairwise link):
    E = ½ · ( |A ∩ B| / max(|A|, |B|) + |<q_a, q_b>| )

The absolute value on the dot product treats q and −q as the same
orientation, so antipodal quaternions count as fully aligned.

Any object exposing `quaternion` and `prime_signature` (Memory, EncodedText)
can be scored. resonance_scores() evaluates one query against a whole
collection at once with numpy, mirroring the matmul readout used for
content-addressable retrieval.
"""

import math
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .quaternion import InvalidInputError, dot, normalize


# Default strength at or above which two memories count as linked
ENTANGLEMENT_THRESHOLD = 0.3

DEFAULT_ALPHA = 0.5
DEFAULT_BETA = 0.5


def _weight(value, name: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise InvalidInputError(f"{name} must be finite, got {value}")
    return value


def jaccard_similarity(sig_a: Iterable[int], sig_b: Iterable[int]) -> float:
    set_a = set(sig_a)
    set_b = set(sig_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def quaternion_alignment(a, b) -> float:
    """|<a, b>| after normalizing both sides."""
    return abs(dot(normalize(a), normalize(b)))


def resonance_score(query, candidate, alpha: float = DEFAULT_ALPHA, beta: float = DEFAULT_BETA) -> float:
    """
    Weighted resonance of a candidate against a query.

    Args:
        query: Encoded query (quaternion + prime_signature)
        candidate: Encoded candidate
        alpha: Weight of the signature (Jaccard) term
        beta: Weight of the quaternion alignment term

    Returns:
        alpha·J + beta·|dot|. Weights need not sum to 1.
    """
    alpha = _weight(alpha, "alpha")
    beta = _weight(beta, "beta")
    jaccard = jaccard_similarity(query.prime_signature, candidate.prime_signature)
    alignment = abs(dot(query.quaternion, candidate.quaternion))
    return alpha * jaccard + beta * alignment


def entanglement_strength(mem_a, mem_b) -> float:
    """Symmetric link strength in [0, 1]; a memory is fully entangled with itself."""
    sig_a = set(mem_a.prime_signature)
    sig_b = set(mem_b.prime_signature)
    max_size = max(len(sig_a), len(sig_b))

    prime_overlap = 0.0 if max_size == 0 else len(sig_a & sig_b) / max_size
    quat_dot = abs(dot(mem_a.quaternion, mem_b.quaternion))

    return 0.5 * (prime_overlap + quat_dot)


def is_entangled(mem_a, mem_b, threshold: float = ENTANGLEMENT_THRESHOLD) -> bool:
    return entanglement_strength(mem_a, mem_b) >= _weight(threshold, "threshold")


def signature_matrix(
    signatures: Sequence[Iterable[int]],
    columns: Optional[Sequence[int]] = None,
) -> Tuple[np.ndarray, List[int]]:
    """
    One-hot membership matrix for a list of signatures.

    Args:
        signatures: N signatures
        columns: Token order for the columns; defaults to the sorted union

    Returns:
        (bool array [N, C], column tokens)
    """
    sets = [set(sig) for sig in signatures]
    if columns is None:
        columns = sorted(set().union(*sets)) if sets else []
    index = {token: i for i, token in enumerate(columns)}

    mat = np.zeros((len(sets), len(index)), dtype=bool)
    for row, tokens in enumerate(sets):
        for token in tokens:
            mat[row, index[token]] = True
    return mat, list(columns)


def _unit_rows(vectors: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(vectors, axis=1)
    unit = np.zeros_like(vectors)
    unit[:, 0] = 1.0  # zero rows become the identity, as in normalize()
    nonzero = norms > 0
    unit[nonzero] = vectors[nonzero] / norms[nonzero, None]
    return unit


def resonance_scores(
    query,
    candidates: Sequence,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Score one query against many candidates in a single pass.

    Args:
        query: Encoded query
        candidates: Sequence of encoded candidates (Memory objects)
        alpha: Signature weight
        beta: Alignment weight

    Returns:
        Tuple of float64 arrays, each of length N:
            - resonance: alpha·J + beta·|dot|
            - similarity: Jaccard similarity J
            - alignment: |dot| of the normalized quaternions
    """
    alpha = _weight(alpha, "alpha")
    beta = _weight(beta, "beta")

    n = len(candidates)
    if n == 0:
        empty = np.zeros(0, dtype=np.float64)
        return empty, empty.copy(), empty.copy()

    mat, _ = signature_matrix([query.prime_signature] + [c.prime_signature for c in candidates])
    q_row, rows = mat[0], mat[1:]
    intersection = np.logical_and(rows, q_row).sum(axis=1)
    union = np.logical_or(rows, q_row).sum(axis=1)
    similarity = np.divide(
        intersection, union,
        out=np.zeros(n, dtype=np.float64),
        where=union > 0,
    )

    vectors = np.array([c.quaternion.as_tuple() for c in candidates], dtype=np.float64)
    q_vec = query.quaternion.to_array()
    raw_dot = vectors @ q_vec

    resonance = alpha * similarity + beta * np.abs(raw_dot)
    alignment = np.abs(_unit_rows(vectors) @ _unit_rows(q_vec[None, :])[0])

    return resonance, similarity, alignment
