"""
Quaternionic Memory Field: Prime-Harmonic Semantic Indexing

Core components for encoding text onto the unit 3-sphere and searching it.

This package stores every piece of text as a memory: a unit quaternion
derived from prime harmonics of its characters, plus the set of primes those
characters map to (its prime signature). Memories are recalled by resonance,
a weighted blend of signature overlap and quaternion alignment, and grouped
by entanglement, a symmetric link strength between two memories.

Vector Algebra:
--------------
- Quaternion: Immutable (w, x, y, z) value with input validation
- hamilton_product / commutator: Non-commutative multiplication
- slerp: Shortest-arc spherical interpolation
- stereographic_project: S³ → R³ for display

Encoding and Scoring:
--------------------
- encode_text: Text → (quaternion, prime signature)
- jaccard_similarity, resonance_score, entanglement_strength

Field Diagnostics:
-----------------
- calculate_entropy, calculate_coherence, calculate_lyapunov
- compute_field_metrics, compute_compression_metrics

Search:
------
- search: Rank a collection against a query
- cluster_results: Greedy seed-only clustering of ranked results

The caller owns the memory collection; every function here is pure and
leaves its inputs untouched.
"""

from .quaternion import (
    InvalidInputError,
    Quaternion,
    IDENTITY,
    create_quaternion,
    magnitude,
    normalize,
    hamilton_product,
    commutator,
    is_commutative,
    dot,
    slerp,
    slerp_path,
    stereographic_project,
    project_3d,
    random_quaternion,
)
from .encoder import PRIMES, EncodedText, encode_text
from .memory import Memory, create_memory, generate_random_memory, generate_random_memories
from .resonance import (
    ENTANGLEMENT_THRESHOLD,
    jaccard_similarity,
    quaternion_alignment,
    resonance_score,
    resonance_scores,
    entanglement_strength,
    is_entangled,
)
from .metrics import (
    calculate_entropy,
    calculate_coherence,
    calculate_lyapunov,
    compute_field_metrics,
    compute_compression_metrics,
)
from .search import (
    SearchOptions,
    SearchResult,
    Cluster,
    DecodeReport,
    search,
    cluster_results,
    single_cluster,
    decode,
)

__version__ = "0.1.0"
__all__ = [
    "InvalidInputError",
    "Quaternion",
    "IDENTITY",
    "create_quaternion",
    "magnitude",
    "normalize",
    "hamilton_product",
    "commutator",
    "is_commutative",
    "dot",
    "slerp",
    "slerp_path",
    "stereographic_project",
    "project_3d",
    "random_quaternion",
    "PRIMES",
    "EncodedText",
    "encode_text",
    "Memory",
    "create_memory",
    "generate_random_memory",
    "generate_random_memories",
    "ENTANGLEMENT_THRESHOLD",
    "jaccard_similarity",
    "quaternion_alignment",
    "resonance_score",
    "resonance_scores",
    "entanglement_strength",
    "is_entangled",
    "calculate_entropy",
    "calculate_coherence",
    "calculate_lyapunov",
    "compute_field_metrics",
    "compute_compression_metrics",
    "SearchOptions",
    "SearchResult",
    "Cluster",
    "DecodeReport",
    "search",
    "cluster_results",
    "single_cluster",
    "decode",
]
