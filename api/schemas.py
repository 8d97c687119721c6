"""
API Request/Response Schemas for the Memory Field Service

Pydantic models for type validation, serialization, and API documentation.
Every request is validated here before it reaches the qmf core, so malformed
vectors and out-of-range tunables are rejected with a 422 instead of turning
into NaN scores.

Field Interpretation:
    - quaternion: (w, x, y, z) = (coherence, security, performance, usability)
    - prime_signature: Primes (2..541) the text's characters map to
    - resonance: α·Jaccard + β·|dot| between query and memory
    - cluster_threshold: Entanglement needed to join a seed's cluster

Usage:
    from api.schemas import SearchRequest

    request = SearchRequest(query="machine learning", max_results=10)
    options = request.to_options()
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qmf import Memory, Quaternion, SearchOptions, stereographic_project
from qmf.search import Cluster, SearchResult


def _not_blank(v: str, name: str) -> str:
    if not v.strip():
        raise ValueError(f"{name} cannot be empty or whitespace only")
    return v


class QuaternionModel(BaseModel):
    """
    Quaternion on the wire.

    Non-finite components (NaN, ±Infinity) are rejected.

    Example:
        {"w": 0.707, "x": 0.707, "y": 0.0, "z": 0.0}
    """
    model_config = ConfigDict(allow_inf_nan=False)

    w: float = Field(description="Coherence (scalar part)")
    x: float = Field(description="Security")
    y: float = Field(description="Performance")
    z: float = Field(description="Usability")

    def to_quaternion(self) -> Quaternion:
        return Quaternion(self.w, self.x, self.y, self.z)

    @classmethod
    def from_quaternion(cls, q: Quaternion) -> "QuaternionModel":
        return cls(w=q.w, x=q.x, y=q.y, z=q.z)


class Projection(BaseModel):
    """Stereographic projection of a quaternion into R³ (display only)."""
    x: float
    y: float
    z: float

    @classmethod
    def from_quaternion(cls, q: Quaternion) -> "Projection":
        x, y, z = stereographic_project(q)
        return cls(x=x, y=y, z=z)


class EncodeRequest(BaseModel):
    """
    Encode text without storing it.

    The empty string is valid and encodes to the identity quaternion.
    """
    text: str = Field(
        ...,
        max_length=10000,
        description="Text to encode"
    )


class EncodeResponse(BaseModel):
    text: str = Field(description="Echo of the encoded text")
    quaternion: QuaternionModel = Field(description="Unit quaternion")
    prime_signature: List[int] = Field(description="Deduplicated prime signature")
    projection: Projection = Field(description="3D stereographic projection")


class MemoryCreateRequest(BaseModel):
    """
    Encode text and store it in the field.

    Fields:
        content: Text to remember (non-blank)
        id: Optional caller-chosen identifier (uuid4 when omitted)

    Example:
        {"content": "machine learning algorithms"}
    """
    model_config = ConfigDict(
        json_schema_extra={"example": {"content": "machine learning algorithms"}}
    )

    content: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="Text to encode and store"
    )
    id: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=128,
        description="Optional identifier; generated when omitted"
    )

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        return _not_blank(v, "content")


class MemoryResponse(BaseModel):
    id: str
    content: str
    quaternion: QuaternionModel
    prime_signature: List[int]
    timestamp: float = Field(description="Creation time (seconds since epoch)")
    projection: Projection

    @classmethod
    def from_memory(cls, memory: Memory) -> "MemoryResponse":
        return cls(
            id=memory.id,
            content=memory.content,
            quaternion=QuaternionModel.from_quaternion(memory.quaternion),
            prime_signature=list(memory.prime_signature),
            timestamp=memory.timestamp,
            projection=Projection.from_quaternion(memory.quaternion),
        )


class MemoryListResponse(BaseModel):
    memories: List[MemoryResponse] = Field(description="Stored memories, newest first")
    count: int = Field(description="Number of stored memories")


class RandomMemoriesRequest(BaseModel):
    """Replace the field with randomly generated memories."""
    count: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Number of memories to generate"
    )


class SearchRequest(BaseModel):
    """
    Resonance search over the stored field.

    Fields:
        query: Query text
        max_results: Keep at most this many ranked results
        min_resonance: Drop results scoring below this (0 = keep all)
        alpha: Weight of the prime-signature (Jaccard) term
        beta: Weight of the quaternion alignment term
        cluster_threshold: Entanglement needed to join a cluster
        enable_clustering: False returns every result in a single cluster

    Example:
        {
            "query": "machine learning",
            "max_results": 10,
            "alpha": 0.6,
            "beta": 0.4,
            "cluster_threshold": 0.3
        }
    """
    model_config = ConfigDict(
        allow_inf_nan=False,
        json_schema_extra={
            "example": {
                "query": "machine learning",
                "max_results": 10,
                "alpha": 0.6,
                "beta": 0.4,
                "cluster_threshold": 0.3,
            }
        },
    )

    query: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="Query text"
    )
    max_results: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum number of ranked results"
    )
    min_resonance: float = Field(
        default=0.0,
        ge=0.0,
        description="Minimum resonance score to keep a result"
    )
    alpha: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Prime-signature weight"
    )
    beta: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Quaternion alignment weight"
    )
    cluster_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Entanglement threshold for clustering"
    )
    enable_clustering: bool = Field(
        default=True,
        description="Group results by entanglement"
    )

    @field_validator("query")
    @classmethod
    def validate_query(cls, v):
        return _not_blank(v, "query")

    def to_options(self) -> SearchOptions:
        return SearchOptions(
            max_results=self.max_results,
            min_resonance=self.min_resonance,
            alpha=self.alpha,
            beta=self.beta,
            cluster_threshold=self.cluster_threshold,
            enable_clustering=self.enable_clustering,
        )


class SearchResultModel(BaseModel):
    memory: MemoryResponse
    resonance: float = Field(description="Resonance score against the query")
    similarity: float = Field(ge=0.0, le=1.0, description="Prime-signature Jaccard similarity")
    quaternion_alignment: float = Field(description="|dot| of the normalized quaternions")
    cluster_id: Optional[int] = Field(default=None, description="Cluster the result was placed in")

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResultModel":
        return cls(
            memory=MemoryResponse.from_memory(result.memory),
            resonance=result.resonance,
            similarity=result.similarity,
            quaternion_alignment=result.quaternion_alignment,
            cluster_id=result.cluster_id,
        )


class ClusterModel(BaseModel):
    id: int
    results: List[SearchResultModel]
    avg_resonance: float

    @classmethod
    def from_cluster(cls, cluster: Cluster) -> "ClusterModel":
        return cls(
            id=cluster.id,
            results=[SearchResultModel.from_result(r) for r in cluster.results],
            avg_resonance=cluster.avg_resonance,
        )


class SearchResponse(BaseModel):
    """
    Ranked and clustered search results.

    Example:
        {
            "query": "machine",
            "results": [{"memory": {...}, "resonance": 0.67, ...}],
            "clusters": [{"id": 0, "results": [...], "avg_resonance": 0.52}],
            "total_memories": 6,
            "timing_ms": 0.41
        }
    """
    query: str
    results: List[SearchResultModel] = Field(description="Results in rank order")
    clusters: List[ClusterModel] = Field(description="Clusters by descending average resonance")
    total_memories: int = Field(description="Size of the searched field")
    timing_ms: float = Field(description="Search + clustering latency in milliseconds")


class FieldMetricsResponse(BaseModel):
    """
    Field stability metrics.

    Status bands:
        - entropy: < 0.3 stable (sharp), ≥ 0.7 critical (noise)
        - coherence: > 0.7 stable (phase-locked), ≤ 0.3 critical
        - lyapunov: < 0 stable (converging), ≥ 0.5 critical (diverging)
    """
    memory_count: int
    entropy: float
    coherence: float
    lyapunov: float
    entropy_status: str
    coherence_status: str
    lyapunov_status: str


class CompressionResponse(BaseModel):
    raw_bytes: int
    quaternion_bytes: int
    prime_signature_bytes: int
    encoded_bytes: int
    compression_ratio: float
    space_savings: float = Field(description="Percent of raw bytes saved (negative = expansion)")
    bits_per_char: float
    information_density: float
    unique_primes: int
    avg_primes_per_memory: float


class HamiltonRequest(BaseModel):
    """
    Hamilton product calculator.

    Example:
        {
            "a": {"w": 0.707, "x": 0.707, "y": 0, "z": 0},
            "b": {"w": 0.707, "x": 0, "y": 0.707, "z": 0}
        }
    """
    a: QuaternionModel
    b: QuaternionModel
    tolerance: float = Field(
        default=0.01,
        gt=0.0,
        description="Commutator magnitude below which the pair is commutative"
    )


class HamiltonResponse(BaseModel):
    ab: QuaternionModel = Field(description="a·b (normalized)")
    ba: QuaternionModel = Field(description="b·a (normalized)")
    commutator: QuaternionModel = Field(description="a·b − b·a")
    commutator_magnitude: float
    dot: float
    is_commutative: bool


class SlerpRequest(BaseModel):
    a: QuaternionModel
    b: QuaternionModel
    t: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Interpolation parameter"
    )
    steps: Optional[int] = Field(
        default=None,
        ge=1,
        le=500,
        description="Also return the sampled path with this many steps"
    )


class SlerpResponse(BaseModel):
    result: QuaternionModel
    projection: Projection
    path: Optional[List[QuaternionModel]] = Field(
        default=None,
        description="steps + 1 samples from a to b"
    )


class ProjectRequest(BaseModel):
    quaternion: QuaternionModel


class BenchmarkRequest(BaseModel):
    """Stress test on a freshly generated random field."""
    memories: int = Field(
        default=1000,
        ge=1,
        le=10000,
        description="Number of random memories to generate"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducibility"
    )
    threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Entanglement strength counted as a linked pair"
    )
    load_into_field: bool = Field(
        default=False,
        description="Replace the stored field with the generated memories"
    )


class BenchmarkResultModel(BaseModel):
    operation: str
    count: int
    total_ms: float
    avg_ms: float
    ops_per_second: float


class BenchmarkResponse(BaseModel):
    results: List[BenchmarkResultModel]
    entangled_pairs: int
    total_operations: int
    total_ms: float


class HealthResponse(BaseModel):
    """
    Health check response.

    Reports API server status:
    - status: "healthy" or "degraded"
    - memory_count: Memories currently stored
    - uptime_seconds: Time since server start
    - version: API version string
    - timestamp: Current server time
    """
    status: str = Field(
        description="Server status: 'healthy' or 'degraded'"
    )
    memory_count: int = Field(
        description="Number of memories in the field"
    )
    uptime_seconds: float = Field(
        description="Server uptime in seconds"
    )
    version: str = Field(
        description="API version string"
    )
    timestamp: str = Field(
        description="Current server timestamp (ISO 8601)"
    )


class ErrorResponse(BaseModel):
    """
    Error response for failed requests.

    Error Types:
        - invalid_input: Malformed vector or parameter reaching the core
        - not_found: Unknown memory id
        - http_error: Other HTTP errors
        - internal_error: Unexpected server error
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "not_found",
                "message": "Memory not found: 3f2c...",
                "timestamp": "2025-11-14T12:34:56.789Z"
            }
        }
    )

    error: str = Field(
        description="Error type/category"
    )
    message: str = Field(
        description="Human-readable error description"
    )
    details: Optional[dict] = Field(
        default=None,
        description="Additional error context"
    )
    timestamp: str = Field(
        description="Error timestamp (ISO 8601)"
    )
