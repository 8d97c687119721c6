"""
FastAPI Server for the Quaternionic Memory Field

REST API over an in-memory field of prime-harmonic quaternion memories.
Provides endpoints for encoding, storage, resonance search, field
diagnostics and the quaternion calculator.

Architecture:
    - Async FastAPI server with CORS support
    - One MemoryField per process (created on startup)
    - Request validation via Pydantic schemas
    - Core input errors mapped to 400, unknown ids to 404
    - Structured logging

Endpoints:
    - GET    /v1/health               - Health check and readiness probe
    - GET    /v1/memories             - List stored memories (newest first)
    - POST   /v1/memories             - Encode and store a memory
    - GET    /v1/memories/{id}        - Fetch one memory
    - DELETE /v1/memories/{id}        - Delete one memory
    - DELETE /v1/memories             - Clear the field
    - POST   /v1/memories/random      - Replace the field with random memories
    - POST   /v1/encode               - Encode text without storing it
    - POST   /v1/search               - Ranked + clustered resonance search
    - GET    /v1/metrics              - Entropy, coherence, Lyapunov
    - GET    /v1/metrics/compression  - Encoded vs raw footprint
    - POST   /v1/algebra/hamilton     - Hamilton products and commutator
    - POST   /v1/algebra/slerp        - Spherical interpolation
    - POST   /v1/algebra/project      - Stereographic projection
    - POST   /v1/benchmark            - Stress test on a random field

Usage:
    # Development server
    uvicorn api.server:app --host 0.0.0.0 --port 8000 --reload

Environment Variables:
    API_HOST: Server host (default: 0.0.0.0)
    API_PORT: Server port (default: 8000)
    CORS_ORIGINS: Allowed CORS origins (comma-separated, default: *)
    QMF_SEED_MEMORIES: Random memories to generate on startup (default: 0)
    QMF_RANDOM_SEED: Seed for generated memories (default: unseeded)
    QMF_MAX_MEMORIES: Cap on stored memories (default: unlimited)
    QMF_MAX_RESULTS, QMF_MIN_RESONANCE, QMF_ALPHA, QMF_BETA,
    QMF_CLUSTER_THRESHOLD, QMF_ENABLE_CLUSTERING: Default search options
"""

import os
import random
import time
import logging
from datetime import datetime, timezone
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qmf import (
    InvalidInputError,
    commutator,
    dot,
    encode_text,
    hamilton_product,
    magnitude,
    slerp,
    slerp_path,
)
from qmf.benchmark import run_benchmark
from qmf.search import SearchOptions

from api.schemas import (
    BenchmarkRequest,
    BenchmarkResponse,
    BenchmarkResultModel,
    ClusterModel,
    CompressionResponse,
    EncodeRequest,
    EncodeResponse,
    ErrorResponse,
    FieldMetricsResponse,
    HamiltonRequest,
    HamiltonResponse,
    HealthResponse,
    MemoryCreateRequest,
    MemoryListResponse,
    MemoryResponse,
    ProjectRequest,
    Projection,
    QuaternionModel,
    RandomMemoriesRequest,
    SearchRequest,
    SearchResponse,
    SearchResultModel,
    SlerpRequest,
    SlerpResponse,
)
from api.field import MemoryField

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Process-wide field (created on startup)
memory_field: Optional[MemoryField] = None
startup_time: Optional[float] = None

# API version
API_VERSION = "1.0.0"


def _timestamp() -> str:
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown logic.

    Startup:
        - Read search defaults and field settings from the environment
        - Create the memory field
        - Optionally pre-populate it with random memories

    Shutdown:
        - Drop the field
        - Log shutdown message
    """
    global memory_field, startup_time

    logger.info("=" * 60)
    logger.info("Quaternionic Memory Field API - Startup")
    logger.info("=" * 60)

    try:
        options = SearchOptions.from_env()
        seed = _optional_int('QMF_RANDOM_SEED')
        max_memories = _optional_int('QMF_MAX_MEMORIES')
        seed_memories = _optional_int('QMF_SEED_MEMORIES') or 0

        logger.info(f"Search defaults: {options}")
        logger.info(f"Random seed: {seed}")
        logger.info(f"Memory cap: {max_memories if max_memories is not None else 'unlimited'}")

        memory_field = MemoryField(
            options=options,
            rng=random.Random(seed),
            max_memories=max_memories,
        )
        if seed_memories > 0:
            memory_field.generate(seed_memories)

        startup_time = time.time()
        logger.info(f"Memory field ready ({len(memory_field)} memories)")

    except (InvalidInputError, ValueError) as e:
        logger.error(f"Failed to configure memory field: {e}", exc_info=True)
        raise RuntimeError(f"Memory field initialization failed: {e}")

    logger.info("=" * 60)

    yield  # Server is running

    # Shutdown
    logger.info("Shutting down server...")
    memory_field = None
    logger.info("Shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Quaternionic Memory Field API",
    description=(
        "REST API for a prime-harmonic semantic memory field. "
        "Text is encoded as unit quaternions plus prime signatures, "
        "recalled by resonance and grouped by entanglement."
    ),
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware configuration
cors_origins = os.getenv('CORS_ORIGINS', '*').split(',')
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with structured error response."""
    error = "not_found" if exc.status_code == status.HTTP_404_NOT_FOUND else "http_error"
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error,
            message=str(exc.detail),
            timestamp=_timestamp()
        ).model_dump()
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    """Malformed input that got past schema validation and was caught by the core."""
    logger.warning(f"Invalid input on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="invalid_input",
            message=str(exc),
            timestamp=_timestamp()
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with sanitized error response."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="internal_error",
            message="An unexpected error occurred. Please try again later.",
            timestamp=_timestamp()
        ).model_dump()
    )


# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Duration: {duration_ms:.2f}ms"
    )

    return response


def _require_field() -> MemoryField:
    if memory_field is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Memory field not initialized"
        )
    return memory_field


# API Endpoints

@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint - points at the docs."""
    return {
        "message": "Quaternionic Memory Field API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/v1/health"
    }


@app.get(
    "/v1/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check API server health and field readiness"
)
async def health_check():
    """
    Health check endpoint for load balancers and monitoring.

    Status Codes:
        200: Server healthy and field ready
        503: Server degraded (field not initialized)
    """
    ready = memory_field is not None
    uptime = time.time() - startup_time if startup_time else 0.0

    response = HealthResponse(
        status="healthy" if ready else "degraded",
        memory_count=len(memory_field) if ready else 0,
        uptime_seconds=uptime,
        version=API_VERSION,
        timestamp=_timestamp()
    )

    status_code = status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content=response.model_dump()
    )


@app.get(
    "/v1/memories",
    response_model=MemoryListResponse,
    summary="List Memories"
)
async def list_memories():
    memories = _require_field().list()
    return MemoryListResponse(
        memories=[MemoryResponse.from_memory(m) for m in memories],
        count=len(memories)
    )


@app.post(
    "/v1/memories",
    response_model=MemoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Store Memory",
    description="Encode text and store it at the front of the field"
)
async def create_memory(request: MemoryCreateRequest):
    """
    Encode and store a memory.

    Raises:
        409: A memory with the requested id already exists

    Example Request:
        {"content": "machine learning algorithms"}
    """
    field = _require_field()
    try:
        memory = field.add(request.content, memory_id=request.id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Memory id already exists: {request.id}"
        )
    return MemoryResponse.from_memory(memory)


@app.post(
    "/v1/memories/random",
    response_model=MemoryListResponse,
    summary="Generate Random Field",
    description="Replace the stored field with randomly generated memories"
)
async def generate_memories(request: RandomMemoriesRequest):
    memories = _require_field().generate(request.count)
    return MemoryListResponse(
        memories=[MemoryResponse.from_memory(m) for m in memories],
        count=len(memories)
    )


@app.get(
    "/v1/memories/{memory_id}",
    response_model=MemoryResponse,
    summary="Get Memory"
)
async def get_memory(memory_id: str):
    try:
        memory = _require_field().get(memory_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Memory not found: {memory_id}"
        )
    return MemoryResponse.from_memory(memory)


@app.delete(
    "/v1/memories/{memory_id}",
    response_model=MemoryResponse,
    summary="Delete Memory"
)
async def delete_memory(memory_id: str):
    try:
        memory = _require_field().delete(memory_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Memory not found: {memory_id}"
        )
    return MemoryResponse.from_memory(memory)


@app.delete(
    "/v1/memories",
    summary="Clear Field"
)
async def clear_memories():
    removed = _require_field().clear()
    return {"removed": removed}


@app.post(
    "/v1/encode",
    response_model=EncodeResponse,
    summary="Encode Text",
    description="Encode text to a quaternion and prime signature without storing it"
)
async def encode(request: EncodeRequest):
    encoded = encode_text(request.text)
    return EncodeResponse(
        text=request.text,
        quaternion=QuaternionModel.from_quaternion(encoded.quaternion),
        prime_signature=list(encoded.prime_signature),
        projection=Projection.from_quaternion(encoded.quaternion)
    )


@app.post(
    "/v1/search",
    response_model=SearchResponse,
    summary="Resonance Search",
    description="Rank stored memories by resonance and cluster them by entanglement"
)
async def search_memories(request: SearchRequest):
    """
    Resonance search over the field.

    Example Request:
        {
            "query": "machine learning",
            "max_results": 10,
            "cluster_threshold": 0.3
        }

    Example Response:
        {
            "query": "machine learning",
            "results": [{"memory": {...}, "resonance": 1.0, ...}],
            "clusters": [{"id": 0, "results": [...], "avg_resonance": 0.71}],
            "total_memories": 6,
            "timing_ms": 0.38
        }
    """
    field = _require_field()
    report = field.search(request.query, request.to_options())

    return SearchResponse(
        query=request.query,
        results=[SearchResultModel.from_result(r) for r in report.results],
        clusters=[ClusterModel.from_cluster(c) for c in report.clusters],
        total_memories=len(field),
        timing_ms=report.timing_ms
    )


@app.get(
    "/v1/metrics",
    response_model=FieldMetricsResponse,
    summary="Field Stability Metrics"
)
async def field_metrics():
    return FieldMetricsResponse(**_require_field().metrics())


@app.get(
    "/v1/metrics/compression",
    response_model=CompressionResponse,
    summary="Compression Metrics"
)
async def compression_metrics():
    return CompressionResponse(**_require_field().compression())


@app.post(
    "/v1/algebra/hamilton",
    response_model=HamiltonResponse,
    summary="Hamilton Product Calculator",
    description="Both products, their commutator and the commutativity classification"
)
async def hamilton(request: HamiltonRequest):
    a = request.a.to_quaternion()
    b = request.b.to_quaternion()
    comm = commutator(a, b)
    comm_mag = magnitude(comm)

    return HamiltonResponse(
        ab=QuaternionModel.from_quaternion(hamilton_product(a, b)),
        ba=QuaternionModel.from_quaternion(hamilton_product(b, a)),
        commutator=QuaternionModel.from_quaternion(comm),
        commutator_magnitude=comm_mag,
        dot=dot(a, b),
        is_commutative=comm_mag < request.tolerance
    )


@app.post(
    "/v1/algebra/slerp",
    response_model=SlerpResponse,
    summary="Spherical Interpolation"
)
async def interpolate(request: SlerpRequest):
    a = request.a.to_quaternion()
    b = request.b.to_quaternion()
    result = slerp(a, b, request.t)

    path = None
    if request.steps is not None:
        path = [QuaternionModel.from_quaternion(q) for q in slerp_path(a, b, request.steps)]

    return SlerpResponse(
        result=QuaternionModel.from_quaternion(result),
        projection=Projection.from_quaternion(result),
        path=path
    )


@app.post(
    "/v1/algebra/project",
    response_model=Projection,
    summary="Stereographic Projection"
)
async def project(request: ProjectRequest):
    return Projection.from_quaternion(request.quaternion.to_quaternion())


@app.post(
    "/v1/benchmark",
    response_model=BenchmarkResponse,
    summary="Stress Test",
    description="Time generation, Hamilton, resonance and entanglement on a random field"
)
async def benchmark(request: BenchmarkRequest):
    report = run_benchmark(
        request.memories,
        rng=random.Random(request.seed),
        threshold=request.threshold
    )

    if request.load_into_field:
        _require_field().replace(report.memories)

    return BenchmarkResponse(
        results=[BenchmarkResultModel(**vars(r)) for r in report.results],
        entangled_pairs=report.entangled_pairs,
        total_operations=report.total_operations,
        total_ms=report.total_ms
    )


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    host = os.getenv('API_HOST', '0.0.0.0')
    port = int(os.getenv('API_PORT', '8000'))

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "api.server:app",
        host=host,
        port=port,
        reload=True,
        log_level="info"
    )
