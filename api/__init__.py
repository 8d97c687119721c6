"""
Memory Field API Module

REST API over an in-memory quaternionic memory field.

This package provides:
- FastAPI server with async endpoints
- MemoryField: the process-local collection the API owns
- Pydantic schemas for request/response validation
- Error handling and request logging

Components:
    - server: FastAPI application with endpoints
    - field: Memory collection and search/metrics over it
    - schemas: Pydantic models for API contracts

Usage:
    # Start API server
    from api.server import app
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Use the field directly
    from api.field import MemoryField
    field = MemoryField()
    field.add("machine learning")
    report = field.search("machine")

Environment Variables:
    API_HOST: Server host (default: 0.0.0.0)
    API_PORT: Server port (default: 8000)
    CORS_ORIGINS: Allowed CORS origins (comma-separated)
    QMF_SEED_MEMORIES: Random memories generated on startup
    QMF_RANDOM_SEED: Seed for generated memories

Quick Start:
    export QMF_SEED_MEMORIES=200
    uvicorn api.server:app --host 0.0.0.0 --port 8000
"""

from api.field import MemoryField
from api.schemas import (
    EncodeRequest,
    EncodeResponse,
    MemoryCreateRequest,
    MemoryResponse,
    MemoryListResponse,
    SearchRequest,
    SearchResponse,
    FieldMetricsResponse,
    CompressionResponse,
    HamiltonRequest,
    HamiltonResponse,
    SlerpRequest,
    SlerpResponse,
    HealthResponse,
    ErrorResponse,
)

__version__ = "1.0.0"

__all__ = [
    "MemoryField",
    # Schemas
    "EncodeRequest",
    "EncodeResponse",
    "MemoryCreateRequest",
    "MemoryResponse",
    "MemoryListResponse",
    "SearchRequest",
    "SearchResponse",
    "FieldMetricsResponse",
    "CompressionResponse",
    "HamiltonRequest",
    "HamiltonResponse",
    "SlerpRequest",
    "SlerpResponse",
    "HealthResponse",
    "ErrorResponse",
]
