"""
Index store boundary layer.

Provides the chunk index stores used for ingestion and retrieval.
- PgVectorIndexStore: PostgreSQL + pgvector (production)
- InMemoryIndexStore: process-local store (development, tests)

Dependencies: sqlalchemy, pgvector, numpy
System role: Vector store adapter for course material retrieval
"""

from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.boundary.vdb.memory_store import InMemoryIndexStore
from course_rag.boundary.vdb.vector_schemas import (
    ChunkRow,
    MaterialContent,
    MaterialRecord,
    MaterialStats,
    SearchResult,
    VectorQuery,
)
from course_rag.boundary.vdb.vector_store_factory import get_index_store


__all__ = [
    "ChunkRow",
    "InMemoryIndexStore",
    "MaterialContent",
    "MaterialIndexStore",
    "MaterialRecord",
    "MaterialStats",
    "SearchResult",
    "VectorQuery",
    "get_index_store",
]
