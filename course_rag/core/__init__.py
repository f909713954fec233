"""
Core business logic module.

Contains extraction, chunking, embedding, retrieval and resilience logic plus
the exception hierarchy. Submodules are imported directly, e.g.
``from course_rag.core.retrieval import SearchEngine``.
"""

from course_rag.core.exceptions import (
    ChunkNotFoundError,
    CircuitOpenError,
    CourseRagError,
    DocumentProcessingError,
    EmbeddingAPIError,
    EmbeddingDimensionError,
    EmbeddingError,
    EmbeddingRateLimitError,
    EmptyEmbeddingError,
    EmptyQueryError,
    EmptyTextError,
    ExtractionError,
    MaterialNotFoundError,
    RetrievalError,
    ValidationError,
    VectorStoreError,
)

__all__ = [
    "ChunkNotFoundError",
    "CircuitOpenError",
    "CourseRagError",
    "DocumentProcessingError",
    "EmbeddingAPIError",
    "EmbeddingDimensionError",
    "EmbeddingError",
    "EmbeddingRateLimitError",
    "EmptyEmbeddingError",
    "EmptyQueryError",
    "EmptyTextError",
    "ExtractionError",
    "MaterialNotFoundError",
    "RetrievalError",
    "ValidationError",
    "VectorStoreError",
]
