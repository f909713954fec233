"""
Retrieval over the chunk index.

Exports: SearchEngine, SearchResult and the vector helpers.
"""

from course_rag.boundary.vdb.vector_schemas import SearchResult
from course_rag.core.retrieval.search_engine import SearchEngine
from course_rag.core.retrieval.similarity import (
    clamp_similarity,
    coerce_vector,
    cosine_similarity,
    parse_vector_literal,
    to_vector_literal,
)

__all__ = [
    "SearchEngine",
    "SearchResult",
    "clamp_similarity",
    "coerce_vector",
    "cosine_similarity",
    "parse_vector_literal",
    "to_vector_literal",
]
