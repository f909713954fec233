"""
Embedding generation.

EmbeddingClient turns texts into fixed-dimension vectors through a provider,
with a bounded query cache, rate-limited batching, retries and a circuit
breaker.
"""

from course_rag.core.embeddings.cache import EmbeddingCache
from course_rag.core.embeddings.client import EmbeddingClient
from course_rag.core.embeddings.provider import (
    EmbeddingProvider,
    FixedDimensionEmbeddings,
    GoogleEmbeddingProvider,
)

__all__ = [
    "EmbeddingCache",
    "EmbeddingClient",
    "EmbeddingProvider",
    "FixedDimensionEmbeddings",
    "GoogleEmbeddingProvider",
]
