"""
Embedding provider boundary.

GoogleEmbeddingProvider wraps GoogleGenerativeAIEmbeddings with a fixed
output dimensionality and runs the blocking SDK call in a worker thread.

Dependencies: langchain_google_genai
System role: External embedding model adapter
"""

import asyncio
import logging
from typing import List, Protocol

from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Anything that can turn one text into one vector."""

    async def embed_content(self, text: str) -> list[float]:
        ...


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings with a fixed output dimensionality.

    The base class ignores output_dimensionality in the constructor, so every
    query call passes the configured dimension explicitly. The chunk index
    column is declared with that dimension.
    """

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/text-embedding-004",
        output_dimensionality: int = 768,
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Fixed dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings

        Note:
            text-embedding-004 supports at most 768 dimensions.
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        """Embed one text using the configured dimension unless overridden."""
        return super().embed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )


class GoogleEmbeddingProvider:
    """Async EmbeddingProvider backed by the Gemini embedding API."""

    def __init__(
        self,
        model: str = "models/text-embedding-004",
        dimension: int = 768,
        google_api_key: str | None = None,
        embeddings: GoogleGenerativeAIEmbeddings | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            model: Google embedding model ID
            dimension: Output dimensionality requested from the API
            google_api_key: API key; falls back to GOOGLE_API_KEY when empty
            embeddings: Preconfigured embeddings object (tests)
        """
        if embeddings is None:
            kwargs = {"google_api_key": google_api_key} if google_api_key else {}
            embeddings = FixedDimensionEmbeddings(
                model=model,
                output_dimensionality=dimension,
                **kwargs,
            )
        self._embeddings = embeddings
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={dimension}"
        )

    @classmethod
    def from_settings(cls, settings) -> "GoogleEmbeddingProvider":
        """Build from EmbeddingSettings."""
        return cls(
            model=settings.model,
            dimension=settings.dimension,
            google_api_key=settings.google_api_key or None,
        )

    async def embed_content(self, text: str) -> list[float]:
        vector = await asyncio.to_thread(self._embeddings.embed_query, text)
        return [float(v) for v in vector]
