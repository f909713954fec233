"""
Embedding client.

Validates input, consults the query cache and calls the provider through the
circuit breaker and retry policy. Batches are split into rate-limited
sub-batches whose members run concurrently.

Dependencies: course_rag.core.resilience, course_rag.core.embeddings
System role: Single entry point for all embedding generation
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from course_rag.configs.embedding import EmbeddingSettings
from course_rag.core.embeddings.cache import EmbeddingCache
from course_rag.core.embeddings.provider import EmbeddingProvider
from course_rag.core.exceptions import (
    EmbeddingDimensionError,
    EmptyEmbeddingError,
    EmptyTextError,
)
from course_rag.core.resilience import CircuitBreaker, RetryPolicy, retry_async, retry_batch_chunked
from course_rag.observability.log_utils import elapsed_ms

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """
    Generates fixed-dimension embeddings with caching, batching and retries.

    The cache and batching state belong to the instance, so tests and
    services each get their own.
    """

    def __init__(
        self,
        provider: EmbeddingProvider,
        settings: EmbeddingSettings | None = None,
        cache: EmbeddingCache | None = None,
        retry_policy: RetryPolicy | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize embedding client.

        Args:
            provider: Embedding provider
            settings: Embedding settings (defaults from environment)
            cache: Query cache (a new one sized by settings if omitted)
            retry_policy: Retry policy for each provider call
            circuit_breaker: Optional breaker shared by all provider calls
            sleep: Awaitable sleep used for batch pacing and retry backoff
        """
        settings = settings or EmbeddingSettings()
        self._provider = provider
        self.dimension = settings.dimension
        self.batch_size = settings.batch_size
        self.batch_delay = settings.batch_delay_ms / 1000
        self.cache = cache if cache is not None else EmbeddingCache(settings.cache_max_size)
        self.retry_policy = retry_policy or RetryPolicy()
        self.circuit_breaker = circuit_breaker
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings,
        provider: EmbeddingProvider | None = None,
    ) -> "EmbeddingClient":
        """
        Build a client from the aggregated Settings.

        Args:
            settings: course_rag.configs.Settings
            provider: Provider override (defaults to the Gemini provider)
        """
        if provider is None:
            from course_rag.core.embeddings.provider import GoogleEmbeddingProvider

            provider = GoogleEmbeddingProvider.from_settings(settings.embedding)

        resilience = settings.resilience
        breaker = None
        if resilience.circuit_breaker_enabled:
            breaker = CircuitBreaker(
                failure_threshold=resilience.circuit_failure_threshold,
                reset_timeout=resilience.circuit_reset_timeout_ms / 1000,
                name="embedding-provider",
            )
        return cls(
            provider=provider,
            settings=settings.embedding,
            retry_policy=RetryPolicy.from_settings(resilience),
            circuit_breaker=breaker,
        )

    @staticmethod
    def _require_text(text: str, index: int | None = None) -> None:
        if not isinstance(text, str) or not text.strip():
            raise EmptyTextError(index)

    def _validate_vector(self, vector: Sequence[float] | None) -> list[float]:
        if not vector:
            raise EmptyEmbeddingError()
        if len(vector) != self.dimension:
            raise EmbeddingDimensionError(self.dimension, len(vector))
        return [float(v) for v in vector]

    async def _call_provider(self, text: str) -> list[float]:
        vector = await self._provider.embed_content(text)
        return self._validate_vector(vector)

    def _attempt(self, text: str) -> Callable[[], Awaitable[list[float]]]:
        """One provider call for ``text``, routed through the circuit breaker when configured."""

        async def attempt() -> list[float]:
            if self.circuit_breaker is not None:
                return await self.circuit_breaker.call(self._call_provider, text)
            return await self._call_provider(text)

        return attempt

    async def _embed_with_resilience(self, text: str) -> list[float]:
        return await retry_async(self._attempt(text), self.retry_policy, sleep=self._sleep)

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single text, using the cache.

        Raises:
            EmptyTextError: Text is empty or whitespace
            EmptyEmbeddingError: Provider returned no values
            EmbeddingDimensionError: Provider returned the wrong dimension
        """
        self._require_text(text)

        cached = self.cache.get(text)
        if cached is not None:
            logger.debug(f"{__name__}:embed - Cache hit")
            return cached

        vector = await self._embed_with_resilience(text)
        self.cache.put(text, vector)
        return vector

    async def embed_uncached(self, text: str) -> list[float]:
        """Embed a single text without reading or writing the cache."""
        self._require_text(text)
        return await self._embed_with_resilience(text)

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed many texts, preserving order.

        Texts are sent in sub-batches of ``batch_size``; calls inside a
        sub-batch run concurrently and ``batch_delay`` separates sub-batches.
        One failing text fails the whole batch once its retries are spent;
        the rest of its sub-batch is cancelled and later sub-batches never run.
        The query cache is not touched.

        Raises:
            EmptyTextError: Any text is empty (before any provider call)
        """
        if not texts:
            return []
        for index, text in enumerate(texts):
            self._require_text(text, index)

        start = time.perf_counter()
        vectors = await retry_batch_chunked(
            [self._attempt(text) for text in texts],
            batch_size=self.batch_size,
            policy=self.retry_policy,
            delay=self.batch_delay,
            sleep=self._sleep,
        )
        total_batches = (len(texts) + self.batch_size - 1) // self.batch_size

        logger.info(
            f"{__name__}:embed_batch - Embedded {len(vectors)} texts",
            extra={"text_count": len(vectors), "batches": total_batches, "duration_ms": elapsed_ms(start)},
        )
        return vectors

    def cache_stats(self) -> dict[str, int]:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()
