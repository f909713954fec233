"""
Test suite for the embedding client and its query cache.

Tests caching, FIFO eviction, vector validation, batch ordering and pacing,
and the retry and circuit breaker integration. Uses the deterministic fake
provider from conftest.

System role: Verification of embedding generation
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from course_rag.configs.embedding import EmbeddingSettings
from course_rag.core.embeddings import EmbeddingCache, EmbeddingClient, GoogleEmbeddingProvider
from course_rag.core.exceptions import (
    CircuitOpenError,
    EmbeddingAPIError,
    EmbeddingDimensionError,
    EmbeddingRateLimitError,
    EmptyEmbeddingError,
    EmptyTextError,
)
from course_rag.core.resilience import CircuitBreaker, RetryPolicy


class StaticProvider:
    """Provider returning the same vector for every text."""

    def __init__(self, vector: list[float]) -> None:
        self.vector = vector
        self.calls = 0

    async def embed_content(self, text: str) -> list[float]:
        self.calls += 1
        return self.vector


class SlowFailingProvider:
    """Provider rejecting one text outright and answering 503 slowly for the rest."""

    def __init__(self, rejected: str) -> None:
        self.rejected = rejected
        self.calls: list[str] = []

    async def embed_content(self, text: str) -> list[float]:
        self.calls.append(text)
        if text == self.rejected:
            raise EmbeddingAPIError("invalid api key", status_code=401)
        await asyncio.sleep(0.01)
        raise EmbeddingAPIError("service unavailable", status_code=503)


class TestEmbeddingCache:
    """Test suite for EmbeddingCache."""

    def test_oldest_entry_should_be_evicted_first(self):
        # Arrange
        cache = EmbeddingCache(max_size=2)
        cache.put("a", [1.0])
        cache.put("b", [2.0])
        cache.get("a")

        # Act
        cache.put("c", [3.0])

        # Assert
        assert "a" not in cache
        assert "b" in cache and "c" in cache
        assert cache.stats() == {"size": 2, "max_size": 2}

    def test_updating_existing_key_should_not_evict(self):
        # Arrange
        cache = EmbeddingCache(max_size=2)
        cache.put("a", [1.0])
        cache.put("b", [2.0])

        # Act
        cache.put("a", [9.0])

        # Assert
        assert len(cache) == 2
        assert cache.get("a") == [9.0]

    def test_returned_vector_should_be_a_copy(self):
        # Arrange
        cache = EmbeddingCache()
        cache.put("a", [1.0, 2.0])

        # Act
        cache.get("a").append(3.0)

        # Assert
        assert cache.get("a") == [1.0, 2.0]

    def test_invalid_size_should_raise(self):
        # Act / Assert
        with pytest.raises(ValueError):
            EmbeddingCache(max_size=0)


class TestEmbeddingClientEmbed:
    """Test suite for EmbeddingClient.embed."""

    @pytest.mark.asyncio
    async def test_repeated_query_should_hit_cache(self, embedding_client, fake_provider):
        # Act
        first = await embedding_client.embed("binary search")
        second = await embedding_client.embed("binary search")

        # Assert
        assert first == second
        assert fake_provider.calls == ["binary search"]
        assert embedding_client.cache_stats()["size"] == 1

    @pytest.mark.asyncio
    async def test_clear_cache_should_force_provider_call(self, embedding_client, fake_provider):
        # Arrange
        await embedding_client.embed("graph")

        # Act
        embedding_client.clear_cache()
        await embedding_client.embed("graph")

        # Assert
        assert len(fake_provider.calls) == 2

    @pytest.mark.asyncio
    async def test_uncached_embed_should_not_use_cache(self, embedding_client, fake_provider):
        # Act
        await embedding_client.embed_uncached("tree")
        await embedding_client.embed_uncached("tree")

        # Assert
        assert len(fake_provider.calls) == 2
        assert "tree" not in embedding_client.cache

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n\t"])
    async def test_blank_text_should_raise_before_provider_call(
        self, embedding_client, fake_provider, text
    ):
        # Act / Assert
        with pytest.raises(EmptyTextError):
            await embedding_client.embed(text)
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_wrong_dimension_should_raise(self, embedding_settings):
        # Arrange
        client = EmbeddingClient(StaticProvider([0.1, 0.2]), settings=embedding_settings)

        # Act / Assert
        with pytest.raises(EmbeddingDimensionError) as exc_info:
            await client.embed("sort")
        assert (exc_info.value.expected, exc_info.value.actual) == (8, 2)

    @pytest.mark.asyncio
    async def test_empty_vector_should_not_be_retried(self, embedding_settings):
        # Arrange
        provider = StaticProvider([])
        client = EmbeddingClient(provider, settings=embedding_settings)

        # Act / Assert
        with pytest.raises(EmptyEmbeddingError):
            await client.embed("sort")
        assert provider.calls == 1

    @pytest.mark.asyncio
    async def test_rate_limit_should_be_retried(self, embedding_client, fake_provider, recording_sleep):
        # Arrange
        fake_provider.fail_next(EmbeddingRateLimitError(), EmbeddingRateLimitError())

        # Act
        vector = await embedding_client.embed("history")

        # Assert
        assert len(vector) == 8
        assert len(fake_provider.calls) == 3
        assert len(recording_sleep.delays) == 2

    @pytest.mark.asyncio
    async def test_open_circuit_should_stop_retries(
        self, fake_provider, embedding_settings, recording_sleep
    ):
        # Arrange
        breaker = CircuitBreaker(failure_threshold=2, reset_timeout=60.0, name="embedding-provider")
        client = EmbeddingClient(
            fake_provider,
            settings=embedding_settings,
            retry_policy=RetryPolicy(max_retries=5, initial_delay=0.0, max_delay=0.0),
            circuit_breaker=breaker,
            sleep=recording_sleep,
        )
        fake_provider.fail_next(*(ConnectionError("reset") for _ in range(5)))

        # Act / Assert
        with pytest.raises(CircuitOpenError):
            await client.embed("cell")
        assert len(fake_provider.calls) == 2


class TestEmbeddingClientBatch:
    """Test suite for EmbeddingClient.embed_batch."""

    @pytest.mark.asyncio
    async def test_empty_batch_should_return_empty_list(self, embedding_client, fake_provider):
        # Act / Assert
        assert await embedding_client.embed_batch([]) == []
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_batch_should_preserve_order(self, embedding_client):
        # Arrange
        texts = ["binary", "tree", "sort", "graph", "cell", "protein", "history"]

        # Act
        vectors = await embedding_client.embed_batch(texts)

        # Assert
        assert len(vectors) == len(texts)
        strongest = [max(range(8), key=vector.__getitem__) for vector in vectors]
        assert strongest == [0, 2, 3, 4, 5, 6, 7]

    @pytest.mark.asyncio
    async def test_blank_member_should_fail_before_any_call(self, embedding_client, fake_provider):
        # Act
        with pytest.raises(EmptyTextError) as exc_info:
            await embedding_client.embed_batch(["graph", "  ", "tree"])

        # Assert
        assert exc_info.value.details["index"] == 1
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_sub_batches_should_be_separated_by_delay(self, fake_provider, recording_sleep):
        # Arrange
        settings = EmbeddingSettings(dimension=8, batch_size=2, batch_delay_ms=500)
        client = EmbeddingClient(fake_provider, settings=settings, sleep=recording_sleep)

        # Act
        await client.embed_batch(["a", "b", "c", "d", "e"])

        # Assert
        assert recording_sleep.delays == [0.5, 0.5]
        assert fake_provider.calls == ["a", "b", "c", "d", "e"]

    @pytest.mark.asyncio
    async def test_batch_should_not_populate_cache(self, embedding_client):
        # Act
        await embedding_client.embed_batch(["graph", "tree"])

        # Assert
        assert len(embedding_client.cache) == 0


class TestGoogleEmbeddingProvider:
    """Test suite for GoogleEmbeddingProvider."""

    @pytest.mark.asyncio
    async def test_embed_content_should_delegate_to_embeddings(self):
        # Arrange
        embeddings = MagicMock()
        embeddings.embed_query.return_value = [1, 2, 3]
        provider = GoogleEmbeddingProvider(dimension=3, embeddings=embeddings)

        # Act
        vector = await provider.embed_content("binary search")

        # Assert
        assert vector == [1.0, 2.0, 3.0]
        embeddings.embed_query.assert_called_once_with("binary search")


class TestEmbeddingClientBatchFailure:
    """Test suite for embed_batch when a provider call fails for good."""

    @pytest.mark.asyncio
    async def test_failed_sub_batch_should_stop_all_provider_calls(self):
        # Arrange
        provider = SlowFailingProvider(rejected="bad")
        settings = EmbeddingSettings(dimension=8, batch_size=5, batch_delay_ms=0)
        policy = RetryPolicy(max_retries=3, initial_delay=0.001, max_delay=0.002)
        client = EmbeddingClient(provider, settings=settings, retry_policy=policy)

        # Act
        with pytest.raises(EmbeddingAPIError) as exc_info:
            await client.embed_batch(["bad", "a", "b", "c", "d", "e"])
        calls_at_failure = len(provider.calls)
        await asyncio.sleep(0.1)

        # Assert
        assert exc_info.value.status_code == 401
        assert calls_at_failure == 5
        assert len(provider.calls) == calls_at_failure
        assert "e" not in provider.calls
