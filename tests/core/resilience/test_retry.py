"""
Test suite for retry with exponential backoff.

Tests error classification, the backoff formula, attempt limits and batch
helpers. Sleeps are recorded instead of awaited.

System role: Verification of the retry layer
"""

import asyncio
import random

import pytest

from course_rag.configs.resilience import ResilienceSettings
from course_rag.core.exceptions import (
    CircuitOpenError,
    EmbeddingAPIError,
    EmbeddingRateLimitError,
    EmptyEmbeddingError,
    EmptyTextError,
)
from course_rag.core.resilience import (
    RetryPolicy,
    compute_backoff_delay,
    is_retryable_error,
    retry_async,
    retry_batch,
    retry_batch_chunked,
)


class FlakyOperation:
    """Async callable failing a fixed number of times before succeeding."""

    def __init__(self, failures: int, error: Exception | None = None, result: str = "ok") -> None:
        self.failures = failures
        self.error = error or ConnectionError("connection reset by peer")
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result


class ResponseError(Exception):
    """SDK-style error exposing an HTTP response."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.response = type("Response", (), {"status_code": status_code})()


class TestIsRetryableError:
    """Test suite for is_retryable_error classification."""

    @pytest.mark.parametrize(
        "error",
        [
            EmbeddingRateLimitError(),
            EmbeddingAPIError("server error", status_code=503),
            ResponseError(500),
            ConnectionError("reset"),
            TimeoutError(),
            RuntimeError("429 Resource exhausted: quota exceeded"),
            RuntimeError("Service Unavailable"),
        ],
    )
    def test_transient_errors_should_be_retried(self, error):
        # Act / Assert
        assert is_retryable_error(error) is True

    @pytest.mark.parametrize(
        "error",
        [
            EmptyTextError(),
            EmptyEmbeddingError(),
            CircuitOpenError("embedding-provider", 10.0),
            EmbeddingAPIError("bad key", status_code=401),
            ResponseError(404),
            ValueError("malformed request"),
        ],
    )
    def test_permanent_errors_should_not_be_retried(self, error):
        # Act / Assert
        assert is_retryable_error(error) is False


class TestBackoff:
    """Test suite for RetryPolicy and compute_backoff_delay."""

    def test_delay_should_grow_exponentially_within_jitter(self):
        # Arrange
        policy = RetryPolicy(initial_delay=1.0, max_delay=10.0, backoff_multiplier=2.0)
        rng = random.Random(7)

        # Act
        delays = [compute_backoff_delay(attempt, policy, rng) for attempt in (1, 2, 3)]

        # Assert
        for attempt, delay in zip((1, 2, 3), delays):
            base = 2.0 ** (attempt - 1)
            assert 0.5 * base <= delay < 1.5 * base

    def test_delay_should_be_capped_by_max_delay(self):
        # Arrange
        policy = RetryPolicy(initial_delay=1.0, max_delay=10.0, backoff_multiplier=2.0)

        class FixedRandom:
            def random(self) -> float:
                return 0.5

        # Act
        delay = compute_backoff_delay(10, policy, FixedRandom())

        # Assert
        assert delay == 10.0

    def test_policy_from_settings_should_convert_milliseconds(self):
        # Arrange
        settings = ResilienceSettings(max_retries=5, initial_delay_ms=250, max_delay_ms=4000)

        # Act
        policy = RetryPolicy.from_settings(settings)

        # Assert
        assert policy.max_attempts == 6
        assert policy.initial_delay == 0.25
        assert policy.max_delay == 4.0

    def test_negative_retries_should_raise(self):
        # Act / Assert
        with pytest.raises(ValueError):
            RetryPolicy(max_retries=-1)


class TestRetryAsync:
    """Test suite for retry_async."""

    @pytest.mark.asyncio
    async def test_two_failures_should_succeed_on_third_attempt(self, recording_sleep):
        # Arrange
        operation = FlakyOperation(failures=2)
        seen = []

        # Act
        result = await retry_async(
            operation,
            RetryPolicy(max_retries=3),
            sleep=recording_sleep,
            on_retry=lambda attempt, error, delay: seen.append(attempt),
        )

        # Assert
        assert result == "ok"
        assert operation.calls == 3
        assert seen == [1, 2]
        assert len(recording_sleep.delays) == 2

    @pytest.mark.asyncio
    async def test_exhausted_retries_should_reraise_last_error(self, recording_sleep):
        # Arrange
        error = EmbeddingRateLimitError()
        operation = FlakyOperation(failures=10, error=error)

        # Act
        with pytest.raises(EmbeddingRateLimitError) as exc_info:
            await retry_async(operation, RetryPolicy(max_retries=3), sleep=recording_sleep)

        # Assert
        assert exc_info.value is error
        assert operation.calls == 4

    @pytest.mark.asyncio
    async def test_non_retryable_error_should_fail_immediately(self, recording_sleep):
        # Arrange
        operation = FlakyOperation(failures=1, error=EmbeddingAPIError("forbidden", status_code=403))

        # Act
        with pytest.raises(EmbeddingAPIError):
            await retry_async(operation, RetryPolicy(max_retries=3), sleep=recording_sleep)

        # Assert
        assert operation.calls == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_zero_retries_should_make_single_attempt(self, recording_sleep):
        # Arrange
        operation = FlakyOperation(failures=1)

        # Act / Assert
        with pytest.raises(ConnectionError):
            await retry_async(operation, RetryPolicy(max_retries=0), sleep=recording_sleep)
        assert operation.calls == 1


class TestRetryBatchChunked:
    """Test suite for retry_batch_chunked."""

    @pytest.mark.asyncio
    async def test_results_should_keep_order_and_pause_between_chunks(self, recording_sleep):
        # Arrange
        operations = [FlakyOperation(failures=0, result=str(i)) for i in range(5)]

        # Act
        results = await retry_batch_chunked(
            operations, batch_size=2, delay=0.5, sleep=recording_sleep
        )

        # Assert
        assert results == ["0", "1", "2", "3", "4"]
        assert recording_sleep.delays == [0.5, 0.5]

    @pytest.mark.asyncio
    async def test_invalid_batch_size_should_raise(self):
        # Act / Assert
        with pytest.raises(ValueError):
            await retry_batch_chunked([], batch_size=0)


class BlockedOperation:
    """Async callable that waits until cancelled."""

    def __init__(self) -> None:
        self.cancelled = False

    async def __call__(self) -> str:
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return "never"


class TestRetryBatch:
    """Test suite for retry_batch failure handling."""

    @pytest.mark.asyncio
    async def test_permanent_failure_should_cancel_siblings(self, recording_sleep):
        # Arrange
        failing = FlakyOperation(failures=1, error=EmbeddingAPIError("forbidden", status_code=403))
        blocked = [BlockedOperation(), BlockedOperation()]

        # Act
        with pytest.raises(EmbeddingAPIError):
            await retry_batch([blocked[0], failing, blocked[1]], RetryPolicy(), sleep=recording_sleep)

        # Assert
        assert failing.calls == 1
        assert all(op.cancelled for op in blocked)

    @pytest.mark.asyncio
    async def test_first_failure_in_operation_order_should_be_raised(self, recording_sleep):
        # Arrange
        first = FlakyOperation(failures=1, error=EmbeddingAPIError("first", status_code=400))
        second = FlakyOperation(failures=1, error=EmbeddingAPIError("second", status_code=401))

        # Act
        with pytest.raises(EmbeddingAPIError) as exc_info:
            await retry_batch([first, second], RetryPolicy(), sleep=recording_sleep)

        # Assert
        assert exc_info.value.message == "first"

    @pytest.mark.asyncio
    async def test_failed_chunk_should_skip_later_chunks(self, recording_sleep):
        # Arrange
        failing = FlakyOperation(failures=1, error=EmbeddingAPIError("forbidden", status_code=403))
        later = FlakyOperation(failures=0)

        # Act
        with pytest.raises(EmbeddingAPIError):
            await retry_batch_chunked([failing, later], batch_size=1, delay=0.5, sleep=recording_sleep)

        # Assert
        assert later.calls == 0
        assert recording_sleep.delays == []
