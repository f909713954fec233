"""
Retry with exponential backoff and jitter.

Wraps tenacity's AsyncRetrying with the pipeline's backoff formula and its
classification of transient provider failures.

Dependencies: tenacity
System role: Retry layer around embedding provider calls
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt
from tenacity.wait import wait_base

from course_rag.core.exceptions import CircuitOpenError, EmptyEmbeddingError, ValidationError

if TYPE_CHECKING:
    from course_rag.configs.resilience import ResilienceSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
NON_RETRYABLE_STATUS_CODES = frozenset({400, 401, 403, 404})

RETRYABLE_MESSAGE_MARKERS = (
    "quota",
    "rate limit",
    "rate-limit",
    "resource exhausted",
    "resource_exhausted",
    "unavailable",
    "timed out",
    "timeout",
    "connection reset",
    "econnreset",
)


def _status_code(exc: BaseException) -> int | None:
    """Read an HTTP-ish status code from the attributes SDK errors commonly use."""
    for candidate in (
        getattr(exc, "status_code", None),
        getattr(exc, "code", None),
        getattr(getattr(exc, "response", None), "status_code", None),
    ):
        if isinstance(candidate, int) and not isinstance(candidate, bool):
            return int(candidate)
    return None


def is_retryable_error(exc: BaseException) -> bool:
    """
    Decide whether a failed provider call is worth another attempt.

    Network failures, HTTP 429/5xx and quota or availability messages are
    transient. Validation failures, empty vectors, an open circuit, auth and
    not-found answers are not. Anything unrecognized is not retried.

    Args:
        exc: Exception raised by the attempt

    Returns:
        bool: True when the call should be retried
    """
    if isinstance(exc, (ValidationError, EmptyEmbeddingError, CircuitOpenError)):
        return False

    status = _status_code(exc)
    if status is not None:
        if status in NON_RETRYABLE_STATUS_CODES:
            return False
        if status == 429 or status >= 500:
            return True

    if isinstance(exc, (ConnectionError, TimeoutError, asyncio.TimeoutError)):
        return True

    message = str(exc).lower()
    return any(marker in message for marker in RETRYABLE_MESSAGE_MARKERS)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry limits and backoff shape. Delays are in seconds."""

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    backoff_multiplier: float = 2.0
    is_retryable: Callable[[BaseException], bool] = field(default=is_retryable_error)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must be >= 0")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be >= 1")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_settings(cls, settings: "ResilienceSettings") -> "RetryPolicy":
        """Build a policy from RETRY_* settings (milliseconds converted to seconds)."""
        return cls(
            max_retries=settings.max_retries,
            initial_delay=settings.initial_delay_ms / 1000,
            max_delay=settings.max_delay_ms / 1000,
            backoff_multiplier=settings.backoff_multiplier,
        )


def compute_backoff_delay(
    attempt: int,
    policy: RetryPolicy,
    rng: random.Random | None = None,
) -> float:
    """
    Delay before the retry that follows failed attempt number ``attempt``.

    ``min(initial * multiplier ** (attempt - 1), max_delay)`` scaled by a
    uniform jitter factor in [0.5, 1.5).

    Args:
        attempt: 1-based number of the attempt that just failed
        policy: Retry policy
        rng: Random source, injectable for deterministic tests

    Returns:
        float: Delay in seconds
    """
    rng = rng or random
    base = min(
        policy.initial_delay * policy.backoff_multiplier ** (attempt - 1),
        policy.max_delay,
    )
    return base * (0.5 + rng.random())


class BackoffWait(wait_base):
    """tenacity wait strategy applying ``compute_backoff_delay``."""

    def __init__(self, policy: RetryPolicy, rng: random.Random | None = None) -> None:
        self.policy = policy
        self.rng = rng

    def __call__(self, retry_state: RetryCallState) -> float:
        return compute_backoff_delay(retry_state.attempt_number, self.policy, self.rng)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    on_retry: Callable[[int, BaseException, float], Any] | None = None,
    rng: random.Random | None = None,
) -> T:
    """
    Run an async operation, retrying transient failures with backoff.

    At most ``max_retries + 1`` attempts are made. A non-retryable error, or
    the error of the last attempt, is re-raised unmodified.

    Args:
        operation: Zero-argument coroutine factory
        policy: Retry policy (defaults to RetryPolicy())
        sleep: Awaitable sleep, replaced in tests
        on_retry: Called as (attempt, error, delay) before each sleep
        rng: Random source for jitter

    Returns:
        The operation's result
    """
    policy = policy or RetryPolicy()

    def _before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            f"{__name__}:retry_async - Attempt {retry_state.attempt_number}/"
            f"{policy.max_attempts} failed, retrying in {delay:.2f}s",
            extra={
                "attempt": retry_state.attempt_number,
                "error_type": type(error).__name__,
                "delay_s": round(delay, 3),
            },
        )
        if on_retry is not None:
            on_retry(retry_state.attempt_number, error, delay)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=BackoffWait(policy, rng),
        retry=retry_if_exception(policy.is_retryable),
        before_sleep=_before_sleep,
        sleep=sleep,
        reraise=True,
    )
    return await retrying(operation)


async def retry_batch(
    operations: Sequence[Callable[[], Awaitable[T]]],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> list[T]:
    """
    Run all operations concurrently, each with its own retries. Order is preserved.

    The batch resolves only once every operation has finished. When one of
    them fails for good, the others are cancelled and awaited before the
    first failure (in operation order) is raised, so nothing keeps calling
    the provider after the batch has failed.
    """
    tasks = [asyncio.ensure_future(retry_async(op, policy, sleep=sleep)) for op in operations]
    if not tasks:
        return []

    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        unfinished = [task for task in tasks if not task.done()]
        for task in unfinished:
            task.cancel()
        if unfinished:
            await asyncio.gather(*unfinished, return_exceptions=True)

    for task in tasks:
        if not task.cancelled() and task.exception() is not None:
            raise task.exception()
    return [task.result() for task in tasks]


async def retry_batch_chunked(
    operations: Sequence[Callable[[], Awaitable[T]]],
    batch_size: int,
    policy: RetryPolicy | None = None,
    delay: float = 0.0,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> list[T]:
    """
    Run operations in sequential chunks of ``batch_size``.

    Each chunk runs concurrently through ``retry_batch``; ``delay`` seconds
    pass between chunks, not after the last one. A failed chunk stops the
    run, later chunks are never started.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    results: list[T] = []
    total_chunks = (len(operations) + batch_size - 1) // batch_size
    for number, start in enumerate(range(0, len(operations), batch_size), start=1):
        if start and delay > 0:
            await sleep(delay)
        chunk = operations[start:start + batch_size]
        results.extend(await retry_batch(chunk, policy, sleep=sleep))
        logger.debug(
            f"{__name__}:retry_batch_chunked - Chunk {number}/{total_chunks} done",
            extra={"chunk_size": len(chunk)},
        )
    return results
