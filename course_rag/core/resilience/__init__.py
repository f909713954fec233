"""
Resilience utilities.

Retry with exponential backoff and jitter, plus a circuit breaker, both
usable around any async callable.
"""

from course_rag.core.resilience.circuit_breaker import CircuitBreaker, CircuitState
from course_rag.core.resilience.retry import (
    BackoffWait,
    RetryPolicy,
    compute_backoff_delay,
    is_retryable_error,
    retry_async,
    retry_batch,
    retry_batch_chunked,
)

__all__ = [
    "BackoffWait",
    "CircuitBreaker",
    "CircuitState",
    "RetryPolicy",
    "compute_backoff_delay",
    "is_retryable_error",
    "retry_async",
    "retry_batch",
    "retry_batch_chunked",
]
