"""
Circuit breaker for async calls.

Stops hammering a failing provider: after ``failure_threshold`` consecutive
failures the circuit opens and calls fail fast with CircuitOpenError until
``reset_timeout`` elapses. The next call is then let through as a trial;
success closes the circuit, failure opens it again.

Dependencies: None
System role: Fail-fast guard in front of the embedding provider
"""

import asyncio
import functools
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from course_rag.core.exceptions import CircuitOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Consecutive-failure circuit breaker with an injectable monotonic clock."""

    def __init__(
        self,
        failure_threshold: int = 5,
        reset_timeout: float = 60.0,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize circuit breaker.

        Args:
            failure_threshold: Consecutive failures that open the circuit
            reset_timeout: Seconds the circuit stays open before a trial call
            name: Name used in logs and errors
            clock: Monotonic time source in seconds
        """
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if reset_timeout < 0:
            raise ValueError("reset_timeout must be >= 0")

        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.name = name
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._opened_at = 0.0
        self._trial_in_flight = False
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        """Current state, moving OPEN to HALF_OPEN once the timeout has passed."""
        if (
            self._state is CircuitState.OPEN
            and self._clock() - self._opened_at >= self.reset_timeout
        ):
            self._transition(CircuitState.HALF_OPEN)
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failures

    def _transition(self, new_state: CircuitState) -> None:
        if new_state is self._state:
            return
        logger.info(
            f"{__name__}:transition - Circuit '{self.name}' {self._state.value} -> {new_state.value}",
            extra={"circuit": self.name, "failures": self._failures},
        )
        self._state = new_state
        if new_state is CircuitState.OPEN:
            self._opened_at = self._clock()
        if new_state is not CircuitState.HALF_OPEN:
            self._trial_in_flight = False

    async def _before_call(self) -> None:
        async with self._lock:
            state = self.state
            if state is CircuitState.OPEN:
                remaining = self.reset_timeout - (self._clock() - self._opened_at)
                raise CircuitOpenError(self.name, max(remaining, 0.0))
            if state is CircuitState.HALF_OPEN:
                if self._trial_in_flight:
                    raise CircuitOpenError(self.name, 0.0)
                self._trial_in_flight = True

    async def _on_success(self) -> None:
        async with self._lock:
            self._failures = 0
            self._transition(CircuitState.CLOSED)

    async def _on_failure(self) -> None:
        async with self._lock:
            self._failures += 1
            if self._state is CircuitState.HALF_OPEN:
                self._transition(CircuitState.OPEN)
            elif self._failures >= self.failure_threshold:
                logger.warning(
                    f"{__name__}:on_failure - Opening circuit '{self.name}' after "
                    f"{self._failures} consecutive failures",
                    extra={"circuit": self.name, "failures": self._failures},
                )
                self._transition(CircuitState.OPEN)

    async def call(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """
        Invoke ``fn`` through the breaker.

        Raises:
            CircuitOpenError: Circuit is open (``fn`` is not called)
        """
        await self._before_call()
        try:
            result = await fn(*args, **kwargs)
        except Exception:
            await self._on_failure()
            raise
        await self._on_success()
        return result

    def wrap(self, fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        """Decorator form of ``call``."""

        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await self.call(fn, *args, **kwargs)

        return wrapper

    def reset(self) -> None:
        """Force the circuit closed and clear the failure count."""
        self._failures = 0
        self._transition(CircuitState.CLOSED)
