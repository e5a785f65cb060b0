import asyncio
import logging
import time
from typing import Any, Callable, Coroutine, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitOpenError(Exception):
    """Raised when a call is refused because the circuit is open."""


class CircuitBreaker:
    """Stop calling a failing dependency for ``recovery_timeout`` seconds.

    After ``failure_threshold`` consecutive failures the breaker goes OPEN and
    rejects calls with :class:`CircuitOpenError`. Once the timeout has elapsed
    it moves to HALF_OPEN and lets calls through; ``half_open_max_successes``
    successes close it again, a single failure reopens it.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60,
        expected_exception: tuple = (Exception,),
        name: str = "CircuitBreaker",
        half_open_max_successes: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception
        self.name = name
        self._clock = clock

        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = "CLOSED"  # CLOSED, OPEN, HALF_OPEN
        self._lock = asyncio.Lock()
        self._success_count = 0
        self._half_open_max_successes = half_open_max_successes

    async def call(
        self, func: Callable[..., Coroutine[Any, Any, T]], *args, **kwargs
    ) -> T:
        async with self._lock:
            if self.state == "OPEN":
                if self._clock() - self.last_failure_time >= self.recovery_timeout:
                    self.state = "HALF_OPEN"
                    self._success_count = 0
                    logger.info("Circuit breaker '%s' is HALF_OPEN", self.name)
                else:
                    raise CircuitOpenError(f"Circuit breaker '{self.name}' is OPEN")

        try:
            result = await func(*args, **kwargs)
        except self.expected_exception:
            await self._on_failure()
            raise
        await self._on_success()
        return result

    async def _on_success(self) -> None:
        async with self._lock:
            if self.state == "HALF_OPEN":
                self._success_count += 1
                if self._success_count >= self._half_open_max_successes:
                    self.reset()
            else:
                self.failure_count = 0

    async def _on_failure(self) -> None:
        async with self._lock:
            self.failure_count += 1
            self.last_failure_time = self._clock()
            if self.state == "HALF_OPEN" or self.failure_count >= self.failure_threshold:
                if self.state != "OPEN":
                    logger.warning(
                        "Circuit breaker '%s' is OPEN after %d failures",
                        self.name,
                        self.failure_count,
                    )
                self.state = "OPEN"

    def reset(self) -> None:
        """Reset circuit breaker to CLOSED state."""
        self.failure_count = 0
        self._success_count = 0
        self.state = "CLOSED"
        logger.info("Circuit breaker '%s' is CLOSED", self.name)

    def get_state(self) -> str:
        return self.state
