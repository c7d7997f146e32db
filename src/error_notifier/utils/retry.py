# -*- coding: utf-8 -*-
"""Retry with exponential backoff, jitter and a per-instance circuit breaker."""

from __future__ import annotations

import asyncio
import random
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Optional, TypeVar

import structlog

from error_notifier.exceptions import CircuitOpenError, ConfigurationError

T = TypeVar("T")

CIRCUIT_BREAKER_THRESHOLD = 5
CIRCUIT_BREAKER_RESET_SECONDS = 60.0


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Immutable retry settings. Delays are in milliseconds."""

    max_attempts: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30000
    jitter: bool = True

    def __post_init__(self) -> None:
        if not 1 <= self.max_attempts <= 5:
            raise ConfigurationError("max_attempts must be between 1 and 5")
        if self.base_delay_ms < 100:
            raise ConfigurationError("base_delay_ms must be at least 100ms")
        if self.max_delay_ms < self.base_delay_ms:
            raise ConfigurationError(
                "max_delay_ms must be greater than or equal to base_delay_ms"
            )


class RetryManager:
    """Run an async operation with bounded retries and a circuit breaker.

    One instance per provider: the breaker counters are private to it.
    After the failure counter reaches the threshold at the end of an
    exhausted call, the breaker opens and every call fails fast with
    CircuitOpenError until the reset window has elapsed.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the manager.

        Args:
            policy: Retry policy (defaults to RetryPolicy()).
            clock: Monotonic clock in seconds, used for the reset window.
            sleep: Awaitable sleep taking seconds.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._policy = policy or RetryPolicy()
        self._clock = clock
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._failure_count = 0
        self._circuit_open = False
        self._opened_at: float | None = None

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    @property
    def failure_count(self) -> int:
        return self._failure_count

    @property
    def is_circuit_open(self) -> bool:
        return self._circuit_open

    def reset_circuit_breaker(self) -> None:
        """Close the breaker and clear the failure counter."""
        self._circuit_open = False
        self._opened_at = None
        self._failure_count = 0

    def calculate_delay(self, attempt: int) -> float:
        """Return the delay in milliseconds before retrying after ``attempt`` (0-based)."""
        delay = float(self._policy.base_delay_ms * (2**attempt))
        if self._policy.jitter:
            delay *= random.uniform(0.75, 1.25)
        return min(delay, float(self._policy.max_delay_ms))

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: Callable[[int, Exception], None] | None = None,
    ) -> T:
        """Await ``operation`` up to ``max_attempts`` times.

        Args:
            operation: Zero-argument coroutine factory.
            on_retry: Called with the 1-based attempt number and the error
                after every failed attempt.

        Returns:
            The first successful result.

        Raises:
            CircuitOpenError: If the breaker is open; ``operation`` is not called.
            Exception: The last error raised by ``operation`` once attempts run out.
        """
        if self._circuit_open:
            opened_at = self._opened_at if self._opened_at is not None else self._clock()
            if self._clock() - opened_at < CIRCUIT_BREAKER_RESET_SECONDS:
                self._logger.debug("retry_circuit_open_rejected")
                raise CircuitOpenError()
            self._logger.info("circuit_breaker_reset", failure_count=self._failure_count)
            self.reset_circuit_breaker()

        max_attempts = self._policy.max_attempts
        last_error: Exception | None = None

        for attempt in range(max_attempts):
            try:
                result = await operation()
            except Exception as exc:
                last_error = exc
                self._failure_count += 1
                self._logger.warning(
                    "retry_attempt_failed",
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                if on_retry is not None:
                    on_retry(attempt + 1, exc)
                if attempt < max_attempts - 1:
                    delay_ms = self.calculate_delay(attempt)
                    await self._sleep(delay_ms / 1000.0)
                continue
            self._failure_count = 0
            return result

        if self._failure_count >= CIRCUIT_BREAKER_THRESHOLD:
            self._circuit_open = True
            self._opened_at = self._clock()
            self._logger.error(
                "circuit_breaker_opened",
                failure_count=self._failure_count,
                reset_seconds=CIRCUIT_BREAKER_RESET_SECONDS,
            )

        if last_error is None:  # pragma: no cover - max_attempts >= 1
            raise RuntimeError("Retry failed")
        raise last_error
