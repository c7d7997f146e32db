"""Custom exceptions for configuration and webhook delivery."""

from __future__ import annotations


class ErrorNotifierError(Exception):
    """Base exception for error-notifier errors."""

    pass


class ConfigurationError(ErrorNotifierError):
    """Raised when the notifier is misconfigured (fatal, never retried)."""

    pass


class DeliveryError(ErrorNotifierError):
    """Raised when a webhook delivery attempt fails (retryable)."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body
        self.cause = cause


class CircuitOpenError(DeliveryError):
    """Raised when the circuit breaker is open and the call is short-circuited."""

    def __init__(self, message: str = "Circuit breaker is open") -> None:
        super().__init__(message)
