"""Exceptions subpackage."""

from error_notifier.exceptions.exceptions import (
    CircuitOpenError,
    ConfigurationError,
    DeliveryError,
    ErrorNotifierError,
)

__all__ = [
    "CircuitOpenError",
    "ConfigurationError",
    "DeliveryError",
    "ErrorNotifierError",
]
