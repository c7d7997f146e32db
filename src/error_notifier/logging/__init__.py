"""Logging setup."""

from error_notifier.logging.config import configure_logging

__all__ = ["configure_logging"]
