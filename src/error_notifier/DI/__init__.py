"""Dependency injection."""

from error_notifier.DI.container import Container

__all__ = ["Container"]
