# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from error_notifier.clients.http import WebhookTransport, build_transport
from error_notifier.config import Settings, default_environment_sources, get_settings
from error_notifier.notifications.dispatcher import ErrorLogger
from error_notifier.notifications.fallback import ConsoleFallbackReporter


def _build_transport(settings: Settings) -> WebhookTransport:
    return build_transport(
        timeout_seconds=settings.transport.timeout_seconds,
        relay_url=settings.transport.relay_url,
    )


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, transport, fallback and ErrorLogger.

    Each Container instance owns its own objects; nothing is process-global.
    """

    config = providers.Callable(get_settings)

    transport = providers.Singleton(_build_transport, config)

    fallback_reporter = providers.Singleton(ConsoleFallbackReporter)

    environment_sources = providers.Callable(default_environment_sources)

    error_logger = providers.Singleton(
        ErrorLogger,
        settings=config,
        transport=transport,
        environment_sources=environment_sources,
        fallback=fallback_reporter,
    )
