# -*- coding: utf-8 -*-
"""ErrorLogger: capture, sanitize and fan out notifications to every provider."""

from __future__ import annotations

import asyncio
import traceback
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional

import structlog

from error_notifier.clients.http import WebhookTransport, build_transport
from error_notifier.config.config import Settings
from error_notifier.config.environment import (
    EnvironmentSource,
    default_environment_sources,
    resolve_environment,
)
from error_notifier.exceptions import ConfigurationError
from error_notifier.models.notification import CaptureContext, Notification, Severity
from error_notifier.notifications.fallback import ConsoleFallbackReporter
from error_notifier.notifications.formatter import MessageFormatter
from error_notifier.notifications.providers import (
    BaseNotificationProvider,
    DiscordProvider,
    SlackProvider,
)
from error_notifier.utils.retry import RetryManager, RetryPolicy
from error_notifier.utils.sanitizer import DataSanitizer

RetryManagerFactory = Callable[[RetryPolicy], RetryManager]
ContextProvider = Callable[[], Optional[CaptureContext]]


class ErrorLogger:
    """Forward exceptions and messages to the configured webhook providers.

    Each capture builds one Notification, sanitizes it, then sends it to all
    providers concurrently. A provider failing (after its retries, or with
    its circuit open) is logged and never affects the others, and capture
    calls never raise because of delivery problems. Misconfiguration raises
    ConfigurationError at construction and from configure().
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[WebhookTransport] = None,
        environment_sources: Optional[Sequence[EnvironmentSource]] = None,
        context_provider: Optional[ContextProvider] = None,
        retry_manager_factory: RetryManagerFactory = RetryManager,
        fallback: Optional[ConsoleFallbackReporter] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """
        Args:
            settings: Validated configuration.
            transport: HTTP primitive shared by providers. When None, an
                aiohttp transport is created (relayed if transport.relay_url
                is set) and closed by aclose().
            environment_sources: Ordered sources used when
                settings.app.environment is unset.
            context_provider: Returns URL/user-agent context for the current
                request, if any.
            retry_manager_factory: Builds one RetryManager per provider.
            fallback: Local reporter for undeliverable notifications.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).

        Raises:
            ConfigurationError: On invalid webhooks, or when enabled with no provider.
        """
        self._get_logger = get_logger
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._environment_sources = list(
            environment_sources
            if environment_sources is not None
            else default_environment_sources()
        )
        self._context_provider = context_provider
        self._retry_manager_factory = retry_manager_factory
        self._fallback = fallback or ConsoleFallbackReporter(get_logger=get_logger)
        self._formatter = MessageFormatter()
        self._owns_transport = transport is None
        self._transport: WebhookTransport = transport or build_transport(
            timeout_seconds=settings.transport.timeout_seconds,
            relay_url=settings.transport.relay_url,
            get_logger=get_logger,
        )
        self._environment_override: Optional[str] = None
        self._user_id: Optional[str] = None
        self._session_id: Optional[str] = None

        self._settings = settings
        self._environment = self._resolve_environment(settings)
        self._sanitizer = DataSanitizer(settings.sanitization.to_config())
        self._providers = self._build_providers(settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def environment(self) -> str:
        return self._environment

    @property
    def sanitizer(self) -> DataSanitizer:
        return self._sanitizer

    @property
    def providers(self) -> tuple[BaseNotificationProvider, ...]:
        return self._providers

    def _resolve_environment(self, settings: Settings) -> str:
        if self._environment_override:
            return self._environment_override
        if settings.app.environment:
            return settings.app.environment
        return resolve_environment(self._environment_sources)

    def _build_providers(self, settings: Settings) -> tuple[BaseNotificationProvider, ...]:
        policy = settings.retry.to_policy()
        common: dict[str, Any] = {
            "transport": self._transport,
            "formatter": self._formatter,
            "fallback": self._fallback,
            "get_logger": self._get_logger,
        }
        providers: list[BaseNotificationProvider] = []
        if settings.discord.configured:
            providers.append(
                DiscordProvider(
                    settings.discord.webhook_url,
                    username=settings.discord.username,
                    avatar_url=settings.discord.avatar_url,
                    retry_manager=self._retry_manager_factory(policy),
                    **common,
                )
            )
        if settings.slack.configured:
            providers.append(
                SlackProvider(
                    settings.slack.webhook_url,
                    channel=settings.slack.channel,
                    username=settings.slack.username,
                    retry_manager=self._retry_manager_factory(policy),
                    **common,
                )
            )
        if settings.enabled and not providers:
            raise ConfigurationError(
                "At least one provider (discord or slack) must be configured"
            )
        return tuple(providers)

    def configure(self, partial: Optional[Mapping[str, Any]] = None, **updates: Any) -> None:
        """Merge ``partial``/``updates`` into the settings and rebuild providers.

        Nested sections merge key by key, e.g.
        ``configure(retry={"max_attempts": 2}, enabled=False)``. The new
        settings, sanitizer and providers replace the old ones only once all
        of them were built successfully. An environment set through
        set_environment() is kept. The transport is not rebuilt, so
        ``transport`` changes only apply to a new ErrorLogger.

        Raises:
            ConfigurationError: If the merged configuration is invalid.
        """
        changes: dict[str, Any] = dict(partial or {})
        changes.update(updates)
        settings = self._settings.merged(changes)
        sanitizer = DataSanitizer(settings.sanitization.to_config())
        providers = self._build_providers(settings)
        environment = self._resolve_environment(settings)

        self._settings = settings
        self._sanitizer = sanitizer
        self._providers = providers
        self._environment = environment
        self._logger.info(
            "error_logger_configured",
            enabled=settings.enabled,
            providers=[p.name for p in providers],
            environment=environment,
        )

    def set_environment(self, environment: str) -> None:
        self._environment_override = environment
        self._environment = environment

    def set_user(self, user_id: Optional[str]) -> None:
        self._user_id = user_id

    def set_session(self, session_id: Optional[str]) -> None:
        self._session_id = session_id

    def set_context_provider(self, context_provider: Optional[ContextProvider]) -> None:
        self._context_provider = context_provider

    async def capture_exception(
        self,
        error: BaseException | str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Report an exception (or an error string) with ``error`` severity."""
        if not self._settings.enabled:
            return
        exc = Exception(error) if isinstance(error, str) else error
        message = str(exc) or type(exc).__name__
        await self._capture(
            message,
            Severity.ERROR,
            metadata,
            stack=_format_stack(exc),
        )

    async def capture_message(
        self,
        message: str,
        severity: Severity | str = Severity.INFO,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Report a plain message."""
        if not self._settings.enabled:
            return
        await self._capture(message, severity, metadata)

    async def _capture(
        self,
        message: str,
        severity: Severity | str,
        metadata: Optional[Mapping[str, Any]],
        *,
        stack: Optional[str] = None,
    ) -> None:
        context = self._current_context()
        try:
            notification = Notification.create(
                message,
                severity,
                stack=stack,
                metadata=dict(metadata) if metadata is not None else None,
                environment=self._environment,
                url=context.url if context else None,
                user_agent=context.user_agent if context else None,
                user_id=self._user_id,
                session_id=self._session_id,
            )
        except ValueError as exc:
            self._logger.warning(
                "capture_invalid_notification",
                error_message=str(exc),
            )
            return
        await self._dispatch(notification.sanitized(self._sanitizer.sanitize))

    def _current_context(self) -> Optional[CaptureContext]:
        if self._context_provider is None:
            return None
        try:
            return self._context_provider()
        except Exception as exc:
            self._logger.warning(
                "capture_context_failed",
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            return None

    async def _dispatch(self, notification: Notification) -> None:
        providers = self._providers
        self._logger.debug(
            "notification_dispatch",
            notification_severity=notification.severity.value,
            notification_providers_count=len(providers),
        )
        results = await asyncio.gather(
            *(self._send_isolated(provider, notification) for provider in providers),
            return_exceptions=True,
        )
        self._logger.debug(
            "notification_dispatch_complete",
            notification_delivered_count=sum(1 for r in results if r is True),
            notification_providers_count=len(providers),
        )

    async def _send_isolated(
        self,
        provider: BaseNotificationProvider,
        notification: Notification,
    ) -> bool:
        try:
            await provider.send(notification)
        except Exception as exc:
            self._logger.error(
                "provider_delivery_failed",
                provider=provider.name,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            return False
        return True

    async def aclose(self) -> None:
        """Close the transport if this logger created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> ErrorLogger:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()


def _format_stack(exc: BaseException) -> str:
    if exc.__traceback__ is None:
        return f"{type(exc).__name__}: {exc}"
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()
