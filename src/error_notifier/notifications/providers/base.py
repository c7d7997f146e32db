# -*- coding: utf-8 -*-
"""Base webhook provider."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import structlog
from structlog.contextvars import bound_contextvars

from error_notifier.clients.http import TransportResponse, WebhookTransport
from error_notifier.exceptions import ConfigurationError, DeliveryError
from error_notifier.models.notification import Notification
from error_notifier.notifications.fallback import ConsoleFallbackReporter
from error_notifier.notifications.formatter import MessageFormatter
from error_notifier.utils.retry import RetryManager


class BaseNotificationProvider(ABC):
    """Format one notification and deliver it to one webhook.

    Subclasses supply the URL check, the payload and, when the platform has
    one, an acknowledgement check. Delivery runs through the provider's own
    RetryManager; once retries are exhausted the fallback reporter is
    written to before the error is re-raised.
    """

    name: str = "base"

    def __init__(
        self,
        webhook_url: Optional[str],
        *,
        transport: WebhookTransport,
        retry_manager: RetryManager,
        formatter: Optional[MessageFormatter] = None,
        fallback: Optional[ConsoleFallbackReporter] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """
        Args:
            webhook_url: Platform webhook URL; validated immediately.
            transport: HTTP primitive (direct or relayed).
            retry_manager: Retry/circuit-breaker owned by this provider.
            formatter: Payload builder.
            fallback: Local reporter used after final failure.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).

        Raises:
            ConfigurationError: If the webhook URL is missing or invalid.
        """
        self.webhook_url = webhook_url or ""
        self._transport = transport
        self._retry_manager = retry_manager
        self._formatter = formatter or MessageFormatter()
        self._fallback = fallback or ConsoleFallbackReporter()
        self._logger = get_logger(logger_name or self.__class__.__name__)

        if not self.validate_config():
            raise ConfigurationError(f"Invalid {self.name} configuration")

    @property
    def retry_manager(self) -> RetryManager:
        return self._retry_manager

    @abstractmethod
    def validate_config(self) -> bool:
        """Return True when the webhook URL is usable for this platform."""
        pass

    @abstractmethod
    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        """Return the platform JSON body for ``notification``."""
        pass

    def check_response(self, response: TransportResponse) -> None:
        """Raise DeliveryError when the platform did not accept the message."""
        if not response.ok:
            raise DeliveryError(
                f"{self.name} API returned status {response.status}",
                status_code=response.status,
                body=response.body,
            )

    def _has_secure_url(self, host_marker: str) -> bool:
        url = self.webhook_url
        return bool(url) and url.startswith("https://") and host_marker in url

    async def send(self, notification: Notification) -> None:
        """Deliver ``notification``; raise only after retries are exhausted."""
        payload = self.build_payload(notification)

        async def _attempt() -> None:
            response = await self._transport.post_json(self.webhook_url, payload)
            self.check_response(response)

        def _on_retry(attempt: int, error: Exception) -> None:
            self._logger.debug(
                "provider_retry",
                attempt=attempt,
                error_type=type(error).__name__,
                error_message=str(error),
            )

        with bound_contextvars(provider=self.name):
            try:
                await self._retry_manager.execute_with_retry(_attempt, _on_retry)
            except Exception as exc:
                self._fallback.report(self.name, notification, exc)
                raise
            self._logger.debug(
                "provider_delivered",
                notification_severity=notification.severity.value,
            )
