# -*- coding: utf-8 -*-
"""Async HTTP transports for webhook delivery."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

import aiohttp
import structlog
from structlog.contextvars import bound_contextvars

from error_notifier.exceptions import DeliveryError


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Status code and raw text body of a webhook POST."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class WebhookTransport(Protocol):
    """Send a JSON body to a URL; return status + body, or raise DeliveryError."""

    async def post_json(self, url: str, payload: Dict[str, Any]) -> TransportResponse:
        ...

    async def aclose(self) -> None:
        ...


class AsyncWebhookTransport:
    """Single-shot JSON POST over aiohttp.

    Retries are not done here; providers wrap each call in a RetryManager.
    Optionally takes an aiohttp.ClientSession. If none is provided, one is
    created lazily and must be closed via aclose() or by using the transport
    as an async context manager.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 5.0,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout_seconds: Total per-request timeout.
            session: Optional shared aiohttp session. If None, the transport
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this transport owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncWebhookTransport:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def post_json(self, url: str, payload: Dict[str, Any]) -> TransportResponse:
        """POST ``payload`` as JSON and return the response status and text.

        Raises:
            DeliveryError: On connection errors and timeouts.
        """
        request_id = uuid.uuid4().hex[:12]
        with bound_contextvars(http_request_id=request_id):
            try:
                session = await self._get_session()
                async with session.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                ) as response:
                    body = await response.text()
                    self._logger.debug(
                        "http_post_completed",
                        http_status_code=response.status,
                    )
                    return TransportResponse(status=response.status, body=body)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                self._logger.debug(
                    "http_post_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise DeliveryError(
                    f"POST failed: {type(e).__name__}",
                    cause=e,
                ) from e


class RelayWebhookTransport:
    """Post webhooks through a server-side relay endpoint.

    The relay receives ``{"target_url": ..., "payload": ...}`` and is
    expected to forward the payload and echo the platform's status and body.
    """

    def __init__(self, relay_url: str, inner: WebhookTransport) -> None:
        if not relay_url:
            raise ValueError("RelayWebhookTransport requires relay_url.")
        self._relay_url = relay_url
        self._inner = inner

    @property
    def relay_url(self) -> str:
        return self._relay_url

    async def post_json(self, url: str, payload: Dict[str, Any]) -> TransportResponse:
        envelope = {"target_url": url, "payload": payload}
        return await self._inner.post_json(self._relay_url, envelope)

    async def aclose(self) -> None:
        await self._inner.aclose()


def build_transport(
    *,
    timeout_seconds: float = 5.0,
    relay_url: Optional[str] = None,
    get_logger: Callable[[str], Any] = structlog.get_logger,
) -> WebhookTransport:
    """Direct aiohttp transport, wrapped in a relay when ``relay_url`` is set."""
    direct = AsyncWebhookTransport(timeout_seconds=timeout_seconds, get_logger=get_logger)
    if relay_url:
        return RelayWebhookTransport(relay_url, direct)
    return direct
