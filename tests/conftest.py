# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from error_notifier.clients.http import TransportResponse
from error_notifier.config import Settings
from error_notifier.exceptions import DeliveryError
from error_notifier.utils.retry import RetryManager, RetryPolicy

DISCORD_URL = "https://discord.com/api/webhooks/123456/abcdef"
SLACK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"


class FakeTransport:
    """Webhook transport fake: scripted responses per URL, records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.closed = False
        self._responses: dict[str, list[TransportResponse | Exception]] = {}
        self._defaults: dict[str, TransportResponse | Exception] = {}

    def respond(
        self,
        url: str,
        *responses: TransportResponse | Exception,
        default: TransportResponse | Exception | None = None,
    ) -> None:
        """Queue responses for ``url``; ``default`` answers once the queue is empty."""
        self._responses[url] = list(responses)
        if default is not None:
            self._defaults[url] = default

    def calls_to(self, url: str) -> list[dict[str, Any]]:
        return [payload for called, payload in self.calls if called == url]

    async def post_json(self, url: str, payload: dict[str, Any]) -> TransportResponse:
        self.calls.append((url, payload))
        queue = self._responses.get(url) or []
        result = queue.pop(0) if queue else self._defaults.get(url)
        if result is None:
            raise DeliveryError(f"no scripted response for {url}", url=url)
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def transport() -> FakeTransport:
    """Fresh fake transport per test."""
    return FakeTransport()


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings without reading the process environment or .env."""

    def _build(**overrides: Any) -> Settings:
        data: dict[str, Any] = {
            "enabled": True,
            "app": {"environment": "test"},
            "discord": {"webhook_url": DISCORD_URL},
            "slack": {"webhook_url": SLACK_URL},
            "retry": {
                "max_attempts": 3,
                "base_delay_ms": 100,
                "max_delay_ms": 1000,
                "jitter": False,
            },
        }
        data.update(overrides)
        return Settings.model_validate(data)

    return _build


@pytest.fixture
def fast_retry_factory() -> Callable[[RetryPolicy], RetryManager]:
    """RetryManager factory whose sleep returns immediately."""

    def _build(policy: RetryPolicy) -> RetryManager:
        return RetryManager(policy, sleep=AsyncMock(return_value=None))

    return _build


@pytest.fixture
def discord_url() -> str:
    return DISCORD_URL


@pytest.fixture
def slack_url() -> str:
    return SLACK_URL
