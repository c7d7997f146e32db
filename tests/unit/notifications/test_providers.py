# -*- coding: utf-8 -*-
"""Unit tests for the Discord and Slack providers."""

from __future__ import annotations

import io
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from error_notifier.clients.http import TransportResponse
from error_notifier.exceptions import CircuitOpenError, ConfigurationError, DeliveryError
from error_notifier.models.notification import Notification, Severity
from error_notifier.notifications.fallback import ConsoleFallbackReporter
from error_notifier.notifications.providers import DiscordProvider, SlackProvider
from error_notifier.utils.retry import RetryManager, RetryPolicy


def _retry(max_attempts: int = 3) -> RetryManager:
    return RetryManager(
        RetryPolicy(max_attempts=max_attempts, base_delay_ms=100, max_delay_ms=1000, jitter=False),
        sleep=AsyncMock(return_value=None),
    )


def _notification(now_utc: datetime) -> Notification:
    return Notification.create("Something broke", Severity.ERROR, timestamp=now_utc)


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "http://discord.com/api/webhooks/1/abc",
        "https://example.com/api/webhooks/1/abc",
        "https://discord.com/channels/1",
    ],
)
def test_discord_rejects_invalid_webhook_url(url: str | None, transport: Any) -> None:
    with pytest.raises(ConfigurationError):
        DiscordProvider(url, transport=transport, retry_manager=_retry())


@pytest.mark.parametrize(
    "url",
    [
        None,
        "http://hooks.slack.com/services/T/B/X",
        "https://slack.com/services/T/B/X",
    ],
)
def test_slack_rejects_invalid_webhook_url(url: str | None, transport: Any) -> None:
    with pytest.raises(ConfigurationError):
        SlackProvider(url, transport=transport, retry_manager=_retry())


def test_validate_config_true_for_valid_urls(
    transport: Any, discord_url: str, slack_url: str
) -> None:
    discord = DiscordProvider(discord_url, transport=transport, retry_manager=_retry())
    slack = SlackProvider(slack_url, transport=transport, retry_manager=_retry())

    assert discord.validate_config() is True
    assert slack.validate_config() is True
    assert (discord.name, slack.name) == ("Discord", "Slack")


async def test_discord_send_posts_embed_with_bot_overrides(
    transport: Any, discord_url: str, now_utc: datetime
) -> None:
    transport.respond(discord_url, TransportResponse(204, ""))
    provider = DiscordProvider(
        discord_url,
        username="ErrorBot",
        avatar_url="https://cdn.example/bot.png",
        transport=transport,
        retry_manager=_retry(),
    )

    await provider.send(_notification(now_utc))

    [payload] = transport.calls_to(discord_url)
    assert payload["username"] == "ErrorBot"
    assert payload["avatar_url"] == "https://cdn.example/bot.png"
    assert payload["embeds"][0]["title"] == "[ERROR] Something broke"


async def test_slack_send_posts_blocks_with_channel_override(
    transport: Any, slack_url: str, now_utc: datetime
) -> None:
    transport.respond(slack_url, TransportResponse(200, "ok"))
    provider = SlackProvider(
        slack_url,
        channel="#alerts",
        username="ErrorBot",
        transport=transport,
        retry_manager=_retry(),
    )

    await provider.send(_notification(now_utc))

    [payload] = transport.calls_to(slack_url)
    assert payload["channel"] == "#alerts"
    assert payload["username"] == "ErrorBot"
    assert "attachments" in payload


async def test_send_retries_non_2xx_then_succeeds(
    transport: Any, discord_url: str, now_utc: datetime
) -> None:
    transport.respond(
        discord_url,
        TransportResponse(500, "oops"),
        TransportResponse(429, "slow down"),
        TransportResponse(204, ""),
    )
    provider = DiscordProvider(discord_url, transport=transport, retry_manager=_retry())

    await provider.send(_notification(now_utc))

    assert len(transport.calls_to(discord_url)) == 3


async def test_slack_treats_non_ok_body_as_retryable_failure(
    transport: Any, slack_url: str, now_utc: datetime
) -> None:
    transport.respond(
        slack_url,
        TransportResponse(200, "invalid_payload"),
        TransportResponse(200, "ok"),
    )
    provider = SlackProvider(slack_url, transport=transport, retry_manager=_retry())

    await provider.send(_notification(now_utc))

    assert len(transport.calls_to(slack_url)) == 2


async def test_send_reports_fallback_before_raising_after_exhaustion(
    transport: Any, slack_url: str, now_utc: datetime
) -> None:
    transport.respond(slack_url, default=TransportResponse(500, "error"))
    stream = io.StringIO()
    provider = SlackProvider(
        slack_url,
        transport=transport,
        retry_manager=_retry(max_attempts=2),
        fallback=ConsoleFallbackReporter(stream),
    )

    with pytest.raises(DeliveryError) as exc_info:
        await provider.send(_notification(now_utc))

    assert exc_info.value.status_code == 500
    assert len(transport.calls_to(slack_url)) == 2
    output = stream.getvalue()
    assert "[Slack] Failed to send notification" in output
    assert "Something broke" in output
    assert '"severity": "error"' in output
    assert "2026-02-13T12:00:00+00:00" in output


async def test_send_with_open_circuit_skips_network_and_reports_fallback(
    transport: Any, discord_url: str, now_utc: datetime
) -> None:
    transport.respond(discord_url, default=DeliveryError("connection refused"))
    stream = io.StringIO()
    provider = DiscordProvider(
        discord_url,
        transport=transport,
        retry_manager=_retry(max_attempts=5),
        fallback=ConsoleFallbackReporter(stream),
    )
    with pytest.raises(DeliveryError):
        await provider.send(_notification(now_utc))
    assert provider.retry_manager.is_circuit_open
    calls_before = len(transport.calls)

    with pytest.raises(CircuitOpenError):
        await provider.send(_notification(now_utc))

    assert len(transport.calls) == calls_before
    assert stream.getvalue().count("[Discord] Failed to send notification") == 2
