# -*- coding: utf-8 -*-
"""Slack incoming-webhook provider."""

from __future__ import annotations

from typing import Any, Dict, Optional

from error_notifier.clients.http import TransportResponse
from error_notifier.exceptions import DeliveryError
from error_notifier.models.notification import Notification
from error_notifier.notifications.providers.base import BaseNotificationProvider

SLACK_WEBHOOK_MARKER = "hooks.slack.com"
SLACK_ACK = "ok"


class SlackProvider(BaseNotificationProvider):
    """Post Block Kit messages to a Slack incoming webhook."""

    name = "Slack"

    def __init__(
        self,
        webhook_url: Optional[str],
        *,
        channel: Optional[str] = None,
        username: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.channel = channel
        self.username = username
        super().__init__(webhook_url, **kwargs)

    def validate_config(self) -> bool:
        return self._has_secure_url(SLACK_WEBHOOK_MARKER)

    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        payload = self._formatter.format_for_slack(notification)
        if self.username:
            payload["username"] = self.username
        if self.channel:
            payload["channel"] = self.channel
        return payload

    def check_response(self, response: TransportResponse) -> None:
        super().check_response(response)
        # Slack acknowledges with a literal "ok" body
        if response.body != SLACK_ACK:
            raise DeliveryError(
                f"Slack API returned unexpected response: {response.body!r}",
                status_code=response.status,
                body=response.body,
            )
