# -*- coding: utf-8 -*-
"""Discord webhook provider."""

from __future__ import annotations

from typing import Any, Dict, Optional

from error_notifier.models.notification import Notification
from error_notifier.notifications.providers.base import BaseNotificationProvider

DISCORD_WEBHOOK_MARKER = "discord.com/api/webhooks"


class DiscordProvider(BaseNotificationProvider):
    """Post severity-colored embeds to a Discord webhook."""

    name = "Discord"

    def __init__(
        self,
        webhook_url: Optional[str],
        *,
        username: Optional[str] = None,
        avatar_url: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.username = username
        self.avatar_url = avatar_url
        super().__init__(webhook_url, **kwargs)

    def validate_config(self) -> bool:
        return self._has_secure_url(DISCORD_WEBHOOK_MARKER)

    def build_payload(self, notification: Notification) -> Dict[str, Any]:
        payload = self._formatter.format_for_discord(notification)
        if self.username:
            payload["username"] = self.username
        if self.avatar_url:
            payload["avatar_url"] = self.avatar_url
        return payload
