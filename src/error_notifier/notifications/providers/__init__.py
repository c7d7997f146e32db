"""Webhook providers."""

from error_notifier.notifications.providers.base import BaseNotificationProvider
from error_notifier.notifications.providers.discord import DiscordProvider
from error_notifier.notifications.providers.slack import SlackProvider

__all__ = [
    "BaseNotificationProvider",
    "DiscordProvider",
    "SlackProvider",
]
