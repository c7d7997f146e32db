"""Notification subsystem."""

from error_notifier.notifications.dispatcher import ErrorLogger
from error_notifier.notifications.fallback import ConsoleFallbackReporter
from error_notifier.notifications.formatter import MessageFormatter
from error_notifier.notifications.providers import (
    BaseNotificationProvider,
    DiscordProvider,
    SlackProvider,
)

__all__ = [
    "BaseNotificationProvider",
    "ConsoleFallbackReporter",
    "DiscordProvider",
    "ErrorLogger",
    "MessageFormatter",
    "SlackProvider",
]
