"""error-notifier: forward exceptions and messages to Discord and Slack webhooks."""

from error_notifier.config import Settings, get_settings
from error_notifier.exceptions import (
    CircuitOpenError,
    ConfigurationError,
    DeliveryError,
    ErrorNotifierError,
)
from error_notifier.models import Notification, Severity
from error_notifier.notifications import DiscordProvider, ErrorLogger, SlackProvider
from error_notifier.utils import DataSanitizer, RetryManager, RetryPolicy, SanitizationConfig

__version__ = "0.1.0"
__all__ = [
    "CircuitOpenError",
    "ConfigurationError",
    "DataSanitizer",
    "DeliveryError",
    "DiscordProvider",
    "ErrorLogger",
    "ErrorNotifierError",
    "Notification",
    "RetryManager",
    "RetryPolicy",
    "SanitizationConfig",
    "Settings",
    "Severity",
    "SlackProvider",
    "get_settings",
]
