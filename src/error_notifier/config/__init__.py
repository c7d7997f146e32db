"""Configuration subpackage."""

from error_notifier.config.config import (
    AppSettings,
    DiscordSettings,
    LoggingSettings,
    RetrySettings,
    SanitizationSettings,
    Settings,
    SlackSettings,
    TransportSettings,
    get_settings,
)
from error_notifier.config.environment import (
    default_environment_sources,
    env_var_source,
    resolve_environment,
)

__all__ = [
    "AppSettings",
    "DiscordSettings",
    "LoggingSettings",
    "RetrySettings",
    "SanitizationSettings",
    "Settings",
    "SlackSettings",
    "TransportSettings",
    "default_environment_sources",
    "env_var_source",
    "get_settings",
    "resolve_environment",
]
