# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. DISCORD__WEBHOOK_URL, RETRY__MAX_ATTEMPTS.
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from error_notifier.exceptions import ConfigurationError
from error_notifier.utils.retry import RetryPolicy
from error_notifier.utils.sanitizer import SanitizationConfig


class AppSettings(BaseModel):
    """General application configuration."""

    model_config = ConfigDict(extra="ignore")

    app_name: str = "error-notifier"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Optional[str] = Field(
        default=None,
        description="Environment tag attached to notifications. Resolved at startup when unset.",
    )


class LoggingSettings(BaseModel):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = ConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/error_notifier.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Console output format: JSONRenderer if True, ConsoleRenderer if False. Files are always JSON.
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class DiscordSettings(BaseModel):
    """Discord webhook provider (from env DISCORD__*)."""

    model_config = ConfigDict(extra="ignore")

    webhook_url: Optional[str] = Field(default=None, description="Discord webhook URL.")
    username: Optional[str] = Field(default=None, description="Bot display name override.")
    avatar_url: Optional[str] = Field(default=None, description="Bot avatar override.")

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url)


class SlackSettings(BaseModel):
    """Slack incoming-webhook provider (from env SLACK__*)."""

    model_config = ConfigDict(extra="ignore")

    webhook_url: Optional[str] = Field(default=None, description="Slack incoming webhook URL.")
    channel: Optional[str] = Field(default=None, description="Channel override.")
    username: Optional[str] = Field(default=None, description="Bot display name override.")

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url)


class RetrySettings(BaseModel):
    """Retry policy shared by all providers (from env RETRY__*)."""

    model_config = ConfigDict(extra="ignore")

    max_attempts: int = Field(default=3, ge=1, le=5)
    base_delay_ms: int = Field(default=1000, ge=100)
    max_delay_ms: int = Field(default=30000, ge=100)
    jitter: bool = True

    @model_validator(mode="after")
    def _check_delays(self) -> RetrySettings:
        if self.max_delay_ms < self.base_delay_ms:
            raise ValueError("max_delay_ms must be greater than or equal to base_delay_ms")
        return self

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_attempts,
            base_delay_ms=self.base_delay_ms,
            max_delay_ms=self.max_delay_ms,
            jitter=self.jitter,
        )


class SanitizationSettings(BaseModel):
    """Sensitive-data redaction (from env SANITIZATION__*)."""

    model_config = ConfigDict(extra="ignore")

    enabled: bool = True
    # JSON list in env, e.g. SANITIZATION__CUSTOM_PATTERNS='["internal_id"]'
    custom_patterns: Optional[list[str]] = None
    exclude_defaults: bool = False

    def to_config(self) -> SanitizationConfig:
        return SanitizationConfig(
            enabled=self.enabled,
            custom_patterns=tuple(self.custom_patterns) if self.custom_patterns else None,
            exclude_defaults=self.exclude_defaults,
        )


class TransportSettings(BaseModel):
    """HTTP transport used for webhook delivery (from env TRANSPORT__*)."""

    model_config = ConfigDict(extra="ignore")

    timeout_seconds: float = Field(
        default=5.0,
        ge=0.5,
        le=60.0,
        description="Per-attempt HTTP timeout in seconds.",
    )
    relay_url: Optional[str] = Field(
        default=None,
        description="Server-side relay endpoint. When set, webhooks are posted through it.",
    )


class Settings(BaseSettings):
    """Root configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. SLACK__WEBHOOK_URL, RETRY__JITTER.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    enabled: bool = True
    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    slack: SlackSettings = Field(default_factory=SlackSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    sanitization: SanitizationSettings = Field(default_factory=SanitizationSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as flat keys or nested dicts, e.g.:
        - from_env(retry__max_attempts=2)
        - from_env(retry={"max_attempts": 2})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)

    def merged(self, partial: Mapping[str, Any]) -> Settings:
        """Return a new Settings with ``partial`` deep-merged over this one.

        The current instance is left untouched.

        Raises:
            ConfigurationError: If the merged values fail validation.
        """
        data = _deep_merge(self.model_dump(), partial)
        try:
            return type(self).model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def _deep_merge(base: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in updates.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            result[key] = _deep_merge(current, value)
        else:
            result[key] = value
    return result


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings built from the environment.

    Typical usage:

        from error_notifier.config import get_settings

        settings = get_settings()
        webhook = settings.discord.webhook_url
    """
    return Settings()
