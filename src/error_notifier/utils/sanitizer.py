# -*- coding: utf-8 -*-
"""Redaction of sensitive values from arbitrary JSON-like data."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from error_notifier.exceptions import ConfigurationError

REDACTED = "[REDACTED]"

_SENSITIVE_NAME_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"password|passwd|pwd", re.IGNORECASE),
    re.compile(r"token|bearer|jwt|api[_-]?key", re.IGNORECASE),
    re.compile(r"secret|private[_-]?key", re.IGNORECASE),
)

_DEFAULT_VALUE_PATTERNS: tuple[re.Pattern[str], ...] = _SENSITIVE_NAME_PATTERNS + (
    # email address
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    # 16-digit card number, optionally grouped by 4
    re.compile(r"\b\d{4}[- ]?\d{4}[- ]?\d{4}[- ]?\d{4}\b"),
    # SSN
    re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
)


@dataclass(frozen=True, slots=True)
class SanitizationConfig:
    """Read-only redaction settings consumed by DataSanitizer."""

    enabled: bool = True
    custom_patterns: tuple[str, ...] | None = None
    """Regex sources, applied case-insensitively before the defaults."""
    exclude_defaults: bool = False


class DataSanitizer:
    """Replace sensitive content with ``[REDACTED]``.

    Strings are scrubbed with custom patterns first and the built-in
    patterns second. Mapping values whose key looks sensitive are replaced
    wholesale, without looking inside them. Everything else is walked
    recursively; unknown types pass through untouched.
    """

    def __init__(self, config: SanitizationConfig | None = None) -> None:
        self._config = config or SanitizationConfig()
        self._custom: tuple[re.Pattern[str], ...] = self._compile(self._config.custom_patterns)

    @staticmethod
    def _compile(sources: Sequence[str] | None) -> tuple[re.Pattern[str], ...]:
        if not sources:
            return ()
        compiled: list[re.Pattern[str]] = []
        for source in sources:
            try:
                compiled.append(re.compile(source, re.IGNORECASE))
            except re.error as exc:
                raise ConfigurationError(
                    f"Invalid sanitization pattern {source!r}: {exc}"
                ) from exc
        return tuple(compiled)

    @property
    def config(self) -> SanitizationConfig:
        return self._config

    def sanitize(self, data: Any) -> Any:
        """Return a redacted copy of ``data``. Never raises."""
        if not self._config.enabled:
            return data
        return self._sanitize(data)

    def _sanitize(self, data: Any) -> Any:
        if isinstance(data, str):
            return self._sanitize_string(data)
        if isinstance(data, Mapping):
            return self._sanitize_mapping(data)
        if isinstance(data, list):
            return [self._sanitize(item) for item in data]
        if isinstance(data, tuple):
            return tuple(self._sanitize(item) for item in data)
        return data

    def _sanitize_string(self, value: str) -> str:
        result = value
        for pattern in self._custom:
            result = pattern.sub(REDACTED, result)
        if not self._config.exclude_defaults:
            for pattern in _DEFAULT_VALUE_PATTERNS:
                result = pattern.sub(REDACTED, result)
        return result

    def _sanitize_mapping(self, data: Mapping[Any, Any]) -> dict[Any, Any]:
        result: dict[Any, Any] = {}
        for key, value in data.items():
            if self._is_sensitive_key(str(key)):
                result[key] = REDACTED
            else:
                result[key] = self._sanitize(value)
        return result

    def _is_sensitive_key(self, key: str) -> bool:
        if any(pattern.search(key) for pattern in self._custom):
            return True
        if self._config.exclude_defaults:
            return False
        return any(pattern.search(key) for pattern in _SENSITIVE_NAME_PATTERNS)
