"""Explicit environment-name resolution from an ordered list of sources."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from typing import Optional

EnvironmentSource = Callable[[], Optional[str]]

DEFAULT_ENVIRONMENT = "development"

_ALIASES: dict[str, str] = {
    "dev": "development",
    "prod": "production",
    "stg": "staging",
}


def env_var_source(name: str) -> EnvironmentSource:
    """Return a source reading the environment variable ``name``."""

    def _read() -> Optional[str]:
        return os.environ.get(name)

    return _read


def default_environment_sources() -> list[EnvironmentSource]:
    """Sources consulted when no environment is configured explicitly."""
    return [
        env_var_source("ERROR_NOTIFIER_ENVIRONMENT"),
        env_var_source("APP_ENV"),
        env_var_source("ENVIRONMENT"),
    ]


def resolve_environment(
    sources: Sequence[EnvironmentSource],
    default: str = DEFAULT_ENVIRONMENT,
) -> str:
    """Return the first non-empty value produced by ``sources``, normalized.

    Sources are tried in order.
    """
    for source in sources:
        value = source()
        if value and value.strip():
            name = value.strip().lower()
            return _ALIASES.get(name, name)
    return default
