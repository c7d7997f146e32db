"""Notification: a single error or message event destined for delivery.

Built by ErrorLogger on every capture, sanitized once, then handed by value
to each provider. Never mutated after creation.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

MAX_METADATA_BYTES = 10 * 1024
_PREVIEW_CHARS = 512


class Severity(str, Enum):
    """Notification severity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Notification:
    """Closed set of fields sent to every provider."""

    message: str
    severity: Severity
    timestamp: str
    """ISO-8601 UTC, set at creation time."""
    stack: str | None = None
    """Formatted traceback; only present for exception captures."""
    metadata: dict[str, Any] | None = None
    environment: str | None = None
    url: str | None = None
    user_agent: str | None = None
    user_id: str | None = None
    session_id: str | None = None

    @classmethod
    def create(
        cls,
        message: str,
        severity: Severity | str = Severity.INFO,
        *,
        stack: str | None = None,
        metadata: dict[str, Any] | None = None,
        environment: str | None = None,
        url: str | None = None,
        user_agent: str | None = None,
        user_id: str | None = None,
        session_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> Notification:
        """Validate inputs and stamp the creation time."""
        if not isinstance(message, str) or not message.strip():
            raise ValueError("message must be a non-empty string")
        when = timestamp or datetime.now(UTC)
        return cls(
            message=message,
            severity=Severity(severity),
            timestamp=when.isoformat(),
            stack=stack,
            metadata=bound_metadata(metadata),
            environment=environment,
            url=url,
            user_agent=user_agent,
            user_id=user_id,
            session_id=session_id,
        )

    def sanitized(self, sanitize: Callable[[Any], Any]) -> Notification:
        """Return a copy with ``sanitize`` applied to every content field.

        Severity and timestamp are left as they are.
        """
        return replace(
            self,
            message=sanitize(self.message),
            stack=sanitize(self.stack),
            metadata=sanitize(self.metadata),
            environment=sanitize(self.environment),
            url=sanitize(self.url),
            user_agent=sanitize(self.user_agent),
            user_id=sanitize(self.user_id),
            session_id=sanitize(self.session_id),
        )


def bound_metadata(metadata: dict[str, Any] | None) -> dict[str, Any] | None:
    """Return metadata unchanged if it serializes within MAX_METADATA_BYTES.

    Oversized metadata is replaced by a truncated preview, and metadata that
    does not serialize at all (non-string keys, cycles) by a repr preview.
    """
    if metadata is None:
        return None
    try:
        serialized = json.dumps(metadata, default=str)
    except (TypeError, ValueError):
        return {"_unserializable": True, "_preview": repr(metadata)[:_PREVIEW_CHARS]}
    if len(serialized.encode("utf-8")) <= MAX_METADATA_BYTES:
        return dict(metadata)
    return {"_truncated": True, "_preview": serialized[:_PREVIEW_CHARS]}


@dataclass(frozen=True, slots=True)
class CaptureContext:
    """Request context attached to notifications when the host has one."""

    url: str | None = None
    user_agent: str | None = None
