# -*- coding: utf-8 -*-
"""Last-resort local report for notifications that could not be delivered."""

from __future__ import annotations

import json
import sys
from typing import IO, Any, Callable, Optional

import structlog

from error_notifier.models.notification import Notification


class ConsoleFallbackReporter:
    """Write undelivered notifications to stderr.

    The line always carries the original message, severity and timestamp so
    the event stays visible when every network path is broken.
    """

    def __init__(
        self,
        stream: Optional[IO[str]] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._stream = stream
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def report(
        self,
        provider_name: str,
        notification: Notification,
        error: BaseException | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "provider": provider_name,
            "message": notification.message,
            "severity": notification.severity.value,
            "timestamp": notification.timestamp,
        }
        if error is not None:
            record["error"] = f"{type(error).__name__}: {error}"
        stream = self._stream if self._stream is not None else sys.stderr
        print(
            f"[{provider_name}] Failed to send notification: "
            + json.dumps(record, ensure_ascii=False, default=str),
            file=stream,
            flush=True,
        )
        self._logger.error(
            "notification_fallback_reported",
            provider=provider_name,
            notification_severity=record["severity"],
            notification_timestamp=record["timestamp"],
        )
