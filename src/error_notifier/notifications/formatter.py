# -*- coding: utf-8 -*-
"""Platform payload builders: Discord embeds and Slack blocks."""

from __future__ import annotations

import json
from typing import Any

from error_notifier.models.notification import Notification, Severity

_DISCORD_COLORS: dict[Severity, int] = {
    Severity.ERROR: 0xFF0000,
    Severity.WARNING: 0xFFA500,
    Severity.INFO: 0x0099FF,
}
_DISCORD_DEFAULT_COLOR = 0x808080

_SLACK_COLORS: dict[Severity, str] = {
    Severity.ERROR: "danger",
    Severity.WARNING: "warning",
    Severity.INFO: "good",
}
_SLACK_DEFAULT_COLOR = "#808080"

# Platform limits
DISCORD_TITLE_LIMIT = 256
DISCORD_FIELD_LIMIT = 1024
SLACK_HEADER_LIMIT = 150
SLACK_SECTION_LIMIT = 3000


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, ending with '...' when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


class MessageFormatter:
    """Build the JSON body each webhook platform expects."""

    def format_for_discord(self, notification: Notification) -> dict[str, Any]:
        """Severity-colored rich embed."""
        severity = notification.severity
        fields: list[dict[str, Any]] = []

        if notification.stack:
            fields.append(
                {
                    "name": "Stack Trace",
                    "value": truncate(notification.stack, DISCORD_FIELD_LIMIT),
                    "inline": False,
                }
            )
        for name, value in (
            ("Environment", notification.environment),
            ("URL", notification.url),
            ("User", notification.user_id),
        ):
            if value:
                fields.append(
                    {"name": name, "value": truncate(value, DISCORD_FIELD_LIMIT), "inline": True}
                )
        if notification.metadata:
            # room for the code fence
            body = truncate(self._dump(notification.metadata), DISCORD_FIELD_LIMIT - 12)
            fields.append(
                {"name": "Metadata", "value": f"```json\n{body}\n```", "inline": False}
            )

        embed = {
            "title": truncate(
                f"[{severity.value.upper()}] {notification.message}", DISCORD_TITLE_LIMIT
            ),
            "color": _DISCORD_COLORS.get(severity, _DISCORD_DEFAULT_COLOR),
            "timestamp": notification.timestamp,
            "fields": fields,
        }
        return {"embeds": [embed]}

    def format_for_slack(self, notification: Notification) -> dict[str, Any]:
        """Block Kit message inside a colored attachment."""
        severity = notification.severity
        blocks: list[dict[str, Any]] = [
            {
                "type": "header",
                "text": {
                    "type": "plain_text",
                    "text": truncate(
                        f"{severity.value.upper()}: {notification.message}",
                        SLACK_HEADER_LIMIT,
                    ),
                },
            }
        ]

        fields: list[dict[str, str]] = []
        if notification.environment:
            fields.append(
                {"type": "mrkdwn", "text": f"*Environment:*\n{notification.environment}"}
            )
        if notification.url:
            fields.append({"type": "mrkdwn", "text": f"*URL:*\n{notification.url}"})
        if notification.user_id:
            fields.append({"type": "mrkdwn", "text": f"*User:*\n{notification.user_id}"})
        if fields:
            blocks.append({"type": "section", "fields": fields})

        if notification.stack:
            blocks.append(
                self._code_section(
                    "Stack Trace", truncate(notification.stack, SLACK_SECTION_LIMIT - 40)
                )
            )
        if notification.metadata:
            blocks.append(
                self._code_section(
                    "Metadata",
                    truncate(self._dump(notification.metadata), SLACK_SECTION_LIMIT - 40),
                )
            )

        blocks.append(
            {
                "type": "context",
                "elements": [
                    {"type": "mrkdwn", "text": f"Timestamp: {notification.timestamp}"}
                ],
            }
        )
        return {
            "attachments": [
                {
                    "color": _SLACK_COLORS.get(severity, _SLACK_DEFAULT_COLOR),
                    "blocks": blocks,
                }
            ]
        }

    @staticmethod
    def _code_section(label: str, text: str) -> dict[str, Any]:
        return {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"*{label}:*\n```{text}```"},
        }

    @staticmethod
    def _dump(metadata: dict[str, Any]) -> str:
        return json.dumps(metadata, indent=2, default=str, ensure_ascii=False)
