"""HTTP transports."""

from error_notifier.clients.http import (
    AsyncWebhookTransport,
    RelayWebhookTransport,
    TransportResponse,
    WebhookTransport,
    build_transport,
)

__all__ = [
    "AsyncWebhookTransport",
    "RelayWebhookTransport",
    "TransportResponse",
    "WebhookTransport",
    "build_transport",
]
