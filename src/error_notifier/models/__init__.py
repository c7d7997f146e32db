"""Domain models."""

from error_notifier.models.notification import (
    MAX_METADATA_BYTES,
    CaptureContext,
    Notification,
    Severity,
    bound_metadata,
)

__all__ = ["MAX_METADATA_BYTES", "CaptureContext", "Notification", "Severity", "bound_metadata"]
