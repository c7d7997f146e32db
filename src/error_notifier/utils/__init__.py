# -*- coding: utf-8 -*-
"""Utility modules."""

from error_notifier.utils.retry import RetryManager, RetryPolicy
from error_notifier.utils.sanitizer import REDACTED, DataSanitizer, SanitizationConfig

__all__ = [
    "DataSanitizer",
    "REDACTED",
    "RetryManager",
    "RetryPolicy",
    "SanitizationConfig",
]
