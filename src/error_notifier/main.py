# -*- coding: utf-8 -*-
"""
Entry point: send one test notification through the configured webhooks.

Reads settings from the environment (.env supported), e.g.
DISCORD__WEBHOOK_URL, SLACK__WEBHOOK_URL, ENABLED, APP__ENVIRONMENT.

Run with: python -m error_notifier.main "Deployment finished"
"""

from __future__ import annotations

import asyncio
import sys

import structlog

from error_notifier.DI import Container
from error_notifier.config import get_settings
from error_notifier.logging.config import configure_logging


async def run(message: str) -> None:
    configure_logging(get_settings())
    logger = structlog.get_logger("main")
    container = Container()
    error_logger = container.error_logger()
    transport = container.transport()
    try:
        logger.info(
            "main_sending_test_message",
            providers=[p.name for p in error_logger.providers],
            environment=error_logger.environment,
        )
        await error_logger.capture_message(message, "info", {"source": "error-notifier"})
    finally:
        await transport.aclose()
    logger.info("main_done")


def main() -> None:
    message = " ".join(sys.argv[1:]) or "error-notifier test message"
    asyncio.run(run(message))


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
