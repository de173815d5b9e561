"""Event publisher implementations."""

from __future__ import annotations

import logging

from ...domain.bridge.events import ConversionEvent

logger = logging.getLogger(__name__)


class LoggingEventPublisher:
    """Writes each committed conversion event to the application log."""

    async def publish(self, event: ConversionEvent) -> None:
        logger.info("%s %s", type(event).__name__, event.model_dump_json())
