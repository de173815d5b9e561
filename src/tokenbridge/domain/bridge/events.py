"""Event publisher port for committed conversions."""

from __future__ import annotations

from typing import Protocol, Union

from .entities import ConversionInEvent, ConversionOutEvent

ConversionEvent = Union[ConversionOutEvent, ConversionInEvent]


class EventPublisher(Protocol):
    """Receives events only after the call that produced them has committed."""

    async def publish(self, event: ConversionEvent) -> None:
        ...
