"""Test fixtures for in-memory implementations."""

from .in_memory_storage import InMemoryKeyValueStore
from .bridge_harness import (
    BRIDGE_ADDRESS,
    BridgeHarness,
    RecordingEventPublisher,
    bridge_settings,
    conversion_id,
)

__all__ = [
    "BRIDGE_ADDRESS",
    "BridgeHarness",
    "InMemoryKeyValueStore",
    "RecordingEventPublisher",
    "bridge_settings",
    "conversion_id",
]
