"""Pytest fixtures for use case tests."""

from __future__ import annotations

from typing import Optional

import pytest_asyncio

from tokenbridge.domain.shared.ledger_protocol import LedgerProtocol
from tokenbridge.infrastructure.bridge.ledger import KeyValueLedger
from tokenbridge.infrastructure.storage import KeyValueStore
from tests.fixtures import BRIDGE_ADDRESS, BridgeHarness, InMemoryKeyValueStore


class FailingMintLedger:
    """Reference ledger whose N-th mint call reports failure."""

    def __init__(self, inner: KeyValueLedger, fail_on_call: int):
        self._inner = inner
        self._fail_on_call = fail_on_call
        self._calls = 0

    def __getattr__(self, name: str):
        return getattr(self._inner, name)

    async def mint(self, destination: str, amount: int) -> bool:
        self._calls += 1
        if self._calls == self._fail_on_call:
            return False
        return await self._inner.mint(destination, amount)


def failing_mint_factory(fail_on_call: int):
    def factory(store: KeyValueStore) -> LedgerProtocol:
        return FailingMintLedger(KeyValueLedger(store, BRIDGE_ADDRESS), fail_on_call)

    return factory


async def make_bridge(
    store: Optional[InMemoryKeyValueStore] = None, **kwargs
) -> BridgeHarness:
    harness = BridgeHarness(store=store, **kwargs)
    await harness.initialize()
    await harness.configure()
    await harness.ledger.grant_minter(harness.bridge_address)
    return harness


@pytest_asyncio.fixture
async def bridge_failing_share_mint() -> BridgeHarness:
    """Bridge whose second mint of a conversion (the first share) fails."""
    return await make_bridge(ledger_factory=failing_mint_factory(2))
