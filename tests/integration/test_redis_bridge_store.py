"""Integration tests for the bridge over real Redis."""

from __future__ import annotations

import asyncio

import pytest

from tokenbridge.infrastructure.bridge.ledger import KeyValueLedger
from tokenbridge.infrastructure.bridge.unit_of_work import UnitOfWorkManager
from tokenbridge.infrastructure.database import DatabaseClient
from tokenbridge.infrastructure.storage import RedisKeyValueStore
from tests.fixtures import BridgeHarness


async def test_apply_sets_and_deletes_in_one_batch(
    redis_store: RedisKeyValueStore,
) -> None:
    await redis_store.set("bridge:test:a", "1")
    await redis_store.apply({"bridge:test:a": None, "bridge:test:b": "2"})

    assert await redis_store.get("bridge:test:a") is None
    assert await redis_store.get("bridge:test:b") == "2"


async def test_set_if_absent_claims_once_with_expiry(
    redis_store: RedisKeyValueStore, redis_db_client: DatabaseClient
) -> None:
    assert await redis_store.set_if_absent("bridge:test:claim", "1", 60) is True
    assert await redis_store.set_if_absent("bridge:test:claim", "2", 60) is False
    assert await redis_store.get("bridge:test:claim") == "1"

    async with redis_db_client.get_connection() as conn:
        ttl = await conn.ttl("bridge:test:claim")
    assert 0 < ttl <= 60


async def test_rolled_back_unit_leaves_redis_untouched(
    redis_store: RedisKeyValueStore,
) -> None:
    harness = BridgeHarness()
    manager = UnitOfWorkManager(
        redis_store,
        harness.bridge_address,
        lambda staged: KeyValueLedger(staged, harness.bridge_address),
    )

    with pytest.raises(RuntimeError):
        async with manager.begin() as uow:
            await uow.ledger.issue(harness.user.address, 10)
            raise RuntimeError("abort")

    ledger = KeyValueLedger(redis_store, harness.bridge_address)
    assert await ledger.balance_of(harness.user.address) == 0


async def test_concurrent_replays_redeem_once(redis_store: RedisKeyValueStore) -> None:
    bridge = BridgeHarness(store=redis_store)
    await bridge.initialize()
    await bridge.configure()
    await bridge.ledger.grant_minter(bridge.bridge_address)

    request = bridge.in_request(1_000)
    results = await asyncio.gather(
        *(bridge.conversions.conversion_in(bridge.user.address, request) for _ in range(5)),
        return_exceptions=True,
    )

    assert sum(1 for result in results if not isinstance(result, Exception)) == 1
    assert await bridge.ledger.balance_of(bridge.user.address) == 1_000
    assert await bridge.ledger.minted_total() == 1_000
