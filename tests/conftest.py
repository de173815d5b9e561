"""Shared pytest fixtures for bridge tests."""

from __future__ import annotations

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from tokenbridge.infrastructure.database import DatabaseClient
from tokenbridge.infrastructure.storage import RedisKeyValueStore
from tests.fixtures import BridgeHarness, InMemoryKeyValueStore


class TestDatabaseSettings:
    """Test settings for Redis connection."""

    __test__ = False

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest_asyncio.fixture
async def bridge(store: InMemoryKeyValueStore) -> BridgeHarness:
    """An initialized bridge with an authorizer and default limits configured."""
    harness = BridgeHarness(store=store)
    await harness.initialize()
    await harness.configure()
    await harness.ledger.grant_minter(harness.bridge_address)
    return harness


@pytest_asyncio.fixture
async def redis_db_client() -> AsyncGenerator[DatabaseClient, None]:
    """Create a Redis database client for testing.

    Uses database 15 by default, or TEST_REDIS_URL if set. Tests depending on
    it are skipped when Redis is not reachable.
    """
    test_redis_url = os.getenv("TEST_REDIS_URL", "redis://localhost:6379/15")
    client = DatabaseClient(TestDatabaseSettings(database_url=test_redis_url))
    client.initialize_database()

    try:
        await client.ping()
    except Exception as e:
        await client.close()
        pytest.skip(f"Redis not available at {test_redis_url}: {e}")

    yield client

    async with client.get_connection() as conn:
        await conn.flushdb()
    await client.close()


@pytest_asyncio.fixture
async def redis_store(redis_db_client: DatabaseClient) -> RedisKeyValueStore:
    """Create a Redis-backed key-value store for testing."""
    return RedisKeyValueStore(redis_db_client)
