"""Redis connection management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Protocol, Union

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class HasDatabaseSettings(Protocol):
    database_url: str


class DatabaseClient:
    """Lazily connected async Redis client shared by the stores."""

    def __init__(self, settings: HasDatabaseSettings):
        self.settings = settings
        self._redis: Optional[redis.Redis] = None

    def initialize_database(self) -> None:
        """Create the Redis connection pool. There is no schema to create."""
        # Expecting URL like: redis://host:port/0
        self._redis = redis.from_url(self.settings.database_url, decode_responses=True)
        logger.info("Redis client configured for %s", self.settings.database_url)

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[redis.Redis, None]:
        """Yield the pooled Redis client; the pool outlives the context."""
        if self._redis is None:
            self.initialize_database()
        assert self._redis is not None
        yield self._redis

    async def ping(self) -> bool:
        async with self.get_connection() as conn:
            return bool(await conn.ping())

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


_db_client: Union[DatabaseClient, None] = None


def get_database_client(settings: HasDatabaseSettings) -> DatabaseClient:
    """Get or create database client singleton."""
    global _db_client
    if _db_client is None:
        _db_client = DatabaseClient(settings)
    return _db_client
