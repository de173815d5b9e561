"""Storage abstractions, Redis implementation and the staged write overlay."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from .database import DatabaseClient


class KeyValueStore(ABC):
    """Abstract key-value store with minimal operations used by repositories."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> int:
        pass

    @abstractmethod
    async def apply(self, writes: Mapping[str, Optional[str]]) -> None:
        """Atomically apply a batch of writes; a ``None`` value deletes the key."""
        pass

    @abstractmethod
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Set ``key`` only if it does not exist, expiring after ``ttl_seconds``.

        Returns True when this call created the key.
        """
        pass


class RedisKeyValueStore(KeyValueStore):
    """Redis-backed implementation of KeyValueStore."""

    def __init__(self, db_client: DatabaseClient):
        self._db_client = db_client

    async def get(self, key: str) -> Optional[str]:
        async with self._db_client.get_connection() as conn:
            return await conn.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._db_client.get_connection() as conn:
            await conn.set(key, value)

    async def delete(self, key: str) -> int:
        async with self._db_client.get_connection() as conn:
            return await conn.delete(key)

    async def apply(self, writes: Mapping[str, Optional[str]]) -> None:
        if not writes:
            return
        async with self._db_client.get_connection() as conn:
            # MULTI/EXEC: other clients observe all of the batch or none of it
            async with conn.pipeline(transaction=True) as pipe:
                for key, value in writes.items():
                    if value is None:
                        pipe.delete(key)
                    else:
                        pipe.set(key, value)
                await pipe.execute()

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        async with self._db_client.get_connection() as conn:
            return bool(await conn.set(key, value, nx=True, ex=ttl_seconds))


class StagedKeyValueStore(KeyValueStore):
    """Buffers writes over a backing store until ``commit``.

    Reads see the staged writes first, so code running inside a unit of work
    observes its own effects. Dropping the overlay without committing discards
    everything it staged.
    """

    def __init__(self, backing: KeyValueStore):
        self._backing = backing
        self._staged: Dict[str, Optional[str]] = {}

    @property
    def pending_writes(self) -> Dict[str, Optional[str]]:
        return dict(self._staged)

    async def get(self, key: str) -> Optional[str]:
        if key in self._staged:
            return self._staged[key]
        return await self._backing.get(key)

    async def set(self, key: str, value: str) -> None:
        self._staged[key] = value

    async def delete(self, key: str) -> int:
        existed = await self.get(key) is not None
        self._staged[key] = None
        return 1 if existed else 0

    async def apply(self, writes: Mapping[str, Optional[str]]) -> None:
        self._staged.update(writes)

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Not staged: the claim goes straight to the backing store."""
        return await self._backing.set_if_absent(key, value, ttl_seconds)

    async def commit(self) -> None:
        staged, self._staged = self._staged, {}
        await self._backing.apply(staged)

    def discard(self) -> None:
        self._staged.clear()
