"""Staged, serialized units of work over the key-value store."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from ...domain.bridge.unit_of_work import BridgeUnitOfWork
from ...domain.shared.addresses import normalize_address
from ...domain.shared.ledger_protocol import LedgerFactory
from ..storage import KeyValueStore, StagedKeyValueStore
from .repositories import BridgeStateRepositoryImpl, UsedSignatureRepositoryImpl


class StagedBridgeUnitOfWork(BridgeUnitOfWork):
    """Repositories and ledger sharing one staged overlay of the store."""

    def __init__(
        self,
        store: KeyValueStore,
        bridge_address: str,
        ledger_factory: LedgerFactory,
    ):
        self.bridge_address = normalize_address(bridge_address)
        self._staged = StagedKeyValueStore(store)
        self.state = BridgeStateRepositoryImpl(self._staged, self.bridge_address)
        self.used_signatures = UsedSignatureRepositoryImpl(
            self._staged, self.bridge_address
        )
        self.ledger = ledger_factory(self._staged)

    async def commit(self) -> None:
        await self._staged.commit()

    def rollback(self) -> None:
        self._staged.discard()


class UnitOfWorkManager:
    """Hands out units of work one at a time for a single bridge instance.

    The lock gives every call a total order (single writer). All writes of a
    unit are flushed by one atomic ``apply`` when the block exits normally and
    dropped when it raises. This only holds inside one process, so the HTTP
    service runs a single worker.
    """

    def __init__(
        self,
        store: KeyValueStore,
        bridge_address: str,
        ledger_factory: LedgerFactory,
    ):
        self._store = store
        self._bridge_address = normalize_address(bridge_address)
        self._ledger_factory = ledger_factory
        self._lock = asyncio.Lock()

    @property
    def bridge_address(self) -> str:
        return self._bridge_address

    @property
    def store(self) -> KeyValueStore:
        """The backing store, for writes that must not wait on a unit."""
        return self._store

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[BridgeUnitOfWork]:
        async with self._lock:
            uow = StagedBridgeUnitOfWork(
                self._store, self._bridge_address, self._ledger_factory
            )
            try:
                yield uow
            except BaseException:
                uow.rollback()
                raise
            await uow.commit()
