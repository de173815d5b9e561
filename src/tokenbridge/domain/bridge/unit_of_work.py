"""Unit-of-work port: one atomic, serialized bridge call."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncContextManager, Callable

from ..shared.ledger_protocol import LedgerProtocol
from .repositories import BridgeStateRepository, UsedSignatureRepository


class BridgeUnitOfWork(ABC):
    """Repositories and ledger view whose writes commit together or not at all."""

    bridge_address: str
    state: BridgeStateRepository
    used_signatures: UsedSignatureRepository
    ledger: LedgerProtocol

    @abstractmethod
    async def commit(self) -> None:
        pass


# Opens a unit of work; leaving the context without an exception commits it.
UnitOfWorkProvider = Callable[[], AsyncContextManager[BridgeUnitOfWork]]
