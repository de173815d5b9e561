"""Protocol interface for the fungible-value ledger the bridge drives.

The ledger owns balances, allowances, minting rights and the pause switch. The
bridge only asks it to move or create value and reads the minted total; every
mutating call answers ``True`` on success and ``False`` when the ledger refuses
(paused, missing allowance, insufficient balance, no minting right).
"""

from __future__ import annotations

from typing import Callable, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ...infrastructure.storage import KeyValueStore


class LedgerProtocol(Protocol):
    """Operations the bridge consumes from the ledger collaborator.

    Implementations act on behalf of a single operator identity (the bridge
    itself): ``transfer_from`` spends the operator's allowance unless the source
    is the operator, and ``mint`` requires the operator to hold the minter grant.
    """

    async def balance_of(self, identity: str) -> int:
        ...

    async def transfer_from(self, source: str, destination: str, amount: int) -> bool:
        ...

    async def mint(self, destination: str, amount: int) -> bool:
        ...

    async def minted_total(self) -> int:
        ...

    async def native_balance_of(self, identity: str) -> int:
        ...

    async def transfer_native(
        self, source: str, destination: str, amount: int
    ) -> bool:
        ...


# Builds a ledger view over the store of the current unit of work.
LedgerFactory = Callable[["KeyValueStore"], LedgerProtocol]
