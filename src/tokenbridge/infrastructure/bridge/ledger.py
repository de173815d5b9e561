"""Store-backed reference ledger used as the bridge's ledger collaborator."""

from __future__ import annotations

import logging

from ...domain.shared.addresses import normalize_address
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)


class KeyValueLedger:
    """Fungible token ledger with allowances, minter grants, pause and native balances.

    The instance acts for one operator (normally the bridge address). Because it
    reads and writes through whatever store it is given, a ledger built over a
    unit of work's staged store commits or rolls back together with the bridge
    state.

    Keys:
      - ledger:balance:{address}              -> int
      - ledger:allowance:{owner}:{spender}    -> int
      - ledger:native:{address}               -> int
      - ledger:minted_total                   -> int
      - ledger:minter:{address}               -> "1"
      - ledger:paused                         -> "1"
    """

    def __init__(self, store: KeyValueStore, operator: str):
        self.store = store
        self.operator = normalize_address(operator)

    async def _get_int(self, key: str) -> int:
        raw = await self.store.get(key)
        return int(raw) if raw else 0

    async def _set_int(self, key: str, value: int) -> None:
        await self.store.set(key, str(value))

    # Read side

    async def balance_of(self, identity: str) -> int:
        return await self._get_int(f"ledger:balance:{normalize_address(identity)}")

    async def allowance(self, owner: str, spender: str) -> int:
        return await self._get_int(
            f"ledger:allowance:{normalize_address(owner)}:{normalize_address(spender)}"
        )

    async def minted_total(self) -> int:
        return await self._get_int("ledger:minted_total")

    async def native_balance_of(self, identity: str) -> int:
        return await self._get_int(f"ledger:native:{normalize_address(identity)}")

    async def is_paused(self) -> bool:
        return await self.store.get("ledger:paused") is not None

    async def is_minter(self, identity: str) -> bool:
        return await self.store.get(f"ledger:minter:{normalize_address(identity)}") is not None

    # Ledger administration

    async def pause(self) -> None:
        await self.store.set("ledger:paused", "1")

    async def unpause(self) -> None:
        await self.store.delete("ledger:paused")

    async def grant_minter(self, identity: str) -> None:
        await self.store.set(f"ledger:minter:{normalize_address(identity)}", "1")

    async def issue(self, destination: str, amount: int) -> None:
        """Create tokens for ``destination`` outside of any minter grant."""
        destination = normalize_address(destination)
        await self._set_int(
            f"ledger:balance:{destination}", await self.balance_of(destination) + amount
        )
        await self._set_int("ledger:minted_total", await self.minted_total() + amount)

    async def deposit_native(self, identity: str, amount: int) -> None:
        identity = normalize_address(identity)
        await self._set_int(
            f"ledger:native:{identity}", await self.native_balance_of(identity) + amount
        )

    async def approve(self, owner: str, spender: str, amount: int) -> None:
        await self._set_int(
            f"ledger:allowance:{normalize_address(owner)}:{normalize_address(spender)}",
            amount,
        )

    # Operations consumed by the bridge

    async def transfer_from(self, source: str, destination: str, amount: int) -> bool:
        source = normalize_address(source)
        destination = normalize_address(destination)
        if amount < 0 or await self.is_paused():
            return False

        source_balance = await self.balance_of(source)
        if source_balance < amount:
            logger.debug("transfer_from refused: %s balance too low", source)
            return False

        if source != self.operator:
            allowance = await self.allowance(source, self.operator)
            if allowance < amount:
                logger.debug("transfer_from refused: allowance too low for %s", source)
                return False
            await self.approve(source, self.operator, allowance - amount)

        await self._set_int(f"ledger:balance:{source}", source_balance - amount)
        await self._set_int(
            f"ledger:balance:{destination}", await self.balance_of(destination) + amount
        )
        return True

    async def mint(self, destination: str, amount: int) -> bool:
        if amount < 0 or await self.is_paused():
            return False
        if not await self.is_minter(self.operator):
            logger.debug("mint refused: %s holds no minter grant", self.operator)
            return False
        await self.issue(destination, amount)
        return True

    async def transfer_native(self, source: str, destination: str, amount: int) -> bool:
        source = normalize_address(source)
        destination = normalize_address(destination)
        if amount < 0:
            return False
        source_balance = await self.native_balance_of(source)
        if source_balance < amount:
            return False
        await self._set_int(f"ledger:native:{source}", source_balance - amount)
        await self._set_int(
            f"ledger:native:{destination}",
            await self.native_balance_of(destination) + amount,
        )
        return True
