from __future__ import annotations

import logging
from datetime import datetime, timezone

from ....domain.bridge.entities import NativeVault
from ....domain.bridge.unit_of_work import UnitOfWorkProvider
from ....domain.errors import (
    ConversionFailed,
    NotEnoughBalance,
    UnauthorizedCommissionReceiver,
)
from ....domain.shared.addresses import normalize_address
from ..dtos import NativeCommissionClaimDTO
from .state import require_commission

logger = logging.getLogger(__name__)


class NativeCommissionVaultService:
    """Pays out the native commission accrued by the bridge.

    The whole balance goes to the commission receiver; the receiver and bridge
    owner proportions do not apply to native commission.
    """

    def __init__(self, unit_of_work: UnitOfWorkProvider):
        self.unit_of_work = unit_of_work

    async def claim_fixed_native_tokens_commission(
        self, caller: str
    ) -> NativeCommissionClaimDTO:
        caller = normalize_address(caller)
        async with self.unit_of_work() as uow:
            commission = await require_commission(uow.state)
            if caller != commission.receiver_address:
                logger.warning("Native commission claim rejected for %s", caller)
                raise UnauthorizedCommissionReceiver()

            vault = await uow.state.get_native_vault()
            if vault.balance == 0:
                raise NotEnoughBalance("No native commission to claim")

            if not await uow.ledger.transfer_native(
                uow.bridge_address, caller, vault.balance
            ):
                raise ConversionFailed("Native commission transfer failed")

            await uow.state.save_native_vault(
                NativeVault(balance=0, updated_at=datetime.now(timezone.utc))
            )

        logger.info("Native commission of %d claimed by %s", vault.balance, caller)
        return NativeCommissionClaimDTO(receiver=caller, amount=vault.balance)
