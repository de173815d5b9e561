from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from ....domain.bridge.entities import (
    CommissionConfig,
    ConversionConfiguration,
    Ownership,
)
from ....domain.bridge.unit_of_work import UnitOfWorkProvider
from ....domain.errors import ZeroAddress
from ....domain.shared.addresses import Address, is_zero_address
from ..commission import validate_fixed_native_limit, validate_proportions

logger = logging.getLogger(__name__)


class BridgeParameters(BaseModel):
    """Construction-time parameters of a bridge instance."""

    owner: Address
    commission_is_enabled: bool = False
    receiver_commission_proportion: int
    bridge_owner_commission_proportion: int
    fixed_native_commission_limit: int
    commission_receiver: Address
    bridge_owner: Address
    percentage_commission_limit: int = Field(default=100, gt=0)


class BridgeBootstrapService:
    """Validates construction parameters and persists the initial bridge state."""

    def __init__(self, unit_of_work: UnitOfWorkProvider):
        self.unit_of_work = unit_of_work

    async def initialize(self, params: BridgeParameters) -> bool:
        """Create the bridge state unless it already exists.

        Returns True when the state was created by this call. Construction
        fails, and nothing is written, if any invariant does not hold.
        """
        validate_fixed_native_limit(params.fixed_native_commission_limit)
        validate_proportions(
            params.receiver_commission_proportion,
            params.bridge_owner_commission_proportion,
        )
        for address in (params.owner, params.commission_receiver, params.bridge_owner):
            if is_zero_address(address):
                raise ZeroAddress()

        async with self.unit_of_work() as uow:
            if is_zero_address(uow.bridge_address):
                raise ZeroAddress("Bridge address must not be the zero address")
            if await uow.state.is_initialized():
                logger.info("Bridge %s already initialized", uow.bridge_address)
                return False

            await uow.state.save_configuration(ConversionConfiguration())
            await uow.state.save_commission(
                CommissionConfig(
                    enabled=params.commission_is_enabled,
                    percentage_limit=params.percentage_commission_limit,
                    fixed_native_limit=params.fixed_native_commission_limit,
                    receiver_proportion=params.receiver_commission_proportion,
                    bridge_owner_proportion=params.bridge_owner_commission_proportion,
                    receiver_address=params.commission_receiver,
                    bridge_owner_address=params.bridge_owner,
                )
            )
            await uow.state.save_ownership(Ownership(owner=params.owner))
            logger.info(
                "Bridge %s initialized with owner %s", uow.bridge_address, params.owner
            )
            return True
