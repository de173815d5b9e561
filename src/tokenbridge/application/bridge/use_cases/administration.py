from __future__ import annotations

import logging

from ....domain.bridge.entities import CommissionConfig
from ....domain.bridge.unit_of_work import BridgeUnitOfWork, UnitOfWorkProvider
from ....domain.errors import CallerNotPendingOwner, ZeroAddress
from ....domain.shared.addresses import is_zero_address, normalize_address
from ..commission import (
    activate_fixed_native_commission,
    activate_fixed_token_commission,
    activate_percentage_commission,
    validate_proportions,
)
from ..dtos import (
    AddressDTO,
    AuthorizerDTO,
    CommissionProportionsDTO,
    CommissionReceiversDTO,
    CommissionSettingsDTO,
    ConversionConfigurationDTO,
    FixedCommissionDTO,
    NativeVaultDTO,
    OwnershipDTO,
    PercentageCommissionDTO,
    TransferOwnershipDTO,
)
from ..limits import validate_configuration
from .state import (
    require_commission,
    require_configuration,
    require_owner,
    require_ownership,
)

logger = logging.getLogger(__name__)


def _settings_dto(commission: CommissionConfig) -> CommissionSettingsDTO:
    return CommissionSettingsDTO(
        enabled=commission.enabled,
        mode=commission.active_mode,
        receiver_proportion=commission.receiver_proportion,
        bridge_owner_proportion=commission.bridge_owner_proportion,
        percentage_numerator=commission.percentage_numerator,
        percentage_offset_points=commission.percentage_offset_points,
        percentage_limit=commission.percentage_limit,
        fixed_token_amount=commission.fixed_token_amount,
        fixed_native_amount=commission.fixed_native_amount,
        fixed_native_limit=commission.fixed_native_limit,
    )


class AdministrationService:
    """Owner-gated configuration mutators, read accessors and ownership transfer.

    Every mutator checks the owner capability first and validates its input
    before anything is written, so a rejected call leaves the stored state as
    it was.
    """

    def __init__(self, unit_of_work: UnitOfWorkProvider):
        self.unit_of_work = unit_of_work

    async def _update_commission(
        self, uow: BridgeUnitOfWork, commission: CommissionConfig
    ) -> CommissionSettingsDTO:
        saved = await uow.state.save_commission(commission)
        return _settings_dto(saved)

    # Conversion configuration

    async def update_authorizer(self, caller: str, dto: AuthorizerDTO) -> AuthorizerDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            if is_zero_address(dto.authorizer):
                raise ZeroAddress("Authorizer must not be the zero address")
            configuration = await require_configuration(uow.state)
            await uow.state.save_configuration(
                configuration.model_copy(update={"authorizer": dto.authorizer})
            )
        logger.info("Conversion authorizer updated to %s", dto.authorizer)
        return AuthorizerDTO(authorizer=dto.authorizer)

    async def update_configurations(
        self, caller: str, dto: ConversionConfigurationDTO
    ) -> ConversionConfigurationDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            validate_configuration(dto.min_amount, dto.max_amount, dto.max_supply)
            configuration = await require_configuration(uow.state)
            await uow.state.save_configuration(
                configuration.model_copy(
                    update={
                        "min_amount": dto.min_amount,
                        "max_amount": dto.max_amount,
                        "max_supply": dto.max_supply,
                    }
                )
            )
        logger.info(
            "Conversion limits updated: min=%d max=%d max_supply=%d",
            dto.min_amount,
            dto.max_amount,
            dto.max_supply,
        )
        return dto

    # Commission

    async def update_commission_proportions(
        self, caller: str, dto: CommissionProportionsDTO
    ) -> CommissionSettingsDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            validate_proportions(dto.receiver_proportion, dto.bridge_owner_proportion)
            commission = await require_commission(uow.state)
            result = await self._update_commission(
                uow,
                commission.model_copy(
                    update={
                        "receiver_proportion": dto.receiver_proportion,
                        "bridge_owner_proportion": dto.bridge_owner_proportion,
                    }
                ),
            )
        logger.info(
            "Commission proportions updated: %d/%d",
            dto.receiver_proportion,
            dto.bridge_owner_proportion,
        )
        return result

    async def update_receiver_commission(
        self, caller: str, dto: AddressDTO
    ) -> CommissionReceiversDTO:
        return await self._update_beneficiary(caller, "receiver_address", dto.address)

    async def update_bridge_owner(
        self, caller: str, dto: AddressDTO
    ) -> CommissionReceiversDTO:
        return await self._update_beneficiary(caller, "bridge_owner_address", dto.address)

    async def _update_beneficiary(
        self, caller: str, field: str, address: str
    ) -> CommissionReceiversDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            if is_zero_address(address):
                raise ZeroAddress()
            commission = await require_commission(uow.state)
            saved = await uow.state.save_commission(
                commission.model_copy(update={field: address})
            )
        logger.info("Commission %s updated to %s", field, address)
        return CommissionReceiversDTO(
            receiver_address=saved.receiver_address,
            bridge_owner_address=saved.bridge_owner_address,
        )

    async def enable_and_update_percentage_tokens_commission(
        self, caller: str, dto: PercentageCommissionDTO
    ) -> CommissionSettingsDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            commission = await require_commission(uow.state)
            result = await self._update_commission(
                uow,
                activate_percentage_commission(
                    commission, dto.percentage_numerator, dto.offset_points
                ),
            )
        logger.info(
            "Percentage commission enabled: %d/%d",
            dto.percentage_numerator,
            dto.offset_points,
        )
        return result

    async def enable_and_update_fixed_tokens_commission(
        self, caller: str, dto: FixedCommissionDTO
    ) -> CommissionSettingsDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            commission = await require_commission(uow.state)
            result = await self._update_commission(
                uow, activate_fixed_token_commission(commission, dto.amount)
            )
        logger.info("Fixed token commission enabled: %d", dto.amount)
        return result

    async def enable_and_update_fixed_native_tokens_commission(
        self, caller: str, dto: FixedCommissionDTO
    ) -> CommissionSettingsDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            commission = await require_commission(uow.state)
            result = await self._update_commission(
                uow, activate_fixed_native_commission(commission, dto.amount)
            )
        logger.info("Fixed native commission enabled: %d", dto.amount)
        return result

    async def disable_commission(self, caller: str) -> CommissionSettingsDTO:
        async with self.unit_of_work() as uow:
            await require_owner(uow.state, caller)
            commission = await require_commission(uow.state)
            result = await self._update_commission(uow, commission.cleared())
        logger.info("Commission disabled")
        return result

    # Read accessors

    async def get_conversion_authorizer(self) -> AuthorizerDTO:
        async with self.unit_of_work() as uow:
            configuration = await require_configuration(uow.state)
        return AuthorizerDTO(authorizer=configuration.authorizer)

    async def get_conversion_configurations(self) -> ConversionConfigurationDTO:
        async with self.unit_of_work() as uow:
            configuration = await require_configuration(uow.state)
        return ConversionConfigurationDTO(
            min_amount=configuration.min_amount,
            max_amount=configuration.max_amount,
            max_supply=configuration.max_supply,
        )

    async def get_commission_settings(self) -> CommissionSettingsDTO:
        async with self.unit_of_work() as uow:
            commission = await require_commission(uow.state)
        return _settings_dto(commission)

    async def get_commission_receiver_addresses(self) -> CommissionReceiversDTO:
        async with self.unit_of_work() as uow:
            commission = await require_commission(uow.state)
        return CommissionReceiversDTO(
            receiver_address=commission.receiver_address,
            bridge_owner_address=commission.bridge_owner_address,
        )

    async def get_native_vault(self) -> NativeVaultDTO:
        async with self.unit_of_work() as uow:
            vault = await uow.state.get_native_vault()
        return NativeVaultDTO(balance=vault.balance)

    # Ownership

    async def get_ownership(self) -> OwnershipDTO:
        async with self.unit_of_work() as uow:
            ownership = await require_ownership(uow.state)
        return OwnershipDTO(owner=ownership.owner, pending_owner=ownership.pending_owner)

    async def transfer_ownership(
        self, caller: str, dto: TransferOwnershipDTO
    ) -> OwnershipDTO:
        """Start a two-step transfer; the new owner must accept it."""
        async with self.unit_of_work() as uow:
            ownership = await require_owner(uow.state, caller)
            if is_zero_address(dto.new_owner):
                raise ZeroAddress("New owner must not be the zero address")
            saved = await uow.state.save_ownership(
                ownership.model_copy(update={"pending_owner": dto.new_owner})
            )
        logger.info("Ownership transfer to %s started", dto.new_owner)
        return OwnershipDTO(owner=saved.owner, pending_owner=saved.pending_owner)

    async def accept_ownership(self, caller: str) -> OwnershipDTO:
        caller = normalize_address(caller)
        async with self.unit_of_work() as uow:
            ownership = await require_ownership(uow.state)
            if ownership.pending_owner is None or ownership.pending_owner != caller:
                raise CallerNotPendingOwner()
            saved = await uow.state.save_ownership(
                ownership.model_copy(update={"owner": caller, "pending_owner": None})
            )
        logger.info("Ownership accepted by %s", caller)
        return OwnershipDTO(owner=saved.owner, pending_owner=saved.pending_owner)
