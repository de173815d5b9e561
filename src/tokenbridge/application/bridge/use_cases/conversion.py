from __future__ import annotations

import logging
from datetime import datetime, timezone

from ....crypto.messages import build_digest
from ....crypto.signatures import RecoverableSignature, SignatureVerifier
from ....domain.bridge.entities import (
    CommissionBreakdown,
    CommissionConfig,
    ConversionDirection,
    ConversionInEvent,
    ConversionOutEvent,
    NativeVault,
)
from ....domain.bridge.events import EventPublisher
from ....domain.bridge.unit_of_work import BridgeUnitOfWork, UnitOfWorkProvider
from ....domain.errors import (
    BridgeError,
    ConversionFailed,
    ConversionMintFailed,
    InvalidRequestOrSignature,
)
from ....domain.shared.addresses import bytes32_from_hex, normalize_address
from ...bridge.commission import compute_commission
from ...bridge.dtos import (
    ConversionInRequestDTO,
    ConversionInResponseDTO,
    ConversionOutRequestDTO,
    ConversionOutResponseDTO,
)
from ...bridge.limits import check_amount, check_supply
from ...bridge.replay import ReplayGuard
from .state import require_commission, require_configuration

logger = logging.getLogger(__name__)


class ConversionService:
    """Authorizes and executes conversions in both directions.

    Each call runs inside one unit of work: signature, replay, limit and
    commission checks come first, then the ledger effects, then the replay
    mark. The unit only commits when every step succeeded, so a failure at any
    point leaves balances, the used-signature set and the vault untouched.
    Events are published after the commit.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWorkProvider,
        verifier: SignatureVerifier,
        event_publisher: EventPublisher,
    ):
        self.unit_of_work = unit_of_work
        self.verifier = verifier
        self.event_publisher = event_publisher

    async def _authorize(
        self,
        uow: BridgeUnitOfWork,
        direction: ConversionDirection,
        amount: int,
        counterparty: str,
        conversion_id: str,
        signature: RecoverableSignature,
    ) -> bytes:
        """Steps shared by both directions: digest, signature, replay, amount limits."""
        configuration = await require_configuration(uow.state)

        digest = build_digest(
            direction,
            amount,
            counterparty,
            bytes32_from_hex(conversion_id),
            uow.bridge_address,
        )
        if not self.verifier.verify(digest, signature, configuration.authorizer):
            raise InvalidRequestOrSignature()

        await ReplayGuard(uow.used_signatures).ensure_unused(digest)
        check_amount(amount, configuration)
        return digest

    async def _accrue_native_commission(
        self, uow: BridgeUnitOfWork, caller: str, breakdown: CommissionBreakdown
    ) -> None:
        if not breakdown.native_commission_accepted:
            return
        if not await uow.ledger.transfer_native(
            caller, uow.bridge_address, breakdown.native_commission_accepted
        ):
            raise ConversionFailed("Native commission payment failed")
        vault = await uow.state.get_native_vault()
        await uow.state.save_native_vault(
            NativeVault(
                balance=vault.balance + breakdown.native_commission_accepted,
                updated_at=datetime.now(timezone.utc),
            )
        )

    async def conversion_out(
        self, caller: str, dto: ConversionOutRequestDTO
    ) -> ConversionOutResponseDTO:
        caller = normalize_address(caller)
        try:
            async with self.unit_of_work() as uow:
                digest = await self._authorize(
                    uow,
                    ConversionDirection.OUT,
                    dto.amount,
                    caller,
                    dto.conversion_id,
                    dto.signature,
                )

                if not await uow.ledger.transfer_from(
                    caller, uow.bridge_address, dto.amount
                ):
                    raise ConversionFailed()

                commission: CommissionConfig = await require_commission(uow.state)
                breakdown = compute_commission(dto.amount, dto.native_payment, commission)

                if breakdown.token_commission > 0:
                    for beneficiary, share in (
                        (commission.receiver_address, breakdown.receiver_share),
                        (commission.bridge_owner_address, breakdown.bridge_owner_share),
                    ):
                        if share and not await uow.ledger.transfer_from(
                            uow.bridge_address, beneficiary, share
                        ):
                            raise ConversionFailed("Commission transfer failed")

                await self._accrue_native_commission(uow, caller, breakdown)
                await ReplayGuard(uow.used_signatures).mark_used(digest)
        except BridgeError as e:
            logger.warning("conversion_out rejected for %s: %s", caller, e.code)
            raise

        event = ConversionOutEvent(
            caller=caller,
            amount=dto.amount,
            conversion_id=dto.conversion_id,
            digest="0x" + digest.hex(),
        )
        await self.event_publisher.publish(event)
        logger.info("conversion_out committed: %s amount=%d", caller, dto.amount)

        return ConversionOutResponseDTO(
            direction=ConversionDirection.OUT,
            caller=caller,
            counterparty=caller,
            amount=dto.amount,
            conversion_id=dto.conversion_id,
            digest=event.digest,
            token_commission=breakdown.token_commission,
            receiver_share=breakdown.receiver_share,
            bridge_owner_share=breakdown.bridge_owner_share,
            native_commission=breakdown.native_commission_accepted,
            net_amount=dto.amount - breakdown.token_commission,
            event=event,
        )

    async def conversion_in(
        self, caller: str, dto: ConversionInRequestDTO
    ) -> ConversionInResponseDTO:
        caller = normalize_address(caller)
        recipient = dto.recipient
        try:
            async with self.unit_of_work() as uow:
                digest = await self._authorize(
                    uow,
                    ConversionDirection.IN,
                    dto.amount,
                    recipient,
                    dto.conversion_id,
                    dto.signature,
                )

                configuration = await require_configuration(uow.state)
                check_supply(await uow.ledger.minted_total(), dto.amount, configuration)

                commission = await require_commission(uow.state)
                breakdown = compute_commission(dto.amount, dto.native_payment, commission)

                net_amount = dto.amount - breakdown.token_commission
                if not await uow.ledger.mint(recipient, net_amount):
                    raise ConversionMintFailed()

                if breakdown.token_commission > 0:
                    for beneficiary, share in (
                        (commission.receiver_address, breakdown.receiver_share),
                        (commission.bridge_owner_address, breakdown.bridge_owner_share),
                    ):
                        if share and not await uow.ledger.mint(beneficiary, share):
                            raise ConversionMintFailed("Commission mint failed")

                await self._accrue_native_commission(uow, caller, breakdown)
                await ReplayGuard(uow.used_signatures).mark_used(digest)
        except BridgeError as e:
            logger.warning("conversion_in rejected for %s: %s", recipient, e.code)
            raise

        event = ConversionInEvent(
            recipient=recipient,
            caller=caller,
            amount=dto.amount,
            conversion_id=dto.conversion_id,
            digest="0x" + digest.hex(),
        )
        await self.event_publisher.publish(event)
        logger.info(
            "conversion_in committed: %s amount=%d via %s", recipient, dto.amount, caller
        )

        return ConversionInResponseDTO(
            direction=ConversionDirection.IN,
            caller=caller,
            counterparty=recipient,
            amount=dto.amount,
            conversion_id=dto.conversion_id,
            digest=event.digest,
            token_commission=breakdown.token_commission,
            receiver_share=breakdown.receiver_share,
            bridge_owner_share=breakdown.bridge_owner_share,
            native_commission=breakdown.native_commission_accepted,
            net_amount=net_amount,
            event=event,
        )
