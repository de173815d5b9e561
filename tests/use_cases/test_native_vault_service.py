"""Use case tests for claiming the accrued native commission."""

from __future__ import annotations

import pytest
import pytest_asyncio

from tokenbridge.application.bridge.dtos import AddressDTO, FixedCommissionDTO
from tokenbridge.domain.errors import NotEnoughBalance, UnauthorizedCommissionReceiver
from tests.fixtures import BridgeHarness


async def accrue(bridge: BridgeHarness, text: str, fee: int = 200) -> None:
    await bridge.fund(bridge.user.address, 1_000)
    await bridge.ledger.deposit_native(bridge.user.address, fee)
    await bridge.conversions.conversion_out(
        bridge.user.address, bridge.out_request(1_000, text=text, native_payment=fee)
    )


@pytest_asyncio.fixture
async def native_bridge(bridge: BridgeHarness) -> BridgeHarness:
    await bridge.admin.enable_and_update_fixed_native_tokens_commission(
        bridge.owner.address, FixedCommissionDTO(amount=200)
    )
    return bridge


async def test_receiver_claims_whole_vault(native_bridge: BridgeHarness) -> None:
    bridge = native_bridge
    await accrue(bridge, "a")
    await accrue(bridge, "b")
    assert (await bridge.admin.get_native_vault()).balance == 400

    claim = await bridge.vault.claim_fixed_native_tokens_commission(
        bridge.receiver.address
    )

    assert claim.receiver == bridge.receiver.address
    assert claim.amount == 400
    assert (await bridge.admin.get_native_vault()).balance == 0
    assert await bridge.ledger.native_balance_of(bridge.receiver.address) == 400
    assert await bridge.ledger.native_balance_of(bridge.bridge_owner.address) == 0


async def test_only_receiver_may_claim(native_bridge: BridgeHarness) -> None:
    bridge = native_bridge
    await accrue(bridge, "a")
    for caller in (bridge.stranger, bridge.bridge_owner, bridge.owner):
        with pytest.raises(UnauthorizedCommissionReceiver):
            await bridge.vault.claim_fixed_native_tokens_commission(caller.address)
    assert (await bridge.admin.get_native_vault()).balance == 200


async def test_empty_vault(native_bridge: BridgeHarness) -> None:
    bridge = native_bridge
    with pytest.raises(NotEnoughBalance):
        await bridge.vault.claim_fixed_native_tokens_commission(bridge.receiver.address)

    await accrue(bridge, "a")
    await bridge.vault.claim_fixed_native_tokens_commission(bridge.receiver.address)
    with pytest.raises(NotEnoughBalance):
        await bridge.vault.claim_fixed_native_tokens_commission(bridge.receiver.address)


async def test_new_receiver_claims_balance_accrued_before_change(
    native_bridge: BridgeHarness,
) -> None:
    bridge = native_bridge
    await accrue(bridge, "a")
    await bridge.admin.update_receiver_commission(
        bridge.owner.address, AddressDTO(address=bridge.stranger.address)
    )

    with pytest.raises(UnauthorizedCommissionReceiver):
        await bridge.vault.claim_fixed_native_tokens_commission(bridge.receiver.address)
    claim = await bridge.vault.claim_fixed_native_tokens_commission(
        bridge.stranger.address
    )
    assert claim.amount == 200


async def test_vault_survives_disabling_commission(native_bridge: BridgeHarness) -> None:
    bridge = native_bridge
    await accrue(bridge, "a")
    await bridge.admin.disable_commission(bridge.owner.address)

    claim = await bridge.vault.claim_fixed_native_tokens_commission(
        bridge.receiver.address
    )
    assert claim.amount == 200
