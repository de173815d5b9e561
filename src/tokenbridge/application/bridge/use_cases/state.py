"""Helpers for loading bridge state inside a unit of work."""

from __future__ import annotations

from ....domain.bridge.entities import (
    CommissionConfig,
    ConversionConfiguration,
    Ownership,
)
from ....domain.bridge.repositories import BridgeStateRepository
from ....domain.errors import BridgeNotInitialized, CallerNotOwner
from ....domain.shared.addresses import normalize_address


async def require_configuration(state: BridgeStateRepository) -> ConversionConfiguration:
    configuration = await state.get_configuration()
    if configuration is None:
        raise BridgeNotInitialized()
    return configuration


async def require_commission(state: BridgeStateRepository) -> CommissionConfig:
    commission = await state.get_commission()
    if commission is None:
        raise BridgeNotInitialized()
    return commission


async def require_ownership(state: BridgeStateRepository) -> Ownership:
    ownership = await state.get_ownership()
    if ownership is None:
        raise BridgeNotInitialized()
    return ownership


async def require_owner(state: BridgeStateRepository, caller: str) -> Ownership:
    """Owner capability check for administrative calls."""
    ownership = await require_ownership(state)
    if normalize_address(caller) != ownership.owner:
        raise CallerNotOwner()
    return ownership
