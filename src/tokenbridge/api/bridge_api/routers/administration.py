"""Owner-only configuration routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ....application.bridge.dtos import (
    AddressDTO,
    AuthorizerDTO,
    CommissionProportionsDTO,
    CommissionReceiversDTO,
    CommissionSettingsDTO,
    ConversionConfigurationDTO,
    FixedCommissionDTO,
    PercentageCommissionDTO,
)
from ....application.bridge.use_cases.administration import AdministrationService
from ..dependencies import get_administration_service, get_caller

router = APIRouter(prefix="/admin", tags=["admin"])


@router.put("/authorizer", response_model=AuthorizerDTO)
async def update_authorizer(
    payload: AuthorizerDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> AuthorizerDTO:
    return await service.update_authorizer(caller, payload)


@router.put("/configuration", response_model=ConversionConfigurationDTO)
async def update_configurations(
    payload: ConversionConfigurationDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> ConversionConfigurationDTO:
    return await service.update_configurations(caller, payload)


@router.put("/commission/proportions", response_model=CommissionSettingsDTO)
async def update_commission_proportions(
    payload: CommissionProportionsDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionSettingsDTO:
    return await service.update_commission_proportions(caller, payload)


@router.put("/commission/receiver", response_model=CommissionReceiversDTO)
async def update_receiver_commission(
    payload: AddressDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionReceiversDTO:
    return await service.update_receiver_commission(caller, payload)


@router.put("/commission/bridge-owner", response_model=CommissionReceiversDTO)
async def update_bridge_owner(
    payload: AddressDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionReceiversDTO:
    return await service.update_bridge_owner(caller, payload)


@router.post("/commission/percentage", response_model=CommissionSettingsDTO)
async def enable_percentage_commission(
    payload: PercentageCommissionDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionSettingsDTO:
    return await service.enable_and_update_percentage_tokens_commission(caller, payload)


@router.post("/commission/fixed-token", response_model=CommissionSettingsDTO)
async def enable_fixed_token_commission(
    payload: FixedCommissionDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionSettingsDTO:
    return await service.enable_and_update_fixed_tokens_commission(caller, payload)


@router.post("/commission/fixed-native", response_model=CommissionSettingsDTO)
async def enable_fixed_native_commission(
    payload: FixedCommissionDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionSettingsDTO:
    return await service.enable_and_update_fixed_native_tokens_commission(
        caller, payload
    )


@router.post("/commission/disable", response_model=CommissionSettingsDTO)
async def disable_commission(
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionSettingsDTO:
    return await service.disable_commission(caller)
