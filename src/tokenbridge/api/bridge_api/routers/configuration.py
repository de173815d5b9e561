"""Public read routes for the bridge configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ....application.bridge.dtos import (
    AuthorizerDTO,
    CommissionReceiversDTO,
    CommissionSettingsDTO,
    ConversionConfigurationDTO,
)
from ....application.bridge.use_cases.administration import AdministrationService
from ..dependencies import get_administration_service

router = APIRouter(tags=["configuration"])


@router.get("/authorizer", response_model=AuthorizerDTO)
async def get_conversion_authorizer(
    service: AdministrationService = Depends(get_administration_service),
) -> AuthorizerDTO:
    return await service.get_conversion_authorizer()


@router.get("/configuration", response_model=ConversionConfigurationDTO)
async def get_conversion_configurations(
    service: AdministrationService = Depends(get_administration_service),
) -> ConversionConfigurationDTO:
    return await service.get_conversion_configurations()


@router.get("/commission", response_model=CommissionSettingsDTO)
async def get_commission_settings(
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionSettingsDTO:
    return await service.get_commission_settings()


@router.get("/commission/receivers", response_model=CommissionReceiversDTO)
async def get_commission_receiver_addresses(
    service: AdministrationService = Depends(get_administration_service),
) -> CommissionReceiversDTO:
    return await service.get_commission_receiver_addresses()
