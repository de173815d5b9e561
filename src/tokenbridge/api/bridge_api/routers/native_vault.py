"""Native commission vault routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ....application.bridge.dtos import NativeCommissionClaimDTO, NativeVaultDTO
from ....application.bridge.use_cases.administration import AdministrationService
from ....application.bridge.use_cases.native_vault import NativeCommissionVaultService
from ..dependencies import (
    get_administration_service,
    get_caller,
    get_native_vault_service,
)

router = APIRouter(prefix="/commission/native-vault", tags=["commission"])


@router.get("", response_model=NativeVaultDTO)
async def get_native_vault(
    service: AdministrationService = Depends(get_administration_service),
) -> NativeVaultDTO:
    return await service.get_native_vault()


@router.post("/claim", response_model=NativeCommissionClaimDTO)
async def claim_native_commission(
    caller: str = Depends(get_caller),
    service: NativeCommissionVaultService = Depends(get_native_vault_service),
) -> NativeCommissionClaimDTO:
    """Pay the whole accrued native commission to the commission receiver."""
    return await service.claim_fixed_native_tokens_commission(caller)
