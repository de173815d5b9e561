"""Two-step ownership routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ....application.bridge.dtos import OwnershipDTO, TransferOwnershipDTO
from ....application.bridge.use_cases.administration import AdministrationService
from ..dependencies import get_administration_service, get_caller

router = APIRouter(prefix="/ownership", tags=["ownership"])


@router.get("", response_model=OwnershipDTO)
async def get_ownership(
    service: AdministrationService = Depends(get_administration_service),
) -> OwnershipDTO:
    return await service.get_ownership()


@router.post("/transfer", response_model=OwnershipDTO)
async def transfer_ownership(
    payload: TransferOwnershipDTO,
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> OwnershipDTO:
    return await service.transfer_ownership(caller, payload)


@router.post("/accept", response_model=OwnershipDTO)
async def accept_ownership(
    caller: str = Depends(get_caller),
    service: AdministrationService = Depends(get_administration_service),
) -> OwnershipDTO:
    return await service.accept_ownership(caller)
