"""Data Transfer Objects for the bridge application layer."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ...crypto.signatures import RecoverableSignature
from ...domain.bridge.entities import (
    CommissionMode,
    ConversionDirection,
    ConversionInEvent,
    ConversionOutEvent,
)
from ...domain.shared.addresses import UINT256_MAX, Address, Bytes32Hex


# Conversion DTOs
class ConversionOutRequestDTO(BaseModel):
    """Caller converts its own tokens out, with an authorizer-signed approval."""

    amount: int = Field(ge=0, le=UINT256_MAX)
    conversion_id: Bytes32Hex
    signature: RecoverableSignature
    native_payment: int = Field(default=0, ge=0)


class ConversionInRequestDTO(BaseModel):
    """Anyone may submit an inbound conversion; the approval binds the recipient."""

    recipient: Address
    amount: int = Field(ge=0, le=UINT256_MAX)
    conversion_id: Bytes32Hex
    signature: RecoverableSignature
    native_payment: int = Field(default=0, ge=0)


class ConversionResultDTO(BaseModel):
    """Outcome of a committed conversion."""

    direction: ConversionDirection
    caller: str
    counterparty: str
    amount: int
    conversion_id: str
    digest: str
    token_commission: int
    receiver_share: int
    bridge_owner_share: int
    native_commission: int
    net_amount: int


class ConversionOutResponseDTO(ConversionResultDTO):
    event: ConversionOutEvent


class ConversionInResponseDTO(ConversionResultDTO):
    event: ConversionInEvent


# Configuration DTOs
class AuthorizerDTO(BaseModel):
    authorizer: Address


class ConversionConfigurationDTO(BaseModel):
    min_amount: int = Field(ge=0)
    max_amount: int = Field(ge=0)
    max_supply: int = Field(ge=0)


class CommissionProportionsDTO(BaseModel):
    receiver_proportion: int = Field(ge=0)
    bridge_owner_proportion: int = Field(ge=0)


class AddressDTO(BaseModel):
    address: Address


class PercentageCommissionDTO(BaseModel):
    percentage_numerator: int = Field(ge=0)
    offset_points: int = Field(ge=0)


class FixedCommissionDTO(BaseModel):
    amount: int = Field(ge=0)


class CommissionSettingsDTO(BaseModel):
    """Full commission settings as currently stored."""

    enabled: bool
    mode: CommissionMode
    receiver_proportion: int
    bridge_owner_proportion: int
    percentage_numerator: int
    percentage_offset_points: int
    percentage_limit: int
    fixed_token_amount: int
    fixed_native_amount: int
    fixed_native_limit: int


class CommissionReceiversDTO(BaseModel):
    receiver_address: str
    bridge_owner_address: str


# Ownership DTOs
class OwnershipDTO(BaseModel):
    owner: str
    pending_owner: Optional[str] = None


class TransferOwnershipDTO(BaseModel):
    new_owner: Address


# Native vault DTOs
class NativeVaultDTO(BaseModel):
    balance: int


class NativeCommissionClaimDTO(BaseModel):
    receiver: str
    amount: int
