"""Bridge domain entities: configuration, commission, ownership, vault and events."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from ..shared.addresses import ZERO_ADDRESS, Address, Bytes32Hex


class ConversionDirection(str, Enum):
    """Direction of a conversion relative to the managed ledger."""

    OUT = "out"
    IN = "in"

    @property
    def tag(self) -> str:
        """Domain separation tag bound into the signed message."""
        return "__conversionOut" if self is ConversionDirection.OUT else "__conversionIn"


class CommissionMode(str, Enum):
    DISABLED = "disabled"
    PERCENTAGE_TOKEN = "percentage_token"
    FIXED_TOKEN = "fixed_token"
    FIXED_NATIVE = "fixed_native"


class ConversionConfiguration(BaseModel):
    """Authorizer and amount limits. Invariant: min <= max <= max_supply."""

    authorizer: Address = ZERO_ADDRESS
    min_amount: int = Field(default=0, ge=0)
    max_amount: int = Field(default=0, ge=0)
    max_supply: int = Field(default=0, ge=0)


class CommissionConfig(BaseModel):
    """Commission settings. Only the parameters of ``mode`` are ever non-zero."""

    enabled: bool = False
    mode: CommissionMode = CommissionMode.DISABLED
    percentage_numerator: int = Field(default=0, ge=0)
    percentage_offset_points: int = Field(default=0, ge=0)
    percentage_limit: int = Field(default=100, gt=0)
    fixed_token_amount: int = Field(default=0, ge=0)
    fixed_native_amount: int = Field(default=0, ge=0)
    fixed_native_limit: int = Field(gt=0)
    receiver_proportion: int = Field(ge=0, le=100)
    bridge_owner_proportion: int = Field(ge=0, le=100)
    receiver_address: Address
    bridge_owner_address: Address

    @property
    def active_mode(self) -> CommissionMode:
        return self.mode if self.enabled else CommissionMode.DISABLED

    def cleared(self) -> "CommissionConfig":
        """Copy with every mode parameter zeroed and commission disabled."""
        return self.model_copy(
            update={
                "enabled": False,
                "mode": CommissionMode.DISABLED,
                "percentage_numerator": 0,
                "percentage_offset_points": 0,
                "fixed_token_amount": 0,
                "fixed_native_amount": 0,
            }
        )


class Ownership(BaseModel):
    """Two-step ownership: the pending owner becomes owner only by accepting."""

    owner: Address
    pending_owner: Optional[Address] = None


class NativeVault(BaseModel):
    """Native-currency commission accrued by the bridge."""

    balance: int = Field(default=0, ge=0)
    updated_at: Optional[datetime] = None

    @field_serializer("updated_at")
    def serialize_updated_at(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None


class CommissionBreakdown(BaseModel):
    """Result of a commission computation for one conversion."""

    token_commission: int = 0
    native_commission_accepted: int = 0
    receiver_share: int = 0
    bridge_owner_share: int = 0


class ConversionOutEvent(BaseModel):
    caller: Address
    amount: int
    conversion_id: Bytes32Hex
    digest: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("occurred_at")
    def serialize_occurred_at(self, value: datetime) -> str:
        return value.isoformat()


class ConversionInEvent(BaseModel):
    recipient: Address
    caller: Address
    amount: int
    conversion_id: Bytes32Hex
    digest: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("occurred_at")
    def serialize_occurred_at(self, value: datetime) -> str:
        return value.isoformat()
