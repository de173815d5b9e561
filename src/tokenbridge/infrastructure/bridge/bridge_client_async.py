from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, Optional, Type
from types import TracebackType

import httpx
from pydantic import BaseModel

from ...application.bridge.dtos import (
    AddressDTO,
    AuthorizerDTO,
    CommissionProportionsDTO,
    CommissionReceiversDTO,
    CommissionSettingsDTO,
    ConversionConfigurationDTO,
    ConversionInRequestDTO,
    ConversionInResponseDTO,
    ConversionOutRequestDTO,
    ConversionOutResponseDTO,
    FixedCommissionDTO,
    NativeCommissionClaimDTO,
    NativeVaultDTO,
    OwnershipDTO,
    PercentageCommissionDTO,
    TransferOwnershipDTO,
)
from ...crypto.messages import request_digest
from ...crypto.signatures import AuthorizerSigner
from ...middleware.caller_signature import SIGNATURE_HEADER, TIMESTAMP_HEADER
from ..http.http_client import AsyncHttpClient


class BridgeClientAsync:
    """Asynchronous client for the Bridge HTTP API.

    ``base_url`` is expected to include the API prefix (e.g. ``/api/v1/bridge``).
    Mutating calls are signed with ``signer`` for the bridge at
    ``bridge_address``; the service treats the signer as the caller. The
    service accepts each signed request once, so timestamps issued by one
    client never repeat. Read calls need no signer.
    """

    def __init__(
        self,
        base_url: str,
        bridge_address: str,
        signer: Optional[AuthorizerSigner] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._http = AsyncHttpClient(base_url, timeout=timeout, transport=transport)
        self._bridge_address = bridge_address
        self._signer = signer
        self._clock = clock
        self._last_timestamp = 0

    async def _signed(
        self, method: str, path: str, payload: Optional[BaseModel] = None
    ) -> Dict[str, Any]:
        if self._signer is None:
            raise RuntimeError("A signer is required for mutating requests")
        body = (
            json.dumps(payload.model_dump(mode="json")).encode("utf-8")
            if payload is not None
            else b""
        )
        timestamp = max(int(self._clock()), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        url_path = httpx.URL(self._http.url(path)).path
        signature = self._signer.sign_digest(
            request_digest(method, url_path, timestamp, body, self._bridge_address)
        )
        headers = {
            "Content-Type": "application/json",
            TIMESTAMP_HEADER: str(timestamp),
            SIGNATURE_HEADER: signature.to_hex(),
        }
        resp = await self._http.send(method, path, content=body, headers=headers)
        return resp.json()

    # Conversions

    async def conversion_out(
        self, dto: ConversionOutRequestDTO
    ) -> ConversionOutResponseDTO:
        data = await self._signed("POST", "/conversions/out", dto)
        return ConversionOutResponseDTO.model_validate(data)

    async def conversion_in(self, dto: ConversionInRequestDTO) -> ConversionInResponseDTO:
        data = await self._signed("POST", "/conversions/in", dto)
        return ConversionInResponseDTO.model_validate(data)

    # Reads

    async def get_conversion_authorizer(self) -> AuthorizerDTO:
        resp = await self._http.get("/authorizer")
        return AuthorizerDTO.model_validate(resp.json())

    async def get_conversion_configurations(self) -> ConversionConfigurationDTO:
        resp = await self._http.get("/configuration")
        return ConversionConfigurationDTO.model_validate(resp.json())

    async def get_commission_settings(self) -> CommissionSettingsDTO:
        resp = await self._http.get("/commission")
        return CommissionSettingsDTO.model_validate(resp.json())

    async def get_commission_receiver_addresses(self) -> CommissionReceiversDTO:
        resp = await self._http.get("/commission/receivers")
        return CommissionReceiversDTO.model_validate(resp.json())

    async def get_native_vault(self) -> NativeVaultDTO:
        resp = await self._http.get("/commission/native-vault")
        return NativeVaultDTO.model_validate(resp.json())

    async def get_ownership(self) -> OwnershipDTO:
        resp = await self._http.get("/ownership")
        return OwnershipDTO.model_validate(resp.json())

    # Administration

    async def update_authorizer(self, dto: AuthorizerDTO) -> AuthorizerDTO:
        data = await self._signed("PUT", "/admin/authorizer", dto)
        return AuthorizerDTO.model_validate(data)

    async def update_configurations(
        self, dto: ConversionConfigurationDTO
    ) -> ConversionConfigurationDTO:
        data = await self._signed("PUT", "/admin/configuration", dto)
        return ConversionConfigurationDTO.model_validate(data)

    async def update_commission_proportions(
        self, dto: CommissionProportionsDTO
    ) -> CommissionSettingsDTO:
        data = await self._signed("PUT", "/admin/commission/proportions", dto)
        return CommissionSettingsDTO.model_validate(data)

    async def update_receiver_commission(self, dto: AddressDTO) -> CommissionReceiversDTO:
        data = await self._signed("PUT", "/admin/commission/receiver", dto)
        return CommissionReceiversDTO.model_validate(data)

    async def update_bridge_owner(self, dto: AddressDTO) -> CommissionReceiversDTO:
        data = await self._signed("PUT", "/admin/commission/bridge-owner", dto)
        return CommissionReceiversDTO.model_validate(data)

    async def enable_percentage_commission(
        self, dto: PercentageCommissionDTO
    ) -> CommissionSettingsDTO:
        data = await self._signed("POST", "/admin/commission/percentage", dto)
        return CommissionSettingsDTO.model_validate(data)

    async def enable_fixed_token_commission(
        self, dto: FixedCommissionDTO
    ) -> CommissionSettingsDTO:
        data = await self._signed("POST", "/admin/commission/fixed-token", dto)
        return CommissionSettingsDTO.model_validate(data)

    async def enable_fixed_native_commission(
        self, dto: FixedCommissionDTO
    ) -> CommissionSettingsDTO:
        data = await self._signed("POST", "/admin/commission/fixed-native", dto)
        return CommissionSettingsDTO.model_validate(data)

    async def disable_commission(self) -> CommissionSettingsDTO:
        data = await self._signed("POST", "/admin/commission/disable")
        return CommissionSettingsDTO.model_validate(data)

    # Ownership and vault

    async def transfer_ownership(self, dto: TransferOwnershipDTO) -> OwnershipDTO:
        data = await self._signed("POST", "/ownership/transfer", dto)
        return OwnershipDTO.model_validate(data)

    async def accept_ownership(self) -> OwnershipDTO:
        data = await self._signed("POST", "/ownership/accept")
        return OwnershipDTO.model_validate(data)

    async def claim_native_commission(self) -> NativeCommissionClaimDTO:
        data = await self._signed("POST", "/commission/native-vault/claim")
        return NativeCommissionClaimDTO.model_validate(data)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "BridgeClientAsync":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()
