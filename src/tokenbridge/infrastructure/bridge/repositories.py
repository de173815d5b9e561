"""Bridge repositories implemented over a storage abstraction."""

from __future__ import annotations

from typing import Optional

from ...domain.bridge.entities import (
    CommissionConfig,
    ConversionConfiguration,
    NativeVault,
    Ownership,
)
from ...domain.bridge.repositories import (
    BridgeStateRepository,
    UsedSignatureRepository,
)
from ..storage import KeyValueStore


class BridgeStateRepositoryImpl(BridgeStateRepository):
    """Bridge state records backed by KeyValueStore.

    Key layout (one namespace per bridge address):
      - bridge:{address}:configuration -> ConversionConfiguration JSON
      - bridge:{address}:commission    -> CommissionConfig JSON
      - bridge:{address}:ownership     -> Ownership JSON
      - bridge:{address}:native_vault  -> NativeVault JSON
    """

    def __init__(self, store: KeyValueStore, bridge_address: str):
        self.store = store
        self.bridge_address = bridge_address

    def _key(self, name: str) -> str:
        return f"bridge:{self.bridge_address}:{name}"

    async def is_initialized(self) -> bool:
        return await self.store.get(self._key("ownership")) is not None

    async def get_configuration(self) -> Optional[ConversionConfiguration]:
        data = await self.store.get(self._key("configuration"))
        if not data:
            return None
        return ConversionConfiguration.model_validate_json(data)

    async def save_configuration(
        self, configuration: ConversionConfiguration
    ) -> ConversionConfiguration:
        await self.store.set(self._key("configuration"), configuration.model_dump_json())
        return configuration

    async def get_commission(self) -> Optional[CommissionConfig]:
        data = await self.store.get(self._key("commission"))
        if not data:
            return None
        return CommissionConfig.model_validate_json(data)

    async def save_commission(self, commission: CommissionConfig) -> CommissionConfig:
        await self.store.set(self._key("commission"), commission.model_dump_json())
        return commission

    async def get_ownership(self) -> Optional[Ownership]:
        data = await self.store.get(self._key("ownership"))
        if not data:
            return None
        return Ownership.model_validate_json(data)

    async def save_ownership(self, ownership: Ownership) -> Ownership:
        await self.store.set(self._key("ownership"), ownership.model_dump_json())
        return ownership

    async def get_native_vault(self) -> NativeVault:
        data = await self.store.get(self._key("native_vault"))
        if not data:
            return NativeVault()
        return NativeVault.model_validate_json(data)

    async def save_native_vault(self, vault: NativeVault) -> NativeVault:
        await self.store.set(self._key("native_vault"), vault.model_dump_json())
        return vault


class UsedSignatureRepositoryImpl(UsedSignatureRepository):
    """Used digests stored as individual keys; nothing ever deletes them.

    Keys:
      - bridge:{address}:used_signature:{digest_hex} -> "1"
    """

    def __init__(self, store: KeyValueStore, bridge_address: str):
        self.store = store
        self.bridge_address = bridge_address

    def _key(self, digest_hex: str) -> str:
        return f"bridge:{self.bridge_address}:used_signature:{digest_hex}"

    async def contains(self, digest_hex: str) -> bool:
        return await self.store.get(self._key(digest_hex)) is not None

    async def add(self, digest_hex: str) -> None:
        await self.store.set(self._key(digest_hex), "1")


class UsedRequestRegistry:
    """Authenticated HTTP request digests, kept until their timestamp goes stale.

    Keys:
      - bridge:{address}:used_request:{caller}:{digest_hex} -> "1" (with TTL)

    Claims bypass units of work so a request is marked used even when the
    operation it carries fails.
    """

    def __init__(self, store: KeyValueStore, bridge_address: str):
        self.store = store
        self.bridge_address = bridge_address

    def _key(self, caller: str, digest_hex: str) -> str:
        return f"bridge:{self.bridge_address}:used_request:{caller}:{digest_hex}"

    async def claim(self, caller: str, digest: bytes, ttl_seconds: int) -> bool:
        """Mark a request used; False when it was already claimed."""
        return await self.store.set_if_absent(
            self._key(caller, "0x" + digest.hex()), "1", max(1, ttl_seconds)
        )
