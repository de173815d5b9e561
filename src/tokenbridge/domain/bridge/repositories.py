"""Bridge domain repositories: persisted bridge state and the used-signature set."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .entities import (
    CommissionConfig,
    ConversionConfiguration,
    NativeVault,
    Ownership,
)


class BridgeStateRepository(ABC):
    """Repository for the configuration, commission, ownership and vault records."""

    @abstractmethod
    async def is_initialized(self) -> bool:
        pass

    @abstractmethod
    async def get_configuration(self) -> Optional[ConversionConfiguration]:
        pass

    @abstractmethod
    async def save_configuration(
        self, configuration: ConversionConfiguration
    ) -> ConversionConfiguration:
        pass

    @abstractmethod
    async def get_commission(self) -> Optional[CommissionConfig]:
        pass

    @abstractmethod
    async def save_commission(self, commission: CommissionConfig) -> CommissionConfig:
        pass

    @abstractmethod
    async def get_ownership(self) -> Optional[Ownership]:
        pass

    @abstractmethod
    async def save_ownership(self, ownership: Ownership) -> Ownership:
        pass

    @abstractmethod
    async def get_native_vault(self) -> NativeVault:
        pass

    @abstractmethod
    async def save_native_vault(self, vault: NativeVault) -> NativeVault:
        pass


class UsedSignatureRepository(ABC):
    """Grow-only set of consumed message digests.

    Entries are never evicted: the set is the permanent record of every
    conversion that was ever authorized and executed.
    """

    @abstractmethod
    async def contains(self, digest_hex: str) -> bool:
        pass

    @abstractmethod
    async def add(self, digest_hex: str) -> None:
        pass
