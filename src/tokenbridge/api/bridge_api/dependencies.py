"""Dependencies for the Bridge API."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status

from ...application.bridge.use_cases.administration import AdministrationService
from ...application.bridge.use_cases.conversion import ConversionService
from ...application.bridge.use_cases.native_vault import NativeCommissionVaultService
from ...crypto.signatures import EthereumSignatureVerifier
from ...envs.bridge_env import Settings, get_settings
from ...infrastructure.bridge.events import LoggingEventPublisher
from ...infrastructure.bridge.ledger import KeyValueLedger
from ...infrastructure.bridge.unit_of_work import UnitOfWorkManager
from ...infrastructure.database import DatabaseClient, get_database_client
from ...infrastructure.storage import KeyValueStore, RedisKeyValueStore


@lru_cache()
def get_settings_dependency() -> Settings:
    return get_settings()


@lru_cache()
def get_database_client_dependency() -> DatabaseClient:
    settings = get_settings_dependency()
    return get_database_client(settings)


@lru_cache()
def get_store_dependency() -> RedisKeyValueStore:
    db_client = get_database_client_dependency()
    return RedisKeyValueStore(db_client)


def build_unit_of_work_manager(
    store: KeyValueStore, bridge_address: str
) -> UnitOfWorkManager:
    """Unit-of-work manager whose ledger is the store-backed reference ledger."""
    return UnitOfWorkManager(
        store,
        bridge_address,
        lambda staged: KeyValueLedger(staged, bridge_address),
    )


@lru_cache()
def get_unit_of_work_manager() -> UnitOfWorkManager:
    settings = get_settings_dependency()
    return build_unit_of_work_manager(get_store_dependency(), settings.bridge_address)


def get_caller(request: Request) -> str:
    """Caller address recovered by the caller-signature middleware."""
    caller = getattr(request.state, "caller", None)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Caller is not authenticated",
        )
    return caller


def get_conversion_service(
    manager: UnitOfWorkManager = Depends(get_unit_of_work_manager),
) -> ConversionService:
    return ConversionService(
        manager.begin, EthereumSignatureVerifier(), LoggingEventPublisher()
    )


def get_administration_service(
    manager: UnitOfWorkManager = Depends(get_unit_of_work_manager),
) -> AdministrationService:
    return AdministrationService(manager.begin)


def get_native_vault_service(
    manager: UnitOfWorkManager = Depends(get_unit_of_work_manager),
) -> NativeCommissionVaultService:
    return NativeCommissionVaultService(manager.begin)
