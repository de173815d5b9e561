"""FastAPI application configuration (Bridge API)."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    generate_latest,
)
from prometheus_client import multiprocess

from ...application.bridge.use_cases.bootstrap import (
    BridgeBootstrapService,
    BridgeParameters,
)
from ...domain.errors import BridgeError
from ...envs.bridge_env import Settings
from ...infrastructure.bridge.repositories import UsedRequestRegistry
from ...infrastructure.bridge.unit_of_work import UnitOfWorkManager
from ...middleware.caller_signature import CallerSignatureMiddleware
from .dependencies import (
    get_database_client_dependency,
    get_settings_dependency,
    get_unit_of_work_manager,
)
from .errors import bridge_error_handler
from .routers import administration, configuration, conversions, native_vault, ownership

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/bridge"


def _bridge_parameters(settings: Settings) -> BridgeParameters:
    return BridgeParameters(
        owner=settings.owner_address,
        commission_is_enabled=settings.commission_is_enabled,
        receiver_commission_proportion=settings.receiver_commission_proportion,
        bridge_owner_commission_proportion=settings.bridge_owner_commission_proportion,
        fixed_native_commission_limit=settings.fixed_native_commission_limit,
        commission_receiver=settings.commission_receiver_address,
        bridge_owner=settings.bridge_owner_address,
        percentage_commission_limit=settings.percentage_commission_limit,
    )


def _metrics_payload() -> bytes:
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return generate_latest(registry)
    return generate_latest(REGISTRY)


def create_bridge_app(
    settings: Optional[Settings] = None,
    unit_of_work_manager: Optional[UnitOfWorkManager] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Without arguments the settings come from the environment and state lives in
    Redis. Passing a manager wires the routes to it instead, which is how the
    tests run the app over an in-memory store.
    """
    settings = settings or get_settings_dependency()
    uses_redis = unit_of_work_manager is None
    manager = unit_of_work_manager or get_unit_of_work_manager()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        created = await BridgeBootstrapService(manager.begin).initialize(
            _bridge_parameters(settings)
        )
        if created:
            logger.info("Bridge state created for %s", manager.bridge_address)
        yield
        if uses_redis:
            await get_database_client_dependency().close()

    app = FastAPI(
        title=f"{settings.app_name} Bridge",
        version=settings.app_version,
        description="Token conversion bridge API",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.dependency_overrides[get_settings_dependency] = lambda: settings
    app.dependency_overrides[get_unit_of_work_manager] = lambda: manager
    app.add_exception_handler(BridgeError, bridge_error_handler)

    app.add_middleware(
        CallerSignatureMiddleware,
        bridge_address=manager.bridge_address,
        max_age_seconds=settings.caller_signature_max_age_seconds,
        used_requests=UsedRequestRegistry(manager.store, manager.bridge_address),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(conversions.router, prefix=API_PREFIX)
    app.include_router(configuration.router, prefix=API_PREFIX)
    app.include_router(native_vault.router, prefix=API_PREFIX)
    app.include_router(administration.router, prefix=API_PREFIX)
    app.include_router(ownership.router, prefix=API_PREFIX)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": f"Welcome to {settings.app_name} Bridge API",
            "version": settings.app_version,
            "bridge": manager.bridge_address,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": f"{settings.app_name} Bridge",
            "version": settings.app_version,
        }

    @app.get("/metrics")
    async def metrics() -> Response:
        """Prometheus exposition of the service metrics."""
        return Response(content=_metrics_payload(), media_type=CONTENT_TYPE_LATEST)

    return app
