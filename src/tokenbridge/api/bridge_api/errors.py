"""HTTP mapping of bridge errors."""

from __future__ import annotations

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ...domain.errors import (
    AuthorizationError,
    BridgeError,
    CollaboratorFailure,
    ConfigurationError,
    LimitError,
    ReplayError,
    ResourceError,
)

_STATUS_BY_FAMILY: list[tuple[type[BridgeError], int]] = [
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ReplayError, status.HTTP_409_CONFLICT),
    (LimitError, 422),
    (ConfigurationError, status.HTTP_400_BAD_REQUEST),
    (CollaboratorFailure, status.HTTP_502_BAD_GATEWAY),
    (ResourceError, status.HTTP_409_CONFLICT),
]


def status_for(error: BridgeError) -> int:
    for family, status_code in _STATUS_BY_FAMILY:
        if isinstance(error, family):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(exc),
        content={"detail": exc.message, "code": exc.code},
    )
