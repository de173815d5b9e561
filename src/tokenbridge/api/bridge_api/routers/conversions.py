"""Conversion API routes."""

from __future__ import annotations

import logging
import time
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, HTTPException, status
from prometheus_client import Counter, Gauge, Histogram

from ....application.bridge.dtos import (
    ConversionInRequestDTO,
    ConversionInResponseDTO,
    ConversionOutRequestDTO,
    ConversionOutResponseDTO,
)
from ....application.bridge.use_cases.conversion import ConversionService
from ....domain.errors import BridgeError, CollaboratorFailure
from ..dependencies import get_caller, get_conversion_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversions", tags=["conversions"])

T = TypeVar("T")


conversion_requests_total = Counter(
    "conversion_requests_total",
    "Total conversion requests processed",
    ["direction", "status"],
)

conversion_request_duration_seconds = Histogram(
    "conversion_request_duration_seconds",
    "Wall time to process a conversion request",
    ["direction", "status"],
)

conversion_requests_in_progress = Gauge(
    "conversion_requests_in_progress",
    "Conversion requests currently being processed",
    ["direction"],
    multiprocess_mode="livesum",
)


def _observe(direction: str, outcome: str, start_time: float) -> None:
    conversion_requests_total.labels(direction=direction, status=outcome).inc()
    conversion_request_duration_seconds.labels(
        direction=direction, status=outcome
    ).observe(time.perf_counter() - start_time)


async def _measured(direction: str, call: Awaitable[T]) -> T:
    start_time = time.perf_counter()
    with conversion_requests_in_progress.labels(direction=direction).track_inprogress():
        try:
            result = await call
        except CollaboratorFailure:
            _observe(direction, "ledger_error", start_time)
            raise
        except BridgeError:
            _observe(direction, "client_error", start_time)
            raise
        except Exception as e:
            _observe(direction, "server_error", start_time)
            logger.exception("Conversion %s failed unexpectedly", direction)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to process conversion: {str(e)}",
            )
    _observe(direction, "success", start_time)
    return result


@router.post(
    "/out",
    response_model=ConversionOutResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def conversion_out(
    payload: ConversionOutRequestDTO,
    caller: str = Depends(get_caller),
    service: ConversionService = Depends(get_conversion_service),
) -> ConversionOutResponseDTO:
    """Convert the caller's tokens out of the ledger."""
    return await _measured("out", service.conversion_out(caller, payload))


@router.post(
    "/in",
    response_model=ConversionInResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def conversion_in(
    payload: ConversionInRequestDTO,
    caller: str = Depends(get_caller),
    service: ConversionService = Depends(get_conversion_service),
) -> ConversionInResponseDTO:
    """Mint tokens to the signed recipient; any authenticated caller may relay."""
    return await _measured("in", service.conversion_in(caller, payload))
