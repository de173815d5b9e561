from __future__ import annotations

import functools
import logging
import time
from typing import Callable, Iterable, Optional

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..crypto.messages import request_digest
from ..crypto.signatures import (
    EthereumSignatureVerifier,
    RecoverableSignature,
    SignatureVerifier,
)
from ..infrastructure.bridge.repositories import UsedRequestRegistry

logger = logging.getLogger(__name__)

TIMESTAMP_HEADER = "X-Caller-Timestamp"
SIGNATURE_HEADER = "X-Caller-Signature"


def log_timing(tag: str):
    """Log how long an async middleware step took, at DEBUG."""

    def decorator(func):
        @functools.wraps(func)
        async def timed(*args, **kwargs):
            started = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - started) * 1000.0
                logger.debug("caller signature %s took %.3fms", tag, elapsed_ms)

        return timed

    return decorator


class CallerSignatureMiddleware(BaseHTTPMiddleware):
    """Authenticate the caller of mutating HTTP requests.

    Expected headers:
    - `X-Caller-Timestamp`: Unix time in seconds when the request was signed.
    - `X-Caller-Signature`: 65-byte hex (r || s || v) EIP-191 signature over
      ``request_digest(method, path, timestamp, body, bridge_address)``.

    The recovered address is stored in ``request.state.caller``. With a
    ``used_requests`` registry each signed request is accepted once; a
    resend inside the freshness window is rejected with 401. Safe methods
    and the service paths (`/`, `/health`, `/metrics`, docs) are not checked.
    """

    def __init__(
        self,
        app,
        bridge_address: str,
        max_age_seconds: int = 300,
        verifier: Optional[SignatureVerifier] = None,
        skip_paths: Optional[Iterable[str]] = None,
        used_requests: Optional[UsedRequestRegistry] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(app)
        self._skip_paths = set(
            skip_paths
            or [
                "/",
                "/health",
                "/metrics",
                "/docs",
                "/redoc",
                "/openapi.json",
            ]
        )
        self._protected_methods = {"POST", "PUT", "PATCH", "DELETE"}
        self._bridge_address = bridge_address
        self._max_age_seconds = max_age_seconds
        self._used_requests = used_requests
        self._verifier = verifier or EthereumSignatureVerifier()
        self._clock = clock

    @log_timing("dispatch")
    async def dispatch(self, request: Request, call_next: Callable):
        if self._should_skip(request):
            return await call_next(request)

        # Buffer body so downstream can read it too
        request, body = await self._buffer_request_body(request)

        timestamp_raw = request.headers.get(TIMESTAMP_HEADER)
        signature_raw = request.headers.get(SIGNATURE_HEADER)
        if not timestamp_raw or not signature_raw:
            return self._unauthorized(
                f"Missing {TIMESTAMP_HEADER} or {SIGNATURE_HEADER} header"
            )

        try:
            timestamp = int(timestamp_raw)
        except ValueError:
            return self._bad_request(f"{TIMESTAMP_HEADER} must be an integer")
        if abs(self._clock() - timestamp) > self._max_age_seconds:
            return self._unauthorized("Caller signature timestamp is stale")

        try:
            signature = RecoverableSignature.from_hex(signature_raw)
        except ValueError:
            return self._bad_request(
                f"Invalid {SIGNATURE_HEADER} encoding (expected 65-byte hex)"
            )

        digest = request_digest(
            request.method, request.url.path, timestamp, body, self._bridge_address
        )
        caller = self._verifier.recover(digest, signature)
        if caller is None:
            return self._unauthorized("Invalid caller signature")

        if self._used_requests is not None:
            # Held until the timestamp itself would be rejected as stale
            ttl = int(timestamp + self._max_age_seconds - self._clock()) + 1
            if not await self._used_requests.claim(caller, digest, ttl):
                logger.warning("Rejected resent request from %s", caller)
                return self._unauthorized("Caller signature was already used")

        request.state.caller = caller
        return await call_next(request)

    def _should_skip(self, request: Request) -> bool:
        return (
            request.url.path in self._skip_paths
            or request.method.upper() not in self._protected_methods
        )

    async def _buffer_request_body(self, request: Request) -> tuple[Request, bytes]:
        body: bytes = await request.body()

        async def receive() -> dict:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(request.scope, receive), body

    def _json_error(self, status_code: int, detail: str) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": detail})

    def _bad_request(self, detail: str) -> JSONResponse:
        return self._json_error(status.HTTP_400_BAD_REQUEST, detail)

    def _unauthorized(self, detail: str) -> JSONResponse:
        return self._json_error(status.HTTP_401_UNAUTHORIZED, detail)
