from __future__ import annotations

import json
from typing import Any, Dict, Optional, Type
from types import TracebackType

import httpx


class BridgeApiError(Exception):
    """Non-successful response from the Bridge API."""

    def __init__(self, status_code: int, detail: str, code: Optional[str] = None):
        super().__init__(f"{status_code} {code or 'HTTPError'}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.code = code


class AsyncHttpClient:
    """Thin asynchronous HTTP client wrapper around httpx.AsyncClient.

    - Normalizes base URLs and paths.
    - Applies a default timeout.
    - Raises ``BridgeApiError`` for non-successful responses, keeping the
      error ``code`` the API returns.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        if resp.is_success:
            return
        try:
            body = resp.json()
        except json.JSONDecodeError:
            raise BridgeApiError(resp.status_code, resp.text)
        detail = body.get("detail") if isinstance(body, dict) else body
        code = body.get("code") if isinstance(body, dict) else None
        raise BridgeApiError(resp.status_code, str(detail), code)

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        resp = await self._client.get(self.url(path), **kwargs)
        self._raise_for_status(resp)
        return resp

    async def send(
        self,
        method: str,
        path: str,
        *,
        content: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        resp = await self._client.request(
            method, self.url(path), content=content, headers=headers
        )
        self._raise_for_status(resp)
        return resp

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()
