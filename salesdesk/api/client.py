"""
REST client for the inventory/sales service.

Every call opens a short-lived ``httpx.AsyncClient`` so concurrent fetches
(``asyncio.gather``) each own their connection and nothing is shared between
render cycles. Transport, status and decoding problems all surface as
``FetchFailure``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import API_BASE_URL
from ..constants import HTTP_TIMEOUT_SECONDS
from ..errors import FetchFailure

_log = logging.getLogger(__name__)


class ApiClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, e.g. 'http://localhost:8080/api/v1'
            timeout: per-request timeout in seconds
            transport: optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self.headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def request(self, method: str, path: str, *, json: Dict | None = None) -> Any:
        """Send one request and return the decoded JSON body (None when empty)."""
        _log.debug("%s %s%s", method, self.base_url, path)
        async with self._new_client() as client:
            try:
                response = await client.request(method, path, json=json)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                _log.error("%s %s failed with HTTP %s", method, path, status)
                raise FetchFailure(
                    f"Server returned HTTP {status} for {method} {path}.",
                    status_code=status,
                ) from e
            except httpx.HTTPError as e:
                _log.error("%s %s failed: %s", method, path, e)
                raise FetchFailure(f"Could not reach the server ({e.__class__.__name__}).") from e

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as e:
                _log.error("%s %s returned a body that is not JSON", method, path)
                raise FetchFailure(f"Malformed response from {path}.") from e

    async def get_json(self, path: str) -> Any:
        return await self.request("GET", path)

    async def get_list(self, path: str) -> list:
        data = await self.get_json(path)
        if not isinstance(data, list):
            raise FetchFailure(f"Expected a list from {path}, got {type(data).__name__}.")
        return data

    async def post_json(self, path: str, payload: Dict) -> Any:
        return await self.request("POST", path, json=payload)

    async def put_json(self, path: str, payload: Dict) -> Any:
        return await self.request("PUT", path, json=payload)

    async def delete(self, path: str) -> None:
        await self.request("DELETE", path)
