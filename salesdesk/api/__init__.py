# salesdesk/api/__init__.py
from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from ..config import API_BASE_URL
from .client import ApiClient

T = TypeVar("T")


def get_client(base_url: str | None = None) -> ApiClient:
    """Returns an ApiClient pointed at the configured service."""
    return ApiClient(base_url or API_BASE_URL)


def run(awaitable: Awaitable[T]) -> T:
    """
    Drive a coroutine to completion from UI code.

    Fetches paired with asyncio.gather still run concurrently inside the
    call; the UI thread simply waits for the whole batch.
    """
    async def _main():
        return await awaitable

    return asyncio.run(_main())


__all__ = [
    "ApiClient",
    "get_client",
    "run",
]
