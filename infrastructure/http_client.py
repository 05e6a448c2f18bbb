"""Shared async HTTP client for outbound calls (email API, identity provider keys)."""

from typing import Any, Optional

import httpx


class HttpClient:
    """Thin async wrapper around httpx.AsyncClient.

    One instance per external service keeps timeouts independently
    configurable; *connect_timeout* defaults to the overall *timeout*.
    """

    def __init__(
        self, timeout: float = 5.0, connect_timeout: Optional[float] = None
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                timeout, connect=connect_timeout if connect_timeout is not None else timeout
            )
        )

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.post(url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._client.get(url, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
