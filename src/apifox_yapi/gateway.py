"""Apifox shared-docs HTTP client.

Fetches the three documents the converter needs. Transport and HTTP status
errors from httpx are not caught here.
"""

from typing import Any, Protocol

import httpx
import structlog

from apifox_yapi.config import get_settings
from apifox_yapi.errors import GatewayResponseError

logger = structlog.get_logger()


class DocumentGateway(Protocol):
    """Anything that can serve the Apifox documents for a share token."""

    async def fetch_folder_tree(self, token: str) -> Any: ...

    async def fetch_schema_list(self, token: str) -> Any: ...

    async def fetch_endpoint(self, token: str, endpoint_id: int) -> Any: ...


class ApifoxGateway:
    """Async client for ``https://apifox.com/api/v1/shared-docs``.

    Use as an async context manager, or pass an existing ``httpx.AsyncClient``
    whose lifetime the caller manages.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "ApifoxGateway":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str) -> Any:
        if self._client is None:
            raise RuntimeError("ApifoxGateway is not open; use 'async with'")

        response = await self._client.get(url)
        response.raise_for_status()
        payload = response.json()

        if not isinstance(payload, dict) or payload.get("success") is False:
            message = payload.get("errorMessage", "") if isinstance(payload, dict) else ""
            raise GatewayResponseError(url, message)
        return payload.get("data")

    async def fetch_folder_tree(self, token: str) -> Any:
        return await self._get(f"{self.base_url}/{token}/http-api-tree")

    async def fetch_schema_list(self, token: str) -> Any:
        return await self._get(f"{self.base_url}/{token}/data-schemas")

    async def fetch_endpoint(self, token: str, endpoint_id: int) -> Any:
        data = await self._get(f"{self.base_url}/{token}/http-apis/{endpoint_id}")
        logger.debug("endpoint_fetched", endpoint_id=endpoint_id)
        return data
