"""
PostgREST client for user-type lookups.
"""

from typing import Any, Dict, Mapping, Optional

import httpx

from shared.logging import get_logger
from .base import StoreError, StoreResponse

SINGLE_OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"


def _filter_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


class PostgrestStore:
    """Read-only table access over the PostgREST HTTP interface."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.logger = get_logger("user_types.store.postgrest")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "PostgrestStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def lookup_one(self, table: str, filters: Mapping[str, Any], columns: str = "*") -> StoreResponse:
        """Fetch a single row; zero matches come back as a PGRST116 error."""
        return await self._select(table, filters, columns, single=True)

    async def lookup_many(self, table: str, filters: Mapping[str, Any], columns: str = "*") -> StoreResponse:
        return await self._select(table, filters, columns, single=False)

    def _headers(self, single: bool) -> Dict[str, str]:
        headers = {"Accept": SINGLE_OBJECT_MEDIA_TYPE if single else "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _select(self, table: str, filters: Mapping[str, Any], columns: str, single: bool) -> StoreResponse:
        url = f"{self.base_url}/rest/v1/{table}"
        params = {"select": columns}
        params.update({column: f"eq.{_filter_value(value)}" for column, value in filters.items()})

        response = await self.client.get(url, params=params, headers=self._headers(single))

        if response.is_success:
            self.logger.debug("Store lookup succeeded", table=table, status=response.status_code)
            return StoreResponse(data=response.json())

        error = self._decode_error(response)
        self.logger.debug(
            "Store lookup failed",
            table=table,
            status=response.status_code,
            code=error.code,
        )
        return StoreResponse(error=error)

    @staticmethod
    def _decode_error(response: httpx.Response) -> StoreError:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            return StoreError(
                message=body.get("message") or response.reason_phrase,
                code=body.get("code"),
                status=response.status_code,
            )
        return StoreError(
            message=response.text or response.reason_phrase,
            status=response.status_code,
        )
