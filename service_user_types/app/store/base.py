"""
Remote store collaborator interface.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

from shared.errors import ErrorCode

# PostgREST: singular response requested but the query matched no rows.
NO_ROWS_CODE = "PGRST116"

# Codes the store uses when the caller's credentials are rejected.
AUTH_ERROR_CODES = frozenset({"PGRST301", "PGRST302", "42501"})
AUTH_ERROR_STATUSES = frozenset({401, 403})


@dataclass(frozen=True)
class StoreError:
    """Structured error reported by the remote store."""
    message: str
    code: Optional[str] = None
    status: Optional[int] = None


@dataclass(frozen=True)
class StoreResponse:
    """Rows (a mapping, a list of mappings, or None) or an error."""
    data: Any = None
    error: Optional[StoreError] = None


class RemoteStore(Protocol):
    """What user-type resolution needs from the remote store."""

    async def lookup_one(self, table: str, filters: Mapping[str, Any], columns: str = "*") -> StoreResponse:
        ...

    async def lookup_many(self, table: str, filters: Mapping[str, Any], columns: str = "*") -> StoreResponse:
        ...


def is_no_rows(error: Optional[StoreError]) -> bool:
    return error is not None and error.code == NO_ROWS_CODE


def classify_store_error(error: StoreError) -> ErrorCode:
    """Map a store error onto the caller-facing classification."""
    if error.code in AUTH_ERROR_CODES or error.status in AUTH_ERROR_STATUSES:
        return ErrorCode.UNAUTHORIZED
    return ErrorCode.DATABASE_ERROR
