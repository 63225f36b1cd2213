"""
Remote store access.
"""

from .base import (
    NO_ROWS_CODE,
    RemoteStore,
    StoreError,
    StoreResponse,
    classify_store_error,
    is_no_rows,
)
from .postgrest import PostgrestStore

__all__ = [
    "NO_ROWS_CODE",
    "PostgrestStore",
    "RemoteStore",
    "StoreError",
    "StoreResponse",
    "classify_store_error",
    "is_no_rows",
]
