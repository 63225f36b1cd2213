"""
User-type caching.
"""

from .ttl_cache import (
    DEFAULT_TTL_SECONDS,
    CacheEntry,
    CacheKind,
    UserTypeCache,
    UserTypeCacheRecord,
)

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "CacheEntry",
    "CacheKind",
    "UserTypeCache",
    "UserTypeCacheRecord",
]
