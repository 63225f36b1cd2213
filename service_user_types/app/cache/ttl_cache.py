"""
In-process TTL cache for resolved user types.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from shared.logging import get_logger

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes


class CacheKind(str, Enum):
    """The independently cached value kinds per user."""
    PLAN_TIER = "plan_tier"
    ROLES = "roles"


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached value and the epoch milliseconds it was written at."""
    value: T
    cached_at_ms: int


@dataclass
class UserTypeCacheRecord:
    """Per-user slot holding one entry per kind."""
    plan_tier: Optional[CacheEntry] = None
    roles: Optional[CacheEntry] = None


class UserTypeCache:
    """Per-user cache of plan tier and roles with read-time expiry.

    There is no background eviction: staleness is checked when an entry is
    read, and records only go away through ``invalidate``/``invalidate_all``.
    The clock returns epoch seconds and is injectable for tests.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = get_logger("user_types.cache")
        self._records: Dict[str, UserTypeCacheRecord] = {}

    @property
    def ttl_ms(self) -> int:
        return int(self.ttl_seconds * 1000)

    def now_ms(self) -> int:
        return int(self.clock() * 1000)

    def get(self, user_id: str, kind: CacheKind) -> Optional[CacheEntry]:
        """Return the stored entry, stale or not."""
        record = self._records.get(user_id)
        if record is None:
            return None
        return getattr(record, kind.value)

    def put(self, user_id: str, kind: CacheKind, value: Any) -> CacheEntry:
        """Replace the ``kind`` entry for ``user_id``; the other kind is untouched."""
        record = self._records.get(user_id)
        if record is None:
            record = UserTypeCacheRecord()
            self._records[user_id] = record

        entry = CacheEntry(value=value, cached_at_ms=self.now_ms())
        setattr(record, kind.value, entry)
        self.logger.debug("Cached user type", user_id=user_id, kind=kind.value)
        return entry

    def is_valid(self, entry: Optional[CacheEntry]) -> bool:
        if entry is None:
            return False
        return self.now_ms() - entry.cached_at_ms < self.ttl_ms

    def get_valid(self, user_id: str, kind: CacheKind) -> Optional[CacheEntry]:
        """Return the entry only if it has not expired."""
        entry = self.get(user_id, kind)
        return entry if self.is_valid(entry) else None

    def invalidate(self, user_id: str) -> bool:
        """Drop both kinds for one user. Returns whether a record existed."""
        removed = self._records.pop(user_id, None) is not None
        if removed:
            self.logger.info("Invalidated user type cache", user_id=user_id)
        return removed

    def invalidate_all(self) -> int:
        """Drop every record. Returns how many were removed."""
        count = len(self._records)
        self._records.clear()
        self.logger.info("Cleared user type cache", count=count)
        return count

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._records

    def __len__(self) -> int:
        return len(self._records)
