"""
Plan tier and role resolution.

Each single-kind resolver reads the cache, falls back to a retried remote
lookup and writes the result back through the cache. The composite resolver
runs both concurrently and fails as soon as either fails.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from shared.errors import AccessLayerException, ErrorCode, UserTypeError
from shared.logging import get_logger, user_context
from shared.metrics import UserTypeMetrics
from shared.result import Result
from shared.retry import RetryConfig, retry_with_backoff
from .cache import CacheKind, UserTypeCache
from .models import DEFAULT_PLAN_TIER, PlanTier, RoleSet, RoleType, UserTypes
from .store import RemoteStore, StoreResponse, classify_store_error, is_no_rows

PLAN_TIERS_TABLE = "user_plan_tiers"
ROLES_TABLE = "user_roles"


class UserTypeResolver:
    """Resolves plan tiers and roles through a cache and a retry policy."""

    def __init__(
        self,
        store: RemoteStore,
        cache: Optional[UserTypeCache] = None,
        retry_config: Optional[RetryConfig] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        metrics: Optional[UserTypeMetrics] = None,
    ):
        self.store = store
        self.cache = cache if cache is not None else UserTypeCache()
        self.retry_config = retry_config or RetryConfig()
        self.sleep = sleep
        self.metrics = metrics
        self.logger = get_logger("user_types.resolver")

    async def resolve_plan_tier(self, user_id: str, use_cache: bool = True) -> PlanTier:
        """Return the user's active plan tier, ``free_user`` when none is set."""
        return await self._resolve(
            user_id,
            CacheKind.PLAN_TIER,
            lambda: self._fetch_plan_tier(user_id),
            use_cache,
        )

    async def resolve_roles(self, user_id: str, use_cache: bool = True) -> RoleSet:
        """Return the user's active roles, empty when none are granted."""
        return await self._resolve(
            user_id,
            CacheKind.ROLES,
            lambda: self._fetch_roles(user_id),
            use_cache,
        )

    async def resolve_all_user_types(self, user_id: str, use_cache: bool = True) -> UserTypes:
        """Resolve plan tier and roles concurrently.

        Either failure fails the whole call with that error; there is no
        partial result. The sibling resolution keeps running and may still
        populate the cache.
        """
        try:
            plan_tier, roles = await asyncio.gather(
                self.resolve_plan_tier(user_id, use_cache),
                self.resolve_roles(user_id, use_cache),
            )
        except AccessLayerException:
            raise
        except Exception as e:
            self.logger.error("Unexpected failure resolving user types", user_id=user_id, error=str(e))
            raise UserTypeError(
                "Unexpected failure resolving user types",
                ErrorCode.UNKNOWN,
                cause=e,
            )

        return UserTypes(plan_tier=plan_tier, roles=roles)

    async def close(self) -> None:
        """Close the store's connections when the store holds any."""
        aclose = getattr(self.store, "aclose", None)
        if aclose is not None:
            await aclose()

    def invalidate(self, user_id: str) -> bool:
        return self.cache.invalidate(user_id)

    def invalidate_all(self) -> int:
        return self.cache.invalidate_all()

    async def _resolve(
        self,
        user_id: str,
        kind: CacheKind,
        fetch: Callable[[], Awaitable[Result[Any]]],
        use_cache: bool,
    ) -> Any:
        with user_context(user_id):
            if use_cache:
                entry = self.cache.get_valid(user_id, kind)
                if self.metrics:
                    self.metrics.record_cache_lookup(kind.value, entry is not None)
                if entry is not None:
                    self.logger.debug("Cache hit", kind=kind.value)
                    return entry.value
                self.logger.debug("Cache miss", kind=kind.value)

            result = await retry_with_backoff(
                fetch,
                self.retry_config,
                name=f"fetch_{kind.value}",
                sleep=self.sleep,
                metrics=self.metrics,
            )

            if not result.ok:
                if self.metrics:
                    self.metrics.record_resolution_failure(kind.value, result.code.value)
                self.logger.error(
                    "Failed to resolve user type",
                    kind=kind.value,
                    code=result.code.value,
                    error=result.error.message,
                )

            value = result.unwrap()
            self.cache.put(user_id, kind, value)
            return value

    async def _fetch_plan_tier(self, user_id: str) -> Result[PlanTier]:
        response = await self.store.lookup_one(
            PLAN_TIERS_TABLE,
            {"user_id": user_id, "is_active": True},
            columns="plan_tier",
        )
        if is_no_rows(response.error):
            return Result.success(DEFAULT_PLAN_TIER)
        if response.error is not None:
            return self._store_failure(response, "Failed to fetch user plan tier", user_id)
        if not response.data:
            return Result.success(DEFAULT_PLAN_TIER)

        raw = response.data.get("plan_tier")
        try:
            return Result.success(PlanTier(raw))
        except ValueError as e:
            return Result.failure(UserTypeError(
                f"Unrecognized plan tier: {raw}",
                ErrorCode.DATABASE_ERROR,
                cause=e,
                details={"user_id": user_id},
            ))

    async def _fetch_roles(self, user_id: str) -> Result[RoleSet]:
        response = await self.store.lookup_many(
            ROLES_TABLE,
            {"user_id": user_id, "is_active": True},
            columns="role_type",
        )
        if response.error is not None:
            return self._store_failure(response, "Failed to fetch user roles", user_id)

        roles = set()
        for row in response.data or []:
            raw = row.get("role_type")
            try:
                roles.add(RoleType(raw))
            except ValueError:
                self.logger.warning("Ignoring unrecognized role", user_id=user_id, role_type=raw)
        return Result.success(frozenset(roles))

    @staticmethod
    def _store_failure(response: StoreResponse, message: str, user_id: str) -> Result[Any]:
        error = response.error
        return Result.failure(UserTypeError(
            message,
            classify_store_error(error),
            details={
                "user_id": user_id,
                "store_code": error.code,
                "store_message": error.message,
            },
        ))
