"""
User-type queries built on the resolver.
"""

from typing import Optional

from shared.logging import get_logger
from shared.metrics import UserTypeMetrics
from .models import PlanTier, RoleType, UserTypeInfo
from .resolvers import UserTypeResolver


class UserTypeService:
    """Profile-facing questions about a user's tier and roles.

    All answers go through the resolver, so they share its cache and retry
    policy. Call ``invalidate_user`` after changing a user's tier or roles.
    """

    def __init__(self, resolver: UserTypeResolver):
        self.resolver = resolver
        self.logger = get_logger("user_types.service")

    async def __aenter__(self) -> "UserTypeService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the store client held by the resolver."""
        await self.resolver.close()
        self.logger.info("User type service closed")

    @property
    def metrics(self) -> Optional[UserTypeMetrics]:
        return self.resolver.metrics

    async def get_user_type_info(self, user_id: str, use_cache: bool = True) -> UserTypeInfo:
        user_types = await self.resolver.resolve_all_user_types(user_id, use_cache)
        return UserTypeInfo.from_user_types(user_id, user_types)

    async def has_role(self, user_id: str, role: RoleType, use_cache: bool = True) -> bool:
        roles = await self.resolver.resolve_roles(user_id, use_cache)
        return role in roles

    async def has_plan_tier(self, user_id: str, plan_tier: PlanTier, use_cache: bool = True) -> bool:
        return await self.resolver.resolve_plan_tier(user_id, use_cache) == plan_tier

    async def is_admin(self, user_id: str, use_cache: bool = True) -> bool:
        return await self.has_role(user_id, RoleType.ADMIN, use_cache)

    def invalidate_user(self, user_id: str) -> bool:
        return self.resolver.invalidate(user_id)

    def invalidate_all(self) -> int:
        return self.resolver.invalidate_all()
