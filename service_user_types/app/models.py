"""
User-type data models and display helpers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List

from pydantic import BaseModel, Field


class PlanTier(str, Enum):
    """Subscription level governing feature access."""
    FREE_USER = "free_user"
    CREATOR_PRO = "creator_pro"
    CREATOR_PREMIUM = "creator_premium"


class RoleType(str, Enum):
    """Capability grant held independently of the plan tier."""
    ADMIN = "admin"
    MODERATOR = "moderator"
    TESTER = "tester"


RoleSet = FrozenSet[RoleType]

DEFAULT_PLAN_TIER = PlanTier.FREE_USER

PLAN_TIER_DISPLAY_NAMES: Dict[PlanTier, str] = {
    PlanTier.FREE_USER: "Free User",
    PlanTier.CREATOR_PRO: "Creator Pro",
    PlanTier.CREATOR_PREMIUM: "Creator Premium",
}

ROLE_TYPE_DISPLAY_NAMES: Dict[RoleType, str] = {
    RoleType.ADMIN: "Admin",
    RoleType.MODERATOR: "Moderator",
    RoleType.TESTER: "Tester",
}

PLAN_TIER_BADGE_STYLES: Dict[PlanTier, str] = {
    PlanTier.FREE_USER: "bg-gray-700 text-gray-300 border-gray-600",
    PlanTier.CREATOR_PRO: "bg-yellow-700 text-yellow-200 border-yellow-600",
    PlanTier.CREATOR_PREMIUM: "bg-blue-700 text-blue-200 border-blue-600",
}

ROLE_TYPE_BADGE_STYLES: Dict[RoleType, str] = {
    RoleType.ADMIN: "bg-red-700 text-red-200 border-red-600",
    RoleType.MODERATOR: "bg-purple-700 text-purple-200 border-purple-600",
    RoleType.TESTER: "bg-green-700 text-green-200 border-green-600",
}


def sorted_roles(roles: Iterable[RoleType]) -> List[RoleType]:
    """Roles without duplicates, in declaration order."""
    present = set(roles)
    return [role for role in RoleType if role in present]


def format_user_types_for_display(plan_tier: PlanTier, roles: Iterable[RoleType] = ()) -> List[str]:
    """Display labels: the plan tier first, then each role."""
    return [PLAN_TIER_DISPLAY_NAMES[plan_tier]] + [
        ROLE_TYPE_DISPLAY_NAMES[role] for role in sorted_roles(roles)
    ]


@dataclass(frozen=True)
class UserTypes:
    """Result of a composite plan tier + roles resolution."""
    plan_tier: PlanTier
    roles: RoleSet = field(default_factory=frozenset)


class UserTypeInfo(BaseModel):
    """Everything a profile view needs about a user's type."""
    user_id: str = Field(..., description="User ID")
    plan_tier: PlanTier = Field(DEFAULT_PLAN_TIER, description="Active plan tier")
    roles: List[RoleType] = Field(default_factory=list, description="Active roles")
    is_admin: bool = Field(False, description="Whether the user holds the admin role")
    display_types: List[str] = Field(default_factory=list, description="Badge labels")

    @classmethod
    def from_user_types(cls, user_id: str, user_types: UserTypes) -> "UserTypeInfo":
        return cls(
            user_id=user_id,
            plan_tier=user_types.plan_tier,
            roles=sorted_roles(user_types.roles),
            is_admin=RoleType.ADMIN in user_types.roles,
            display_types=format_user_types_for_display(user_types.plan_tier, user_types.roles),
        )
