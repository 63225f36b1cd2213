"""
Test helper functions and factory methods for the user-type access layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from shared.errors import UserTypeError


@dataclass
class TestUser:
    """Test user data."""
    __test__ = False

    user_id: str
    plan_tier: Optional[str] = None
    roles: List[str] = field(default_factory=list)


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self, clock: Optional[FakeClock] = None):
        self.delays: List[float] = []
        self.clock = clock

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        if self.clock is not None:
            self.clock.advance(delay)


class ScriptedStore:
    """Remote store stub replaying scripted responses per table.

    Each table has a queue of responses (``StoreResponse`` instances or
    exceptions to raise). The last response is repeated once the queue is
    exhausted. Every call is recorded in ``calls``.
    """

    def __init__(self, responses: Optional[Dict[str, List[Any]]] = None):
        self.responses: Dict[str, List[Any]] = {k: list(v) for k, v in (responses or {}).items()}
        self.calls: List[Tuple[str, str, Dict[str, Any], str]] = []

    def script(self, table: str, *responses: Any) -> "ScriptedStore":
        self.responses[table] = list(responses)
        return self

    def call_count(self, table: Optional[str] = None) -> int:
        if table is None:
            return len(self.calls)
        return sum(1 for call in self.calls if call[1] == table)

    async def lookup_one(self, table: str, filters: Mapping[str, Any], columns: str = "*"):
        return self._next("lookup_one", table, filters, columns)

    async def lookup_many(self, table: str, filters: Mapping[str, Any], columns: str = "*"):
        return self._next("lookup_many", table, filters, columns)

    def _next(self, method: str, table: str, filters: Mapping[str, Any], columns: str):
        self.calls.append((method, table, dict(filters), columns))
        queue = self.responses.get(table)
        if not queue:
            raise AssertionError(f"No scripted response for table {table}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, BaseException):
            raise response
        return response


class TestDataFactory:
    """Factory for creating test data."""
    __test__ = False

    @staticmethod
    def create_test_users() -> List[TestUser]:
        """Create test users."""
        return [
            TestUser(user_id="user-free"),
            TestUser(user_id="user-pro", plan_tier="creator_pro", roles=["moderator"]),
            TestUser(user_id="user-premium", plan_tier="creator_premium", roles=["moderator", "tester"]),
            TestUser(user_id="user-admin", plan_tier="free_user", roles=["admin"]),
        ]

    @staticmethod
    def plan_tier_row(plan_tier: str) -> Dict[str, Any]:
        return {"plan_tier": plan_tier}

    @staticmethod
    def role_rows(*roles: str) -> List[Dict[str, Any]]:
        return [{"role_type": role} for role in roles]


def assert_user_type_error(error: BaseException, code) -> UserTypeError:
    """Assert ``error`` is a UserTypeError with the given classification."""
    assert isinstance(error, UserTypeError), f"expected UserTypeError, got {error!r}"
    assert error.code == code, f"expected {code}, got {error.code}"
    return error
