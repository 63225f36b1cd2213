"""
Unit tests for the backoff retry executor.
"""

import pytest

from shared.errors import ErrorCode, NotFoundError, UnauthorizedError, UserTypeError
from shared.metrics import UserTypeMetrics
from shared.result import Result
from shared.retry import RetryConfig, calculate_delay, retry_with_backoff
from shared.test_helpers import RecordingSleep


class CountingOperation:
    """Replays a list of outcomes, raising exceptions and returning results."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def db_failure(message="Connection failed"):
    return Result.failure(UserTypeError(message, ErrorCode.DATABASE_ERROR))


class TestRetryWithBackoff:
    """Test cases for retry_with_backoff."""

    @pytest.fixture
    def sleep(self):
        return RecordingSleep()

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self, sleep):
        operation = CountingOperation(Result.success("free_user"))

        result = await retry_with_backoff(operation, sleep=sleep)

        assert result.ok
        assert result.value == "free_user"
        assert operation.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_retryable_failures_follow_exponential_schedule(self, sleep):
        operation = CountingOperation(db_failure(), db_failure(), Result.success(42))

        result = await retry_with_backoff(operation, RetryConfig(max_attempts=3, base_delay=1.0), sleep=sleep)

        assert result.unwrap() == 42
        assert operation.calls == 3
        assert sleep.delays == pytest.approx([1.0, 2.0])

    @pytest.mark.asyncio
    async def test_exhaustion_returns_last_error(self, sleep):
        operation = CountingOperation(db_failure("first"), db_failure("second"), db_failure("third"))

        result = await retry_with_backoff(operation, RetryConfig(max_attempts=3), sleep=sleep)

        assert not result.ok
        assert result.code == ErrorCode.DATABASE_ERROR
        assert result.error.message == "third"
        assert operation.calls == 3
        # No wait after the final attempt
        assert sleep.delays == pytest.approx([1.0, 2.0])

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [ErrorCode.UNAUTHORIZED, ErrorCode.NOT_FOUND])
    async def test_terminal_failure_is_not_retried(self, sleep, code):
        operation = CountingOperation(Result.failure(UserTypeError("nope", code)))

        result = await retry_with_backoff(operation, RetryConfig(max_attempts=5), sleep=sleep)

        assert result.code == code
        assert operation.calls == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_generic_exception_is_retried_as_unknown(self, sleep):
        operation = CountingOperation(TimeoutError("timed out"), Result.success("ok"))

        result = await retry_with_backoff(operation, sleep=sleep)

        assert result.value == "ok"
        assert operation.calls == 2
        assert sleep.delays == pytest.approx([1.0])

    @pytest.mark.asyncio
    async def test_exhausted_generic_exception_is_classified_unknown(self, sleep):
        operation = CountingOperation(ConnectionError("reset by peer"))

        result = await retry_with_backoff(operation, RetryConfig(max_attempts=2), sleep=sleep)

        assert result.code == ErrorCode.UNKNOWN
        assert isinstance(result.error.cause, ConnectionError)
        assert operation.calls == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("exc", [UnauthorizedError(), NotFoundError()])
    async def test_raised_terminal_error_is_not_retried(self, sleep, exc):
        operation = CountingOperation(exc)

        result = await retry_with_backoff(operation, sleep=sleep)

        assert result.error is exc
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_custom_base_delay(self, sleep):
        operation = CountingOperation(db_failure())

        await retry_with_backoff(operation, RetryConfig(max_attempts=4, base_delay=0.25), sleep=sleep)

        assert sleep.delays == pytest.approx([0.25, 0.5, 1.0])

    @pytest.mark.asyncio
    async def test_attempt_outcomes_are_counted(self, sleep):
        metrics = UserTypeMetrics()
        operation = CountingOperation(db_failure(), Result.success(1))

        await retry_with_backoff(operation, name="fetch_roles", sleep=sleep, metrics=metrics)

        assert metrics.sample("user_type_fetch_attempts_total", operation="fetch_roles",
                              outcome="DATABASE_ERROR") == 1
        assert metrics.sample("user_type_fetch_attempts_total", operation="fetch_roles",
                              outcome="success") == 1


class TestCalculateDelay:
    """Test cases for the backoff schedule."""

    def test_doubles_each_attempt(self):
        config = RetryConfig(base_delay=1.0)
        assert [calculate_delay(i, config) for i in range(4)] == [1.0, 2.0, 4.0, 8.0]

    def test_max_delay_caps_schedule(self):
        config = RetryConfig(base_delay=1.0, max_delay=3.0)
        assert calculate_delay(5, config) == 3.0

    def test_jitter_stays_within_ten_percent(self):
        config = RetryConfig(base_delay=1.0, jitter=True)
        for _ in range(50):
            assert 1.8 <= calculate_delay(1, config) <= 2.2

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryConfig(max_attempts=0)
