"""
Retry mechanism for resilient operations.

Operations report their outcome as a ``Result``. The executor branches on the
classification carried by a failed result: terminal codes are returned at
once, everything else is retried with exponential backoff.
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar

from shared.errors import TERMINAL_ERROR_CODES, classify_exception
from shared.logging import get_logger
from shared.metrics import UserTypeMetrics
from shared.result import Result

T = TypeVar("T")

logger = get_logger("user_types.retry")


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(self,
                 max_attempts: int = 3,
                 base_delay: float = 1.0,
                 max_delay: Optional[float] = None,
                 exponential_base: float = 2.0,
                 jitter: bool = False):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    def __repr__(self) -> str:
        return (f"RetryConfig(max_attempts={self.max_attempts}, base_delay={self.base_delay}, "
                f"max_delay={self.max_delay}, exponential_base={self.exponential_base}, "
                f"jitter={self.jitter})")


def calculate_delay(attempt_index: int, config: RetryConfig) -> float:
    """Delay to wait after the failed attempt ``attempt_index`` (0-based)."""
    delay = config.base_delay * (config.exponential_base ** attempt_index)

    if config.max_delay is not None:
        delay = min(delay, config.max_delay)

    if config.jitter:
        jitter_amount = delay * 0.1  # 10% jitter
        delay += random.uniform(-jitter_amount, jitter_amount)

    return max(0.0, delay)


async def retry_with_backoff(
    operation: Callable[[], Awaitable[Result[T]]],
    config: Optional[RetryConfig] = None,
    *,
    name: str = "operation",
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    metrics: Optional[UserTypeMetrics] = None,
) -> Result[T]:
    """Run ``operation`` until it succeeds, fails terminally or runs out of attempts.

    An exception raised by ``operation`` is treated like a failed result: it
    keeps its classification when it carries one and is otherwise UNKNOWN.
    """
    if config is None:
        config = RetryConfig()

    result: Optional[Result[T]] = None

    for attempt in range(config.max_attempts):
        try:
            result = await operation()
        except Exception as e:
            result = Result.failure(classify_exception(e))

        if result.ok:
            if metrics:
                metrics.record_fetch_attempt(name, "success")
            if attempt > 0:
                logger.info("Retry succeeded", operation=name, attempt=attempt + 1)
            return result

        code = result.error.code
        if metrics:
            metrics.record_fetch_attempt(name, code.value)

        if code in TERMINAL_ERROR_CODES:
            logger.warning(
                "Terminal error, not retrying",
                operation=name,
                attempt=attempt + 1,
                code=code.value,
                error=result.error.message,
            )
            return result

        if attempt == config.max_attempts - 1:
            break

        delay = calculate_delay(attempt, config)
        logger.warning(
            "Attempt failed, waiting before next attempt",
            operation=name,
            attempt=attempt + 1,
            max_attempts=config.max_attempts,
            delay=delay,
            code=code.value,
            error=result.error.message,
        )
        await sleep(delay)

    logger.error(
        "All retry attempts exhausted",
        operation=name,
        max_attempts=config.max_attempts,
        code=result.error.code.value,
        error=result.error.message,
    )
    return result
