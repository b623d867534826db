"""Resilient Executor — one permit, bounded retries with exponential backoff.

Invariants:
    - Exactly one permit acquired per logical call, before the first attempt
    - At most policy.max_attempts physical attempts per logical call
    - Only UpstreamHTTPStatusError with a transient status (429, 503) is retried
    - Anything else (other statuses, transport errors, timeouts) propagates on first failure
    - Failures leave here unclassified — the caller runs them through classify_failure()

Design Decisions:
    - Explicit loop over a retry decorator: attempt count and waits are visible in logs
      and assertable in tests
    - Rate limiter wraps the retry loop (not each attempt): a logical call holds its
      quota slot while it retries, matching how the quota is accounted upstream
    - No jitter: the backoff schedule is a pure function of the policy
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from employee_facade.core.errors import ErrorContext, UpstreamHTTPStatusError
from employee_facade.core.resilience_policy import (
    RetryPolicy,
    backoff_delay_ms,
    is_transient_status,
)
from employee_facade.infrastructure.rate_limiter import AsyncRateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResilientExecutor:
    """Runs a single logical outbound call under the retry + rate-limit policy."""

    def __init__(
        self,
        retry_policy: RetryPolicy,
        rate_limiter: AsyncRateLimiter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.retry_policy = retry_policy
        self.rate_limiter = rate_limiter
        self._sleep = sleep

    async def execute(
        self,
        call: Callable[[], Awaitable[T]],
        *,
        operation: str,
        context: ErrorContext | None = None,
    ) -> T:
        """Acquire a permit, then dispatch with retry on transient statuses."""
        await self.rate_limiter.acquire(context)

        max_attempts = self.retry_policy.max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                result = await call()
            except UpstreamHTTPStatusError as e:
                retryable = is_transient_status(self.retry_policy, e.status_code)
                if not retryable or attempt >= max_attempts:
                    logger.info(
                        f"{operation} failed, not retrying",
                        extra={
                            "operation": operation,
                            "attempt": attempt,
                            "status_code": e.status_code,
                        },
                    )
                    raise
                await self._backoff(operation, attempt, e.status_code)
                continue
            if attempt > 1:
                logger.info(
                    f"{operation} succeeded after retry",
                    extra={"operation": operation, "attempt": attempt},
                )
            return result

        raise AssertionError("unreachable: retry loop exits via return or raise")

    async def _backoff(self, operation: str, attempt: int, status_code: int) -> None:
        delay = backoff_delay_ms(self.retry_policy, attempt)
        logger.warning(
            f"Transient upstream status {status_code}, retry after {delay}ms",
            extra={
                "operation": operation,
                "attempt": attempt,
                "status_code": status_code,
                "delay_ms": delay,
            },
        )
        await self._sleep(delay / 1000)
