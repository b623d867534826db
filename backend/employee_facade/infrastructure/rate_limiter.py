"""Outbound Rate Limiter — process-wide permit gate in front of every upstream call.

Invariants:
    - One instance per process (held on app.state) — the quota is global, not per caller
    - Reservation is a synchronous critical section: no await while the lock is held
    - A refused reservation raises RateLimitExceededError before any dispatch and
      consumes no permit
    - A granted reservation sleeps out its wait, then returns; cancellation during
      the sleep propagates (CancelledError is never caught here)

Design Decisions:
    - Pure reserve_permit() from core/ + thin stateful shell: the token arithmetic is
      tested without a clock, this class only adds locking and sleeping
    - threading.Lock over asyncio.Lock: the critical section never awaits, and a
      threading lock also holds if the limiter is shared across event loops
    - Injectable clock/sleep: tests drive time explicitly
"""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable

from employee_facade.core.errors import ErrorContext, RateLimitExceededError
from employee_facade.core.resilience_policy import (
    LimiterState,
    RateLimitPolicy,
    initial_limiter_state,
    reserve_permit,
)

logger = logging.getLogger(__name__)


class AsyncRateLimiter:
    """Fixed-window permit limiter with bounded wait."""

    def __init__(
        self,
        policy: RateLimitPolicy,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.policy = policy
        self._clock = clock
        self._sleep = sleep
        self._origin = clock()
        self._state = initial_limiter_state(policy)
        self._lock = threading.Lock()

    @property
    def state(self) -> LimiterState:
        return self._state

    async def acquire(self, context: ErrorContext | None = None) -> None:
        """Acquire one permit, waiting up to policy.timeout_ms."""
        with self._lock:
            elapsed_ms = (self._clock() - self._origin) * 1000
            reservation = reserve_permit(self._state, self.policy, elapsed_ms)
            self._state = reservation.state

        if not reservation.granted:
            logger.warning(
                "Rate limit permit refused",
                extra={"wait_ms": int(reservation.wait_ms)},
            )
            raise RateLimitExceededError(
                self.policy.timeout_ms, reservation.wait_ms, context=context,
            )

        if reservation.wait_ms > 0:
            logger.debug(
                "Waiting for rate limit permit",
                extra={"wait_ms": int(reservation.wait_ms)},
            )
            await self._sleep(reservation.wait_ms / 1000)
