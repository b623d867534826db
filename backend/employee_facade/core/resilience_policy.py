"""Resilience Policy — pure scheduling functions for retry backoff and permit reservation.

Invariants:
    - backoff_delay_ms(n) == min(initial_wait_ms * multiplier^(n-1), max_wait_ms), n >= 1
    - The backoff schedule is non-decreasing and never exceeds max_wait_ms
    - A permit reservation is granted only if its wait fits within timeout_ms;
      a refused reservation leaves the permit count untouched
    - Permits refresh at cycle boundaries: cycle = elapsed_ms // refresh_period_ms,
      and never accumulate beyond limit_for_period
    - No IO, no clock reads, no sleeping — callers supply elapsed time

Design Decisions:
    - Explicit policy objects over framework-managed retry/limiter beans: the schedule
      and limiter state are unit-testable without waiting on a real clock
    - No jitter: the schedule is deterministic so tests can assert exact waits
    - Fixed-window cycle refresh (permits per refresh period) with reservation ahead of
      time: a caller that must wait still holds its slot in a future cycle, so the
      process-wide quota is never exceeded
"""

from dataclasses import dataclass, field

# Upstream statuses worth retrying: rate limited, temporarily unavailable.
TRANSIENT_STATUSES: frozenset[int] = frozenset({429, 503})


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff on transient upstream statuses."""
    max_attempts: int = 3
    initial_wait_ms: int = 500
    max_wait_ms: int = 5000
    multiplier: float = 2.0
    retry_on_statuses: frozenset[int] = field(default=TRANSIENT_STATUSES)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_wait_ms < 0:
            raise ValueError("initial_wait_ms must be >= 0")
        if self.max_wait_ms < self.initial_wait_ms:
            raise ValueError("max_wait_ms must be >= initial_wait_ms")
        if self.multiplier < 1:
            raise ValueError("multiplier must be >= 1")


@dataclass(frozen=True)
class RateLimitPolicy:
    """Fixed quota of permits per refresh period, with a bounded wait for a permit."""
    limit_for_period: int = 10
    refresh_period_ms: int = 1000
    timeout_ms: int = 5000

    def __post_init__(self):
        if self.limit_for_period < 1:
            raise ValueError("limit_for_period must be >= 1")
        if self.refresh_period_ms <= 0:
            raise ValueError("refresh_period_ms must be > 0")
        if self.timeout_ms < 0:
            raise ValueError("timeout_ms must be >= 0")


@dataclass(frozen=True)
class LimiterState:
    """Token count for the current cycle. Negative permits are reservations in future cycles."""
    cycle: int
    permits: int


@dataclass(frozen=True)
class PermitReservation:
    """Outcome of one reservation attempt."""
    state: LimiterState
    granted: bool
    wait_ms: float


# ─── Retry ───────────────────────────────────────────────────────

def is_transient_status(policy: RetryPolicy, status_code: int) -> bool:
    """True if an upstream status should be retried under this policy."""
    return status_code in policy.retry_on_statuses


def backoff_delay_ms(policy: RetryPolicy, retry_number: int) -> int:
    """Wait before the n-th retry (1-based). Pure."""
    if retry_number < 1:
        raise ValueError("retry_number must be >= 1")
    delay = float(policy.initial_wait_ms)
    for _ in range(retry_number - 1):
        if delay >= policy.max_wait_ms:
            break
        delay *= policy.multiplier
    return int(min(delay, policy.max_wait_ms))


def backoff_schedule(policy: RetryPolicy) -> list[int]:
    """All waits a logical call can incur — one fewer than max_attempts."""
    return [
        backoff_delay_ms(policy, n) for n in range(1, policy.max_attempts)
    ]


# ─── Rate limiting ───────────────────────────────────────────────

def initial_limiter_state(policy: RateLimitPolicy) -> LimiterState:
    """Full bucket at cycle zero."""
    return LimiterState(cycle=0, permits=policy.limit_for_period)


def refresh_state(
    state: LimiterState, policy: RateLimitPolicy, elapsed_ms: float,
) -> LimiterState:
    """Advance to the cycle containing elapsed_ms, topping up permits per elapsed cycle."""
    cycle = int(elapsed_ms // policy.refresh_period_ms)
    if cycle <= state.cycle:
        return state
    accumulated = (cycle - state.cycle) * policy.limit_for_period
    permits = min(state.permits + accumulated, policy.limit_for_period)
    return LimiterState(cycle=cycle, permits=permits)


def wait_for_permit_ms(
    state: LimiterState, policy: RateLimitPolicy, elapsed_ms: float,
) -> float:
    """Time until one permit is available, given an already-refreshed state."""
    if state.permits >= 1:
        return 0.0
    period = policy.refresh_period_ms
    to_next_cycle = (state.cycle + 1) * period - elapsed_ms
    at_next_cycle = state.permits + policy.limit_for_period
    # Ceil division: whole cycles still needed after the next one starts.
    full_cycles = max(0, -(-(1 - at_next_cycle) // policy.limit_for_period))
    return full_cycles * period + to_next_cycle


def reserve_permit(
    state: LimiterState, policy: RateLimitPolicy, elapsed_ms: float,
) -> PermitReservation:
    """Try to reserve one permit at elapsed_ms since the limiter's origin. Pure.

    Granted reservations decrement permits even when the caller must wait;
    the wait tells the caller how long to sleep before dispatching.
    """
    refreshed = refresh_state(state, policy, elapsed_ms)
    wait_ms = wait_for_permit_ms(refreshed, policy, elapsed_ms)
    if wait_ms > policy.timeout_ms:
        return PermitReservation(state=refreshed, granted=False, wait_ms=wait_ms)
    reserved = LimiterState(cycle=refreshed.cycle, permits=refreshed.permits - 1)
    return PermitReservation(state=reserved, granted=True, wait_ms=wait_ms)
