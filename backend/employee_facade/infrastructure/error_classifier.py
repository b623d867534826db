"""Error Classifier — maps terminal outbound failures to the facade error taxonomy.

Invariants:
    - Upstream 404 → EmployeeNotFoundError
    - Any other upstream status → ExternalApiError(upstream_status=status)
    - httpx timeouts → UpstreamTimeoutError, one TimeoutKind per layer
    - Transport errors, malformed envelopes, anything unexpected → ExternalApiError
    - Already-classified EmployeeFacadeError (e.g. RateLimitExceededError) passes through
    - Returns, never raises — the caller re-raises with `from exc` to keep the chain

Design Decisions:
    - Lives in infrastructure/ (not core/) because it knows httpx's exception types
    - Pure function over an exception method: classification is tested with
      hand-built exceptions, no transport needed
"""

import json
import logging

import httpx
from pydantic import ValidationError

from employee_facade.core.domain_types import TimeoutKind
from employee_facade.core.errors import (
    EmployeeFacadeError,
    EmployeeNotFoundError,
    ErrorContext,
    ExternalApiError,
    UpstreamHTTPStatusError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)

_NOT_FOUND = 404

# Order matters: httpx.TimeoutException subclasses share a base.
_TIMEOUT_KINDS: tuple[tuple[type[httpx.TimeoutException], TimeoutKind], ...] = (
    (httpx.ConnectTimeout, TimeoutKind.CONNECT),
    (httpx.ReadTimeout, TimeoutKind.READ),
    (httpx.WriteTimeout, TimeoutKind.WRITE),
    (httpx.PoolTimeout, TimeoutKind.POOL),
)


def classify_failure(
    exc: BaseException,
    *,
    operation: str,
    employee_id: str | None = None,
) -> EmployeeFacadeError:
    """Convert a terminal failure into exactly one facade error."""
    if isinstance(exc, EmployeeFacadeError):
        return exc

    context = ErrorContext(operation=operation, employee_id=employee_id)

    if isinstance(exc, UpstreamHTTPStatusError):
        if exc.status_code == _NOT_FOUND:
            return EmployeeNotFoundError(employee_id, context=context)
        return ExternalApiError(exc.message, exc.status_code, context=context)

    if isinstance(exc, httpx.TimeoutException):
        return UpstreamTimeoutError(_timeout_kind(exc), context=context)

    if isinstance(exc, httpx.HTTPError):
        return ExternalApiError(f"transport failure: {exc}", context=context)

    if isinstance(exc, (ValidationError, json.JSONDecodeError)):
        context.debug_info = {"detail": str(exc)}
        return ExternalApiError("malformed upstream response", context=context)

    logger.error(
        f"Unexpected outbound failure in {operation}: {exc}", exc_info=exc,
    )
    return ExternalApiError("Unexpected error occurred", context=context)


def _timeout_kind(exc: httpx.TimeoutException) -> TimeoutKind:
    for exc_type, kind in _TIMEOUT_KINDS:
        if isinstance(exc, exc_type):
            return kind
    return TimeoutKind.READ
