"""Error Hierarchy — typed, categorized exceptions for every facade failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - HTTP status is derived by status_for_error() — a pure function of category
      and upstream status, never stored on the exception
    - to_response() produces the REST error envelope
    - UpstreamHTTPStatusError is raw transport signal, not part of the facade hierarchy;
      it must pass through the error classifier before reaching a route

Design Decisions:
    - Single hierarchy with EmployeeFacadeError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - UpstreamTimeoutError subclasses ExternalApiError: callers that only care about
      "upstream failed" keep working, handlers that care about timeouts can tell them apart
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from employee_facade.core.domain_types import TimeoutKind
from employee_facade.core.resilience_policy import TRANSIENT_STATUSES


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    RATE_LIMITED = "rate_limited"
    EXTERNAL_API = "external_api"
    TIMEOUT = "timeout"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    employee_id: str | None = None
    operation: str | None = None
    upstream_status: int | None = None
    retry_after_ms: int | None = None
    debug_info: dict[str, Any] | None = None


class EmployeeFacadeError(Exception):
    """Base exception for all facade errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    @property
    def http_status(self) -> int:
        return status_for_error(self)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "employee_id": self.context.employee_id,
                    "operation": self.context.operation,
                    "upstream_status": self.context.upstream_status,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidRequestError(EmployeeFacadeError):
    """Request shape invalid — rejected before any upstream dispatch."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class EmployeeNotFoundError(EmployeeFacadeError):
    """Upstream reports the employee does not exist."""
    def __init__(self, employee_id: str | None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.employee_id = employee_id
        label = f"'{employee_id}' " if employee_id else ""
        super().__init__(
            f"Employee {label}not found",
            "EMPLOYEE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx,
        )
        self.employee_id = employee_id


class RateLimitExceededError(EmployeeFacadeError):
    """No permit became available within the configured acquire timeout."""
    def __init__(
        self, timeout_ms: int, wait_ms: float, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = int(wait_ms)
        super().__init__(
            f"Outbound rate limit exceeded: permit needed {int(wait_ms)}ms, "
            f"timeout is {timeout_ms}ms",
            "RATE_LIMIT_EXCEEDED", ErrorCategory.RATE_LIMITED,
            ErrorSeverity.WARNING, ctx,
        )
        self.timeout_ms = timeout_ms
        self.wait_ms = wait_ms
        self.timeout_kind = TimeoutKind.PERMIT


# ─── Upstream Errors (500-level) ────────────────────────────────

class ExternalApiError(EmployeeFacadeError):
    """Upstream call failed after retries, or with a non-retryable status."""
    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        context: ErrorContext | None = None,
        *,
        code: str = "EXTERNAL_API_ERROR",
        category: ErrorCategory = ErrorCategory.EXTERNAL_API,
    ):
        ctx = context or ErrorContext()
        ctx.upstream_status = upstream_status
        super().__init__(
            f"External API error: {message}",
            code, category, ErrorSeverity.CRITICAL, ctx,
        )
        self.upstream_status = upstream_status


class UpstreamTimeoutError(ExternalApiError):
    """Upstream call timed out at connect, read, write or pool acquisition."""
    def __init__(self, timeout_kind: TimeoutKind, context: ErrorContext | None = None):
        super().__init__(
            f"{timeout_kind.value} timeout", None, context,
            code="UPSTREAM_TIMEOUT", category=ErrorCategory.TIMEOUT,
        )
        self.timeout_kind = timeout_kind


# ─── Raw transport signal ───────────────────────────────────────

class UpstreamHTTPStatusError(Exception):
    """Non-2xx response from upstream. Retry decisions key on status_code."""
    def __init__(self, status_code: int, message: str, method: str = "", url: str = ""):
        super().__init__(f"{method} {url} -> {status_code}: {message}".strip())
        self.status_code = status_code
        self.message = message
        self.method = method
        self.url = url


# ─── Status mapping ─────────────────────────────────────────────

_CATEGORY_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.RESOURCE_NOT_FOUND: 404,
    ErrorCategory.RATE_LIMITED: 429,
    ErrorCategory.EXTERNAL_API: 502,
    ErrorCategory.TIMEOUT: 503,
    ErrorCategory.INTERNAL: 500,
}


def status_for_error(error: EmployeeFacadeError) -> int:
    """HTTP status for a classified error. Pure.

    Upstream failures that were transient (429/503 after retries exhausted) surface
    as 503 so clients know to come back later; every other upstream failure is 502.
    """
    if (
        error.category is ErrorCategory.EXTERNAL_API
        and error.context.upstream_status in TRANSIENT_STATUSES
    ):
        return 503
    return _CATEGORY_STATUS.get(error.category, 500)
