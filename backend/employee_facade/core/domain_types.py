"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - EmployeeId wraps the upstream's opaque identifier — never parsed or validated locally
    - Outbound verbs and timeout layers encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON log fields without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

EmployeeId = NewType("EmployeeId", str)


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    """Verbs the facade issues against the upstream employee API."""
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class TimeoutKind(str, Enum):
    """Layer at which an outbound call timed out. Each layer is configured independently."""
    CONNECT = "connect"
    READ = "read"
    WRITE = "write"
    POOL = "pool"
    PERMIT = "permit"


class Operation(str, Enum):
    """Logical facade operations — used for log and error context."""
    LIST = "list_employees"
    SEARCH = "search_employees"
    GET = "get_employee"
    HIGHEST_SALARY = "highest_salary"
    TOP_EARNERS = "top_earners"
    CREATE = "create_employee"
    DELETE = "delete_employee"
