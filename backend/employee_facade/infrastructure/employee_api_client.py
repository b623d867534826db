"""Employee API Client — httpx adapter for the upstream mock employee API.

Invariants:
    - Every call goes through ResilientExecutor (one permit, bounded retry)
    - Non-2xx responses raise UpstreamHTTPStatusError inside the retry loop so
      transient statuses can be retried; terminal failures leave via classify_failure()
    - Envelopes decoded with pydantic — a malformed body is an ExternalApiError,
      never a partially-populated result
    - Delete is keyed by employee name (percent-encoded as one path segment)

Design Decisions:
    - Absolute URLs over httpx base_url: base_url forces a trailing slash on the
      collection endpoint, which the upstream treats as a different route
    - Connect/read/write/pool timeouts configured independently (httpx.Timeout)
    - Transport injectable: tests pass httpx.MockTransport, production uses the default pool
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from employee_facade.config import Settings
from employee_facade.core.domain_types import EmployeeId, HttpMethod, Operation
from employee_facade.core.errors import ErrorContext, UpstreamHTTPStatusError
from employee_facade.infrastructure.error_classifier import classify_failure
from employee_facade.infrastructure.rate_limiter import AsyncRateLimiter
from employee_facade.infrastructure.resilient_executor import ResilientExecutor
from employee_facade.schemas.employee import (
    ApiEnvelope,
    CreateEmployeeRequest,
    Employee,
)

logger = logging.getLogger(__name__)

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)


class EmployeeApiClient:
    """Typed, resilient access to the upstream employee endpoints."""

    def __init__(
        self, http: httpx.AsyncClient, executor: ResilientExecutor, base_url: str,
    ):
        self._http = http
        self._executor = executor
        self._base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> "EmployeeApiClient":
        """Build client, limiter and executor from application settings."""
        timeout = httpx.Timeout(
            connect=settings.employee_api_connect_timeout_seconds,
            read=settings.employee_api_read_timeout_seconds,
            write=settings.employee_api_write_timeout_seconds,
            pool=settings.employee_api_connect_timeout_seconds,
        )
        http = httpx.AsyncClient(timeout=timeout, transport=transport)
        sleep_kwargs = {"sleep": sleep} if sleep else {}
        limiter = AsyncRateLimiter(settings.rate_limit_policy(), **sleep_kwargs)
        executor = ResilientExecutor(
            settings.retry_policy(), limiter, **sleep_kwargs,
        )
        return cls(http, executor, settings.employee_api_base_url)

    async def aclose(self) -> None:
        await self._http.aclose()

    # ─── Endpoints ───────────────────────────────────────────────

    async def list_employees(self) -> ApiEnvelope[list[Employee]]:
        return await self._call(
            HttpMethod.GET, "", ApiEnvelope[list[Employee]],
            operation=Operation.LIST,
        )

    async def get_employee(self, employee_id: EmployeeId) -> ApiEnvelope[Employee]:
        return await self._call(
            HttpMethod.GET, f"/{quote(employee_id, safe='')}",
            ApiEnvelope[Employee],
            operation=Operation.GET, employee_id=employee_id,
        )

    async def create_employee(
        self, request: CreateEmployeeRequest,
    ) -> ApiEnvelope[Employee]:
        return await self._call(
            HttpMethod.POST, "", ApiEnvelope[Employee],
            operation=Operation.CREATE, body=request.model_dump(),
        )

    async def delete_employee(self, name: str) -> ApiEnvelope[bool]:
        return await self._call(
            HttpMethod.DELETE, f"/{quote(name, safe='')}", ApiEnvelope[bool],
            operation=Operation.DELETE,
        )

    # ─── Plumbing ────────────────────────────────────────────────

    async def _call(
        self,
        method: HttpMethod,
        path: str,
        envelope_type: type[EnvelopeT],
        *,
        operation: Operation,
        employee_id: str | None = None,
        body: dict[str, Any] | None = None,
    ) -> EnvelopeT:
        """Dispatch under the resilience policy, decode, classify any failure."""
        context = ErrorContext(operation=operation.value, employee_id=employee_id)
        try:
            payload = await self._executor.execute(
                lambda: self._send(method, path, body),
                operation=operation.value,
                context=context,
            )
            return envelope_type.model_validate(payload)
        except Exception as exc:
            classified = classify_failure(
                exc, operation=operation.value, employee_id=employee_id,
            )
            if classified is exc:
                raise
            raise classified from exc

    async def _send(
        self, method: HttpMethod, path: str, body: dict[str, Any] | None,
    ) -> Any:
        """One physical request. Raises UpstreamHTTPStatusError on non-2xx."""
        url = f"{self._base_url}{path}"
        response = await self._http.request(method.value, url, json=body)
        logger.debug(
            f"{method.value} {url} -> {response.status_code}",
            extra={"status_code": response.status_code, "path": path or "/"},
        )
        if response.is_error:
            raise UpstreamHTTPStatusError(
                response.status_code, _error_message(response), method.value, url,
            )
        return response.json()


def _error_message(response: httpx.Response) -> str:
    """Upstream envelope's error text, falling back to the HTTP reason phrase."""
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return response.reason_phrase or f"HTTP {response.status_code}"
