"""Employee Service — facade operations composed from the upstream client and pure aggregations.

Invariants:
    - Reads always fetch fresh from upstream (no cache)
    - Envelope with null data: get-by-id → EmployeeNotFoundError; anything else → ExternalApiError
    - Blank id rejected with InvalidRequestError before any dispatch; the search
      string is matched as given, whitespace included
    - delete_employee_by_id issues GET /{id} then DELETE /{name}, in that order
    - No partial results: any upstream failure propagates classified and unchanged

Design Decisions:
    - Impure shell around pure core: IO here, aggregation in core/aggregations.py
    - Read-then-delete-by-name is not atomic. Upstream deletes by name, so a rename
      or removal between the two calls can no-op or hit another record with the same
      name. Accepted: upstream offers no delete-by-id. A `data: false` reply is logged
      and the resolved name still returned.
"""

import logging

from employee_facade.core.aggregations import filter_by_name, max_salary, top_n_names
from employee_facade.core.domain_types import EmployeeId, Operation
from employee_facade.core.errors import (
    EmployeeNotFoundError,
    ErrorContext,
    ExternalApiError,
    InvalidRequestError,
)
from employee_facade.infrastructure.employee_api_client import EmployeeApiClient
from employee_facade.schemas.employee import ApiEnvelope, CreateEmployeeRequest, Employee

logger = logging.getLogger(__name__)

TOP_EARNERS_LIMIT = 10


class EmployeeService:
    """Facade operations over the upstream employee API."""

    def __init__(self, client: EmployeeApiClient):
        self.client = client

    async def get_all_employees(self) -> list[Employee]:
        logger.debug("Fetching all employees")
        envelope = await self.client.list_employees()
        employees = _require_data(envelope, Operation.LIST)
        logger.debug(
            f"Fetched {len(employees)} employees",
            extra={"operation": Operation.LIST.value},
        )
        return employees

    async def search_employees_by_name(self, search_string: str) -> list[Employee]:
        logger.debug(
            f"Searching employees by name: {search_string!r}",
            extra={"operation": Operation.SEARCH.value},
        )
        return filter_by_name(await self.get_all_employees(), search_string)

    async def get_employee_by_id(self, employee_id: EmployeeId) -> Employee:
        _check_id(employee_id, Operation.GET)
        logger.debug(
            "Fetching employee by id", extra={"employee_id": employee_id},
        )
        envelope = await self.client.get_employee(employee_id)
        if envelope.data is None:
            raise EmployeeNotFoundError(
                employee_id, ErrorContext(operation=Operation.GET.value),
            )
        return envelope.data

    async def get_highest_salary(self) -> int:
        salary = max_salary(await self.get_all_employees())
        logger.debug(f"Highest salary found: {salary}")
        return salary

    async def get_top_ten_highest_earning_employee_names(self) -> list[str]:
        names = top_n_names(await self.get_all_employees(), TOP_EARNERS_LIMIT)
        logger.debug(f"Top {TOP_EARNERS_LIMIT} highest earners: {names}")
        return names

    async def create_employee(self, request: CreateEmployeeRequest) -> Employee:
        logger.debug(f"Creating employee: {request.name}")
        envelope = await self.client.create_employee(request)
        employee = _require_data(envelope, Operation.CREATE)
        logger.info(
            f"Created employee {employee.name}",
            extra={"employee_id": employee.id, "operation": Operation.CREATE.value},
        )
        return employee

    async def delete_employee_by_id(self, employee_id: EmployeeId) -> str:
        """Resolve id → name, then delete by name. Returns the deleted name."""
        employee = await self.get_employee_by_id(employee_id)
        envelope = await self.client.delete_employee(employee.name)
        deleted = _require_data(envelope, Operation.DELETE)
        if not deleted:
            logger.warning(
                f"Upstream reported nothing deleted for {employee.name}",
                extra={"employee_id": employee_id, "operation": Operation.DELETE.value},
            )
        else:
            logger.info(
                f"Deleted employee {employee.name}",
                extra={"employee_id": employee_id, "operation": Operation.DELETE.value},
            )
        return employee.name


def _check_id(employee_id: str, operation: Operation) -> None:
    if not employee_id.strip():
        raise InvalidRequestError(
            "employee id must not be blank", "id",
            ErrorContext(operation=operation.value),
        )


def _require_data(envelope: ApiEnvelope, operation: Operation):
    """Unwrap envelope data; a null payload is an upstream failure."""
    if envelope.data is None:
        raise ExternalApiError(
            envelope.error or f"upstream returned no data (status={envelope.status})",
            context=ErrorContext(operation=operation.value),
        )
    return envelope.data
