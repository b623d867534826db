"""Employee Routes — thin HTTP mapping over EmployeeService.

Invariants:
    - Routes contain no business logic (delegate to EmployeeService)
    - Fixed-segment routes (/search, /highestSalary, /topTen...) registered before /{id}
    - Responses serialize Employee by upstream alias (employee_name, employee_salary, ...)
    - Errors propagate to global handlers — no try/except here

Design Decisions:
    - Service injected via get_employee_service dependency: tests override it,
      production reads the per-process instance from app.state (built in lifespan)
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from employee_facade.core.domain_types import EmployeeId
from employee_facade.schemas.employee import CreateEmployeeRequest, Employee
from employee_facade.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/employee", tags=["employees"])


def get_employee_service(request: Request) -> EmployeeService:
    """Per-process EmployeeService, created on startup."""
    return request.app.state.employee_service


@router.get("", response_model=list[Employee])
async def get_all_employees(
    service: EmployeeService = Depends(get_employee_service),
):
    logger.info("GET all employees")
    return await service.get_all_employees()


@router.get("/search/{search_string}", response_model=list[Employee])
async def search_employees_by_name(
    search_string: str, service: EmployeeService = Depends(get_employee_service),
):
    logger.info(f"GET employees matching '{search_string}'")
    return await service.search_employees_by_name(search_string)


@router.get("/highestSalary", response_model=int)
async def get_highest_salary(
    service: EmployeeService = Depends(get_employee_service),
):
    logger.info("GET highest salary")
    return await service.get_highest_salary()


@router.get("/topTenHighestEarningEmployeeNames", response_model=list[str])
async def get_top_ten_highest_earning_employee_names(
    service: EmployeeService = Depends(get_employee_service),
):
    logger.info("GET top ten highest earning employee names")
    return await service.get_top_ten_highest_earning_employee_names()


@router.get("/{employee_id}", response_model=Employee)
async def get_employee_by_id(
    employee_id: str, service: EmployeeService = Depends(get_employee_service),
):
    logger.info("GET employee by id", extra={"employee_id": employee_id})
    return await service.get_employee_by_id(EmployeeId(employee_id))


@router.post(
    "", response_model=Employee, status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    body: CreateEmployeeRequest,
    service: EmployeeService = Depends(get_employee_service),
):
    logger.info(f"POST create employee {body.name}")
    return await service.create_employee(body)


@router.delete("/{employee_id}", response_model=str)
async def delete_employee_by_id(
    employee_id: str, service: EmployeeService = Depends(get_employee_service),
):
    logger.info("DELETE employee by id", extra={"employee_id": employee_id})
    return await service.delete_employee_by_id(EmployeeId(employee_id))
