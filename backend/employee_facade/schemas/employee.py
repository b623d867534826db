"""Employee Schemas — Pydantic models for the upstream wire format and facade requests.

Invariants:
    - Employee uses upstream wire names (employee_name, employee_salary, ...) as aliases;
      facade responses serialize by alias, matching what clients already consume
    - Employee is frozen: records are never modified after leaving upstream
    - CreateEmployeeRequest: name/title stripped and non-blank, salary > 0, age 16–75
    - ApiEnvelope.data is None whenever upstream reports a failure

Design Decisions:
    - populate_by_name=True: code and tests build Employee(name=..., salary=...) directly
    - Generic ApiEnvelope[T] over per-endpoint envelope classes: one decode path for
      list, single, and boolean payloads
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")

MIN_AGE = 16
MAX_AGE = 75


class Employee(BaseModel):
    """Employee record as served by upstream."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str = Field(alias="employee_name", min_length=1)
    salary: int = Field(alias="employee_salary", ge=0)
    age: int = Field(alias="employee_age", ge=MIN_AGE, le=MAX_AGE)
    title: str = Field(alias="employee_title")
    email: str = Field(alias="employee_email")


class CreateEmployeeRequest(BaseModel):
    """Employee creation — validated before dispatch, never persisted locally."""
    name: str = Field(min_length=1)
    salary: int = Field(gt=0)
    age: int = Field(ge=MIN_AGE, le=MAX_AGE)
    title: str = Field(min_length=1)

    @field_validator("name", "title")
    @classmethod
    def strip_non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ApiEnvelope(BaseModel, Generic[T]):
    """Upstream response wrapper: {data, status, error}."""
    data: T | None = None
    status: str | None = None
    error: str | None = None
