"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - EmployeeId wraps str without changing its value
    - Enums serialize to their wire/log string values
"""

from employee_facade.core.domain_types import EmployeeId, HttpMethod, Operation, TimeoutKind


def test_employee_id_wraps_str():
    assert EmployeeId("abc-123") == "abc-123"


def test_http_methods_are_upstream_verbs():
    assert {m.value for m in HttpMethod} == {"GET", "POST", "DELETE"}


def test_timeout_kinds_cover_each_layer():
    assert {k.value for k in TimeoutKind} == {"connect", "read", "write", "pool", "permit"}


def test_operation_enum_is_str():
    assert Operation.DELETE == "delete_employee"
    assert isinstance(Operation.LIST, str)
