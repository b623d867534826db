"""Employee Routes — HTTP contract of the facade.

Invariants:
    - Reads and delete return 200, create returns 201
    - Employees serialized with upstream aliases (employee_name, ...)
    - Validation failures → 400 with field details, no upstream call
    - NotFound → 404, RateLimitExceeded → 429, ExternalApiError → 502/503
    - Fixed routes (/highestSalary, /topTen...) are not captured by /{id}
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from employee_facade.api.routes.employees import get_employee_service
from employee_facade.config import Settings
from employee_facade.infrastructure.employee_api_client import EmployeeApiClient
from employee_facade.main import app
from employee_facade.services.employee_service import EmployeeService

from tests.fakes import BASE_PATH, BASE_URL, employee_json, envelope, error_response

API = "/api/v1/employee"


def _staff():
    return envelope([
        employee_json("Alice", 50_000, id="a-1"),
        employee_json("Bob", 90_000, id="b-2"),
        employee_json("Cara", 70_000, id="c-3"),
    ])


# ─── Reads ───────────────────────────────────────────────────────

async def test_list_employees(client, upstream):
    upstream.queue(_staff())
    res = await client.get(API)
    assert res.status_code == 200
    body = res.json()
    assert [e["employee_name"] for e in body] == ["Alice", "Bob", "Cara"]
    assert body[1]["employee_salary"] == 90_000


async def test_search(client, upstream):
    upstream.queue(_staff())
    res = await client.get(f"{API}/search/A")
    assert res.status_code == 200
    assert [e["employee_name"] for e in res.json()] == ["Alice", "Cara"]


async def test_search_for_space_is_a_substring_match(client, upstream):
    upstream.queue(envelope([employee_json("Alice Smith"), employee_json("Bob")]))
    res = await client.get(f"{API}/search/%20")
    assert res.status_code == 200
    assert [e["employee_name"] for e in res.json()] == ["Alice Smith"]


async def test_highest_salary_route_not_captured_by_id(client, upstream):
    upstream.queue(_staff())
    res = await client.get(f"{API}/highestSalary")
    assert res.status_code == 200
    assert res.json() == 90_000
    assert upstream.calls == [("GET", BASE_PATH)]


async def test_top_ten_names(client, upstream):
    upstream.queue(_staff())
    res = await client.get(f"{API}/topTenHighestEarningEmployeeNames")
    assert res.status_code == 200
    assert res.json() == ["Bob", "Cara", "Alice"]


async def test_get_by_id(client, upstream):
    upstream.queue(envelope(employee_json("Bob", 90_000, id="b-2")))
    res = await client.get(f"{API}/b-2")
    assert res.status_code == 200
    assert res.json()["employee_name"] == "Bob"
    assert res.json()["id"] == "b-2"


async def test_get_by_id_not_found(client, upstream):
    upstream.queue(error_response(404))
    res = await client.get(f"{API}/missing")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "EMPLOYEE_NOT_FOUND"
    assert error["context"]["employee_id"] == "missing"


# ─── Writes ──────────────────────────────────────────────────────

async def test_create_returns_201(client, upstream):
    upstream.queue(envelope(employee_json("Eve", 80_000, id="e-5", age=29, title="SRE")))
    res = await client.post(
        API, json={"name": "Eve", "salary": 80_000, "age": 29, "title": "SRE"},
    )
    assert res.status_code == 201
    assert res.json()["employee_name"] == "Eve"
    assert upstream.body(0)["name"] == "Eve"


@pytest.mark.parametrize("payload,field", [
    ({"name": "Eve", "salary": -1000, "age": 29, "title": "SRE"}, "salary"),
    ({"name": "Eve", "salary": 1000, "age": 12, "title": "SRE"}, "age"),
    ({"name": " ", "salary": 1000, "age": 29, "title": "SRE"}, "name"),
    ({"name": "Eve", "salary": 1000, "age": 29}, "title"),
])
async def test_create_validation_returns_400(client, upstream, payload, field):
    res = await client.post(API, json=payload)
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any(d["field"].endswith(field) for d in error["details"])
    assert upstream.requests == []


async def test_delete_returns_name(client, upstream):
    upstream.queue(
        envelope(employee_json("Bob", 90_000, id="b-2")),
        envelope(True),
    )
    res = await client.delete(f"{API}/b-2")
    assert res.status_code == 200
    assert res.json() == "Bob"
    assert upstream.calls == [
        ("GET", f"{BASE_PATH}/b-2"),
        ("DELETE", f"{BASE_PATH}/Bob"),
    ]


# ─── Upstream failures ───────────────────────────────────────────

async def test_non_transient_upstream_error_is_502(client, upstream):
    upstream.queue(error_response(400, "bad"))
    res = await client.get(API)
    assert res.status_code == 502
    assert res.json()["error"]["context"]["upstream_status"] == 400


async def test_exhausted_transient_errors_are_503(client, upstream):
    upstream.queue(*(error_response(503) for _ in range(3)))
    res = await client.get(API)
    assert res.status_code == 503
    assert len(upstream.requests) == 3


async def test_upstream_timeout_is_503(client, upstream):
    upstream.queue(httpx.ConnectTimeout("no route"))
    res = await client.get(API)
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "UPSTREAM_TIMEOUT"


async def test_rate_limit_exceeded_is_429(upstream, sleeper):
    settings = Settings(
        _env_file=None,
        employee_api_base_url=BASE_URL,
        rate_limit_permits_per_period=1,
        rate_limit_refresh_period_ms=60_000,
        rate_limit_timeout_ms=0,
    )
    api_client = EmployeeApiClient.from_settings(
        settings, transport=httpx.MockTransport(upstream.handler), sleep=sleeper,
    )
    app.dependency_overrides[get_employee_service] = lambda: EmployeeService(api_client)
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        ) as c:
            upstream.queue(_staff())
            first = await c.get(API)
            second = await c.get(API)
    finally:
        app.dependency_overrides.clear()
        await api_client.aclose()

    assert first.status_code == 200
    assert second.status_code == 429
    assert second.json()["error"]["code"] == "RATE_LIMIT_EXCEEDED"
    assert len(upstream.requests) == 1


# ─── Health ──────────────────────────────────────────────────────

async def test_health(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
