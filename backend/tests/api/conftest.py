"""API test fixtures — FastAPI app over a scripted upstream.

Invariants:
    - get_employee_service overridden with a service wired to FakeUpstream
    - Lifespan not run (ASGITransport): no real httpx pool is opened
    - Overrides cleared after every test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from employee_facade.api.routes.employees import get_employee_service
from employee_facade.main import app


@pytest.fixture
async def client(employee_service):
    """FastAPI test client with the employee service overridden."""
    app.dependency_overrides[get_employee_service] = lambda: employee_service
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
