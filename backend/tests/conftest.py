"""Root conftest — shared test configuration and upstream fakes.

Invariants:
    - Tests never reach a real upstream: base URL points at a reserved .test host
    - Every test gets a fresh FakeUpstream, FakeClock and RecordingSleep
"""

import os

# Must run before employee_facade.main is imported (settings read at import time)
os.environ.setdefault(
    "EMPLOYEE_API_BASE_URL", "http://upstream.test/api/v1/employee",
)
os.environ.setdefault("LOG_FORMAT", "text")

import httpx  # noqa: E402
import pytest  # noqa: E402

from employee_facade.config import Settings  # noqa: E402
from employee_facade.infrastructure.employee_api_client import EmployeeApiClient  # noqa: E402
from employee_facade.services.employee_service import EmployeeService  # noqa: E402

from tests.fakes import BASE_URL, FakeClock, FakeUpstream, RecordingSleep  # noqa: E402


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeper(clock):
    return RecordingSleep(clock)


@pytest.fixture
def settings():
    return Settings(
        employee_api_base_url=BASE_URL,
        retry_max_attempts=3,
        retry_initial_wait_ms=100,
        retry_max_wait_ms=1000,
        rate_limit_permits_per_period=50,
        rate_limit_refresh_period_ms=1000,
        rate_limit_timeout_ms=5000,
    )


@pytest.fixture
async def api_client(settings, upstream, sleeper):
    """EmployeeApiClient wired to FakeUpstream, sleeping on the recorder."""
    client = EmployeeApiClient.from_settings(
        settings, transport=httpx.MockTransport(upstream.handler), sleep=sleeper,
    )
    yield client
    await client.aclose()


@pytest.fixture
def employee_service(api_client):
    return EmployeeService(api_client)
