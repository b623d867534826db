"""Test Fakes — scripted upstream employee API, controllable clock and sleep.

Invariants:
    - FakeUpstream answers requests strictly in queue order, one entry per physical call
    - FakeUpstream records every request it sees (method, path, body)
    - RecordingSleep never blocks; it records the delay and advances FakeClock

Design Decisions:
    - httpx.MockTransport handler over a live server: exercises the real httpx client,
      timeouts and error paths without sockets
    - Queue entries may be a Response, an Exception (raised as transport failure),
      or a callable(request) -> Response for request-dependent answers
"""

import json
from collections.abc import Callable
from uuid import uuid4

import httpx

BASE_URL = "http://upstream.test/api/v1/employee"
BASE_PATH = "/api/v1/employee"


def employee_json(
    name: str,
    salary: int = 50_000,
    *,
    id: str | None = None,
    age: int = 30,
    title: str = "Engineer",
    email: str | None = None,
) -> dict:
    """Employee as the upstream serializes it."""
    return {
        "id": id or str(uuid4()),
        "employee_name": name,
        "employee_salary": salary,
        "employee_age": age,
        "employee_title": title,
        "employee_email": email or f"{name.split()[0].lower()}@company.test",
    }


def envelope(
    data=None,
    *,
    status_code: int = 200,
    status: str = "Successfully processed request.",
    error: str | None = None,
) -> httpx.Response:
    """Upstream {data, status, error} response."""
    return httpx.Response(
        status_code, json={"data": data, "status": status, "error": error},
    )


def error_response(status_code: int, error: str | None = None) -> httpx.Response:
    """Non-2xx upstream response, optionally carrying an envelope error."""
    if error is None:
        return httpx.Response(status_code)
    return envelope(None, status_code=status_code, status="Failed", error=error)


class FakeUpstream:
    """Scripted upstream: queue responses, then inspect recorded requests."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._queue: list[httpx.Response | Exception | Callable] = []

    def queue(self, *responses) -> None:
        self._queue.extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._queue:
            raise AssertionError(
                f"Unexpected upstream call: {request.method} {request.url}",
            )
        entry = self._queue.pop(0)
        if isinstance(entry, Exception):
            raise entry
        if callable(entry):
            return entry(request)
        return entry

    @property
    def calls(self) -> list[tuple[str, str]]:
        """(method, raw path) for each recorded request, in order."""
        return [
            (r.method, r.url.raw_path.decode()) for r in self.requests
        ]

    def body(self, index: int) -> dict:
        return json.loads(self.requests[index].content)


class FakeClock:
    """Monotonic clock in seconds, advanced explicitly."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep stand-in: records requested delays, advances the clock."""

    def __init__(self, clock: FakeClock | None = None):
        self.delays: list[float] = []
        self._clock = clock

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self._clock is not None:
            self._clock.advance(seconds)

    @property
    def delays_ms(self) -> list[int]:
        return [round(d * 1000) for d in self.delays]
