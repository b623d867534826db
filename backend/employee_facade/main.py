"""Employee Facade API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map EmployeeFacadeError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - One EmployeeApiClient (and so one rate limiter) per process, created in lifespan
      and closed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Service stored on app.state and resolved per request through a dependency,
      so tests swap it without touching module globals
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from employee_facade import __version__
from employee_facade.api.error_handlers import register_error_handlers
from employee_facade.api.routes import employees, health
from employee_facade.config import get_settings
from employee_facade.infrastructure.employee_api_client import EmployeeApiClient
from employee_facade.infrastructure.observability import setup_logging
from employee_facade.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    client = EmployeeApiClient.from_settings(settings)
    app.state.employee_service = EmployeeService(client)
    logger.info(
        f"Employee facade started (upstream {settings.employee_api_base_url})",
    )
    yield
    await client.aclose()
    logger.info("Employee facade shutting down")


app = FastAPI(
    title="Employee Facade API", version=__version__, lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(employees.router)

register_error_handlers(app)
