"""Health Probe — liveness endpoint for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up
    - Never calls upstream: a slow employee API must not fail liveness
"""

from fastapi import APIRouter, status

from employee_facade import __version__
from employee_facade.config import get_settings

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "employee-facade",
        "version": __version__,
        "upstream": get_settings().employee_api_base_url,
    }
