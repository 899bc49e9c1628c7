"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if database is unreachable (readiness)
    - The enhanced service is never probed here: it is optional, and a remote
      outage must not pull the core instance out of rotation
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from tms_core.config import Settings, get_settings
import tms_core.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "tms-core",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(settings: Settings = Depends(get_settings)):
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {
        "status": "ready",
        "checks": {"database": "healthy"},
        "enhanced_service": (
            "configured" if settings.enhanced_service_url else "not_configured"
        ),
    }
