# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

import logging
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from app.dependencies import SupabaseDep

logger = logging.getLogger(__name__)

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str
    image_bucket: str
    array_functions: bool


class ChecksResponse(BaseModel):
    """Individual service checks."""
    business_table: str
    profiles_table: str
    image_bucket: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
        image_bucket=settings.IMAGE_BUCKET,
        array_functions=settings.USE_ARRAY_FUNCTIONS,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(client: SupabaseDep):
    """
    Readiness check endpoint.

    Queries both tables and the image bucket. Any failing check marks the
    service "degraded"; failures are logged, never returned.
    """
    checks = {
        "business_table": lambda: client.table(settings.BUSINESS_TABLE).select("id").limit(1).execute(),
        "profiles_table": lambda: client.table(settings.PROFILES_TABLE).select("user_id").limit(1).execute(),
        "image_bucket": lambda: client.storage.get_bucket(settings.IMAGE_BUCKET),
    }

    results = {}
    for name, check in checks.items():
        try:
            check()
            results[name] = "healthy"
        except Exception as e:
            logger.warning(f"Readiness: {name} check failed: {e}")
            results[name] = "unhealthy"

    all_healthy = all(result == "healthy" for result in results.values())

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=ChecksResponse(**results),
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
