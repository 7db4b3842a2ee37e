"""
Health check endpoints.

Used by load balancers, orchestrators, and monitoring systems
to verify service availability.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from voxel_avatars.config import get_settings
from voxel_avatars.models.traits import RawAttribute
from voxel_avatars.services.batch import build_avatar

router = APIRouter()

# Known-good input exercised by the readiness probe
_PROBE_ATTRIBUTES = [
    RawAttribute(name="Head Size", value=1.0),
    RawAttribute(name="Body Width", value=1.2),
    RawAttribute(name="Body Height", value=2.0),
    RawAttribute(name="Arm Length", value=1.2),
    RawAttribute(name="Leg Length", value=1.2),
    RawAttribute(name="Skin Color R", value=0.8),
    RawAttribute(name="Skin Color G", value=0.6),
    RawAttribute(name="Skin Color B", value=0.4),
    RawAttribute(name="Cloth Color R", value=0.2),
    RawAttribute(name="Cloth Color G", value=0.4),
    RawAttribute(name="Cloth Color B", value=0.8),
]


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    version: str
    checks: dict[str, str]


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """
    Health check.

    The service has no external dependencies; it verifies that the
    assembly pipeline produces geometry for a known-good trait set.
    """
    settings = get_settings()
    checks = {"pipeline": "healthy" if _pipeline_ok() else "unhealthy"}

    all_healthy = all(v == "healthy" for v in checks.values())

    return HealthStatus(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        checks=checks,
    )


@router.get("/health/live")
async def liveness():
    """
    Kubernetes liveness probe.

    Simple check that the service is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness():
    """
    Kubernetes readiness probe.
    """
    return {"status": "ready" if _pipeline_ok() else "not ready"}


def _pipeline_ok() -> bool:
    return len(build_avatar(_PROBE_ATTRIBUTES).parts) == 6
