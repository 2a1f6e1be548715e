# sample/adapters/api/health.py
import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from sample.adapters.health import HealthCheckService
from sample.shared.config import Settings
from sample.shared.container import Container

router = APIRouter(tags=["System"])
logger = structlog.get_logger(__name__)


@router.get("/live")
@inject
async def liveness_probe(settings: Settings = Depends(Provide[Container.settings])):
    """
    K8s Liveness Probe.
    Returns 200 OK if the process is running; no dependency is touched.
    """
    return {"status": "ok", "service": settings.APP_NAME}


@router.get("/ready")
@inject
async def readiness_probe(
    response: Response,
    health: HealthCheckService = Depends(Provide[Container.health_checks]),
):
    """
    K8s Readiness Probe.
    Checks the database (and Redis when configured); 503 when any is down.
    """
    checks = await health.check_all()
    is_healthy = all(state == "up" for state in checks.values())

    if not is_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("readiness_check_failed", checks=checks)

    return {"status": "ok" if is_healthy else "unavailable", "checks": checks}
