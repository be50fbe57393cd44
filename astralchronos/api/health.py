"""
Health check and metrics endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse, PlainTextResponse

import structlog
from astralchronos import __version__
from astralchronos.config import Settings
from astralchronos.api.dependencies import get_app_settings, get_space_data_client
from astralchronos.clients.space_data import SpaceDataClient
from astralchronos.monitoring.health_checks import HealthChecker, HealthStatus, get_health_checker
from astralchronos.monitoring.metrics import get_metrics_collector

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])
metrics_router = APIRouter(tags=["health"])

SERVICE_NAME = "astralchronos"

# The page renders from fixtures alone, so only content is critical
CRITICAL_CHECKS = ['content']


def get_checker() -> HealthChecker:
    return get_health_checker()


@router.get("", summary="Basic health check", description="Quick health status check")
async def basic_health_check(checker: HealthChecker = Depends(get_checker)):
    """Basic health check endpoint for load balancers."""
    results = {}
    for check_name in CRITICAL_CHECKS:
        result = await checker.run_check(check_name)
        results[check_name] = result

        if result.status == HealthStatus.UNHEALTHY:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Critical component {check_name} is unhealthy: {result.message}"
            )

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": __version__,
        "checks": {name: result.to_dict() for name, result in results.items()}
    }


@router.get("/detailed", summary="Detailed health check", description="Comprehensive health status")
async def detailed_health_check(
    checker: HealthChecker = Depends(get_checker),
    settings: Settings = Depends(get_app_settings),
    space_client: SpaceDataClient = Depends(get_space_data_client),
):
    """Every registered check plus upstream retry counters; 503 only when something is unhealthy."""
    health_status = await checker.get_overall_health()
    health_status.update({
        "service": SERVICE_NAME,
        "version": __version__,
        "environment": settings.environment,
        "upstream_retries": space_client.retry_handler.get_stats(),
    })

    status_code = (
        status.HTTP_503_SERVICE_UNAVAILABLE
        if health_status['status'] == HealthStatus.UNHEALTHY.value
        else status.HTTP_200_OK
    )
    return JSONResponse(content=health_status, status_code=status_code)


@router.get("/live", summary="Liveness probe", description="Liveness probe endpoint")
async def liveness_probe():
    """Returns 200 if the application is running, regardless of dependencies."""
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME
    }


@router.get("/ready", summary="Readiness probe", description="Readiness probe endpoint")
async def readiness_probe(checker: HealthChecker = Depends(get_checker)):
    """Returns 200 only if the application is ready to serve traffic."""
    for check_name in CRITICAL_CHECKS:
        result = await checker.run_check(check_name)
        if result.status == HealthStatus.UNHEALTHY:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Not ready: {check_name} is unhealthy"
            )

    return {
        "status": "ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME
    }


@metrics_router.get("/metrics", summary="Prometheus metrics", description="Prometheus metrics endpoint")
async def metrics_endpoint():
    """Prometheus metrics endpoint."""
    metrics_collector = get_metrics_collector()
    return PlainTextResponse(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type()
    )
