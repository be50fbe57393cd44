"""
Live space dashboard endpoints.

APOD and ISS keep their historical contract: the upstream payload on
success, HTTP 500 with a fallback payload on failure. The other feeds
always answer 200 with a FeedResult.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from astralchronos.api.dependencies import get_dashboard_service
from astralchronos.api.responses import FallbackErrorResponse
from astralchronos.models.schemas import DashboardSnapshot, FeedResult, MoonPhase
from astralchronos.services.dashboard import DashboardService

router = APIRouter(prefix="/api", tags=["dashboard"])


def _proxy_response(result: FeedResult, error: str):
    if result.fallback:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=FallbackErrorResponse(error=error, fallback=result.data).model_dump(),
        )
    return result.data


@router.get(
    "/nasa/apod",
    response_model=Dict[str, Any],
    summary="Astronomy Picture of the Day",
    responses={500: {"model": FallbackErrorResponse}},
)
async def get_apod(dashboard: DashboardService = Depends(get_dashboard_service)):
    return _proxy_response(await dashboard.get_apod(), "Failed to fetch NASA APOD")


@router.get(
    "/nasa/iss",
    response_model=Dict[str, Any],
    summary="ISS position",
    responses={500: {"model": FallbackErrorResponse}},
)
async def get_iss(dashboard: DashboardService = Depends(get_dashboard_service)):
    return _proxy_response(await dashboard.get_iss(), "Failed to fetch ISS location")


@router.get("/nasa/moon", response_model=MoonPhase, summary="Current moon phase")
async def get_moon(dashboard: DashboardService = Depends(get_dashboard_service)):
    return dashboard.get_moon()


@router.get("/nasa/astronauts", response_model=FeedResult, summary="People in space")
async def get_astronauts(dashboard: DashboardService = Depends(get_dashboard_service)):
    return await dashboard.get_astronauts()


@router.get("/nasa/sun", response_model=FeedResult, summary="Sun times for the observer")
async def get_sun(dashboard: DashboardService = Depends(get_dashboard_service)):
    return await dashboard.get_sun()


@router.get("/news", response_model=FeedResult, summary="Spaceflight news headlines")
async def get_news(
    limit: int = Query(3, ge=1, le=10, description="Number of headlines"),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    return await dashboard.get_news(limit=limit)


@router.get(
    "/dashboard",
    response_model=DashboardSnapshot,
    summary="Full dashboard",
    description="Every dashboard card at once, with fallbacks in place of failed feeds."
)
async def get_dashboard(dashboard: DashboardService = Depends(get_dashboard_service)):
    return await dashboard.snapshot()
