"""
Solar tourism endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from astralchronos.api.dependencies import get_content, get_trip_planner
from astralchronos.content.repository import ContentRepository
from astralchronos.models.schemas import Planet, TripPlan, TripPlanRequest
from astralchronos.services.tourism import PlanetNotFoundError, TripPlanError, TripPlanner

router = APIRouter(prefix="/api", tags=["tourism"])


@router.get(
    "/planets",
    response_model=List[Planet],
    summary="Tourism destinations",
    description="Planets and moons available for trip planning."
)
async def list_planets(content: ContentRepository = Depends(get_content)):
    return content.list_planets()


@router.post(
    "/tourism/trip-plan",
    response_model=TripPlan,
    summary="Generate a trip plan",
    description="Builds a trip plan from the tourism workflow, or from the planet record when none is configured."
)
async def generate_trip_plan(
    request: TripPlanRequest,
    planner: TripPlanner = Depends(get_trip_planner),
):
    try:
        return await planner.generate(request.planet)
    except PlanetNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except TripPlanError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
