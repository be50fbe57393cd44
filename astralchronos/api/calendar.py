"""
Astronomical calendar endpoints.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from astralchronos.api.dependencies import get_calendar_service
from astralchronos.dates import shift_month
from astralchronos.models.schemas import CalendarMonth, DateSelection, DateSelectionRequest
from astralchronos.services.calendar import CalendarService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["calendar"])


@router.get(
    "/calendar-events",
    response_model=CalendarMonth,
    summary="Calendar month",
    description="Month grid starting on Sunday with the events of each day. Defaults to the current month; direction steps one month back or forward."
)
async def get_calendar_month(
    year: Optional[int] = Query(None, ge=1, le=9999, description="Year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (1-12)"),
    direction: Optional[str] = Query(None, description="'prev' or 'next' to move from year/month"),
    calendar: CalendarService = Depends(get_calendar_service),
):
    now = datetime.now(timezone.utc)
    year, month = year or now.year, month or now.month
    try:
        if direction:
            year, month = shift_month(year, month, direction)
        return await calendar.get_month(year, month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post(
    "/calendar/select",
    response_model=DateSelection,
    summary="Select a calendar date",
    description="Sends the selected date to the calendar workflow and returns the events for that day."
)
async def select_calendar_date(
    request: DateSelectionRequest,
    calendar: CalendarService = Depends(get_calendar_service),
):
    logger.debug(f"Calendar date selected: {request.date.isoformat()}")
    return await calendar.select_date(request.date)
