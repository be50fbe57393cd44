"""
Space history endpoints: today's event and the timeline.
"""
from datetime import date as Date, datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from astralchronos.api.dependencies import get_content, get_history_service
from astralchronos.content.repository import ContentRepository
from astralchronos.models.schemas import SpaceEvent, TimelineEvent
from astralchronos.services.history import HistoryService

router = APIRouter(prefix="/api", tags=["events"])


@router.get(
    "/space-events/today",
    response_model=SpaceEvent,
    summary="Today in space history",
    description="The event for today's month-day, or a generic invitation to explore when there is none."
)
async def get_today_event(
    background_tasks: BackgroundTasks,
    day: Optional[Date] = Query(None, alias="date", description="Override today's date (YYYY-MM-DD)"),
    history: HistoryService = Depends(get_history_service),
):
    """Return today's event and notify the history workflow in the background."""
    today = day or datetime.now(timezone.utc).date()
    event = history.get_today(today)
    background_tasks.add_task(history.notify_page_opened, today)
    return event


@router.get(
    "/space-timeline",
    response_model=List[TimelineEvent],
    summary="Space exploration timeline",
    description="Milestones of space exploration ordered by year."
)
async def get_timeline(content: ContentRepository = Depends(get_content)):
    return content.get_timeline()
