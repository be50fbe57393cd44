"""
Server-rendered home page and the API index.
"""
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from astralchronos import __version__
from astralchronos.api.dependencies import (
    get_calendar_service,
    get_content,
    get_dashboard_service,
    get_history_service,
)
from astralchronos.content.repository import ContentRepository
from astralchronos.dates import month_day_key
from astralchronos.models.schemas import AstronautRoster
from astralchronos.services.astronomy import truncate_text
from astralchronos.services.calendar import CalendarService
from astralchronos.services.chatbot import GREETING
from astralchronos.services.dashboard import DashboardService
from astralchronos.services.history import HistoryService

PACKAGE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["truncate_text"] = truncate_text

NAVIGATION = [
    ("Home", "#home"),
    ("Timeline", "#timeline"),
    ("Calendar", "#calendar"),
    ("Tourism", "#tourism"),
    ("Dashboard", "#dashboard"),
    ("Quiz", "#quiz"),
]

API_ENDPOINTS = {
    "today": "/api/space-events/today",
    "timeline": "/api/space-timeline",
    "calendar": "/api/calendar-events",
    "calendar_select": "/api/calendar/select",
    "planets": "/api/planets",
    "trip_plan": "/api/tourism/trip-plan",
    "apod": "/api/nasa/apod",
    "iss": "/api/nasa/iss",
    "moon": "/api/nasa/moon",
    "astronauts": "/api/nasa/astronauts",
    "sun": "/api/nasa/sun",
    "news": "/api/news",
    "dashboard": "/api/dashboard",
    "quiz_data": "/api/quiz-data",
    "quiz": "/api/quiz/{quiz_id}",
    "quiz_score": "/api/quiz/{quiz_id}/score",
    "learning": "/api/learning/{topic}",
    "chatbot": "/api/chatbot",
    "page_load": "/api/webhook/send",
    "health": "/health",
    "metrics": "/metrics",
}

router = APIRouter(tags=["site"])


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home(
    request: Request,
    background_tasks: BackgroundTasks,
    content: ContentRepository = Depends(get_content),
    history: HistoryService = Depends(get_history_service),
    calendar: CalendarService = Depends(get_calendar_service),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """Render every section of the home page."""
    now = datetime.now(timezone.utc)
    today = now.date()

    today_event = history.get_today(today)
    background_tasks.add_task(history.notify_page_opened, today)

    snapshot = await dashboard.snapshot(today)
    roster = AstronautRoster.model_validate(snapshot.astronauts.data)

    context = {
        "navigation": NAVIGATION,
        "today": today,
        "month_day": month_day_key(today),
        "today_event": today_event,
        "timeline": content.get_timeline(),
        "calendar": await calendar.get_month(today.year, today.month),
        "planets": content.list_planets(),
        "dashboard": snapshot,
        "iss_crew": roster.on_craft("ISS"),
        "quiz_data": content.get_quiz_data(),
        "greeting": GREETING,
        "year": today.year,
    }
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/api", summary="API index", description="Lists the JSON endpoints")
async def api_index():
    return {
        "message": "AstralChronos API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": API_ENDPOINTS,
    }
