"""
Astronomical calendar: month grids and date selection.

Events come from the calendar webhook when it answers with a
`calendar_events` map, otherwise from the packaged fixture.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from astralchronos.cache.cache_manager import CacheManager
from astralchronos.clients.webhooks import N8nWebhookClient, WebhookError
from astralchronos.config import Settings
from astralchronos.content.repository import ContentRepository
from astralchronos.dates import MONTH_NAMES, WEEKDAYS, build_month_grid, epoch_millis, month_day_key
from astralchronos.logging_config import get_logger
from astralchronos.models.schemas import (
    CalendarDay,
    CalendarEvent,
    CalendarMonth,
    DataSource,
    DateSelection,
)

logger = get_logger(__name__, component="calendar")

EventMap = Dict[str, List[CalendarEvent]]


def selection_payload(day: date, timestamp: Optional[int] = None) -> Dict[str, Any]:
    """Body sent to the calendar webhook for a month view or a clicked date."""
    return {
        "selected_date": day.isoformat(),
        "month": day.month,
        "year": day.year,
        "day": day.day,
        "timestamp": timestamp if timestamp is not None else epoch_millis(),
        "request_type": "calendar_selection",
    }


def parse_event_map(raw: Any) -> Optional[EventMap]:
    """Validate a webhook `calendar_events` map, None when unusable."""
    if not isinstance(raw, dict):
        return None

    events: EventMap = {}
    for key, items in raw.items():
        if not isinstance(items, list):
            continue
        parsed = []
        for item in items:
            try:
                parsed.append(CalendarEvent.model_validate(item))
            except ValidationError:
                logger.debug("Skipping malformed calendar event", month_day=key)
        if parsed:
            events[str(key)] = parsed
    return events


class CalendarService:
    """Builds calendar months and resolves date selections."""

    def __init__(
        self,
        repository: ContentRepository,
        webhooks: N8nWebhookClient,
        cache: CacheManager,
        settings: Settings,
    ):
        self.repository = repository
        self.webhooks = webhooks
        self.cache = cache
        self.settings = settings

    async def _webhook_events(self, day: date, use_cache: bool = True) -> Optional[EventMap]:
        url = self.settings.calendar_webhook
        if not url:
            return None

        if use_cache:
            cached = self.cache.get_calendar_events(day.year, day.month)
            if cached is not None:
                return parse_event_map(cached)

        try:
            reply = await self.webhooks.post(url, selection_payload(day), name="calendar")
        except WebhookError as e:
            logger.warning("Calendar webhook unavailable", error=str(e))
            return None

        if not reply.ok or not isinstance(reply.data, dict):
            return None

        events = parse_event_map(reply.data.get('calendar_events'))
        if events is None:
            return None

        self.cache.set_calendar_events(
            day.year,
            day.month,
            {key: [event.model_dump() for event in items] for key, items in events.items()},
        )
        return events

    async def _events_for(self, day: date, use_cache: bool = True) -> Tuple[EventMap, DataSource]:
        events = await self._webhook_events(day, use_cache=use_cache)
        if events is not None:
            return events, DataSource.WEBHOOK
        return self.repository.get_calendar_events(), DataSource.STATIC

    async def get_month(self, year: int, month: int) -> CalendarMonth:
        """
        Month view with events attached to each day.

        Raises:
            ValueError: If month is not between 1 and 12
        """
        cells = build_month_grid(year, month)
        events, source = await self._events_for(date(year, month, 1))

        days = []
        for cell in cells:
            if cell is None:
                days.append(CalendarDay())
                continue
            day_events = events.get(month_day_key(cell), [])
            days.append(CalendarDay(
                date=cell,
                day=cell.day,
                has_event=bool(day_events),
                events=day_events,
            ))

        return CalendarMonth(
            year=year,
            month=month,
            month_name=MONTH_NAMES[month - 1],
            weekdays=list(WEEKDAYS),
            days=days,
            source=source,
        )

    async def select_date(self, day: date) -> DateSelection:
        """Notify the calendar workflow of a clicked date and return its events."""
        events, source = await self._events_for(day, use_cache=False)
        key = month_day_key(day)
        return DateSelection(date=day, month_day=key, events=events.get(key, []), source=source)
