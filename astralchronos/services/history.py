"""
"Today in space history" for the hero banner.
"""

from datetime import date
from typing import Any, Dict, Optional

from astralchronos.clients.webhooks import N8nWebhookClient
from astralchronos.config import Settings
from astralchronos.content.repository import ContentRepository
from astralchronos.dates import epoch_millis, month_day_key
from astralchronos.logging_config import get_logger
from astralchronos.models.schemas import SpaceEvent

logger = get_logger(__name__, component="history")


def history_payload(today: date, timestamp: Optional[int] = None) -> Dict[str, Any]:
    """Body sent to the space history webhook when the page opens."""
    return {
        "date": today.isoformat(),
        "monthDay": month_day_key(today),
        "timestamp": timestamp if timestamp is not None else epoch_millis(),
        "request_type": "space_history",
        "page_load": True,
        "user_action": "page_opened",
    }


class HistoryService:
    """Serves the hero event and notifies the history workflow."""

    def __init__(self, repository: ContentRepository, webhooks: N8nWebhookClient, settings: Settings):
        self.repository = repository
        self.webhooks = webhooks
        self.settings = settings

    def get_today(self, today: date) -> SpaceEvent:
        event = self.repository.get_today_event(today)
        logger.debug("Hero event resolved", month_day=month_day_key(today), title=event.title)
        return event

    async def notify_page_opened(self, today: date) -> None:
        """
        Tell the history workflow the page was opened.

        Meant to run as a background task; failures are logged and dropped.
        """
        url = self.settings.history_webhook
        if not url:
            logger.debug("History webhook not configured, skipping")
            return
        await self.webhooks.fire_and_forget(url, history_payload(today), name="history")
