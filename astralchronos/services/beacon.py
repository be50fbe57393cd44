"""
Page load beacon forwarding.
"""

from astralchronos.clients.webhooks import N8nWebhookClient, WebhookError
from astralchronos.config import Settings
from astralchronos.logging_config import get_logger
from astralchronos.models.schemas import PageLoadEvent, WebhookAck

logger = get_logger(__name__, component="beacon")


class PageLoadBeacon:
    """Forwards page load events to the page load webhook."""

    def __init__(self, webhooks: N8nWebhookClient, settings: Settings):
        self.webhooks = webhooks
        self.settings = settings

    async def send(self, event: PageLoadEvent) -> WebhookAck:
        """Forward the event; the outcome is reported, never raised."""
        url = self.settings.page_load_webhook
        if not url:
            return WebhookAck(status="skipped", date=event.date)

        try:
            reply = await self.webhooks.post(url, event.model_dump(exclude_none=True), name="page_load")
        except WebhookError as e:
            logger.warning("Page load webhook unreachable", error=str(e), date=event.date)
            return WebhookAck(status="failed", date=event.date)

        if not reply.ok:
            logger.warning("Page load webhook rejected event", status=reply.status, date=event.date)
            return WebhookAck(status="failed", date=event.date)

        return WebhookAck(status="sent", date=event.date)
