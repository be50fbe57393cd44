"""
Client for the n8n workflow webhooks.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from astralchronos.clients.base import HTTPClient, UpstreamError
from astralchronos.logging_config import TimedOperation, get_logger
from astralchronos.monitoring.metrics import get_metrics_collector

logger = get_logger(__name__, component="webhooks")


class WebhookError(UpstreamError):
    """Raised when a webhook cannot be reached."""
    pass


@dataclass
class WebhookReply:
    """Raw webhook reply with the body parsed as JSON where possible."""
    status: int
    body: str
    data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class N8nWebhookClient(HTTPClient):
    """Posts JSON payloads to n8n webhooks."""

    async def post(self, url: str, payload: Dict[str, Any], name: str = "webhook") -> WebhookReply:
        """
        POST a payload to a webhook.

        Args:
            url: Webhook URL
            payload: JSON body
            name: Short webhook name for logs and metrics

        Returns:
            WebhookReply, whatever the HTTP status

        Raises:
            WebhookError: If the webhook cannot be reached
        """
        metrics = get_metrics_collector()
        try:
            with TimedOperation(logger, f"{name} webhook call", webhook=name):
                status, body = await self._post_json(url, payload)
        except UpstreamError as e:
            metrics.record_webhook_call(name, 'error')
            raise WebhookError(str(e))

        metrics.record_webhook_call(name, 'success' if 200 <= status < 300 else f'http_{status}')

        data = None
        if body:
            try:
                data = json.loads(body)
            except json.JSONDecodeError:
                data = None

        return WebhookReply(status=status, body=body, data=data)

    async def fire_and_forget(self, url: str, payload: Dict[str, Any], name: str = "webhook") -> None:
        """POST a payload and only log the outcome."""
        try:
            reply = await self.post(url, payload, name=name)
            logger.info(f"{name} webhook sent", status=reply.status, date=payload.get('date'))
        except WebhookError as e:
            logger.warning(f"{name} webhook failed", error=str(e), date=payload.get('date'))
