"""
Space assistant chatbot backed by an n8n workflow.
"""

import json
from typing import Optional

from astralchronos.clients.webhooks import N8nWebhookClient, WebhookError
from astralchronos.config import Settings
from astralchronos.logging_config import get_logger
from astralchronos.models.schemas import ChatResponse, DataSource

logger = get_logger(__name__, component="chatbot")

GREETING = (
    "Hello! I'm your space assistant. Ask me anything about space exploration, "
    "astronomy, or the cosmos!"
)

UNAVAILABLE_REPLY = (
    "I'm here to help with space questions! Unfortunately, my AI connection is currently "
    "unavailable, but I'd love to chat about space exploration, planets, or astronomy."
)

TECHNICAL_DIFFICULTIES_REPLY = "I'm experiencing some technical difficulties. Please try again later!"


class ChatbotUnavailableError(Exception):
    """Raised when the chatbot webhook cannot be reached."""
    pass


def extract_reply(body: str) -> Optional[str]:
    """
    Pull the reply text out of a webhook body.

    JSON objects answer with `text` or `response`; anything else is used raw.
    """
    reply = body
    try:
        parsed = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        parsed = None

    if isinstance(parsed, dict):
        if parsed.get('text'):
            reply = parsed['text']
        elif parsed.get('response'):
            reply = parsed['response']

    if not isinstance(reply, str):
        reply = json.dumps(reply)
    reply = reply.strip()
    return reply or None


class ChatService:
    """Relays visitor messages to the chatbot workflow."""

    def __init__(self, webhooks: N8nWebhookClient, settings: Settings):
        self.webhooks = webhooks
        self.settings = settings

    async def reply(self, message: str) -> ChatResponse:
        url = self.settings.chatbot_webhook
        if not url:
            return ChatResponse(response=UNAVAILABLE_REPLY, source=DataSource.STATIC)

        try:
            webhook_reply = await self.webhooks.post(url, {"message": message}, name="chatbot")
        except WebhookError as e:
            logger.error("Chatbot webhook unreachable", error=str(e))
            raise ChatbotUnavailableError(str(e)) from e

        if not webhook_reply.ok:
            logger.warning("Chatbot webhook returned an error", status=webhook_reply.status)
            return ChatResponse(response=UNAVAILABLE_REPLY, source=DataSource.FALLBACK)

        text = extract_reply(webhook_reply.body)
        if text is None:
            return ChatResponse(response=UNAVAILABLE_REPLY, source=DataSource.FALLBACK)
        return ChatResponse(response=text, source=DataSource.WEBHOOK)
