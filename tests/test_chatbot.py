"""
Tests for the space assistant chatbot.
"""
import pytest
from dataclasses import replace
from unittest.mock import AsyncMock

from astralchronos.clients.webhooks import N8nWebhookClient, WebhookError, WebhookReply
from astralchronos.models.schemas import DataSource
from astralchronos.services.chatbot import (
    UNAVAILABLE_REPLY,
    ChatbotUnavailableError,
    ChatService,
    extract_reply,
)

CHATBOT_URL = "https://example.n8n.cloud/webhook/chatbot"


class TestExtractReply:
    """Test reply extraction from webhook bodies."""

    def test_text_field(self):
        assert extract_reply('{"text": "Mars has two moons."}') == "Mars has two moons."

    def test_response_field(self):
        assert extract_reply('{"response": "Saturn has rings."}') == "Saturn has rings."

    def test_text_wins_over_response(self):
        assert extract_reply('{"text": "A", "response": "B"}') == "A"

    def test_raw_text(self):
        assert extract_reply("  Just a sentence.  ") == "Just a sentence."

    def test_object_without_reply_is_serialized(self):
        assert extract_reply('{"output": 1}') == '{"output": 1}'

    def test_empty_body(self):
        assert extract_reply("") is None
        assert extract_reply("   ") is None


class TestChatService:
    """Test chat relaying."""

    @pytest.mark.asyncio
    async def test_unconfigured_webhook(self, webhook_client, settings):
        service = ChatService(webhook_client, settings)

        reply = await service.reply("Hello")

        assert reply.response == UNAVAILABLE_REPLY
        assert reply.source == DataSource.STATIC
        webhook_client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_webhook_reply(self, webhook_client, settings):
        webhook_client.post.return_value = WebhookReply(
            status=200, body='{"text": "Jupiter is the largest planet."}', data=None
        )
        service = ChatService(webhook_client, replace(settings, chatbot_webhook=CHATBOT_URL))

        reply = await service.reply("Largest planet?")

        assert reply.response == "Jupiter is the largest planet."
        assert reply.source == DataSource.WEBHOOK
        webhook_client.post.assert_awaited_once_with(
            CHATBOT_URL, {"message": "Largest planet?"}, name="chatbot"
        )

    @pytest.mark.asyncio
    async def test_webhook_error_status(self, webhook_client, settings):
        webhook_client.post.return_value = WebhookReply(status=502, body='bad gateway', data=None)
        service = ChatService(webhook_client, replace(settings, chatbot_webhook=CHATBOT_URL))

        reply = await service.reply("Hi")

        assert reply.response == UNAVAILABLE_REPLY
        assert reply.source == DataSource.FALLBACK

    @pytest.mark.asyncio
    async def test_empty_webhook_body(self, webhook_client, settings):
        webhook_client.post.return_value = WebhookReply(status=200, body='', data=None)
        service = ChatService(webhook_client, replace(settings, chatbot_webhook=CHATBOT_URL))

        reply = await service.reply("Hi")

        assert reply.source == DataSource.FALLBACK

    @pytest.mark.asyncio
    async def test_unreachable_webhook(self, webhook_client, settings):
        webhook_client.post = AsyncMock(side_effect=WebhookError("refused"))
        service = ChatService(webhook_client, replace(settings, chatbot_webhook=CHATBOT_URL))

        with pytest.raises(ChatbotUnavailableError):
            await service.reply("Hi")

    @pytest.mark.asyncio
    async def test_undecodable_webhook_reply(self, settings, bad_utf8_url):
        webhooks = N8nWebhookClient()
        service = ChatService(webhooks, replace(settings, chatbot_webhook=bad_utf8_url))
        try:
            reply = await service.reply("Hi")
        finally:
            await webhooks.close_session()

        assert reply.source == DataSource.WEBHOOK
        assert reply.response == "\ufffd\ufffd bad"
