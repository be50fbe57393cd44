"""
Unit tests for the n8n webhook client.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import aiohttp

from astralchronos.clients.webhooks import N8nWebhookClient, WebhookError

WEBHOOK_URL = "https://example.n8n.cloud/webhook/test"


def _response(status=200, text=""):
    response = Mock()
    response.status = status
    response.text = AsyncMock(return_value=text)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


class TestN8nWebhookClient:
    """Test cases for N8nWebhookClient."""

    @pytest.fixture
    def session(self):
        session = Mock()
        session.closed = False
        return session

    @pytest.fixture
    def webhooks(self, session):
        return N8nWebhookClient(session=session)

    @pytest.mark.asyncio
    async def test_post_parses_json(self, webhooks, session):
        session.post.return_value = _response(text='{"text": "Hello from n8n"}')

        reply = await webhooks.post(WEBHOOK_URL, {"message": "hi"}, name="chatbot")

        assert reply.ok
        assert reply.data == {"text": "Hello from n8n"}
        session.post.assert_called_once_with(WEBHOOK_URL, json={"message": "hi"})

    @pytest.mark.asyncio
    async def test_post_keeps_raw_text(self, webhooks, session):
        session.post.return_value = _response(text="plain answer")

        reply = await webhooks.post(WEBHOOK_URL, {"message": "hi"})

        assert reply.body == "plain answer"
        assert reply.data is None

    @pytest.mark.asyncio
    async def test_non_2xx_is_returned(self, webhooks, session):
        session.post.return_value = _response(status=500, text="workflow error")

        reply = await webhooks.post(WEBHOOK_URL, {})

        assert not reply.ok
        assert reply.status == 500

    @pytest.mark.asyncio
    async def test_unreachable_raises(self, webhooks, session):
        session.post.side_effect = aiohttp.ClientConnectionError("refused")

        with pytest.raises(WebhookError):
            await webhooks.post(WEBHOOK_URL, {})

    @pytest.mark.asyncio
    async def test_calls_are_counted(self, webhooks, session):
        session.post.return_value = _response(status=404)

        with patch('astralchronos.clients.webhooks.get_metrics_collector') as mock_metrics:
            await webhooks.post(WEBHOOK_URL, {}, name="tourism")

        mock_metrics.return_value.record_webhook_call.assert_called_once_with("tourism", "http_404")

    @pytest.mark.asyncio
    async def test_fire_and_forget_swallows_failures(self, webhooks, session):
        session.post.side_effect = aiohttp.ClientConnectionError("refused")

        await webhooks.fire_and_forget(WEBHOOK_URL, {"date": "2024-07-20"}, name="history")

        assert session.post.call_count == 1


class TestUndecodableReplies:
    """Replies whose bytes are not valid UTF-8, served by a local aiohttp server."""

    @pytest.mark.asyncio
    async def test_post_replaces_bad_bytes(self, bad_utf8_url):
        webhooks = N8nWebhookClient()
        try:
            reply = await webhooks.post(bad_utf8_url, {"message": "hi"}, name="chatbot")
        finally:
            await webhooks.close_session()

        assert reply.status == 200
        assert "\ufffd" in reply.body
        assert reply.data["text"].endswith(" bad")

    @pytest.mark.asyncio
    async def test_fire_and_forget_completes(self, bad_utf8_url):
        webhooks = N8nWebhookClient()
        try:
            with patch('astralchronos.clients.webhooks.get_metrics_collector') as mock_metrics:
                await webhooks.fire_and_forget(bad_utf8_url, {"date": "2024-07-20"}, name="history")
        finally:
            await webhooks.close_session()

        mock_metrics.return_value.record_webhook_call.assert_called_once_with("history", "success")
