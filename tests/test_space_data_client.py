"""
Unit tests for the public space API client.
"""
import asyncio
import json
import pytest
from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp

from astralchronos.clients.base import UpstreamError
from astralchronos.clients.retry_handler import RetryConfig, RetryHandler
from astralchronos.clients.space_data import SpaceDataClient
from astralchronos.services.dashboard import FALLBACK_ISS, DashboardService


def _response(status=200, payload=None, text=None):
    """Async context manager standing in for an aiohttp response."""
    response = Mock()
    response.status = status
    response.text = AsyncMock(return_value=text if text is not None else json.dumps(payload))
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


class TestSpaceDataClient:
    """Test cases for SpaceDataClient."""

    @pytest.fixture
    def session(self):
        session = Mock()
        session.closed = False
        return session

    @pytest.fixture
    def space_client(self, session):
        return SpaceDataClient(
            api_key="TEST_KEY",
            retry_handler=RetryHandler(RetryConfig(max_retries=1, base_delay=0, jitter=False)),
            session=session,
        )

    @pytest.mark.asyncio
    async def test_get_apod(self, space_client, session):
        session.get.return_value = _response(payload={
            "title": "Pillars",
            "explanation": "Star formation.",
            "url": "https://apod.nasa.gov/pillars.jpg",
            "media_type": "image",
            "service_version": "v1",
        })

        apod = await space_client.get_apod()

        assert apod.title == "Pillars"
        assert apod.model_dump()["service_version"] == "v1"
        session.get.assert_called_once_with(SpaceDataClient.NASA_APOD_URL, params={'api_key': 'TEST_KEY'})

    @pytest.mark.asyncio
    async def test_get_iss_position(self, space_client, session):
        session.get.return_value = _response(payload={
            "message": "success",
            "timestamp": 1700000000,
            "iss_position": {"latitude": "-12.5", "longitude": "101.25"},
        })

        position = await space_client.get_iss_position()

        assert position.latitude == "-12.5"
        assert position.longitude == "101.25"
        assert position.speed == "27,600"
        assert position.timestamp == 1700000000

    @pytest.mark.asyncio
    async def test_iss_payload_without_position(self, space_client, session):
        session.get.return_value = _response(payload={"message": "success"})

        with pytest.raises(UpstreamError, match="Unexpected ISS payload"):
            await space_client.get_iss_position()

    @pytest.mark.asyncio
    async def test_get_astronauts(self, space_client, session):
        session.get.return_value = _response(payload={
            "number": 2,
            "people": [{"name": "A", "craft": "ISS"}, {"name": "B", "craft": "Tiangong"}],
        })

        roster = await space_client.get_astronauts()

        assert roster.number == 2
        assert [p.name for p in roster.on_craft("iss")] == ["A"]

    @pytest.mark.asyncio
    async def test_get_sun_times(self, space_client, session):
        session.get.return_value = _response(payload={
            "status": "OK",
            "results": {
                "sunrise": "2024-01-15T11:58:00+00:00",
                "sunset": "2024-01-15T22:41:00+00:00",
                "solar_noon": "2024-01-15T17:19:30+00:00",
                "day_length": 38580,
            },
        })

        sun = await space_client.get_sun_times(28.5, -80.6)

        assert sun.day_length == 38580
        assert sun.latitude == 28.5

    @pytest.mark.asyncio
    async def test_sun_times_invalid_request(self, space_client, session):
        session.get.return_value = _response(payload={"status": "INVALID_REQUEST", "results": ""})

        with pytest.raises(UpstreamError, match="INVALID_REQUEST"):
            await space_client.get_sun_times(999, 999)

    @pytest.mark.asyncio
    async def test_get_news_skips_untitled(self, space_client, session):
        session.get.return_value = _response(payload={"results": [
            {"title": "Launch", "url": "https://example.com/1", "published_at": "2024-01-15T10:00:00Z"},
            {"title": "", "url": "https://example.com/2"},
        ]})

        articles = await space_client.get_news(limit=3)

        assert [a.title for a in articles] == ["Launch"]
        session.get.assert_called_once_with(
            SpaceDataClient.NEWS_URL, params={'limit': 3, 'ordering': '-published_at'}
        )

    @pytest.mark.asyncio
    async def test_server_error_is_retried(self, space_client, session):
        session.get.side_effect = [
            _response(status=503, text="busy"),
            _response(payload={"number": 0, "people": []}),
        ]

        roster = await space_client.get_astronauts()

        assert roster.number == 0
        assert session.get.call_count == 2

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self, space_client, session):
        session.get.return_value = _response(status=403, text="forbidden")

        with pytest.raises(UpstreamError) as exc_info:
            await space_client.get_apod()

        assert exc_info.value.status_code == 403
        assert session.get.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_json(self, space_client, session):
        session.get.return_value = _response(text="<html>down</html>")

        with pytest.raises(UpstreamError, match="Invalid JSON"):
            await space_client.get_apod()

    @pytest.mark.asyncio
    async def test_network_error(self, space_client, session):
        session.get.side_effect = aiohttp.ClientConnectionError("refused")

        with pytest.raises(UpstreamError, match="Network error"):
            await space_client.get_astronauts()

        assert session.get.call_count == 2

    @pytest.mark.asyncio
    async def test_timeout(self, space_client, session):
        session.get.side_effect = asyncio.TimeoutError()

        with pytest.raises(UpstreamError, match="Timeout"):
            await space_client.get_iss_position()

    @pytest.mark.asyncio
    async def test_external_session_not_closed(self, space_client, session):
        session.close = AsyncMock()

        await space_client.close_session()

        session.close.assert_not_called()

    @pytest.mark.asyncio
    async def test_news_item_not_an_object(self, space_client, session):
        session.get.return_value = _response(payload={"results": ["just a headline"]})

        with pytest.raises(UpstreamError, match="Unexpected news payload"):
            await space_client.get_news()

    @pytest.mark.asyncio
    async def test_sun_results_not_an_object(self, space_client, session):
        session.get.return_value = _response(payload={"status": "OK", "results": "x"})

        with pytest.raises(UpstreamError, match="Unexpected sun times payload"):
            await space_client.get_sun_times(28.5729, -80.649)

    @pytest.mark.asyncio
    async def test_astronaut_count_not_a_number(self, space_client, session):
        session.get.return_value = _response(payload={"number": "many", "people": []})

        with pytest.raises(UpstreamError, match="Unexpected astronaut payload"):
            await space_client.get_astronauts()

    @pytest.mark.asyncio
    async def test_astronaut_without_craft(self, space_client, session):
        session.get.return_value = _response(payload={"number": 1, "people": [{"name": "Ada"}]})

        with pytest.raises(UpstreamError, match="Unexpected astronaut payload"):
            await space_client.get_astronauts()


class TestUndecodableFeeds:
    """Feed bodies that are not valid UTF-8, served by a local aiohttp server."""

    @pytest.fixture
    def space_client(self, bad_utf8_url):
        client = SpaceDataClient(retry_handler=RetryHandler(RetryConfig(max_retries=0)))
        client.ISS_LOCATION_URL = bad_utf8_url
        return client

    @pytest.mark.asyncio
    async def test_undecodable_body_is_upstream_error(self, space_client):
        try:
            with pytest.raises(UpstreamError, match="Undecodable"):
                await space_client.get_iss_position()
        finally:
            await space_client.close_session()

    @pytest.mark.asyncio
    async def test_dashboard_falls_back(self, space_client, cache, settings):
        dashboard = DashboardService(space_client, cache, settings)
        try:
            result = await dashboard.get_iss()
        finally:
            await space_client.close_session()

        assert result.fallback is True
        assert result.data == FALLBACK_ISS
