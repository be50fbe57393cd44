"""
Tests for the dashboard service fallbacks and caching.
"""
import pytest
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

from astralchronos.clients.base import UpstreamError
from astralchronos.models.schemas import DataSource
from astralchronos.services.dashboard import (
    FALLBACK_APOD,
    FALLBACK_ISS,
    FALLBACK_NEWS,
    DashboardService,
)


@pytest.fixture
def dashboard(space_client, cache, settings):
    return DashboardService(space_client, cache, settings)


class TestDashboardFeeds:
    """Test individual feeds."""

    @pytest.mark.asyncio
    async def test_apod_success_is_cached(self, dashboard, cache):
        result = await dashboard.get_apod()

        assert result.fallback is False
        assert result.source == DataSource.UPSTREAM
        assert result.data["title"] == "The Horsehead Nebula"
        cache.set_feed.assert_called_once_with('apod', result.data)

    @pytest.mark.asyncio
    async def test_apod_fallback(self, dashboard, space_client, cache):
        space_client.get_apod = AsyncMock(side_effect=UpstreamError("HTTP 503"))

        result = await dashboard.get_apod()

        assert result.fallback is True
        assert result.source == DataSource.FALLBACK
        assert result.data == FALLBACK_APOD
        assert result.error == "HTTP 503"
        cache.set_feed.assert_not_called()

    @pytest.mark.asyncio
    async def test_cached_payload_skips_upstream(self, dashboard, space_client, cache):
        cache.get_feed.return_value = {"latitude": "1.0", "longitude": "2.0", "speed": "27,600"}

        result = await dashboard.get_iss()

        assert result.data["latitude"] == "1.0"
        space_client.get_iss_position.assert_not_called()

    @pytest.mark.asyncio
    async def test_iss_fallback(self, dashboard, space_client):
        space_client.get_iss_position = AsyncMock(side_effect=UpstreamError("Timeout"))

        result = await dashboard.get_iss()

        assert result.data == FALLBACK_ISS
        assert result.data["speed"] == "27,600"

    @pytest.mark.asyncio
    async def test_astronaut_fallback_is_empty(self, dashboard, space_client):
        space_client.get_astronauts = AsyncMock(side_effect=UpstreamError("down"))

        result = await dashboard.get_astronauts()

        assert result.data == {"number": 0, "people": []}

    @pytest.mark.asyncio
    async def test_sun_uses_observer_location(self, dashboard, space_client, settings, cache):
        await dashboard.get_sun()

        space_client.get_sun_times.assert_awaited_once_with(settings.observer_latitude, settings.observer_longitude)
        cache.get_feed.assert_called_once_with('sun', settings.observer_latitude, settings.observer_longitude)

    @pytest.mark.asyncio
    async def test_sun_fallback_has_null_times(self, dashboard, space_client):
        space_client.get_sun_times = AsyncMock(side_effect=UpstreamError("down"))

        result = await dashboard.get_sun()

        assert result.fallback is True
        assert result.data["sunrise"] is None
        assert result.data["sunset"] is None

    @pytest.mark.asyncio
    async def test_news_gets_relative_ages(self, dashboard):
        result = await dashboard.get_news()

        assert result.data[0]["title"] == "Artemis II crew completes rehearsal"
        assert result.data[0]["age"].endswith("ago")

    @pytest.mark.asyncio
    async def test_news_fallback_headlines(self, dashboard, space_client):
        space_client.get_news = AsyncMock(side_effect=UpstreamError("down"))

        result = await dashboard.get_news()

        assert [item["title"] for item in result.data] == [item["title"] for item in FALLBACK_NEWS]
        assert result.data[0]["age"] == "2 hours ago"

    def test_with_ages(self):
        now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        aged = DashboardService._with_ages(
            [{"title": "A", "published_at": "2024-01-15T07:00:00Z"}, {"title": "B"}],
            now,
        )

        assert aged[0]["age"] == "5 hours ago"
        assert aged[1]["age"] is None


class TestSnapshot:
    """Test the full dashboard snapshot."""

    @pytest.mark.asyncio
    async def test_snapshot_mixes_live_and_fallback(self, dashboard, space_client):
        space_client.get_apod = AsyncMock(side_effect=UpstreamError("down"))

        snapshot = await dashboard.snapshot(date(2024, 8, 12))

        assert snapshot.apod.fallback is True
        assert snapshot.iss.fallback is False
        assert snapshot.astronauts.data["number"] == 2
        assert snapshot.meteor_showers[0].name == "Perseids"
        assert snapshot.solar_activity.solar_wind == "450 km/s"
        assert snapshot.moon.distance == "384,400 km"

    @pytest.mark.asyncio
    async def test_snapshot_survives_every_feed_failing(self, dashboard, space_client):
        for method in ("get_apod", "get_iss_position", "get_astronauts", "get_sun_times", "get_news"):
            setattr(space_client, method, AsyncMock(side_effect=UpstreamError("down")))

        snapshot = await dashboard.snapshot()

        assert all(feed.fallback for feed in (
            snapshot.apod, snapshot.iss, snapshot.astronauts, snapshot.sun, snapshot.news
        ))
