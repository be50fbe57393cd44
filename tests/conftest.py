"""
Shared fixtures. Redis and the n8n webhooks are disabled for every test.
"""
import os

os.environ.setdefault('SKIP_LOGGING_INIT', 'true')
os.environ['REDIS_URL'] = ''
os.environ['N8N_HISTORY_WEBHOOK'] = ''

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, Mock

from aiohttp import web
from aiohttp.test_utils import TestServer

from fastapi.testclient import TestClient

from astralchronos.api import dependencies
from astralchronos.cache.cache_manager import CacheManager
from astralchronos.clients.retry_handler import RetryHandler
from astralchronos.clients.space_data import SpaceDataClient
from astralchronos.clients.webhooks import N8nWebhookClient, WebhookReply
from astralchronos.config import Settings
from astralchronos.content.repository import ContentRepository
from astralchronos.main import app
from astralchronos.models.schemas import (
    ApodData,
    Astronaut,
    AstronautRoster,
    IssLocation,
    NewsArticle,
    SunTimes,
)


@pytest.fixture(scope="session")
def content():
    """Repository over the packaged fixtures."""
    return ContentRepository()


@pytest.fixture
def settings():
    """Settings with every webhook unset."""
    return Settings(history_webhook=None)


@pytest.fixture
def webhook_client():
    """Webhook client that never touches the network."""
    client = Mock(spec=N8nWebhookClient)
    client.post = AsyncMock(return_value=WebhookReply(status=200, body='{}', data={}))
    client.fire_and_forget = AsyncMock(return_value=None)
    return client


@pytest.fixture
def cache():
    """Cache manager with nothing cached."""
    manager = Mock(spec=CacheManager)
    manager.get_feed.return_value = None
    manager.set_feed.return_value = True
    manager.get_calendar_events.return_value = None
    manager.set_calendar_events.return_value = True
    return manager


@pytest.fixture
def space_client():
    """Space data client answering every feed."""
    client = Mock(spec=SpaceDataClient)
    client.get_apod = AsyncMock(return_value=ApodData(
        title="The Horsehead Nebula",
        explanation="A dark nebula in Orion. " * 10,
        url="https://apod.nasa.gov/apod/image/horsehead.jpg",
        date="2024-01-15",
        media_type="image",
    ))
    client.get_iss_position = AsyncMock(return_value=IssLocation(
        latitude="12.3456", longitude="-45.6789", speed="27,600", timestamp=1700000000
    ))
    client.get_astronauts = AsyncMock(return_value=AstronautRoster(
        number=2,
        people=[Astronaut(name="Jane Doe", craft="ISS"), Astronaut(name="Li Wei", craft="Tiangong")],
    ))
    client.get_sun_times = AsyncMock(return_value=SunTimes(
        sunrise="2024-01-15T11:58:00+00:00",
        sunset="2024-01-15T22:41:00+00:00",
        solar_noon="2024-01-15T17:19:30+00:00",
        day_length=38580,
        latitude=28.5729,
        longitude=-80.649,
    ))
    client.get_news = AsyncMock(return_value=[
        NewsArticle(
            title="Artemis II crew completes rehearsal",
            url="https://example.com/artemis",
            news_site="Example News",
            published_at="2024-01-15T10:00:00Z",
        )
    ])
    client.retry_handler = RetryHandler()
    return client


@pytest.fixture
def client(content, settings, webhook_client, cache, space_client):
    """Test client with every external dependency replaced."""
    app.dependency_overrides[dependencies.get_app_settings] = lambda: settings
    app.dependency_overrides[dependencies.get_content] = lambda: content
    app.dependency_overrides[dependencies.get_webhook_client] = lambda: webhook_client
    app.dependency_overrides[dependencies.get_space_data_client] = lambda: space_client
    app.dependency_overrides[dependencies.get_cache] = lambda: cache

    yield TestClient(app)

    app.dependency_overrides.clear()


# 0xff/0xfe never start a UTF-8 sequence
BAD_UTF8_BODY = b'{"text": "\xff\xfe bad"}'


@pytest_asyncio.fixture
async def bad_utf8_url():
    """URL of a local server whose replies are not valid UTF-8."""
    async def reply(request):
        return web.Response(body=BAD_UTF8_BODY, content_type="application/json", charset="utf-8")

    server_app = web.Application()
    server_app.router.add_route("*", "/{tail:.*}", reply)
    server = TestServer(server_app)
    await server.start_server()

    yield str(server.make_url("/webhook/test"))

    await server.close()
