"""
Live dashboard feeds with caching and hardcoded fallbacks.

Every upstream feed is wrapped into a FeedResult: a successful payload is
cached and returned as is, a failed one is replaced by the fallback the
page has always shown so the dashboard never breaks.
"""

import asyncio
import time
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from astralchronos.cache.cache_manager import CacheManager
from astralchronos.clients.base import UpstreamError
from astralchronos.clients.space_data import ISS_SPEED_KMH, SpaceDataClient
from astralchronos.config import Settings
from astralchronos.dates import parse_iso_datetime, relative_age
from astralchronos.logging_config import get_logger
from astralchronos.models.schemas import (
    DashboardSnapshot,
    DataSource,
    FeedResult,
    MoonPhase,
)
from astralchronos.monitoring.metrics import get_metrics_collector
from astralchronos.services.astronomy import (
    get_meteor_showers,
    get_moon_phase,
    get_solar_activity,
)

logger = get_logger(__name__, component="dashboard")


FALLBACK_APOD = {
    "title": "Eagle Nebula Pillars",
    "explanation": "The iconic Pillars of Creation in the Eagle Nebula showcase star formation in action...",
    "url": "https://images.unsplash.com/photo-1419242902214-272b3f66ee7a?ixlib=rb-4.0.3&auto=format&fit=crop&w=400&h=200",
}

FALLBACK_ISS = {
    "latitude": "45.3642",
    "longitude": "-121.5278",
    "speed": ISS_SPEED_KMH,
}

FALLBACK_NEWS = [
    {"title": "SpaceX Starship Test Success", "age": "2 hours ago"},
    {"title": "James Webb Discovers New Exoplanet", "age": "5 hours ago"},
    {"title": "Mars Sample Return Mission Update", "age": "1 day ago"},
]

FALLBACK_ASTRONAUTS = {"number": 0, "people": []}


class DashboardService:
    """Fetches dashboard feeds through the cache and falls back on failure."""

    def __init__(self, client: SpaceDataClient, cache: CacheManager, settings: Settings):
        self.client = client
        self.cache = cache
        self.settings = settings
        self.metrics = get_metrics_collector()

    async def _fetch(
        self,
        feed: str,
        loader: Callable[[], Awaitable[Any]],
        fallback: Callable[[], Any],
        *qualifiers,
    ) -> FeedResult:
        cached = self.cache.get_feed(feed, *qualifiers)
        if cached is not None:
            return FeedResult(data=cached, source=DataSource.UPSTREAM)

        start_time = time.time()
        try:
            data = await loader()
        except UpstreamError as e:
            duration = time.time() - start_time
            self.metrics.record_upstream_call(feed, 'error', duration)
            self.metrics.record_fallback(feed)
            logger.warning("Feed failed, serving fallback", feed=feed, error=str(e))
            return FeedResult(
                data=fallback(),
                fallback=True,
                source=DataSource.FALLBACK,
                error=str(e),
            )

        self.metrics.record_upstream_call(feed, 'success', time.time() - start_time)
        self.cache.set_feed(feed, data, *qualifiers)
        return FeedResult(data=data, source=DataSource.UPSTREAM)

    async def get_apod(self) -> FeedResult:
        async def load():
            apod = await self.client.get_apod()
            return apod.model_dump(exclude_none=True)

        return await self._fetch('apod', load, lambda: dict(FALLBACK_APOD))

    async def get_iss(self) -> FeedResult:
        async def load():
            position = await self.client.get_iss_position()
            return position.model_dump()

        return await self._fetch('iss', load, lambda: dict(FALLBACK_ISS))

    async def get_astronauts(self) -> FeedResult:
        async def load():
            roster = await self.client.get_astronauts()
            return roster.model_dump()

        return await self._fetch('astronauts', load, lambda: dict(FALLBACK_ASTRONAUTS, people=[]))

    async def get_sun(self) -> FeedResult:
        """Sun times for the configured observer."""
        latitude = self.settings.observer_latitude
        longitude = self.settings.observer_longitude

        async def load():
            sun = await self.client.get_sun_times(latitude, longitude)
            return sun.model_dump()

        def fallback():
            return {
                "sunrise": None,
                "sunset": None,
                "solar_noon": None,
                "day_length": None,
                "latitude": latitude,
                "longitude": longitude,
            }

        return await self._fetch('sun', load, fallback, latitude, longitude)

    async def get_news(self, limit: int = 3) -> FeedResult:
        """Latest headlines; ages are recomputed on every call."""
        async def load():
            articles = await self.client.get_news(limit=limit)
            return [article.model_dump() for article in articles]

        result = await self._fetch('news', load, lambda: [dict(item) for item in FALLBACK_NEWS[:limit]], limit)
        if not result.fallback:
            result.data = self._with_ages(result.data)
        return result

    @staticmethod
    def _with_ages(articles: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        now = now or datetime.now(timezone.utc)
        aged = []
        for article in articles:
            published = parse_iso_datetime(article.get('published_at') or '')
            aged.append(dict(article, age=relative_age(published, now) if published else None))
        return aged

    def get_moon(self, moment: Optional[datetime] = None) -> MoonPhase:
        return get_moon_phase(moment)

    async def snapshot(self, today: Optional[date] = None) -> DashboardSnapshot:
        """Every dashboard card, upstream feeds fetched concurrently."""
        iss, apod, astronauts, sun, news = await asyncio.gather(
            self.get_iss(),
            self.get_apod(),
            self.get_astronauts(),
            self.get_sun(),
            self.get_news(),
        )

        return DashboardSnapshot(
            iss=iss,
            apod=apod,
            moon=self.get_moon(),
            astronauts=astronauts,
            sun=sun,
            news=news,
            meteor_showers=get_meteor_showers(today),
            solar_activity=get_solar_activity(),
        )
