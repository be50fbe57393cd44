"""
Client for the public space APIs behind the dashboard.

NASA APOD, open-notify (ISS position and astronaut roster),
sunrise-sunset.org and the Spaceflight News API.
"""

import logging
from typing import List, Optional

from astralchronos.clients.base import HTTPClient, UpstreamError
from astralchronos.clients.retry_handler import RetryHandler
from astralchronos.models.schemas import (
    ApodData,
    Astronaut,
    AstronautRoster,
    IssLocation,
    NewsArticle,
    SunTimes,
)

logger = logging.getLogger(__name__)

ISS_SPEED_KMH = "27,600"

# pydantic ValidationError is a ValueError
RESHAPE_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


class SpaceDataClient(HTTPClient):
    """Fetches and reshapes the dashboard feeds."""

    NASA_APOD_URL = "https://api.nasa.gov/planetary/apod"
    ISS_LOCATION_URL = "http://api.open-notify.org/iss-now.json"
    ASTRONAUTS_URL = "http://api.open-notify.org/astros.json"
    SUN_TIMES_URL = "https://api.sunrise-sunset.org/json"
    NEWS_URL = "https://api.spaceflightnewsapi.net/v4/articles/"

    def __init__(
        self,
        api_key: str = "DEMO_KEY",
        timeout: float = 10.0,
        retry_handler: Optional[RetryHandler] = None,
        session=None,
    ):
        super().__init__(timeout=timeout, retry_handler=retry_handler, session=session)
        self.api_key = api_key or "DEMO_KEY"

    async def get_apod(self) -> ApodData:
        """Astronomy Picture of the Day."""
        data = await self._get_json(self.NASA_APOD_URL, params={'api_key': self.api_key})
        try:
            return ApodData.model_validate(data)
        except RESHAPE_ERRORS as e:
            raise UpstreamError(f"Unexpected APOD payload: {e}")

    async def get_iss_position(self) -> IssLocation:
        """Current ISS position, speed is the nominal orbital speed."""
        data = await self._get_json(self.ISS_LOCATION_URL)
        try:
            position = data['iss_position']
            return IssLocation(
                latitude=str(position['latitude']),
                longitude=str(position['longitude']),
                speed=ISS_SPEED_KMH,
                timestamp=data.get('timestamp'),
            )
        except RESHAPE_ERRORS as e:
            raise UpstreamError(f"Unexpected ISS payload: {e}")

    async def get_astronauts(self) -> AstronautRoster:
        """Everyone currently in space."""
        data = await self._get_json(self.ASTRONAUTS_URL)
        try:
            people = [Astronaut(name=p['name'], craft=p['craft']) for p in data.get('people', [])]
            return AstronautRoster(number=data.get('number', len(people)), people=people)
        except RESHAPE_ERRORS as e:
            raise UpstreamError(f"Unexpected astronaut payload: {e}")

    async def get_sun_times(self, latitude: float, longitude: float) -> SunTimes:
        """Sunrise, sunset and solar noon for an observer, in UTC ISO format."""
        data = await self._get_json(
            self.SUN_TIMES_URL,
            params={'lat': latitude, 'lng': longitude, 'formatted': 0},
        )
        if not isinstance(data, dict) or data.get('status') != 'OK':
            status = data.get('status') if isinstance(data, dict) else None
            raise UpstreamError(f"Sun times lookup failed: {status}")

        try:
            results = data.get('results') or {}
            return SunTimes(
                sunrise=results.get('sunrise'),
                sunset=results.get('sunset'),
                solar_noon=results.get('solar_noon'),
                day_length=results.get('day_length'),
                latitude=latitude,
                longitude=longitude,
            )
        except RESHAPE_ERRORS as e:
            raise UpstreamError(f"Unexpected sun times payload: {e}")

    async def get_news(self, limit: int = 3) -> List[NewsArticle]:
        """Latest spaceflight headlines."""
        data = await self._get_json(self.NEWS_URL, params={'limit': limit, 'ordering': '-published_at'})
        results = data.get('results') if isinstance(data, dict) else None
        if results is None:
            raise UpstreamError("Unexpected news payload: no results")

        articles = []
        try:
            for item in results[:limit]:
                if not item.get('title'):
                    continue
                articles.append(NewsArticle(
                    title=item['title'],
                    url=item.get('url'),
                    news_site=item.get('news_site'),
                    published_at=item.get('published_at'),
                    summary=item.get('summary'),
                ))
        except RESHAPE_ERRORS as e:
            raise UpstreamError(f"Unexpected news payload: {e}")
        return articles
