"""
Solar tourism trip plans.
"""

from typing import Any, Dict

from astralchronos.clients.webhooks import N8nWebhookClient, WebhookError
from astralchronos.config import Settings
from astralchronos.content.repository import ContentRepository
from astralchronos.logging_config import get_logger
from astralchronos.models.schemas import DataSource, Planet, TripPlan

logger = get_logger(__name__, component="tourism")

DEFAULT_GEAR = ['EVA Suit', 'Radiation Shield', 'Oxygen Recycler', 'Navigation System']

TRIP_PLAN_FAILED = "Failed to generate trip plan. Please try again."


class PlanetNotFoundError(Exception):
    """Raised for a planet id missing from the destinations list."""

    def __init__(self, planet_id: str):
        super().__init__(f"Planet not found: {planet_id}")
        self.planet_id = planet_id


class TripPlanError(Exception):
    """Raised when the tourism workflow cannot produce a plan."""
    pass


def default_travel_plan(planet: Planet) -> str:
    return (
        f"Your journey to {planet.name} will be an incredible adventure spanning several months "
        "using advanced propulsion technology. You'll experience breathtaking views and unique "
        "phenomena along the way."
    )


class TripPlanner:
    """Generates trip plans from the tourism webhook or the planet record."""

    def __init__(self, repository: ContentRepository, webhooks: N8nWebhookClient, settings: Settings):
        self.repository = repository
        self.webhooks = webhooks
        self.settings = settings

    def static_plan(self, planet: Planet) -> TripPlan:
        return TripPlan(
            travelPlan=default_travel_plan(planet),
            gear=list(DEFAULT_GEAR),
            temperature=planet.temperature,
            satellites=planet.satellites,
            funFact=planet.funFact,
            source=DataSource.STATIC,
        )

    async def generate(self, planet_id: str) -> TripPlan:
        """
        Build a trip plan for a destination.

        Raises:
            PlanetNotFoundError: Unknown planet id
            TripPlanError: The configured webhook failed
        """
        planet = self.repository.get_planet(planet_id)
        if planet is None:
            raise PlanetNotFoundError(planet_id)

        url = self.settings.tourism_webhook
        if not url:
            return self.static_plan(planet)

        try:
            reply = await self.webhooks.post(url, {"planet": planet.id}, name="tourism")
        except WebhookError as e:
            logger.error("Tourism webhook unreachable", planet=planet.id, error=str(e))
            raise TripPlanError(TRIP_PLAN_FAILED) from e

        if not reply.ok or not isinstance(reply.data, dict):
            logger.error("Tourism webhook returned no plan", planet=planet.id, status=reply.status)
            raise TripPlanError(TRIP_PLAN_FAILED)

        return self._merge(planet, reply.data)

    def _merge(self, planet: Planet, data: Dict[str, Any]) -> TripPlan:
        gear = data.get('gear')
        if not isinstance(gear, list) or not gear:
            gear = DEFAULT_GEAR

        return TripPlan(
            travelPlan=str(data.get('travelPlan') or default_travel_plan(planet)),
            gear=[str(item) for item in gear],
            temperature=str(data.get('temperature') or planet.temperature),
            satellites=str(data.get('satellites') or planet.satellites),
            funFact=str(data.get('funFact') or planet.funFact),
            source=DataSource.WEBHOOK,
        )
