"""
Repository for the static site content shipped with the package.
"""
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from astralchronos.dates import format_long_date, month_day_key
from astralchronos.models.schemas import (
    CalendarEvent,
    EventCategory,
    LearningCard,
    Planet,
    QuizCard,
    QuizData,
    SpaceEvent,
    SpaceEventsFixture,
    TimelineEvent,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"

SPACE_EVENTS_FILE = "space_events.json"
PLANETS_FILE = "planets.json"
QUIZ_DATA_FILE = "quiz_data.json"


class ContentError(Exception):
    """Raised when a content fixture is missing or malformed."""
    pass


class ContentRepository:
    """Read-only access to space events, planets and quiz content."""

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Load and validate all fixtures.

        Args:
            data_dir: Directory holding the JSON fixtures, defaults to the packaged data

        Raises:
            ContentError: If a fixture cannot be read or fails validation
        """
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self._events = self._validated(SpaceEventsFixture.model_validate, SPACE_EVENTS_FILE)
        self._planets = self._validated(TypeAdapter(List[Planet]).validate_python, PLANETS_FILE)
        self._quiz_data = self._validated(QuizData.model_validate, QUIZ_DATA_FILE)

        logger.info(
            f"Loaded content: {len(self._events.today)} daily events, "
            f"{len(self._events.timeline)} timeline events, {len(self._planets)} planets, "
            f"{len(self._quiz_data.quizzes)} quizzes"
        )

    def _load(self, filename: str) -> Any:
        path = self.data_dir / filename
        try:
            with path.open(encoding='utf-8') as fh:
                return json.load(fh)
        except FileNotFoundError:
            raise ContentError(f"Content fixture not found: {path}")
        except json.JSONDecodeError as e:
            raise ContentError(f"Content fixture {filename} is not valid JSON: {e}")

    def _validated(self, validate, filename: str):
        raw = self._load(filename)
        try:
            return validate(raw)
        except ValidationError as e:
            raise ContentError(f"Content fixture {filename} failed validation: {e}")

    # Space events

    def get_today_event(self, day: date) -> SpaceEvent:
        """Event for the day's month-day, or the generic educational event."""
        event = self._events.today.get(month_day_key(day))
        if event:
            return event

        return SpaceEvent(
            title="Explore Space History",
            description=(
                "While no major space events happened on this exact date, "
                "every day offers an opportunity to learn about the cosmos!"
            ),
            date=format_long_date(day),
            category=EventCategory.EDUCATIONAL.value,
            agency="AstralChronos",
        )

    def get_timeline(self) -> List[TimelineEvent]:
        """Timeline milestones in chronological order."""
        return sorted(self._events.timeline, key=lambda event: event.year)

    def get_calendar_events(self) -> Dict[str, List[CalendarEvent]]:
        return dict(self._events.calendar)

    def get_events_for_date(self, day: date) -> List[CalendarEvent]:
        return list(self._events.calendar.get(month_day_key(day), []))

    # Planets

    def list_planets(self) -> List[Planet]:
        return list(self._planets)

    def get_planet(self, planet_id: str) -> Optional[Planet]:
        planet_id = planet_id.lower()
        for planet in self._planets:
            if planet.id == planet_id:
                return planet
        return None

    # Quiz

    def get_quiz_data(self) -> QuizData:
        return self._quiz_data

    def get_quiz(self, quiz_id: str) -> Optional[QuizCard]:
        for quiz in self._quiz_data.quizzes:
            if quiz.id == quiz_id:
                return quiz
        return None

    def get_learning_card(self, topic: str) -> Optional[LearningCard]:
        for card in self._quiz_data.learningCards:
            if card.topic == topic:
                return card
        return None

    def stats(self) -> Dict[str, int]:
        """Counts used by health checks."""
        return {
            'daily_events': len(self._events.today),
            'timeline_events': len(self._events.timeline),
            'calendar_days': len(self._events.calendar),
            'planets': len(self._planets),
            'quizzes': len(self._quiz_data.quizzes),
            'learning_cards': len(self._quiz_data.learningCards),
        }


_content_repository: Optional[ContentRepository] = None


def get_content_repository() -> ContentRepository:
    """Get the shared content repository."""
    global _content_repository
    if _content_repository is None:
        _content_repository = ContentRepository()
    return _content_repository
