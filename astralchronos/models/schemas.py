"""
Pydantic models for site content, upstream feeds and API payloads.
"""
from datetime import date as Date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EventCategory(str, Enum):
    """Categories used by the timeline and the hero banner."""
    LAUNCH = "Launch"
    LANDING = "Landing"
    DISCOVERY = "Discovery"
    MISSION = "Mission"
    EDUCATIONAL = "Educational"


class DataSource(str, Enum):
    """Where a payload came from."""
    STATIC = "static"
    WEBHOOK = "webhook"
    UPSTREAM = "upstream"
    FALLBACK = "fallback"


# Static content

class SpaceEvent(BaseModel):
    """A 'today in space history' event."""
    title: str = Field(..., min_length=1)
    description: str
    date: str = Field(..., description="Human readable date")
    category: str = Field(..., description="Event category")
    agency: str = Field(..., description="Responsible agency")
    source: DataSource = Field(DataSource.STATIC, description="Where the event came from")


class TimelineEvent(BaseModel):
    """A milestone on the space timeline."""
    year: int = Field(..., ge=1900, le=2100)
    title: str = Field(..., min_length=1)
    description: str
    date: str
    category: str
    image: str

    @field_validator('image')
    @classmethod
    def validate_image(cls, v):
        """Basic URL validation."""
        if not (v.startswith('http://') or v.startswith('https://') or v.startswith('/')):
            raise ValueError('Image must be an absolute URL or a site path')
        return v


class CalendarEvent(BaseModel):
    """An astronomical or historical event attached to a month-day."""
    title: str = Field(..., min_length=1)
    description: str


class Planet(BaseModel):
    """A solar tourism destination."""
    id: str = Field(..., min_length=1, max_length=50)
    name: str
    image: str
    description: str
    temperature: str
    satellites: str
    funFact: str

    @field_validator('id')
    @classmethod
    def validate_id(cls, v):
        """Planet ids are URL-friendly slugs."""
        if not v.replace('-', '').isalnum():
            raise ValueError('Planet id must contain only alphanumeric characters and hyphens')
        return v.lower()


class QuizQuestion(BaseModel):
    """A multiple-choice question with its answer key."""
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    answer: int = Field(..., ge=0, description="Index of the correct option")
    explanation: Optional[str] = None

    @field_validator('answer')
    @classmethod
    def validate_answer(cls, v, info):
        """The answer index must point at an option."""
        options = info.data.get('options')
        if options is not None and v >= len(options):
            raise ValueError('Answer index out of range')
        return v


class QuizCard(BaseModel):
    """A quiz as shown on the quiz section."""
    id: str = Field(..., min_length=1)
    title: str
    emoji: str
    description: str
    duration: str
    questions: int = Field(..., ge=0, description="Number of questions")
    image: str
    items: List[QuizQuestion] = Field(default_factory=list, exclude=True)


class LearningCard(BaseModel):
    """A short learning module card."""
    id: str
    title: str
    emoji: str
    description: str
    readTime: str
    topic: str


class QuizData(BaseModel):
    """Quiz section content."""
    quizzes: List[QuizCard] = Field(default_factory=list)
    learningCards: List[LearningCard] = Field(default_factory=list)


class SpaceEventsFixture(BaseModel):
    """Shape of the packaged space events fixture."""
    today: Dict[str, SpaceEvent] = Field(default_factory=dict)
    timeline: List[TimelineEvent] = Field(default_factory=list)
    calendar: Dict[str, List[CalendarEvent]] = Field(default_factory=dict)


# Calendar

class CalendarDay(BaseModel):
    """One cell of the month grid."""
    date: Optional[Date] = None
    day: Optional[int] = None
    has_event: bool = False
    events: List[CalendarEvent] = Field(default_factory=list)


class CalendarMonth(BaseModel):
    """A rendered calendar month."""
    year: int
    month: int = Field(..., ge=1, le=12)
    month_name: str
    weekdays: List[str]
    days: List[CalendarDay]
    source: DataSource = DataSource.STATIC


class DateSelectionRequest(BaseModel):
    """A date clicked on the calendar."""
    date: Date


class DateSelection(BaseModel):
    """Events for a selected calendar date."""
    date: Date
    month_day: str
    events: List[CalendarEvent] = Field(default_factory=list)
    source: DataSource = DataSource.STATIC


# Tourism

class TripPlanRequest(BaseModel):
    """Trip plan generation request."""
    planet: Optional[str] = Field(None, validate_default=True, description="Planet id")

    @field_validator('planet', mode="before")
    @classmethod
    def validate_planet(cls, v):
        """A destination must be selected."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError('Please select a planet before generating a trip plan.')
        return v.strip().lower()


class TripPlan(BaseModel):
    """A generated solar tourism trip plan."""
    travelPlan: str
    gear: List[str] = Field(default_factory=list)
    temperature: str
    satellites: str
    funFact: str
    source: DataSource = DataSource.STATIC


# Dashboard feeds

class ApodData(BaseModel):
    """NASA Astronomy Picture of the Day."""
    model_config = ConfigDict(extra='allow')

    title: str
    explanation: str
    url: str
    date: Optional[str] = None
    media_type: Optional[str] = None
    hdurl: Optional[str] = None
    copyright: Optional[str] = None


class IssLocation(BaseModel):
    """Current ISS ground position."""
    latitude: str
    longitude: str
    speed: str = "27,600"
    timestamp: Optional[int] = None


class Astronaut(BaseModel):
    """A person currently in space."""
    name: str
    craft: str


class AstronautRoster(BaseModel):
    """Everyone currently in space."""
    number: int = Field(0, ge=0)
    people: List[Astronaut] = Field(default_factory=list)

    def on_craft(self, craft: str) -> List[Astronaut]:
        """People aboard the given craft."""
        return [p for p in self.people if p.craft.lower() == craft.lower()]


class SunTimes(BaseModel):
    """Sun data for the configured observer."""
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    solar_noon: Optional[str] = None
    day_length: Optional[int] = Field(None, description="Day length in seconds")
    latitude: float
    longitude: float


class MoonPhase(BaseModel):
    """Computed moon phase."""
    phase: str
    illumination: str
    age_days: float
    nextFull: str
    distance: str = "384,400 km"


class NewsArticle(BaseModel):
    """A spaceflight news headline."""
    title: str
    url: Optional[str] = None
    news_site: Optional[str] = None
    published_at: Optional[str] = None
    summary: Optional[str] = None
    age: Optional[str] = Field(None, description="Relative age such as '2 hours ago'")


class MeteorShower(BaseModel):
    """An annual meteor shower."""
    name: str
    peak: str
    rate: int = Field(..., ge=0, description="Meteors per hour at peak")
    status: str = "Upcoming"


class SolarActivity(BaseModel):
    """Space weather summary."""
    solar_wind: str
    geomagnetic_field: str
    xray_level: str


class FeedResult(BaseModel):
    """A dashboard feed payload with its provenance."""
    data: Any
    fallback: bool = False
    source: DataSource = DataSource.UPSTREAM
    error: Optional[str] = None


class DashboardSnapshot(BaseModel):
    """All dashboard cards at once."""
    iss: FeedResult
    apod: FeedResult
    moon: MoonPhase
    astronauts: FeedResult
    sun: FeedResult
    news: FeedResult
    meteor_showers: List[MeteorShower]
    solar_activity: SolarActivity


# Quiz

class QuizSubmission(BaseModel):
    """Answers given for a quiz, by question order."""
    answers: List[Optional[int]] = Field(default_factory=list)


class QuestionResult(BaseModel):
    """Outcome for one question."""
    index: int
    correct: bool
    given: Optional[int] = None
    expected: int


class QuizResult(BaseModel):
    """Quiz score."""
    quiz_id: str
    correct: int
    total: int
    percentage: int = Field(..., ge=0, le=100)
    passed: bool
    results: List[QuestionResult] = Field(default_factory=list)


class PublicQuestion(BaseModel):
    """A question without its answer key."""
    index: int
    question: str
    options: List[str]


class QuizDetail(BaseModel):
    """A quiz and its questions, answers withheld."""
    id: str
    title: str
    emoji: str
    description: str
    duration: str
    image: str
    questions: List[PublicQuestion]


# Chatbot and webhooks

class ChatRequest(BaseModel):
    """A chatbot message from the visitor."""
    message: str = Field(..., max_length=2000)

    @field_validator('message')
    @classmethod
    def validate_message(cls, v):
        """Reject blank messages."""
        if not v.strip():
            raise ValueError('Message must not be empty')
        return v.strip()


class ChatResponse(BaseModel):
    """A chatbot reply."""
    response: str
    source: DataSource = DataSource.WEBHOOK


class PageLoadEvent(BaseModel):
    """Page load beacon payload."""
    model_config = ConfigDict(extra='allow')

    date: str
    monthDay: str
    timestamp: int
    request_type: str = "page_load"
    user_action: str = "website_opened"
    current_time: Optional[str] = None
    browser_timezone: Optional[str] = None


class WebhookAck(BaseModel):
    """Result of forwarding a beacon to a webhook."""
    status: str = Field(..., description="sent, skipped or failed")
    date: Optional[str] = None
