"""
Data models for AstralChronos.
"""
from astralchronos.models.schemas import (
    ApodData,
    AstronautRoster,
    CalendarEvent,
    CalendarMonth,
    DashboardSnapshot,
    DataSource,
    IssLocation,
    MoonPhase,
    Planet,
    QuizCard,
    QuizData,
    SpaceEvent,
    TimelineEvent,
    TripPlan,
)

__all__ = [
    'ApodData',
    'AstronautRoster',
    'CalendarEvent',
    'CalendarMonth',
    'DashboardSnapshot',
    'DataSource',
    'IssLocation',
    'MoonPhase',
    'Planet',
    'QuizCard',
    'QuizData',
    'SpaceEvent',
    'TimelineEvent',
    'TripPlan',
]
