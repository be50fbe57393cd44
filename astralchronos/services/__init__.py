"""
Domain services behind the API routers and the home page.
"""
from astralchronos.services.beacon import PageLoadBeacon
from astralchronos.services.calendar import CalendarService
from astralchronos.services.chatbot import ChatbotUnavailableError, ChatService
from astralchronos.services.dashboard import DashboardService
from astralchronos.services.history import HistoryService
from astralchronos.services.tourism import PlanetNotFoundError, TripPlanError, TripPlanner

__all__ = [
    'PageLoadBeacon',
    'CalendarService',
    'ChatService',
    'ChatbotUnavailableError',
    'DashboardService',
    'HistoryService',
    'PlanetNotFoundError',
    'TripPlanError',
    'TripPlanner',
]
