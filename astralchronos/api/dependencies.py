"""
FastAPI dependencies wiring settings, clients and services.
"""
from typing import Optional

from fastapi import Depends

from astralchronos.cache.cache_manager import CacheManager, get_cache_manager
from astralchronos.clients.retry_handler import RetryConfig, RetryHandler
from astralchronos.clients.space_data import SpaceDataClient
from astralchronos.clients.webhooks import N8nWebhookClient
from astralchronos.config import Settings, get_settings
from astralchronos.content.repository import ContentRepository, get_content_repository
from astralchronos.services.beacon import PageLoadBeacon
from astralchronos.services.calendar import CalendarService
from astralchronos.services.chatbot import ChatService
from astralchronos.services.dashboard import DashboardService
from astralchronos.services.history import HistoryService
from astralchronos.services.tourism import TripPlanner

_space_data_client: Optional[SpaceDataClient] = None
_webhook_client: Optional[N8nWebhookClient] = None


def get_app_settings() -> Settings:
    """Dependency to get application settings."""
    return get_settings()


def get_content() -> ContentRepository:
    """Dependency to get the content repository."""
    return get_content_repository()


def get_cache() -> CacheManager:
    return get_cache_manager()


def get_space_data_client(settings: Settings = Depends(get_app_settings)) -> SpaceDataClient:
    """Shared client for the public space APIs."""
    global _space_data_client
    if _space_data_client is None:
        _space_data_client = SpaceDataClient(
            api_key=settings.nasa_api_key,
            timeout=settings.upstream_timeout,
            retry_handler=RetryHandler(RetryConfig(max_retries=settings.upstream_max_retries)),
        )
    return _space_data_client


def get_webhook_client(settings: Settings = Depends(get_app_settings)) -> N8nWebhookClient:
    """Shared client for the n8n webhooks."""
    global _webhook_client
    if _webhook_client is None:
        _webhook_client = N8nWebhookClient(timeout=settings.upstream_timeout)
    return _webhook_client


async def close_clients() -> None:
    """Close the shared HTTP sessions."""
    global _space_data_client, _webhook_client
    for client in (_space_data_client, _webhook_client):
        if client is not None:
            await client.close_session()
    _space_data_client = None
    _webhook_client = None


def get_dashboard_service(
    client: SpaceDataClient = Depends(get_space_data_client),
    cache: CacheManager = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
) -> DashboardService:
    return DashboardService(client, cache, settings)


def get_history_service(
    content: ContentRepository = Depends(get_content),
    webhooks: N8nWebhookClient = Depends(get_webhook_client),
    settings: Settings = Depends(get_app_settings),
) -> HistoryService:
    return HistoryService(content, webhooks, settings)


def get_calendar_service(
    content: ContentRepository = Depends(get_content),
    webhooks: N8nWebhookClient = Depends(get_webhook_client),
    cache: CacheManager = Depends(get_cache),
    settings: Settings = Depends(get_app_settings),
) -> CalendarService:
    return CalendarService(content, webhooks, cache, settings)


def get_trip_planner(
    content: ContentRepository = Depends(get_content),
    webhooks: N8nWebhookClient = Depends(get_webhook_client),
    settings: Settings = Depends(get_app_settings),
) -> TripPlanner:
    return TripPlanner(content, webhooks, settings)


def get_chat_service(
    webhooks: N8nWebhookClient = Depends(get_webhook_client),
    settings: Settings = Depends(get_app_settings),
) -> ChatService:
    return ChatService(webhooks, settings)


def get_page_load_beacon(
    webhooks: N8nWebhookClient = Depends(get_webhook_client),
    settings: Settings = Depends(get_app_settings),
) -> PageLoadBeacon:
    return PageLoadBeacon(webhooks, settings)
