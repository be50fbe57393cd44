"""
Runtime configuration for AstralChronos.
Every setting is read from the environment so deployments only need env vars.
"""
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional


DEFAULT_HISTORY_WEBHOOK = "https://adie13.app.n8n.cloud/webhook/7825313f-a417-4ce7-802f-ecdd48dabbed"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


def _env_optional(name: str, default: str = '') -> Optional[str]:
    value = os.getenv(name, default).strip()
    return value or None


@dataclass
class Settings:
    """Application settings."""
    nasa_api_key: str = 'DEMO_KEY'
    chatbot_webhook: Optional[str] = None
    tourism_webhook: Optional[str] = None
    calendar_webhook: Optional[str] = None
    history_webhook: Optional[str] = DEFAULT_HISTORY_WEBHOOK
    page_load_webhook: Optional[str] = None
    upstream_timeout: float = 10.0
    upstream_max_retries: int = 1
    observer_latitude: float = 28.5729
    observer_longitude: float = -80.6490
    redis_url: Optional[str] = None
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:5000", "http://127.0.0.1:5000"])
    rate_limit_enabled: bool = True
    environment: str = 'development'
    host: str = '0.0.0.0'
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        cors = os.getenv('CORS_ORIGINS')
        return cls(
            nasa_api_key=os.getenv('NASA_API_KEY') or 'DEMO_KEY',
            chatbot_webhook=_env_optional('N8N_CHATBOT_WEBHOOK'),
            tourism_webhook=_env_optional('N8N_TOURISM_WEBHOOK'),
            calendar_webhook=_env_optional('N8N_CALENDAR_WEBHOOK'),
            history_webhook=_env_optional('N8N_HISTORY_WEBHOOK', DEFAULT_HISTORY_WEBHOOK),
            page_load_webhook=_env_optional('N8N_PAGE_LOAD_WEBHOOK'),
            upstream_timeout=float(os.getenv('UPSTREAM_TIMEOUT_SECONDS', '10')),
            upstream_max_retries=int(os.getenv('UPSTREAM_MAX_RETRIES', '1')),
            observer_latitude=float(os.getenv('OBSERVER_LATITUDE', '28.5729')),
            observer_longitude=float(os.getenv('OBSERVER_LONGITUDE', '-80.6490')),
            redis_url=_env_optional('REDIS_URL'),
            cors_origins=[o.strip() for o in cors.split(',') if o.strip()] if cors else cls().cors_origins,
            rate_limit_enabled=_env_bool('RATE_LIMIT_ENABLED', 'true'),
            environment=os.getenv('ENVIRONMENT', 'development'),
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', '8000')),
        )

    def webhook_status(self) -> dict:
        """Which n8n webhooks are configured."""
        return {
            'chatbot': bool(self.chatbot_webhook),
            'tourism': bool(self.tourism_webhook),
            'calendar': bool(self.calendar_webhook),
            'history': bool(self.history_webhook),
            'page_load': bool(self.page_load_webhook),
        }


@lru_cache()
def get_settings() -> Settings:
    """Get the process-wide settings."""
    return Settings.from_env()
