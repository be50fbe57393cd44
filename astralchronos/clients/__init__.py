"""
HTTP clients for upstream APIs and n8n webhooks.
"""
from astralchronos.clients.base import HTTPClient, UpstreamError
from astralchronos.clients.retry_handler import RetryConfig, RetryHandler
from astralchronos.clients.space_data import SpaceDataClient
from astralchronos.clients.webhooks import N8nWebhookClient, WebhookError, WebhookReply

__all__ = [
    'HTTPClient',
    'UpstreamError',
    'RetryConfig',
    'RetryHandler',
    'SpaceDataClient',
    'N8nWebhookClient',
    'WebhookError',
    'WebhookReply',
]
