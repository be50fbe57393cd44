"""
Shared aiohttp session handling for upstream APIs and webhooks.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from astralchronos.clients.retry_handler import (
    NonRetryableError,
    RetryableError,
    RetryConfig,
    RetryHandler,
)

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Raised when an upstream API cannot produce a usable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HTTPClient:
    """
    Base class owning an aiohttp session with a request timeout.

    Subclasses call `_get_json` for upstream reads (retried) and
    `_post_json` for webhook writes (not retried).
    """

    USER_AGENT = "AstralChronos/1.0 (+https://astralchronos.space)"

    def __init__(
        self,
        timeout: float = 10.0,
        retry_handler: Optional[RetryHandler] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.timeout = timeout
        self.retry_handler = retry_handler or RetryHandler(RetryConfig())
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self):
        await self.start_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close_session()

    async def start_session(self):
        """Start the aiohttp session if none is open."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout, connect=min(5.0, self.timeout)),
                headers={
                    'User-Agent': self.USER_AGENT,
                    'Accept': 'application/json, text/plain, */*',
                },
            )
            self._owns_session = True
            logger.debug(f"{self.__class__.__name__} session started")

    async def close_session(self):
        """Close the aiohttp session if this client opened it."""
        if self.session and self._owns_session and not self.session.closed:
            await self.session.close()
            logger.debug(f"{self.__class__.__name__} session closed")
        self.session = None

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a JSON document, retrying transient failures."""
        await self.start_session()
        try:
            return await self.retry_handler.retry_async(self._get_json_once, url, params)
        except (RetryableError, NonRetryableError) as e:
            raise UpstreamError(str(e), status_code=e.status_code)

    async def _get_json_once(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            async with self.session.get(url, params=params) as response:
                if response.status != 200:
                    message = f"HTTP {response.status} from {url}"
                    if self.retry_handler.is_retryable_status(response.status):
                        raise RetryableError(message, status_code=response.status)
                    raise NonRetryableError(message, status_code=response.status)

                # Some public APIs send JSON with a text/html content type
                try:
                    text = await response.text()
                except UnicodeDecodeError:
                    raise NonRetryableError(f"Undecodable body from {url}", status_code=response.status)
                try:
                    return json.loads(text)
                except json.JSONDecodeError:
                    raise NonRetryableError(f"Invalid JSON from {url}", status_code=response.status)

        except asyncio.TimeoutError:
            raise RetryableError(f"Timeout after {self.timeout}s from {url}")
        except aiohttp.ClientError as e:
            raise RetryableError(f"Network error from {url}: {e}")

    async def _post_json(self, url: str, payload: Dict[str, Any]) -> Tuple[int, str]:
        """
        POST a JSON payload and return (status, body text).

        Raises:
            UpstreamError: On network failure or timeout
        """
        await self.start_session()
        try:
            async with self.session.post(url, json=payload) as response:
                # Invalid bytes decode to U+FFFD
                body = await response.text(errors="replace")
                return response.status, body
        except asyncio.TimeoutError:
            raise UpstreamError(f"Timeout after {self.timeout}s posting to webhook")
        except aiohttp.ClientError as e:
            raise UpstreamError(f"Network error posting to webhook: {e}")
