"""
FastAPI middleware for rate limiting, cache headers and request metrics.
"""
import time
import logging
from typing import Callable, Optional
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match, Mount

from astralchronos.cache.rate_limiter import RateLimiter, get_rate_limiter
from astralchronos.api.responses import ErrorResponse
from astralchronos.monitoring.metrics import track_request

logger = logging.getLogger(__name__)

UNMATCHED_ROUTE = "unmatched"


def normalize_endpoint(path: str) -> str:
    """Collapse parameterized paths so rate limits and cache headers share one key."""
    if "?" in path:
        path = path.split("?")[0]

    parts = path.rstrip("/").split("/")
    if path.startswith("/api/quiz/") and path.endswith("/score"):
        return "/api/quiz/{quiz_id}/score"
    if path.startswith("/api/quiz/") and len(parts) == 4:
        return "/api/quiz/{quiz_id}"
    if path.startswith("/api/learning/") and len(parts) == 4:
        return "/api/learning/{topic}"
    if path.startswith("/static/"):
        return "/static/{path}"

    return path


def route_label(request: Request) -> str:
    """Route template serving the request, so metric labels stay bounded."""
    label = UNMATCHED_ROUTE
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.NONE:
            continue
        label = f"{route.path}/{{path}}" if isinstance(route, Mount) else route.path
        if match == Match.FULL:
            break
    return label


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware for API rate limiting."""

    def __init__(
        self,
        app,
        default_limit: int = 300,
        default_window: int = 3600,
        enabled: bool = True,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """
        Initialize rate limiting middleware.

        Args:
            app: FastAPI application
            default_limit: Default requests per window
            default_window: Default window size in seconds
            enabled: Whether rate limiting is enabled
            rate_limiter: Limiter to use, the global one if None
        """
        super().__init__(app)
        self.default_limit = default_limit
        self.default_window = default_window
        self.enabled = enabled
        self.rate_limiter = rate_limiter or get_rate_limiter()

        # Webhook-backed endpoints get tighter limits
        self.endpoint_limits = {
            "/api/chatbot": {"limit": 30, "window": 300},
            "/api/tourism/trip-plan": {"limit": 20, "window": 300},
            "/api/calendar/select": {"limit": 60, "window": 300},
            "/api/webhook/send": {"limit": 10, "window": 300},
            "/api/dashboard": {"limit": 120, "window": 3600},
        }

        self.excluded_paths = {
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
            "/metrics",
            "/",
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with rate limiting."""
        if not self.enabled:
            return await call_next(request)

        path = request.url.path
        if path in self.excluded_paths or path.startswith("/health") or path.startswith("/static"):
            return await call_next(request)

        client_id = self._get_client_identifier(request)
        endpoint = normalize_endpoint(path)

        limit_config = self.endpoint_limits.get(endpoint, {
            "limit": self.default_limit,
            "window": self.default_window
        })

        allowed, rate_info = self.rate_limiter.check_rate_limit(
            identifier=client_id,
            endpoint=endpoint,
            limit=limit_config["limit"],
            window_seconds=limit_config["window"]
        )

        if not allowed:
            logger.warning(
                f"Rate limit exceeded for {client_id} on {endpoint}: "
                f"{rate_info.get('retry_after', 'unknown')}s retry after"
            )

            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=ErrorResponse(
                    error="Rate limit exceeded",
                    detail=f"Too many requests. Try again in {rate_info.get('retry_after', 60)} seconds.",
                    code="429"
                ).model_dump(),
                headers={
                    "X-RateLimit-Limit": str(rate_info["limit"]),
                    "X-RateLimit-Remaining": str(rate_info["remaining"]),
                    "X-RateLimit-Reset": str(rate_info["reset_time"]),
                    "Retry-After": str(rate_info.get("retry_after", 60))
                }
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(rate_info["limit"])
        response.headers["X-RateLimit-Remaining"] = str(rate_info["remaining"])
        response.headers["X-RateLimit-Reset"] = str(rate_info["reset_time"])

        return response

    def _get_client_identifier(self, request: Request) -> str:
        """Client IP, honouring proxy headers."""
        client_ip = request.client.host if request.client else "unknown"

        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            client_ip = real_ip

        return f"ip:{client_ip}"


class CacheHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware for adding cache-related headers."""

    def __init__(self, app, enabled: bool = True):
        super().__init__(app)
        self.enabled = enabled

        # Static content changes only with a deploy; live feeds refresh often
        self.cache_settings = {
            "/api/space-timeline": {"max_age": 3600, "public": True},
            "/api/planets": {"max_age": 3600, "public": True},
            "/api/quiz-data": {"max_age": 3600, "public": True},
            "/api/quiz/{quiz_id}": {"max_age": 3600, "public": True},
            "/api/learning/{topic}": {"max_age": 3600, "public": True},
            "/api/space-events/today": {"max_age": 600, "public": True},
            "/api/nasa/apod": {"max_age": 1800, "public": True},
            "/api/nasa/iss": {"max_age": 30, "public": True},
            "/api/nasa/moon": {"max_age": 3600, "public": True},
            "/api/news": {"max_age": 300, "public": True},
            "/static/{path}": {"max_age": 86400, "public": True},
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add cache headers to response."""
        response = await call_next(request)

        if not self.enabled or request.method != "GET" or response.status_code != 200:
            return response

        cache_config = self.cache_settings.get(normalize_endpoint(request.url.path))
        if cache_config:
            visibility = "public" if cache_config["public"] else "private"
            response.headers["Cache-Control"] = f"max-age={cache_config['max_age']}, {visibility}"
            response.headers["Last-Modified"] = time.strftime(
                "%a, %d %b %Y %H:%M:%S GMT",
                time.gmtime()
            )

        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records request counts and latencies."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        endpoint = route_label(request)
        with track_request(request.method, endpoint) as outcome:
            response = await call_next(request)
            outcome['status_code'] = response.status_code
        return response
