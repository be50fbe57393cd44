"""
Health check system for AstralChronos.
Reports on the cache backend, the content fixtures and webhook configuration.
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog

from astralchronos.cache.redis_client import RedisClient, get_redis_client
from astralchronos.config import Settings, get_settings
from astralchronos.content.repository import ContentError, ContentRepository, get_content_repository
from astralchronos.monitoring.metrics import get_metrics_collector

logger = structlog.get_logger(__name__)


class HealthStatus(Enum):
    """Health status enumeration."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheckResult:
    """Result of a health check."""
    name: str
    status: HealthStatus
    message: str
    details: Dict[str, Any]
    duration_ms: float
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'status': self.status.value,
            'message': self.message,
            'details': self.details,
            'duration_ms': self.duration_ms,
            'timestamp': self.timestamp.isoformat(),
        }


def _overall(statuses) -> HealthStatus:
    statuses = list(statuses)
    if all(status == HealthStatus.HEALTHY for status in statuses):
        return HealthStatus.HEALTHY
    if any(status == HealthStatus.UNHEALTHY for status in statuses):
        return HealthStatus.UNHEALTHY
    return HealthStatus.DEGRADED


class HealthChecker:
    """Runs registered health checks concurrently."""

    def __init__(
        self,
        redis_client: Optional[RedisClient] = None,
        content_loader: Optional[Callable[[], ContentRepository]] = None,
        settings: Optional[Settings] = None,
    ):
        self.redis_client = redis_client
        self.content_loader = content_loader or get_content_repository
        self.settings = settings or get_settings()
        self.checks: Dict[str, Callable[[], Awaitable[HealthCheckResult]]] = {}
        self.register_default_checks()

    def register_default_checks(self):
        self.register_check('redis', self.check_redis_health)
        self.register_check('content', self.check_content_health)
        self.register_check('webhooks', self.check_webhook_config)

    def register_check(self, name: str, check_func: Callable[[], Awaitable[HealthCheckResult]]):
        """Register a health check function."""
        self.checks[name] = check_func
        logger.debug(f"Registered health check: {name}")

    async def run_check(self, name: str) -> HealthCheckResult:
        """Run a specific health check."""
        if name not in self.checks:
            return HealthCheckResult(
                name=name,
                status=HealthStatus.UNHEALTHY,
                message=f"Unknown health check: {name}",
                details={},
                duration_ms=0,
                timestamp=datetime.now(timezone.utc)
            )

        start_time = time.time()
        try:
            return await self.checks[name]()
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(f"Health check {name} failed", error=str(e), exc_info=True)
            return HealthCheckResult(
                name=name,
                status=HealthStatus.UNHEALTHY,
                message=f"Health check failed: {str(e)}",
                details={'error': str(e), 'error_type': type(e).__name__},
                duration_ms=duration_ms,
                timestamp=datetime.now(timezone.utc)
            )

    async def run_all_checks(self) -> Dict[str, HealthCheckResult]:
        """Run all registered health checks."""
        names = list(self.checks.keys())
        results = await asyncio.gather(*(self.run_check(name) for name in names))
        check_results = dict(zip(names, results))

        metrics = get_metrics_collector()
        for name, result in check_results.items():
            metrics.update_component_health(name, result.status.value)
        metrics.update_system_health(_overall(r.status for r in check_results.values()).value)

        return check_results

    async def get_overall_health(self) -> Dict[str, Any]:
        """Get overall system health status."""
        check_results = await self.run_all_checks()
        statuses = [result.status for result in check_results.values()]

        return {
            'status': _overall(statuses).value,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'checks': {name: result.to_dict() for name, result in check_results.items()},
            'summary': {
                'total_checks': len(check_results),
                'status_counts': {
                    'healthy': sum(1 for s in statuses if s == HealthStatus.HEALTHY),
                    'degraded': sum(1 for s in statuses if s == HealthStatus.DEGRADED),
                    'unhealthy': sum(1 for s in statuses if s == HealthStatus.UNHEALTHY),
                },
            }
        }

    # Individual health check methods
    async def check_redis_health(self) -> HealthCheckResult:
        """Redis is optional: unconfigured is healthy, unreachable is degraded."""
        start_time = time.time()
        redis_client = self.redis_client or get_redis_client()

        if not redis_client.redis_url:
            status = HealthStatus.HEALTHY
            message = "Redis not configured, caching disabled"
            connected = False
        elif redis_client.is_connected():
            status = HealthStatus.HEALTHY
            message = "Redis is healthy"
            connected = True
        else:
            status = HealthStatus.DEGRADED
            message = "Redis unreachable, serving without cache"
            connected = False

        duration_ms = (time.time() - start_time) * 1000
        return HealthCheckResult(
            name='redis',
            status=status,
            message=message,
            details={'configured': bool(redis_client.redis_url), 'connected': connected},
            duration_ms=duration_ms,
            timestamp=datetime.now(timezone.utc)
        )

    async def check_content_health(self) -> HealthCheckResult:
        """The site cannot render without its fixtures."""
        start_time = time.time()
        try:
            stats = self.content_loader().stats()
        except ContentError as e:
            return HealthCheckResult(
                name='content',
                status=HealthStatus.UNHEALTHY,
                message=f"Content fixtures unavailable: {e}",
                details={'error': str(e)},
                duration_ms=(time.time() - start_time) * 1000,
                timestamp=datetime.now(timezone.utc)
            )

        empty = [name for name, count in stats.items() if count == 0]
        if empty:
            status = HealthStatus.DEGRADED
            message = f"Empty content sections: {', '.join(empty)}"
        else:
            status = HealthStatus.HEALTHY
            message = "Content fixtures loaded"

        return HealthCheckResult(
            name='content',
            status=status,
            message=message,
            details=stats,
            duration_ms=(time.time() - start_time) * 1000,
            timestamp=datetime.now(timezone.utc)
        )

    async def check_webhook_config(self) -> HealthCheckResult:
        configured = self.settings.webhook_status()
        if any(configured.values()):
            status = HealthStatus.HEALTHY
            message = f"{sum(configured.values())} of {len(configured)} webhooks configured"
        else:
            status = HealthStatus.DEGRADED
            message = "No webhooks configured, serving static replies"

        return HealthCheckResult(
            name='webhooks',
            status=status,
            message=message,
            details=configured,
            duration_ms=0,
            timestamp=datetime.now(timezone.utc)
        )


_health_checker: Optional[HealthChecker] = None


def get_health_checker() -> HealthChecker:
    """Get the global health checker instance."""
    global _health_checker
    if _health_checker is None:
        _health_checker = HealthChecker()
    return _health_checker
