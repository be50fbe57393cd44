"""
Metrics collection for AstralChronos using Prometheus.
Tracks HTTP traffic, upstream feed outcomes, fallbacks and webhook calls.
"""

import time
from contextlib import contextmanager
from typing import Optional

from prometheus_client import (
    Counter, Histogram, Gauge, Info,
    CollectorRegistry, generate_latest, CONTENT_TYPE_LATEST
)
import structlog

logger = structlog.get_logger(__name__)

HEALTH_VALUES = {'healthy': 1.0, 'degraded': 0.5, 'unhealthy': 0.0}


class MetricsCollector:
    """Central metrics collector for the AstralChronos service."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        """
        Initialize metrics collector.

        Args:
            registry: Prometheus registry, a private one is created if None
        """
        self.registry = registry or CollectorRegistry()
        self._setup_metrics()
        logger.debug("Metrics collector initialized")

    def _setup_metrics(self):
        self.app_info = Info(
            'astralchronos_info',
            'Application information',
            registry=self.registry
        )
        self.app_info.info({
            'version': '1.0.0',
            'service': 'astralchronos',
        })

        # HTTP
        self.http_requests_total = Counter(
            'http_requests_total',
            'Total number of HTTP requests',
            ['method', 'endpoint', 'status_code'],
            registry=self.registry
        )

        self.http_request_duration_seconds = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=self.registry
        )

        self.active_requests = Gauge(
            'http_requests_active',
            'Number of requests being served',
            registry=self.registry
        )

        # Upstream feeds
        self.upstream_requests_total = Counter(
            'upstream_requests_total',
            'Calls to public space APIs',
            ['feed', 'status'],
            registry=self.registry
        )

        self.upstream_duration_seconds = Histogram(
            'upstream_duration_seconds',
            'Time spent waiting on public space APIs',
            ['feed'],
            buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry
        )

        self.fallbacks_total = Counter(
            'fallback_payloads_total',
            'Fallback payloads served instead of upstream data',
            ['feed'],
            registry=self.registry
        )

        # Webhooks
        self.webhook_calls_total = Counter(
            'webhook_calls_total',
            'Calls to n8n webhooks',
            ['webhook', 'status'],
            registry=self.registry
        )

        # Health
        self.component_health = Gauge(
            'component_health_status',
            'Health of a component (1 healthy, 0.5 degraded, 0 unhealthy)',
            ['component'],
            registry=self.registry
        )

        self.system_health = Gauge(
            'system_health_status',
            'Overall health (1 healthy, 0.5 degraded, 0 unhealthy)',
            registry=self.registry
        )

        # Cache
        self.cache_operations_total = Counter(
            'cache_operations_total',
            'Cache lookups by outcome',
            ['operation', 'status'],
            registry=self.registry
        )

    def record_http_request(self, method: str, endpoint: str, status_code: int):
        self.http_requests_total.labels(
            method=method, endpoint=endpoint, status_code=status_code
        ).inc()

    def record_http_duration(self, method: str, endpoint: str, duration: float):
        self.http_request_duration_seconds.labels(
            method=method, endpoint=endpoint
        ).observe(duration)

    def record_upstream_call(self, feed: str, status: str, duration: Optional[float] = None):
        """Record a call to a public API."""
        self.upstream_requests_total.labels(feed=feed, status=status).inc()
        if duration is not None:
            self.upstream_duration_seconds.labels(feed=feed).observe(duration)

    def record_fallback(self, feed: str):
        self.fallbacks_total.labels(feed=feed).inc()

    def record_webhook_call(self, webhook: str, status: str):
        self.webhook_calls_total.labels(webhook=webhook, status=status).inc()

    def record_cache_operation(self, operation: str, status: str):
        self.cache_operations_total.labels(operation=operation, status=status).inc()

    def update_component_health(self, component: str, status: str):
        self.component_health.labels(component=component).set(HEALTH_VALUES.get(status, 0))

    def update_system_health(self, status: str):
        self.system_health.set(HEALTH_VALUES.get(status, 0))

    def get_metrics(self) -> str:
        """Get all metrics in Prometheus format."""
        return generate_latest(self.registry).decode('utf-8')

    def get_content_type(self) -> str:
        return CONTENT_TYPE_LATEST


_metrics_collector: Optional[MetricsCollector] = None


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


@contextmanager
def track_request(method: str, endpoint: str):
    """Track an in-flight HTTP request; yields a dict to receive the status code."""
    metrics = get_metrics_collector()
    metrics.active_requests.inc()
    start_time = time.time()
    outcome = {'status_code': 500}

    try:
        yield outcome
    finally:
        metrics.active_requests.dec()
        metrics.record_http_request(method, endpoint, outcome['status_code'])
        metrics.record_http_duration(method, endpoint, time.time() - start_time)
