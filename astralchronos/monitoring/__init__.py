"""
Monitoring package: Prometheus metrics and health checks.
"""
from astralchronos.monitoring.metrics import MetricsCollector, get_metrics_collector, track_request
from astralchronos.monitoring.health_checks import (
    HealthChecker,
    HealthCheckResult,
    HealthStatus,
    get_health_checker,
)

__all__ = [
    'MetricsCollector',
    'get_metrics_collector',
    'track_request',
    'HealthChecker',
    'HealthCheckResult',
    'HealthStatus',
    'get_health_checker',
]
