"""
Tests for structured logging helpers and Prometheus metrics.
"""
import pytest
from unittest.mock import Mock

from astralchronos.logging_config import (
    LogConfig,
    TimedOperation,
    add_service_context,
    filter_sensitive_data,
)
from astralchronos.monitoring.metrics import MetricsCollector, get_metrics_collector


class TestLogging:
    """Test logging processors and helpers."""

    def test_log_config_from_env(self, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        monkeypatch.setenv('LOG_FORMAT', 'console')

        config = LogConfig()

        assert config.log_level == 'DEBUG'
        assert config.log_format == 'console'
        assert config.enable_file_logging is False

    def test_sensitive_data_redacted(self):
        event = {
            "event": "Calling webhook",
            "api_key": "DEMO_KEY",
            "context": {"webhook_url": "https://example.n8n.cloud/webhook/secret", "status": 200},
        }

        filtered = filter_sensitive_data(None, "info", event)

        assert filtered["api_key"] == "[REDACTED]"
        assert filtered["context"]["webhook_url"] == "[REDACTED]"
        assert filtered["context"]["status"] == 200
        assert filtered["event"] == "Calling webhook"

    @pytest.mark.parametrize("field", ["nasa_key", "API_KEY", "keyfile"])
    def test_any_key_field_redacted(self, field):
        filtered = filter_sensitive_data(None, "info", {"event": "Fetching APOD", field: "DEMO_KEY"})

        assert filtered[field] == "[REDACTED]"

    def test_service_context(self):
        event = add_service_context(None, "info", {"event": "x", "component": "dashboard"})

        assert event["service"] == "astralchronos"
        assert event["component"] == "dashboard"

    def test_timed_operation_success(self):
        logger = Mock()

        with TimedOperation(logger, "apod fetch", feed="apod") as op:
            pass

        assert op.duration >= 0
        logger.info.assert_called_once()
        assert logger.info.call_args.kwargs["feed"] == "apod"

    def test_timed_operation_failure(self):
        logger = Mock()

        with pytest.raises(RuntimeError):
            with TimedOperation(logger, "apod fetch"):
                raise RuntimeError("boom")

        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["exc_type"] == "RuntimeError"


class TestMetricsCollector:
    """Test metric recording on a private registry."""

    @pytest.fixture
    def metrics(self):
        return MetricsCollector()

    def test_http_metrics(self, metrics):
        metrics.record_http_request("GET", "/api/planets", 200)
        metrics.record_http_request("GET", "/api/planets", 200)

        assert metrics.registry.get_sample_value(
            'http_requests_total', {'method': 'GET', 'endpoint': '/api/planets', 'status_code': '200'}
        ) == 2.0

    def test_fallback_and_upstream(self, metrics):
        metrics.record_upstream_call('apod', 'error', 0.2)
        metrics.record_fallback('apod')

        assert metrics.registry.get_sample_value('fallback_payloads_total', {'feed': 'apod'}) == 1.0
        assert metrics.registry.get_sample_value(
            'upstream_requests_total', {'feed': 'apod', 'status': 'error'}
        ) == 1.0

    def test_webhook_calls(self, metrics):
        metrics.record_webhook_call('chatbot', 'success')

        assert metrics.registry.get_sample_value(
            'webhook_calls_total', {'webhook': 'chatbot', 'status': 'success'}
        ) == 1.0

    def test_health_gauges(self, metrics):
        metrics.update_component_health('redis', 'degraded')
        metrics.update_system_health('healthy')

        assert metrics.registry.get_sample_value('component_health_status', {'component': 'redis'}) == 0.5
        assert metrics.registry.get_sample_value('system_health_status') == 1.0

    def test_exposition(self, metrics):
        metrics.record_cache_operation('get', 'miss')

        output = metrics.get_metrics()

        assert 'cache_operations_total' in output
        assert metrics.get_content_type().startswith('text/plain')


class TestRequestMetrics:
    """Test the labels recorded by the metrics middleware."""

    @staticmethod
    def _count(endpoint, status_code, method='GET'):
        value = get_metrics_collector().registry.get_sample_value(
            'http_requests_total', {'method': method, 'endpoint': endpoint, 'status_code': status_code}
        )
        return value or 0.0

    def test_unknown_paths_share_one_label(self, client):
        before = self._count('unmatched', '404')

        client.get("/api/no-such-thing-1")
        client.get("/wp-admin/setup-config.php")

        assert self._count('unmatched', '404') == before + 2
        assert self._count('/api/no-such-thing-1', '404') == 0.0
        assert self._count('/wp-admin/setup-config.php', '404') == 0.0

    def test_path_parameters_use_route_template(self, client):
        before = self._count('/api/quiz/{quiz_id}', '200')

        client.get("/api/quiz/space-history")

        assert self._count('/api/quiz/{quiz_id}', '200') == before + 1
        assert self._count('/api/quiz/space-history', '200') == 0.0

    def test_static_files_use_mount_label(self, client):
        before = self._count('/static/{path}', '200')

        client.get("/static/styles.css")

        assert self._count('/static/{path}', '200') == before + 1
