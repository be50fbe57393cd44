"""
Logging configuration for AstralChronos.
Structured logging with structlog, sensitive-field redaction and optional file rotation.
"""

import os
import sys
import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime, timezone

import structlog
from structlog.types import FilteringBoundLogger


class LogConfig:
    """Configuration class for logging setup."""

    def __init__(self):
        self.log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))
        self.log_format = os.getenv('LOG_FORMAT', 'json')  # json or console
        self.enable_file_logging = os.getenv('ENABLE_FILE_LOGGING', 'false').lower() == 'true'
        self.max_log_size = int(os.getenv('MAX_LOG_SIZE_MB', '20')) * 1024 * 1024
        self.backup_count = int(os.getenv('LOG_BACKUP_COUNT', '5'))
        self.environment = os.getenv('ENVIRONMENT', 'development')

        if self.enable_file_logging:
            self.log_dir.mkdir(exist_ok=True)


def add_timestamp(logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def add_log_level(logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add log level to event dict."""
    event_dict["level"] = method_name.upper()
    return event_dict


def add_service_context(logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context information."""
    event_dict["service"] = "astralchronos"
    event_dict["component"] = event_dict.get("component", "unknown")
    return event_dict


SENSITIVE_KEYS = ('password', 'token', 'secret', 'key', 'authorization', 'webhook_url')


def filter_sensitive_data(logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Filter out sensitive data from logs."""
    def _filter_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        filtered = {}
        for k, v in d.items():
            if any(sensitive in k.lower() for sensitive in SENSITIVE_KEYS):
                filtered[k] = "[REDACTED]"
            elif isinstance(v, dict):
                filtered[k] = _filter_dict(v)
            else:
                filtered[k] = v
        return filtered

    return _filter_dict(event_dict)


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """
    Set up logging configuration.

    Args:
        config: LogConfig instance, creates default if None
    """
    if config is None:
        config = LogConfig()

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(message)s",
        stream=sys.stdout,
    )

    processors = [
        add_timestamp,
        add_log_level,
        add_service_context,
        filter_sensitive_data,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.log_format == 'json':
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if config.enable_file_logging:
        setup_file_logging(config)

    configure_third_party_loggers(config)


def setup_file_logging(config: LogConfig) -> None:
    """Set up file-based logging with rotation."""
    app_handler = logging.handlers.RotatingFileHandler(
        config.log_dir / "astralchronos.log",
        maxBytes=config.max_log_size,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    app_handler.setLevel(getattr(logging, config.log_level))

    error_handler = logging.handlers.RotatingFileHandler(
        config.log_dir / "errors.log",
        maxBytes=config.max_log_size,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)

    # Upstream API and webhook traffic gets its own file
    upstream_handler = logging.handlers.RotatingFileHandler(
        config.log_dir / "upstream.log",
        maxBytes=config.max_log_size,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    upstream_handler.setLevel(logging.INFO)

    root_logger = logging.getLogger()
    root_logger.addHandler(app_handler)
    root_logger.addHandler(error_handler)

    logging.getLogger('astralchronos.clients').addHandler(upstream_handler)


def configure_third_party_loggers(config: LogConfig) -> None:
    """Configure logging levels for third-party libraries."""
    third_party_loggers = {
        'aiohttp': logging.WARNING,
        'asyncio': logging.WARNING,
        'redis': logging.WARNING,
        'uvicorn.access': logging.WARNING,
    }

    for logger_name, level in third_party_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str, component: Optional[str] = None) -> FilteringBoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)
        component: Component name for categorization

    Returns:
        Configured structlog logger
    """
    logger = structlog.get_logger(name)

    if component:
        logger = logger.bind(component=component)

    return logger


class TimedOperation:
    """Context manager for timing operations with logging."""

    def __init__(self, logger: FilteringBoundLogger, operation_name: str, **context):
        self.logger = logger
        self.operation_name = operation_name
        self.context = context
        self.start_time = None
        self.duration = 0.0

    def __enter__(self):
        self.start_time = datetime.now(timezone.utc)
        self.logger.debug(
            f"Starting {self.operation_name}",
            operation=self.operation_name,
            **self.context
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = (datetime.now(timezone.utc) - self.start_time).total_seconds()

        if exc_type:
            self.logger.warning(
                f"Failed {self.operation_name}",
                operation=self.operation_name,
                duration_seconds=self.duration,
                exc_type=exc_type.__name__,
                exc_value=str(exc_val),
                **self.context
            )
        else:
            self.logger.info(
                f"Completed {self.operation_name}",
                operation=self.operation_name,
                duration_seconds=self.duration,
                **self.context
            )


# Initialize logging on module import
if not os.getenv('SKIP_LOGGING_INIT'):
    setup_logging()
