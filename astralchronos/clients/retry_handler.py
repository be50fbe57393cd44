"""
Retry logic with exponential backoff for upstream API calls.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, Type

logger = logging.getLogger(__name__)


class RetryableError(Exception):
    """Base class for errors that should trigger a retry."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NonRetryableError(Exception):
    """Base class for errors that should not trigger a retry."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RetryReason(Enum):
    """Reasons for retrying a request."""
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    TEMPORARY_FAILURE = "temporary_failure"


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 1
    base_delay: float = 0.5
    max_delay: float = 5.0
    backoff_factor: float = 2.0
    jitter: bool = True
    retryable_status_codes: List[int] = field(default_factory=lambda: [408, 429, 500, 502, 503, 504])


class RetryHandler:
    """Retries async callables with exponential backoff."""

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()
        self._retry_stats = {
            'total_attempts': 0,
            'total_retries': 0,
            'successful_retries': 0,
            'failed_after_retries': 0,
            'reasons': {}
        }

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.config.retryable_status_codes

    async def retry_async(self,
                          func: Callable,
                          *args,
                          retry_on: Optional[Tuple[Type[BaseException], ...]] = None,
                          **kwargs) -> Any:
        """
        Retry an async function with exponential backoff.

        Args:
            func: Async function to retry
            *args: Arguments to pass to the function
            retry_on: Exception types that should trigger a retry
            **kwargs: Keyword arguments to pass to the function

        Returns:
            Result of the function call

        Raises:
            The last exception if all retries are exhausted
        """
        retry_on = retry_on or (RetryableError, asyncio.TimeoutError, ConnectionError)

        for attempt in range(self.config.max_retries + 1):
            self._retry_stats['total_attempts'] += 1

            try:
                result = await func(*args, **kwargs)

                if attempt > 0:
                    self._retry_stats['successful_retries'] += 1
                    logger.info(f"Upstream call succeeded after {attempt} retries")

                return result

            except Exception as e:
                should_retry = self._should_retry_exception(e, retry_on)

                if not should_retry or attempt >= self.config.max_retries:
                    if attempt > 0:
                        self._retry_stats['failed_after_retries'] += 1
                    raise

                delay = self._calculate_delay(attempt)
                reason = self._get_retry_reason(e)

                self._retry_stats['total_retries'] += 1
                self._retry_stats['reasons'][reason.value] = self._retry_stats['reasons'].get(reason.value, 0) + 1

                logger.warning(f"Attempt {attempt + 1} failed ({reason.value}), retrying in {delay:.2f}s: {e}")
                await asyncio.sleep(delay)

    def _should_retry_exception(self, exception: Exception, retry_on: Tuple[Type[BaseException], ...]) -> bool:
        if isinstance(exception, NonRetryableError):
            return False

        if isinstance(exception, retry_on):
            return True

        status_code = getattr(exception, 'status_code', None)
        if status_code is not None:
            return self.is_retryable_status(status_code)

        return False

    def _calculate_delay(self, attempt: int) -> float:
        delay = self.config.base_delay * (self.config.backoff_factor ** attempt)
        delay = min(delay, self.config.max_delay)

        # 10% jitter
        if self.config.jitter:
            jitter_amount = delay * 0.1
            delay += random.uniform(-jitter_amount, jitter_amount)

        return max(0, delay)

    def _get_retry_reason(self, exception: Exception) -> RetryReason:
        if isinstance(exception, asyncio.TimeoutError):
            return RetryReason.TIMEOUT
        if isinstance(exception, ConnectionError):
            return RetryReason.NETWORK_ERROR

        status_code = getattr(exception, 'status_code', None)
        if status_code == 429:
            return RetryReason.RATE_LIMITED
        if status_code is not None and 500 <= status_code < 600:
            return RetryReason.SERVER_ERROR

        return RetryReason.TEMPORARY_FAILURE

    def get_stats(self) -> dict:
        """Retry statistics."""
        stats = dict(self._retry_stats, reasons=dict(self._retry_stats['reasons']))
        if stats['total_attempts'] > 0:
            stats['retry_rate'] = stats['total_retries'] / stats['total_attempts']
        else:
            stats['retry_rate'] = 0.0
        return stats
