"""
Error handling utilities for the translation endpoint.

This module provides retry logic and error classification for robust
integration with the external HTTP translation service.
"""

import random
import time
import logging
from typing import Callable, Any, Optional
from dataclasses import dataclass

import requests


logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


@dataclass
class RetryConfig:
    """Configuration for retry logic."""

    max_retries: int = 0
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True


class TranslationFailed(Exception):
    """Base exception for translation failures."""

    def __init__(self, message: str, error_code: Optional[str] = None, retryable: bool = False,
                 details: Optional[dict] = None):
        super().__init__(message)
        self.error_code = error_code
        self.retryable = retryable
        self.details = details or {}


class TranslationTimeoutError(TranslationFailed):
    """Exception for translation timeout errors."""

    def __init__(self, message: str = "Translation request timed out"):
        super().__init__(message, error_code="TIMEOUT", retryable=True)


class TranslationRateLimitError(TranslationFailed):
    """Exception for translation rate limit errors."""

    def __init__(self, message: str = "Translation rate limit exceeded"):
        super().__init__(message, error_code="RATE_LIMIT", retryable=True)


class MalformedTranslationResponse(TranslationFailed):
    """Exception for responses without a usable translation."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, error_code="MALFORMED_RESPONSE", retryable=False, details=details)


def error_for_status(status_code: int, body: str = "") -> TranslationFailed:
    """Build the failure for a non-success HTTP status."""
    if status_code == 429:
        return TranslationRateLimitError(f"Rate limited (429): {body[:200]}")
    return TranslationFailed(
        f"Translation endpoint returned status {status_code}: {body[:200]}",
        error_code=f"HTTP_{status_code}",
        retryable=status_code in RETRYABLE_STATUS_CODES,
        details={"status_code": status_code}
    )


def classify_translation_error(error: Exception) -> TranslationFailed:
    """
    Classify an exception raised during a translation call.

    Args:
        error: Original exception

    Returns:
        TranslationFailed with retry information
    """
    if isinstance(error, TranslationFailed):
        return error

    if isinstance(error, requests.exceptions.Timeout):
        return TranslationTimeoutError(f"Request timed out: {error}")

    if isinstance(error, requests.exceptions.ConnectionError):
        return TranslationFailed(
            f"Connection error: {error}",
            error_code="CONNECTION_ERROR",
            retryable=True
        )

    if isinstance(error, requests.exceptions.RequestException):
        return TranslationFailed(
            f"Request failed: {error}",
            error_code="REQUEST_ERROR",
            retryable=False
        )

    if isinstance(error, ValueError):
        return MalformedTranslationResponse(f"Invalid response payload: {error}")

    # Unknown error - assume non-retryable
    return TranslationFailed(
        f"Unknown error: {error}",
        error_code="UNKNOWN",
        retryable=False
    )


def retry_delay(retry_config: RetryConfig, attempt: int) -> float:
    """Exponential backoff delay for a 0-based attempt number."""
    delay = min(
        retry_config.base_delay * (retry_config.exponential_base ** attempt),
        retry_config.max_delay
    )
    if retry_config.jitter:
        delay *= (0.5 + random.random() * 0.5)  # Add 0-50% jitter
    return delay


def call_with_retry(
    func: Callable[..., Any],
    retry_config: RetryConfig,
    *args,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs
) -> Any:
    """
    Call func, retrying retryable translation failures.

    Raises:
        TranslationFailed: The classified last error
    """
    for attempt in range(retry_config.max_retries + 1):
        try:
            return func(*args, **kwargs)

        except Exception as e:
            classified_error = classify_translation_error(e)

            if attempt == retry_config.max_retries or not classified_error.retryable:
                if classified_error is e:
                    raise
                raise classified_error from e

            delay = retry_delay(retry_config, attempt)
            logger.warning(
                f"Attempt {attempt + 1}/{retry_config.max_retries + 1} failed for "
                f"{getattr(func, '__name__', 'call')}: "
                f"{classified_error}. Retrying in {delay:.2f}s"
            )
            sleep(delay)

    # Unreachable: the last attempt either returns or raises
    raise TranslationFailed("Unknown retry error")

