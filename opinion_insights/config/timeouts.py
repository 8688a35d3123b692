"""
Centralized timeout configuration for all external calls.

This module provides timeout management for static page fetches, image
downloads, translation endpoint calls and the browser session. Retry backoff
for translation calls lives in analysis/error_handler.py.
"""

from dataclasses import dataclass
from typing import Optional
import os


@dataclass
class TimeoutConfig:
    """Timeout configuration for all external operations."""

    # HTTP request timeouts (static pages, images)
    http_connect_timeout: int = 10
    http_read_timeout: int = 30

    # Translation endpoint timeouts
    translation_connect_timeout: int = 5
    translation_read_timeout: int = 15

    # Browser session timeouts
    page_load_timeout: int = 30
    consent_wait_timeout: float = 2.0

    @classmethod
    def from_environment(cls) -> 'TimeoutConfig':
        """Create timeout configuration from environment variables."""
        return cls(
            http_connect_timeout=int(os.getenv('HTTP_CONNECT_TIMEOUT', '10')),
            http_read_timeout=int(os.getenv('HTTP_READ_TIMEOUT', '30')),

            translation_connect_timeout=int(os.getenv('TRANSLATION_CONNECT_TIMEOUT', '5')),
            translation_read_timeout=int(os.getenv('TRANSLATION_READ_TIMEOUT', '15')),

            page_load_timeout=int(os.getenv('PAGE_LOAD_TIMEOUT', '30')),
            consent_wait_timeout=float(os.getenv('CONSENT_WAIT_TIMEOUT', '2.0'))
        )

    def get_http_timeout_tuple(self) -> tuple:
        """Get HTTP timeout as (connect, read) tuple for requests library."""
        return (self.http_connect_timeout, self.http_read_timeout)

    def get_translation_timeout_tuple(self) -> tuple:
        """Get translation endpoint timeout as (connect, read) tuple."""
        return (self.translation_connect_timeout, self.translation_read_timeout)

    def validate(self) -> None:
        """Validate timeout configuration values."""
        if self.http_connect_timeout <= 0:
            raise ValueError("HTTP connect timeout must be positive")
        if self.http_read_timeout <= 0:
            raise ValueError("HTTP read timeout must be positive")

        if self.translation_connect_timeout <= 0:
            raise ValueError("Translation connect timeout must be positive")
        if self.translation_read_timeout <= 0:
            raise ValueError("Translation read timeout must be positive")

        if self.page_load_timeout <= 0:
            raise ValueError("Page load timeout must be positive")
        if self.consent_wait_timeout < 0:
            raise ValueError("Consent wait timeout must be non-negative")


class TimeoutManager:
    """
    Centralized timeout management for the application.

    Provides timeout configuration for every external operation.
    """

    def __init__(self, config: Optional[TimeoutConfig] = None):
        """
        Initialize timeout manager.

        Args:
            config: Optional timeout configuration. If None, loads from environment.
        """
        self.config = config or TimeoutConfig.from_environment()
        self.config.validate()

    def get_http_timeout(self, operation_type: str = "default") -> tuple:
        """
        Get HTTP timeout configuration for specific operation types.

        Args:
            operation_type: Type of HTTP operation (scraping, translation, image)

        Returns:
            Tuple of (connect_timeout, read_timeout)
        """
        if operation_type == "translation":
            return self.config.get_translation_timeout_tuple()
        return self.config.get_http_timeout_tuple()

    def get_page_load_timeout(self) -> int:
        """Get the browser page-load timeout in seconds."""
        return self.config.page_load_timeout


# Global timeout manager instance
_timeout_manager: Optional[TimeoutManager] = None


def get_timeout_manager() -> TimeoutManager:
    """Get the global timeout manager instance."""
    global _timeout_manager
    if _timeout_manager is None:
        _timeout_manager = TimeoutManager()
    return _timeout_manager

