"""
Error taxonomy for page scraping.

Field- and article-scoped errors are converted to absent values where they
occur; only SessionFatal and OperationCancelled propagate to the top level.
"""

from typing import Dict, Optional


class ScraperError(Exception):
    """Base exception for scraping errors."""

    def __init__(self, message: str, error_type: str = "SCRAPER_ERROR", details: Optional[Dict] = None):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}


class FieldNotFound(ScraperError):
    """A selector list was exhausted without a usable match."""

    def __init__(self, field: str, selectors=(), url: Optional[str] = None):
        super().__init__(
            f"No match for field '{field}'",
            "FIELD_NOT_FOUND",
            {"field": field, "selectors": list(selectors), "url": url}
        )
        self.field = field


class NavigationFailed(ScraperError):
    """A single page could not be loaded; the batch continues."""

    def __init__(self, url: str, reason: str = ""):
        super().__init__(
            f"Navigation to {url} failed: {reason}" if reason else f"Navigation to {url} failed",
            "NAVIGATION_FAILED",
            {"url": url, "reason": reason}
        )
        self.url = url


class SessionFatal(ScraperError):
    """The page session cannot be created or is no longer usable."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message, "SESSION_FATAL", details)


class OperationCancelled(ScraperError):
    """The run was cancelled cooperatively."""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message, "CANCELLED")
