"""
Page session capability and a static-HTML implementation.

A PageSession is a live, navigable, queryable page. The core scraping
components only use the interface below; the Selenium-backed session lives in
browser.py. StaticPageSession serves the same interface from plain HTTP
responses parsed with BeautifulSoup, for pages that render server-side.
"""

import re
from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from ..config.logging import StructuredLogger, get_logger
from .errors import NavigationFailed
from .fetcher import HTTPFetcher


# Attributes whose values a browser reports as absolute URLs
URL_ATTRIBUTES = {"href", "src", "data-src"}


class ElementHandle(ABC):
    """A single element matched by a locator."""

    @abstractmethod
    def text(self) -> str:
        """Rendered text of the element."""

    @abstractmethod
    def attribute(self, name: str) -> Optional[str]:
        """Attribute value, or None when the attribute is absent."""


class PageSession(ABC):
    """A single shared, navigable page; one operation at a time."""

    @abstractmethod
    def navigate(self, url: str) -> None:
        """
        Load a URL.

        Raises:
            NavigationFailed: The page could not be loaded
            SessionFatal: The session itself is unusable
        """

    @abstractmethod
    def wait_for_ready(self, timeout_ms: int) -> bool:
        """Block until a baseline DOM-ready signal; False on timeout."""

    @abstractmethod
    def find_all(self, locator: str) -> List[ElementHandle]:
        """Elements matching a CSS locator; empty when nothing matches."""

    def close(self) -> None:
        """Release the session."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class StaticElement(ElementHandle):
    """ElementHandle over a BeautifulSoup tag."""

    def __init__(self, tag: Tag, base_url: str):
        self.tag = tag
        self.base_url = base_url

    def text(self) -> str:
        return re.sub(r'\s+', ' ', self.tag.get_text()).strip()

    def attribute(self, name: str) -> Optional[str]:
        value = self.tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            value = " ".join(value)
        if name in URL_ATTRIBUTES and value:
            return urljoin(self.base_url, value)
        return value

    def __repr__(self) -> str:
        return f"StaticElement(<{self.tag.name}>)"


class StaticPageSession(PageSession):
    """
    Page session over server-rendered HTML.

    No JavaScript runs, so content injected client-side is not visible.
    """

    def __init__(self, fetcher: Optional[HTTPFetcher] = None, logger: Optional[StructuredLogger] = None):
        self.fetcher = fetcher or HTTPFetcher()
        self.logger = logger or get_logger(__name__)
        self.soup: Optional[BeautifulSoup] = None
        self.current_url: Optional[str] = None

    def navigate(self, url: str) -> None:
        self.soup = None
        self.current_url = None

        result = self.fetcher.fetch(url)
        if not result.success:
            raise NavigationFailed(url, result.error_message or "fetch failed")

        self.soup = BeautifulSoup(result.content, "html.parser")
        self.current_url = result.url
        self.logger.debug("Static page loaded", url=result.url, content_length=len(result.content))

    def wait_for_ready(self, timeout_ms: int) -> bool:
        # Parsing is synchronous; a loaded document is always complete
        return self.soup is not None

    def find_all(self, locator: str) -> List[ElementHandle]:
        if self.soup is None:
            return []
        try:
            tags = self.soup.select(locator)
        except SelectorSyntaxError as e:
            self.logger.warning("Invalid locator skipped", locator=locator, error=str(e))
            return []
        return [StaticElement(tag, self.current_url) for tag in tags]

    def close(self) -> None:
        self.soup = None
        self.fetcher.close()
