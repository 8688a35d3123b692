"""
Per-article field extraction with isolated, per-field fallbacks.

This module pulls the title, the first body paragraphs and the cover image
URL from one article page. Each field is resolved over its own fallback list
of selectors, and a failure in one field never prevents extraction of the
others. A page that cannot be loaded yields an empty record so the batch can
continue with the next link.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from ..config.logging import StructuredLogger, get_logger
from ..config.models import SiteConfig
from .cancellation import CancellationToken
from .errors import FieldNotFound, NavigationFailed, OperationCancelled, SessionFatal
from .resolver import SelectorResolver
from .session import PageSession


# Attributes holding an image URL, in preference order
IMAGE_ATTRIBUTES = ("src", "data-src", "content")

# Errors that must escape field isolation
PROPAGATING_ERRORS = (SessionFatal, OperationCancelled)


@dataclass(frozen=True)
class ArticleRecord:
    """Fields extracted from one article page."""

    title: str
    content: str
    image_url: Optional[str] = None
    url: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.content and self.image_url is None


class ArticleExtractor:
    """
    Extract title, body and cover image from one article page.

    The extractor waits for DOM readiness and then a fixed settle delay for
    client-rendered content. The delay is a heuristic: slow pages may still be
    captured incompletely.
    """

    def __init__(
        self,
        site_config: SiteConfig,
        resolver: Optional[SelectorResolver] = None,
        paragraph_cap: int = 3,
        settle_delay_seconds: float = 2.0,
        ready_timeout_ms: int = 10000,
        logger: Optional[StructuredLogger] = None,
        cancellation: Optional[CancellationToken] = None
    ):
        """
        Initialize the extractor.

        Args:
            site_config: Selector lists for the site being scraped
            resolver: Selector resolver shared with other components
            paragraph_cap: Maximum number of paragraphs taken from the body
            settle_delay_seconds: Fixed wait after DOM readiness
            ready_timeout_ms: Timeout for the DOM-ready signal
            logger: Structured logger (observability collaborator)
            cancellation: Token observed before navigation and during the settle delay
        """
        self.site_config = site_config
        self.logger = logger or get_logger(__name__)
        self.resolver = resolver or SelectorResolver(self.logger)
        self.paragraph_cap = paragraph_cap
        self.settle_delay_seconds = settle_delay_seconds
        self.ready_timeout_ms = ready_timeout_ms
        self.cancellation = cancellation or CancellationToken()

    def extract(self, session: PageSession, article_url: str) -> ArticleRecord:
        """
        Extract one ArticleRecord.

        Args:
            session: Page session to navigate
            article_url: URL of the article

        Returns:
            ArticleRecord; fully empty when the page could not be loaded

        Raises:
            SessionFatal: The session became unusable
            OperationCancelled: The run was cancelled
        """
        self.cancellation.raise_if_cancelled()
        self.logger.set_context(component="article_extractor", url=article_url)

        try:
            session.navigate(article_url)
        except PROPAGATING_ERRORS:
            raise
        except NavigationFailed as e:
            self.logger.warning("Article navigation failed", url=article_url, error=str(e))
            return ArticleRecord(title="", content="", image_url=None, url=article_url)
        except Exception as e:
            self.logger.error("Unexpected error loading article", error=e, url=article_url)
            return ArticleRecord(title="", content="", image_url=None, url=article_url)

        try:
            session.wait_for_ready(self.ready_timeout_ms)
        except PROPAGATING_ERRORS:
            raise
        except Exception as e:
            self.logger.error("Unexpected error waiting for article", error=e, url=article_url)
            return ArticleRecord(title="", content="", image_url=None, url=article_url)
        self.cancellation.wait(self.settle_delay_seconds)

        title = self._extract_field("title", self._extract_title, session, article_url, "")
        content = self._extract_field("content", self._extract_content, session, article_url, "")
        image_url = self._extract_field("image", self._extract_image, session, article_url, None)

        return ArticleRecord(title=title, content=content, image_url=image_url, url=article_url)

    def _extract_field(self, field, extract, session, url, absent):
        """Run one field extractor, converting any failure to the absent value."""
        try:
            value = extract(session)
        except PROPAGATING_ERRORS:
            raise
        except Exception as e:
            self.logger.warning("Field extraction failed", field=field, url=url,
                                error=str(e), error_type=type(e).__name__)
            return absent

        if value is None or value == "":
            not_found = FieldNotFound(field, self._selectors_for(field), url)
            self.logger.info("Field not found", field=field, url=url,
                             error_type=not_found.error_type, details=not_found.details)
            return absent
        return value

    def _selectors_for(self, field: str) -> Sequence[str]:
        return {
            "title": self.site_config.title_selectors,
            "content": self.site_config.body_selectors,
            "image": self.site_config.image_selectors,
        }[field]

    def _extract_title(self, session: PageSession) -> str:
        # Only the first matching locator is considered
        for element in self.resolver.resolve(session, self.site_config.title_selectors):
            text = element.text().strip()
            if text:
                return text
        return ""

    def _extract_content(self, session: PageSession) -> str:
        # Unlike the title, an all-empty match falls through to the next locator
        for locator, paragraphs in self.resolver.resolve_each(
            session, self.site_config.body_selectors, max_results=self.paragraph_cap
        ):
            texts = [p.text().strip() for p in paragraphs]
            texts = [t for t in texts if t]
            if texts:
                return " ".join(texts)
            self.logger.debug("Paragraph locator matched only empty text", locator=locator)
        return ""

    def _extract_image(self, session: PageSession) -> Optional[str]:
        elements = self.resolver.resolve(session, self.site_config.image_selectors, max_results=1)
        if not elements:
            return None
        for name in IMAGE_ATTRIBUTES:
            value = elements[0].attribute(name)
            if value:
                return value
        return None
