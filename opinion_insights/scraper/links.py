"""
Collection of article links from a listing page.
"""

from typing import List, Optional, Sequence

from ..config.logging import StructuredLogger, get_logger
from .cancellation import CancellationToken
from .resolver import SelectorResolver
from .session import PageSession


class LinkCollector:
    """
    Gather unique article URLs from a listing page.

    Each selector list (primary markup first, then alternate layouts) is
    resolved in turn and its anchors' hrefs are appended in first-seen order
    until the limit is reached.
    """

    def __init__(
        self,
        resolver: Optional[SelectorResolver] = None,
        ready_timeout_ms: int = 10000,
        logger: Optional[StructuredLogger] = None,
        cancellation: Optional[CancellationToken] = None
    ):
        self.logger = logger or get_logger(__name__)
        self.resolver = resolver or SelectorResolver(self.logger)
        self.ready_timeout_ms = ready_timeout_ms
        self.cancellation = cancellation or CancellationToken()

    def collect_links(
        self,
        session: PageSession,
        listing_url: str,
        selector_lists: Sequence[Sequence[str]],
        limit: int
    ) -> List[str]:
        """
        Collect at most `limit` unique article URLs.

        Args:
            session: Page session to navigate
            listing_url: URL of the listing page
            selector_lists: Anchor selector lists in preference order
            limit: Maximum number of links to return

        Returns:
            Unique URLs in first-seen order; empty when nothing matched

        Raises:
            NavigationFailed: The listing page could not be loaded
        """
        self.cancellation.raise_if_cancelled()
        self.logger.set_context(component="link_collector", url=listing_url)

        session.navigate(listing_url)
        if session.wait_for_ready(self.ready_timeout_ms):
            self.logger.debug("Listing page ready", url=listing_url)

        links: List[str] = []
        seen = set()

        for index, selectors in enumerate(selector_lists):
            if len(links) >= limit:
                break

            anchors = self.resolver.resolve(session, selectors)
            added = 0
            for anchor in anchors:
                href = anchor.attribute("href")
                if not href or href in seen:
                    continue
                seen.add(href)
                links.append(href)
                added += 1
                if len(links) >= limit:
                    break

            self.logger.debug(
                "Selector list processed",
                selector_list=index,
                anchors=len(anchors),
                links_added=added
            )

        if not links:
            self.logger.warning("No article links found on listing page", url=listing_url)
        else:
            self.logger.info("Collected article links", url=listing_url, count=len(links), limit=limit)

        return links
