"""
Unit tests for listing-page link collection.
"""

import pytest
from unittest.mock import Mock

from opinion_insights.scraper.cancellation import CancellationToken
from opinion_insights.scraper.errors import NavigationFailed, OperationCancelled
from opinion_insights.scraper.fetcher import FetchResult, HTTPFetcher
from opinion_insights.scraper.links import LinkCollector
from opinion_insights.scraper.session import StaticPageSession
from tests.fakes import FakeElement, FakePageSession


LISTING = "https://elpais.com/opinion/"


def _anchors(*hrefs):
    return [FakeElement("link", href=href) for href in hrefs]


class TestLinkCollector:
    """Test cases for LinkCollector class."""

    def setup_method(self):
        self.collector = LinkCollector(ready_timeout_ms=100)

    def test_duplicates_removed_and_limit_applied(self):
        """Eight anchors with two duplicates and limit 5 give 5 unique URLs in first-seen order."""
        hrefs = [
            "https://elpais.com/opinion/a.html",
            "https://elpais.com/opinion/b.html",
            "https://elpais.com/opinion/a.html",
            "https://elpais.com/opinion/c.html",
            "https://elpais.com/opinion/b.html",
            "https://elpais.com/opinion/d.html",
            "https://elpais.com/opinion/e.html",
            "https://elpais.com/opinion/f.html",
        ]
        session = FakePageSession({LISTING: {"article h2 a": _anchors(*hrefs)}})

        links = self.collector.collect_links(session, LISTING, [("article h2 a",)], limit=5)

        assert links == [
            "https://elpais.com/opinion/a.html",
            "https://elpais.com/opinion/b.html",
            "https://elpais.com/opinion/c.html",
            "https://elpais.com/opinion/d.html",
            "https://elpais.com/opinion/e.html",
        ]

    def test_fewer_links_than_limit(self):
        """All unique links are returned when fewer than the limit exist."""
        session = FakePageSession({LISTING: {"article h2 a": _anchors("https://x/1", "https://x/2")}})

        links = self.collector.collect_links(session, LISTING, [("article h2 a",)], limit=5)

        assert links == ["https://x/1", "https://x/2"]

    def test_missing_and_empty_hrefs_skipped(self):
        """Anchors without an href contribute nothing."""
        anchors = [FakeElement("no href"), FakeElement("empty", href=""), *_anchors("https://x/1")]
        session = FakePageSession({LISTING: {"article h2 a": anchors}})

        links = self.collector.collect_links(session, LISTING, [("article h2 a",)], limit=5)

        assert links == ["https://x/1"]

    def test_later_selector_lists_fill_up_to_limit(self):
        """Alternate layouts are consulted until the limit is reached."""
        session = FakePageSession({LISTING: {
            "article h2 a": _anchors("https://x/1", "https://x/2"),
            "div.c_t a": _anchors("https://x/2", "https://x/3", "https://x/4"),
        }})

        links = self.collector.collect_links(
            session, LISTING, [("article h2 a",), ("div.c_t a",)], limit=3
        )

        assert links == ["https://x/1", "https://x/2", "https://x/3"]

    def test_later_selector_lists_not_queried_once_limit_reached(self):
        """Nothing beyond the limit is looked up."""
        session = FakePageSession({LISTING: {
            "article h2 a": _anchors("https://x/1", "https://x/2"),
            "div.c_t a": _anchors("https://x/3"),
        }})

        self.collector.collect_links(session, LISTING, [("article h2 a",), ("div.c_t a",)], limit=2)

        assert "div.c_t a" not in session.queries

    def test_no_anchors_returns_empty(self):
        """A listing page without matches yields an empty list."""
        session = FakePageSession({LISTING: {}})

        assert self.collector.collect_links(session, LISTING, [("article h2 a",)], limit=5) == []

    def test_invalid_locator_falls_through_to_next(self):
        """A malformed custom locator is skipped like a locator without matches."""
        fetcher = Mock(spec=HTTPFetcher)
        fetcher.fetch.return_value = FetchResult(
            url=LISTING,
            content='<article><h2><a href="/opinion/uno.html">Uno</a></h2></article>',
            status_code=200,
            headers={},
            success=True
        )
        session = StaticPageSession(fetcher=fetcher)

        links = self.collector.collect_links(session, LISTING, [("h2 a[href", "article h2 a")], limit=5)

        assert links == ["https://elpais.com/opinion/uno.html"]

    def test_navigation_failure_propagates(self):
        """The caller decides what an unreachable listing page means."""
        session = FakePageSession({})

        with pytest.raises(NavigationFailed):
            self.collector.collect_links(session, LISTING, [("article h2 a",)], limit=5)

    def test_cancelled_before_navigation(self):
        """A cancelled token stops collection before any navigation."""
        token = CancellationToken()
        token.cancel()
        collector = LinkCollector(cancellation=token)
        session = FakePageSession({LISTING: {}})

        with pytest.raises(OperationCancelled):
            collector.collect_links(session, LISTING, [("article h2 a",)], limit=5)
        assert session.navigations == []
