"""
Shared fixtures.
"""

import pytest

from opinion_insights.config.models import SiteConfig


@pytest.fixture
def site_config():
    """Minimal site configuration with two-level fallbacks."""
    return SiteConfig(
        domain="example.com",
        listing_url="https://example.com/opinion/",
        link_selectors=[("article h2 a",), ("div.c_t a",)],
        title_selectors=("h1.title", "h1"),
        body_selectors=("div.body p", "article p"),
        image_selectors=("figure img", "meta[property='og:image']"),
    )
