"""
Opinion scraper module for Opinion Insights.

This module provides the page session capability (Selenium or static HTML),
ordered selector fallback resolution, listing-page link collection,
per-article field extraction and cover image download.
"""

# Lazy imports keep selenium out of code paths that only need static pages
__all__ = [
    'PageSession',
    'ElementHandle',
    'StaticPageSession',
    'SeleniumPageSession',
    'SelectorResolver',
    'LinkCollector',
    'ArticleExtractor',
    'ArticleRecord',
    'ImageDownloader',
    'HTTPFetcher',
    'FetchResult',
    'CancellationToken',
]

_EXPORTS = {
    'PageSession': '.session',
    'ElementHandle': '.session',
    'StaticPageSession': '.session',
    'SeleniumPageSession': '.browser',
    'SelectorResolver': '.resolver',
    'LinkCollector': '.links',
    'ArticleExtractor': '.extractor',
    'ArticleRecord': '.extractor',
    'ImageDownloader': '.images',
    'HTTPFetcher': '.fetcher',
    'FetchResult': '.fetcher',
    'CancellationToken': '.cancellation',
}


def __getattr__(name):
    if name in _EXPORTS:
        import importlib
        module = importlib.import_module(_EXPORTS[name], __name__)
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
