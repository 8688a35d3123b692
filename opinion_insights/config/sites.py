"""
Site-specific configurations for opinion scraping.

This module contains predefined configurations for supported news websites,
expressed as ordered fallback lists of CSS selectors for each field.
"""

from typing import Optional
from urllib.parse import urlparse

from .models import SiteConfig


# El País opinion section
ELPAIS_CONFIG = SiteConfig(
    domain="elpais.com",
    listing_url="https://elpais.com/opinion/",
    link_selectors=[
        # Current listing markup
        ("article h2 a",),
        # Older layouts
        ("article header h2 a", "article h2.c_t a"),
        ("div.c_t a", "article .c_h a"),
    ],
    title_selectors=(
        "article h1",
        "h1.a_t",
        "header h1",
        "h1",
    ),
    body_selectors=(
        "[data-dtm-region='articulo_cuerpo'] p",
        "div.a_c p",
        "article .article_body p",
        "article p",
    ),
    image_selectors=(
        "figure img",
        "article img",
        "meta[property='og:image']",
    ),
    consent_selector="#didomi-notice-agree-button",
)

# Generic fallback configuration for unknown sites
GENERIC_CONFIG = SiteConfig(
    domain="*",
    listing_url="",
    link_selectors=[
        ("article h2 a", "article h3 a"),
        ("h2 a", "h3 a"),
    ],
    title_selectors=("article h1", "h1", ".headline", ".title"),
    body_selectors=("article p", ".article-body p", ".content p", "main p"),
    image_selectors=("article figure img", "figure img", "meta[property='og:image']"),
)

# Registry of all supported site configurations
SITE_CONFIGS = {
    "elpais.com": ELPAIS_CONFIG,
    "www.elpais.com": ELPAIS_CONFIG,
    "*": GENERIC_CONFIG  # Fallback for unknown domains
}


def get_site_config_by_domain(domain: str, registry: Optional[dict] = None) -> SiteConfig:
    """
    Get site configuration for a specific domain.

    Args:
        domain: The domain name to get configuration for
        registry: Optional registry to search instead of the built-in one

    Returns:
        SiteConfig object for the domain, or generic config if not found
    """
    configs = registry if registry is not None else SITE_CONFIGS

    # Normalize domain (remove www. prefix if present)
    normalized_domain = (domain or "").lower()
    if normalized_domain.startswith("www."):
        normalized_domain = normalized_domain[4:]

    if normalized_domain in configs:
        return configs[normalized_domain]

    www_domain = f"www.{normalized_domain}"
    if www_domain in configs:
        return configs[www_domain]

    return configs.get("*", GENERIC_CONFIG)


def get_site_config_for_url(url: str, registry: Optional[dict] = None) -> SiteConfig:
    """Get site configuration for the domain of a URL."""
    try:
        domain = urlparse(url).netloc
    except (TypeError, ValueError):
        domain = ""
    return get_site_config_by_domain(domain, registry)


def get_all_supported_domains() -> list:
    """Get list of all explicitly supported domains."""
    return [domain for domain in SITE_CONFIGS.keys() if domain != "*"]
