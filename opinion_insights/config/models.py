"""
Configuration data models for Opinion Insights.

This module defines the core data structures used for configuration management,
including site-specific selector lists, translation API settings and the
scraping limits applied to a single run.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


# An ordered fallback list of CSS locators for one logical field.
SelectorList = Tuple[str, ...]


def as_selector_list(selectors) -> SelectorList:
    """Normalize a string or iterable of strings into a SelectorList."""
    if isinstance(selectors, str):
        selectors = [selectors]
    return tuple(s.strip() for s in selectors if isinstance(s, str) and s.strip())


@dataclass
class SiteConfig:
    """Configuration for site-specific opinion scraping."""

    domain: str
    listing_url: str
    link_selectors: List[SelectorList]
    title_selectors: SelectorList
    body_selectors: SelectorList
    image_selectors: SelectorList = ()
    consent_selector: Optional[str] = None

    def __post_init__(self):
        """Normalize selector lists and validate configuration."""
        if not self.domain:
            raise ValueError("Domain cannot be empty")
        self.link_selectors = [as_selector_list(s) for s in self.link_selectors]
        self.link_selectors = [s for s in self.link_selectors if s]
        self.title_selectors = as_selector_list(self.title_selectors)
        self.body_selectors = as_selector_list(self.body_selectors)
        self.image_selectors = as_selector_list(self.image_selectors)
        if not self.link_selectors:
            raise ValueError("At least one link selector list is required")
        if not self.title_selectors:
            raise ValueError("Title selectors cannot be empty")
        if not self.body_selectors:
            raise ValueError("Body selectors cannot be empty")


@dataclass
class TranslationAPIConfig:
    """Configuration for the external translation endpoint."""

    endpoint_url: str = "https://rapid-translate-multi-traduction.p.rapidapi.com/t"
    api_key: Optional[str] = None
    api_host: Optional[str] = None
    source_lang: str = "es"
    target_lang: str = "en"
    timeout_seconds: int = 15
    max_retries: int = 0
    retry_delay_seconds: float = 1.0
    inter_call_delay_seconds: float = 1.0

    def __post_init__(self):
        """Validate translation configuration."""
        if self.timeout_seconds <= 0:
            raise ValueError("Timeout must be positive")
        if self.max_retries < 0:
            raise ValueError("Max retries must be non-negative")
        if self.retry_delay_seconds < 0:
            raise ValueError("Retry delay must be non-negative")
        if self.inter_call_delay_seconds < 0:
            raise ValueError("Inter-call delay must be non-negative")

    def __repr__(self) -> str:
        # Keep the credential out of logs and tracebacks
        key = "***" if self.api_key else None
        return (
            f"TranslationAPIConfig(endpoint_url={self.endpoint_url!r}, api_key={key!r}, "
            f"source_lang={self.source_lang!r}, target_lang={self.target_lang!r})"
        )


@dataclass
class ScrapeSettings:
    """Limits and timings applied to one scraping run."""

    article_count: int = 5
    paragraph_cap: int = 3
    repeat_threshold: int = 2
    settle_delay_seconds: float = 2.0
    ready_timeout_ms: int = 10000
    page_load_timeout_seconds: int = 30
    session_backend: str = "selenium"
    headless: bool = False
    images_dir: Optional[str] = None
    content_preview_chars: int = 200

    def __post_init__(self):
        """Validate scrape settings."""
        if self.article_count <= 0:
            raise ValueError("Article count must be positive")
        if self.paragraph_cap <= 0:
            raise ValueError("Paragraph cap must be positive")
        if self.repeat_threshold < 0:
            raise ValueError("Repeat threshold must be non-negative")
        if self.settle_delay_seconds < 0:
            raise ValueError("Settle delay must be non-negative")
        if self.session_backend not in ("selenium", "static"):
            raise ValueError(f"Unknown session backend: {self.session_backend}")


@dataclass
class SystemConfig:
    """Overall system configuration combining all settings."""

    site_configs: Dict[str, SiteConfig] = field(default_factory=dict)
    translation_config: TranslationAPIConfig = field(default_factory=TranslationAPIConfig)
    scrape_settings: ScrapeSettings = field(default_factory=ScrapeSettings)

    enable_structured_logging: bool = True
    log_level: str = "INFO"
