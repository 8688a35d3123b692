"""
Configuration management module for Opinion Insights.

This module provides configuration management capabilities including:
- Site-specific selector fallback lists
- Translation endpoint settings (credential injected from the environment)
- Scraping limits and timings
- Environment variable, .env and file-based configuration loading
- Configuration validation and defaults
"""

from .models import SiteConfig, SelectorList, TranslationAPIConfig, ScrapeSettings, SystemConfig
from .manager import ConfigManager, get_config_manager, get_system_config
from .sites import (
    ELPAIS_CONFIG,
    GENERIC_CONFIG,
    get_site_config_by_domain,
    get_site_config_for_url,
    get_all_supported_domains
)
from .validation import (
    ConfigValidator,
    ValidationError,
    ConfigurationError,
    validate_configuration
)
from .defaults import (
    get_default_translation_config,
    get_default_scrape_settings,
    get_default_system_config,
    apply_configuration_defaults,
    create_test_config
)

__all__ = [
    # Data models
    "SiteConfig",
    "SelectorList",
    "TranslationAPIConfig",
    "ScrapeSettings",
    "SystemConfig",

    # Configuration manager
    "ConfigManager",
    "get_config_manager",
    "get_system_config",

    # Site configurations
    "ELPAIS_CONFIG",
    "GENERIC_CONFIG",
    "get_site_config_by_domain",
    "get_site_config_for_url",
    "get_all_supported_domains",

    # Validation
    "ConfigValidator",
    "ValidationError",
    "ConfigurationError",
    "validate_configuration",

    # Defaults
    "get_default_translation_config",
    "get_default_scrape_settings",
    "get_default_system_config",
    "apply_configuration_defaults",
    "create_test_config"
]
