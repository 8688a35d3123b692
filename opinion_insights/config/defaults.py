"""
Default configuration values and factory functions.

This module provides default configurations and factory functions for creating
configuration objects with sensible defaults when values are missing or invalid.
"""

from .models import TranslationAPIConfig, ScrapeSettings, SystemConfig
from .validation import VALID_LOG_LEVELS


def get_default_translation_config() -> TranslationAPIConfig:
    """
    Get default translation endpoint configuration.

    Returns:
        TranslationAPIConfig with sensible defaults
    """
    return TranslationAPIConfig(
        endpoint_url="https://rapid-translate-multi-traduction.p.rapidapi.com/t",
        api_key=None,   # Must be supplied by the environment
        api_host=None,  # Derived from the endpoint URL
        source_lang="es",
        target_lang="en",
        timeout_seconds=15,
        max_retries=0,
        retry_delay_seconds=1.0,
        inter_call_delay_seconds=1.0
    )


def get_default_scrape_settings() -> ScrapeSettings:
    """
    Get default scrape settings.

    Returns:
        ScrapeSettings with sensible defaults
    """
    return ScrapeSettings()


def get_default_system_config() -> SystemConfig:
    """
    Get complete default system configuration.

    Returns:
        SystemConfig with all default values
    """
    from .sites import SITE_CONFIGS

    return SystemConfig(
        site_configs=SITE_CONFIGS.copy(),
        translation_config=get_default_translation_config(),
        scrape_settings=get_default_scrape_settings(),
        enable_structured_logging=True,
        log_level="INFO"
    )


def apply_configuration_defaults(config: SystemConfig) -> SystemConfig:
    """
    Apply default values to missing or invalid configuration fields.

    Args:
        config: SystemConfig to apply defaults to

    Returns:
        SystemConfig with defaults applied
    """
    defaults = get_default_system_config()
    translation = config.translation_config
    default_translation = defaults.translation_config

    if not translation.endpoint_url:
        translation.endpoint_url = default_translation.endpoint_url

    if not translation.source_lang:
        translation.source_lang = default_translation.source_lang

    if not translation.target_lang:
        translation.target_lang = default_translation.target_lang

    if translation.timeout_seconds <= 0:
        translation.timeout_seconds = default_translation.timeout_seconds

    if translation.max_retries < 0:
        translation.max_retries = default_translation.max_retries

    if translation.retry_delay_seconds < 0:
        translation.retry_delay_seconds = default_translation.retry_delay_seconds

    if translation.inter_call_delay_seconds < 0:
        translation.inter_call_delay_seconds = default_translation.inter_call_delay_seconds

    settings = config.scrape_settings
    default_settings = defaults.scrape_settings

    for name in ("article_count", "paragraph_cap", "ready_timeout_ms", "page_load_timeout_seconds"):
        if getattr(settings, name) <= 0:
            setattr(settings, name, getattr(default_settings, name))

    if settings.repeat_threshold < 0:
        settings.repeat_threshold = default_settings.repeat_threshold

    if settings.settle_delay_seconds < 0:
        settings.settle_delay_seconds = default_settings.settle_delay_seconds

    if settings.session_backend not in ("selenium", "static"):
        settings.session_backend = default_settings.session_backend

    if not config.log_level or config.log_level not in VALID_LOG_LEVELS:
        config.log_level = defaults.log_level

    # Ensure we have at least the default site configurations
    if not config.site_configs:
        config.site_configs = defaults.site_configs.copy()
    else:
        for domain, site_config in defaults.site_configs.items():
            if domain not in config.site_configs:
                config.site_configs[domain] = site_config

    return config


def create_test_config() -> SystemConfig:
    """Create configuration optimized for testing: no delays, static pages."""
    config = get_default_system_config()
    config.enable_structured_logging = False
    config.log_level = "CRITICAL"
    config.translation_config.api_key = "test-key"
    config.translation_config.timeout_seconds = 1
    config.translation_config.inter_call_delay_seconds = 0.0
    config.scrape_settings.settle_delay_seconds = 0.0
    config.scrape_settings.session_backend = "static"
    return config
