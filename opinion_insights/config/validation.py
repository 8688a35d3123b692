"""
Configuration validation utilities.

This module provides validation functions and error classes for configuration
management, ensuring that all configuration values are valid and complete.
"""

from typing import List, Any
import re
from urllib.parse import urlparse

from .models import SiteConfig, TranslationAPIConfig, ScrapeSettings, SystemConfig


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""
    pass


class ValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    def __init__(self, field: str, message: str, value: Any = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"Validation error for '{field}': {message}")


class ConfigValidator:
    """Validates configuration objects and provides detailed error reporting."""

    @staticmethod
    def validate_site_config(config: SiteConfig) -> List[ValidationError]:
        """
        Validate a SiteConfig object.

        Args:
            config: SiteConfig to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not config.domain or not config.domain.strip():
            errors.append(ValidationError("domain", "Domain cannot be empty"))
        elif config.domain != "*":  # Allow wildcard domain
            if not ConfigValidator._is_valid_domain(config.domain):
                errors.append(ValidationError("domain", "Invalid domain format", config.domain))

        if config.listing_url and not ConfigValidator._is_valid_url(config.listing_url):
            errors.append(ValidationError("listing_url", "Invalid URL format", config.listing_url))

        if not config.link_selectors:
            errors.append(ValidationError("link_selectors", "At least one link selector list is required"))

        for i, selectors in enumerate(config.link_selectors):
            errors.extend(ConfigValidator._validate_selector_list(f"link_selectors[{i}]", selectors))

        for name in ("title_selectors", "body_selectors", "image_selectors"):
            selectors = getattr(config, name)
            if not selectors and name != "image_selectors":
                errors.append(ValidationError(name, "Selector list cannot be empty"))
            errors.extend(ConfigValidator._validate_selector_list(name, selectors))

        if config.consent_selector and not ConfigValidator._is_valid_css_selector(config.consent_selector):
            errors.append(ValidationError("consent_selector", "Invalid CSS selector syntax", config.consent_selector))

        return errors

    @staticmethod
    def validate_translation_config(config: TranslationAPIConfig) -> List[ValidationError]:
        """
        Validate TranslationAPIConfig object.

        Args:
            config: TranslationAPIConfig to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not config.endpoint_url or not ConfigValidator._is_valid_url(config.endpoint_url):
            errors.append(ValidationError("endpoint_url", "Invalid URL format", config.endpoint_url))

        for name in ("source_lang", "target_lang"):
            code = getattr(config, name)
            if not code or not ConfigValidator._is_valid_language_code(code):
                errors.append(ValidationError(name, "Invalid language code format", code))

        if config.timeout_seconds <= 0:
            errors.append(ValidationError("timeout_seconds", "Timeout must be positive", config.timeout_seconds))

        if config.max_retries < 0:
            errors.append(ValidationError("max_retries", "Max retries must be non-negative", config.max_retries))
        elif config.max_retries > 10:
            errors.append(ValidationError("max_retries", "Max retries should not exceed 10", config.max_retries))

        if config.retry_delay_seconds < 0:
            errors.append(ValidationError("retry_delay_seconds", "Retry delay must be non-negative", config.retry_delay_seconds))

        if config.inter_call_delay_seconds < 0:
            errors.append(ValidationError(
                "inter_call_delay_seconds",
                "Inter-call delay must be non-negative",
                config.inter_call_delay_seconds
            ))

        return errors

    @staticmethod
    def validate_scrape_settings(settings: ScrapeSettings) -> List[ValidationError]:
        """
        Validate ScrapeSettings object.

        Args:
            settings: ScrapeSettings to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if settings.article_count <= 0:
            errors.append(ValidationError("article_count", "Article count must be positive", settings.article_count))

        if settings.paragraph_cap <= 0:
            errors.append(ValidationError("paragraph_cap", "Paragraph cap must be positive", settings.paragraph_cap))

        if settings.repeat_threshold < 0:
            errors.append(ValidationError("repeat_threshold", "Repeat threshold must be non-negative", settings.repeat_threshold))

        if settings.settle_delay_seconds < 0:
            errors.append(ValidationError("settle_delay_seconds", "Settle delay must be non-negative", settings.settle_delay_seconds))

        if settings.ready_timeout_ms <= 0:
            errors.append(ValidationError("ready_timeout_ms", "Ready timeout must be positive", settings.ready_timeout_ms))

        if settings.page_load_timeout_seconds <= 0:
            errors.append(ValidationError(
                "page_load_timeout_seconds",
                "Page load timeout must be positive",
                settings.page_load_timeout_seconds
            ))

        if settings.session_backend not in ("selenium", "static"):
            errors.append(ValidationError("session_backend", "Unknown session backend", settings.session_backend))

        return errors

    @staticmethod
    def validate_system_config(config: SystemConfig) -> List[ValidationError]:
        """
        Validate complete SystemConfig object.

        Args:
            config: SystemConfig to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        errors.extend(ConfigValidator.validate_translation_config(config.translation_config))
        errors.extend(ConfigValidator.validate_scrape_settings(config.scrape_settings))

        for domain, site_config in config.site_configs.items():
            site_errors = ConfigValidator.validate_site_config(site_config)
            # Prefix errors with domain for clarity
            for error in site_errors:
                errors.append(ValidationError(
                    f"site_configs[{domain}].{error.field}",
                    error.message,
                    error.value
                ))

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(ValidationError("log_level", "Invalid log level", config.log_level))

        return errors

    @staticmethod
    def _validate_selector_list(name: str, selectors) -> List[ValidationError]:
        errors = []
        for i, selector in enumerate(selectors):
            if not ConfigValidator._is_valid_css_selector(selector):
                errors.append(ValidationError(f"{name}[{i}]", "Invalid CSS selector syntax", selector))
        return errors

    @staticmethod
    def _is_valid_domain(domain: str) -> bool:
        """Check if domain has valid format."""
        domain_pattern = re.compile(
            r'^(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)*[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$'
        )
        return bool(domain_pattern.match(domain))

    @staticmethod
    def _is_valid_css_selector(selector: str) -> bool:
        """Basic validation of CSS selector syntax."""
        if not selector or not selector.strip():
            return False

        # Simplified check; the page session reports real syntax errors
        invalid_chars = ['<', '{', '}']
        if any(char in selector for char in invalid_chars):
            return False
        return selector.count('[') == selector.count(']') and selector.count('(') == selector.count(')')

    @staticmethod
    def _is_valid_language_code(code: str) -> bool:
        """Check if language code has valid format (ISO 639-1)."""
        return len(code) == 2 and code.isalpha() and code.islower()

    @staticmethod
    def _is_valid_url(url: str) -> bool:
        """Check if URL has valid format."""
        try:
            result = urlparse(url)
            return all([result.scheme, result.netloc]) and result.scheme in ("http", "https")
        except (TypeError, ValueError, AttributeError):
            return False


def validate_configuration(config: SystemConfig, raise_on_error: bool = False) -> List[ValidationError]:
    """
    Validate a complete system configuration.

    Args:
        config: SystemConfig to validate
        raise_on_error: If True, raise ConfigurationError on validation failure

    Returns:
        List of validation errors (empty if valid)

    Raises:
        ConfigurationError: If validation fails and raise_on_error is True
    """
    errors = ConfigValidator.validate_system_config(config)

    if errors and raise_on_error:
        error_messages = [str(error) for error in errors]
        raise ConfigurationError("Configuration validation failed:\n" + "\n".join(error_messages))

    return errors
