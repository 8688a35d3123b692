"""
Configuration manager for loading and managing system configuration.

This module provides the ConfigManager class that handles loading configuration
from a .env file, environment variables, files, and default values with proper
validation. The translation credential is only ever read from the environment.
"""

import os
import json
from typing import Dict, Optional, Any
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .models import SystemConfig, TranslationAPIConfig, ScrapeSettings, SiteConfig
from .sites import SITE_CONFIGS, get_site_config_by_domain
from .validation import validate_configuration
from .defaults import apply_configuration_defaults, get_default_system_config
from .logging import get_logger


logger = get_logger(__name__)


def _env_int(name: str, current: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return current
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer environment value", variable=name)
        return current


def _env_float(name: str, current: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return current
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric environment value", variable=name)
        return current


def _env_bool(name: str, current: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return current
    return value.lower() in ("true", "1", "yes")


class ConfigManager:
    """Manages system configuration loading and validation."""

    def __init__(self, config_dir: Optional[str] = None, env_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Optional directory path for configuration files
            env_file: Optional .env file; defaults to searching from the working directory
        """
        self.config_dir = Path(config_dir) if config_dir else Path("config")
        self.env_file = env_file
        self._system_config: Optional[SystemConfig] = None

    def load_configuration(self) -> SystemConfig:
        """
        Load complete system configuration from all sources.

        Returns:
            SystemConfig object with all loaded settings
        """
        if self._system_config is None:
            self._system_config = self._build_system_config()
        return self._system_config

    def _build_system_config(self) -> SystemConfig:
        """Build system configuration from all sources."""
        # Existing environment variables win over the .env file
        load_dotenv(self.env_file or find_dotenv(usecwd=True), override=False)

        try:
            system_config = SystemConfig(
                site_configs=self._load_site_configs(),
                translation_config=self._load_translation_config(),
                scrape_settings=self._load_scrape_settings()
            )

            self._apply_environment_overrides(system_config)

            # Apply defaults for any missing or invalid values
            system_config = apply_configuration_defaults(system_config)

            validation_errors = validate_configuration(system_config, raise_on_error=False)
            if validation_errors:
                logger.warning(
                    "Configuration validation warnings",
                    issue_count=len(validation_errors),
                    issues=[str(error) for error in validation_errors[:5]]
                )

            return system_config

        except (ValueError, TypeError) as e:
            logger.error("Configuration loading failed, using default configuration", error=e)
            return get_default_system_config()

    def _load_translation_config(self) -> TranslationAPIConfig:
        """Load translation endpoint configuration from environment variables."""
        config = TranslationAPIConfig()

        # RAPIDAPI_KEY is accepted for compatibility with existing .env files
        api_key = os.getenv("TRANSLATION_API_KEY") or os.getenv("RAPIDAPI_KEY")
        if api_key:
            config.api_key = api_key

        if endpoint := os.getenv("TRANSLATION_API_URL"):
            config.endpoint_url = endpoint

        if host := os.getenv("TRANSLATION_API_HOST"):
            config.api_host = host

        if source := os.getenv("TRANSLATION_SOURCE_LANG"):
            config.source_lang = source.lower()

        if target := os.getenv("TRANSLATION_TARGET_LANG"):
            config.target_lang = target.lower()

        config.timeout_seconds = _env_int("TRANSLATION_TIMEOUT", config.timeout_seconds)
        config.max_retries = _env_int("TRANSLATION_MAX_RETRIES", config.max_retries)
        config.inter_call_delay_seconds = _env_float("TRANSLATION_DELAY_SECONDS", config.inter_call_delay_seconds)

        return config

    def _load_scrape_settings(self) -> ScrapeSettings:
        """Load scrape settings from environment variables."""
        settings = ScrapeSettings()

        settings.article_count = _env_int("ARTICLE_COUNT", settings.article_count)
        settings.paragraph_cap = _env_int("PARAGRAPH_CAP", settings.paragraph_cap)
        settings.repeat_threshold = _env_int("REPEAT_THRESHOLD", settings.repeat_threshold)
        settings.settle_delay_seconds = _env_float("SETTLE_DELAY_SECONDS", settings.settle_delay_seconds)
        settings.ready_timeout_ms = _env_int("READY_TIMEOUT_MS", settings.ready_timeout_ms)
        settings.headless = _env_bool("HEADLESS", settings.headless)

        if backend := os.getenv("SESSION_BACKEND"):
            settings.session_backend = backend.lower()

        if images_dir := os.getenv("IMAGES_DIR"):
            settings.images_dir = images_dir

        return settings

    def _load_site_configs(self) -> Dict[str, SiteConfig]:
        """Load site configurations from defaults and custom files."""
        configs = SITE_CONFIGS.copy()

        custom_sites_file = self.config_dir / "custom_sites.json"
        if custom_sites_file.exists():
            try:
                with open(custom_sites_file, 'r', encoding='utf-8') as f:
                    custom_configs = json.load(f)
                for domain, config_data in custom_configs.items():
                    try:
                        configs[domain] = self._site_config_from_dict(domain, config_data)
                    except (KeyError, ValueError, TypeError) as e:
                        logger.warning("Skipping invalid custom site configuration", domain=domain, error=str(e))
            except (json.JSONDecodeError, IOError) as e:
                logger.warning("Could not read custom site configurations", path=str(custom_sites_file), error=str(e))

        return configs

    @staticmethod
    def _site_config_from_dict(domain: str, config_data: Dict[str, Any]) -> SiteConfig:
        return SiteConfig(
            domain=domain,
            listing_url=config_data.get("listing_url", ""),
            link_selectors=config_data["link_selectors"],
            title_selectors=config_data["title_selectors"],
            body_selectors=config_data["body_selectors"],
            image_selectors=config_data.get("image_selectors", []),
            consent_selector=config_data.get("consent_selector")
        )

    def _apply_environment_overrides(self, config: SystemConfig) -> None:
        """Apply environment-specific configuration overrides."""
        if log_level := os.getenv("LOG_LEVEL"):
            config.log_level = log_level.upper()

        config.enable_structured_logging = _env_bool("STRUCTURED_LOGGING", config.enable_structured_logging)

    def get_site_config(self, domain: str) -> SiteConfig:
        """
        Get site configuration for a domain.

        Args:
            domain: Domain name to get configuration for

        Returns:
            SiteConfig for the domain
        """
        config = self.load_configuration()
        return get_site_config_by_domain(domain, config.site_configs)

    def reload_configuration(self) -> SystemConfig:
        """Force reload of configuration from all sources."""
        self._system_config = None
        return self.load_configuration()


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_system_config() -> SystemConfig:
    """Get the current system configuration."""
    return get_config_manager().load_configuration()
