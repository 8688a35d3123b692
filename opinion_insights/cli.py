"""
Command-line entry point for Opinion Insights.

Exit codes:
    0   run completed (individual articles or translations may have failed)
    1   the page session could not be created or was lost
    2   invalid configuration
    130 cancelled (SIGINT)
"""

import argparse
import signal
import sys
from typing import List, Optional

from .config.logging import configure_logging, get_logger
from .config.manager import ConfigManager
from .config.models import SystemConfig
from .config.validation import ConfigurationError, VALID_LOG_LEVELS, validate_configuration
from .pipeline import OpinionPipeline, build_session
from .postprocess.formatter import ReportFormatter
from .scraper.cancellation import CancellationToken
from .scraper.errors import OperationCancelled, SessionFatal


EXIT_OK = 0
EXIT_SESSION_FATAL = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 130

logger = get_logger("opinion_insights.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opinion-insights",
        description="Scrape the latest El País opinion articles, translate their titles "
                    "and report words repeated across the translations.",
    )
    parser.add_argument("--count", type=int, help="Number of articles to scrape (default 5)")
    parser.add_argument("--paragraphs", type=int, help="Paragraphs kept per article (default 3)")
    parser.add_argument(
        "--threshold",
        type=int,
        help="Report words appearing strictly more than this many times (default 2)",
    )
    parser.add_argument("--source-lang", help="Language of the scraped titles (default es)")
    parser.add_argument("--target-lang", help="Language to translate titles into (default en)")
    parser.add_argument(
        "--api-key",
        help="Translation API key (prefer TRANSLATION_API_KEY in the environment)",
    )
    parser.add_argument("--listing-url", help="Listing page to collect article links from")
    parser.add_argument(
        "--session",
        choices=("selenium", "static"),
        help="Page session backend: a Chrome browser or plain HTTP fetches",
    )
    parser.add_argument("--headless", action="store_true", default=None, help="Run Chrome headless")
    parser.add_argument("--images-dir", help="Directory where cover images are saved")
    parser.add_argument("--translation-delay", type=float, help="Seconds to wait after each translation call")
    parser.add_argument("--settle-delay", type=float, help="Seconds to wait after an article page is ready")
    parser.add_argument("--config-dir", help="Directory containing custom_sites.json")
    parser.add_argument("--env-file", help=".env file to load settings from")
    parser.add_argument("--log-level", type=str.upper, choices=sorted(VALID_LOG_LEVELS), help="Log level")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser


def apply_arguments(config: SystemConfig, args: argparse.Namespace) -> SystemConfig:
    """
    Apply command-line overrides on top of the loaded configuration.

    Raises:
        ConfigurationError: If the resulting configuration is invalid
    """
    settings = config.scrape_settings
    translation = config.translation_config

    overrides = (
        (settings, "article_count", args.count),
        (settings, "paragraph_cap", args.paragraphs),
        (settings, "repeat_threshold", args.threshold),
        (settings, "session_backend", args.session),
        (settings, "headless", args.headless),
        (settings, "images_dir", args.images_dir),
        (settings, "settle_delay_seconds", args.settle_delay),
        (translation, "source_lang", args.source_lang),
        (translation, "target_lang", args.target_lang),
        (translation, "api_key", args.api_key),
        (translation, "inter_call_delay_seconds", args.translation_delay),
        (config, "log_level", args.log_level),
    )
    for target, name, value in overrides:
        if value is not None:
            setattr(target, name, value)

    validate_configuration(config, raise_on_error=True)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        manager = ConfigManager(config_dir=args.config_dir, env_file=args.env_file)
        config = apply_arguments(manager.load_configuration(), args)
        configure_logging(config.log_level, config.enable_structured_logging)
        cancellation = CancellationToken()
        pipeline = OpinionPipeline(config, listing_url=args.listing_url, cancellation=cancellation)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    def _on_sigint(signum, frame):
        cancellation.cancel("interrupted")
        # A second Ctrl-C falls back to the default behaviour
        signal.signal(signal.SIGINT, signal.default_int_handler)

    previous_handler = signal.signal(signal.SIGINT, _on_sigint)
    try:
        report = pipeline.run_with_session(
            lambda: build_session(config, pipeline.site_config, pipeline.logger)
        )
    except SessionFatal as e:
        logger.error("Run aborted: page session unusable", error=e, details=e.details)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_SESSION_FATAL
    except (OperationCancelled, KeyboardInterrupt):
        logger.warning("Run cancelled")
        print("Cancelled.", file=sys.stderr)
        return EXIT_CANCELLED
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    formatter = ReportFormatter(config.scrape_settings.content_preview_chars)
    print(formatter.format_json(report) if args.json else formatter.format_text(report))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
