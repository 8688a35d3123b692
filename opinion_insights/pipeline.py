"""
Run orchestration for Opinion Insights.

This module wires the scraping, translation and analysis components into a
single sequential run over one page session:

    listing page -> article links -> per-article extraction
    -> optional cover image download -> title translation
    -> repeated-word analysis -> RunReport

Article- and field-level failures degrade into absent values and the run
continues; only SessionFatal and OperationCancelled abort it.
"""

import time
import uuid
from typing import Callable, List, Optional

from .config.logging import StructuredLogger, get_logger
from .config.models import SiteConfig, SystemConfig
from .config.sites import get_site_config_for_url
from .config.validation import ConfigurationError
from .analysis.translator import TranslationClient
from .analysis.word_frequency import WordFrequencyAnalyzer
from .postprocess.formatter import ArticleSummary, RunReport
from .scraper.cancellation import CancellationToken
from .scraper.errors import NavigationFailed, OperationCancelled, SessionFatal
from .scraper.extractor import ArticleExtractor
from .scraper.images import ImageDownloader
from .scraper.links import LinkCollector
from .scraper.resolver import SelectorResolver
from .scraper.session import PageSession, StaticPageSession


def build_session(
    config: SystemConfig,
    site_config: Optional[SiteConfig] = None,
    logger: Optional[StructuredLogger] = None
) -> PageSession:
    """
    Create the page session selected by the configuration.

    Args:
        config: System configuration (backend, headless flag, timeouts)
        site_config: Site whose consent selector the browser should accept
        logger: Structured logger handed to the session

    Returns:
        A ready PageSession

    Raises:
        SessionFatal: If the session cannot be created
    """
    settings = config.scrape_settings

    if settings.session_backend == "static":
        return StaticPageSession(logger=logger)

    # Selenium is only imported when a browser session is requested
    from .scraper.browser import SeleniumPageSession

    return SeleniumPageSession.create(
        headless=settings.headless,
        language=config.translation_config.source_lang,
        page_load_timeout=settings.page_load_timeout_seconds,
        consent_selector=site_config.consent_selector if site_config else None,
        logger=logger
    )


class OpinionPipeline:
    """
    Sequential opinion-section pipeline.

    Every collaborator can be injected; anything not supplied is built from
    the SystemConfig and shares the pipeline's logger and cancellation token.
    """

    def __init__(
        self,
        config: SystemConfig,
        listing_url: Optional[str] = None,
        site_config: Optional[SiteConfig] = None,
        logger: Optional[StructuredLogger] = None,
        cancellation: Optional[CancellationToken] = None,
        link_collector: Optional[LinkCollector] = None,
        extractor: Optional[ArticleExtractor] = None,
        translator: Optional[TranslationClient] = None,
        analyzer: Optional[WordFrequencyAnalyzer] = None,
        image_downloader: Optional[ImageDownloader] = None
    ):
        """
        Initialize the pipeline.

        Args:
            config: System configuration
            listing_url: Listing page; defaults to the site's configured listing URL
            site_config: Selector lists; defaults to the configuration for listing_url
            logger: Structured logger shared by all components
            cancellation: Token shared by all components
            link_collector: Optional LinkCollector override
            extractor: Optional ArticleExtractor override
            translator: Optional TranslationClient override
            analyzer: Optional WordFrequencyAnalyzer override
            image_downloader: Optional ImageDownloader; built when images_dir is set

        Raises:
            ConfigurationError: If no listing URL can be determined
        """
        self.config = config
        self.settings = config.scrape_settings
        self.logger = logger or get_logger(__name__)
        self.cancellation = cancellation or CancellationToken()

        if site_config is None:
            site_config = get_site_config_for_url(listing_url or "https://elpais.com/", config.site_configs)
        self.site_config = site_config
        self.listing_url = listing_url or site_config.listing_url
        if not self.listing_url:
            raise ConfigurationError(f"No listing URL configured for site '{site_config.domain}'")

        resolver = SelectorResolver(self.logger)
        self.link_collector = link_collector or LinkCollector(
            resolver=resolver,
            ready_timeout_ms=self.settings.ready_timeout_ms,
            logger=self.logger,
            cancellation=self.cancellation
        )
        self.extractor = extractor or ArticleExtractor(
            site_config,
            resolver=resolver,
            paragraph_cap=self.settings.paragraph_cap,
            settle_delay_seconds=self.settings.settle_delay_seconds,
            ready_timeout_ms=self.settings.ready_timeout_ms,
            logger=self.logger,
            cancellation=self.cancellation
        )
        self.translator = translator or TranslationClient(
            config.translation_config,
            logger=self.logger,
            cancellation=self.cancellation
        )
        self.analyzer = analyzer or WordFrequencyAnalyzer(self.logger)

        if image_downloader is None and self.settings.images_dir:
            image_downloader = ImageDownloader(self.settings.images_dir, logger=self.logger)
        self.image_downloader = image_downloader

    def run(self, session: PageSession) -> RunReport:
        """
        Execute one run over an open session.

        Args:
            session: Page session used for every navigation

        Returns:
            RunReport, possibly with empty articles or unchanged titles

        Raises:
            SessionFatal: The session became unusable
            OperationCancelled: The run was cancelled
        """
        start_time = time.time()
        run_id = uuid.uuid4().hex[:12]
        self.logger.set_context(run_id=run_id, processing_step="run")
        report = RunReport(
            listing_url=self.listing_url,
            source_lang=self.config.translation_config.source_lang,
            target_lang=self.config.translation_config.target_lang,
            repeat_threshold=self.settings.repeat_threshold
        )

        self.logger.info(
            "Starting opinion run",
            listing_url=self.listing_url,
            site=self.site_config.domain,
            article_count=self.settings.article_count
        )

        with self.logger.timed_operation("opinion_run"):
            links = self._collect_links(session, report)
            report.articles = self._extract_articles(session, links)

            self.logger.set_context(processing_step="translation", article_index=None, url=None)
            report.translated_titles = self.translator.translate(
                report.titles,
                self.config.translation_config.source_lang,
                self.config.translation_config.target_lang
            )
            for article, translated in zip(report.articles, report.translated_titles):
                article.translated_title = translated

            self.logger.set_context(processing_step="analysis")
            report.repeated_words = self.analyzer.analyze(
                report.translated_titles, self.settings.repeat_threshold
            )

        report.processing_time_ms = int((time.time() - start_time) * 1000)
        self.logger.log_metrics({
            "links_collected": len(links),
            "articles_with_title": sum(1 for a in report.articles if a.title),
            "articles_with_content": sum(1 for a in report.articles if a.content),
            "articles_with_image": sum(1 for a in report.articles if a.image_url),
            "repeated_words": len(report.repeated_words),
            "total_processing_time_ms": report.processing_time_ms
        }, "opinion_run")

        return report

    def _collect_links(self, session: PageSession, report: RunReport) -> List[str]:
        self.logger.set_context(processing_step="link_collection")
        try:
            return self.link_collector.collect_links(
                session,
                self.listing_url,
                self.site_config.link_selectors,
                self.settings.article_count
            )
        except NavigationFailed as e:
            # An unreachable listing page is an empty run, not a fatal error
            self.logger.error("Listing page could not be loaded", error=e, url=self.listing_url)
            report.errors_encountered.append(str(e))
            return []

    def _extract_articles(self, session: PageSession, links: List[str]) -> List[ArticleSummary]:
        articles = []
        for index, url in enumerate(links, start=1):
            self.logger.set_context(processing_step="extraction", article_index=index, url=url)
            record = self.extractor.extract(session, url)

            image_path = None
            if self.image_downloader is not None and record.image_url:
                self.cancellation.raise_if_cancelled()
                image_path = self.image_downloader.download(record.image_url, index)

            articles.append(ArticleSummary(
                url=url,
                title=record.title,
                content=record.content,
                image_url=record.image_url,
                image_path=image_path
            ))

        return articles

    def run_with_session(self, session_factory: Callable[[], PageSession]) -> RunReport:
        """
        Create a session, run, and close the session on every exit path.

        Raises:
            SessionFatal: The session could not be created or became unusable
            OperationCancelled: The run was cancelled
        """
        self.cancellation.raise_if_cancelled()
        try:
            session = session_factory()
        except (SessionFatal, OperationCancelled):
            raise
        except Exception as e:
            raise SessionFatal(f"Could not create page session: {e}", {"error_type": type(e).__name__}) from e

        try:
            return self.run(session)
        finally:
            try:
                session.close()
            except Exception as e:
                self.logger.warning("Error while closing page session", error=str(e))
            self.close()

    def close(self) -> None:
        """Release HTTP resources held by the components."""
        self.translator.close()
        if self.image_downloader is not None:
            self.image_downloader.close()
