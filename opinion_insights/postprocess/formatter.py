"""
Run report formatting for Opinion Insights.

This module defines the report produced by one pipeline run and renders it
either as the human-readable console report or as JSON.
"""

import json
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any, Tuple

from ..config.logging import get_logger


logger = get_logger(__name__)

# Shown in place of a field that could not be extracted
NOT_FOUND = "Not found"


class FormattingError(Exception):
    """Custom exception for report formatting errors."""

    def __init__(self, message: str, error_type: str = "FORMATTING_ERROR", details: Optional[Dict] = None):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}


@dataclass
class ArticleSummary:
    """One scraped article as it appears in the report."""

    url: str
    title: str
    content: str
    image_url: Optional[str] = None
    image_path: Optional[str] = None
    translated_title: str = ""


@dataclass
class RunReport:
    """Complete result of one pipeline run."""

    listing_url: str
    articles: List[ArticleSummary] = field(default_factory=list)
    translated_titles: List[str] = field(default_factory=list)
    repeated_words: List[Tuple[str, int]] = field(default_factory=list)
    source_lang: str = "es"
    target_lang: str = "en"
    repeat_threshold: int = 2
    processing_time_ms: int = 0
    errors_encountered: List[str] = field(default_factory=list)
    timestamp: str = None

    def __post_init__(self):
        """Initialize computed fields."""
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    @property
    def titles(self) -> List[str]:
        return [article.title for article in self.articles]


class ReportFormatter:
    """
    Render a RunReport.

    The console layout lists every article with its Spanish title, a content
    preview and the cover image, then the translated titles, then the words
    repeated across the translated titles.
    """

    def __init__(self, preview_chars: int = 200):
        """
        Initialize report formatter.

        Args:
            preview_chars: Number of content characters shown per article
        """
        self.preview_chars = preview_chars

    def format_text(self, report: RunReport) -> str:
        """
        Format the report for the console.

        Args:
            report: Report to render

        Returns:
            Multi-line report text
        """
        source = report.source_lang.upper()
        target = report.target_lang.upper()
        lines = [f"SCRAPED ARTICLES (IN {source}):"]

        if not report.articles:
            lines.append("No articles were scraped.")

        for index, article in enumerate(report.articles, start=1):
            lines.append("")
            lines.append(f"Article {index}:")
            lines.append(f"URL: {article.url}")
            lines.append(f"Title ({source}): {article.title or NOT_FOUND}")
            if article.content:
                lines.append(f"Content ({source}): {article.content[:self.preview_chars]}...")
            else:
                lines.append(f"Content ({source}): {NOT_FOUND}")
            if article.image_url:
                lines.append(f"Cover image: {article.image_url}")
                if article.image_path:
                    lines.append(f"Cover image saved: {article.image_path}")
            else:
                lines.append("No cover image found.")

        lines.append("")
        lines.append(f"TRANSLATED TITLES ({source} -> {target}):")
        for index, title in enumerate(report.translated_titles, start=1):
            lines.append(f"Article {index} Title ({target}): {title or NOT_FOUND}")

        lines.append("")
        lines.append("REPEATED WORDS IN TRANSLATED TITLES:")
        if report.repeated_words:
            for word, count in report.repeated_words:
                lines.append(f'Repeated word "{word}" appears {count} times.')
        else:
            lines.append(f"No word appears more than {report.repeat_threshold} times.")

        return "\n".join(lines)

    def to_dict(self, report: RunReport) -> Dict[str, Any]:
        """Convert the report to a JSON-serializable dictionary."""
        data = asdict(report)
        data["repeated_words"] = [
            {"word": word, "count": count} for word, count in report.repeated_words
        ]
        return data

    def format_json(self, report: RunReport, indent: Optional[int] = 2) -> str:
        """
        Format the report as JSON.

        Raises:
            FormattingError: If the report cannot be serialized
        """
        try:
            return json.dumps(self.to_dict(report), ensure_ascii=False, indent=indent)
        except (TypeError, ValueError) as e:
            logger.error("Error formatting report as JSON", error=e)
            raise FormattingError(
                f"Failed to format report: {str(e)}",
                "REPORT_FORMATTING_ERROR",
                {"listing_url": report.listing_url}
            )
