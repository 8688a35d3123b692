"""
Title translation through an external HTTP translation endpoint.

Titles are translated one at a time, in order, with a fixed delay after every
call so the endpoint's rate limit is respected. A failed translation never
aborts the run: that position keeps its original text.
"""

import time
from typing import Any, List, Optional, Sequence
from urllib.parse import urlparse

import requests

from ..config.logging import StructuredLogger, get_logger
from ..config.models import TranslationAPIConfig
from ..config.timeouts import get_timeout_manager
from ..scraper.cancellation import CancellationToken
from .error_handler import (
    MalformedTranslationResponse,
    RetryConfig,
    TranslationFailed,
    call_with_retry,
    error_for_status,
)
from .throttle import RateLimiter, SequentialRunner


# Keys under which known providers return the translated text
TRANSLATION_KEYS = ("translatedText", "translation", "translated_text", "text", "result")


def parse_translation(payload: Any) -> str:
    """
    Extract translated text from a decoded response payload.

    Accepts a bare string, a list whose first item is a string (the RapidAPI
    multi-traduction shape), or an object carrying one of TRANSLATION_KEYS,
    possibly nested under "data"/"translations".

    Raises:
        MalformedTranslationResponse: No non-empty translation in the payload
    """
    value = payload
    if isinstance(value, dict) and "data" in value:
        value = value["data"]
    if isinstance(value, dict) and "translations" in value:
        value = value["translations"]
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = next((value[k] for k in TRANSLATION_KEYS if isinstance(value.get(k), str)), None)

    if isinstance(value, str) and value.strip():
        return value.strip()

    raise MalformedTranslationResponse(
        "Response carries no translated text",
        details={"payload_preview": str(payload)[:200]}
    )


class TranslationClient:
    """
    Sequential, rate-limited client for the translation endpoint.

    Guarantees len(result) == len(titles), and result[i] is either the
    translation of titles[i] or exactly titles[i].
    """

    def __init__(
        self,
        config: TranslationAPIConfig,
        http_session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
        cancellation: Optional[CancellationToken] = None
    ):
        """
        Initialize translation client.

        Args:
            config: Endpoint, credential and pacing configuration
            http_session: Optional requests session (tests inject a mock)
            logger: Structured logger (observability collaborator)
            cancellation: Token observed before each call and during delays
        """
        self.config = config
        self.session = http_session or requests.Session()
        self.logger = logger or get_logger(__name__)
        self.cancellation = cancellation or CancellationToken()
        self.timeout_manager = get_timeout_manager()

        self.retry_config = RetryConfig(
            max_retries=config.max_retries,
            base_delay=config.retry_delay_seconds
        )
        self.runner = SequentialRunner(
            RateLimiter(config.inter_call_delay_seconds, self.cancellation),
            self.cancellation
        )

    def _get_headers(self) -> dict:
        host = self.config.api_host or urlparse(self.config.endpoint_url).netloc
        return {
            "x-rapidapi-key": self.config.api_key or "",
            "x-rapidapi-host": host,
            "Content-Type": "application/json",
        }

    def translate(
        self,
        titles: Sequence[str],
        source_lang: Optional[str] = None,
        target_lang: Optional[str] = None
    ) -> List[str]:
        """
        Translate titles in order.

        Args:
            titles: Titles to translate
            source_lang: Source language code (defaults to configuration)
            target_lang: Target language code (defaults to configuration)

        Returns:
            Translations aligned with the input; failures keep the original

        Raises:
            OperationCancelled: The run was cancelled
        """
        source = source_lang or self.config.source_lang
        target = target_lang or self.config.target_lang
        self.logger.set_context(component="translation_client")

        if not self.config.api_key:
            self.logger.error(
                "No translation credential configured; keeping original titles",
                error_type="MISSING_CREDENTIAL",
                titles=len(titles)
            )
            return [title or "" for title in titles]

        with self.logger.timed_operation("translate_titles", titles=len(titles)):
            results = self.runner.run(
                titles,
                lambda title: self._translate_one(title, source, target),
                skip=lambda title: not title,
                skipped=lambda title: ""
            )

        failures = sum(1 for original, result in zip(titles, results) if original and result == original)
        self.logger.log_metrics({"titles": len(titles), "unchanged": failures}, "translation")
        return results

    def _translate_one(self, title: str, source: str, target: str) -> str:
        """Translate one non-empty title, falling back to it on failure."""
        try:
            return call_with_retry(
                self._request_translation, self.retry_config, title, source, target,
                sleep=self.cancellation.wait
            )
        except TranslationFailed as e:
            self.logger.warning(
                "Translation failed, keeping original title",
                title=title,
                error_code=e.error_code,
                error=str(e)
            )
            return title

    def _request_translation(self, title: str, source: str, target: str) -> str:
        """Single POST to the translation endpoint."""
        payload = {"from": source, "to": target, "q": title}
        connect_timeout, _ = self.timeout_manager.get_http_timeout("translation")
        start = time.time()

        response = self.session.post(
            self.config.endpoint_url,
            json=payload,
            headers=self._get_headers(),
            timeout=(connect_timeout, self.config.timeout_seconds)
        )

        duration_ms = int((time.time() - start) * 1000)
        success = 200 <= response.status_code < 300
        self.logger.log_http_request(
            method="POST",
            url=self.config.endpoint_url,
            status_code=response.status_code,
            duration_ms=duration_ms,
            success=success
        )

        if not success:
            raise error_for_status(response.status_code, response.text or "")

        try:
            body = response.json()
        except ValueError:
            content_type = response.headers.get("Content-Type", "")
            if not content_type.startswith("text/plain"):
                raise MalformedTranslationResponse(
                    "Response body is not JSON",
                    details={"content_type": content_type}
                )
            body = response.text

        return parse_translation(body)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
