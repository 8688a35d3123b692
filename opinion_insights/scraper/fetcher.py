"""
HTTP client for fetching listing pages, articles and cover images.

This module provides the HTTP client behind the static page session and the
image downloader. It implements retry logic with exponential backoff,
browser-like headers, and error handling for various network conditions.
"""

import time
import random
from typing import Optional, Dict
from dataclasses import dataclass
from urllib.parse import urlparse
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config.logging import StructuredLogger, get_logger
from ..config.timeouts import get_timeout_manager


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation."""

    url: str
    content: str
    status_code: int
    headers: Dict[str, str]
    body: bytes = b""
    encoding: Optional[str] = None
    fetch_time_ms: int = 0
    attempts: int = 1
    success: bool = True
    error_message: Optional[str] = None


class HTTPFetcher:
    """
    HTTP client with retry logic and browser-like headers.

    Implements exponential backoff retry logic and the headers a Spanish-locale
    browser would send, so the static session sees the same markup as Chrome.
    """

    def __init__(
        self,
        max_retries: int = 3,
        backoff_factor: float = 1.0,
        user_agent: Optional[str] = None,
        accept_language: str = "es-ES,es;q=0.9",
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize HTTP fetcher with configuration.

        Args:
            max_retries: Maximum number of retry attempts
            backoff_factor: Multiplier for exponential backoff
            user_agent: Custom user agent string
            accept_language: Accept-Language header value
            logger: Structured logger used for request events
        """
        self.timeout_manager = get_timeout_manager()
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.accept_language = accept_language
        self.logger = logger or get_logger(__name__)

        # Default user agent that mimics a real browser
        self.user_agent = user_agent or (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        )

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry configuration."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _get_headers(self, url: str, binary: bool = False) -> Dict[str, str]:
        """
        Generate browser-like headers.

        Args:
            url: Target URL for header customization
            binary: Whether the target is an image rather than a document

        Returns:
            Dictionary of HTTP headers
        """
        domain = urlparse(url).netloc

        headers = {
            "User-Agent": self.user_agent,
            "Accept": (
                "image/avif,image/webp,image/*,*/*;q=0.8" if binary else
                "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
            ),
            "Accept-Language": self.accept_language,
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
        }

        if domain and not binary:
            headers["Referer"] = f"https://{domain}/"

        return headers

    def fetch(self, url: str, binary: bool = False) -> FetchResult:
        """
        Fetch content from URL with retry logic.

        Args:
            url: URL to fetch
            binary: Keep the raw body (images) instead of only decoded text

        Returns:
            FetchResult containing response data and metadata
        """
        start_time = time.time()
        attempts = 0
        last_error = None

        self.logger.set_context(component="http_fetcher")
        self.logger.debug("Starting HTTP fetch", url=url, max_retries=self.max_retries)

        if not url or not url.startswith(('http://', 'https://')):
            self.logger.error("Invalid URL format", url=url)
            return FetchResult(
                url=url,
                content="",
                status_code=0,
                headers={},
                success=False,
                error_message="Invalid URL format"
            )

        headers = self._get_headers(url, binary)

        for attempt in range(self.max_retries + 1):
            attempts = attempt + 1
            attempt_start = time.time()

            try:
                # Back off a little before each retry
                if attempt > 0:
                    delay = random.uniform(0.5, 2.0)
                    self.logger.debug("Waiting before retry", delay_seconds=delay)
                    time.sleep(delay)

                timeout_tuple = self.timeout_manager.get_http_timeout("scraping")
                response = self.session.get(
                    url,
                    headers=headers,
                    timeout=timeout_tuple,
                    allow_redirects=True
                )

                attempt_time_ms = int((time.time() - attempt_start) * 1000)

                self.logger.log_http_request(
                    method="GET",
                    url=response.url,
                    status_code=response.status_code,
                    duration_ms=attempt_time_ms,
                    success=response.status_code == 200,
                    attempt=attempts
                )

                if response.status_code == 200:
                    return FetchResult(
                        url=response.url,  # Final URL after redirects
                        content="" if binary else response.text,
                        status_code=response.status_code,
                        headers=dict(response.headers),
                        body=response.content if binary else b"",
                        encoding=response.encoding,
                        fetch_time_ms=int((time.time() - start_time) * 1000),
                        attempts=attempts,
                        success=True
                    )

                if response.status_code == 403:
                    last_error = "Access forbidden (403) - possible bot detection"
                elif response.status_code == 404:
                    last_error = "Page not found (404)"
                elif response.status_code == 429:
                    last_error = "Rate limited (429) - too many requests"
                else:
                    last_error = f"HTTP {response.status_code}: {response.reason}"

                # For client errors (4xx), don't retry
                client_error = 400 <= response.status_code < 500 and response.status_code != 429
                self.logger.warning(
                    "HTTP request failed",
                    url=url,
                    status_code=response.status_code,
                    error=last_error,
                    attempt=attempts,
                    will_retry=attempt < self.max_retries and not client_error
                )
                if client_error:
                    break

            except requests.exceptions.Timeout:
                timeout_config = self.timeout_manager.get_http_timeout("scraping")
                last_error = f"Request timeout after {timeout_config[0]}s connect, {timeout_config[1]}s read"
                self.logger.warning("HTTP request timed out", url=url, attempt=attempts,
                                    will_retry=attempt < self.max_retries)
            except requests.exceptions.ConnectionError as e:
                last_error = "Connection error - unable to reach server"
                self.logger.warning("HTTP connection error", url=url, error=str(e), attempt=attempts,
                                    will_retry=attempt < self.max_retries)
            except requests.exceptions.TooManyRedirects:
                last_error = "Too many redirects"
                self.logger.warning("Too many redirects", url=url, attempt=attempts, will_retry=False)
                break
            except requests.exceptions.RequestException as e:
                last_error = f"Request failed: {str(e)}"
                self.logger.warning("HTTP request exception", url=url, error=str(e),
                                    error_type=type(e).__name__, attempt=attempts,
                                    will_retry=attempt < self.max_retries)

        fetch_time_ms = int((time.time() - start_time) * 1000)

        self.logger.error(
            "HTTP fetch failed after all attempts",
            url=url,
            attempts=attempts,
            total_time_ms=fetch_time_ms,
            final_error=last_error
        )

        return FetchResult(
            url=url,
            content="",
            status_code=0,
            headers={},
            fetch_time_ms=fetch_time_ms,
            attempts=attempts,
            success=False,
            error_message=last_error or "Unknown error occurred"
        )

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
