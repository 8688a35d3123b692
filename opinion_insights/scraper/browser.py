"""
Selenium-backed page session.

Drives a Spanish-locale Chrome instance, waits on document.readyState for
readiness, and dismisses the cookie-consent banner once per session.
"""

from typing import List, Optional

from selenium import webdriver
from selenium.common.exceptions import (
    InvalidSessionIdException,
    NoSuchWindowException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from ..config.logging import StructuredLogger, get_logger
from ..config.timeouts import get_timeout_manager
from .errors import NavigationFailed, SessionFatal
from .session import ElementHandle, PageSession


# Selenium errors that mean the browser itself is gone
FATAL_SESSION_ERRORS = (InvalidSessionIdException, NoSuchWindowException)


class SeleniumElement(ElementHandle):
    """ElementHandle over a Selenium WebElement."""

    def __init__(self, element):
        self.element = element

    def text(self) -> str:
        try:
            return (self.element.text or "").strip()
        except FATAL_SESSION_ERRORS as e:
            raise SessionFatal("Browser session lost while reading element") from e
        except WebDriverException:
            # Stale or detached elements read as empty
            return ""

    def attribute(self, name: str) -> Optional[str]:
        try:
            return self.element.get_attribute(name)
        except FATAL_SESSION_ERRORS as e:
            raise SessionFatal("Browser session lost while reading element") from e
        except WebDriverException:
            return None


class SeleniumPageSession(PageSession):
    """Page session driving a real browser through Selenium WebDriver."""

    def __init__(
        self,
        driver,
        consent_selector: Optional[str] = None,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Wrap an existing WebDriver.

        Args:
            driver: Selenium WebDriver instance owned by this session
            consent_selector: CSS selector of the cookie-consent accept button
            logger: Structured logger used for session events
        """
        self.driver = driver
        self.consent_selector = consent_selector
        self.logger = logger or get_logger(__name__)
        self.timeout_manager = get_timeout_manager()
        self._consent_handled = consent_selector is None

    @classmethod
    def create(
        cls,
        headless: bool = False,
        language: str = "es",
        page_load_timeout: Optional[int] = None,
        consent_selector: Optional[str] = None,
        logger: Optional[StructuredLogger] = None
    ) -> "SeleniumPageSession":
        """
        Start Chrome and wrap it in a session.

        Raises:
            SessionFatal: If the browser cannot be started
        """
        options = Options()
        options.add_argument(f"--lang={language}")
        options.add_experimental_option("prefs", {"intl.accept_languages": f"{language},{language}-ES"})
        if headless:
            options.add_argument("--headless=new")
            options.add_argument("--window-size=1280,900")

        try:
            driver = webdriver.Chrome(options=options)
        except WebDriverException as e:
            raise SessionFatal(f"Could not start Chrome: {e.msg or e}", {"headless": headless}) from e

        logger = logger or get_logger(__name__)
        if not headless:
            try:
                driver.maximize_window()
            except WebDriverException as e:
                logger.debug("Could not maximize browser window", error=type(e).__name__)

        driver.set_page_load_timeout(page_load_timeout or get_timeout_manager().get_page_load_timeout())
        return cls(driver, consent_selector=consent_selector, logger=logger)

    def navigate(self, url: str) -> None:
        try:
            self.driver.get(url)
        except FATAL_SESSION_ERRORS as e:
            raise SessionFatal(f"Browser session lost while loading {url}", {"url": url}) from e
        except WebDriverException as e:
            raise NavigationFailed(url, e.msg or type(e).__name__) from e

        if not self._consent_handled:
            self._accept_cookies()

    def _accept_cookies(self) -> None:
        """Click the consent button if it shows up; never fails the navigation."""
        self._consent_handled = True
        timeout = self.timeout_manager.config.consent_wait_timeout
        try:
            button = WebDriverWait(self.driver, timeout).until(
                EC.element_to_be_clickable((By.CSS_SELECTOR, self.consent_selector))
            )
            button.click()
            self.logger.info("Cookie consent accepted")
        except FATAL_SESSION_ERRORS as e:
            raise SessionFatal("Browser session lost while accepting cookies") from e
        except WebDriverException as e:
            self.logger.info("Cookie consent button not found or could not be clicked",
                             error=type(e).__name__)

    def wait_for_ready(self, timeout_ms: int) -> bool:
        try:
            WebDriverWait(self.driver, timeout_ms / 1000.0).until(
                lambda d: d.execute_script("return document.readyState") == "complete"
            )
            return True
        except TimeoutException:
            self.logger.warning("Page did not reach readyState complete", timeout_ms=timeout_ms)
            return False
        except FATAL_SESSION_ERRORS as e:
            raise SessionFatal("Browser session lost while waiting for page") from e
        except WebDriverException as e:
            self.logger.warning("Readiness check failed", error=type(e).__name__, detail=e.msg)
            return False

    def find_all(self, locator: str) -> List[ElementHandle]:
        try:
            elements = self.driver.find_elements(By.CSS_SELECTOR, locator)
        except FATAL_SESSION_ERRORS as e:
            raise SessionFatal("Browser session lost while querying page") from e
        except WebDriverException as e:
            self.logger.warning("Locator query failed", locator=locator, error=type(e).__name__)
            return []
        return [SeleniumElement(element) for element in elements]

    def close(self) -> None:
        if self.driver is None:
            return
        try:
            self.driver.quit()
        except WebDriverException as e:
            self.logger.warning("Error while closing browser", error=str(e))
        finally:
            self.driver = None
