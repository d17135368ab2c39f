"""
Selenium browser setup and the crawl session that owns it.

The ranking sites render most of their lists with JavaScript, so they
are fetched through a real Chrome instance with a random user agent,
a random window size and the selenium-stealth patches applied.  One
`CrawlSession` owns that instance for the duration of a tick.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from fake_useragent import UserAgent
from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from selenium_stealth import stealth
from webdriver_manager.chrome import ChromeDriverManager

from ..errors import CrawlSessionError

logger = logging.getLogger(__name__)

Driver = webdriver.Chrome

SCREEN_SIZES: List[str] = [
    "1280x800",
    "1366x768",
    "1440x900",
    "1920x1080",
]
DEFAULT_PAGE_LOAD_TIMEOUT: float = 30.0
DEFAULT_WAIT_TIMEOUT: float = 10.0


@dataclass
class BrowserConfig:
    """Configuration settings for browser initialization."""
    user_agent: str
    screen_size: str
    headless: bool = True
    page_load_timeout: float = DEFAULT_PAGE_LOAD_TIMEOUT


def create_browser_config(headless: bool = True,
                          page_load_timeout: float = DEFAULT_PAGE_LOAD_TIMEOUT) -> BrowserConfig:
    """Create browser configuration with random user agent and screen size."""
    ua = UserAgent()
    return BrowserConfig(
        user_agent=ua.random,
        screen_size=random.choice(SCREEN_SIZES),
        headless=headless,
        page_load_timeout=page_load_timeout,
    )


def setup_chrome_options(config: BrowserConfig) -> Options:
    """Configure Chrome options with specified settings."""
    options = Options()
    options.add_argument(f"user-agent={config.user_agent}")
    options.add_argument("--disable-blink-features=AutomationControlled")
    options.add_argument(f"--window-size={config.screen_size.replace('x', ',')}")
    options.add_argument("--lang=ko-KR")
    options.add_experimental_option("excludeSwitches", ["enable-automation"])

    if config.headless:
        options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-dev-shm-usage")

    return options


def configure_stealth_settings(driver: Driver) -> None:
    """Apply anti-detection stealth settings to driver."""
    stealth(
        driver,
        languages=["ko-KR", "ko"],
        vendor="Google Inc.",
        platform="Win32",
        webgl_vendor="Intel Inc.",
        renderer="Intel Iris OpenGL Engine",
        fix_hairline=True,
    )


def init_selenium(config: Optional[BrowserConfig] = None) -> Driver:
    """Initialize and configure Selenium WebDriver with stealth settings."""
    config = config or create_browser_config()
    options = setup_chrome_options(config)

    driver = webdriver.Chrome(
        service=Service(ChromeDriverManager().install()),
        options=options,
    )
    driver.set_page_load_timeout(config.page_load_timeout)

    configure_stealth_settings(driver)
    return driver


def wait_for_elements(driver: Driver, css_selector: str,
                      timeout: float = DEFAULT_WAIT_TIMEOUT) -> None:
    """Block until `css_selector` matches; raises ``TimeoutException`` otherwise."""
    WebDriverWait(driver, timeout).until(
        EC.presence_of_all_elements_located((By.CSS_SELECTOR, css_selector))
    )


def navigate_and_wait(driver: Driver, url: str, css_selector: Optional[str] = None,
                      timeout: float = DEFAULT_WAIT_TIMEOUT) -> Driver:
    """Navigate to URL and, if given, wait for `css_selector` to appear."""
    driver.get(url)
    if css_selector:
        wait_for_elements(driver, css_selector, timeout)
    return driver


def get_page_html(driver: Driver) -> str:
    return driver.page_source or ""


class CrawlSession:
    """Exclusive ownership of one browser driver.

    Use it as a context manager; the driver is quit on exit even when
    the body raised::

        with CrawlSession(factory) as session:
            crawler.fetch(session.driver, url)
    """

    def __init__(self, driver_factory: Optional[Callable[[], Driver]] = None) -> None:
        self._factory = driver_factory or init_selenium
        self._driver: Optional[Driver] = None

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    @property
    def driver(self) -> Driver:
        if self._driver is None:
            raise CrawlSessionError("Crawl session is not open")
        return self._driver

    def open(self) -> "CrawlSession":
        if self._driver is not None:
            raise CrawlSessionError("Crawl session is already open")
        try:
            self._driver = self._factory()
        except Exception as exc:  # noqa: BLE001
            raise CrawlSessionError(f"Failed to start browser driver: {exc}") from exc
        logger.debug("Browser driver started")
        return self

    def close(self) -> None:
        driver, self._driver = self._driver, None
        if driver is None:
            return
        try:
            driver.quit()
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to quit browser driver cleanly: %s", exc)
        else:
            logger.debug("Browser driver stopped")

    def __enter__(self) -> "CrawlSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
