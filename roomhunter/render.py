"""Rendered page access used by the crawl engine."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, TypeVar

from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from .config import Settings
from .errors import NavigationError, RenderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/143.0.0.0 Safari/537.36"
)

HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "pl-PL,pl;q=0.9,en-US;q=0.8,en;q=0.7",
}


class PageRenderer(Protocol):
    """A browser-like session that owns one page at a time."""

    def render(self, url: str, *, wait_until: str = "domcontentloaded", timeout_ms: Optional[int] = None) -> Optional[int]:
        """Navigate to *url*; return the HTTP status if known."""
        ...

    def run_in_page(self, extractor: Callable[[BeautifulSoup], T]) -> T:
        """Call *extractor* with a parsed snapshot of the current page."""
        ...

    def wait_for_selector(self, selector: str, timeout_ms: int) -> bool:
        ...

    def find_and_click(self, selector: str, timeout_ms: int = 3000) -> bool:
        ...

    def close(self) -> None:
        ...


RendererFactory = Callable[[], PageRenderer]


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


class PlaywrightRenderer:
    """Headless Chromium page driven through the Playwright sync API."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=self._settings.headless)
            self._context = self._browser.new_context(
                user_agent=USER_AGENT,
                extra_http_headers=HEADERS,
                locale="pl-PL",
            )
            self._page = self._context.new_page()
        except PlaywrightError as exc:
            self._playwright.stop()
            raise NavigationError(f"Could not start browser: {exc}") from exc
        timeout_ms = self._settings.navigation_timeout_ms
        self._page.set_default_timeout(timeout_ms)
        self._page.set_default_navigation_timeout(timeout_ms)

    def render(self, url: str, *, wait_until: str = "domcontentloaded", timeout_ms: Optional[int] = None) -> Optional[int]:
        if timeout_ms is None:
            timeout_ms = self._settings.navigation_timeout_ms
        try:
            response = self._goto(url, wait_until, timeout_ms)
        except PlaywrightTimeoutError as exc:
            logger.warning("Navigation timeout for %s: %s", url, exc)
            raise RenderTimeoutError(f"Timed out after {timeout_ms} ms loading {url}") from exc
        except PlaywrightError as exc:
            logger.error("Playwright error navigating to %s: %s", url, exc)
            raise NavigationError(f"Failed to load {url}: {exc}") from exc
        status = response.status if response else None
        if status is not None and status >= 400:
            raise NavigationError(f"HTTP {status} for {url}")
        return status

    @retry(
        retry=retry_if_exception_type(PlaywrightTimeoutError),
        stop=stop_after_attempt(2),
        wait=wait_fixed(1),
        reraise=True,
    )
    def _goto(self, url: str, wait_until: str, timeout_ms: int) -> Any:
        return self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)

    def run_in_page(self, extractor: Callable[[BeautifulSoup], T]) -> T:
        try:
            html = self._page.content()
        except PlaywrightError as exc:
            raise NavigationError(f"Could not read page content: {exc}") from exc
        return extractor(parse_document(html))

    def wait_for_selector(self, selector: str, timeout_ms: int) -> bool:
        try:
            self._page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug("Selector %s did not appear within %d ms", selector, timeout_ms)
            return False
        except PlaywrightError as exc:
            raise NavigationError(f"Page lost while waiting for {selector}: {exc}") from exc
        return True

    def find_and_click(self, selector: str, timeout_ms: int = 3000) -> bool:
        try:
            element = self._page.query_selector(selector)
            if element is None:
                return False
            element.click(timeout=timeout_ms)
        except PlaywrightError as exc:
            logger.debug("Could not click %s: %s", selector, exc)
            return False
        try:
            self._page.wait_for_load_state("networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError:
            pass
        return True

    def close(self) -> None:
        try:
            self._page.close()
        finally:
            try:
                self._context.close()
            finally:
                try:
                    self._browser.close()
                finally:
                    self._playwright.stop()


def playwright_factory(settings: Optional[Settings] = None) -> RendererFactory:
    """Return a factory that opens a fresh :class:`PlaywrightRenderer`."""

    def factory() -> PageRenderer:
        return PlaywrightRenderer(settings)

    return factory


__all__ = [
    "PageRenderer",
    "PlaywrightRenderer",
    "RendererFactory",
    "parse_document",
    "playwright_factory",
]
