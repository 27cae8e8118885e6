from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from invitecrawl.exceptions import ExtractionError, NavigationError, PageDriverError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/113.0"

_SCROLL_STEP_JS = "() => window.scrollBy(0, window.innerHeight / 10)"
_AT_BOTTOM_JS = "() => Math.ceil(window.scrollY) >= document.body.scrollHeight - window.innerHeight"


@dataclass(frozen=True)
class PlaywrightDriverOptions:
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    navigation_timeout_ms: int = 30_000
    wait_until: str = "load"  # domcontentloaded | load | networkidle


class PlaywrightPageDriver:
    """Page driver backed by a single Playwright Chromium page.

    One driver owns one browser for the lifetime of a crawl session; `close()`
    releases the page, the browser and the Playwright runtime.

    Playwright's sync API is used, so a driver must stay on the thread that
    created it.
    """

    def __init__(self, page, *, browser=None, playwright=None, options: Optional[PlaywrightDriverOptions] = None):
        self._page = page
        self._browser = browser
        self._playwright = playwright
        self._options = options or PlaywrightDriverOptions()
        self._closed = False

    @classmethod
    def launch(cls, options: Optional[PlaywrightDriverOptions] = None) -> "PlaywrightPageDriver":
        options = options or PlaywrightDriverOptions()
        try:
            from playwright.sync_api import sync_playwright  # type: ignore
        except Exception as e:
            raise PageDriverError(
                "Playwright is not installed. "
                "Install 'playwright' and run 'python -m playwright install chromium'."
            ) from e

        playwright = sync_playwright().start()
        try:
            browser = playwright.chromium.launch(headless=options.headless)
            context = browser.new_context(user_agent=options.user_agent)
            page = context.new_page()
            page.set_default_navigation_timeout(options.navigation_timeout_ms)
        except Exception as e:
            playwright.stop()
            raise PageDriverError(f"Could not launch browser: {e}") from e
        logger.info("Browser launched (headless=%s)", options.headless)
        return cls(page, browser=browser, playwright=playwright, options=options)

    def _ensure_open(self) -> None:
        if self._closed:
            raise PageDriverError("Page driver is closed")
        is_closed = getattr(self._page, "is_closed", None)
        if callable(is_closed) and is_closed():
            raise PageDriverError("Browser page was closed")

    def _query(self, selector: str, fn: Callable[[], Any]) -> Any:
        self._ensure_open()
        try:
            return fn()
        except PageDriverError:
            raise
        except Exception as e:
            raise ExtractionError(selector, e) from e

    @property
    def url(self) -> str:
        return self._page.url

    def goto(self, url: str, timeout_ms: Optional[int] = None) -> None:
        self._ensure_open()
        timeout = timeout_ms if timeout_ms is not None else self._options.navigation_timeout_ms
        try:
            self._page.goto(url, timeout=timeout, wait_until=self._options.wait_until)
        except Exception as e:
            raise NavigationError(url, e) from e

    def content(self) -> str:
        return self._query("html", self._page.content)

    def visible_text(self) -> str:
        return self._query("body", lambda: self._page.inner_text("body"))

    def has_element(self, selector: str) -> bool:
        return self._query(selector, lambda: self._page.locator(selector).count() > 0)

    def text_of(self, selector: str) -> Optional[str]:
        def _text():
            locator = self._page.locator(selector)
            if locator.count() == 0:
                return None
            return locator.first.text_content()

        return self._query(selector, _text)

    def click(self, selector: str) -> None:
        self._query(selector, lambda: self._page.locator(selector).first.click())

    def scroll(self, steps: int, interval_ms: int) -> None:
        """Scroll down in `steps` increments spaced `interval_ms` apart, stopping at the bottom."""
        def _scroll():
            for _ in range(steps):
                if self._page.evaluate(_AT_BOTTOM_JS):
                    break
                self._page.evaluate(_SCROLL_STEP_JS)
                self._page.wait_for_timeout(interval_ms)

        self._query("window", _scroll)

    def is_scrolled_to_bottom(self) -> bool:
        return bool(self._query("window", lambda: self._page.evaluate(_AT_BOTTOM_JS)))

    def wait(self, seconds: float) -> None:
        if seconds <= 0:
            return
        self._ensure_open()
        self._page.wait_for_timeout(seconds * 1000)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._browser is not None:
                self._browser.close()
        except Exception:
            logger.warning("Error closing browser", exc_info=True)
        finally:
            if self._playwright is not None:
                try:
                    self._playwright.stop()
                except Exception:
                    logger.warning("Error stopping Playwright", exc_info=True)
        logger.info("Browser closed")


class PlaywrightPageDriverFactory:
    """Callable that launches a fresh PlaywrightPageDriver per session."""

    def __init__(self, options: Optional[PlaywrightDriverOptions] = None):
        self.options = options or PlaywrightDriverOptions()

    def __call__(self) -> PlaywrightPageDriver:
        return PlaywrightPageDriver.launch(self.options)
