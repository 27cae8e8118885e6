from typing import Dict, Iterable, Optional

import pytest

from invitecrawl.exceptions import ExtractionError, NavigationError


class FakePage:
    def __init__(self, html: str = "", text: str = "", elements: Iterable[str] = (), texts: Optional[Dict[str, str]] = None):
        self.html = html
        self.text = text
        self.elements = set(elements)
        self.texts = dict(texts or {})


class FakePageDriver:
    """In-memory PageDriver: URLs map to canned pages.

    `nav_failures` maps a URL to how many times navigation to it fails before
    succeeding (-1 means always).
    """

    def __init__(self, pages: Optional[Dict[str, FakePage]] = None, nav_failures: Optional[Dict[str, int]] = None):
        self.pages = dict(pages or {})
        self.nav_failures = dict(nav_failures or {})
        self.gotos = []
        self.clicks = []
        self.waits = []
        self.close_calls = 0
        self.on_goto = None
        self._url = "about:blank"

    @property
    def url(self) -> str:
        return self._url

    def _page(self) -> FakePage:
        return self.pages.get(self._url) or FakePage()

    def goto(self, url: str, timeout_ms=None) -> None:
        self.gotos.append((url, timeout_ms))
        if self.on_goto is not None:
            self.on_goto(url)
        remaining = self.nav_failures.get(url, 0)
        if remaining != 0:
            if remaining > 0:
                self.nav_failures[url] = remaining - 1
            raise NavigationError(url, RuntimeError("net::ERR_CONNECTION_RESET"))
        if url not in self.pages:
            raise NavigationError(url, RuntimeError("net::ERR_NAME_NOT_RESOLVED"))
        self._url = url

    def content(self) -> str:
        return self._page().html

    def visible_text(self) -> str:
        return self._page().text

    def has_element(self, selector: str) -> bool:
        return selector in self._page().elements

    def text_of(self, selector: str):
        return self._page().texts.get(selector)

    def click(self, selector: str) -> None:
        if selector not in self._page().elements:
            raise ExtractionError(selector, RuntimeError("element not found"))
        self.clicks.append((self._url, selector))

    def scroll(self, steps: int, interval_ms: int) -> None:
        return None

    def is_scrolled_to_bottom(self) -> bool:
        return True

    def wait(self, seconds: float) -> None:
        self.waits.append(seconds)

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def make_page():
    return FakePage


@pytest.fixture
def make_driver():
    return FakePageDriver
