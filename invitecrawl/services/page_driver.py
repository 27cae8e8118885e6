from __future__ import annotations

from typing import Callable, Optional, Protocol


class PageDriver(Protocol):
    """Rendered-page capability the pipeline depends on.

    This is intentionally small so the browser implementation can be swapped
    (Playwright today, a fake in tests).

    - `goto` raises NavigationError when the URL cannot be reached.
    - Query methods raise ExtractionError when the DOM cannot be evaluated.
    """

    @property
    def url(self) -> str: ...

    def goto(self, url: str, timeout_ms: Optional[int] = None) -> None: ...

    def content(self) -> str: ...

    def visible_text(self) -> str: ...

    def has_element(self, selector: str) -> bool: ...

    def text_of(self, selector: str) -> Optional[str]: ...

    def click(self, selector: str) -> None: ...

    def scroll(self, steps: int, interval_ms: int) -> None: ...

    def is_scrolled_to_bottom(self) -> bool: ...

    def wait(self, seconds: float) -> None: ...

    def close(self) -> None: ...


PageDriverFactory = Callable[[], PageDriver]
