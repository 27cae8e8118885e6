import threading

from invitecrawl.domain.pipeline_options import PipelineOptions
from invitecrawl.domain.site_profile import SiteProfile
from invitecrawl.services.pagination_controller import PaginationController

LISTING = "https://site.test/rankings"
LOAD_MORE = "button.more"


def _anchors(*paths):
    return "<html><body>" + "".join(f'<a href="{p}">x</a>' for p in paths) + "</body></html>"


class ListingDriver:
    """Listing page whose content grows by one batch per load-more click."""

    def __init__(self, batches, bottom_sequence=None, on_click=None):
        self.batches = batches
        self.shown = 1
        self.bottom_sequence = list(bottom_sequence or [])
        self.on_click = on_click
        self.url = "about:blank"
        self.clicks = 0
        self.scrolls = 0
        self.waits = []

    def goto(self, url, timeout_ms=None):
        self.url = url

    def content(self):
        paths = [p for batch in self.batches[: self.shown] for p in batch]
        return _anchors(*paths)

    def scroll(self, steps, interval_ms):
        self.scrolls += 1

    def wait(self, seconds):
        self.waits.append(seconds)

    def has_element(self, selector):
        return selector == LOAD_MORE and self.shown < len(self.batches)

    def is_scrolled_to_bottom(self):
        if self.bottom_sequence:
            return self.bottom_sequence.pop(0)
        return True

    def click(self, selector):
        self.clicks += 1
        self.shown += 1
        if self.on_click is not None:
            self.on_click()


def _controller(**opts):
    profile = SiteProfile(listing_url=LISTING, load_more_selector=LOAD_MORE)
    return PaginationController(site_profile=profile, options=PipelineOptions(**opts))


def test_collects_union_across_three_load_more_cycles():
    driver = ListingDriver([
        ["/collection/a", "/account"],
        ["/collection/b"],
        ["/collection/c", "/collection/a"],
        ["/collection/d"],
    ])

    result = _controller().collect(LISTING, driver)

    assert result.stopped is False
    assert driver.clicks == 3
    assert result.cycles == 4
    assert list(result.hrefs) == [
        "https://site.test/account",
        "https://site.test/collection/a",
        "https://site.test/collection/b",
        "https://site.test/collection/c",
        "https://site.test/collection/d",
    ]


def test_waits_use_configured_settle_times():
    driver = ListingDriver([["/collection/a"], ["/collection/b"]])
    _controller(scroll_settle_seconds=0.5, load_more_settle_seconds=0.25).collect(LISTING, driver)
    assert driver.waits == [0.5, 0.25, 0.5]


def test_no_click_until_scrolled_to_bottom():
    driver = ListingDriver([["/collection/a"], ["/collection/b"]], bottom_sequence=[False, False, True])

    result = _controller().collect(LISTING, driver)

    assert driver.clicks == 1
    assert driver.scrolls == 4
    assert "https://site.test/collection/b" in result.hrefs


def test_stop_before_start_skips_navigation():
    driver = ListingDriver([["/collection/a"]])
    stop = threading.Event()
    stop.set()

    result = _controller().collect(LISTING, driver, stop)

    assert result.stopped is True
    assert len(result.hrefs) == 0
    assert driver.url == "about:blank"


def test_stop_mid_loop_returns_partial_hrefs():
    stop = threading.Event()
    driver = ListingDriver([["/collection/a"], ["/collection/b"], ["/collection/c"]], on_click=stop.set)

    result = _controller().collect(LISTING, driver, stop)

    assert result.stopped is True
    assert driver.clicks == 1
    assert list(result.hrefs) == ["https://site.test/collection/a"]


def test_max_pagination_cycles_bounds_an_endless_listing():
    driver = ListingDriver([["/collection/a"]] + [[f"/collection/{i}"] for i in range(100)])

    result = _controller(max_pagination_cycles=2).collect(LISTING, driver)

    assert result.cycles == 2
    assert result.stopped is False
    assert driver.clicks == 2
