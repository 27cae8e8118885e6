import logging
from typing import Optional

from invitecrawl.domain.href_set import HrefSet
from invitecrawl.domain.pipeline_options import PipelineOptions
from invitecrawl.domain.site_profile import SiteProfile
from invitecrawl.domain.stage_results import PaginationResult
from invitecrawl.services.link_extractor import LinkExtractor
from invitecrawl.services.page_driver import PageDriver

logger = logging.getLogger(__name__)


class PaginationController:
    """Drives the listing page through scroll + load-more cycles.

    Owns the listing loop control-flow: lazy-content scrolling, href
    accumulation, load-more activation, exhaustion and cancellation checks.
    It does NOT construct the driver (that stays with the session runner).
    """

    def __init__(
        self,
        *,
        site_profile: SiteProfile,
        options: Optional[PipelineOptions] = None,
        link_extractor: Optional[LinkExtractor] = None,
    ):
        self.site_profile = site_profile
        self.options = options or PipelineOptions()
        self.link_extractor = link_extractor or LinkExtractor()

    def _is_stopped(self, stop_event) -> bool:
        return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()

    def collect_page_hrefs(self, driver: PageDriver, hrefs: HrefSet) -> int:
        """Merge every anchor href currently in the DOM into `hrefs`.

        Returns the number of hrefs not seen before.
        """
        return hrefs.merge(self.link_extractor.extract_hrefs(driver.url, driver.content()))

    def collect(self, listing_url: str, driver: PageDriver, stop_event=None) -> PaginationResult:
        """Collect hrefs from the listing page until it is exhausted or cancelled.

        On cancellation the partial set is returned with `stopped=True`; the
        caller must not continue the pipeline with it.
        """
        hrefs = HrefSet()
        if self._is_stopped(stop_event):
            logger.info("Pagination cancelled before opening %s", listing_url)
            return PaginationResult(hrefs=hrefs, stopped=True, cycles=0)

        driver.goto(listing_url)
        logger.info("Navigated to listing page %s", listing_url)

        selector = self.site_profile.load_more_selector
        max_cycles = self.options.max_pagination_cycles
        cycles = 0
        load_more_visible = True

        while load_more_visible and not self._is_stopped(stop_event):
            if max_cycles is not None and cycles >= max_cycles:
                logger.warning("Stopping pagination after %s cycles (limit reached)", cycles)
                break
            cycles += 1

            driver.scroll(self.options.scroll_steps, self.options.scroll_interval_ms)
            driver.wait(self.options.scroll_settle_seconds)
            logger.debug("Page scrolled (cycle %s)", cycles)

            added = self.collect_page_hrefs(driver, hrefs)
            logger.info("Links collected: %s (+%s new)", len(hrefs), added)

            load_more_visible = driver.has_element(selector)
            if not load_more_visible:
                logger.info("No more 'Load More' control; listing exhausted")
                break

            if driver.is_scrolled_to_bottom():
                driver.click(selector)
                logger.info("Clicked 'Load More' control")
                driver.wait(self.options.load_more_settle_seconds)
            else:
                logger.info("Scroll not complete, waiting...")

        stopped = self._is_stopped(stop_event)
        if stopped:
            logger.info("Pagination cancelled after %s cycles with %s links", cycles, len(hrefs))
        return PaginationResult(hrefs=hrefs, stopped=stopped, cycles=cycles)
