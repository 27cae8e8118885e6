import logging
from typing import Callable, Iterable, List, Optional

from invitecrawl.domain.collection_record import CollectionRecord
from invitecrawl.domain.href_set import HrefSet
from invitecrawl.domain.pipeline_options import PipelineOptions
from invitecrawl.domain.site_profile import SiteProfile
from invitecrawl.domain.stage_results import DiscoveryResult
from invitecrawl.exceptions import ExtractionError, NavigationError
from invitecrawl.services.link_extractor import LinkExtractor
from invitecrawl.services.page_driver import PageDriver
from invitecrawl.services.progress import ProgressSink, link_markup

logger = logging.getLogger(__name__)


class CollectionDiscoverer:
    """Visits collection pages and extracts their title and community links.

    Each item gets up to `max_retries` attempts with no delay between them.
    Items that never load are skipped; they do not abort the session.
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

    def filter_collection_hrefs(self, hrefs: Iterable[str]) -> List[str]:
        """Keep hrefs containing the item marker anywhere in the string."""
        marker = self.site_profile.item_marker
        if isinstance(hrefs, HrefSet):
            return hrefs.filter(marker)
        seen = set()
        result = []
        for href in hrefs:
            if marker in href and href not in seen:
                seen.add(href)
                result.append(href)
        return result

    def extract_title(self, driver: PageDriver) -> str:
        primary = (driver.text_of(self.site_profile.title_selector) or "").strip()
        secondary = ""
        if self.site_profile.subtitle_selector:
            secondary = (driver.text_of(self.site_profile.subtitle_selector) or "").strip()
        if primary == secondary:
            secondary = ""
        return f"{primary} {secondary}".strip()

    def extract_record(self, url: str, driver: PageDriver) -> CollectionRecord:
        record = CollectionRecord(title=self.extract_title(driver), source_url=url)
        links = self.link_extractor.extract_matching(driver.url, driver.content(), self.site_profile.community_marker)
        for link in links:
            record.add_link(link)
        return record

    def process_item(self, url: str, driver: PageDriver, progress: Optional[ProgressSink] = None) -> Optional[CollectionRecord]:
        """Open one collection page with bounded retries.

        Returns the extracted record, or None when the page never loaded.
        An attempt where the details control is missing is neither a success
        nor a failure, but it still uses up one of the attempts.
        """
        max_retries = self.options.max_retries
        attempts = 0
        failures = 0
        page_loaded = False
        record = None

        while attempts < max_retries and not page_loaded:
            attempts += 1
            try:
                driver.goto(url, timeout_ms=self.options.item_navigation_timeout_ms)
                logger.info("Opening link: %s", url)
                if progress is not None:
                    progress.notify(f"Scraping {link_markup(url, 'Link')}", html=True)

                if not driver.has_element(self.site_profile.details_selector):
                    logger.info("Details control not present on %s (attempt %s/%s)", url, attempts, max_retries)
                    continue

                driver.click(self.site_profile.details_selector)
                page_loaded = True
                record = self.extract_record(url, driver)
            except (NavigationError, ExtractionError) as e:
                failures += 1
                logger.warning("Error opening link %s: %s", url, e)
                logger.info("Retrying (%s/%s)...", failures, max_retries)

        if not page_loaded:
            logger.error("Failed to load page %s after %s attempts", url, max_retries)
            return None
        return record

    def discover(
        self,
        hrefs: Iterable[str],
        driver: PageDriver,
        stop_event=None,
        progress: Optional[ProgressSink] = None,
        on_item: Optional[Callable[[str], None]] = None,
    ) -> DiscoveryResult:
        collection_links = self.filter_collection_hrefs(hrefs)
        logger.info("Filtered collection links: %s", len(collection_links))

        records: List[CollectionRecord] = []
        for url in collection_links:
            if self._is_stopped(stop_event):
                logger.info("Discovery cancelled before %s", url)
                return DiscoveryResult(records=records, stopped=True)

            if on_item is not None:
                on_item(url)
            record = self.process_item(url, driver, progress)
            if record is not None and record.external_links:
                logger.info("Found %s community links on %s", len(record.external_links), url)
                records.append(record)

        return DiscoveryResult(records=records, stopped=False)
