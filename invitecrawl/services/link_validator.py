import logging
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from invitecrawl.domain.collection_record import CollectionRecord
from invitecrawl.domain.invalid_link_report import InvalidLinkReport
from invitecrawl.domain.pipeline_options import PipelineOptions
from invitecrawl.domain.site_profile import SiteProfile
from invitecrawl.domain.stage_results import ValidationResult
from invitecrawl.domain.validation_outcome import ValidationOutcome
from invitecrawl.exceptions import ExtractionError, MalformedRecordError, NavigationError
from invitecrawl.services.page_driver import PageDriver
from invitecrawl.services.progress import ProgressSink, link_markup

logger = logging.getLogger(__name__)


def split_record(record: str, marker: str = "https") -> Tuple[str, str]:
    """Split a "name:link" record on the first occurrence of `marker`.

    Everything before the marker is the name, separator included
    ("Apes:https://x" -> ("Apes:", "https://x")); everything from the marker
    on is the link.
    """
    idx = record.find(marker)
    if idx == -1:
        raise MalformedRecordError(record, marker)
    return record[:idx].strip(), record[idx:].strip()


class LinkValidator:
    """Visits community links and classifies them active or invalid."""

    def __init__(self, *, site_profile: SiteProfile, options: Optional[PipelineOptions] = None):
        self.site_profile = site_profile
        self.options = options or PipelineOptions()

    def _is_stopped(self, stop_event) -> bool:
        return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()

    def _entries(self, records: Iterable[Union[CollectionRecord, str]]) -> Iterator[str]:
        for record in records:
            if isinstance(record, str):
                yield record
            else:
                yield from record.external_links

    def check_entry(self, entry: str, driver: PageDriver, progress: Optional[ProgressSink] = None) -> Optional[ValidationOutcome]:
        """Classify a single "name:link" entry.

        Returns None when validity could not be determined (malformed entry,
        navigation failure or unreadable page).
        """
        try:
            name, link = split_record(entry, self.site_profile.scheme_marker)
        except MalformedRecordError:
            logger.error("Invalid collection link format: %s", entry)
            return None

        try:
            driver.goto(link)
        except NavigationError as e:
            logger.warning("Error navigating to invite link %s: %s", link, e)
            return None
        driver.wait(self.options.link_settle_seconds)

        logger.info("Opening invite link: %s", link)
        if progress is not None:
            progress.notify(f"Opening invite link: {link_markup(link, name)}", html=True)

        try:
            text = driver.visible_text() or ""
        except ExtractionError as e:
            logger.warning("Could not read page text for %s: %s", link, e)
            return None

        outcome = ValidationOutcome(collection_name=name, link=link, is_invalid=self.site_profile.invalid_phrase in text)
        if outcome.is_invalid:
            logger.info("Invalid invite link found: %s", link)
            if progress is not None:
                progress.notify(f"Invalid invite link found {name}:{link}")
        else:
            logger.debug("Invite link active: %s", link)
        return outcome

    def validate(
        self,
        records: Iterable[Union[CollectionRecord, str]],
        driver: PageDriver,
        stop_event=None,
        progress: Optional[ProgressSink] = None,
        report: Optional[InvalidLinkReport] = None,
        on_outcome: Optional[Callable[[ValidationOutcome], None]] = None,
    ) -> ValidationResult:
        """Check every entry in order, appending invalid ones to `report`.

        Pass the session's report to see invalid links as they are found;
        on cancellation it keeps only links classified before the stop.
        """
        report = report if report is not None else InvalidLinkReport()
        outcomes: List[ValidationOutcome] = []

        for entry in self._entries(records):
            if self._is_stopped(stop_event):
                logger.info("Validation cancelled before %s", entry)
                return ValidationResult(report=report, outcomes=outcomes, stopped=True)

            outcome = self.check_entry(entry, driver, progress)
            if outcome is None:
                continue
            outcomes.append(outcome)
            if outcome.is_invalid:
                report.add_outcome(outcome)
            if on_outcome is not None:
                on_outcome(outcome)

        return ValidationResult(report=report, outcomes=outcomes, stopped=False)
