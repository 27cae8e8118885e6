import logging
from typing import Optional

from invitecrawl.domain.crawl_session import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_FAILED,
    CrawlSession,
)
from invitecrawl.domain.site_profile import SiteProfile
from invitecrawl.domain.stage_results import SessionResult
from invitecrawl.domain.validation_outcome import ValidationOutcome
from invitecrawl.exceptions import SessionFatalError
from invitecrawl.services.collection_discoverer import CollectionDiscoverer
from invitecrawl.services.link_validator import LinkValidator
from invitecrawl.services.page_driver import PageDriverFactory
from invitecrawl.services.pagination_controller import PaginationController
from invitecrawl.services.progress import NullProgressSink, ProgressSink
from invitecrawl.services.report_emitters import LoggingReportEmitter, ReportEmitter

logger = logging.getLogger(__name__)

STAGE_PAGINATION = "pagination"
STAGE_DISCOVERY = "discovery"
STAGE_VALIDATION = "validation"


class SessionRunner:
    """Runs one crawl session: pagination -> discovery -> validation -> report.

    This class owns the session state machine and the page driver's lifetime.
    The driver is closed exactly once on every exit path; stages never close it.
    """

    def __init__(
        self,
        *,
        driver_factory: PageDriverFactory,
        pagination_controller: PaginationController,
        collection_discoverer: CollectionDiscoverer,
        link_validator: LinkValidator,
        site_profile: SiteProfile,
        report_emitter: Optional[ReportEmitter] = None,
        progress: Optional[ProgressSink] = None,
    ):
        self.driver_factory = driver_factory
        self.pagination_controller = pagination_controller
        self.collection_discoverer = collection_discoverer
        self.link_validator = link_validator
        self.site_profile = site_profile
        self.report_emitter = report_emitter or LoggingReportEmitter()
        self.progress = progress or NullProgressSink()

    def _notify(self, progress: ProgressSink, text: str) -> None:
        try:
            progress.notify(text)
        except Exception:
            logger.exception("Progress notification failed: %s", text)

    def _run_stages(self, session: CrawlSession, progress: ProgressSink) -> str:
        """Run the pipeline stages and return the terminal status."""
        stop_event = session.stop_event
        driver = self.driver_factory()
        try:
            session.enter_stage(STAGE_PAGINATION)
            pagination = self.pagination_controller.collect(self.site_profile.listing_url, driver, stop_event)
            session.hrefs_collected = len(pagination.hrefs)
            session.update_progress()
            if pagination.stopped:
                return STATUS_CANCELLED

            def _count_item(url: str) -> None:
                session.items_attempted += 1
                session.update_progress()

            session.enter_stage(STAGE_DISCOVERY)
            discovery = self.collection_discoverer.discover(
                pagination.hrefs,
                driver,
                stop_event,
                progress=progress,
                on_item=_count_item,
            )
            if discovery.stopped:
                return STATUS_CANCELLED

            def _count_outcome(outcome: ValidationOutcome) -> None:
                session.links_checked += 1
                session.update_progress()

            session.enter_stage(STAGE_VALIDATION)
            validation = self.link_validator.validate(
                discovery.records,
                driver,
                stop_event,
                progress=progress,
                report=session.report,
                on_outcome=_count_outcome,
            )
            if validation.stopped:
                return STATUS_CANCELLED
            return STATUS_COMPLETED
        finally:
            driver.close()

    def _deliver_report(self, session: CrawlSession, progress: ProgressSink, report_emitter: ReportEmitter) -> None:
        report = session.report
        if not report:
            logger.info("No invalid links found")
            self._notify(progress, "No invalid links found")
            return
        try:
            report_emitter.emit(report)
        except Exception:
            logger.exception("Could not deliver report for session %s", session.session_id)
            self._notify(progress, f"Found {len(report)} invalid links but the results file could not be sent")
            return
        self._notify(progress, "Results file has been sent!")

    def run(
        self,
        session: CrawlSession,
        progress: Optional[ProgressSink] = None,
        report_emitter: Optional[ReportEmitter] = None,
    ) -> SessionResult:
        progress = progress or self.progress
        report_emitter = report_emitter or self.report_emitter

        session.mark_running()
        logger.info("Starting scraping session %s", session.session_id)
        self._notify(progress, "Starting scraping process")

        try:
            status = self._run_stages(session, progress)
        except Exception as e:
            fatal = SessionFatalError(session.session_id, e)
            logger.error("Session %s failed: %s", session.session_id, fatal, exc_info=True)
            session.finish(STATUS_FAILED, error=str(fatal))
            self._notify(progress, f"An error occurred: {fatal}")
            return SessionResult(session.session_id, STATUS_FAILED, session.report, str(fatal))

        if status == STATUS_CANCELLED:
            logger.info("Session %s cancelled with %s invalid links so far", session.session_id, len(session.report))
            session.finish(STATUS_CANCELLED)
            self._notify(progress, "Scraping process has been stopped.")
            return SessionResult(session.session_id, STATUS_CANCELLED, session.report)

        self._deliver_report(session, progress, report_emitter)
        session.finish(STATUS_COMPLETED)
        logger.info("Session %s completed: %s invalid links", session.session_id, len(session.report))
        return SessionResult(session.session_id, STATUS_COMPLETED, session.report)
