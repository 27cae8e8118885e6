import threading
from typing import Optional

from invitecrawl.domain.invalid_link_report import InvalidLinkReport

STATUS_IDLE = "idle"
STATUS_RUNNING = "running"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUS_FAILED = "failed"

TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED, STATUS_FAILED)


class CrawlSession:
    """
    Full lifecycle tracking for a single crawl session.

    Holds the session's stop event (the cancellation request), its current
    status, progress counters and the invalid-link report accumulated so far.

    The session can optionally report progress to a session registry so
    status queries see live counters.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        stop_event: Optional[threading.Event] = None,
        registry=None,
    ):
        self.session_id = session_id
        # A new event per session, so a previous stop request never leaks into the next run.
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self._registry = registry

        self.status: str = STATUS_IDLE
        self.stage: Optional[str] = None
        self.error: Optional[str] = None
        self.report = InvalidLinkReport()

        self.hrefs_collected: int = 0
        self.items_attempted: int = 0
        self.links_checked: int = 0

    def mark_running(self) -> None:
        if self.status != STATUS_IDLE:
            raise RuntimeError(f"Cannot start session in status {self.status!r}")
        self.status = STATUS_RUNNING

    def enter_stage(self, stage: str) -> None:
        self.stage = stage
        self.update_progress()

    def update_progress(self) -> None:
        """Report current counters to the registry if tracking is active."""
        if self._registry is not None and self.session_id is not None:
            self._registry.update(
                self.session_id,
                stage=self.stage,
                hrefs_collected=self.hrefs_collected,
                items_attempted=self.items_attempted,
                links_checked=self.links_checked,
            )

    def finish(self, status: str, error: Optional[str] = None) -> None:
        """Move to a terminal status and close out registry tracking.

        Args:
            status: "completed", "cancelled" or "failed"
            error: Optional error message if status is "failed"
        """
        if status not in TERMINAL_STATUSES:
            raise ValueError(f"Unknown terminal status: {status!r}")
        self.status = status
        self.error = error
        if self._registry is not None and self.session_id is not None:
            self._registry.finish(
                self.session_id,
                status=status,
                error=error,
                invalid_links=self.report.entries,
            )

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def __repr__(self):
        return f"<CrawlSession id={self.session_id} status={self.status}>"
