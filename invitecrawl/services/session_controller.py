import logging
import threading
from typing import Dict, Optional

from invitecrawl.domain.crawl_session import STATUS_FAILED, CrawlSession
from invitecrawl.domain.stage_results import SessionResult
from invitecrawl.services.progress import ProgressSink
from invitecrawl.services.report_emitters import ReportEmitter
from invitecrawl.services.session_registry import InMemorySessionRegistry, SessionHandle

logger = logging.getLogger(__name__)


class SessionController:
    """Entry point for start/stop/status commands.

    `start` registers a new session (rejecting it while one is running) and
    runs the pipeline on a daemon worker thread. `stop` only sets the running
    session's stop event; the pipeline unwinds at its next checkpoint.
    """

    def __init__(
        self,
        *,
        runner,
        registry: InMemorySessionRegistry,
        thread_factory=threading.Thread,
    ):
        self.runner = runner
        self.registry = registry
        self._thread_factory = thread_factory

    def _run(self, session: CrawlSession, progress: Optional[ProgressSink], report_emitter: Optional[ReportEmitter]) -> Optional[SessionResult]:
        try:
            return self.runner.run(session, progress=progress, report_emitter=report_emitter)
        except Exception as e:
            logger.exception("Session %s crashed outside the pipeline", session.session_id)
            if not session.is_finished:
                session.finish(STATUS_FAILED, error=str(e))
            return None

    def start(self, progress: Optional[ProgressSink] = None, report_emitter: Optional[ReportEmitter] = None) -> SessionHandle:
        """Start a session in the background.

        Raises SessionAlreadyRunningError if a session is already running.
        """
        handle = self.registry.start()
        session = CrawlSession(handle.session_id, handle.stop_event, registry=self.registry)
        try:
            thread = self._thread_factory(
                target=self._run,
                args=(session, progress, report_emitter),
                name=f"session-{handle.session_id[:8]}",
                daemon=True,
            )
            thread.start()
        except Exception as e:
            logger.exception("Could not start worker for session %s", handle.session_id)
            session.finish(STATUS_FAILED, error=str(e))
            raise
        logger.info("Session %s started", handle.session_id)
        return handle

    def run_blocking(self, progress: Optional[ProgressSink] = None, report_emitter: Optional[ReportEmitter] = None) -> Optional[SessionResult]:
        """Run a session on the calling thread and return its result."""
        handle = self.registry.start()
        session = CrawlSession(handle.session_id, handle.stop_event, registry=self.registry)
        return self._run(session, progress, report_emitter)

    def stop(self, session_id: Optional[str] = None) -> Optional[str]:
        sid = self.registry.cancel(session_id)
        if sid is None:
            logger.info("Stop requested but no session is running")
        else:
            logger.info("Stop requested for session %s", sid)
        return sid

    def status(self) -> Optional[Dict]:
        return self.registry.active()
