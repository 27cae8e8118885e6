from __future__ import annotations

import threading
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from invitecrawl.exceptions import SessionAlreadyRunningError

from .models import SessionHandle
from .store import SessionRecordStore


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemorySessionRegistry:
    """Thread-safe in-memory registry for the active and recent sessions.

    At most one session is running at a time. Each session gets its own stop
    event, so a stop request never carries over to the next session. History
    is ephemeral and bounded by `max_completed_records`.
    """

    def __init__(self, *, max_completed_records: int = 50, event_factory=threading.Event):
        self._lock = threading.Lock()
        self._records = SessionRecordStore(max_completed_records=max_completed_records)
        self._event_factory = event_factory
        self._active_id: Optional[str] = None
        self._active_event: Optional[threading.Event] = None

    def start(self) -> SessionHandle:
        with self._lock:
            if self._active_id is not None:
                raise SessionAlreadyRunningError(self._active_id)
            sid = str(uuid.uuid4())
            self._records.create_running(session_id=sid, now=_now())
            stop_event = self._event_factory()
            self._active_id = sid
            self._active_event = stop_event
            return SessionHandle(session_id=sid, stop_event=stop_event)

    def update(
        self,
        session_id: str,
        *,
        stage: Optional[str] = None,
        hrefs_collected: Optional[int] = None,
        items_attempted: Optional[int] = None,
        links_checked: Optional[int] = None,
    ) -> bool:
        with self._lock:
            return self._records.update(
                session_id,
                stage=stage,
                hrefs_collected=hrefs_collected,
                items_attempted=items_attempted,
                links_checked=links_checked,
                now=_now(),
            )

    def finish(
        self,
        session_id: str,
        *,
        status: str = "completed",
        error: Optional[str] = None,
        invalid_links: Optional[List[str]] = None,
    ) -> bool:
        with self._lock:
            ok = self._records.finish(session_id, status=status, error=error, invalid_links=invalid_links, now=_now())
            if session_id == self._active_id:
                self._active_id = None
                self._active_event = None
            self._records.evict_completed_overflow()
            return ok

    def cancel(self, session_id: Optional[str] = None) -> Optional[str]:
        """Request cancellation of the running session.

        The stop event is set immediately; the session itself moves to
        "cancelled" once its pipeline observes the request. Returns the id of
        the session asked to stop, or None if nothing matching is running.
        """
        with self._lock:
            if self._active_id is None or self._active_event is None:
                return None
            if session_id is not None and session_id != self._active_id:
                return None
            self._active_event.set()
            self._records.mark_stop_requested(self._active_id, now=_now())
            return self._active_id

    def get(self, session_id: str) -> Optional[Dict]:
        with self._lock:
            rec = self._records.get(session_id)
            return asdict(rec) if rec else None

    def active(self) -> Optional[Dict]:
        with self._lock:
            if self._active_id is None:
                return None
            rec = self._records.get(self._active_id)
            return asdict(rec) if rec else None

    def list_recent(self, limit: Optional[int] = None) -> List[Dict]:
        with self._lock:
            return [asdict(r) for r in self._records.list_recent(limit)]
