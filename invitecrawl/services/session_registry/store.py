from __future__ import annotations

from collections import OrderedDict, deque
from datetime import datetime
from typing import Deque, List, Optional

from .models import SessionRecord

PROGRESS_FIELDS = ("stage", "hrefs_collected", "items_attempted", "links_checked")


class SessionRecordStore:
    """Session records kept in start order, with a retention cap on finished ones.

    Not thread-safe; the registry serialises access.
    """

    def __init__(self, *, max_completed_records: int):
        if max_completed_records < 0:
            raise ValueError("max_completed_records must be >= 0")
        self._records: "OrderedDict[str, SessionRecord]" = OrderedDict()
        self._retention = max_completed_records
        self._finished_ids: Deque[str] = deque()

    def create_running(self, *, session_id: str, now: datetime) -> SessionRecord:
        rec = SessionRecord(id=session_id, status="running", started_at=now, last_seen=now)
        self._records[session_id] = rec
        return rec

    def get(self, session_id: str) -> Optional[SessionRecord]:
        return self._records.get(session_id)

    def update(self, session_id: str, *, now: datetime, **progress) -> bool:
        """Apply progress fields that are not None. Unknown fields raise TypeError."""
        rec = self._records.get(session_id)
        if rec is None:
            return False
        unknown = set(progress) - set(PROGRESS_FIELDS)
        if unknown:
            raise TypeError(f"unknown progress fields: {', '.join(sorted(unknown))}")
        for name, value in progress.items():
            if value is not None:
                setattr(rec, name, value)
        rec.last_seen = now
        return True

    def mark_stop_requested(self, session_id: str, *, now: datetime) -> bool:
        rec = self._records.get(session_id)
        if rec is None or rec.status != "running":
            return False
        rec.stop_requested = True
        rec.last_seen = now
        return True

    def finish(
        self,
        session_id: str,
        *,
        status: str,
        error: Optional[str],
        invalid_links: Optional[List[str]],
        now: datetime,
    ) -> bool:
        rec = self._records.get(session_id)
        if rec is None:
            return False
        rec.status = status
        rec.finished_at = rec.last_seen = now
        rec.error = error or rec.error
        if invalid_links is not None:
            rec.invalid_links = list(invalid_links)
        self._finished_ids.append(session_id)
        return True

    def evict_completed_overflow(self) -> List[str]:
        """Drop the oldest finished records beyond the retention cap."""
        evicted: List[str] = []
        while len(self._finished_ids) > self._retention:
            sid = self._finished_ids.popleft()
            if self._records.pop(sid, None) is not None:
                evicted.append(sid)
        return evicted

    def list_recent(self, limit: Optional[int] = None) -> List[SessionRecord]:
        """Return records most recently started first."""
        recs = list(reversed(self._records.values()))
        if limit is not None:
            recs = recs[: max(0, int(limit))]
        return recs
