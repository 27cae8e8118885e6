from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class SessionRecord:
    id: str
    status: str
    started_at: datetime
    last_seen: datetime
    finished_at: Optional[datetime] = None
    stage: Optional[str] = None
    hrefs_collected: int = 0
    items_attempted: int = 0
    links_checked: int = 0
    stop_requested: bool = False
    error: Optional[str] = None
    invalid_links: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SessionHandle:
    session_id: str
    stop_event: threading.Event
