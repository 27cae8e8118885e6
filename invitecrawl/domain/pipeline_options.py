from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PipelineOptions:
    """Fixed pacing and retry constants for one crawl session."""

    scroll_steps: int = 10
    scroll_interval_ms: int = 100
    scroll_settle_seconds: float = 4.0
    load_more_settle_seconds: float = 2.0
    link_settle_seconds: float = 2.0
    item_navigation_timeout_ms: int = 60_000
    max_retries: int = 3
    # None keeps the listing loop unbounded; only the load-more affordance ends it.
    max_pagination_cycles: Optional[int] = None

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.scroll_steps < 0:
            raise ValueError("scroll_steps must be >= 0")
        if self.max_pagination_cycles is not None and self.max_pagination_cycles <= 0:
            raise ValueError("max_pagination_cycles must be > 0 when set")
