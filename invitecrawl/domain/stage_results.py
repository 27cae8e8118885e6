"""Stage and session result data models."""
from typing import List, NamedTuple, Optional

from invitecrawl.domain.collection_record import CollectionRecord
from invitecrawl.domain.href_set import HrefSet
from invitecrawl.domain.invalid_link_report import InvalidLinkReport
from invitecrawl.domain.validation_outcome import ValidationOutcome


class PaginationResult(NamedTuple):
    """Result of driving the listing page."""
    hrefs: HrefSet
    """Every href seen on the listing page, deduplicated"""

    stopped: bool
    """True if the loop ended because cancellation was requested"""

    cycles: int = 0
    """Number of scroll/extract cycles performed"""


class DiscoveryResult(NamedTuple):
    """Result of visiting collection pages."""
    records: List[CollectionRecord]
    stopped: bool


class ValidationResult(NamedTuple):
    """Result of checking community links.

    `report` only contains links classified before cancellation was observed.
    """
    report: InvalidLinkReport
    outcomes: List[ValidationOutcome]
    stopped: bool


class SessionResult(NamedTuple):
    """Final outcome of one crawl session."""
    session_id: Optional[str]
    status: str
    report: InvalidLinkReport
    error: Optional[str] = None
