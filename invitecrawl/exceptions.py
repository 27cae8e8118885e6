"""Custom exceptions for InviteCrawl services."""
from typing import Optional


class PageDriverError(Exception):
    """Raised when the page driver itself fails or becomes unusable."""


class NavigationError(PageDriverError):
    """Raised when the page driver could not reach a URL."""

    def __init__(self, url: str, original: Optional[Exception] = None):
        self.url = url
        self.original = original
        super().__init__(f"Navigation failed for {url}: {original}")


class ExtractionError(PageDriverError):
    """Raised when an expected DOM query could not be evaluated."""

    def __init__(self, selector: str, original: Optional[Exception] = None):
        self.selector = selector
        self.original = original
        super().__init__(f"Extraction failed for {selector!r}: {original}")


class MalformedRecordError(ValueError):
    """Raised when a 'name:link' record lacks the scheme marker."""

    def __init__(self, record: str, marker: str):
        self.record = record
        self.marker = marker
        super().__init__(f"Record {record!r} does not contain {marker!r}")


class SessionFatalError(Exception):
    """Raised when an error escapes stage-local handling and aborts the session."""

    def __init__(self, session_id: Optional[str], original: Exception):
        self.session_id = session_id
        self.original = original
        super().__init__(str(original))


class SessionAlreadyRunningError(Exception):
    """Raised when a session is started while another one is running."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} is already running")


class TelegramApiError(Exception):
    """Raised when a Telegram Bot API call fails."""

    def __init__(self, method: str, reason: str):
        self.method = method
        self.reason = reason
        super().__init__(f"Telegram {method} failed: {reason}")


class SiteProfileError(Exception):
    """Raised when a site profile file cannot be loaded or is invalid."""

    def __init__(self, path: str, reason: str = "invalid"):
        self.path = path
        self.reason = reason
        super().__init__(f"Site profile '{path}' {reason}")
