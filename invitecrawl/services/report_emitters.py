import logging
import os
from typing import Optional, Protocol, Union

from invitecrawl.domain.invalid_link_report import InvalidLinkReport

logger = logging.getLogger(__name__)


class ReportEmitter(Protocol):
    """Delivers the invalid-link report at the end of a completed session."""

    def emit(self, report: InvalidLinkReport) -> Optional[str]: ...


class LoggingReportEmitter:
    def emit(self, report: InvalidLinkReport) -> Optional[str]:
        if not report:
            logger.info("No invalid links found")
            return None
        logger.info("Invalid links (%s):\n%s", len(report), report.render())
        return None


class FileReportEmitter:
    """Writes the report as a plain-text file into `directory`.

    Returns the written path, or None when the report is empty.
    """

    def __init__(self, directory: str, filename: str = InvalidLinkReport.FILENAME):
        self.directory = directory
        self.filename = filename

    def emit(self, report: InvalidLinkReport) -> Optional[str]:
        if not report:
            return None
        os.makedirs(self.directory, exist_ok=True)
        path = os.path.join(self.directory, self.filename)
        with open(path, "w", encoding="utf-8") as f:
            f.write(report.render())
        logger.info("Wrote %s invalid links to %s", len(report), path)
        return path


class TelegramReportEmitter:
    """Sends the report to a Telegram chat as an `invalidLinks.txt` document."""

    def __init__(self, client, chat_id: Union[int, str], filename: str = InvalidLinkReport.FILENAME):
        self.client = client
        self.chat_id = chat_id
        self.filename = filename

    def emit(self, report: InvalidLinkReport) -> Optional[str]:
        if not report:
            return None
        self.client.send_document(self.chat_id, self.filename, report.render())
        logger.info("Sent %s invalid links to chat %s", len(report), self.chat_id)
        return self.filename
