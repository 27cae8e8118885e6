import html as html_lib
import logging
from typing import Protocol, Union

from invitecrawl.exceptions import TelegramApiError

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    """Receives human-readable progress notifications from the pipeline."""

    def notify(self, text: str, *, html: bool = False) -> None: ...


def link_markup(url: str, label: str) -> str:
    """Return an HTML anchor for `url`, escaping both parts."""
    return f'<a href="{html_lib.escape(url, quote=True)}">{html_lib.escape(label)}</a>'


class NullProgressSink:
    def notify(self, text: str, *, html: bool = False) -> None:
        return None


class LoggingProgressSink:
    def __init__(self, logger_name: str = "invitecrawl.progress"):
        self._logger = logging.getLogger(logger_name)

    def notify(self, text: str, *, html: bool = False) -> None:
        self._logger.info("%s", text)


class TelegramProgressSink:
    """Sends progress notifications to one Telegram chat.

    Delivery failures are logged and never interrupt the crawl.
    """

    def __init__(self, client, chat_id: Union[int, str]):
        self.client = client
        self.chat_id = chat_id

    def notify(self, text: str, *, html: bool = False) -> None:
        try:
            self.client.send_message(self.chat_id, text, parse_mode="HTML" if html else None)
        except TelegramApiError as e:
            logger.warning("Could not deliver progress to chat %s: %s", self.chat_id, e)
