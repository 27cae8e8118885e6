import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from invitecrawl.exceptions import SessionAlreadyRunningError, TelegramApiError
from invitecrawl.services.progress import TelegramProgressSink
from invitecrawl.services.report_emitters import TelegramReportEmitter
from invitecrawl.services.session_controller import SessionController

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome! Up and running."


class TelegramChat(BaseModel):
    id: Union[int, str]


class TelegramMessage(BaseModel):
    chat: TelegramChat
    text: Optional[str] = None


class TelegramUpdate(BaseModel):
    update_id: int = 0
    message: Optional[TelegramMessage] = None
    edited_message: Optional[TelegramMessage] = None


def _command_of(text: Optional[str]) -> Optional[str]:
    """Return the bot command in `text` ("/scrape@MyBot now" -> "/scrape")."""
    if not text or not text.startswith("/"):
        return None
    return text.split()[0].split("@", 1)[0].lower()


def create_telegram_router(session_controller: SessionController, telegram_client=None):
    """Webhook endpoint translating Telegram bot commands into session commands.

    Supported commands: /start, /scrape, /stop. Progress and the report of a
    session started from a chat are sent back to that chat.
    """
    router = APIRouter(prefix="/telegram", tags=["Telegram"])

    def _reply(chat_id, text: str) -> None:
        try:
            telegram_client.send_message(chat_id, text)
        except TelegramApiError as e:
            logger.warning("Could not reply to chat %s: %s", chat_id, e)

    @router.post("/webhook")
    def webhook(update: TelegramUpdate):
        if telegram_client is None:
            raise HTTPException(status_code=503, detail="TELEGRAM_BOT_TOKEN not configured")

        message = update.message or update.edited_message
        if message is None:
            return {"ok": True}
        command = _command_of(message.text)
        if command is None:
            return {"ok": True}
        chat_id = message.chat.id

        logger.info("%s command received from chat %s", command, chat_id)
        if command == "/start":
            _reply(chat_id, WELCOME_TEXT)
        elif command == "/scrape":
            try:
                session_controller.start(
                    progress=TelegramProgressSink(telegram_client, chat_id),
                    report_emitter=TelegramReportEmitter(telegram_client, chat_id),
                )
            except SessionAlreadyRunningError:
                _reply(chat_id, "A scraping process is already running. Send /stop first.")
        elif command == "/stop":
            if session_controller.stop() is None:
                _reply(chat_id, "No scraping process is running.")
            else:
                _reply(chat_id, "Stopping Scraping process")
        else:
            logger.debug("Ignoring unknown command %s", command)
        return {"ok": True}

    return router
