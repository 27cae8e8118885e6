import logging
from typing import Callable, Optional, Union

import requests

from invitecrawl.exceptions import TelegramApiError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"


class TelegramClient:
    """
    Minimal Telegram Bot API client.

    Requires http_client callable (requests.post-compatible) for dependency
    injection, so tests can run without patching.
    """

    def __init__(self, token: str, http_client: Callable, timeout: int = 10, api_base: str = DEFAULT_API_BASE):
        if not token:
            raise ValueError("token is required")
        self.token = token
        self.http_client = http_client
        self.timeout = timeout
        self.api_base = api_base.rstrip("/")

    def _url(self, method: str) -> str:
        return f"{self.api_base}/bot{self.token}/{method}"

    def _call(self, method: str, *, data: dict, files: Optional[dict] = None) -> dict:
        try:
            resp = self.http_client(self._url(method), data=data, files=files, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise TelegramApiError(method, str(e)) from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise TelegramApiError(method, f"non-JSON reply (status {resp.status_code})") from e

        if not payload.get("ok"):
            raise TelegramApiError(method, payload.get("description") or f"status {resp.status_code}")
        return payload.get("result") or {}

    def send_message(self, chat_id: Union[int, str], text: str, parse_mode: Optional[str] = None) -> dict:
        data = {"chat_id": chat_id, "text": text}
        if parse_mode:
            data["parse_mode"] = parse_mode
        return self._call("sendMessage", data=data)

    def send_document(self, chat_id: Union[int, str], filename: str, content: str) -> dict:
        files = {"document": (filename, content.encode("utf-8"), "text/plain")}
        return self._call("sendDocument", data={"chat_id": chat_id}, files=files)
