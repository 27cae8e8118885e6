from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from invitecrawl.api.routers.telegram import WELCOME_TEXT, TelegramUpdate, _command_of, create_telegram_router
from invitecrawl.exceptions import SessionAlreadyRunningError, TelegramApiError
from invitecrawl.services.progress import TelegramProgressSink
from invitecrawl.services.report_emitters import TelegramReportEmitter


def _get_endpoint(router, path: str, method: str):
    for route in router.routes:
        if getattr(route, "path", None) != path:
            continue
        methods = getattr(route, "methods", set())
        if method.upper() in methods:
            return route.endpoint
    raise AssertionError(f"No route found for {method} {path}")


def _update(text, chat_id=77):
    return TelegramUpdate(update_id=1, message={"chat": {"id": chat_id}, "text": text})


def _webhook(controller, client):
    return _get_endpoint(create_telegram_router(controller, client), "/telegram/webhook", "POST")


def test_command_parsing():
    assert _command_of("/scrape") == "/scrape"
    assert _command_of("/Stop@InviteBot now") == "/stop"
    assert _command_of("hello") is None
    assert _command_of(None) is None


def test_webhook_disabled_without_client():
    with pytest.raises(HTTPException) as exc:
        _webhook(Mock(), None)(update=_update("/start"))
    assert exc.value.status_code == 503


def test_start_command_replies_welcome():
    client = Mock()
    assert _webhook(Mock(), client)(update=_update("/start")) == {"ok": True}
    client.send_message.assert_called_once_with(77, WELCOME_TEXT)


def test_scrape_starts_session_reporting_to_chat():
    client = Mock()
    controller = Mock()

    _webhook(controller, client)(update=_update("/scrape"))

    kwargs = controller.start.call_args.kwargs
    assert isinstance(kwargs["progress"], TelegramProgressSink)
    assert kwargs["progress"].chat_id == 77
    assert isinstance(kwargs["report_emitter"], TelegramReportEmitter)
    assert kwargs["report_emitter"].chat_id == 77


def test_scrape_while_running_tells_the_chat():
    client = Mock()
    controller = Mock(start=Mock(side_effect=SessionAlreadyRunningError("abc")))

    _webhook(controller, client)(update=_update("/scrape"))

    client.send_message.assert_called_once_with(77, "A scraping process is already running. Send /stop first.")


def test_stop_command_acknowledges():
    client = Mock()
    controller = Mock(stop=Mock(return_value="abc"))

    _webhook(controller, client)(update=_update("/stop"))

    client.send_message.assert_called_once_with(77, "Stopping Scraping process")


def test_stop_with_nothing_running():
    client = Mock()
    controller = Mock(stop=Mock(return_value=None))

    _webhook(controller, client)(update=_update("/stop"))

    client.send_message.assert_called_once_with(77, "No scraping process is running.")


def test_non_command_messages_are_ignored():
    client = Mock()
    controller = Mock()

    assert _webhook(controller, client)(update=_update("hi there")) == {"ok": True}
    assert _webhook(controller, client)(update=TelegramUpdate(update_id=2)) == {"ok": True}
    controller.start.assert_not_called()
    client.send_message.assert_not_called()


def test_reply_failure_does_not_fail_webhook():
    client = Mock(send_message=Mock(side_effect=TelegramApiError("sendMessage", "Forbidden")))
    assert _webhook(Mock(), client)(update=_update("/start")) == {"ok": True}
