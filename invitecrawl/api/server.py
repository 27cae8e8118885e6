import logging

from fastapi import FastAPI

from invitecrawl.api.routers import (
    create_sessions_router,
    create_systems_router,
    create_telegram_router,
)
from invitecrawl.container import ENV

logger = logging.getLogger(__name__)


def create_app(container) -> FastAPI:
    """Return the FastAPI application with command and status endpoints.

    - `/sessions/*` start, stop and inspect crawl sessions.
    - `/telegram/webhook` accepts bot commands when a bot token is configured.
    - `/systems/*` health and effective configuration.
    """
    app = FastAPI(title="InviteCrawl", version="0.1.0")

    session_controller = container.session_controller()
    telegram_client = container.telegram_client()
    if telegram_client is None:
        logger.info("TELEGRAM_BOT_TOKEN not set - Telegram webhook disabled")

    app.include_router(create_sessions_router(session_controller))
    app.include_router(create_telegram_router(session_controller, telegram_client))
    app.include_router(create_systems_router(ENV))
    return app
