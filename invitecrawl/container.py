"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from invitecrawl import config as env
from invitecrawl.domain.pipeline_options import PipelineOptions
from invitecrawl.domain.site_profile import DEFAULT_LISTING_URL
from invitecrawl.services.collection_discoverer import CollectionDiscoverer
from invitecrawl.services.link_extractor import LinkExtractor
from invitecrawl.services.link_validator import LinkValidator
from invitecrawl.services.pagination_controller import PaginationController
from invitecrawl.services.playwright_page_driver import (
    DEFAULT_USER_AGENT,
    PlaywrightDriverOptions,
    PlaywrightPageDriverFactory,
)
from invitecrawl.services.progress import LoggingProgressSink
from invitecrawl.services.report_emitters import FileReportEmitter, LoggingReportEmitter
from invitecrawl.services.session_controller import SessionController
from invitecrawl.services.session_registry import InMemorySessionRegistry
from invitecrawl.services.session_runner import SessionRunner
from invitecrawl.services.site_profile_loader import load_site_profile
from invitecrawl.services.telegram_client import DEFAULT_API_BASE, TelegramClient


# Environment variables used by the container (read via `invitecrawl.config` helpers).
#
# LISTING_URL (str, default: the rankings page)
#   Listing page the pagination stage starts from. Overrides the site profile.
#
# SITE_PROFILE_PATH (str | optional)
#   YAML file overriding selectors and markers of the built-in site profile.
#
# USER_AGENT (str, default: Firefox 113 desktop UA)
#   User-Agent of the browser context.
#
# HEADLESS (bool, default: true)
#   Run Chromium headless.
#
# NAVIGATION_TIMEOUT_MS (int, default: 30000)
#   Default navigation timeout (listing page and invite links).
#
# ITEM_NAVIGATION_TIMEOUT_MS (int, default: 60000)
#   Navigation timeout for collection pages.
#
# MAX_RETRIES (int, default: 3)
#   Attempts per collection page.
#
# SCROLL_STEPS / SCROLL_INTERVAL_MS (int, default: 10 / 100)
#   Scroll increments per listing cycle and the pause between them.
#
# SCROLL_SETTLE_SECONDS / LOAD_MORE_SETTLE_SECONDS / LINK_SETTLE_SECONDS (float, default: 4 / 2 / 2)
#   Fixed pauses after scrolling, after clicking load-more and after opening an invite link.
#
# MAX_PAGINATION_CYCLES (int | optional)
#   Hard cap on listing cycles. Unset keeps the loop unbounded.
#
# TELEGRAM_BOT_TOKEN (str | optional)
#   Enables the Telegram webhook and Telegram progress/report delivery.
#
# TELEGRAM_API_BASE (str, default: https://api.telegram.org)
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for outbound Telegram API requests.
#
# REPORT_DIR (str | optional)
#   If set, reports of sessions started over HTTP are written there as invalidLinks.txt.
#
# SESSION_HISTORY_SIZE (int, default: 50)
#   Finished sessions kept in memory for the status endpoints.
ENV = {
    "LISTING_URL": env.get_str_env("LISTING_URL", DEFAULT_LISTING_URL),
    "SITE_PROFILE_PATH": env.get_optional_str_env("SITE_PROFILE_PATH"),
    "USER_AGENT": env.get_str_env("USER_AGENT", DEFAULT_USER_AGENT),
    "HEADLESS": env.get_bool_env("HEADLESS", True),
    "NAVIGATION_TIMEOUT_MS": env.get_int_env("NAVIGATION_TIMEOUT_MS", 30_000),
    "ITEM_NAVIGATION_TIMEOUT_MS": env.get_int_env("ITEM_NAVIGATION_TIMEOUT_MS", 60_000),
    "MAX_RETRIES": env.get_int_env("MAX_RETRIES", 3),
    "SCROLL_STEPS": env.get_int_env("SCROLL_STEPS", 10),
    "SCROLL_INTERVAL_MS": env.get_int_env("SCROLL_INTERVAL_MS", 100),
    "SCROLL_SETTLE_SECONDS": env.get_float_env("SCROLL_SETTLE_SECONDS", 4.0),
    "LOAD_MORE_SETTLE_SECONDS": env.get_float_env("LOAD_MORE_SETTLE_SECONDS", 2.0),
    "LINK_SETTLE_SECONDS": env.get_float_env("LINK_SETTLE_SECONDS", 2.0),
    "MAX_PAGINATION_CYCLES": env.get_optional_int_env("MAX_PAGINATION_CYCLES"),
    "TELEGRAM_BOT_TOKEN": env.get_optional_str_env("TELEGRAM_BOT_TOKEN"),
    "TELEGRAM_API_BASE": env.get_str_env("TELEGRAM_API_BASE", DEFAULT_API_BASE),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "REPORT_DIR": env.get_optional_str_env("REPORT_DIR"),
    "SESSION_HISTORY_SIZE": env.get_int_env("SESSION_HISTORY_SIZE", 50),
}


def _make_telegram_client(token, http_client, timeout, api_base):
    if not token:
        return None
    return TelegramClient(token=token, http_client=http_client, timeout=timeout, api_base=api_base)


def _make_report_emitter(report_dir):
    if report_dir:
        return FileReportEmitter(report_dir)
    return LoggingReportEmitter()


class Container(containers.DeclarativeContainer):
    """Dependency injection container for InviteCrawl application."""

    config = providers.Configuration(default=ENV)

    site_profile = providers.Singleton(
        load_site_profile,
        path=config.SITE_PROFILE_PATH,
        listing_url=config.LISTING_URL,
    )

    pipeline_options = providers.Singleton(
        PipelineOptions,
        scroll_steps=config.SCROLL_STEPS.as_(int),
        scroll_interval_ms=config.SCROLL_INTERVAL_MS.as_(int),
        scroll_settle_seconds=config.SCROLL_SETTLE_SECONDS.as_(float),
        load_more_settle_seconds=config.LOAD_MORE_SETTLE_SECONDS.as_(float),
        link_settle_seconds=config.LINK_SETTLE_SECONDS.as_(float),
        item_navigation_timeout_ms=config.ITEM_NAVIGATION_TIMEOUT_MS.as_(int),
        max_retries=config.MAX_RETRIES.as_(int),
        max_pagination_cycles=config.MAX_PAGINATION_CYCLES,
    )

    driver_factory = providers.Singleton(
        PlaywrightPageDriverFactory,
        options=providers.Factory(
            PlaywrightDriverOptions,
            headless=config.HEADLESS.as_(bool),
            user_agent=config.USER_AGENT.as_(str),
            navigation_timeout_ms=config.NAVIGATION_TIMEOUT_MS.as_(int),
        ),
    )

    link_extractor = providers.Singleton(
        LinkExtractor
    )

    pagination_controller = providers.Singleton(
        PaginationController,
        site_profile=site_profile,
        options=pipeline_options,
        link_extractor=link_extractor,
    )

    collection_discoverer = providers.Singleton(
        CollectionDiscoverer,
        site_profile=site_profile,
        options=pipeline_options,
        link_extractor=link_extractor,
    )

    link_validator = providers.Singleton(
        LinkValidator,
        site_profile=site_profile,
        options=pipeline_options,
    )

    telegram_client = providers.Singleton(
        _make_telegram_client,
        token=config.TELEGRAM_BOT_TOKEN,
        http_client=providers.Object(requests.post),
        timeout=config.HTTP_TIMEOUT.as_(int),
        api_base=config.TELEGRAM_API_BASE.as_(str),
    )

    progress_sink = providers.Singleton(
        LoggingProgressSink
    )

    report_emitter = providers.Singleton(
        _make_report_emitter,
        report_dir=config.REPORT_DIR,
    )

    session_runner = providers.Singleton(
        SessionRunner,
        driver_factory=driver_factory,
        pagination_controller=pagination_controller,
        collection_discoverer=collection_discoverer,
        link_validator=link_validator,
        site_profile=site_profile,
        report_emitter=report_emitter,
        progress=progress_sink,
    )

    session_registry = providers.Singleton(
        InMemorySessionRegistry,
        max_completed_records=config.SESSION_HISTORY_SIZE.as_(int),
    )

    session_controller = providers.Singleton(
        SessionController,
        runner=session_runner,
        registry=session_registry,
    )
