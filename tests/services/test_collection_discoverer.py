import threading
from unittest.mock import MagicMock

from invitecrawl.domain.href_set import HrefSet
from invitecrawl.domain.pipeline_options import PipelineOptions
from invitecrawl.domain.site_profile import SiteProfile
from invitecrawl.services.collection_discoverer import CollectionDiscoverer

DETAILS = "#details"
TITLE = "h1"
SUBTITLE = "h1 > span"


def _profile():
    return SiteProfile(
        listing_url="https://site.test/rankings",
        details_selector=DETAILS,
        title_selector=TITLE,
        subtitle_selector=SUBTITLE,
    )


def _discoverer(**opts):
    return CollectionDiscoverer(site_profile=_profile(), options=PipelineOptions(**opts))


def _collection_html(*links):
    return "<html><body>" + "".join(f'<a href="{link}">l</a>' for link in links) + "</body></html>"


def test_filter_keeps_marker_hrefs_only():
    hrefs = HrefSet(["https://site.test/collection/a", "https://site.test/account", "https://site.test/collection/b"])
    assert _discoverer().filter_collection_hrefs(hrefs) == [
        "https://site.test/collection/a",
        "https://site.test/collection/b",
    ]


def test_filter_on_plain_list_dedupes_in_order():
    assert _discoverer().filter_collection_hrefs(["/collection/b", "/x", "/collection/a", "/collection/b"]) == [
        "/collection/b",
        "/collection/a",
    ]


def test_record_keeps_only_community_links(make_driver, make_page):
    url = "https://site.test/collection/apes"
    page = make_page(
        html=_collection_html("https://discord.gg/apes", "https://twitter.com/apes", "https://apes.test"),
        elements={DETAILS},
        texts={TITLE: "Apes", SUBTITLE: "Club"},
    )
    driver = make_driver(pages={url: page})

    result = _discoverer().discover([url], driver)

    assert len(result.records) == 1
    record = result.records[0]
    assert record.title == "Apes Club"
    assert record.external_links == ["Apes Club:https://discord.gg/apes"]
    assert record.source_url == url


def test_title_with_identical_subtitle_is_not_repeated(make_driver, make_page):
    url = "https://site.test/collection/apes"
    driver = make_driver(pages={url: make_page(texts={TITLE: "Apes", SUBTITLE: "Apes"})})
    driver.goto(url)
    assert _discoverer().extract_title(driver) == "Apes"


def test_missing_title_gives_empty_name(make_driver, make_page):
    url = "https://site.test/collection/x"
    driver = make_driver(pages={url: make_page(html=_collection_html("https://discord.gg/x"), elements={DETAILS})})

    result = _discoverer().discover([url], driver)

    assert result.records[0].external_links == [":https://discord.gg/x"]


def test_collection_without_community_links_is_dropped(make_driver, make_page):
    url = "https://site.test/collection/quiet"
    driver = make_driver(pages={url: make_page(html=_collection_html("https://quiet.test"), elements={DETAILS})})

    result = _discoverer().discover([url], driver)

    assert result.records == []
    assert result.stopped is False


def test_item_failing_every_time_gets_exactly_max_retries_attempts(make_driver, make_page):
    bad = "https://site.test/collection/bad"
    good = "https://site.test/collection/good"
    driver = make_driver(
        pages={good: make_page(html=_collection_html("https://discord.gg/good"), elements={DETAILS})},
        nav_failures={bad: -1},
    )

    result = _discoverer().discover([bad, good], driver)

    assert [u for u, _ in driver.gotos].count(bad) == 3
    assert len(result.records) == 1
    assert result.records[0].source_url == good


def test_missing_details_control_uses_up_attempts(make_driver, make_page):
    url = "https://site.test/collection/nodetails"
    driver = make_driver(pages={url: make_page(html=_collection_html("https://discord.gg/a"))})

    record = _discoverer().process_item(url, driver)

    assert record is None
    assert len(driver.gotos) == 3
    assert driver.clicks == []


def test_transient_failure_recovers_on_second_attempt(make_driver, make_page):
    url = "https://site.test/collection/flaky"
    driver = make_driver(
        pages={url: make_page(html=_collection_html("https://discord.gg/flaky"), elements={DETAILS})},
        nav_failures={url: 1},
    )

    record = _discoverer().process_item(url, driver)

    assert record is not None
    assert len(driver.gotos) == 2
    assert driver.gotos[0][1] == 60_000


def test_progress_is_notified_per_attempt(make_driver, make_page):
    url = "https://site.test/collection/a"
    driver = make_driver(pages={url: make_page(elements={DETAILS})})
    progress = MagicMock()

    _discoverer().process_item(url, driver, progress)

    progress.notify.assert_called_once_with(f'Scraping <a href="{url}">Link</a>', html=True)


def test_stop_between_items_returns_partial_records(make_driver, make_page):
    first = "https://site.test/collection/1"
    second = "https://site.test/collection/2"
    page = make_page(html=_collection_html("https://discord.gg/z"), elements={DETAILS})
    driver = make_driver(pages={first: page, second: page})
    stop = threading.Event()
    seen = []

    def on_item(url):
        seen.append(url)
        stop.set()

    result = _discoverer().discover([first, second], driver, stop, on_item=on_item)

    assert result.stopped is True
    assert seen == [first]
    assert [r.source_url for r in result.records] == [first]
