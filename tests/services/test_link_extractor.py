from unittest.mock import MagicMock

from bs4 import BeautifulSoup

from invitecrawl.services.link_extractor import LinkExtractor


def test_extract_hrefs_resolves_every_anchor_in_document_order():
    html = """
    <html><body>
      <a href="/collection/apes">Apes</a>
      <a href="https://discord.gg/apes">Discord</a>
      <a href="#top">Top</a>
      <a href="javascript:void(0)">JS</a>
      <a href="mailto:hi@site.test">Mail</a>
      <a>No href</a>
      <a href="/collection/apes">Apes again</a>
    </body></html>
    """
    urls = LinkExtractor().extract_hrefs("https://site.test/rankings", html)

    assert urls == [
        "https://site.test/collection/apes",
        "https://discord.gg/apes",
        "https://site.test/rankings#top",
        "javascript:void(0)",
        "mailto:hi@site.test",
        "https://site.test/collection/apes",
    ]


def test_fragment_anchor_with_marker_is_matched():
    html = '<a href="#join-discord">Join</a><a href="#top">Top</a>'
    assert LinkExtractor().extract_matching("https://site.test/collection/apes", html, "discord") == [
        "https://site.test/collection/apes#join-discord",
    ]


def test_extract_hrefs_on_empty_html():
    assert LinkExtractor().extract_hrefs("https://site.test", "") == []
    assert LinkExtractor().extract_hrefs("https://site.test", None) == []


def test_extract_matching_keeps_marker_anywhere():
    html = '<a href="https://discord.gg/a">a</a><a href="https://x.test/?to=discord">b</a><a href="https://x.test">c</a>'
    assert LinkExtractor().extract_matching("https://site.test", html, "discord") == [
        "https://discord.gg/a",
        "https://x.test/?to=discord",
    ]


def test_custom_soup_factory_is_used():
    factory = MagicMock(side_effect=lambda html: BeautifulSoup(html, "html.parser"))
    LinkExtractor(soup_factory=factory).extract_hrefs("https://site.test", "<a href='/a'>a</a>")
    factory.assert_called_once()
