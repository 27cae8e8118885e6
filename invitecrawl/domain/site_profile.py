from __future__ import annotations

from dataclasses import dataclass

_TITLE_XPATH = '//*[@id="main"]/main/div/div/div/div[1]/div/div[2]/div[1]/div[1]/div[2]/div/div/h1'

DEFAULT_LISTING_URL = "https://opensea.io/rankings?sortBy=one_day_volume"


@dataclass(frozen=True)
class SiteProfile:
    """Selector and marker contract for the crawled site.

    Selectors use Playwright selector syntax (``xpath=...`` or CSS). Markers are
    plain substrings matched anywhere in a URL or record.
    """

    listing_url: str = DEFAULT_LISTING_URL
    load_more_selector: str = 'xpath=//i[text()="arrow_forward_ios"]'
    details_selector: str = 'xpath=//i[text()="more_horiz"]'
    title_selector: str = f"xpath={_TITLE_XPATH}"
    subtitle_selector: str = f"xpath={_TITLE_XPATH}/span"
    item_marker: str = "collection"
    community_marker: str = "discord"
    scheme_marker: str = "https"
    invalid_phrase: str = "invite invalid"

    def __post_init__(self):
        for name in ("listing_url", "load_more_selector", "details_selector", "title_selector", "item_marker", "community_marker", "scheme_marker", "invalid_phrase"):
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and value.strip() == ""):
                raise ValueError(f"{name} is required")
