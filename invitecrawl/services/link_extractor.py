import logging
from typing import Callable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class LinkExtractor:
    """Extract absolute anchor hrefs from rendered HTML."""

    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
    ):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract_hrefs(self, base_url: str, html: Optional[str]) -> List[str]:
        """Return every anchor href resolved against `base_url`, in document order.

        Nothing is dropped by scheme; marker filters downstream decide what
        is kept. Duplicates are kept too; callers that need a set merge into
        an HrefSet.
        """
        if not html:
            return []
        soup = self._soup_factory(html)
        return [urljoin(base_url, (a.get("href") or "").strip()) for a in soup.find_all("a", href=True)]

    def extract_matching(self, base_url: str, html: Optional[str], marker: str) -> List[str]:
        """Return hrefs containing `marker` anywhere, in document order."""
        return [u for u in self.extract_hrefs(base_url, html) if marker in u]
