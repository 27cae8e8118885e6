from typing import Iterable, Iterator, List, Set


class HrefSet:
    """
    Accumulates anchor hrefs discovered on the listing page.

    Order is irrelevant and duplicates collapse; entries are never removed
    during a session.
    """

    def __init__(self, hrefs: Iterable[str] = ()):
        self._hrefs: Set[str] = set()
        self.merge(hrefs)

    def add(self, href: str) -> bool:
        """Add a single href. Returns True if it was not already present."""
        if not href or href in self._hrefs:
            return False
        self._hrefs.add(href)
        return True

    def merge(self, hrefs: Iterable[str]) -> int:
        """Union `hrefs` into the set. Returns the number of new entries."""
        added = 0
        for href in hrefs:
            if self.add(href):
                added += 1
        return added

    def filter(self, marker: str) -> List[str]:
        """Return the hrefs containing `marker` anywhere, sorted for stable iteration."""
        return sorted(h for h in self._hrefs if marker in h)

    def __contains__(self, href: object) -> bool:
        return href in self._hrefs

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._hrefs))

    def __len__(self) -> int:
        return len(self._hrefs)

    def __repr__(self):
        return f"<HrefSet size={len(self._hrefs)}>"
