from typing import Iterable, List

from invitecrawl.domain.validation_outcome import ValidationOutcome


class InvalidLinkReport:
    """Ordered list of "name: link" strings for community links found dead."""

    FILENAME = "invalidLinks.txt"

    def __init__(self, entries: Iterable[str] = ()):
        self._entries: List[str] = list(entries)

    def add(self, collection_name: str, link: str) -> str:
        return self.add_outcome(ValidationOutcome(collection_name, link, True))

    def add_outcome(self, outcome: ValidationOutcome) -> str:
        entry = outcome.as_report_entry()
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def render(self) -> str:
        return "\n".join(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def __repr__(self):
        return f"<InvalidLinkReport entries={len(self._entries)}>"
