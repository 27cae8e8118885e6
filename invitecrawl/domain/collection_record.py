from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CollectionRecord:
    """One successfully processed collection page and its community links.

    `external_links` holds "title:link" strings in the order they were found.
    """
    title: str = ""
    external_links: List[str] = field(default_factory=list)
    source_url: Optional[str] = None

    def add_link(self, link: str) -> str:
        entry = f"{self.title}:{link}"
        self.external_links.append(entry)
        return entry
