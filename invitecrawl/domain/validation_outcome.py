"""Validation outcome data model."""
from typing import NamedTuple


class ValidationOutcome(NamedTuple):
    """Classification of one (collection, community link) pair."""
    collection_name: str
    link: str
    is_invalid: bool

    def as_report_entry(self) -> str:
        return f"{self.collection_name}: {self.link}"
