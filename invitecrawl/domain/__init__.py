"""Domain objects for InviteCrawl - explicit re-exports to satisfy linters."""
from .href_set import HrefSet as HrefSet
from .collection_record import CollectionRecord as CollectionRecord
from .validation_outcome import ValidationOutcome as ValidationOutcome
from .invalid_link_report import InvalidLinkReport as InvalidLinkReport
from .crawl_session import CrawlSession as CrawlSession
from .pipeline_options import PipelineOptions as PipelineOptions
from .site_profile import SiteProfile as SiteProfile

__all__ = [
    "HrefSet",
    "CollectionRecord",
    "ValidationOutcome",
    "InvalidLinkReport",
    "CrawlSession",
    "PipelineOptions",
    "SiteProfile",
]
