import logging
import os
from dataclasses import fields
from typing import Optional

import yaml

from invitecrawl.domain.site_profile import SiteProfile
from invitecrawl.exceptions import SiteProfileError

logger = logging.getLogger(__name__)

_PROFILE_KEYS = {f.name for f in fields(SiteProfile)}


class SiteProfileParser:
    """Parse a YAML dict into a SiteProfile.

    Responsibility: schema/validation only. It does NOT perform filesystem IO.
    Keys missing from the dict keep the built-in defaults.
    """

    def parse(self, *, path: str, data: Optional[dict], listing_url: Optional[str] = None) -> SiteProfile:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SiteProfileError(path, "must be a mapping")

        unknown = set(data) - _PROFILE_KEYS
        if unknown:
            raise SiteProfileError(path, f"has unknown keys: {', '.join(sorted(unknown))}")

        values = {k: v for k, v in data.items() if v is not None}
        if listing_url:
            values["listing_url"] = listing_url
        for key, value in values.items():
            if not isinstance(value, str):
                raise SiteProfileError(path, f"key {key!r} must be a string")
        try:
            return SiteProfile(**values)
        except ValueError as e:
            raise SiteProfileError(path, str(e)) from e


def load_site_profile(path: Optional[str] = None, listing_url: Optional[str] = None) -> SiteProfile:
    """Load the site profile from `path`, or return the built-in one when unset.

    `listing_url` (e.g. from the LISTING_URL env var) overrides the file's value.
    """
    parser = SiteProfileParser()
    if not path:
        return parser.parse(path="<built-in>", data={}, listing_url=listing_url)

    if not os.path.isfile(path):
        raise SiteProfileError(path, "not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SiteProfileError(path, f"is not valid YAML: {e}") from e

    profile = parser.parse(path=os.path.basename(path), data=data, listing_url=listing_url)
    logger.info("Loaded site profile from %s", path)
    return profile
