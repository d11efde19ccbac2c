"""Character profile link extraction from a roster page."""

import logging
from typing import Optional

from bs4 import Tag

from ..models.records import ProfileLinkRecord
from .dom import Node, attr_of, select_all, select_first
from .urls import UrlResolver

logger = logging.getLogger(__name__)

# Profile pages live under /<guild id>/<guild slug>/c/<character id>/<name>
PROFILE_MARKER = "/c/"
DROPDOWN_SELECTOR = 'a.dropdown-item[href*="/c/"]'
ANCHOR_SELECTOR = 'a[href*="/c/"]'
USER_ICON_SELECTOR = "span.fas.fa-user"

# Administrative links that share the /c/ marker
EXCLUDED_HREF_MARKERS = ("/c/create", "member_id=", "/loot")
EXCLUDED_TEXT_MARKERS = ("create", "new")


def is_administrative_link(href: str, text: str) -> bool:
    """
    Check whether an anchor is a creation, membership or loot-log link.

    Args:
        href: Raw href attribute
        text: Visible anchor text

    Returns:
        True if the anchor must not be treated as a profile link
    """
    if any(marker in href for marker in EXCLUDED_HREF_MARKERS):
        return True
    folded = text.strip().casefold()
    return any(marker in folded for marker in EXCLUDED_TEXT_MARKERS)


def player_name_from_href(href: str) -> str:
    """Last path segment of the href, e.g. ``aelektra``."""
    return href.split("/")[-1]


class ProfileLinkExtractor:
    """
    Find links to individual character pages on a roster page.

    Two passes over the document:
    1. ``a.dropdown-item`` anchors (the per-member menu), which also record
       whether the entry carries a user icon
    2. any other anchor with the profile marker, added only when its raw
       href was not already captured by pass 1

    Administrative links are skipped in both passes. The combined result
    is deduplicated by resolved URL, first occurrence wins.

    Example:
        extractor = ProfileLinkExtractor("https://thatsmybis.com/11258/chonglers/roster")
        for profile in extractor.extract(soup):
            print(profile.player_name, profile.url)
    """

    def __init__(self, base_url: str):
        self.base_url = base_url
        self._resolver = UrlResolver(base_url)

    def extract(self, document: Optional[Node]) -> list[ProfileLinkRecord]:
        profiles: list[ProfileLinkRecord] = []

        for anchor in select_all(document, DROPDOWN_SELECTOR):
            record = self._build_record(anchor, from_dropdown=True)
            if record is not None:
                profiles.append(record)

        dropdown_hrefs = {profile.relative_href for profile in profiles}

        for anchor in select_all(document, ANCHOR_SELECTOR):
            href = attr_of(anchor, "href") or ""
            if href in dropdown_hrefs:
                continue
            record = self._build_record(anchor, from_dropdown=False)
            if record is not None:
                profiles.append(record)

        return self._dedupe_by_url(profiles)

    def _build_record(self, anchor: Tag, from_dropdown: bool) -> Optional[ProfileLinkRecord]:
        href = attr_of(anchor, "href")
        if not href:
            return None

        text = anchor.get_text().strip()
        if is_administrative_link(href, text):
            logger.debug(f"Skipping administrative link: {href}")
            return None

        resolution = self._resolver.resolve(href)
        if not resolution.is_valid:
            logger.debug(f"Skipping profile link: {resolution.rejection_reason}")
            return None

        return ProfileLinkRecord(
            url=resolution.url,
            relative_href=href,
            player_name=player_name_from_href(href),
            profile_text=text,
            has_user_icon=from_dropdown and select_first(anchor, USER_ICON_SELECTOR) is not None,
            title=attr_of(anchor, "title"),
            alt_title=attr_of(anchor, "data-original-title"),
        )

    @staticmethod
    def _dedupe_by_url(profiles: list[ProfileLinkRecord]) -> list[ProfileLinkRecord]:
        seen: set[str] = set()
        unique: list[ProfileLinkRecord] = []
        for profile in profiles:
            if profile.url in seen:
                continue
            seen.add(profile.url)
            unique.append(profile)
        return unique


def collect_profile_links(document: Optional[Node], base_url: str) -> list[ProfileLinkRecord]:
    """Extract deduplicated character profile links from a roster page."""
    return ProfileLinkExtractor(base_url).extract(document)
