"""Field extraction for a single wishlist/loot item row."""

import logging
import re
from collections.abc import Iterable
from typing import Optional, Union

from bs4 import Tag

from ..models.records import ItemQuality, ItemRecord
from .dom import Node, attr_of, classes_of, select_all, select_first, text_of
from .tooltips import parse_tooltip
from .urls import UrlResolver

logger = logging.getLogger(__name__)

CATALOG_ATTR = "data-wowhead"
ITEM_ANCHOR_SELECTOR = 'a[data-wowhead*="item="]'
ICON_SELECTOR = "span.iconsmall ins"
DIFFICULTY_SELECTOR = ".text-uncommon, .text-legendary, .text-epic"
TIMESTAMP_SELECTOR = ".js-timestamp-title"
ADDED_BY_SELECTOR = "a.text-muted"

CATALOG_ID_RE = re.compile(r"item=(\d+)")
CATALOG_DOMAIN_RE = re.compile(r"domain=(\w+)")
ICON_URL_RE = re.compile(r"""url\(["']?(.*?)["']?\)""")
PRIORITY_RE = re.compile(r"^\s*(-?\d+)")
NOTE_PREFIX_RE = re.compile(r"^Note:\s*")

# Checked in order; first token present wins
QUALITY_TOKENS: list[tuple[str, ItemQuality]] = [
    ("q0", ItemQuality.POOR),
    ("q1", ItemQuality.COMMON),
    ("q2", ItemQuality.UNCOMMON),
    ("q3", ItemQuality.RARE),
    ("q4", ItemQuality.EPIC),
    ("q5", ItemQuality.LEGENDARY),
]


def map_quality(classes: Union[str, Iterable[str], None]) -> ItemQuality:
    """
    Map CSS quality tokens to a quality tier.

    Accepts a class attribute string or a list of class tokens. Always
    returns a tier; anything unrecognized is ``ItemQuality.UNKNOWN``.
    """
    if classes is None:
        return ItemQuality.UNKNOWN
    tokens = set(classes.split()) if isinstance(classes, str) else set(classes)
    for token, quality in QUALITY_TOKENS:
        if token in tokens:
            return quality
    return ItemQuality.UNKNOWN


def extract_catalog_id(reference: Optional[str]) -> Optional[str]:
    """Numeric item id from a catalog reference such as ``item=51242&domain=wotlk``."""
    if not reference:
        return None
    match = CATALOG_ID_RE.search(reference)
    return match.group(1) if match else None


def extract_catalog_domain(reference: Optional[str]) -> Optional[str]:
    if not reference:
        return None
    match = CATALOG_DOMAIN_RE.search(reference)
    return match.group(1) if match else None


def parse_priority(value: Optional[str]) -> Optional[int]:
    """Leading integer of a ``value`` attribute, or None."""
    if value is None:
        return None
    match = PRIORITY_RE.match(value)
    return int(match.group(1)) if match else None


class ItemFieldExtractor:
    """
    Build an ``ItemRecord`` from one item row (``<li>``).

    A row without a catalog-reference anchor is not an item and yields
    None. Every other field is recovered independently and is simply left
    empty when its markup is missing.

    Example:
        extractor = ItemFieldExtractor("https://thatsmybis.com/11258/chonglers/c/540876/aelektra")
        for row in soup.select("ol.js-wishlist-unsorted > li"):
            item = extractor.extract(row, soup)
    """

    def __init__(self, base_url: str):
        self.base_url = base_url
        self._resolver = UrlResolver(base_url)

    def extract(self, item_element: Optional[Tag], context_document: Optional[Node] = None) -> Optional[ItemRecord]:
        """
        Extract an item row.

        Args:
            item_element: The row element
            context_document: Whole page, scanned for pre-rendered tooltips

        Returns:
            ItemRecord, or None if the row has no item reference or no name
        """
        anchor = select_first(item_element, ITEM_ANCHOR_SELECTOR)
        if anchor is None:
            return None

        name = text_of(anchor)
        if not name:
            logger.debug("Dropping item row with an empty item name")
            return None

        reference = attr_of(anchor, CATALOG_ATTR)
        catalog_id = extract_catalog_id(reference)
        added_at, added_by = self._added(item_element)

        return ItemRecord(
            name=name,
            url=self._resolver.resolve(attr_of(anchor, "href")).url,
            catalog_id=catalog_id,
            catalog_domain=extract_catalog_domain(reference),
            quality=map_quality(classes_of(anchor)),
            icon_url=self._icon_url(anchor),
            difficulty=self._difficulty(item_element),
            priority=parse_priority(attr_of(item_element, "value")),
            added_at=added_at,
            added_by=added_by,
            note=self._note(item_element),
            tooltip=parse_tooltip(context_document, catalog_id, exclude=item_element),
        )

    def _icon_url(self, anchor: Tag) -> Optional[str]:
        style = attr_of(select_first(anchor, ICON_SELECTOR), "style")
        if not style or "background-image:" not in style:
            return None
        match = ICON_URL_RE.search(style)
        if not match:
            return None
        return self._resolver.resolve(match.group(1)).url

    @staticmethod
    def _difficulty(item_element: Tag) -> Optional[str]:
        element = select_first(item_element, DIFFICULTY_SELECTOR)
        return text_of(element) or None

    @staticmethod
    def _added(item_element: Tag) -> tuple[Optional[str], Optional[str]]:
        timestamp = select_first(item_element, TIMESTAMP_SELECTOR)
        if timestamp is None:
            return None, None
        added_by = text_of(select_first(item_element, ADDED_BY_SELECTOR)) or None
        return attr_of(timestamp, "data-timestamp"), added_by

    @staticmethod
    def _note(item_element: Tag) -> Optional[str]:
        for entry in select_all(item_element, "li"):
            text = text_of(entry)
            if "Note:" in text:
                return NOTE_PREFIX_RE.sub("", text) or None
        return None
