"""Generic link collection from a page's anchor elements."""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from bs4 import Tag

from ..models.records import LinkRecord, ParentContext
from .dom import Node, attr_of, select_all
from .filters import LinkFilter, LinkFilterConfig
from .urls import UrlResolver

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS_RE = re.compile(r"\.(jpg|jpeg|png|gif|svg|webp)$", re.IGNORECASE)
DOCUMENT_EXTENSIONS_RE = re.compile(r"\.(pdf|doc|docx|txt|zip)$", re.IGNORECASE)
NAVIGATION_TEXT_RE = re.compile(r"(menu|nav|home|about|contact)")

PARENT_SNIPPET_LENGTH = 100


@dataclass
class LinkCategories:
    """Collected links partitioned by kind."""

    external: list[LinkRecord] = field(default_factory=list)
    images: list[LinkRecord] = field(default_factory=list)
    documents: list[LinkRecord] = field(default_factory=list)
    navigation: list[LinkRecord] = field(default_factory=list)
    internal: list[LinkRecord] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        """Number of links per category."""
        return {name: len(records) for name, records in self._buckets().items()}

    def to_dict(self) -> dict[str, list[dict]]:
        return {name: [r.to_dict() for r in records] for name, records in self._buckets().items()}

    def _buckets(self) -> dict[str, list[LinkRecord]]:
        return {
            "external": self.external,
            "images": self.images,
            "documents": self.documents,
            "navigation": self.navigation,
            "internal": self.internal,
        }


class LinkCollector:
    """
    Collect every anchor on a page as a ``LinkRecord``.

    Anchors with empty or unresolvable hrefs are skipped. Records are
    deduplicated by resolved URL, keeping the first occurrence in document
    order. The collector holds no per-page state, so one instance can be
    reused across pages.

    Example:
        collector = LinkCollector(
            "https://thatsmybis.com/11258/chonglers/roster",
            LinkFilter(LinkFilterConfig(domain="thatsmybis.com")),
        )
        records = collector.collect(soup)
        in_scope = collector.filter(records)
        categories = collector.categorize(in_scope)
    """

    def __init__(self, base_url: str, link_filter: Optional[LinkFilter] = None):
        self.base_url = base_url
        self._resolver = UrlResolver(base_url)
        if link_filter is None:
            link_filter = LinkFilter(LinkFilterConfig(domain=urlparse(base_url).hostname or ""))
        self._filter = link_filter

    def collect(self, document: Optional[Node]) -> list[LinkRecord]:
        """Return deduplicated records for all anchors with an href."""
        records: list[LinkRecord] = []
        seen: set[str] = set()

        for anchor in select_all(document, "a[href]"):
            resolution = self._resolver.resolve(attr_of(anchor, "href"))
            if not resolution.is_valid:
                logger.debug(f"Skipping link: {resolution.rejection_reason}")
                continue

            url = resolution.url
            if url in seen:
                continue
            seen.add(url)

            records.append(self._build_record(anchor, url))

        return records

    def filter(self, records: list[LinkRecord]) -> list[LinkRecord]:
        """Keep only the records the link filter considers in scope."""
        return [record for record in records if self._filter.is_in_scope(record.url)]

    def categorize(self, records: list[LinkRecord]) -> LinkCategories:
        """
        Partition records into categories.

        Checked in order: external host, image extension, document
        extension, navigation keyword in the link text, else internal.
        """
        categories = LinkCategories()

        for record in records:
            path = urlparse(record.url).path
            if self._filter.is_external(record.url):
                categories.external.append(record)
            elif IMAGE_EXTENSIONS_RE.search(path):
                categories.images.append(record)
            elif DOCUMENT_EXTENSIONS_RE.search(path):
                categories.documents.append(record)
            elif NAVIGATION_TEXT_RE.search(record.text.lower()):
                categories.navigation.append(record)
            else:
                categories.internal.append(record)

        return categories

    def _build_record(self, anchor: Tag, url: str) -> LinkRecord:
        return LinkRecord(
            url=url,
            text=anchor.get_text().strip(),
            title=attr_of(anchor, "title"),
            css_class=attr_of(anchor, "class"),
            element_id=attr_of(anchor, "id"),
            parent_context=self._parent_context(anchor),
        )

    @staticmethod
    def _parent_context(anchor: Tag) -> Optional[ParentContext]:
        parent = anchor.parent
        if parent is None or not parent.name or parent.name == "[document]":
            return None

        return ParentContext(
            tag=parent.name,
            css_class=attr_of(parent, "class"),
            element_id=attr_of(parent, "id"),
            text_snippet=parent.get_text().strip()[:PARENT_SNIPPET_LENGTH],
        )


def collect_links(document: Optional[Node], base_url: str, config: LinkFilterConfig) -> list[LinkRecord]:
    """Collect, deduplicate and scope-filter the links of one page."""
    collector = LinkCollector(base_url, LinkFilter(config))
    return collector.filter(collector.collect(document))
