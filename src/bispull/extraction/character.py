"""Character page extraction."""

import logging
import re
from datetime import datetime, timezone
from typing import Optional

from bs4 import Tag

from ..models.records import CharacterRecord, ItemRecord, WishlistRecord
from .dom import Node, ancestor, child_items, select_all, select_first, text_of
from .items import ItemFieldExtractor

logger = logging.getLogger(__name__)

CLASS_ARCHETYPES = (
    "shaman",
    "mage",
    "paladin",
    "warrior",
    "hunter",
    "rogue",
    "priest",
    "druid",
    "warlock",
    "death-knight",
    "monk",
    "demon-hunter",
    "evoker",
)
NAME_BY_ARCHETYPE_SELECTOR = ", ".join(f"h1 a.text-{archetype}" for archetype in CLASS_ARCHETYPES)
NAME_BY_PREFIX_SELECTOR = 'h1 a[class^="text-"]'
TITLE_SUFFIX = " - That's My BIS"

CLASS_ICONS = (
    "fa-bow-arrow",
    "fa-sword",
    "fa-shield",
    "fa-magic",
    "fa-heart",
    "fa-leaf",
    "fa-skull",
    "fa-fist-raised",
)
CLASS_ICON_SELECTOR = ", ".join(f"li .fas.{icon}" for icon in CLASS_ICONS)
DETAIL_SELECTOR = "li small"

RACES = (
    "Draenei",
    "Human",
    "Night Elf",
    "Dwarf",
    "Gnome",
    "Orc",
    "Undead",
    "Tauren",
    "Troll",
    "Blood Elf",
)
PROFESSIONS = (
    "Engineering",
    "Enchanting",
    "Mining",
    "Herbalism",
    "Skinning",
    "Tailoring",
    "Blacksmithing",
    "Leatherworking",
    "Alchemy",
    "Jewelcrafting",
    "Inscription",
)
LEVEL_RE = re.compile(r"(\d+)")

WISHLIST_HEADING_SELECTOR = ".col-12 .text-legendary, .col-12 .text-gold"
WISHLIST_KEYWORD = "Wishlist"
UNSORTED_LIST_SELECTOR = "ol.js-wishlist-unsorted"

LOOT_HEADING_SELECTOR = ".col-12 .text-success"
LOOT_KEYWORD = "Loot Received"
RECIPES_KEYWORD = "Recipes"

NOTE_HEADING_SELECTOR = ".col-12 .text-muted"
NOTE_KEYWORD = "Public Note"
NOTE_BODY_SELECTOR = ".js-markdown-parsed"
EMPTY_NOTE_PLACEHOLDER = "—"


def _find_heading(document: Optional[Node], selector: str, keyword: str) -> Optional[Tag]:
    for heading in select_all(document, selector):
        if keyword in heading.get_text():
            return heading
    return None


class CharacterExtractor:
    """
    Turn a character page into a ``CharacterRecord``.

    Extraction is a single stateless pass over the document; every field
    falls back to None or an empty list when its markup is missing, so a
    damaged page produces a partial record rather than an error.

    Example:
        extractor = CharacterExtractor()
        record = extractor.extract(soup, url="https://thatsmybis.com/11258/chonglers/c/540876/aelektra")
        for wishlist in record.wishlists:
            print(wishlist.name, len(wishlist.items))
    """

    def extract(
        self,
        document: Optional[Node],
        url: str,
        scraped_at: Optional[str] = None,
    ) -> CharacterRecord:
        """
        Extract a character record.

        Args:
            document: Parsed character page
            url: Page URL; also the base for resolving item links
            scraped_at: ISO timestamp; defaults to now (UTC)

        Returns:
            CharacterRecord (fields may be empty)
        """
        items = ItemFieldExtractor(url)

        return CharacterRecord(
            name=self.extract_name(document),
            character_class=self.extract_class(document),
            race=self.extract_race(document),
            level=self.extract_level(document),
            professions=self.extract_professions(document),
            wishlists=self.extract_wishlists(document, items),
            loot_received=self.extract_loot_received(document, items),
            recipes=self.extract_recipes(document),
            public_note=self.extract_public_note(document),
            url=url,
            scraped_at=scraped_at or datetime.now(timezone.utc).isoformat(),
        )

    def extract_name(self, document: Optional[Node]) -> Optional[str]:
        """Heading anchor styled by class archetype, then any ``text-*`` anchor, then the title."""
        for selector in (NAME_BY_ARCHETYPE_SELECTOR, NAME_BY_PREFIX_SELECTOR):
            name = text_of(select_first(document, selector))
            if name:
                return name

        title = text_of(select_first(document, "title"))
        if TITLE_SUFFIX in title:
            return title.split(TITLE_SUFFIX)[0].strip() or None

        logger.debug("No character name found")
        return None

    def extract_class(self, document: Optional[Node]) -> Optional[str]:
        icon = select_first(document, CLASS_ICON_SELECTOR)
        if icon is None:
            return None
        words = text_of(icon.parent).split()
        return words[-1] if words else None

    def extract_race(self, document: Optional[Node]) -> Optional[str]:
        for detail in select_all(document, DETAIL_SELECTOR):
            text = detail.get_text()
            for race in RACES:
                if race in text:
                    return race
        return None

    def extract_level(self, document: Optional[Node]) -> Optional[int]:
        for detail in select_all(document, DETAIL_SELECTOR):
            match = LEVEL_RE.search(detail.get_text())
            if match:
                return int(match.group(1))
        return None

    def extract_professions(self, document: Optional[Node]) -> list[str]:
        for detail in select_all(document, DETAIL_SELECTOR):
            text = text_of(detail)
            if any(profession in text for profession in PROFESSIONS):
                return [part.strip() for part in text.split(",") if part.strip()]
        return []

    def extract_wishlists(self, document: Optional[Node], items: ItemFieldExtractor) -> list[WishlistRecord]:
        """
        Wishlists in document order.

        Only the ``js-wishlist-unsorted`` list is read; the sorted list next
        to it renders the same items again.
        """
        wishlists: list[WishlistRecord] = []

        for heading in select_all(document, WISHLIST_HEADING_SELECTOR):
            if WISHLIST_KEYWORD not in heading.get_text():
                continue

            # heading div > title div > container holding the item lists
            container = ancestor(heading, 2)
            rows = [row for ol in select_all(container, UNSORTED_LIST_SELECTOR) for row in child_items(ol)]

            wishlists.append(
                WishlistRecord(
                    name=text_of(heading),
                    items=self._extract_items(rows, document, items),
                )
            )

        return wishlists

    def extract_loot_received(self, document: Optional[Node], items: ItemFieldExtractor) -> list[ItemRecord]:
        heading = _find_heading(document, LOOT_HEADING_SELECTOR, LOOT_KEYWORD)
        if heading is None:
            return []

        rows = [row for ol in select_all(heading.parent, "ol") for row in child_items(ol)]
        return self._extract_items(rows, document, items)

    def extract_recipes(self, document: Optional[Node]) -> list:
        """Always empty: the recipes section only holds placeholder markup."""
        heading = _find_heading(document, LOOT_HEADING_SELECTOR, RECIPES_KEYWORD)
        if heading is not None:
            logger.debug("Recipes section present but not parsed")
        return []

    def extract_public_note(self, document: Optional[Node]) -> Optional[str]:
        heading = _find_heading(document, NOTE_HEADING_SELECTOR, NOTE_KEYWORD)
        if heading is None:
            return None

        note = text_of(select_first(heading.parent, NOTE_BODY_SELECTOR))
        if not note or note == EMPTY_NOTE_PLACEHOLDER:
            return None
        return note

    @staticmethod
    def _extract_items(rows: list[Tag], document: Optional[Node], items: ItemFieldExtractor) -> list[ItemRecord]:
        records = []
        for row in rows:
            record = items.extract(row, document)
            if record is None:
                logger.debug("Dropping row without an item reference")
                continue
            records.append(record)
        return records


def extract_character(document: Optional[Node], url: str, scraped_at: Optional[str] = None) -> CharacterRecord:
    """Extract one character record from a parsed character page."""
    return CharacterExtractor().extract(document, url, scraped_at=scraped_at)
