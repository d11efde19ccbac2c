"""Record types produced by the extraction core.

Records are built fresh for every extraction call and never mutated
afterwards. ``to_dict()`` produces the JSON report schema (camelCase keys).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None (absent optional fields)."""
    return {key: value for key, value in data.items() if value is not None}


class ItemQuality(str, Enum):
    """Item rarity tiers, encoded in markup as ``q0``..``q5``."""

    POOR = "Poor"
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ParentContext:
    """One level of parent-element context captured for a link."""

    tag: str
    css_class: Optional[str] = None
    element_id: Optional[str] = None
    text_snippet: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "cssClass": self.css_class,
            "elementId": self.element_id,
            "textSnippet": self.text_snippet,
        }


@dataclass(frozen=True)
class LinkRecord:
    """A generic anchor found on a page. Identity is ``url``."""

    url: str
    text: str = ""
    title: Optional[str] = None
    css_class: Optional[str] = None
    element_id: Optional[str] = None
    parent_context: Optional[ParentContext] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "text": self.text,
            "title": self.title,
            "cssClass": self.css_class,
            "elementId": self.element_id,
            "parentContext": self.parent_context.to_dict() if self.parent_context else None,
        }


@dataclass(frozen=True)
class ProfileLinkRecord:
    """
    A link to an individual character profile page.

    Identity for the dropdown pass is ``relative_href``; the final combined
    pass deduplicates by ``url``.
    """

    url: str
    relative_href: str
    player_name: str
    profile_text: str = ""
    has_user_icon: bool = False
    title: Optional[str] = None
    alt_title: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "relativeHref": self.relative_href,
            "playerName": self.player_name,
            "profileText": self.profile_text,
            "hasUserIcon": self.has_user_icon,
            "title": self.title,
            "altTitle": self.alt_title,
        }


@dataclass(frozen=True)
class StatBonus:
    stat: str
    value: int
    is_percentage: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"stat": self.stat, "value": self.value, "isPercentage": self.is_percentage}


@dataclass(frozen=True)
class Durability:
    current: int
    max: int

    def to_dict(self) -> dict[str, Any]:
        return {"current": self.current, "max": self.max}


@dataclass(frozen=True)
class SetBonus:
    pieces: int
    bonus: str

    def to_dict(self) -> dict[str, Any]:
        return {"pieces": self.pieces, "bonus": self.bonus}


@dataclass(frozen=True)
class SetInfo:
    name: str
    current_pieces: int
    total_pieces: int
    bonuses: list[SetBonus] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "currentPieces": self.current_pieces,
            "totalPieces": self.total_pieces,
            "bonuses": [bonus.to_dict() for bonus in self.bonuses],
        }


@dataclass(frozen=True)
class TooltipRecord:
    """
    Best-effort attributes parsed from an item tooltip.

    Every field is independently optional; None means the pattern for that
    field did not match.
    """

    item_level: Optional[int] = None
    armor: Optional[int] = None
    durability: Optional[Durability] = None
    required_level: Optional[int] = None
    stats: Optional[list[StatBonus]] = None
    slot: Optional[str] = None
    binding: Optional[str] = None
    classes: Optional[list[str]] = None
    set_info: Optional[SetInfo] = None

    @property
    def is_empty(self) -> bool:
        """True when no tooltip pattern matched."""
        return all(value is None for value in self.__dict__.values())

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "itemLevel": self.item_level,
                "armor": self.armor,
                "durability": self.durability.to_dict() if self.durability else None,
                "requiredLevel": self.required_level,
                "stats": [stat.to_dict() for stat in self.stats] if self.stats else None,
                "slot": self.slot,
                "binding": self.binding,
                "classes": list(self.classes) if self.classes else None,
                "setInfo": self.set_info.to_dict() if self.set_info else None,
            }
        )


@dataclass(frozen=True)
class ItemRecord:
    """A single wishlist or loot entry. ``name`` is the only required field."""

    name: str
    url: Optional[str] = None
    catalog_id: Optional[str] = None
    catalog_domain: Optional[str] = None
    quality: ItemQuality = ItemQuality.UNKNOWN
    icon_url: Optional[str] = None
    difficulty: Optional[str] = None
    priority: Optional[int] = None
    added_at: Optional[str] = None
    added_by: Optional[str] = None
    note: Optional[str] = None
    tooltip: Optional[TooltipRecord] = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "url": self.url,
                "catalogId": self.catalog_id,
                "catalogDomain": self.catalog_domain,
                "quality": self.quality.value,
                "iconUrl": self.icon_url,
                "difficulty": self.difficulty,
                "priority": self.priority,
                "addedAt": self.added_at,
                "addedBy": self.added_by,
                "note": self.note,
                "tooltip": self.tooltip.to_dict() if self.tooltip else None,
            }
        )


@dataclass(frozen=True)
class WishlistRecord:
    """A named wishlist; items are in document order of the unsorted list."""

    name: str
    items: list[ItemRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class CharacterRecord:
    """Everything extracted from one character page."""

    name: Optional[str]
    url: str
    scraped_at: str
    character_class: Optional[str] = None
    race: Optional[str] = None
    level: Optional[int] = None
    professions: list[str] = field(default_factory=list)
    wishlists: list[WishlistRecord] = field(default_factory=list)
    loot_received: list[ItemRecord] = field(default_factory=list)
    recipes: list[Any] = field(default_factory=list)
    public_note: Optional[str] = None

    @property
    def item_count(self) -> int:
        """Total number of wishlist items across all wishlists."""
        return sum(len(wishlist.items) for wishlist in self.wishlists)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "class": self.character_class,
            "race": self.race,
            "level": self.level,
            "professions": list(self.professions),
            "wishlists": [wishlist.to_dict() for wishlist in self.wishlists],
            "lootReceived": [item.to_dict() for item in self.loot_received],
            "recipes": list(self.recipes),
            "publicNote": self.public_note,
            "url": self.url,
            "scrapedAt": self.scraped_at,
        }
