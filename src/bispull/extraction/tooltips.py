"""Best-effort parsing of item tooltip text.

Each field has its own independent pattern rule. A rule that does not
match leaves its field as None; tooltips are free text and most of them
only carry a handful of these attributes.
"""

import logging
import re
from typing import Optional

from bs4 import Tag

from ..models.records import Durability, SetBonus, SetInfo, StatBonus, TooltipRecord
from .dom import Node, select_all

logger = logging.getLogger(__name__)

TOOLTIP_SELECTOR = '.wowhead-tooltip, .whtt-tooltip, [class*="tooltip"]'

ITEM_LEVEL_RE = re.compile(r"Item Level[:\s]*(\d+)", re.IGNORECASE)
ARMOR_RE = re.compile(r"(\d+)\s*Armor", re.IGNORECASE)
DURABILITY_RE = re.compile(r"Durability\s+(\d+)\s*/\s*(\d+)", re.IGNORECASE)
REQUIRED_LEVEL_RE = re.compile(r"Requires Level[:\s]*(\d+)", re.IGNORECASE)

# (stat name, pattern, is percentage)
STAT_PATTERNS: list[tuple[str, re.Pattern, bool]] = [
    ("Agility", re.compile(r"\+(\d+)\s*Agility", re.IGNORECASE), False),
    ("Stamina", re.compile(r"\+(\d+)\s*Stamina", re.IGNORECASE), False),
    ("Intellect", re.compile(r"\+(\d+)\s*Intellect", re.IGNORECASE), False),
    ("Strength", re.compile(r"\+(\d+)\s*Strength", re.IGNORECASE), False),
    ("Spirit", re.compile(r"\+(\d+)\s*Spirit", re.IGNORECASE), False),
    ("Attack Power", re.compile(r"\+(\d+)\s*Attack Power", re.IGNORECASE), False),
    ("Spell Power", re.compile(r"\+(\d+)\s*Spell Power", re.IGNORECASE), False),
    ("Critical Strike", re.compile(r"\+(\d+)%\s*Crit", re.IGNORECASE), True),
    ("Haste", re.compile(r"\+(\d+)%\s*Haste", re.IGNORECASE), True),
    ("Hit", re.compile(r"\+(\d+)%\s*Hit", re.IGNORECASE), True),
]

SLOTS = (
    "Head",
    "Neck",
    "Shoulder",
    "Back",
    "Chest",
    "Wrist",
    "Hands",
    "Waist",
    "Legs",
    "Feet",
    "Finger",
    "Trinket",
    "Weapon",
    "Off Hand",
    "Shield",
    "Ranged",
    "Ammo",
)
SLOT_RE = re.compile(r"\b(" + "|".join(SLOTS) + r")\b", re.IGNORECASE)

BINDINGS = ("Binds when picked up", "Binds when equipped", "Binds to account")
BINDING_RE = re.compile("(" + "|".join(BINDINGS) + ")", re.IGNORECASE)

CLASS_NAMES = (
    "Warrior",
    "Paladin",
    "Hunter",
    "Rogue",
    "Priest",
    "Shaman",
    "Mage",
    "Warlock",
    "Monk",
    "Druid",
    "Death Knight",
    "Demon Hunter",
    "Evoker",
)
CLASSES_LIST_RE = re.compile(r"Classes:\s*([^\n<]+)", re.IGNORECASE)
CLASS_NAME_RE = re.compile(r"\b(" + "|".join(CLASS_NAMES) + r")\b", re.IGNORECASE)

SET_RE = re.compile(r"([^(\n]+?)\s*\((\d+)/(\d+)\)")
SET_BONUS_RE = re.compile(r"\((\d+)\)\s*Set\s*:\s*([^\n<]+)", re.IGNORECASE)


def _canonical(value: str, vocabulary: tuple[str, ...]) -> str:
    """Map a case-insensitive match back to its vocabulary spelling."""
    folded = value.casefold()
    for term in vocabulary:
        if term.casefold() == folded:
            return term
    return value


def _int_match(pattern: re.Pattern, text: str) -> Optional[int]:
    match = pattern.search(text)
    return int(match.group(1)) if match else None


def parse_durability(text: str) -> Optional[Durability]:
    match = DURABILITY_RE.search(text)
    if not match:
        return None
    return Durability(current=int(match.group(1)), max=int(match.group(2)))


def parse_stats(text: str) -> list[StatBonus]:
    """Every stat rule is checked; several may match the same tooltip."""
    stats = []
    for stat, pattern, is_percentage in STAT_PATTERNS:
        match = pattern.search(text)
        if match:
            stats.append(StatBonus(stat=stat, value=int(match.group(1)), is_percentage=is_percentage))
    return stats


def parse_slot(text: str) -> Optional[str]:
    match = SLOT_RE.search(text)
    return _canonical(match.group(1), SLOTS) if match else None


def parse_binding(text: str) -> Optional[str]:
    match = BINDING_RE.search(text)
    return _canonical(match.group(1), BINDINGS) if match else None


def parse_classes(text: str) -> list[str]:
    """
    Classes allowed to use the item.

    A ``Classes: a, b, c`` line wins; otherwise the first class name found
    anywhere in the text.
    """
    match = CLASSES_LIST_RE.search(text)
    if match:
        classes = [name.strip() for name in match.group(1).split(",") if name.strip()]
    else:
        match = CLASS_NAME_RE.search(text)
        classes = [_canonical(match.group(1), CLASS_NAMES)] if match else []

    # Preserve order, drop repeats
    return list(dict.fromkeys(classes))


def parse_set_info(text: str) -> Optional[SetInfo]:
    match = SET_RE.search(text)
    if not match:
        return None

    bonuses = [
        SetBonus(pieces=int(pieces), bonus=bonus.strip()) for pieces, bonus in SET_BONUS_RE.findall(text)
    ]
    return SetInfo(
        name=match.group(1).strip(),
        current_pieces=int(match.group(2)),
        total_pieces=int(match.group(3)),
        bonuses=bonuses,
    )


def parse_tooltip_text(text: str) -> Optional[TooltipRecord]:
    """
    Apply every tooltip rule to ``text``.

    Returns:
        TooltipRecord, or None when no rule matched at all
    """
    stats = parse_stats(text)
    classes = parse_classes(text)

    record = TooltipRecord(
        item_level=_int_match(ITEM_LEVEL_RE, text),
        armor=_int_match(ARMOR_RE, text),
        durability=parse_durability(text),
        required_level=_int_match(REQUIRED_LEVEL_RE, text),
        stats=stats or None,
        slot=parse_slot(text),
        binding=parse_binding(text),
        classes=classes or None,
        set_info=parse_set_info(text),
    )
    return None if record.is_empty else record


def _inside(node: Tag, container: Tag) -> bool:
    # Tag equality is structural, so compare identities
    return any(parent is container for parent in node.parents)


def _related(candidate: Tag, element: Tag) -> bool:
    """True if ``candidate`` is ``element``, one of its ancestors, or inside it."""
    return candidate is element or _inside(candidate, element) or _inside(element, candidate)


def find_tooltip(document: Optional[Node], catalog_id: str, exclude: Optional[Tag] = None) -> Optional[Tag]:
    """
    Find a pre-rendered tooltip element that references ``catalog_id``.

    A wrapper whose class also mentions "tooltip" contains the ids of every
    tooltip inside it, so the innermost matching element is returned.

    Args:
        document: Page to scan
        catalog_id: Numeric catalog id of the item
        exclude: Element (usually the item row) whose own subtree and
            ancestors are not tooltip candidates

    Returns:
        The first innermost matching tooltip element, or None
    """
    id_re = re.compile(rf"(?<!\d){re.escape(catalog_id)}(?!\d)")

    matches = [
        candidate
        for candidate in select_all(document, TOOLTIP_SELECTOR)
        if not (exclude is not None and _related(candidate, exclude)) and id_re.search(str(candidate))
    ]

    for candidate in matches:
        if not any(other is not candidate and _inside(other, candidate) for other in matches):
            return candidate

    return None


def parse_tooltip(
    document: Optional[Node],
    catalog_id: Optional[str],
    exclude: Optional[Tag] = None,
) -> Optional[TooltipRecord]:
    """Locate and parse the tooltip for ``catalog_id`` on the page."""
    if not catalog_id:
        return None

    tooltip = find_tooltip(document, catalog_id, exclude=exclude)
    if tooltip is None:
        return None

    logger.debug(f"Parsing tooltip for item {catalog_id}")
    return parse_tooltip_text(tooltip.get_text("\n", strip=True))
