"""Extraction core: links, profile links, items and character pages."""

from .character import CharacterExtractor, extract_character
from .filters import LinkFilter, LinkFilterConfig, is_in_scope
from .items import ItemFieldExtractor, extract_catalog_id, map_quality
from .links import LinkCategories, LinkCollector, collect_links
from .profiles import ProfileLinkExtractor, collect_profile_links
from .tooltips import find_tooltip, parse_tooltip, parse_tooltip_text
from .urls import UrlResolution, UrlResolver, resolve_url

__all__ = [
    # URLs
    "UrlResolver",
    "UrlResolution",
    "resolve_url",
    # Links
    "LinkFilter",
    "LinkFilterConfig",
    "is_in_scope",
    "LinkCollector",
    "LinkCategories",
    "collect_links",
    "ProfileLinkExtractor",
    "collect_profile_links",
    # Items and characters
    "ItemFieldExtractor",
    "map_quality",
    "extract_catalog_id",
    "find_tooltip",
    "parse_tooltip",
    "parse_tooltip_text",
    "CharacterExtractor",
    "extract_character",
]
