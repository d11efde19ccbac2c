"""
bispull - Extract roster, character and wishlist data from That's My BIS pages.

Usage:
    from bispull import BrowserSession, RosterScraper, ScraperConfig

    config = ScraperConfig.from_env()

    async with BrowserSession(config.network, config.browser) as session:
        scraper = RosterScraper(config, session)
        async for event in scraper.run():
            print(event)

Extraction can also be used on its own, on any parsed page:

    from bs4 import BeautifulSoup
    from bispull import extract_character

    record = extract_character(BeautifulSoup(html, "html.parser"), url)
"""

__version__ = "1.0.0"

from .core import RosterScraper
from .errors import BispullError, FetchFailed, SessionNotStarted
from .extraction import (
    CharacterExtractor,
    ItemFieldExtractor,
    LinkCollector,
    LinkFilter,
    LinkFilterConfig,
    ProfileLinkExtractor,
    UrlResolution,
    UrlResolver,
    collect_links,
    collect_profile_links,
    extract_character,
    map_quality,
)
from .models import (
    CharacterRecord,
    EventType,
    ItemQuality,
    ItemRecord,
    LinkRecord,
    ProfileLinkRecord,
    ScrapeEvent,
    ScrapeStats,
    ScraperConfig,
    TooltipRecord,
    WishlistRecord,
)
from .session import BrowserSession, HttpSession, NeedsInteractiveAuth, PageSource

__all__ = [
    "__version__",
    # Core
    "RosterScraper",
    # Extraction
    "UrlResolver",
    "UrlResolution",
    "LinkFilter",
    "LinkFilterConfig",
    "LinkCollector",
    "ProfileLinkExtractor",
    "ItemFieldExtractor",
    "CharacterExtractor",
    "collect_links",
    "collect_profile_links",
    "extract_character",
    "map_quality",
    # Records
    "LinkRecord",
    "ProfileLinkRecord",
    "ItemRecord",
    "ItemQuality",
    "TooltipRecord",
    "WishlistRecord",
    "CharacterRecord",
    # Config and events
    "ScraperConfig",
    "EventType",
    "ScrapeEvent",
    "ScrapeStats",
    # Sessions
    "PageSource",
    "NeedsInteractiveAuth",
    "BrowserSession",
    "HttpSession",
    # Errors
    "BispullError",
    "FetchFailed",
    "SessionNotStarted",
]
