"""bispull configuration, record and event models."""

from .config import (
    AuthConfig,
    BrowserConfig,
    LinkScopeConfig,
    NetworkConfig,
    OutputConfig,
    ScraperConfig,
)
from .events import EventType, ScrapeEvent, ScrapeStats
from .records import (
    CharacterRecord,
    Durability,
    ItemQuality,
    ItemRecord,
    LinkRecord,
    ParentContext,
    ProfileLinkRecord,
    SetBonus,
    SetInfo,
    StatBonus,
    TooltipRecord,
    WishlistRecord,
)

__all__ = [
    # Config
    "AuthConfig",
    "BrowserConfig",
    "LinkScopeConfig",
    "NetworkConfig",
    "OutputConfig",
    "ScraperConfig",
    # Events
    "EventType",
    "ScrapeEvent",
    "ScrapeStats",
    # Records
    "CharacterRecord",
    "Durability",
    "ItemQuality",
    "ItemRecord",
    "LinkRecord",
    "ParentContext",
    "ProfileLinkRecord",
    "SetBonus",
    "SetInfo",
    "StatBonus",
    "TooltipRecord",
    "WishlistRecord",
]
