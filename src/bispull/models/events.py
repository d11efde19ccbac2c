"""Event types for the streaming scrape API."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during a scrape run."""

    # Lifecycle events
    STARTED = "started"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    # Roster phase
    ROSTER_STARTED = "roster_started"
    ROSTER_COMPLETE = "roster_complete"

    # Character phase
    CHARACTER_STARTED = "character_started"
    CHARACTER_SCRAPED = "character_scraped"
    CHARACTER_FAILED = "character_failed"


@dataclass
class ScrapeEvent:
    """
    Event emitted during a scrape run.

    Example:
        async for event in scraper.run():
            if event.type == EventType.CHARACTER_STARTED:
                print(f"[{event.current}/{event.total}] {event.player_name}")
            elif event.type == EventType.CHARACTER_FAILED:
                print(f"Error: {event.url} - {event.error}")
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    player_name: Optional[str] = None

    # Progress tracking
    current: Optional[int] = None
    total: Optional[int] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.CHARACTER_FAILED


@dataclass
class ScrapeStats:
    """Cumulative statistics for a scrape run."""

    profiles_found: int = 0
    characters_scraped: int = 0
    characters_failed: int = 0
    items_extracted: int = 0
    duration_seconds: float = 0.0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as a percentage."""
        total = self.characters_scraped + self.characters_failed
        if total == 0:
            return 0.0
        return (self.characters_scraped / total) * 100

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "profiles_found": self.profiles_found,
            "characters_scraped": self.characters_scraped,
            "characters_failed": self.characters_failed,
            "items_extracted": self.items_extracted,
            "duration_seconds": round(self.duration_seconds, 2),
            "success_rate": round(self.success_rate, 1),
        }
