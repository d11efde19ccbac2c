"""RosterScraper: roster page to profile links to character records."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Awaitable
from typing import Callable

from bs4 import BeautifulSoup

from ..errors import FetchFailed
from ..extraction.character import CharacterExtractor
from ..extraction.filters import LinkFilter
from ..extraction.links import LinkCategories, LinkCollector
from ..extraction.profiles import ProfileLinkExtractor
from ..models.config import ScraperConfig
from ..models.events import EventType, ScrapeEvent, ScrapeStats
from ..models.records import CharacterRecord, LinkRecord, ProfileLinkRecord
from ..session.protocols import NeedsInteractiveAuth, PageSource

logger = logging.getLogger(__name__)

# Returns True once the user has logged in, False to give up
AuthHandler = Callable[[NeedsInteractiveAuth], Awaitable[bool]]


class RosterScraper:
    """
    Orchestrates one scrape: a roster page plus its linked character pages.

    Pages are loaded through a caller-owned ``PageSource``; the scraper
    never creates or closes the session itself. When the source reports a
    login page, ``auth_handler`` decides how to wait for the user and the
    navigation is retried once.

    Example:
        async with BrowserSession(config.network, config.browser) as session:
            scraper = RosterScraper(config, session, auth_handler=prompt_for_login)
            async for event in scraper.run():
                if event.type == EventType.CHARACTER_FAILED:
                    print(f"Error: {event.url} - {event.error}")

        print(scraper.stats.to_dict())
    """

    def __init__(
        self,
        config: ScraperConfig,
        source: PageSource,
        auth_handler: AuthHandler | None = None,
    ) -> None:
        self.config = config
        self._source = source
        self._auth_handler = auth_handler

        self._link_collector = LinkCollector(config.roster_url, LinkFilter(config.link_filter_config()))
        self._profile_extractor = ProfileLinkExtractor(config.roster_url)
        self._character_extractor = CharacterExtractor()

        self._roster_document: BeautifulSoup | None = None
        self._cancelled = False

        self.collected_links: list[LinkRecord] = []
        self.filtered_links: list[LinkRecord] = []
        self.profile_links: list[ProfileLinkRecord] = []
        self.characters: list[CharacterRecord] = []
        self.stats = ScrapeStats()

    def cancel(self) -> None:
        """Stop after the character page currently being scraped."""
        self._cancelled = True

    async def load(self, url: str) -> BeautifulSoup:
        """
        Fetch a page, running the interactive login step if required.

        Raises:
            FetchFailed: If the page cannot be loaded or login was not completed
        """
        result = await self._source.fetch_page(url)
        if not isinstance(result, NeedsInteractiveAuth):
            return result

        if self._auth_handler is None:
            raise FetchFailed(url, f"authentication required ({result.reason})")

        await self._source.begin_interactive_auth(result)
        if not await self._auth_handler(result):
            raise FetchFailed(url, "authentication was not completed")

        result = await self._source.fetch_page(url)
        if isinstance(result, NeedsInteractiveAuth):
            raise FetchFailed(url, f"still not authenticated ({result.reason})")
        return result

    async def _roster(self) -> BeautifulSoup:
        if self._roster_document is None:
            self._roster_document = await self.load(self.config.roster_url)
        return self._roster_document

    async def collect_links(self) -> list[LinkRecord]:
        """Collect all links on the roster page and keep the in-scope ones."""
        logger.info(f"Starting link collection from {self.config.roster_url}")
        document = await self._roster()

        self.collected_links = self._link_collector.collect(document)
        self.filtered_links = self._link_collector.filter(self.collected_links)

        logger.info(
            f"Found {len(self.collected_links)} links, {len(self.filtered_links)} in scope"
        )
        return self.filtered_links

    def categorize_links(self) -> LinkCategories:
        """Categorize the in-scope links from the last ``collect_links`` call."""
        return self._link_collector.categorize(self.filtered_links)

    def summary(self) -> dict:
        return {
            "totalLinks": len(self.collected_links),
            "filteredLinks": len(self.filtered_links),
            "profileLinks": len(self.profile_links),
            "categories": self.categorize_links().counts(),
        }

    async def collect_profile_links(self) -> list[ProfileLinkRecord]:
        logger.info(f"Collecting profile links from {self.config.roster_url}")
        document = await self._roster()

        self.profile_links = self._profile_extractor.extract(document)
        self.stats.profiles_found = len(self.profile_links)

        logger.info(f"Found {len(self.profile_links)} profile links")
        return self.profile_links

    async def scrape_character(self, url: str) -> CharacterRecord:
        """Load one character page and extract it."""
        document = await self.load(url)
        record = self._character_extractor.extract(document, url)
        logger.info(f"Scraped character {record.name!r} ({len(record.wishlists)} wishlists)")
        return record

    async def run(self, profile_links: list[ProfileLinkRecord] | None = None) -> AsyncIterator[ScrapeEvent]:
        """
        Scrape every character page linked from the roster.

        A failing page is reported as a CHARACTER_FAILED event and skipped.

        Args:
            profile_links: Profiles to scrape; collected from the roster when None

        Yields:
            ScrapeEvent objects describing progress
        """
        start = time.monotonic()
        yield ScrapeEvent(type=EventType.STARTED, url=self.config.roster_url, message="Starting scrape")

        if profile_links is None:
            yield ScrapeEvent(type=EventType.ROSTER_STARTED, url=self.config.roster_url)
            profile_links = await self.collect_profile_links()
        else:
            self.profile_links = profile_links
            self.stats.profiles_found = len(profile_links)

        total = len(profile_links)
        yield ScrapeEvent(
            type=EventType.ROSTER_COMPLETE,
            total=total,
            message=f"Found {total} character profiles",
        )

        for index, profile in enumerate(profile_links, start=1):
            if self._cancelled:
                yield ScrapeEvent(type=EventType.CANCELLED, message="Scrape cancelled")
                break

            yield ScrapeEvent(
                type=EventType.CHARACTER_STARTED,
                url=profile.url,
                player_name=profile.player_name,
                current=index,
                total=total,
            )

            try:
                record = await self.scrape_character(profile.url)
            except FetchFailed as e:
                logger.error(f"Error scraping {profile.player_name}: {e.reason}")
                self.stats.characters_failed += 1
                yield ScrapeEvent(
                    type=EventType.CHARACTER_FAILED,
                    url=profile.url,
                    player_name=profile.player_name,
                    error=e.reason,
                    current=index,
                    total=total,
                )
                continue

            self.characters.append(record)
            self.stats.characters_scraped += 1
            self.stats.items_extracted += record.item_count + len(record.loot_received)
            yield ScrapeEvent(
                type=EventType.CHARACTER_SCRAPED,
                url=profile.url,
                player_name=profile.player_name,
                message=f"{record.name}: {len(record.wishlists)} wishlists",
                current=index,
                total=total,
            )

        self.stats.duration_seconds = time.monotonic() - start
        yield ScrapeEvent(
            type=EventType.COMPLETED,
            message=f"Scraped {self.stats.characters_scraped} of {total} characters",
        )
