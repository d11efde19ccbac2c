"""Tests for the RosterScraper orchestrator."""

from unittest.mock import AsyncMock

import pytest
from bs4 import BeautifulSoup

from bispull.core.scraper import RosterScraper
from bispull.errors import FetchFailed
from bispull.models.config import ScraperConfig
from bispull.models.events import EventType, ScrapeEvent, ScrapeStats
from bispull.session.protocols import NeedsInteractiveAuth

ROSTER_URL = "https://thatsmybis.com/11258/chonglers/roster"
AELEKTRA_URL = "https://thatsmybis.com/11258/chonglers/c/540876/aelektra"
BRAKKA_URL = "https://thatsmybis.com/11258/chonglers/c/540900/brakka"

BRAKKA_HTML = """
<html><head><title>Brakka - That's My BIS</title></head>
<body><h1><a class="text-warrior" href="#">Brakka</a></h1></body></html>
"""


class MockPageSource:
    """Mock page source for testing."""

    def __init__(self, pages: dict):
        """
        Initialize mock source.

        Args:
            pages: Dict mapping URLs to HTML, a NeedsInteractiveAuth, or a
                list of those returned on successive fetches
        """
        self.pages = pages
        self.fetched: list[str] = []
        self.begin_interactive_auth = AsyncMock()

    async def fetch_page(self, url: str):
        """Mock fetch."""
        self.fetched.append(url)
        response = self.pages.get(url)
        if isinstance(response, list):
            response = response.pop(0)
        if response is None:
            raise FetchFailed(url, "HTTP 404", status_code=404)
        if isinstance(response, NeedsInteractiveAuth):
            return response
        return BeautifulSoup(response, "html.parser")


@pytest.fixture
def config():
    return ScraperConfig(roster_url=ROSTER_URL)


@pytest.fixture
def pages(roster_html, character_html):
    return {ROSTER_URL: roster_html, AELEKTRA_URL: character_html, BRAKKA_URL: BRAKKA_HTML}


def auth_signal(url: str) -> NeedsInteractiveAuth:
    return NeedsInteractiveAuth(url=url, current_url="https://thatsmybis.com/login", reason="url contains 'login'")


class TestCollection:
    """Tests for roster-level collection."""

    @pytest.mark.asyncio
    async def test_collect_links(self, config, pages):
        """Test that links are collected and filtered to the roster host."""
        scraper = RosterScraper(config, MockPageSource(pages))
        filtered = await scraper.collect_links()

        assert filtered == scraper.filtered_links
        assert len(scraper.collected_links) >= len(filtered) > 0
        assert all(link.url.startswith("https://thatsmybis.com/") for link in filtered)

    @pytest.mark.asyncio
    async def test_roster_fetched_once(self, config, pages):
        """Test that links and profiles share one roster fetch."""
        source = MockPageSource(pages)
        scraper = RosterScraper(config, source)

        await scraper.collect_links()
        profiles = await scraper.collect_profile_links()

        assert source.fetched == [ROSTER_URL]
        assert [p.player_name for p in profiles] == ["aelektra", "brakka"]
        assert scraper.stats.profiles_found == 2

    @pytest.mark.asyncio
    async def test_summary(self, config, pages):
        """Test the collection summary counts."""
        scraper = RosterScraper(config, MockPageSource(pages))
        await scraper.collect_links()
        await scraper.collect_profile_links()

        summary = scraper.summary()
        assert summary["totalLinks"] == len(scraper.collected_links)
        assert summary["filteredLinks"] == len(scraper.filtered_links)
        assert summary["profileLinks"] == 2
        assert sum(summary["categories"].values()) == summary["filteredLinks"]

    @pytest.mark.asyncio
    async def test_scrape_character(self, config, pages):
        """Test scraping a single character page."""
        scraper = RosterScraper(config, MockPageSource(pages))
        record = await scraper.scrape_character(AELEKTRA_URL)

        assert record.name == "Aelektra"
        assert record.url == AELEKTRA_URL
        assert record.scraped_at


class TestAuthentication:
    """Tests for the interactive login step."""

    @pytest.mark.asyncio
    async def test_refetch_after_login(self, config, pages):
        """Test that a completed login re-fetches the page once."""
        pages[AELEKTRA_URL] = [auth_signal(AELEKTRA_URL), pages[AELEKTRA_URL]]
        source = MockPageSource(pages)
        handler = AsyncMock(return_value=True)
        scraper = RosterScraper(config, source, auth_handler=handler)

        record = await scraper.scrape_character(AELEKTRA_URL)

        assert record.name == "Aelektra"
        assert source.fetched == [AELEKTRA_URL, AELEKTRA_URL]
        source.begin_interactive_auth.assert_awaited_once()
        handler.assert_awaited_once()
        assert handler.await_args.args[0].url == AELEKTRA_URL

    @pytest.mark.asyncio
    async def test_declined_login(self, config, pages):
        """Test that a handler returning False fails the fetch."""
        pages[AELEKTRA_URL] = auth_signal(AELEKTRA_URL)
        scraper = RosterScraper(config, MockPageSource(pages), auth_handler=AsyncMock(return_value=False))

        with pytest.raises(FetchFailed, match="not completed"):
            await scraper.scrape_character(AELEKTRA_URL)

    @pytest.mark.asyncio
    async def test_no_handler(self, config, pages):
        """Test that without a handler a login page fails the fetch."""
        pages[AELEKTRA_URL] = auth_signal(AELEKTRA_URL)
        scraper = RosterScraper(config, MockPageSource(pages))

        with pytest.raises(FetchFailed, match="authentication required"):
            await scraper.scrape_character(AELEKTRA_URL)

    @pytest.mark.asyncio
    async def test_still_unauthenticated(self, config, pages):
        """Test that only one re-fetch is attempted."""
        pages[AELEKTRA_URL] = [auth_signal(AELEKTRA_URL), auth_signal(AELEKTRA_URL)]
        source = MockPageSource(pages)
        scraper = RosterScraper(config, source, auth_handler=AsyncMock(return_value=True))

        with pytest.raises(FetchFailed, match="still not authenticated"):
            await scraper.scrape_character(AELEKTRA_URL)
        assert len(source.fetched) == 2


class TestRun:
    """Tests for the streaming run."""

    @pytest.mark.asyncio
    async def test_full_run(self, config, pages):
        """Test the event sequence and stats of a successful run."""
        scraper = RosterScraper(config, MockPageSource(pages))
        events = [event async for event in scraper.run()]
        types = [event.type for event in events]

        assert types[0] == EventType.STARTED
        assert types[1] == EventType.ROSTER_STARTED
        assert types[2] == EventType.ROSTER_COMPLETE
        assert types[-1] == EventType.COMPLETED
        assert types.count(EventType.CHARACTER_SCRAPED) == 2
        assert [c.name for c in scraper.characters] == ["Aelektra", "Brakka"]

        stats = scraper.stats
        assert stats.profiles_found == 2
        assert stats.characters_scraped == 2
        assert stats.characters_failed == 0
        assert stats.items_extracted == 3
        assert stats.success_rate == 100.0

    @pytest.mark.asyncio
    async def test_failed_page_does_not_stop_run(self, config, pages):
        """Test that one failing character page is reported and skipped."""
        del pages[AELEKTRA_URL]
        scraper = RosterScraper(config, MockPageSource(pages))
        events = [event async for event in scraper.run()]

        failed = [event for event in events if event.is_error]
        assert len(failed) == 1
        assert failed[0].url == AELEKTRA_URL
        assert failed[0].player_name == "aelektra"
        assert "404" in failed[0].error
        assert [c.name for c in scraper.characters] == ["Brakka"]
        assert scraper.stats.characters_failed == 1
        assert scraper.stats.success_rate == 50.0

    @pytest.mark.asyncio
    async def test_given_profiles_skip_roster(self, config, pages):
        """Test that passing profile links skips the roster fetch."""
        source = MockPageSource(pages)
        profiles = await RosterScraper(config, MockPageSource(pages)).collect_profile_links()

        scraper = RosterScraper(config, source)
        events = [event async for event in scraper.run(profiles[1:])]

        assert source.fetched == [BRAKKA_URL]
        assert EventType.ROSTER_STARTED not in [event.type for event in events]
        assert scraper.stats.profiles_found == 1

    @pytest.mark.asyncio
    async def test_cancel(self, config, pages):
        """Test that cancelling stops after the current page."""
        scraper = RosterScraper(config, MockPageSource(pages))
        types = []

        async for event in scraper.run():
            types.append(event.type)
            if event.type == EventType.CHARACTER_SCRAPED:
                scraper.cancel()

        assert EventType.CANCELLED in types
        assert len(scraper.characters) == 1
        assert types[-1] == EventType.COMPLETED

    @pytest.mark.asyncio
    async def test_progress_counters(self, config, pages):
        """Test current/total on character events."""
        scraper = RosterScraper(config, MockPageSource(pages))
        started = [event async for event in scraper.run() if event.type == EventType.CHARACTER_STARTED]

        assert [(event.current, event.total) for event in started] == [(1, 2), (2, 2)]


class TestScrapeStats:
    """Tests for run statistics and event helpers."""

    def test_success_rate_without_attempts(self):
        """Test that no scraped or failed pages gives a zero rate."""
        assert ScrapeStats(profiles_found=3).success_rate == 0.0

    def test_to_dict(self):
        """Test the serialized form used in the characters report."""
        stats = ScrapeStats(
            profiles_found=3,
            characters_scraped=2,
            characters_failed=1,
            items_extracted=7,
            duration_seconds=4.2513,
        )

        assert stats.to_dict() == {
            "profiles_found": 3,
            "characters_scraped": 2,
            "characters_failed": 1,
            "items_extracted": 7,
            "duration_seconds": 4.25,
            "success_rate": 66.7,
        }

    def test_only_failures_are_errors(self):
        """Test is_error across event types."""
        assert ScrapeEvent(type=EventType.CHARACTER_FAILED, error="HTTP 404").is_error
        assert not ScrapeEvent(type=EventType.CHARACTER_SCRAPED).is_error
        assert not ScrapeEvent(type=EventType.CANCELLED).is_error
