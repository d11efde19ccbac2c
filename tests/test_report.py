"""Tests for JSON report output."""

import json
from datetime import datetime, timezone

from bs4 import BeautifulSoup

from bispull.extraction.links import LinkCollector
from bispull.extraction.profiles import ProfileLinkExtractor
from bispull.models.events import ScrapeStats
from bispull.models.records import CharacterRecord, ItemRecord, WishlistRecord
from bispull.output.report import (
    write_characters_report,
    write_json_atomic,
    write_links_report,
    write_profile_links_report,
)

BASE = "https://thatsmybis.com/11258/chonglers/roster"
NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestWriteJsonAtomic:
    """Tests for write_json_atomic."""

    def test_writes_json(self, tmp_path):
        """Test that data is written and no temp files are left behind."""
        path = write_json_atomic(tmp_path / "out.json", {"name": "Aelektra", "note": "—"})

        assert json.loads(path.read_text(encoding="utf-8")) == {"name": "Aelektra", "note": "—"}
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_creates_directory(self, tmp_path):
        """Test that missing parent directories are created."""
        path = write_json_atomic(tmp_path / "a" / "b" / "out.json", [])
        assert path.exists()

    def test_replaces_existing(self, tmp_path):
        """Test that an existing report is replaced."""
        target = tmp_path / "out.json"
        target.write_text("old")
        write_json_atomic(target, {"v": 2})
        assert json.loads(target.read_text()) == {"v": 2}


class TestReports:
    """Tests for the report writers."""

    def test_links_report(self, tmp_path):
        """Test the collected links report."""
        collector = LinkCollector(BASE)
        document = BeautifulSoup('<a href="/home">Home</a><a href="https://discord.gg/x">Discord</a>', "html.parser")
        collected = collector.collect(document)
        filtered = collector.filter(collected)

        path = write_links_report(tmp_path, BASE, collected, filtered, collector.categorize(filtered), now=NOW)
        data = json.loads(path.read_text())

        assert path.name == "collected_links_20240102_030405.json"
        assert data["baseUrl"] == BASE
        assert data["collectedAt"] == "2024-01-02T03:04:05+00:00"
        assert data["totalLinks"] == 2
        assert data["filteredLinks"] == 1
        assert data["links"][0]["url"] == "https://thatsmybis.com/home"
        assert data["categories"]["navigation"][0]["text"] == "Home"

    def test_profile_links_report(self, tmp_path, roster_document):
        """Test the profile links report."""
        profiles = ProfileLinkExtractor(BASE).extract(roster_document)

        path = write_profile_links_report(tmp_path, BASE, profiles, now=NOW)
        data = json.loads(path.read_text())

        assert path.name == "profile_links_20240102_030405.json"
        assert data["totalProfiles"] == 2
        assert data["profiles"][0]["playerName"] == "aelektra"
        assert data["profiles"][0]["hasUserIcon"] is True

    def test_characters_report(self, tmp_path):
        """Test the character data report."""
        record = CharacterRecord(
            name="Aelektra",
            url="https://thatsmybis.com/11258/chonglers/c/540876/aelektra",
            scraped_at=NOW.isoformat(),
            wishlists=[WishlistRecord(name="Wishlist 1", items=[ItemRecord(name="Gloves", catalog_id="51242")])],
        )

        path = write_characters_report(tmp_path, BASE, [record], now=NOW)
        data = json.loads(path.read_text())

        assert path.name == "character_data_20240102_030405.json"
        assert data["scrapedAt"] == "2024-01-02T03:04:05+00:00"
        assert data["totalCharacters"] == 1
        character = data["characters"][0]
        assert character["name"] == "Aelektra"
        assert character["class"] is None
        assert character["wishlists"][0]["items"] == [{"name": "Gloves", "catalogId": "51242", "quality": "Unknown"}]

    def test_characters_report_with_stats(self, tmp_path):
        """Test that run statistics are written under stats when given."""
        stats = ScrapeStats(profiles_found=2, characters_scraped=1, characters_failed=1, duration_seconds=1.234)

        path = write_characters_report(tmp_path, BASE, [], stats=stats, now=NOW)
        data = json.loads(path.read_text())

        assert data["totalCharacters"] == 0
        assert data["stats"]["success_rate"] == 50.0
        assert data["stats"]["duration_seconds"] == 1.23

    def test_characters_report_without_stats(self, tmp_path):
        """Test that the stats key is absent when no statistics are given."""
        data = json.loads(write_characters_report(tmp_path, BASE, [], now=NOW).read_text())
        assert "stats" not in data
