"""JSON report writers for collected links and character data."""

import contextlib
import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..extraction.links import LinkCategories
from ..models.events import ScrapeStats
from ..models.records import CharacterRecord, LinkRecord, ProfileLinkRecord

logger = logging.getLogger(__name__)


def _timestamp(now: datetime) -> str:
    return now.strftime("%Y%m%d_%H%M%S")


def write_json_atomic(path: Path, data: Any) -> Path:
    """
    Write ``data`` as pretty-printed JSON, replacing ``path`` atomically.

    The document is written to a temp file in the same directory and
    moved into place, so readers never see a half-written report.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(suffix=".json", prefix=".bispull_", dir=path.parent)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(temp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_path)
        raise

    return path


def write_links_report(
    directory: Path,
    base_url: str,
    collected: list[LinkRecord],
    filtered: list[LinkRecord],
    categories: LinkCategories,
    now: Optional[datetime] = None,
) -> Path:
    """
    Save collected links as ``collected_links_<timestamp>.json``.

    Returns:
        Path to the written report
    """
    now = now or datetime.now(timezone.utc)
    data = {
        "baseUrl": base_url,
        "collectedAt": now.isoformat(),
        "totalLinks": len(collected),
        "filteredLinks": len(filtered),
        "links": [link.to_dict() for link in filtered],
        "categories": categories.to_dict(),
    }
    path = write_json_atomic(directory / f"collected_links_{_timestamp(now)}.json", data)
    logger.info(f"Links saved to {path}")
    return path


def write_profile_links_report(
    directory: Path,
    base_url: str,
    profiles: list[ProfileLinkRecord],
    now: Optional[datetime] = None,
) -> Path:
    """Save profile links as ``profile_links_<timestamp>.json``."""
    now = now or datetime.now(timezone.utc)
    data = {
        "baseUrl": base_url,
        "collectedAt": now.isoformat(),
        "totalProfiles": len(profiles),
        "profiles": [profile.to_dict() for profile in profiles],
    }
    path = write_json_atomic(directory / f"profile_links_{_timestamp(now)}.json", data)
    logger.info(f"Profile links saved to {path}")
    return path


def write_characters_report(
    directory: Path,
    base_url: str,
    characters: list[CharacterRecord],
    stats: Optional[ScrapeStats] = None,
    now: Optional[datetime] = None,
) -> Path:
    """
    Save character records as ``character_data_<timestamp>.json``.

    Run statistics are included under ``stats`` when given.
    """
    now = now or datetime.now(timezone.utc)
    data = {
        "baseUrl": base_url,
        "scrapedAt": now.isoformat(),
        "totalCharacters": len(characters),
        "characters": [character.to_dict() for character in characters],
    }
    if stats is not None:
        data["stats"] = stats.to_dict()

    path = write_json_atomic(directory / f"character_data_{_timestamp(now)}.json", data)
    logger.info(f"Character data saved to {path}")
    return path
