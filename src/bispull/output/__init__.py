"""Report output for bispull."""

from .report import (
    write_characters_report,
    write_json_atomic,
    write_links_report,
    write_profile_links_report,
)

__all__ = [
    "write_json_atomic",
    "write_links_report",
    "write_profile_links_report",
    "write_characters_report",
]
