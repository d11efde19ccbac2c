"""Protocol definitions for page sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class NeedsInteractiveAuth:
    """
    Returned instead of a document when navigation landed on a login page.

    Attributes:
        url: The URL that was requested
        current_url: Where the session ended up (login/consent page)
        reason: Which indicator triggered the detection
    """

    url: str
    current_url: str
    reason: str


PageResult = Union[BeautifulSoup, NeedsInteractiveAuth]


class PageSource(Protocol):
    """
    Protocol for collaborators that load a page and return its DOM tree.

    Implementations serialize navigation (one page at a time) and are
    async context managers owning their underlying session.
    """

    async def fetch_page(self, url: str) -> PageResult:
        """
        Load a page.

        Args:
            url: Absolute URL to load

        Returns:
            Parsed document, or NeedsInteractiveAuth if a login is required

        Raises:
            FetchFailed: On network/HTTP failure after retries
        """
        ...

    async def begin_interactive_auth(self, signal: NeedsInteractiveAuth) -> None:
        """Prepare the session for a manual login (e.g. open the login link)."""
        ...
