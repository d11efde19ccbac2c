"""Exception types raised by bispull collaborators."""

from typing import Optional


class BispullError(Exception):
    """Base class for bispull errors."""


class FetchFailed(BispullError):
    """
    A page could not be fetched.

    Raised by page sources after retries are exhausted, on non-retryable
    HTTP errors, or when a page still requires authentication after the
    interactive step.
    """

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class SessionNotStarted(BispullError):
    """A page source was used outside its ``async with`` block."""
