"""Resolution of hrefs found in markup to absolute URLs."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

# Schemes passed through unchanged; any other "word:" prefix is a relative path
RECOGNIZED_SCHEMES = ("http", "https", "mailto", "ftp", "data", "javascript", "tel")

_SCHEME_RE = re.compile(r"^(" + "|".join(RECOGNIZED_SCHEMES) + r"):", re.IGNORECASE)

# Anything urljoin would mistake for a scheme
_SCHEME_LIKE_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


@dataclass(frozen=True)
class UrlResolution:
    """Result of resolving an href. ``url`` is set only when valid."""

    url: str | None = None
    rejection_reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.url is not None

    @staticmethod
    def resolved(url: str) -> UrlResolution:
        """Create a successful result."""
        return UrlResolution(url=url)

    @staticmethod
    def invalid(reason: str) -> UrlResolution:
        """Create an invalid result with reason."""
        return UrlResolution(rejection_reason=reason)


class UrlResolver:
    """
    Resolve relative, absolute and protocol-relative hrefs.

    Rules, in order:
    1. hrefs with a recognized scheme (``RECOGNIZED_SCHEMES``) are returned unchanged
    2. protocol-relative hrefs (``//host/path``) get ``https:``
    3. everything else is joined onto the base URL, including hrefs such as
       ``notes:aelektra`` whose prefix only looks like a scheme

    Resolution never raises; unusable input yields an invalid result, which
    callers treat as "skip this link".

    Example:
        resolver = UrlResolver("https://thatsmybis.com/11258/chonglers/roster")
        resolver.resolve("/11258/chonglers/c/540876/aelektra").url
        # 'https://thatsmybis.com/11258/chonglers/c/540876/aelektra'
    """

    def __init__(self, base_url: str):
        self.base_url = base_url

    def resolve(self, href: str | None) -> UrlResolution:
        if href is None:
            return UrlResolution.invalid("Missing href")

        href = href.strip()
        if not href:
            return UrlResolution.invalid("Empty href")

        if _SCHEME_RE.match(href):
            return UrlResolution.resolved(href)

        if href.startswith("//"):
            return UrlResolution.resolved(f"https:{href}")

        if _SCHEME_LIKE_RE.match(href):
            href = f"./{href}"

        try:
            absolute = urljoin(self.base_url, href)
            parsed = urlparse(absolute)
        except ValueError as e:
            return UrlResolution.invalid(f"Unparseable href {href!r}: {e}")

        if not parsed.scheme or not parsed.netloc:
            return UrlResolution.invalid(f"Could not resolve {href!r} against {self.base_url!r}")

        return UrlResolution.resolved(absolute)


def resolve_url(href: str | None, base_url: str) -> str | None:
    """Resolve ``href`` against ``base_url``; None when it cannot be resolved."""
    return UrlResolver(base_url).resolve(href).url
