"""Scope filtering for collected links."""

import logging
import re
from dataclasses import dataclass, field
from typing import Union
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

Pattern = Union[str, re.Pattern]


@dataclass(frozen=True)
class LinkFilterConfig:
    """
    Settings for ``LinkFilter``.

    Attributes:
        domain: Host considered internal (usually the roster page's host)
        follow_external: Keep links whose host differs from ``domain``
        include_patterns: If any are given, a URL must match at least one
        exclude_patterns: A URL matching any of these is dropped

    String patterns match as substrings, compiled patterns with ``search``.
    """

    domain: str
    follow_external: bool = False
    include_patterns: list[Pattern] = field(default_factory=list)
    exclude_patterns: list[Pattern] = field(default_factory=list)


def matches_patterns(url: str, patterns: list[Pattern]) -> bool:
    """Check whether ``url`` matches any of ``patterns``."""
    for pattern in patterns:
        if isinstance(pattern, str):
            if pattern in url:
                return True
        elif pattern.search(url):
            return True
    return False


def host_of(url: str) -> str | None:
    """Lower-cased host of ``url``, or None if it cannot be parsed."""
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


class LinkFilter:
    """
    Decide whether a discovered link is in scope.

    Decision order:
    1. external links are dropped unless ``follow_external`` is set
    2. links matching an exclude pattern are dropped
    3. with include patterns configured, only matching links are kept
    4. otherwise only internal links are kept

    Unparseable URLs count as external, so they are dropped by default.

    Example:
        link_filter = LinkFilter(LinkFilterConfig(domain="thatsmybis.com"))
        link_filter.is_in_scope("https://thatsmybis.com/11258/chonglers/roster")  # True
        link_filter.is_in_scope("https://discord.gg/abc")  # False
    """

    def __init__(self, config: LinkFilterConfig):
        self.config = config
        self._domain = config.domain.lower()

    def is_external(self, url: str) -> bool:
        host = host_of(url)
        if host is None:
            return True
        return host != self._domain

    def is_in_scope(self, url: str) -> bool:
        external = self.is_external(url)

        if external and not self.config.follow_external:
            return False

        if matches_patterns(url, self.config.exclude_patterns):
            logger.debug(f"Excluded by pattern: {url}")
            return False

        if self.config.include_patterns:
            return matches_patterns(url, self.config.include_patterns)

        return not external


def is_in_scope(url: str, config: LinkFilterConfig) -> bool:
    """Functional form of ``LinkFilter(config).is_in_scope(url)``."""
    return LinkFilter(config).is_in_scope(url)
