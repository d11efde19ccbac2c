"""Shared fetch policy for page sources: rate limit, retries, login detection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup

from ..errors import FetchFailed
from ..models.config import NetworkConfig
from .auth import login_required_reason
from .protocols import NeedsInteractiveAuth, PageResult
from .rate_limiter import FixedDelayLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedPage:
    """
    Raw result of one navigation.

    Attributes:
        status: HTTP status code, or None if the backend did not report one
        html: Page source
        current_url: Final URL after any redirects
    """

    status: int | None
    html: str
    current_url: str


class BaseSession:
    """
    Base class for page sources.

    Subclasses implement ``_load``; this class wraps it with:
    - a fixed delay between successive fetches (one fetch at a time)
    - retries with a fixed backoff for transient failures
    - detection of login/consent pages, returned as NeedsInteractiveAuth
    """

    # Status codes that warrant a retry
    RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

    # Exceptions that warrant a retry
    RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (
        asyncio.TimeoutError,
        ConnectionError,
    )

    def __init__(self, network: NetworkConfig) -> None:
        self._network = network
        self._limiter = FixedDelayLimiter(delay=network.delay)

    async def _load(self, url: str) -> LoadedPage:
        raise NotImplementedError

    async def fetch_page(self, url: str) -> PageResult:
        """
        Load and parse a page.

        Args:
            url: Absolute URL to load

        Returns:
            BeautifulSoup document, or NeedsInteractiveAuth

        Raises:
            FetchFailed: On HTTP errors or when retries are exhausted
        """
        logger.info(f"Fetching {url}")
        page = await self._load_with_retries(url)

        reason = login_required_reason(page.current_url, page.html)
        if reason is not None:
            logger.warning(f"Authentication required for {url} ({reason})")
            return NeedsInteractiveAuth(url=url, current_url=page.current_url, reason=reason)

        return BeautifulSoup(page.html, "html.parser")

    async def begin_interactive_auth(self, signal: NeedsInteractiveAuth) -> None:
        """Nothing to prepare by default; the user logs in out of band."""

    async def _load_with_retries(self, url: str) -> LoadedPage:
        max_retries = self._network.max_retries
        last_error = "no attempt made"

        for attempt in range(max_retries + 1):
            try:
                async with self._limiter.limit():
                    page = await self._load(url)
            except self.RETRYABLE_EXCEPTIONS as e:
                last_error = f"{type(e).__name__}: {e}"
            else:
                if page.status is None or page.status < 400:
                    return page
                if page.status not in self.RETRYABLE_STATUS_CODES:
                    logger.error(f"Got {page.status} for {url}")
                    raise FetchFailed(url, f"HTTP {page.status}", status_code=page.status)
                last_error = f"HTTP {page.status}"

            if attempt < max_retries:
                logger.warning(
                    f"Request failed ({last_error}) for {url}, retrying in {self._network.retry_delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(self._network.retry_delay)

        logger.error(f"Giving up on {url}: {last_error}")
        raise FetchFailed(url, f"{last_error} after {max_retries + 1} attempts")
