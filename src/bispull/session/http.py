"""Cookie-header HTTP session (aiohttp) for already-authenticated runs."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

import aiohttp

from ..errors import SessionNotStarted
from ..models.config import AuthConfig, NetworkConfig
from .base import BaseSession, LoadedPage
from .protocols import NeedsInteractiveAuth

logger = logging.getLogger(__name__)


class HttpSession(BaseSession):
    """
    Fetch pages over plain HTTP, sending a known session cookie.

    No JavaScript runs, so this only works for server-rendered pages and
    when a valid cookie is supplied (``AuthConfig.cookie``). A login page is
    still detected and reported as NeedsInteractiveAuth.

    Example:
        async with HttpSession(config.network, config.auth) as session:
            soup = await session.fetch_page(url)
    """

    RETRYABLE_EXCEPTIONS = (
        aiohttp.ClientError,
        asyncio.TimeoutError,
        ConnectionError,
    )

    def __init__(self, network: NetworkConfig, auth: AuthConfig | None = None) -> None:
        super().__init__(network)
        self._auth = auth or AuthConfig()
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> HttpSession:
        """Enter async context and create session."""
        headers = {"User-Agent": self._network.user_agent}
        if self._auth.cookie:
            headers["Cookie"] = self._auth.cookie

        self._session = aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self._network.timeout),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def _load(self, url: str) -> LoadedPage:
        if self._session is None:
            raise SessionNotStarted("HTTP session not started. Use 'async with' context.")

        async with self._session.get(url, allow_redirects=True) as response:
            html = await response.text(errors="replace")
            return LoadedPage(status=response.status, html=html, current_url=str(response.url))

    async def begin_interactive_auth(self, signal: NeedsInteractiveAuth) -> None:
        logger.warning(
            f"{signal.url} redirected to a login page; log in with a browser and update the session cookie"
        )
