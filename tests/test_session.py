"""Tests for page sources: retries, login detection and rate limiting."""

import asyncio
import time
from unittest.mock import patch

import pytest
from bs4 import BeautifulSoup

from bispull.errors import FetchFailed, SessionNotStarted
from bispull.models.config import BrowserConfig, NetworkConfig
from bispull.session.auth import login_required_reason
from bispull.session.base import BaseSession, LoadedPage
from bispull.session.http import HttpSession
from bispull.session.protocols import NeedsInteractiveAuth
from bispull.session.rate_limiter import FixedDelayLimiter

URL = "https://thatsmybis.com/11258/chonglers/roster"
PAGE = "<html><body><h1>Roster</h1></body></html>"


class ScriptedSession(BaseSession):
    """Session whose loads follow a script of pages and exceptions."""

    def __init__(self, script, **network):
        super().__init__(NetworkConfig(delay=0, retry_delay=0, **network))
        self.script = list(script)
        self.calls = 0

    async def _load(self, url: str) -> LoadedPage:
        self.calls += 1
        step = self.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        return step


def page(status=200, html=PAGE, current_url=URL):
    return LoadedPage(status=status, html=html, current_url=current_url)


class TestFetchPage:
    """Tests for BaseSession.fetch_page."""

    @pytest.mark.asyncio
    async def test_returns_parsed_document(self):
        """Test that a successful load is parsed into a document."""
        session = ScriptedSession([page()])
        document = await session.fetch_page(URL)

        assert isinstance(document, BeautifulSoup)
        assert document.h1.get_text() == "Roster"

    @pytest.mark.asyncio
    async def test_retries_transient_status(self):
        """Test that 503 and 429 are retried."""
        session = ScriptedSession([page(503), page(429), page()], max_retries=3)
        document = await session.fetch_page(URL)

        assert isinstance(document, BeautifulSoup)
        assert session.calls == 3

    @pytest.mark.asyncio
    async def test_retries_network_errors(self):
        """Test that connection errors are retried."""
        session = ScriptedSession([ConnectionError("reset"), page()], max_retries=1)
        assert isinstance(await session.fetch_page(URL), BeautifulSoup)
        assert session.calls == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        """Test that exhausted retries raise FetchFailed."""
        session = ScriptedSession([asyncio.TimeoutError()] * 3, max_retries=2)

        with pytest.raises(FetchFailed) as exc_info:
            await session.fetch_page(URL)

        assert session.calls == 3
        assert exc_info.value.url == URL
        assert "3 attempts" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_client_error_not_retried(self):
        """Test that a 404 fails immediately."""
        session = ScriptedSession([page(404)], max_retries=3)

        with pytest.raises(FetchFailed) as exc_info:
            await session.fetch_page(URL)

        assert exc_info.value.status_code == 404
        assert session.calls == 1

    @pytest.mark.asyncio
    async def test_missing_status_is_success(self):
        """Test that a load without a status code is accepted."""
        session = ScriptedSession([page(status=None)])
        assert isinstance(await session.fetch_page(URL), BeautifulSoup)

    @pytest.mark.asyncio
    async def test_login_redirect_signals_auth(self):
        """Test that landing on a login URL returns NeedsInteractiveAuth."""
        session = ScriptedSession([page(current_url="https://thatsmybis.com/login")])
        result = await session.fetch_page(URL)

        assert isinstance(result, NeedsInteractiveAuth)
        assert result.url == URL
        assert result.current_url == "https://thatsmybis.com/login"
        assert "login" in result.reason

    @pytest.mark.asyncio
    async def test_default_interactive_auth_is_noop(self):
        """Test that the base session has nothing to prepare for a login."""
        session = ScriptedSession([])
        signal = NeedsInteractiveAuth(url=URL, current_url=URL, reason="test")
        assert await session.begin_interactive_auth(signal) is None


class TestLoginDetection:
    """Tests for login_required_reason."""

    def test_normal_page(self):
        """Test that a regular page is not a login page."""
        assert login_required_reason(URL, PAGE) is None

    @pytest.mark.parametrize(
        "current_url",
        [
            "https://thatsmybis.com/login",
            "https://discord.com/oauth2/authorize?client_id=1",
            "https://thatsmybis.com/auth/discord",
        ],
    )
    def test_login_urls(self, current_url):
        """Test URL indicators."""
        assert login_required_reason(current_url, PAGE) is not None

    def test_login_content(self):
        """Test page content indicators, case-insensitively."""
        assert login_required_reason(URL, "<p>Please Log In to view this roster</p>") is not None


class TestHttpSession:
    """Tests for HttpSession outside its context."""

    @pytest.mark.asyncio
    async def test_requires_context(self):
        """Test that fetching before entering the context fails clearly."""
        session = HttpSession(NetworkConfig(delay=0))
        with pytest.raises(SessionNotStarted):
            await session.fetch_page(URL)


class TestBrowserSession:
    """Tests for BrowserSession construction."""

    def test_requires_playwright(self):
        """Test that a missing Playwright install is reported with install hint."""
        from bispull.session import browser

        with patch.object(browser, "PLAYWRIGHT_AVAILABLE", False):
            with pytest.raises(ImportError, match="bispull\\[browser\\]"):
                browser.BrowserSession(NetworkConfig(), BrowserConfig())


class TestFixedDelayLimiter:
    """Tests for FixedDelayLimiter."""

    @pytest.mark.asyncio
    async def test_first_request_not_delayed(self):
        """Test that the first fetch starts immediately."""
        limiter = FixedDelayLimiter(delay=1.0)
        start = time.monotonic()
        async with limiter.limit():
            pass
        assert time.monotonic() - start < 0.5

    @pytest.mark.asyncio
    async def test_delay_between_requests(self):
        """Test that successive fetches are spaced by the delay."""
        limiter = FixedDelayLimiter(delay=0.1)
        async with limiter.limit():
            pass
        start = time.monotonic()
        async with limiter.limit():
            pass
        assert time.monotonic() - start >= 0.09

    @pytest.mark.asyncio
    async def test_serializes_fetches(self):
        """Test that only one fetch runs at a time."""
        limiter = FixedDelayLimiter(delay=0)
        active = 0
        peak = 0

        async def fetch():
            nonlocal active, peak
            async with limiter.limit():
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        await asyncio.gather(*(fetch() for _ in range(5)))
        assert peak == 1
