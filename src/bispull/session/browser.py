"""Playwright browser session with a persistent cookie profile."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import TYPE_CHECKING

from ..errors import SessionNotStarted
from ..models.config import BrowserConfig, NetworkConfig
from .base import BaseSession, LoadedPage
from .protocols import NeedsInteractiveAuth

logger = logging.getLogger(__name__)

# Check for Playwright availability
PLAYWRIGHT_AVAILABLE = False
try:
    from playwright.async_api import Error as PlaywrightError
    from playwright.async_api import async_playwright

    PLAYWRIGHT_AVAILABLE = True
except ImportError:
    pass

if TYPE_CHECKING:
    from playwright.async_api import BrowserContext, Page, Playwright

LOGIN_LINK_SELECTOR = ".discord-link"

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]

HIDE_WEBDRIVER_SCRIPT = "Object.defineProperty(navigator, 'webdriver', {get: () => undefined})"


class BrowserSession(BaseSession):
    """
    One Chromium window driven by Playwright.

    The browser profile lives in ``BrowserConfig.user_data_dir``, so a login
    completed once survives later runs. The session owns a single page;
    navigation is serialized, so it must not be shared by concurrent
    extraction requests.

    Example:
        async with BrowserSession(config.network, config.browser) as session:
            result = await session.fetch_page("https://thatsmybis.com/11258/chonglers/roster")
            if isinstance(result, NeedsInteractiveAuth):
                await session.begin_interactive_auth(result)
                input("Press Enter once logged in...")
                result = await session.fetch_page(result.url)

    Requires: pip install bispull[browser]
    """

    def __init__(self, network: NetworkConfig, browser: BrowserConfig) -> None:
        if not PLAYWRIGHT_AVAILABLE:
            raise ImportError(
                "Playwright is required for the browser session. Install with: pip install bispull[browser]"
            )

        super().__init__(network)
        self.RETRYABLE_EXCEPTIONS = (*BaseSession.RETRYABLE_EXCEPTIONS, PlaywrightError)

        self._browser_config = browser
        self._timeout = network.timeout * 1000  # Playwright uses milliseconds

        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> BrowserSession:
        """Launch Chromium with the persistent profile."""
        user_data_dir = self._browser_config.user_data_dir.expanduser().resolve()
        user_data_dir.mkdir(parents=True, exist_ok=True)

        self._playwright = await async_playwright().start()
        try:
            self._context = await self._playwright.chromium.launch_persistent_context(
                str(user_data_dir),
                headless=self._browser_config.headless,
                user_agent=self._network.user_agent,
                args=CHROMIUM_ARGS,
                ignore_default_args=["--enable-automation"],
            )
            self._context.set_default_timeout(self._timeout)
            await self._context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
            self._page = self._context.pages[0] if self._context.pages else await self._context.new_page()
        except BaseException:
            await self._shutdown()
            raise

        mode = "headless" if self._browser_config.headless else "windowed"
        logger.info(f"Browser session started ({mode}, profile {user_data_dir})")
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the browser on every exit path."""
        await self._shutdown()
        logger.info("Browser session closed")

    async def _shutdown(self) -> None:
        self._page = None

        if self._context is not None:
            try:
                await self._context.close()
            except PlaywrightError as e:
                logger.debug(f"Error closing browser context: {e}")
            self._context = None

        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    def _require_page(self) -> Page:
        if self._page is None:
            raise SessionNotStarted("Browser session not started. Use 'async with' context.")
        return self._page

    async def _load(self, url: str) -> LoadedPage:
        page = self._require_page()

        response = await page.goto(url, wait_until="domcontentloaded", timeout=self._timeout)

        # Let client-side scripts finish rendering
        await asyncio.sleep(self._browser_config.settle_time)

        return LoadedPage(
            status=response.status if response is not None else None,
            html=await page.content(),
            current_url=page.url,
        )

    async def begin_interactive_auth(self, signal: NeedsInteractiveAuth) -> None:
        """Click the site's login link, if present, so the user lands on the login form."""
        page = self._require_page()

        link = await page.query_selector(LOGIN_LINK_SELECTOR)
        if link is None:
            logger.info("No login link found, waiting for manual login")
            return

        try:
            await link.click()
        except PlaywrightError as e:
            logger.warning(f"Could not click login link: {e}")
            return

        logger.info("Login link clicked")
        await asyncio.sleep(self._browser_config.settle_time)
