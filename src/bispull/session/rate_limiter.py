"""Fixed-delay rate limiting between successive page fetches."""

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class FixedDelayLimiter:
    """
    Enforce a minimum delay between successive fetches and run them one at a time.

    Example:
        limiter = FixedDelayLimiter(delay=1.0)

        async with limiter.limit():
            await load_page(...)

        async with limiter.limit():
            # Starts at least 1s after the previous fetch finished
            await load_page(...)
    """

    def __init__(self, delay: float = 1.0):
        self.delay = delay
        self._lock = asyncio.Lock()
        self._last_request: float = 0.0

    @asynccontextmanager
    async def limit(self) -> AsyncIterator[None]:
        async with self._lock:
            wait = self._last_request + self.delay - time.monotonic()
            if self._last_request and wait > 0:
                logger.debug(f"Rate limiting: waiting {wait:.2f}s")
                await asyncio.sleep(wait)
            try:
                yield
            finally:
                self._last_request = time.monotonic()
