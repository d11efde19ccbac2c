"""Page sources that load pages behind the login wall."""

from .auth import login_required_reason
from .base import BaseSession, LoadedPage
from .browser import PLAYWRIGHT_AVAILABLE, BrowserSession
from .http import HttpSession
from .protocols import NeedsInteractiveAuth, PageResult, PageSource
from .rate_limiter import FixedDelayLimiter

__all__ = [
    "PageSource",
    "PageResult",
    "NeedsInteractiveAuth",
    "BaseSession",
    "LoadedPage",
    "BrowserSession",
    "HttpSession",
    "FixedDelayLimiter",
    "login_required_reason",
    "PLAYWRIGHT_AVAILABLE",
]
