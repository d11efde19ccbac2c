"""Pydantic configuration models for bispull."""

import os
import re
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from ..extraction.filters import LinkFilterConfig

DEFAULT_ROSTER_URL = "https://thatsmybis.com/11258/chonglers/roster"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    if value is None:
        return None

    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class NetworkConfig(BaseModel):
    """Configuration for page fetching."""

    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent sent by both sessions")
    timeout: int = Field(30, ge=1, description="Navigation/request timeout in seconds")
    delay: float = Field(1.0, ge=0, description="Fixed delay in seconds between successive fetches")
    max_retries: int = Field(3, ge=0, description="Retries for transient fetch failures")
    retry_delay: float = Field(1.0, ge=0, description="Fixed backoff in seconds between retries")

    model_config = {"extra": "forbid"}


class BrowserConfig(BaseModel):
    """Configuration for the Playwright browser session."""

    headless: bool = Field(False, description="Run Chromium without a window")
    user_data_dir: Path = Field(
        Path("data/chrome_user_data"),
        description="Persistent browser profile directory (keeps login cookies)",
    )
    settle_time: float = Field(2.0, ge=0, description="Seconds to wait after each navigation")

    model_config = {"extra": "forbid"}


class AuthConfig(BaseModel):
    """Credentials for the cookie-based HTTP session.

    ``cookie`` supports $VAR or ${VAR} expansion, e.g. ``'session=${TMB_SESSION}'``.
    """

    cookie: Optional[str] = Field(None, description="Raw Cookie header value")

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables after init."""
        if self.cookie:
            object.__setattr__(self, "cookie", _expand_env_var(self.cookie))


class LinkScopeConfig(BaseModel):
    """Which generic links are kept by ``collect_links``."""

    follow_external: bool = Field(False, description="Keep links to other hosts")
    include_patterns: list[str] = Field(default_factory=list, description="Substrings a URL must contain")
    exclude_patterns: list[str] = Field(default_factory=list, description="Substrings that reject a URL")
    include_regexes: list[str] = Field(default_factory=list, description="Regexes a URL must match")
    exclude_regexes: list[str] = Field(default_factory=list, description="Regexes that reject a URL")

    model_config = {"extra": "forbid"}


class OutputConfig(BaseModel):
    """Where JSON reports are written."""

    directory: Path = Field(Path("data"), description="Report output directory")

    model_config = {"extra": "forbid"}


class ScraperConfig(BaseModel):
    """
    Root configuration model for bispull.

    Example:
        config = ScraperConfig(
            roster_url="https://thatsmybis.com/11258/chonglers/roster",
            browser=BrowserConfig(headless=True),
        )

    YAML format:
        roster_url: https://thatsmybis.com/11258/chonglers/roster
        backend: browser
        network:
          delay: 2
        output:
          directory: ./reports
    """

    roster_url: str = Field(DEFAULT_ROSTER_URL, description="Roster page listing the characters")
    backend: Literal["browser", "http"] = Field("browser", description="Page source implementation")

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    links: LinkScopeConfig = Field(default_factory=LinkScopeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Logging level")
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    @property
    def domain(self) -> str:
        """Host of the roster page; links to other hosts are external."""
        return urlparse(self.roster_url).hostname or ""

    def link_filter_config(self) -> LinkFilterConfig:
        """Build the filter configuration used by ``LinkFilter``."""
        includes: list = list(self.links.include_patterns)
        includes.extend(re.compile(pattern) for pattern in self.links.include_regexes)
        excludes: list = list(self.links.exclude_patterns)
        excludes.extend(re.compile(pattern) for pattern in self.links.exclude_regexes)
        return LinkFilterConfig(
            domain=self.domain,
            follow_external=self.links.follow_external,
            include_patterns=includes,
            exclude_patterns=excludes,
        )

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None) -> "ScraperConfig":
        """
        Build a config from environment variables.

        Recognized: TARGET_URL, USER_AGENT, TIMEOUT, REQUEST_DELAY,
        MAX_RETRIES, HEADLESS, LOG_LEVEL, BISPULL_COOKIE. Unset variables
        keep their defaults.
        """
        env = os.environ if environ is None else environ
        data: dict = {}
        network: dict = {}

        if env.get("TARGET_URL"):
            data["roster_url"] = env["TARGET_URL"]
        if env.get("USER_AGENT"):
            network["user_agent"] = env["USER_AGENT"]
        if env.get("TIMEOUT"):
            network["timeout"] = env["TIMEOUT"]
        if env.get("REQUEST_DELAY"):
            network["delay"] = env["REQUEST_DELAY"]
        if env.get("MAX_RETRIES"):
            network["max_retries"] = env["MAX_RETRIES"]
        if network:
            data["network"] = network
        if env.get("HEADLESS"):
            data["browser"] = {"headless": env["HEADLESS"].strip().lower() == "true"}
        if env.get("LOG_LEVEL"):
            data["log_level"] = env["LOG_LEVEL"].upper()
        if env.get("BISPULL_COOKIE"):
            data["auth"] = {"cookie": env["BISPULL_COOKIE"]}

        return cls.model_validate(data)

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ScraperConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ScraperConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
