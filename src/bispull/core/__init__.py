"""Scrape orchestration."""

from .scraper import AuthHandler, RosterScraper

__all__ = ["RosterScraper", "AuthHandler"]
