"""Command-line interface for bispull."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from . import __version__
from .core.scraper import RosterScraper
from .logging_config import setup_logging
from .models.config import ScraperConfig
from .models.events import EventType
from .models.records import CharacterRecord
from .output.report import write_characters_report, write_links_report, write_profile_links_report
from .session.base import BaseSession
from .session.browser import BrowserSession
from .session.http import HttpSession
from .session.protocols import NeedsInteractiveAuth

DEBUG_PREVIEW_ITEMS = 3


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="bispull",
        description="Scrape roster, character and wishlist data from That's My BIS",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Collect every character profile link on the roster
  bispull roster

  # Scrape the whole roster without the confirmation prompt
  bispull --url https://thatsmybis.com/11258/chonglers/roster full --yes

  # Inspect a single character page
  bispull debug https://thatsmybis.com/11258/chonglers/c/540876/aelektra

  # Use a saved session cookie instead of a browser
  BISPULL_COOKIE='tmb_session=...' bispull --backend http roster
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML config file (default: settings from environment variables)",
    )
    parser.add_argument(
        "--url",
        type=str,
        default=None,
        help="Roster page URL",
    )
    parser.add_argument(
        "--backend",
        choices=["browser", "http"],
        default=None,
        help="Page source: Chromium via Playwright, or HTTP with a session cookie",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run the browser without a window",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=Path,
        default=None,
        help="Report directory (default: ./data)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    commands.add_parser("links", help="Collect and categorize every link on the roster page")
    commands.add_parser("roster", help="Collect character profile links from the roster page")

    character = commands.add_parser("character", help="Scrape one character page")
    character.add_argument("url", help="Character page URL")

    full = commands.add_parser("full", help="Scrape the roster and every character page")
    full.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation",
    )

    debug = commands.add_parser("debug", help="Scrape one character page and print what was found")
    debug.add_argument("url", help="Character page URL")

    return parser


def build_config(args: argparse.Namespace) -> ScraperConfig:
    """Load the config file (or environment) and apply command-line overrides."""
    base = ScraperConfig.from_yaml_file(args.config) if args.config else ScraperConfig.from_env()
    data = base.model_dump()

    if args.url:
        data["roster_url"] = args.url
    if args.backend:
        data["backend"] = args.backend
    if args.headless:
        data["browser"]["headless"] = True
    if args.output_dir:
        data["output"]["directory"] = args.output_dir

    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return ScraperConfig.model_validate(data)


def create_session(config: ScraperConfig) -> BaseSession:
    """Create the page source selected by ``config.backend``."""
    if config.backend == "http":
        return HttpSession(config.network, config.auth)
    return BrowserSession(config.network, config.browser)


def make_auth_prompt(console: Console):
    """Build an auth handler that waits for the user to log in."""

    async def prompt_for_login(signal: NeedsInteractiveAuth) -> bool:
        console.print(f"[yellow]Login required:[/yellow] {signal.reason}")
        console.print("Complete the login in the browser window.")
        try:
            answer = await asyncio.to_thread(console.input, "Press Enter once authenticated (q to abort): ")
        except EOFError:
            return False
        return answer.strip().lower() != "q"

    return prompt_for_login


async def confirm(console: Console, question: str) -> bool:
    try:
        answer = await asyncio.to_thread(console.input, f"{question} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


async def run_links(scraper: RosterScraper, args: argparse.Namespace, console: Console) -> int:
    await scraper.collect_links()
    categories = scraper.categorize_links()
    path = write_links_report(
        scraper.config.output.directory,
        scraper.config.roster_url,
        scraper.collected_links,
        scraper.filtered_links,
        categories,
    )

    if not args.quiet:
        console.print(f"Total links: {len(scraper.collected_links)}")
        console.print(f"In scope: {len(scraper.filtered_links)}")
        for name, count in categories.counts().items():
            console.print(f"  {name}: {count}")
        console.print(f"[green]Saved:[/green] {path}")
    return 0


async def run_roster(scraper: RosterScraper, args: argparse.Namespace, console: Console) -> int:
    profiles = await scraper.collect_profile_links()
    path = write_profile_links_report(scraper.config.output.directory, scraper.config.roster_url, profiles)

    if not args.quiet:
        console.print(f"Profile links: {len(profiles)}")
        for profile in profiles:
            console.print(f"  {profile.player_name}  [dim]{profile.url}[/dim]")
        console.print(f"[green]Saved:[/green] {path}")
    return 0


async def run_character(scraper: RosterScraper, args: argparse.Namespace, console: Console) -> int:
    record = await scraper.scrape_character(args.url)
    path = write_characters_report(scraper.config.output.directory, scraper.config.roster_url, [record])

    if not args.quiet:
        console.print(f"{record.name or '(unnamed)'}: {len(record.wishlists)} wishlists, {record.item_count} items")
        console.print(f"[green]Saved:[/green] {path}")
    return 0


async def run_full(scraper: RosterScraper, args: argparse.Namespace, console: Console) -> int:
    config = scraper.config
    profiles = await scraper.collect_profile_links()
    write_profile_links_report(config.output.directory, config.roster_url, profiles)

    if not profiles:
        console.print("[yellow]No character profiles found on the roster page[/yellow]")
        return 1

    if not args.yes and not await confirm(console, f"Scrape {len(profiles)} character pages?"):
        console.print("Aborted")
        return 0

    if args.quiet:
        async for _ in scraper.run(profiles):
            pass
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Starting...", total=len(profiles))

            async for event in scraper.run(profiles):
                if event.type == EventType.CHARACTER_STARTED:
                    progress.update(task, description=f"[cyan]Scraping {event.player_name}")
                elif event.type == EventType.CHARACTER_SCRAPED:
                    progress.advance(task)
                elif event.is_error:
                    progress.advance(task)
                    console.print(f"[red]Failed:[/red] {event.url} - {event.error}")
                elif event.type == EventType.COMPLETED:
                    progress.update(task, description=f"[green]{event.message}")

    stats = scraper.stats
    path = write_characters_report(config.output.directory, config.roster_url, scraper.characters, stats=stats)

    if not args.quiet:
        console.print()
        console.print("[bold]Results:[/bold]")
        console.print(f"  Profiles found: {stats.profiles_found}")
        console.print(f"  Characters scraped: {stats.characters_scraped}")
        console.print(f"  Characters failed: {stats.characters_failed}")
        console.print(f"  Success rate: {stats.success_rate:.1f}%")
        console.print(f"  Items extracted: {stats.items_extracted}")
        console.print(f"  Duration: {stats.duration_seconds:.1f}s")
        console.print(f"[green]Saved:[/green] {path}")

    return 0 if stats.characters_failed == 0 else 1


def print_character(record: CharacterRecord, console: Console) -> None:
    """Print a readable summary of one character record."""
    console.print(f"[bold]{record.name or '(unnamed)'}[/bold]  [dim]{record.url}[/dim]")
    console.print(f"  Class: {record.character_class or '-'}")
    console.print(f"  Race: {record.race or '-'}")
    console.print(f"  Level: {record.level if record.level is not None else '-'}")
    console.print(f"  Professions: {', '.join(record.professions) or '-'}")

    console.print(f"  Wishlists: {len(record.wishlists)}")
    for wishlist in record.wishlists:
        console.print(f"    {wishlist.name}: {len(wishlist.items)} items")
        for item in wishlist.items[:DEBUG_PREVIEW_ITEMS]:
            priority = f"#{item.priority} " if item.priority is not None else ""
            console.print(f"      {priority}{item.name} ({item.quality.value})")

    console.print(f"  Loot received: {len(record.loot_received)}")
    if record.public_note:
        console.print(f"  Public note: {record.public_note}")


async def run_debug(scraper: RosterScraper, args: argparse.Namespace, console: Console) -> int:
    record = await scraper.scrape_character(args.url)
    print_character(record, console)
    return 0


COMMANDS = {
    "links": run_links,
    "roster": run_roster,
    "character": run_character,
    "full": run_full,
    "debug": run_debug,
}


async def run_command(args: argparse.Namespace, config: ScraperConfig, console: Console) -> int:
    """Open the page source and run the selected command."""
    if not args.quiet:
        console.print(f"[bold blue]bispull[/bold blue] v{__version__}")
        console.print(f"Roster: {config.roster_url}")
        console.print(f"Backend: {config.backend}")
        console.print()

    try:
        async with create_session(config) as session:
            scraper = RosterScraper(config, session, auth_handler=make_auth_prompt(console))
            return await COMMANDS[args.command](scraper, args, console)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console()

    try:
        config = build_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(config.log_level, log_file=str(config.log_file) if config.log_file else None)

    try:
        return asyncio.run(run_command(args, config, console))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
