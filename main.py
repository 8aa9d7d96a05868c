import sys
import asyncio
import argparse

# --- Settings/Logging ---
from ghs_games.logging.setup import setup_logging
from ghs_games.config.settings import settings

setup_logging()

from loguru import logger

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ghs_games.api.app import create_app
from ghs_games.normalization.normalizer import NormalizationError
from ghs_games.scrapers.base_scraper import ScraperError
from ghs_games.service import get_current_week_events

console = Console()


async def run_once() -> int:
    """Fetches the current week once and prints it as a table."""
    try:
        events = await get_current_week_events()
    except (ScraperError, NormalizationError) as e:
        logger.error(f"Could not load the current week: {e}")
        console.print(Panel(str(e), title=type(e).__name__, border_style="red"))
        return 1

    table = Table(title=f"Home games this week ({len(events)})")
    table.add_column("When")
    table.add_column("Event")
    table.add_column("Sport")
    table.add_column("Opponent")
    table.add_column("Location")
    table.add_column("Status")
    for event in events:
        if event.cancelled:
            status = "[red]cancelled[/red]"
        elif event.rescheduled:
            status = f"[yellow]rescheduled {event.rescheduled_date or 'TBA'}[/yellow]"
        else:
            status = ""
        table.add_row(
            event.time.strftime("%a %m/%d %I:%M %p"),
            event.name,
            event.sport + (" (V)" if event.varsity else ""),
            event.opponent,
            event.location,
            status,
        )
    console.print(table)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="GHS games backend")
    parser.add_argument(
        "--once",
        action="store_true",
        help="fetch the current week once, print it and exit",
    )
    args = parser.parse_args()

    if args.once:
        sys.exit(asyncio.run(run_once()))

    logger.info(f"Starting GHS games API on {settings.host}:{settings.port}")
    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
