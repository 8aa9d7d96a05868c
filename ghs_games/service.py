from typing import List, Optional

from loguru import logger

from ghs_games.models.event import Event
from ghs_games.normalization.normalizer import Normalizer
from ghs_games.scrapers.base_scraper import BaseScraper
from ghs_games.scrapers.calendar_scraper import CalendarScraper


async def get_current_week_events(
    scraper: Optional[BaseScraper] = None,
    normalizer: Optional[Normalizer] = None,
) -> List[Event]:
    """Fetches this week's calendar and returns the published events.

    Raises ScraperError if the fetch fails and NormalizationError on the
    first entry that cannot be normalized. The scraper is always closed.
    """
    scraper = scraper or CalendarScraper()
    normalizer = normalizer or Normalizer()
    try:
        raw_events = await scraper.fetch_current_week()
    finally:
        await scraper.close()

    events = normalizer.normalize_all(raw_events)
    logger.info(f"Current week has {len(events)} home sport events")
    return events
