import json
from datetime import date
from typing import Any, Callable, Dict, List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from ghs_games.config.settings import settings
from ghs_games.models.raw_event import RawEvent
from ghs_games.utils.week import calendar_date, week_form_body, week_span
from .base_scraper import BaseScraper, DecodeError

# Headers copied from a browser session on the calendar page (Host and Cookie are added per request)
BASE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:100.0) Gecko/20100101 Firefox/100.0",
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "Accept-Language": "en-US,en;q=0.5",
    "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
    "X-Requested-With": "XMLHttpRequest",
    "DNT": "1",
    "Connection": "keep-alive",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-origin",
    "TE": "trailers",
}


def decode_payload(text: str) -> List[RawEvent]:
    """Decodes the calendar response body into raw events.

    The body is a JSON array whose element 1 holds the event records.
    Element 0 is left untouched.
    """
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Calendar response is not valid JSON: {e}") from e

    if not isinstance(payload, list) or len(payload) < 2:
        raise DecodeError("Calendar response is not an array with an events element")

    records = payload[1]
    if not isinstance(records, list):
        raise DecodeError(
            f"Calendar events element is {type(records).__name__}, expected array"
        )

    raw_events: List[RawEvent] = []
    for index, record in enumerate(records):
        try:
            raw_events.append(RawEvent.model_validate(record))
        except ValidationError as e:
            raise DecodeError(f"Calendar record {index} is malformed: {e}") from e
    return raw_events


class CalendarScraper(BaseScraper):
    """Scraper for the school athletics week calendar."""

    source: str = "athletics calendar"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], date] = date.today,
    ):
        super().__init__(client)
        self.clock = clock
        self.url = str(settings.upstream_url)

    def build_headers(self, start: date) -> Dict[str, str]:
        url = httpx.URL(self.url)
        headers = BASE_HEADERS.copy()
        headers["Host"] = url.host
        headers["Origin"] = f"{url.scheme}://{url.host}"
        headers["Referer"] = settings.upstream_referer
        headers["Cookie"] = (
            f"{settings.upstream_cookie}; CALDATE={calendar_date(start)}; CALVIEW=week"
        )
        return headers

    async def fetch_current_week(self) -> List[RawEvent]:
        """Fetch this week's calendar entries from the athletics site."""
        start, end = week_span(self.clock())
        logger.info(f"Fetching {self.source} events from {start} to {end}")

        response = await self._make_request(
            method="POST",
            url=self.url,
            headers=self.build_headers(start),
            data=week_form_body(start, end),
        )

        raw_events = decode_payload(response.text)
        logger.info(
            f"Fetched {len(raw_events)} raw events from {self.source} for {start} to {end}"
        )
        return raw_events
