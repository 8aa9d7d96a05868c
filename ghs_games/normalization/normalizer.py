from datetime import date, datetime
from typing import Iterable, List, Optional

from loguru import logger

from ghs_games.models.event import Event
from ghs_games.models.raw_event import RawEvent

TIMESTAMP_FORMAT = "%Y-%m-%d %I:%M %p %z"
RESCHEDULED_DATE_FORMAT = "%m/%d/%Y"
UNSCHEDULED_MARKER = "TBA"


class NormalizationError(Exception):
    """Custom exception for data normalization errors."""

    pass


class InvalidTokenError(NormalizationError):
    """A flag field held something other than "", "0" or "1"."""

    def __init__(self, field: str, token: str):
        super().__init__(f"Invalid {field} flag {token!r}: expected '', '0' or '1'")
        self.field = field
        self.token = token


class DateParseError(NormalizationError):
    """A date or time field did not match the calendar's format."""

    pass


def decode_flag(token: str, field: str) -> bool:
    """Decodes the calendar's boolean tokens.

    "" and "0" are false, "1" is true. Anything else means the upstream
    format changed, so it raises instead of guessing.
    """
    if token in ("", "0"):
        return False
    if token == "1":
        return True
    raise InvalidTokenError(field, token)


class Normalizer:
    """Turns raw calendar entries into published events."""

    def __init__(self, now: Optional[datetime] = None):
        # Fixed timezone-aware "now"; None reads the local clock per event
        if now is not None and now.tzinfo is None:
            raise ValueError("Normalizer needs a timezone-aware 'now'")
        self.now = now

    def _local_now(self) -> datetime:
        if self.now is not None:
            return self.now
        return datetime.now().astimezone()

    def normalize(self, raw: RawEvent) -> Optional[Event]:
        """Normalizes one raw entry.

        Returns None for anything that is not a home sport event or is a
        middle school entry.

        Raises:
            InvalidTokenError: a flag field held an unknown token.
            DateParseError: the start time or rescheduled date did not parse.
        """
        if (
            raw.event_type != "sport"
            or "Middle School" in raw.name
            or not decode_flag(raw.home, "homeOrAway")
        ):
            return None

        if decode_flag(raw.postponed, "isPostponed"):
            logger.debug(f"'{raw.name}' on {raw.month}/{raw.day}/{raw.year} is postponed")

        return Event(
            name=raw.name,
            time=self._parse_start_time(raw),
            sport=raw.name.split(" ")[-1],
            varsity="varsity" in raw.name.lower(),
            opponent=raw.opponent,
            location=raw.location,
            rescheduled=raw.rescheduled_date != "",
            rescheduled_date=self._parse_rescheduled_date(raw.rescheduled_date),
            cancelled=decode_flag(raw.cancelled, "isCancelled"),
        )

    def normalize_all(self, raw_events: Iterable[RawEvent]) -> List[Event]:
        """Normalizes a batch, dropping filtered entries.

        The first error aborts the batch; no partial list is returned.
        """
        events: List[Event] = []
        total = 0
        for raw in raw_events:
            total += 1
            event = self.normalize(raw)
            if event is not None:
                events.append(event)
        logger.info(f"Normalization complete. Kept {len(events)} of {total} raw events.")
        return events

    def _parse_start_time(self, raw: RawEvent) -> datetime:
        local_now = self._local_now()
        clock, _, meridiem = raw.time.strip().partition(" ")
        text = (
            f"{raw.year}-{raw.month:0>2}-{raw.day:0>2} "
            f"{clock:0>5} {meridiem} {local_now.strftime('%z')}"
        )
        try:
            parsed = datetime.strptime(text, TIMESTAMP_FORMAT)
        except ValueError as e:
            raise DateParseError(
                f"Failed to parse datetime for '{raw.name}' from {text!r}: {e}"
            ) from e
        if self.now is not None:
            return parsed.astimezone(self.now.tzinfo)
        return parsed.astimezone()

    def _parse_rescheduled_date(self, value: str) -> Optional[date]:
        if value == "" or value == UNSCHEDULED_MARKER:
            return None
        try:
            return datetime.strptime(value, RESCHEDULED_DATE_FORMAT).date()
        except ValueError as e:
            raise DateParseError(f"Failed to parse rescheduled date {value!r}: {e}") from e
