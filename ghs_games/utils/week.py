from datetime import date, timedelta
from typing import Dict, Optional, Tuple

from ghs_games.config.settings import settings


def week_span(today: date, week_starts_on: Optional[int] = None) -> Tuple[date, date]:
    """Returns the inclusive (first, last) days of the week containing `today`.

    `week_starts_on` uses Python weekday numbers (Monday=0 ... Sunday=6) and
    defaults to the configured value.
    """
    if week_starts_on is None:
        week_starts_on = settings.week_starts_on
    if not 0 <= week_starts_on <= 6:
        raise ValueError(f"week_starts_on must be between 0 and 6, got {week_starts_on}")

    offset = (today.weekday() - week_starts_on) % 7
    start = today - timedelta(days=offset)
    return start, start + timedelta(days=6)


def week_form_body(start: date, end: date) -> Dict[str, str]:
    """Form fields the calendar endpoint expects for a date range (no zero padding)."""
    return {
        "fromMonth": str(start.month),
        "fromYear": str(start.year),
        "fromDay": str(start.day),
        "toMonth": str(end.month),
        "toYear": str(end.year),
        "toDay": str(end.day),
    }


def calendar_date(day: date) -> str:
    """Formats a date the way the calendar site writes it, e.g. 5/3/2022."""
    return f"{day.month}/{day.day}/{day.year}"
