from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

from ghs_games.models.raw_event import RawEvent

EASTERN_DAYLIGHT = timezone(timedelta(hours=-4))


def wire_record(**overrides: Any) -> Dict[str, Any]:
    """A calendar record in the site's wire format (a home varsity track meet)."""
    record = {
        "isPostponed": "0",
        "Month": "5",
        "Year": "2022",
        "Day": "3",
        "thePlace": "Sanborn Regional High School",
        "eventType": "sport",
        "theOpponentString": "Multiple Opponents",
        "isCancelled": "0",
        "theTitle": "Boys-Girls Varsity Outdoor Track",
        "homeOrAway": "1",
        "theTime": "4:00 PM",
        "rescheddate": "",
    }
    record.update(overrides)
    return record


def make_raw(**overrides: Any) -> RawEvent:
    return RawEvent.model_validate(wire_record(**overrides))


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2022, 5, 3, 9, 0, tzinfo=EASTERN_DAYLIGHT)
