from datetime import date, datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """A home sport event as published by the API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    time: datetime  # timezone-aware, local zone
    sport: str
    varsity: bool
    opponent: str
    location: str
    rescheduled: bool
    rescheduled_date: Optional[date] = Field(None, alias="rescheduledDate")
    cancelled: bool


class ScheduleSnapshot(BaseModel):
    """Immutable view of the cached current week."""

    model_config = ConfigDict(frozen=True)

    events: Tuple[Event, ...]
    refreshed_at: datetime
