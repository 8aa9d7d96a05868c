from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawEvent(BaseModel):
    """One calendar entry exactly as the athletics site sends it."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    postponed: str = Field(..., alias="isPostponed")
    month: str = Field(..., alias="Month")
    year: str = Field(..., alias="Year")
    day: str = Field(..., alias="Day")
    location: str = Field(..., alias="thePlace")
    event_type: str = Field(..., alias="eventType")
    opponent: str = Field(..., alias="theOpponentString")
    cancelled: str = Field(..., alias="isCancelled")
    name: str = Field(..., alias="theTitle")
    home: str = Field(..., alias="homeOrAway")
    time: str = Field(..., alias="theTime")
    rescheduled_date: str = Field(..., alias="rescheddate")

    @field_validator("postponed", "cancelled", "home", mode="before")
    @classmethod
    def string_from_number(cls, value: Any) -> Any:
        # The site sends these flags as either "1" or 1
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
