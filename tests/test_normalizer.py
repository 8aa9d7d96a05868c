from datetime import date, datetime

import pytest

from conftest import EASTERN_DAYLIGHT, make_raw
from ghs_games.models.event import Event
from ghs_games.normalization.normalizer import (
    DateParseError,
    InvalidTokenError,
    NormalizationError,
    Normalizer,
    decode_flag,
)


@pytest.fixture
def normalizer(fixed_now: datetime) -> Normalizer:
    return Normalizer(now=fixed_now)


class TestDecodeFlag:
    @pytest.mark.parametrize("token, expected", [("", False), ("0", False), ("1", True)])
    def test_known_tokens(self, token: str, expected: bool) -> None:
        assert decode_flag(token, "homeOrAway") is expected

    @pytest.mark.parametrize("token", ["2", "true", " 1", "-1"])
    def test_unknown_tokens_raise(self, token: str) -> None:
        with pytest.raises(InvalidTokenError) as exc_info:
            decode_flag(token, "isCancelled")
        assert exc_info.value.field == "isCancelled"
        assert exc_info.value.token == token
        assert "isCancelled" in str(exc_info.value)


class TestFilter:
    def test_non_sport_event_is_dropped(self, normalizer: Normalizer) -> None:
        raw = make_raw(
            eventType="school",
            theTitle="School Board Meeting",
            thePlace="Goffstown High School",
            theOpponentString="",
            theTime="7:21 PM",
            homeOrAway="0",
        )
        assert normalizer.normalize(raw) is None

    def test_middle_school_event_is_dropped(self, normalizer: Normalizer) -> None:
        raw = make_raw(theTitle="Mountain View Middle School Boys Baseball")
        assert normalizer.normalize(raw) is None

    @pytest.mark.parametrize("home", ["", "0", 0])
    def test_away_event_is_dropped(self, normalizer: Normalizer, home) -> None:
        assert normalizer.normalize(make_raw(homeOrAway=home)) is None

    def test_filtered_event_tokens_are_not_decoded(self, normalizer: Normalizer) -> None:
        raw = make_raw(eventType="school", homeOrAway="7", isCancelled="9")
        assert normalizer.normalize(raw) is None

    def test_invalid_home_token_fails(self, normalizer: Normalizer) -> None:
        with pytest.raises(InvalidTokenError):
            normalizer.normalize(make_raw(homeOrAway="2"))


class TestNormalize:
    def test_home_track_meet(self, normalizer: Normalizer) -> None:
        event = normalizer.normalize(make_raw())

        assert event == Event(
            name="Boys-Girls Varsity Outdoor Track",
            time=datetime(2022, 5, 3, 16, 0, tzinfo=EASTERN_DAYLIGHT),
            sport="Track",
            varsity=True,
            opponent="Multiple Opponents",
            location="Sanborn Regional High School",
            rescheduled=False,
            rescheduled_date=None,
            cancelled=False,
        )
        assert event.time.utcoffset() == EASTERN_DAYLIGHT.utcoffset(None)

    def test_numeric_flags_from_the_wire(self, normalizer: Normalizer) -> None:
        event = normalizer.normalize(make_raw(homeOrAway=1, isCancelled=1, isPostponed=0))
        assert event is not None
        assert event.cancelled is True

    @pytest.mark.parametrize(
        "title, sport, varsity",
        [
            ("Boys JV Baseball", "Baseball", False),
            ("Girls VARSITY Lacrosse", "Lacrosse", True),
            ("Unified Volleyball", "Volleyball", False),
        ],
    )
    def test_derived_fields(
        self, normalizer: Normalizer, title: str, sport: str, varsity: bool
    ) -> None:
        event = normalizer.normalize(make_raw(theTitle=title))
        assert event is not None
        assert event.sport == sport
        assert event.varsity is varsity

    @pytest.mark.parametrize(
        "clock, hour, minute",
        [("4:00 PM", 16, 0), ("10:30 AM", 10, 30), ("12:15 PM", 12, 15), ("12:05 AM", 0, 5)],
    )
    def test_start_time_formats(
        self, normalizer: Normalizer, clock: str, hour: int, minute: int
    ) -> None:
        event = normalizer.normalize(make_raw(theTime=clock, Month="10", Day="21"))
        assert event is not None
        assert event.time == datetime(2022, 10, 21, hour, minute, tzinfo=EASTERN_DAYLIGHT)

    @pytest.mark.parametrize("clock", ["TBA", "", "4 PM", "16:00"])
    def test_bad_start_time_fails(self, normalizer: Normalizer, clock: str) -> None:
        with pytest.raises(DateParseError):
            normalizer.normalize(make_raw(theTime=clock))

    def test_default_clock_uses_local_offset(self) -> None:
        local_zone = datetime.now().astimezone().tzinfo
        event = Normalizer().normalize(make_raw())
        assert event is not None
        assert event.time.tzinfo is not None
        assert event.time == datetime(2022, 5, 3, 16, 0, tzinfo=local_zone)

    def test_cancelled(self, normalizer: Normalizer) -> None:
        event = normalizer.normalize(make_raw(isCancelled="1"))
        assert event is not None
        assert event.cancelled is True

    def test_invalid_cancelled_token_fails(self, normalizer: Normalizer) -> None:
        with pytest.raises(InvalidTokenError):
            normalizer.normalize(make_raw(isCancelled="2"))

    def test_invalid_postponed_token_fails(self, normalizer: Normalizer) -> None:
        with pytest.raises(InvalidTokenError):
            normalizer.normalize(make_raw(isPostponed="yes"))


class TestRescheduled:
    @pytest.mark.parametrize("value", ["", "TBA"])
    def test_unscheduled(self, normalizer: Normalizer, value: str) -> None:
        event = normalizer.normalize(make_raw(rescheddate=value))
        assert event is not None
        assert event.rescheduled is (value != "")
        assert event.rescheduled_date is None

    def test_empty_is_not_rescheduled(self, normalizer: Normalizer) -> None:
        event = normalizer.normalize(make_raw(rescheddate=""))
        assert event is not None
        assert event.rescheduled is False

    def test_rescheduled_to_date(self, normalizer: Normalizer) -> None:
        event = normalizer.normalize(make_raw(rescheddate="5/10/2022"))
        assert event is not None
        assert event.rescheduled is True
        assert event.rescheduled_date == date(2022, 5, 10)

    @pytest.mark.parametrize("value", ["tba", "2022-05-10", "5/32/2022"])
    def test_bad_rescheduled_date_fails(self, normalizer: Normalizer, value: str) -> None:
        with pytest.raises(DateParseError):
            normalizer.normalize(make_raw(rescheddate=value))


class TestNormalizeAll:
    def test_keeps_order_and_drops_filtered(self, normalizer: Normalizer) -> None:
        raws = [
            make_raw(theTitle="Boys Varsity Baseball"),
            make_raw(eventType="school", theTitle="Open House"),
            make_raw(theTitle="Girls JV Softball", homeOrAway="0"),
            make_raw(theTitle="Girls Varsity Softball"),
        ]
        events = normalizer.normalize_all(raws)
        assert [e.name for e in events] == ["Boys Varsity Baseball", "Girls Varsity Softball"]

    def test_first_error_aborts_batch(self, normalizer: Normalizer) -> None:
        raws = [make_raw(), make_raw(isCancelled="2"), make_raw(theTime="later")]
        with pytest.raises(NormalizationError) as exc_info:
            normalizer.normalize_all(raws)
        assert isinstance(exc_info.value, InvalidTokenError)

    def test_empty_batch(self, normalizer: Normalizer) -> None:
        assert normalizer.normalize_all([]) == []


def test_naive_now_is_rejected() -> None:
    with pytest.raises(ValueError):
        Normalizer(now=datetime(2022, 5, 3, 9, 0))
