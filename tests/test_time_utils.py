import pytest

from clinic_agenda.domain.scheduling.time_utils import (
    add_minutes_to_time,
    build_day_options,
    build_hour_range,
    derive_center_hour_bounds,
    parse_time_to_minutes,
)


class TestParseTimeToMinutes:
    @pytest.mark.parametrize(
        "value, expected",
        [("09:30", 570), ("9:05", 545), ("9", 540), ("00:00", 0), ("25:70", 1570)],
    )
    def test_parses_lenient_clock_strings(self, value, expected):
        assert parse_time_to_minutes(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "xx:10", "10:yy"])
    def test_unparseable_input_is_none(self, value):
        assert parse_time_to_minutes(value) is None


class TestAddMinutesToTime:
    def test_wraps_forward_past_midnight(self):
        assert add_minutes_to_time("23:50", 20) == "00:10"

    def test_wraps_backwards(self):
        assert add_minutes_to_time("09:00", -90) == "07:30"
        assert add_minutes_to_time("00:15", -30) == "23:45"

    def test_missing_minutes_default_to_zero(self):
        assert add_minutes_to_time("9", 30) == "09:30"

    def test_unparseable_input_is_returned_unchanged(self):
        assert add_minutes_to_time("noon", 30) == "noon"

    def test_full_day_is_identity(self):
        assert add_minutes_to_time("14:25", 1440) == "14:25"


class TestCenterHourBounds:
    def test_default_center_hours(self):
        bounds = derive_center_hour_bounds("09:00", "21:00")
        assert bounds.opening_hour == 9
        assert bounds.center_closing_exclusive == 21
        assert bounds.client_closing_exclusive == 21
        assert bounds.therapist_closing_exclusive == 22

    def test_inverted_hours_keep_at_least_one_hour(self):
        bounds = derive_center_hour_bounds("18:00", "10:00")
        assert bounds.opening_hour == 18
        assert bounds.center_closing_exclusive == 19

    def test_malformed_hours_use_defaults(self):
        bounds = derive_center_hour_bounds("late", "")
        assert bounds.opening_hour == 9
        assert bounds.center_closing_exclusive == 21


def test_day_options_are_monday_first_and_skip_closed_weekend():
    weekdays = build_day_options(False, False)
    assert [option["value"] for option in weekdays] == [1, 2, 3, 4, 5]

    full_week = build_day_options(True, True)
    assert [option["value"] for option in full_week] == [1, 2, 3, 4, 5, 6, 0]
    assert full_week[-1]["name"] == "Sun"


def test_hour_range_always_has_one_hour():
    assert build_hour_range(9, 12) == [9, 10, 11]
    assert build_hour_range(10, 10) == [10]
    assert build_hour_range(-3, 30) == list(range(0, 24))
