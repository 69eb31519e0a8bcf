from datetime import date

import pytest

from app.core.schemas import OpeningHours
from app.core.time_utils import TimeParseError
from app.core.timing_validator import find_fitting_range, validate_activity_timing

MONDAY = date(2024, 11, 18)
TUESDAY = date(2024, 11, 19)
FRIDAY = date(2024, 11, 22)


def test_closed_day_is_invalid(museum_hours):
    verdict = validate_activity_timing("10:00 AM - 11:00 AM", museum_hours, MONDAY)
    assert verdict.is_valid is False
    assert "closed" in verdict.reason.lower()
    assert "Monday" in verdict.reason
    assert verdict.window_open is None


def test_activity_inside_hours_is_valid(museum_hours):
    verdict = validate_activity_timing("9:00 AM - 10:30 AM", museum_hours, TUESDAY)
    assert verdict.is_valid is True
    assert verdict.opening_time == "9:00 AM"
    assert verdict.closing_time == "5:00 PM"


def test_activity_running_past_close(museum_hours):
    verdict = validate_activity_timing("4:00 PM - 6:00 PM", museum_hours, TUESDAY)
    assert verdict.is_valid is False
    assert verdict.reason == "Closes at 5:00 PM"
    assert verdict.suggested_adjustment == "Suggest moving to 3:00 PM - 5:00 PM"
    assert (verdict.window_open, verdict.window_close) == (540, 1020)


def test_suggestion_follows_opening_anchor(museum_hours):
    verdict = validate_activity_timing(
        "4:00 PM - 6:00 PM", museum_hours, TUESDAY, anchor="opening"
    )
    assert verdict.suggested_adjustment == "Suggest moving to 9:00 AM - 11:00 AM"


def test_activity_before_opening(museum_hours):
    verdict = validate_activity_timing("8:00 AM - 10:00 AM", museum_hours, TUESDAY)
    assert verdict.is_valid is False
    assert verdict.reason == "Opens at 9:00 AM"
    assert verdict.suggested_adjustment == "Suggest moving to 9:00 AM - 11:00 AM"


def test_activity_longer_than_open_window(museum_hours):
    verdict = validate_activity_timing("8:00 AM - 6:00 PM", museum_hours, TUESDAY)
    assert verdict.is_valid is False
    assert "cannot fit" in verdict.suggested_adjustment


def test_schedule_without_entry_for_day_is_invalid():
    hours = OpeningHours(weekday_text=["Monday: 9:00 AM – 5:00 PM"])
    verdict = validate_activity_timing("10:00 AM - 11:00 AM", hours, TUESDAY)
    assert verdict.is_valid is False
    assert verdict.reason == "No hours data for Tuesday"


def test_text_only_hours_are_judged_against_the_text_line():
    hours = OpeningHours(weekday_text=["Tuesday: 11:00 AM – 2:30 PM"])

    assert validate_activity_timing("12:00 PM - 1:00 PM", hours, TUESDAY).is_valid is True

    verdict = validate_activity_timing("2:00 PM - 3:00 PM", hours, TUESDAY)
    assert verdict.is_valid is False
    assert verdict.reason == "Closes at 2:30 PM"
    assert verdict.suggested_adjustment == "Suggest moving to 1:30 PM - 2:30 PM"


def test_unparseable_text_line_counts_as_no_hours_data():
    hours = OpeningHours(weekday_text=["Tuesday: by appointment"])
    verdict = validate_activity_timing("12:00 PM - 1:00 PM", hours, TUESDAY)
    assert verdict.is_valid is False
    assert verdict.reason == "No hours data for Tuesday"


def test_open_24_hours_is_always_valid():
    hours = OpeningHours(weekday_text=["Tuesday: Open 24 hours"])
    verdict = validate_activity_timing("5:00 AM - 11:30 PM", hours, TUESDAY)
    assert verdict.is_valid is True
    assert verdict.opening_time == "Open 24 hours"


def test_overnight_closing_compares_as_next_day(bar_hours):
    verdict = validate_activity_timing("10:00 PM - 11:30 PM", bar_hours, FRIDAY)
    assert verdict.is_valid is True
    assert verdict.closing_time == "2:00 AM"

    early = validate_activity_timing("6:00 PM - 7:00 PM", bar_hours, FRIDAY)
    assert early.is_valid is False
    assert early.reason == "Opens at 8:00 PM"


def test_picks_window_needing_smallest_shift():
    hours = OpeningHours(weekday_text=["Tuesday: 11:00 AM – 2:30 PM, 5:30 – 10:00 PM"])
    verdict = validate_activity_timing("3:00 PM - 4:00 PM", hours, TUESDAY)
    assert verdict.is_valid is False
    assert verdict.reason == "Closes at 2:30 PM"
    assert verdict.suggested_adjustment == "Suggest moving to 1:30 PM - 2:30 PM"


def test_malformed_range_raises(museum_hours):
    with pytest.raises(TimeParseError):
        validate_activity_timing("afternoon", museum_hours, TUESDAY)


def test_find_fitting_range_nearest():
    # 4-6 PM against 9 AM - 5 PM ends at closing
    assert find_fitting_range(960, 1080, 540, 1020) == (900, 1020)
    # 8-10 AM starts at opening
    assert find_fitting_range(480, 600, 540, 1020) == (540, 660)


def test_find_fitting_range_opening_anchor():
    assert find_fitting_range(960, 1080, 540, 1020, anchor="opening") == (540, 660)


def test_find_fitting_range_too_long():
    assert find_fitting_range(480, 1080, 540, 1020) is None


def test_find_fitting_range_stays_within_day():
    # Window runs until 2 AM but activities must end by 11:59 PM
    assert find_fitting_range(1380, 1500, 1200, 1560) == (1319, 1439)
    assert find_fitting_range(1100, 1220, 1200, 1560) == (1200, 1320)
