"""
Utilities for parsing venue opening hours and resolving them for a given date.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from app.core.schemas import OpeningHours, OpeningHoursPeriod
from app.core.time_utils import MINUTES_PER_DAY, TimeParseError, places_time_to_minutes, to_minutes

logger = logging.getLogger(__name__)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

HOURS_RANGE_PATTERN = re.compile(
    r"(\d{1,2}:\d{2})\s*(AM|PM)?\s*[-–—]\s*(\d{1,2}:\d{2})\s*(AM|PM)", re.IGNORECASE
)

HoursStatus = Literal["open", "closed", "open_24_hours", "unknown"]


@dataclass
class ResolvedHours:
    """Opening hours for one specific date."""

    status: HoursStatus
    weekday: str
    text: str | None = None
    # (open, close) in minutes since midnight, sorted by open; close > 1440 overnight
    windows: list[tuple[int, int]] = field(default_factory=list)


def places_weekday(day: date) -> int:
    """Weekday index in the places service's convention (0=Sunday .. 6=Saturday)."""
    return (day.weekday() + 1) % 7


def get_day_of_week(day: date) -> str:
    return DAY_NAMES[places_weekday(day)]


def get_abbreviated_day(day: date) -> str:
    return DAY_ABBREVIATIONS[places_weekday(day)]


def is_monday(day: date) -> bool:
    """Many museums are closed on Mondays."""
    return places_weekday(day) == 1


def is_sunday(day: date) -> bool:
    """Shops often run reduced hours on Sundays."""
    return places_weekday(day) == 0


def get_recommended_activity_types(day: date, all_types: list[str]) -> list[str]:
    """
    Filter activity types that are a poor fit for the given date.

    Museums and galleries are dropped on Mondays; every other day returns the
    list unchanged.
    """
    if is_monday(day):
        return [
            t for t in all_types if "museum" not in t.lower() and "gallery" not in t.lower()
        ]
    return all_types


def get_hours_for_date(opening_hours: OpeningHours | None, day: date) -> str | None:
    """
    Get the free-text hours line for a date.

    Returns:
        "10:00 AM – 6:00 PM", "Closed", "Open 24 hours" or None if unavailable
    """
    if not opening_hours or not opening_hours.weekday_text:
        return None

    day_name = get_day_of_week(day).lower()
    for entry in opening_hours.weekday_text:
        if entry.strip().lower().startswith(day_name):
            if ":" not in entry:
                return None
            hours = entry.split(":", 1)[1].strip()
            return hours or None
    return None


def parse_hours_text(hours_str: str) -> list[tuple[int, int]]:
    """
    Parse an hours line such as "9:00 AM – 1:00 PM, 2:00 PM – 6:00 PM" into windows.

    An opening time without AM/PM ("5:30 – 10:00 PM") takes the closing time's.
    A closing time earlier than its opening time is taken as past midnight.
    """
    windows = []
    for open_clock, open_meridiem, close_clock, close_meridiem in HOURS_RANGE_PATTERN.findall(
        hours_str
    ):
        try:
            open_minutes = to_minutes(f"{open_clock} {open_meridiem or close_meridiem}")
            close_minutes = to_minutes(f"{close_clock} {close_meridiem}")
        except TimeParseError as e:
            logger.debug(f"[OpeningHours] Skipping unparseable range in '{hours_str}': {e}")
            continue
        if close_minutes <= open_minutes:
            close_minutes += MINUTES_PER_DAY
        windows.append((open_minutes, close_minutes))
    return windows


def _period_window(period: OpeningHoursPeriod) -> tuple[int, int]:
    """Window in minutes for a structured period that has a close entry."""
    open_minutes = places_time_to_minutes(period.open.time)
    close_minutes = places_time_to_minutes(period.close.time)
    if period.close.day != period.open.day:
        # Overnight: closes the next day, e.g. Fri 2000 -> Sat 0200
        days_ahead = (period.close.day - period.open.day) % 7
        close_minutes += days_ahead * MINUTES_PER_DAY
    elif close_minutes <= open_minutes:
        # Same weekday on both ends with close <= open wraps round the whole week
        close_minutes += 7 * MINUTES_PER_DAY
    return open_minutes, close_minutes


def resolve_hours_for_date(opening_hours: OpeningHours | None, day: date) -> ResolvedHours:
    """
    Resolve the effective opening window(s) for a specific date.

    The weekday text wins for "Closed" and "Open 24 hours". Otherwise the
    structured periods opening on this weekday are used; when there are none,
    the text line itself is parsed.

    Args:
        opening_hours: Weekly hours snapshot
        day: Calendar date of the activity

    Returns:
        ResolvedHours with a status and windows in minutes since midnight
    """
    weekday = get_day_of_week(day)
    text = get_hours_for_date(opening_hours, day)
    resolved = ResolvedHours(status="unknown", weekday=weekday, text=text)

    if not opening_hours:
        return resolved

    if text and "closed" in text.lower():
        resolved.status = "closed"
        return resolved

    if text and "24 hours" in text.lower():
        resolved.status = "open_24_hours"
        resolved.windows = [(0, MINUTES_PER_DAY)]
        return resolved

    weekday_index = places_weekday(day)
    windows = []
    for period in opening_hours.periods:
        if period.close is None:
            # No close entry: open from the open time onwards ("0000" = always open)
            if period.open.time == "0000":
                resolved.status = "open_24_hours"
                resolved.windows = [(0, MINUTES_PER_DAY)]
                return resolved
            if period.open.day == weekday_index:
                windows.append((places_time_to_minutes(period.open.time), MINUTES_PER_DAY))
            continue
        if period.open.day != weekday_index:
            continue
        window = _period_window(period)
        if window[0] == 0 and window[1] >= MINUTES_PER_DAY:
            resolved.status = "open_24_hours"
            resolved.windows = [(0, MINUTES_PER_DAY)]
            return resolved
        windows.append(window)

    if not windows and text:
        windows = parse_hours_text(text)

    if windows:
        resolved.status = "open"
        resolved.windows = sorted(windows)

    return resolved
