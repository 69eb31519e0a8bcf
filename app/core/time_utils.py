"""
Clock arithmetic for activity schedules.

All arithmetic is done on minutes since midnight; the "h:mm AM/PM" text form
only appears at the parse/format boundary.
"""

import re
from dataclasses import dataclass

MINUTES_PER_DAY = 24 * 60

TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(AM|PM)\s*$", re.IGNORECASE)
RANGE_SEPARATOR = re.compile(r"\s+[-–—]\s+|\s*[–—]\s*")
PLACES_TIME_PATTERN = re.compile(r"^\d{4}$")


class TimeParseError(ValueError):
    """Raised when clock or range text is not in the expected "h:mm AM/PM" form."""


@dataclass(frozen=True)
class TimeOfDay:
    hour: int
    minute: int

    def to_minutes(self) -> int:
        return self.hour * 60 + self.minute

    @classmethod
    def from_minutes(cls, minutes: int) -> "TimeOfDay":
        if minutes < 0 or minutes >= MINUTES_PER_DAY:
            raise ValueError(f"{minutes} minutes is outside a single day")
        return cls(hour=minutes // 60, minute=minutes % 60)


def parse_time(time_str: str) -> TimeOfDay:
    """
    Parse a 12-hour clock string into a TimeOfDay.

    Args:
        time_str: Time like "2:00 PM" or "9:30am"

    Returns:
        TimeOfDay in 24-hour terms

    Raises:
        TimeParseError: If the text is not a valid 12-hour clock time
    """
    match = TIME_PATTERN.match(time_str or "")
    if not match:
        raise TimeParseError(f"Invalid time format: '{time_str}'")

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = match.group(3).upper()

    if hour < 1 or hour > 12:
        raise TimeParseError(f"Invalid hour {hour} in 12-hour time '{time_str}'")
    if minute > 59:
        raise TimeParseError(f"Invalid minute {minute} in '{time_str}'")

    if meridiem == "AM":
        if hour == 12:
            hour = 0
    else:  # PM
        if hour != 12:
            hour += 12

    return TimeOfDay(hour=hour, minute=minute)


def format_time(value: TimeOfDay) -> str:
    """Render a TimeOfDay as "h:mm AM/PM" with no leading zero on the hour."""
    hours = value.hour
    mins = value.minute

    if hours == 0:
        return f"12:{mins:02d} AM"
    elif hours < 12:
        return f"{hours}:{mins:02d} AM"
    elif hours == 12:
        return f"12:{mins:02d} PM"
    else:
        return f"{hours - 12}:{mins:02d} PM"


def to_minutes(time_str: str) -> int:
    """Minutes since midnight for a "h:mm AM/PM" string."""
    return parse_time(time_str).to_minutes()


def format_minutes(minutes: int) -> str:
    """
    Format minutes since midnight as "h:mm AM/PM".

    Values in [1440, 2880) are rendered as the next morning's clock time, which
    is how overnight closing times are displayed.
    """
    if MINUTES_PER_DAY <= minutes < 2 * MINUTES_PER_DAY:
        minutes -= MINUTES_PER_DAY
    return format_time(TimeOfDay.from_minutes(minutes))


def parse_time_range(time_range: str) -> tuple[TimeOfDay, TimeOfDay]:
    """
    Split "9:00 AM - 10:30 AM" into its start and end.

    Raises:
        TimeParseError: On a missing separator, bad clock text, or an end
            before the start (activities never run overnight)
    """
    parts = RANGE_SEPARATOR.split((time_range or "").strip())
    if len(parts) != 2:
        raise TimeParseError(f"Invalid time range: '{time_range}'")

    start = parse_time(parts[0])
    end = parse_time(parts[1])
    if end.to_minutes() < start.to_minutes():
        raise TimeParseError(f"Time range ends before it starts: '{time_range}'")
    return start, end


def parse_time_range_minutes(time_range: str) -> tuple[int, int]:
    start, end = parse_time_range(time_range)
    return start.to_minutes(), end.to_minutes()


def get_activity_duration(time_range: str) -> int:
    """
    Duration in minutes of a time range.

    Example:
        get_activity_duration("11:30 AM - 1:00 PM")  # 90
    """
    start, end = parse_time_range_minutes(time_range)
    return end - start


def format_time_range(start_minutes: int, end_minutes: int) -> str:
    return f"{format_minutes(start_minutes)} - {format_minutes(end_minutes)}"


def places_time_to_minutes(time_code: str) -> int:
    """
    Convert a places-service time code ("0930", "2200") to minutes since midnight.
    """
    if not PLACES_TIME_PATTERN.match(time_code or ""):
        raise TimeParseError(f"Invalid places time code: '{time_code}'")

    hours = int(time_code[:2])
    mins = int(time_code[2:])
    if hours > 23 or mins > 59:
        raise TimeParseError(f"Invalid places time code: '{time_code}'")
    return hours * 60 + mins


def format_places_time(time_code: str) -> str:
    """Format a places-service time code, e.g. "1400" -> "2:00 PM"."""
    return format_minutes(places_time_to_minutes(time_code))

