"""
Validate an activity's scheduled time range against venue opening hours.
"""

import logging
from datetime import date

from app.core.opening_hours_utils import resolve_hours_for_date
from app.core.schemas import FitAnchor, OpeningHours, TimingVerdict
from app.core.time_utils import (
    MINUTES_PER_DAY,
    format_minutes,
    format_time_range,
    parse_time_range_minutes,
)

logger = logging.getLogger(__name__)

# Latest end an activity can have without running into the next day
LAST_MINUTE_OF_DAY = MINUTES_PER_DAY - 1


def find_fitting_range(
    start: int, end: int, open_minutes: int, close_minutes: int, anchor: FitAnchor = "nearest"
) -> tuple[int, int] | None:
    """
    Shift [start, end] into [open, close] keeping its duration.

    Args:
        start, end: Activity range in minutes since midnight
        open_minutes, close_minutes: Window; close may exceed 1440 overnight
        anchor: "nearest" moves the range the least (start at opening if it
            began too early, end at closing if it ran too late; ties go to
            opening). "opening" always starts at the opening time and falls
            back to ending at closing time.

    Returns:
        New (start, end) or None if the duration does not fit in the window
    """
    duration = end - start
    # Activities stay within one calendar day
    close_minutes = min(close_minutes, LAST_MINUTE_OF_DAY)

    if duration > close_minutes - open_minutes:
        return None

    if anchor == "opening":
        if open_minutes + duration <= close_minutes:
            return open_minutes, open_minutes + duration
        return close_minutes - duration, close_minutes

    new_start = min(max(start, open_minutes), close_minutes - duration)
    return new_start, new_start + duration


def _describe_window(open_minutes: int, close_minutes: int) -> tuple[str, str]:
    return format_minutes(open_minutes), format_minutes(min(close_minutes, 2 * MINUTES_PER_DAY - 1))


def validate_activity_timing(
    activity_time: str,
    opening_hours: OpeningHours | None,
    day: date,
    anchor: FitAnchor = "nearest",
) -> TimingVerdict:
    """
    Check whether an activity fits inside its venue's opening hours on a date.

    Args:
        activity_time: Time range (e.g., "2:00 PM - 4:00 PM")
        opening_hours: Weekly hours snapshot for the venue
        day: Calendar date of the activity
        anchor: Placement policy used for the suggested adjustment

    Returns:
        TimingVerdict; when invalid, carries the window the activity could be
        shifted into and a suggested range

    Raises:
        TimeParseError: If activity_time is not a valid "h:mm AM/PM - h:mm AM/PM" range

    Example:
        validate_activity_timing("8:00 AM - 10:00 AM", hours, date(2024, 11, 16))
        # TimingVerdict(is_valid=False, reason="Opens at 9:00 AM", ...)
    """
    start, end = parse_time_range_minutes(activity_time)
    resolved = resolve_hours_for_date(opening_hours, day)

    if resolved.status == "closed":
        return TimingVerdict(is_valid=False, reason=f"Closed on {resolved.weekday}")

    if resolved.status == "open_24_hours":
        return TimingVerdict(
            is_valid=True,
            opening_time="Open 24 hours",
            closing_time="Open 24 hours",
            window_open=0,
            window_close=MINUTES_PER_DAY,
        )

    if resolved.status == "unknown":
        return TimingVerdict(is_valid=False, reason=f"No hours data for {resolved.weekday}")

    for open_minutes, close_minutes in resolved.windows:
        if start >= open_minutes and end <= close_minutes:
            opening_time, closing_time = _describe_window(open_minutes, close_minutes)
            return TimingVerdict(
                is_valid=True,
                opening_time=opening_time,
                closing_time=closing_time,
                window_open=open_minutes,
                window_close=close_minutes,
            )

    # Pick the window needing the smallest shift; fall back to the first one
    best_window = resolved.windows[0]
    best_fit = None
    for window in resolved.windows:
        fit = find_fitting_range(start, end, window[0], window[1], anchor)
        if fit is None:
            continue
        if best_fit is None or abs(fit[0] - start) < abs(best_fit[0] - start):
            best_window, best_fit = window, fit

    open_minutes, close_minutes = best_window
    opening_time, closing_time = _describe_window(open_minutes, close_minutes)

    if start < open_minutes:
        reason = f"Opens at {opening_time}"
    elif end > close_minutes:
        reason = f"Closes at {closing_time}"
    else:
        reason = "Closed during suggested time"

    if best_fit is not None:
        suggestion = f"Suggest moving to {format_time_range(*best_fit)}"
    else:
        suggestion = (
            f"Activity lasts {end - start} min but {resolved.weekday} hours "
            f"({opening_time} - {closing_time}) cannot fit it"
        )

    logger.debug(f"[Validation] INVALID {activity_time} on {resolved.weekday}: {reason}")
    return TimingVerdict(
        is_valid=False,
        reason=reason,
        opening_time=opening_time,
        closing_time=closing_time,
        suggested_adjustment=suggestion,
        window_open=open_minutes,
        window_close=close_minutes,
    )
