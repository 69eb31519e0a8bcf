"""
Helper functions for planning itinerary structure based on trip position and pace.

These bound what the itinerary generator is asked to produce; the opening
hours auto-fix does not consult them.
"""

from datetime import date, timedelta

from app.core.opening_hours_utils import get_day_of_week, is_monday, is_sunday
from app.core.schemas import DayPlan, DayType

# (min, max) activities per full day by pace
PACE_ACTIVITY_COUNTS = {
    "relaxed": (3, 4),
    "moderate": (5, 6),
    "packed": (7, 8),
}

# Arrival and departure days are lighter regardless of pace
TRAVEL_DAY_ACTIVITY_COUNT = (2, 3)

DAY_TIME_RANGES = {
    "arrival": ("2:00 PM", "9:00 PM"),
    "departure": ("9:00 AM", "2:00 PM"),
    "full": ("9:00 AM", "9:00 PM"),
}


def get_day_type(day_index: int, total_days: int) -> DayType:
    """
    Determine the day type from its position in the trip.

    Args:
        day_index: 0-based index of the day
        total_days: Number of days in the trip

    Returns:
        "arrival" for the first day, "departure" for the last day of a
        multi-day trip, otherwise "full"
    """
    if day_index == 0:
        return "arrival"
    if day_index == total_days - 1:
        return "departure"
    return "full"


def get_activity_count(day_type: DayType, pace: str) -> tuple[int, int]:
    """
    Get the (min, max) activity count for a day.

    Unknown pace values are treated as "moderate".
    """
    if day_type in ("arrival", "departure"):
        return TRAVEL_DAY_ACTIVITY_COUNT
    return PACE_ACTIVITY_COUNTS.get(pace, PACE_ACTIVITY_COUNTS["moderate"])


def get_time_range(day_type: DayType) -> tuple[str, str]:
    """Get the (start, end) clock window a day of this type operates within."""
    return DAY_TIME_RANGES.get(day_type, DAY_TIME_RANGES["full"])


def get_day_count(start_date: date, end_date: date) -> int:
    """Number of calendar days in an inclusive date range."""
    if end_date < start_date:
        raise ValueError("end_date must not be before start_date")
    return (end_date - start_date).days + 1


def plan_trip_days(start_date: date, end_date: date, pace: str = "moderate") -> list[DayPlan]:
    """
    Lay out day type, activity band and time window for every day of a trip.

    Args:
        start_date: First day of the trip
        end_date: Last day of the trip (inclusive)
        pace: "relaxed", "moderate" or "packed"

    Returns:
        One DayPlan per day, in order
    """
    total_days = get_day_count(start_date, end_date)

    plans = []
    for day_index in range(total_days):
        day_type = get_day_type(day_index, total_days)
        min_acts, max_acts = get_activity_count(day_type, pace)
        start_time, end_time = get_time_range(day_type)

        plans.append(
            DayPlan(
                day=day_index + 1,
                date=start_date + timedelta(days=day_index),
                day_type=day_type,
                min_activities=min_acts,
                max_activities=max_acts,
                start_time=start_time,
                end_time=end_time,
            )
        )

    return plans


def get_opening_hours_guidelines(day: date | None = None) -> str:
    """
    Generate guidance text for the itinerary generator about venue opening hours.

    Args:
        day: Date of the trip day, if known

    Returns:
        Guidance string for LLM
    """
    day_name = get_day_of_week(day) if day else "the trip date"

    lines = [
        f"The trip is on {day_name}. Every venue you suggest MUST be open during "
        "the time you schedule it.",
        "Museums: typically 9-10 AM to 5-6 PM. Restaurants: lunch 11:30 AM - 2:30 PM, "
        "dinner 6 PM - 10 PM. Bars: usually open from 5 PM.",
    ]
    if day and is_monday(day):
        lines.append("Many museums and galleries are closed on Mondays - avoid them.")
    elif day and is_sunday(day):
        lines.append("Retail shops often have reduced Sunday hours.")

    return " ".join(lines)
