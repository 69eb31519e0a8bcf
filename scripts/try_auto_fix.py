#!/usr/bin/env python3
"""
Run the opening hours auto-fix on a sample two-day itinerary and print the result.

Usage:
    python scripts/try_auto_fix.py
"""
import os
import sys
from datetime import date

from dotenv import load_dotenv

# Load environment variables (TRAVEL_BUFFER_MINUTES, HOURS_FIT_ANCHOR, ...)
load_dotenv()

# Add the app directory to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.core.hours_validation import auto_fix_itinerary, validate_itinerary  # noqa: E402
from app.core.schemas import (  # noqa: E402
    Activity,
    Day,
    Itinerary,
    OpeningHours,
    OpeningHoursPeriod,
    OpeningHoursPoint,
)


def museum_hours() -> OpeningHours:
    """Tuesday-Sunday 9 AM - 5 PM, closed Mondays."""
    days = [0, 2, 3, 4, 5, 6]
    return OpeningHours(
        weekday_text=[
            "Monday: Closed",
            "Tuesday: 9:00 AM – 5:00 PM",
            "Wednesday: 9:00 AM – 5:00 PM",
            "Thursday: 9:00 AM – 5:00 PM",
            "Friday: 9:00 AM – 5:00 PM",
            "Saturday: 9:00 AM – 5:00 PM",
            "Sunday: 9:00 AM – 5:00 PM",
        ],
        periods=[
            OpeningHoursPeriod(
                open=OpeningHoursPoint(day=d, time="0900"),
                close=OpeningHoursPoint(day=d, time="1700"),
            )
            for d in days
        ],
    )


def print_section(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80 + "\n")


def print_itinerary(itinerary: Itinerary):
    for idx, day in enumerate(itinerary.days):
        print(f"Day {idx + 1} ({day.date:%A %Y-%m-%d})")
        for act in day.activities:
            travel = f"  [+{act.travel_time}]" if act.travel_time else ""
            print(f"   {act.time:<24} {act.name}{travel}")


def main():
    hours = museum_hours()
    itinerary = Itinerary(
        city="Paris",
        days=[
            Day(
                date=date(2024, 11, 19),
                activities=[
                    Activity(name="Café de Flore", time="8:30 AM - 9:30 AM"),
                    Activity(name="Luxembourg Gardens", time="10:00 AM - 11:30 AM"),
                    Activity(name="Louvre", time="4:00 PM - 6:30 PM", opening_hours=hours),
                    Activity(name="Dinner at Le Procope", time="7:00 PM - 8:30 PM"),
                ],
            ),
            Day(
                date=date(2024, 11, 25),
                activities=[
                    Activity(name="Musée d'Orsay", time="10:00 AM - 12:00 PM", opening_hours=hours),
                    Activity(name="Seine walk", time="12:30 PM - 1:30 PM"),
                ],
            ),
        ],
    )

    print_section("Before")
    print_itinerary(itinerary)
    for conflict in validate_itinerary(itinerary).conflicts:
        print(f"   ⚠ {conflict.activity_name}: {conflict.verdict.reason}")

    result = auto_fix_itinerary(itinerary)

    print_section("After")
    print_itinerary(result.itinerary)
    print()
    for change in result.changes + result.removed:
        arrow = f"-> {change.new_time}" if change.new_time else "(removed)"
        print(f"   {change.action:<9} {change.activity_name}: {change.old_time} {arrow}")
    print(f"\nResolved: {result.resolved} after {result.passes} pass(es)")


if __name__ == "__main__":
    main()
