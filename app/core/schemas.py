from datetime import date as date_type
from typing import Literal

from pydantic import BaseModel, Field

DayType = Literal["arrival", "full", "departure"]
Pace = Literal["relaxed", "moderate", "packed"]
FitAnchor = Literal["nearest", "opening"]
ChangeAction = Literal["shifted", "cascaded", "removed"]


# =============================================================================
# Opening Hours (snapshot from the places service)
# =============================================================================


class OpeningHoursPoint(BaseModel):
    day: int = Field(..., ge=0, le=6, description="Weekday, 0=Sunday .. 6=Saturday")
    time: str = Field(..., pattern=r"^\d{4}$", description="24-hour time code, e.g. '0930'")


class OpeningHoursPeriod(BaseModel):
    open: OpeningHoursPoint
    # No close entry means the venue stays open from the open time onwards
    close: OpeningHoursPoint | None = None


class OpeningHours(BaseModel):
    open_now: bool | None = None
    weekday_text: list[str] = Field(
        default_factory=list,
        description="Lines like 'Monday: 9:00 AM – 5:00 PM' or 'Tuesday: Closed'",
    )
    periods: list[OpeningHoursPeriod] = Field(default_factory=list)


# =============================================================================
# Itinerary
# =============================================================================


class Activity(BaseModel):
    name: str
    address: str | None = None
    time: str = Field(..., description="Time range, e.g. '9:00 AM - 10:30 AM'")
    duration: str | None = Field(None, description="Free-text duration, e.g. '1.5 hours'")
    type: str | None = Field(None, description="Place-type label, e.g. 'Museums'")
    description: str | None = None
    travel_time: str | None = Field(None, description="Travel time from previous stop")

    # Places enrichment (optional)
    place_id: str | None = Field(None, description="Google Place ID")
    rating: float | None = None
    opening_hours: OpeningHours | None = None

    validation_warning: str | None = None


class Day(BaseModel):
    date: date_type
    day_type: DayType | None = None
    activities: list[Activity] = Field(default_factory=list)


class Itinerary(BaseModel):
    city: str | None = None
    days: list[Day] = Field(default_factory=list)


# =============================================================================
# Validation & Auto-Fix Results
# =============================================================================


class TimingVerdict(BaseModel):
    is_valid: bool
    reason: str | None = None
    opening_time: str | None = None
    closing_time: str | None = None
    suggested_adjustment: str | None = None
    # Resolved window in minutes since midnight; close may exceed 1440 overnight
    window_open: int | None = None
    window_close: int | None = None


class ConflictRecord(BaseModel):
    day_index: int
    activity_index: int
    activity_name: str
    activity_time: str
    verdict: TimingVerdict


class SkippedActivity(BaseModel):
    day_index: int
    activity_index: int
    activity_name: str
    activity_time: str
    error: str


class ValidationResult(BaseModel):
    has_conflicts: bool
    conflicts: list[ConflictRecord] = Field(default_factory=list)
    skipped: list[SkippedActivity] = Field(default_factory=list)


class ScheduleChange(BaseModel):
    day_index: int
    activity_index: int = Field(..., description="Position at the start of the pass")
    activity_name: str
    action: ChangeAction
    old_time: str
    new_time: str | None = None
    reason: str | None = None


class AutoFixResult(BaseModel):
    itinerary: Itinerary
    changes: list[ScheduleChange] = Field(default_factory=list)
    removed: list[ScheduleChange] = Field(default_factory=list)
    passes: int = 0
    resolved: bool = True
    remaining_conflicts: list[ConflictRecord] = Field(default_factory=list)


class DayFixResult(BaseModel):
    date: date_type
    activities: list[Activity] = Field(default_factory=list)
    changes: list[ScheduleChange] = Field(default_factory=list)
    removed: list[ScheduleChange] = Field(default_factory=list)
    passes: int = 0
    resolved: bool = True
    remaining_conflicts: list[ConflictRecord] = Field(default_factory=list)


# =============================================================================
# Request / Planning Schemas
# =============================================================================


class DayFixRequest(BaseModel):
    date: date_type
    activities: list[Activity] = Field(default_factory=list)


class ActivityCheckRequest(BaseModel):
    date: date_type
    time: str = Field(..., description="Time range, e.g. '9:00 AM - 10:30 AM'")
    opening_hours: OpeningHours


class DayPlan(BaseModel):
    day: int = Field(..., description="1-based day number")
    date: date_type
    day_type: DayType
    min_activities: int
    max_activities: int
    start_time: str
    end_time: str
