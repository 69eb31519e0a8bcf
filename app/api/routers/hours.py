import logging
from datetime import date

from fastapi import APIRouter, Body, HTTPException, Query

from app.core.hours_validation import auto_fix_day, auto_fix_itinerary, validate_itinerary
from app.core.itinerary_planner import plan_trip_days
from app.core.schemas import (
    ActivityCheckRequest,
    AutoFixResult,
    DayFixRequest,
    DayFixResult,
    DayPlan,
    Itinerary,
    Pace,
    TimingVerdict,
    ValidationResult,
)
from app.core.settings import get_settings
from app.core.time_utils import TimeParseError
from app.core.timing_validator import validate_activity_timing

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hours", tags=["hours"])


@router.post("/validate", response_model=ValidationResult)
def validate(itinerary: Itinerary = Body(...)) -> ValidationResult:
    """Report every activity scheduled outside its venue's opening hours."""
    return validate_itinerary(itinerary)


@router.post("/auto-fix", response_model=AutoFixResult)
def auto_fix(itinerary: Itinerary = Body(...)) -> AutoFixResult:
    """
    Shift, cascade and drop activities so the itinerary respects opening hours.

    The response carries the repaired itinerary plus every change made. A
    `resolved` of false means conflicts remain after the last pass.
    """
    result = auto_fix_itinerary(itinerary)
    if not result.resolved:
        logger.warning(
            f"[Hours] Auto-fix left {len(result.remaining_conflicts)} unresolved conflict(s)"
        )
    return result


@router.post("/auto-fix-day", response_model=DayFixResult)
def auto_fix_single_day(request: DayFixRequest = Body(...)) -> DayFixResult:
    """Auto-fix a single day's activity list."""
    return auto_fix_day(request.activities, request.date)


@router.post("/check", response_model=TimingVerdict)
def check_activity(request: ActivityCheckRequest = Body(...)) -> TimingVerdict:
    """Validate one activity time range against opening hours on a date."""
    try:
        return validate_activity_timing(
            request.time,
            request.opening_hours,
            request.date,
            get_settings().hours_fit_anchor,
        )
    except TimeParseError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/day-plan", response_model=list[DayPlan])
def day_plan(
    start_date: date = Query(..., description="First day of the trip"),
    end_date: date = Query(..., description="Last day of the trip (inclusive)"),
    pace: Pace = Query("moderate"),
) -> list[DayPlan]:
    """Day type, activity band and time window for each day of a trip."""
    try:
        return plan_trip_days(start_date, end_date, pace)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
