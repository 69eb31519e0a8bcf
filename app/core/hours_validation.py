"""
Opening hours validation and auto-fix for itineraries.

Scans every activity that carries an opening-hours snapshot, shifts
conflicting activities into their venue's open window, pushes the rest of
the day back behind them, and drops activities that cannot fit at all.
Repair is greedy and local: it never reorders activities or creates new ones.
"""

import logging
from datetime import date

from app.core.schemas import (
    Activity,
    AutoFixResult,
    ConflictRecord,
    DayFixResult,
    FitAnchor,
    Itinerary,
    ScheduleChange,
    SkippedActivity,
    ValidationResult,
)
from app.core.settings import get_settings
from app.core.time_utils import (
    TimeParseError,
    format_time_range,
    get_activity_duration,
    parse_time_range_minutes,
)
from app.core.timing_validator import (
    LAST_MINUTE_OF_DAY,
    find_fitting_range,
    validate_activity_timing,
)

logger = logging.getLogger(__name__)

# (day index, calendar date, the day's activity list)
DaySlot = tuple[int, date, list[Activity]]


def _scan(slots: list[DaySlot], anchor: FitAnchor) -> ValidationResult:
    conflicts: list[ConflictRecord] = []
    skipped: list[SkippedActivity] = []

    for day_index, day, activities in slots:
        for activity_index, activity in enumerate(activities):
            # No hours snapshot: nothing to judge against, assume open
            if activity.opening_hours is None:
                continue

            try:
                verdict = validate_activity_timing(
                    activity.time, activity.opening_hours, day, anchor
                )
            except TimeParseError as e:
                logger.warning(
                    f"[HoursValidation] Skipping '{activity.name}' on day {day_index + 1}: {e}"
                )
                skipped.append(
                    SkippedActivity(
                        day_index=day_index,
                        activity_index=activity_index,
                        activity_name=activity.name,
                        activity_time=activity.time,
                        error=str(e),
                    )
                )
                continue

            if not verdict.is_valid:
                conflicts.append(
                    ConflictRecord(
                        day_index=day_index,
                        activity_index=activity_index,
                        activity_name=activity.name,
                        activity_time=activity.time,
                        verdict=verdict,
                    )
                )

    return ValidationResult(has_conflicts=bool(conflicts), conflicts=conflicts, skipped=skipped)


def validate_day(
    activities: list[Activity], day: date, day_index: int = 0, anchor: FitAnchor | None = None
) -> ValidationResult:
    """Collect timing conflicts for a single day's activities."""
    anchor = anchor or get_settings().hours_fit_anchor
    return _scan([(day_index, day, activities)], anchor)


def validate_itinerary(itinerary: Itinerary, anchor: FitAnchor | None = None) -> ValidationResult:
    """
    Validate an entire multi-day itinerary and collect all conflicts.

    Conflicts are listed in trip order (day ascending, then activity
    ascending). Activities without opening hours are not inspected, and
    activities whose time text cannot be parsed are reported in `skipped`.
    """
    anchor = anchor or get_settings().hours_fit_anchor
    slots = [(i, day.date, day.activities) for i, day in enumerate(itinerary.days)]
    return _scan(slots, anchor)


def _previous_end(activities: list[Activity], index: int, removed_ids: set[int]) -> int | None:
    """End (minutes) of the nearest earlier activity that is kept and parseable."""
    for idx in range(index - 1, -1, -1):
        activity = activities[idx]
        if id(activity) in removed_ids:
            continue
        try:
            return parse_time_range_minutes(activity.time)[1]
        except TimeParseError:
            continue
    return None


def _cascade(
    activities: list[Activity],
    start_index: int,
    removed_ids: set[int],
    travel_buffer_minutes: int,
    day_index: int,
    changes: list[ScheduleChange],
    removed: list[ScheduleChange],
) -> None:
    """
    Re-time every activity after start_index to follow on with a travel buffer.

    Each activity keeps its own duration. Activities already marked for
    removal are skipped; one pushed past the end of the day is marked too.
    The cascade stops at an activity whose time text cannot be parsed.
    """
    _, prev_end = parse_time_range_minutes(activities[start_index].time)

    for idx in range(start_index + 1, len(activities)):
        activity = activities[idx]
        if id(activity) in removed_ids:
            continue

        try:
            duration = get_activity_duration(activity.time)
        except TimeParseError as e:
            # Its slot is unknown, so nothing after it can be placed safely
            logger.warning(f"[HoursFix] Stopping cascade at '{activity.name}': {e}")
            break

        new_start = prev_end + travel_buffer_minutes
        new_end = new_start + duration
        old_time = activity.time

        if new_end > LAST_MINUTE_OF_DAY:
            logger.info(f"[HoursFix] '{activity.name}' pushed past end of day, removing")
            removed_ids.add(id(activity))
            removed.append(
                ScheduleChange(
                    day_index=day_index,
                    activity_index=idx,
                    activity_name=activity.name,
                    action="removed",
                    old_time=old_time,
                    reason="Pushed past end of day",
                )
            )
            continue

        activity.time = format_time_range(new_start, new_end)
        activity.travel_time = f"{travel_buffer_minutes} min"
        if activity.time != old_time:
            changes.append(
                ScheduleChange(
                    day_index=day_index,
                    activity_index=idx,
                    activity_name=activity.name,
                    action="cascaded",
                    old_time=old_time,
                    new_time=activity.time,
                )
            )
        prev_end = new_end


def _run_pass(
    slots: list[DaySlot],
    conflicts: list[ConflictRecord],
    travel_buffer_minutes: int,
    anchor: FitAnchor,
) -> tuple[list[ScheduleChange], list[ScheduleChange]]:
    """
    One repair pass over a snapshot of conflicts.

    Conflicts are handled last-to-first. Removals are only collected here and
    applied at the end by rebuilding each day's list, so every index in the
    snapshot stays valid for the whole pass.
    A shifted activity never starts before the previous kept activity ends
    plus the travel buffer; if that leaves no room it is removed.
    """
    changes: list[ScheduleChange] = []
    removed: list[ScheduleChange] = []
    activities_by_day = {day_index: activities for day_index, _, activities in slots}
    removed_ids: dict[int, set[int]] = {day_index: set() for day_index in activities_by_day}

    ordered = sorted(conflicts, key=lambda c: (c.day_index, c.activity_index), reverse=True)

    for conflict in ordered:
        activities = activities_by_day[conflict.day_index]
        day_removed = removed_ids[conflict.day_index]
        activity = activities[conflict.activity_index]
        if id(activity) in day_removed:
            continue

        verdict = conflict.verdict
        reason = verdict.reason
        fit = None
        if verdict.window_open is not None and verdict.window_close is not None:
            start, end = parse_time_range_minutes(activity.time)
            # Never move in front of the previous kept activity
            earliest = verdict.window_open
            prev_end = _previous_end(activities, conflict.activity_index, day_removed)
            if prev_end is not None:
                earliest = max(earliest, prev_end + travel_buffer_minutes)
            fit = find_fitting_range(start, end, earliest, verdict.window_close, anchor)
            if fit is None and earliest > verdict.window_open:
                reason = f"{verdict.reason}; no room after the previous activity"

        if fit is None:
            logger.info(
                f"[HoursFix] Cannot fix '{activity.name}' ({reason}), marking for removal"
            )
            day_removed.add(id(activity))
            removed.append(
                ScheduleChange(
                    day_index=conflict.day_index,
                    activity_index=conflict.activity_index,
                    activity_name=activity.name,
                    action="removed",
                    old_time=activity.time,
                    reason=reason,
                )
            )
            continue

        old_time = activity.time
        activity.time = format_time_range(*fit)
        activity.validation_warning = None
        changes.append(
            ScheduleChange(
                day_index=conflict.day_index,
                activity_index=conflict.activity_index,
                activity_name=activity.name,
                action="shifted",
                old_time=old_time,
                new_time=activity.time,
                reason=verdict.reason,
            )
        )
        logger.info(f"[HoursFix] Adjusted timing for '{activity.name}': {activity.time}")

        _cascade(
            activities,
            conflict.activity_index,
            day_removed,
            travel_buffer_minutes,
            conflict.day_index,
            changes,
            removed,
        )

    for day_index, day_removed in removed_ids.items():
        if not day_removed:
            continue
        activities = activities_by_day[day_index]
        activities[:] = [a for a in activities if id(a) not in day_removed]
        logger.info(f"[HoursFix] Removed {len(day_removed)} activities from day {day_index + 1}")

    return changes, removed


def _repair(
    slots: list[DaySlot],
    travel_buffer_minutes: int | None,
    max_passes: int | None,
    anchor: FitAnchor | None,
) -> tuple[list[ScheduleChange], list[ScheduleChange], int, ValidationResult]:
    settings = get_settings()
    if travel_buffer_minutes is None:
        travel_buffer_minutes = settings.travel_buffer_minutes
    if max_passes is None:
        max_passes = settings.hours_max_fix_passes
    anchor = anchor or settings.hours_fit_anchor

    changes: list[ScheduleChange] = []
    removed: list[ScheduleChange] = []
    passes = 0

    validation = _scan(slots, anchor)
    if not validation.has_conflicts:
        logger.debug("[HoursFix] No timing conflicts found")
        return changes, removed, passes, validation

    while validation.has_conflicts and passes < max_passes:
        passes += 1
        logger.info(
            f"[HoursFix] Pass {passes}: {len(validation.conflicts)} timing conflict(s), "
            f"attempting to fix..."
        )
        pass_changes, pass_removed = _run_pass(
            slots, validation.conflicts, travel_buffer_minutes, anchor
        )
        changes.extend(pass_changes)
        removed.extend(pass_removed)
        validation = _scan(slots, anchor)

    if validation.has_conflicts:
        logger.warning(
            f"[HoursFix] Still have {len(validation.conflicts)} conflict(s) "
            f"after {passes} pass(es)"
        )
        activities_by_day = {day_index: activities for day_index, _, activities in slots}
        for conflict in validation.conflicts:
            activity = activities_by_day[conflict.day_index][conflict.activity_index]
            activity.validation_warning = conflict.verdict.reason
    else:
        logger.info(f"[HoursFix] All timing conflicts resolved in {passes} pass(es)")

    return changes, removed, passes, validation


def auto_fix_itinerary(
    itinerary: Itinerary,
    travel_buffer_minutes: int | None = None,
    max_passes: int | None = None,
    anchor: FitAnchor | None = None,
) -> AutoFixResult:
    """
    Auto-fix all timing conflicts in an itinerary.

    Strategy per conflict:
    1. Shift the activity into its open window, keeping its duration
    2. Push every later activity that day to start after it plus a travel buffer
    3. If it cannot fit, remove it

    The itinerary is modified in place. Passes repeat until no conflicts
    remain or max_passes is reached; `resolved` tells the caller which.

    Args:
        itinerary: Itinerary to repair
        travel_buffer_minutes: Gap between consecutive activities (default from settings)
        max_passes: Upper bound on repair passes (default from settings)
        anchor: Shift-to-fit placement policy (default from settings)

    Returns:
        AutoFixResult with the itinerary, every change made, and any leftover conflicts
    """
    slots = [(i, day.date, day.activities) for i, day in enumerate(itinerary.days)]
    changes, removed, passes, validation = _repair(
        slots, travel_buffer_minutes, max_passes, anchor
    )
    return AutoFixResult(
        itinerary=itinerary,
        changes=changes,
        removed=removed,
        passes=passes,
        resolved=not validation.has_conflicts,
        remaining_conflicts=validation.conflicts,
    )


def auto_fix_day(
    activities: list[Activity],
    day: date,
    travel_buffer_minutes: int | None = None,
    max_passes: int | None = None,
    anchor: FitAnchor | None = None,
) -> DayFixResult:
    """Validate and auto-fix timing for a single day's activity list (modified in place)."""
    changes, removed, passes, validation = _repair(
        [(0, day, activities)], travel_buffer_minutes, max_passes, anchor
    )
    return DayFixResult(
        date=day,
        activities=activities,
        changes=changes,
        removed=removed,
        passes=passes,
        resolved=not validation.has_conflicts,
        remaining_conflicts=validation.conflicts,
    )
