"""Reduce raw Strava activities into training-load signals."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Iterable

from run_planner.models.schemas import ActivitySummary


logger = logging.getLogger(__name__)

RUN_TYPES = frozenset({"Run", "TrailRun", "VirtualRun"})

# Average speed at or above which a run counts as tempo-or-faster effort.
QUALITY_SPEED_THRESHOLD_MPS = 3.8

# Strava run workout_type values: 1 = race, 3 = workout.
HARD_WORKOUT_TYPES = frozenset({1, 3})

MAX_WEEKS = 6
SECONDS_PER_DAY = 24 * 60 * 60
SECONDS_PER_WEEK = 7 * SECONDS_PER_DAY


def is_run(activity: dict[str, Any]) -> bool:
    return activity.get("type") in RUN_TYPES or activity.get("sport_type") in RUN_TYPES


def is_quality(activity: dict[str, Any]) -> bool:
    """A run is high-intensity when flagged as a race/workout or run fast enough."""

    if activity.get("workout_type") in HARD_WORKOUT_TYPES:
        return True
    return (activity.get("average_speed") or 0) >= QUALITY_SPEED_THRESHOLD_MPS


def parse_start(value: Any) -> datetime | None:
    """Parse Strava's ISO-8601 ``start_date`` into an aware UTC datetime."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _pace_min_km(speed_mps: float) -> float | None:
    if speed_mps <= 0 or not math.isfinite(speed_mps):
        return None
    return round(1000 / speed_mps / 60, 2)


def build_summary(
    activities: Iterable[dict[str, Any]],
    now: datetime | None = None,
) -> ActivitySummary:
    """
    Aggregate recent activities into an ActivitySummary.

    Distances are bucketed by whole weeks before ``now``. The six most recent
    buckets are reported oldest first, so the last entry is the current week.
    Runs with an unparsable start date still count towards totals and
    elevation but are left out of the weekly buckets and quality recency.

    Args:
        activities: Raw Strava activity dicts
        now: Reference time (defaults to the current UTC time)

    Returns:
        ActivitySummary; an empty history yields zeros and an unknown
        ``last_quality_days`` rather than an error.
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    runs = [activity for activity in activities if is_run(activity)]

    weekly_buckets: dict[int, float] = {}
    total_distance = 0.0
    total_elevation = 0.0
    total_moving_time = 0.0
    timed_distance = 0.0
    fastest_speed = 0.0
    quality_count = 0
    last_quality_days: int | None = None

    for activity in runs:
        distance = float(activity.get("distance") or 0)
        total_distance += distance
        total_elevation += float(activity.get("total_elevation_gain") or 0)

        average_speed = float(activity.get("average_speed") or 0)
        moving_time = float(activity.get("moving_time") or 0)
        if moving_time <= 0 and average_speed > 0:
            moving_time = distance / average_speed
        if moving_time > 0 and distance > 0:
            total_moving_time += moving_time
            timed_distance += distance
        fastest_speed = max(fastest_speed, average_speed)

        start = parse_start(activity.get("start_date"))
        elapsed = (now - start).total_seconds() if start else None
        if elapsed is not None:
            week_key = math.floor(elapsed / SECONDS_PER_WEEK)
            weekly_buckets[week_key] = weekly_buckets.get(week_key, 0.0) + distance
        else:
            logger.debug("Skipping weekly bucket for activity %s without start date", activity.get("id"))

        if is_quality(activity):
            quality_count += 1
            if elapsed is not None:
                days_ago = math.floor(elapsed / SECONDS_PER_DAY)
                if last_quality_days is None or days_ago < last_quality_days:
                    last_quality_days = days_ago

    recent_weeks = sorted(weekly_buckets.items())[:MAX_WEEKS]
    weekly_distances = [distance / 1000 for _, distance in reversed(recent_weeks)]
    weekly_average = sum(weekly_distances) / len(weekly_distances) if weekly_distances else 0.0

    average_speed = timed_distance / total_moving_time if total_moving_time > 0 else 0.0

    summary = ActivitySummary(
        weekly_average_km=round(weekly_average, 1),
        weekly_distances_km=[round(value, 1) for value in weekly_distances],
        recent_runs=len(runs),
        quality_count=quality_count,
        last_quality_days=last_quality_days,
        total_elevation_m=round(total_elevation),
        total_distance_km=round(total_distance / 1000, 1),
        average_pace_min_km=_pace_min_km(average_speed) if average_speed else None,
        fastest_pace_min_km=_pace_min_km(fastest_speed) if fastest_speed else None,
    )
    logger.info(
        "Summarised %d run(s) | weekly_avg=%.1fkm quality=%d last_quality=%s",
        summary.recent_runs,
        summary.weekly_average_km,
        summary.quality_count,
        summary.last_quality_days if summary.last_quality_days is not None else "unknown",
    )
    return summary
