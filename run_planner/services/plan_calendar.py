"""Plan timing, daily session preference and training-load inference."""
from __future__ import annotations

import math
from datetime import date

from run_planner.models.schemas import ActivitySummary, PlanOverview, PlanSettings
from run_planner.models.workout_library import QualityType


PHASES: list[tuple[str, int, int]] = [
    ("Foundation", 1, 4),
    ("Build", 5, 10),
    ("Peak", 11, 14),
    ("Taper", 15, 16),
]

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def plan_position(race_date: date, plan_length: int, today: date) -> tuple[int, int, int]:
    """Return ``(days_to_race, week, day)`` for a plan ending on ``race_date``."""

    days_to_race = max(0, (race_date - today).days)
    weeks_to_race = math.ceil(days_to_race / 7)
    week = max(1, plan_length - weeks_to_race + 1)
    day = ((plan_length * 7 - days_to_race) % 7) + 1
    return days_to_race, week, day


def phase_for_week(week: int) -> str:
    for name, first, last in PHASES:
        if first <= week <= last:
            return name
    return "Custom"


def parse_day_preference(value: str | None) -> list[str]:
    return [day.strip().lower() for day in (value or "").split(",") if day.strip()]


def preferred_quality_type(
    day_name: str,
    interval_days: str = "",
    tempo_days: str = "",
    long_run_days: str = "",
) -> QualityType:
    """Pick today's quality category; long run wins over tempo, tempo over intervals."""

    day = day_name.lower()
    if day in parse_day_preference(long_run_days):
        return QualityType.LONG_RUN
    if day in parse_day_preference(tempo_days):
        return QualityType.TEMPO
    if day in parse_day_preference(interval_days):
        return QualityType.INTERVALS
    return QualityType.TEMPO


def derive_training_load(summary: ActivitySummary | None) -> str | None:
    """Infer "high", "moderate" or "low" load from a synced summary."""

    if summary is None:
        return None

    distances = summary.weekly_distances_km
    latest_week = distances[-1] if distances else 0.0
    average_week = summary.weekly_average_km
    last_quality = summary.last_quality_days

    if (
        (average_week > 0 and latest_week > average_week * 1.15)
        or (last_quality is not None and last_quality <= 2)
        or summary.quality_count >= 3
    ):
        return "high"

    if (average_week > 0 and latest_week < average_week * 0.75) or summary.recent_runs <= 3:
        return "low"

    return "moderate"


def focus_for(training_load: str, last_quality: int) -> str:
    if training_load == "high":
        return "Recovery emphasis"
    if last_quality >= 5:
        return "Quality session ready"
    return "Aerobic development"


def build_overview(
    settings: PlanSettings,
    summary: ActivitySummary | None = None,
    today: date | None = None,
) -> PlanOverview:
    """
    Describe today's place in the plan.

    A synced summary overrides the manually entered training load and last
    quality day. The returned ``goal``, ``plan`` and ``preferences`` strings
    are ready to send to the workout generation endpoint.
    """
    today = today or date.today()
    training_load = derive_training_load(summary) or settings.training_load
    last_quality = settings.last_quality
    if summary is not None and summary.last_quality_days is not None:
        last_quality = summary.last_quality_days

    days_to_race, week, day = plan_position(settings.race_date, settings.plan_length, today)
    day_name = DAY_NAMES[today.weekday()]
    quality_type = preferred_quality_type(
        day_name,
        settings.interval_days,
        settings.tempo_days,
        settings.long_run_days,
    )

    preferences = ". ".join(
        [
            f"Terrain: {settings.terrain}",
            f"Time available: {settings.time_available} minutes",
            f"Effective load: {training_load}",
            f"Last quality: {last_quality} day(s) ago",
            f"Preferred quality type today: {quality_type.value}",
            (
                f"Day mapping -> intervals: {settings.interval_days}; "
                f"tempo: {settings.tempo_days}; long run: {settings.long_run_days}"
            ),
        ]
    )

    return PlanOverview(
        days_to_race=days_to_race,
        week=week,
        day=day,
        day_name=day_name,
        phase=phase_for_week(week),
        focus=focus_for(training_load, last_quality),
        preferred_quality_type=quality_type.value,
        effective_training_load=training_load,
        effective_last_quality=last_quality,
        goal=f"{settings.goal_type} on {settings.race_date.isoformat()}",
        plan=f"Week {week}, day {day} ({day_name}) of a {settings.plan_length}-week plan.",
        preferences=preferences,
    )
