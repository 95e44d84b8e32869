"""Pydantic models describing API payloads."""
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialises to camelCase while accepting snake_case input as well."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivitySummary(CamelModel):
    """Aggregated training-load signals over the trailing six weeks."""

    weekly_average_km: float = 0.0
    weekly_distances_km: list[float] = Field(default_factory=list, max_length=6)
    recent_runs: int = Field(default=0, ge=0)
    quality_count: int = Field(default=0, ge=0)
    last_quality_days: int | None = None
    total_elevation_m: float = 0.0
    total_distance_km: float = 0.0
    average_pace_min_km: float | None = None
    fastest_pace_min_km: float | None = None

    @field_validator("last_quality_days", mode="before")
    @classmethod
    def unknown_to_none(cls, value: Any) -> Any:
        """Accept the legacy "N/A" sentinel (or any non-numeric text) as unknown."""

        if isinstance(value, str):
            stripped = value.strip()
            try:
                return int(float(stripped))
            except ValueError:
                return None
        return value


class Segment(CamelModel):
    """One named block of a structured workout."""

    name: str
    instruction: str
    target_pace: str | None = None
    rpe: str | None = None
    repeat: int | None = Field(default=None, ge=1)
    workout_type: str = "RUN"


class WorkoutOption(CamelModel):
    """A single prescribed session."""

    title: str
    details: str
    target_pace: str | None = None
    rpe: str | None = None
    segments: list[Segment] = Field(default_factory=list)


class WorkoutPlan(CamelModel):
    """Easy and quality options for today plus the reasoning behind them."""

    easy_option: WorkoutOption
    quality_option: WorkoutOption
    reasoning: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class WorkoutRequest(CamelModel):
    """Inbound body for workout generation.

    ``goal``, ``plan`` and ``summary`` are checked by the router so a missing
    field yields a 400 with a readable message instead of a validation dump.
    """

    goal: str | None = None
    plan: str | None = None
    summary: ActivitySummary | None = None
    preferences: str = ""
    preferred_quality_type: str | None = None


class WorkoutResponse(CamelModel):
    workout: WorkoutPlan
    source: str


class HistorySyncResponse(CamelModel):
    summary: ActivitySummary
    activities_count: int


class PlanSettings(CamelModel):
    """Athlete inputs collected by the planner UI."""

    goal_type: str = "Hilly trail marathon"
    race_date: date
    plan_length: int = Field(default=16, ge=1, le=52)
    weekly_distance: float = Field(default=48, ge=0)
    training_load: str = "moderate"
    terrain: str = "mixed"
    time_available: int = Field(default=60, ge=0)
    last_quality: int = Field(default=4, ge=0)
    interval_days: str = "monday,tuesday,wednesday"
    tempo_days: str = "wednesday,thursday,friday"
    long_run_days: str = "saturday,sunday"


class PlanOverviewRequest(CamelModel):
    settings: PlanSettings
    summary: ActivitySummary | None = None
    today: date | None = None


class PlanOverview(CamelModel):
    """Where the athlete sits in the plan today and the strings used to request a workout."""

    days_to_race: int
    week: int
    day: int
    day_name: str
    phase: str
    focus: str
    preferred_quality_type: str
    effective_training_load: str
    effective_last_quality: int
    goal: str
    plan: str
    preferences: str
