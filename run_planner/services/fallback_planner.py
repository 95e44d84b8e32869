"""Deterministic rule-based workout plan used when the model is unavailable."""
from __future__ import annotations

import logging
import math

from run_planner.models.schemas import ActivitySummary, Segment, WorkoutOption, WorkoutPlan
from run_planner.models.workout_library import QualityType, get_template


logger = logging.getLogger(__name__)

MIN_EASY_KM = 5.0
MAX_EASY_KM = 18.0
EASY_SHARE_OF_WEEK = 0.24

FRESH_QUALITY_DAYS = 1
RECOVERED_QUALITY_DAYS = 4
FRESH_QUALITY_FACTOR = 0.85
RECOVERED_FACTOR = 1.08

TREND_SPIKE_RATIO = 1.15
TREND_DIP_RATIO = 0.9
TREND_SPIKE_FACTOR = 0.92
TREND_DIP_FACTOR = 1.05


def _format_km(value: float) -> str:
    return f"{value:.1f}".rstrip("0").rstrip(".")


def recent_and_prior_week_km(summary: ActivitySummary) -> tuple[float, float]:
    distances = summary.weekly_distances_km
    recent = distances[-1] if distances else summary.weekly_average_km
    prior = distances[-2] if len(distances) >= 2 else recent
    return recent, prior


def trend_ratio(summary: ActivitySummary) -> float:
    recent, prior = recent_and_prior_week_km(summary)
    if not prior:
        return 1.0
    return recent / prior


def recovery_adjustment(last_quality_days: int | None) -> float:
    if last_quality_days is None:
        return 1.0
    if last_quality_days <= FRESH_QUALITY_DAYS:
        return FRESH_QUALITY_FACTOR
    if last_quality_days >= RECOVERED_QUALITY_DAYS:
        return RECOVERED_FACTOR
    return 1.0


def trend_adjustment(ratio: float) -> float:
    if ratio >= TREND_SPIKE_RATIO:
        return TREND_SPIKE_FACTOR
    if ratio <= TREND_DIP_RATIO:
        return TREND_DIP_FACTOR
    return 1.0


def round_to_half_km(value: float) -> float:
    """Round half-up to the nearest 0.5 km."""

    return math.floor(value * 2 + 0.5) / 2


def compute_easy_distance_km(summary: ActivitySummary) -> float:
    """
    Size today's easy run from recent load.

    An easy day nominally takes about 24% of weekly volume (never below 5 km),
    reduced when a quality session was run within the last day or the latest
    week spiked, and increased when the athlete is well recovered or the
    latest week dipped. The result is clamped to 5-18 km and rounded to the
    nearest half kilometre.
    """
    base = max(MIN_EASY_KM, summary.weekly_average_km * EASY_SHARE_OF_WEEK)
    distance = base * recovery_adjustment(summary.last_quality_days) * trend_adjustment(trend_ratio(summary))
    clamped = min(MAX_EASY_KM, max(MIN_EASY_KM, distance))
    return round_to_half_km(clamped)


def build_easy_option(distance_km: float) -> WorkoutOption:
    distance = _format_km(distance_km)
    return WorkoutOption(
        title="Easy aerobic run",
        details=f"Run {distance} km at a relaxed, conversational effort.",
        rpe="2-4",
        segments=[
            Segment(
                name="Easy run",
                instruction=f"{distance} km easy, conversational effort throughout.",
                rpe="2-4",
            )
        ],
    )


def _recovery_sentence(last_quality_days: int | None) -> str:
    if last_quality_days is None:
        return "No quality session found in the recent history, so recovery timing does not change the easy volume."
    days = f"{last_quality_days} day{'s' if last_quality_days != 1 else ''} ago"
    factor = recovery_adjustment(last_quality_days)
    if factor < 1:
        return f"Last quality session was {days}, so easy volume is trimmed to absorb fresh fatigue."
    if factor > 1:
        return f"Last quality session was {days}, so there is room for a little extra easy volume."
    return f"Last quality session was {days}, so easy volume stays at its baseline."


def _trend_sentence(summary: ActivitySummary, ratio: float) -> str:
    recent, prior = recent_and_prior_week_km(summary)
    factor = trend_adjustment(ratio)
    if factor < 1:
        effect = "pulling back after the jump"
    elif factor > 1:
        effect = "restoring some of the missing volume"
    else:
        effect = "keeping the load steady"
    return (
        f"Latest week was {_format_km(recent)} km against {_format_km(prior)} km the week before "
        f"(trend {ratio:.2f}), {effect}."
    )


def derive(summary: ActivitySummary, preferred_quality_type: str | None = None) -> WorkoutPlan:
    """Build a complete plan from the summary alone. Never raises for valid summaries."""

    quality_type = QualityType.resolve(preferred_quality_type)
    distance_km = compute_easy_distance_km(summary)
    ratio = trend_ratio(summary)

    reasoning = [
        (
            f"Easy run set to {_format_km(distance_km)} km from a {_format_km(summary.weekly_average_km)} km "
            f"weekly average (about {int(EASY_SHARE_OF_WEEK * 100)}% of a week, never under {_format_km(MIN_EASY_KM)} km)."
        ),
        _trend_sentence(summary, ratio),
        _recovery_sentence(summary.last_quality_days),
        f"Quality option uses the {quality_type.value} template with warm-up, main set and cool-down.",
    ]

    warnings: list[str] = []
    if summary.recent_runs == 0:
        warnings.append("No recent runs were synced; distances fall back to conservative defaults.")
    if ratio >= TREND_SPIKE_RATIO:
        warnings.append(
            f"Latest week is {round((ratio - 1) * 100)}% above the week before; avoid stacking extra load."
        )
    if summary.last_quality_days is not None and summary.last_quality_days <= FRESH_QUALITY_DAYS:
        warnings.append("A quality session was run within the last day; prefer the easy option today.")
    if preferred_quality_type and QualityType.lookup(preferred_quality_type) is None:
        warnings.append(f'"{preferred_quality_type}" is not a known session type; using a tempo session instead.')

    logger.info(
        "Fallback plan derived | easy=%.1fkm quality=%s trend=%.2f last_quality=%s",
        distance_km,
        quality_type.value,
        ratio,
        summary.last_quality_days,
    )

    return WorkoutPlan(
        easy_option=build_easy_option(distance_km),
        quality_option=get_template(quality_type, summary.average_pace_min_km),
        reasoning=reasoning,
        warnings=warnings,
    )
