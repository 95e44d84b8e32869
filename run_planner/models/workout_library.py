"""Static quality-session templates consumed by the fallback planner."""
from __future__ import annotations

import math
from enum import Enum
from typing import Any

from run_planner.models.schemas import Segment, WorkoutOption


class QualityType(str, Enum):
    INTERVALS = "intervals"
    TEMPO = "tempo"
    LONG_RUN = "long run"

    @classmethod
    def lookup(cls, value: str | None) -> "QualityType | None":
        """Match free text such as ``"Long_Run"`` to a category, or None."""

        if not value:
            return None
        normalized = " ".join(value.strip().lower().replace("_", " ").replace("-", " ").split())
        for member in cls:
            if member.value == normalized:
                return member
        return None

    @classmethod
    def resolve(cls, value: str | None) -> "QualityType":
        """Map free text onto a known category, defaulting to tempo."""

        return cls.lookup(value) or cls.TEMPO


# Multipliers applied to the athlete's average pace (min/km) as (fast, slow)
# bounds. Mirrors the pace guidance the model is given.
PACE_BANDS: dict[str, tuple[float, float]] = {
    "easy": (1.08, 1.18),
    "steady": (1.02, 1.10),
    "tempo": (0.92, 1.00),
    "interval": (0.80, 0.88),
}


WORKOUT_LIBRARY: dict[QualityType, dict[str, Any]] = {
    QualityType.INTERVALS: {
        "title": "VO2 intervals",
        "details": "15 min easy warm-up, 6 x 800 m at 5K effort with 90 s walking rest, 10 min easy cool-down.",
        "target_pace": "4:15-4:30 min/km",
        "rpe": "8-9",
        "segments": [
            {
                "name": "Warm-up",
                "instruction": "15 min easy jog at conversational effort, then 4 x 20 s relaxed strides.",
                "target_pace": "5:45-6:15 min/km",
                "rpe": "2-3",
                "band": "easy",
            },
            {
                "name": "Intervals",
                "instruction": "800 m at 5K effort, then 90 s walking rest recovery.",
                "target_pace": "4:15-4:30 min/km",
                "rpe": "8-9",
                "repeat": 6,
                "band": "interval",
            },
            {
                "name": "Cool down",
                "instruction": "10 min easy jog at conversational effort.",
                "target_pace": "5:45-6:15 min/km",
                "rpe": "2",
                "band": "easy",
            },
        ],
    },
    QualityType.TEMPO: {
        "title": "Progressive tempo",
        "details": "15 min easy warm-up, 20 min continuous tempo, 10 min easy cool-down.",
        "target_pace": "4:55-5:10 min/km",
        "rpe": "6",
        "segments": [
            {
                "name": "Warm-up",
                "instruction": "15 min easy jog at conversational effort.",
                "target_pace": "5:45-6:15 min/km",
                "rpe": "2-3",
                "band": "easy",
            },
            {
                "name": "Tempo",
                "instruction": "20 min continuous at comfortably hard effort, settling into the upper half of the range.",
                "target_pace": "4:55-5:10 min/km",
                "rpe": "6",
                "band": "tempo",
            },
            {
                "name": "Cool down",
                "instruction": "10 min easy jog at conversational effort.",
                "target_pace": "5:45-6:15 min/km",
                "rpe": "2",
                "band": "easy",
            },
        ],
    },
    QualityType.LONG_RUN: {
        "title": "Long run",
        "details": "10 min easy start, 70 min steady aerobic running, 10 min at marathon effort, 5 min easy cool-down.",
        "target_pace": "5:25-5:50 min/km",
        "rpe": "4-5",
        "segments": [
            {
                "name": "Warm-up",
                "instruction": "10 min easy running at conversational effort.",
                "target_pace": "5:50-6:20 min/km",
                "rpe": "2-3",
                "band": "easy",
            },
            {
                "name": "Steady long run",
                "instruction": "70 min steady aerobic running, fuelling every 30-40 min.",
                "target_pace": "5:25-5:50 min/km",
                "rpe": "4",
                "band": "steady",
            },
            {
                "name": "Marathon effort finish",
                "instruction": "10 min at marathon effort while staying relaxed.",
                "target_pace": "5:05-5:20 min/km",
                "rpe": "5",
                "band": "tempo",
            },
            {
                "name": "Cool down",
                "instruction": "5 min easy jog or walk at conversational effort.",
                "target_pace": "6:00-6:30 min/km",
                "rpe": "1-2",
                "band": "easy",
            },
        ],
    },
}


def format_pace(minutes_per_km: float) -> str:
    """Render a decimal pace such as 5.5 as ``5:30``."""

    total_seconds = int(round(minutes_per_km * 60))
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def pace_range(average_pace_min_km: float, band: str) -> str:
    fast, slow = PACE_BANDS[band]
    return f"{format_pace(average_pace_min_km * fast)}-{format_pace(average_pace_min_km * slow)} min/km"


def get_template(
    quality_type: QualityType | str | None,
    average_pace_min_km: float | None = None,
) -> WorkoutOption:
    """Build a fresh WorkoutOption for the requested category.

    When an average pace is supplied, every segment's pace range is derived
    from it using ``PACE_BANDS``; otherwise the canned ranges are used.
    """

    if not isinstance(quality_type, QualityType):
        quality_type = QualityType.resolve(quality_type)
    template = WORKOUT_LIBRARY[quality_type]
    personalise = average_pace_min_km is not None and math.isfinite(average_pace_min_km) and average_pace_min_km > 0

    main_pace = template["target_pace"]
    if personalise:
        main_band = next(raw["band"] for raw in template["segments"] if raw["band"] != "easy")
        main_pace = pace_range(average_pace_min_km, main_band)

    segments = []
    for raw in template["segments"]:
        target_pace = raw["target_pace"]
        if personalise:
            target_pace = pace_range(average_pace_min_km, raw["band"])
        segments.append(
            Segment(
                name=raw["name"],
                instruction=raw["instruction"],
                target_pace=target_pace,
                rpe=raw["rpe"],
                repeat=raw.get("repeat"),
            )
        )

    return WorkoutOption(
        title=template["title"],
        details=template["details"],
        target_pace=main_pace,
        rpe=template["rpe"],
        segments=segments,
    )
