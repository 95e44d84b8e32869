"""Compose the instruction block sent to the generative model."""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from run_planner.config import get_settings
from run_planner.models.schemas import ActivitySummary
from run_planner.models.workout_library import QualityType


NOT_AVAILABLE = "N/A"

# Easy option: a single distance-and-effort sentence. Quality option: fully
# structured with pace and effort on every segment.
OUTPUT_SCHEMA: dict[str, Any] = {
    "easy_option": {
        "title": "...",
        "details": "One sentence: distance and conversational effort only.",
    },
    "quality_option": {
        "title": "...",
        "target_pace": "... min/km range",
        "rpe": "6-9",
        "details": "One-sentence summary of the session.",
        "segments": [
            {
                "name": "Warm-up",
                "instruction": "...",
                "target_pace": "... min/km range",
                "rpe": "2-3",
                "repeat": None,
                "workout_type": "RUN",
            },
            {
                "name": "...",
                "instruction": "...",
                "target_pace": "... min/km range",
                "rpe": "...",
                "repeat": 6,
                "workout_type": "RUN",
            },
            {
                "name": "Cool down",
                "instruction": "...",
                "target_pace": "... min/km range",
                "rpe": "2",
                "repeat": None,
                "workout_type": "RUN",
            },
        ],
    },
    "reasoning": ["...", "...", "..."],
    "warnings": ["..."],
}


@lru_cache(maxsize=4)
def load_prompt_config(path: Path) -> dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def _display(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _bullets(lines: list[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _numbered(lines: list[str]) -> str:
    return "\n".join(f"{index}) {line}" for index, line in enumerate(lines, start=1))


def system_prompt(config_path: Path | None = None) -> str:
    config = load_prompt_config(config_path or get_settings().prompt_config_path)
    return config["system_prompt"].strip()


def compose_workout_prompt(
    goal: str,
    plan: str,
    summary: ActivitySummary,
    preferences: str = "",
    preferred_quality_type: str | None = None,
    config_path: Path | None = None,
) -> str:
    """Fill the prompt template with athlete context, rules, schema and examples."""

    config = load_prompt_config(config_path or get_settings().prompt_config_path)
    weekly = ", ".join(_display(value) for value in summary.weekly_distances_km) or NOT_AVAILABLE

    return config["template"].format(
        goal=goal,
        plan=plan,
        preferences=preferences or "None given",
        preferred_quality_type=QualityType.resolve(preferred_quality_type).value,
        weekly_average_km=_display(summary.weekly_average_km),
        weekly_distances_km=weekly,
        recent_runs=summary.recent_runs,
        quality_count=summary.quality_count,
        last_quality_days=_display(summary.last_quality_days),
        total_elevation_m=_display(summary.total_elevation_m),
        average_pace_min_km=_display(summary.average_pace_min_km),
        fastest_pace_min_km=_display(summary.fastest_pace_min_km),
        pace_rules=_bullets(config["pace_rules"]),
        structure_rules=_bullets(config["structure_rules"]),
        output_schema=json.dumps(OUTPUT_SCHEMA, indent=2),
        examples=_numbered(config["examples"]),
    ).strip()
