"""Generate today's workout plan from the model, falling back to the rule-based planner."""
from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from run_planner.config import Settings, get_settings
from run_planner.models.schemas import ActivitySummary, WorkoutPlan, WorkoutResponse
from run_planner.services import fallback_planner
from run_planner.services.llm_client import LLMClientError, build_llm_client
from run_planner.services.prompt_composer import compose_workout_prompt, system_prompt
from run_planner.services.workout_sanitizer import sanitize


logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"


def parse_workout(response_text: str) -> WorkoutPlan | None:
    """Parse the model's JSON reply into a WorkoutPlan, or None if unusable."""

    start = response_text.find("{")
    end = response_text.rfind("}") + 1
    if start < 0 or end <= start:
        return None

    try:
        return WorkoutPlan.model_validate(json.loads(response_text[start:end]))
    except json.JSONDecodeError:
        logger.warning("Model reply is not valid JSON")
    except ValidationError as err:
        logger.warning("Model reply does not match the workout schema: %s", err.error_count())
    return None


class WorkoutGenerator:
    """Requests a workout from the configured model with a deterministic backup."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.client = build_llm_client(self.settings.llm_config())

    def generate(
        self,
        goal: str,
        plan: str,
        summary: ActivitySummary,
        preferences: str = "",
        preferred_quality_type: str | None = None,
    ) -> WorkoutResponse:
        """
        Build today's two-option workout.

        The model is called at most once. A missing API key, a failed or timed
        out call, and an unparsable reply all return the fallback plan instead
        of an error.
        """
        fallback = fallback_planner.derive(summary, preferred_quality_type)
        if self.client is None:
            logger.info("No model API key configured for %s; using fallback plan", self.settings.llm_provider)
            return WorkoutResponse(workout=fallback, source=FALLBACK_SOURCE)

        prompt = compose_workout_prompt(
            goal,
            plan,
            summary,
            preferences=preferences,
            preferred_quality_type=preferred_quality_type,
            config_path=self.settings.prompt_config_path,
        )

        try:
            content = self.client.complete(system_prompt(self.settings.prompt_config_path), prompt)
        except LLMClientError as err:
            logger.warning("Model call failed, using fallback plan: %s", err)
            return WorkoutResponse(workout=fallback, source=FALLBACK_SOURCE)

        workout = parse_workout(content)
        if workout is None:
            logger.warning("Unusable model reply from %s; using fallback plan", self.client.provider)
            return WorkoutResponse(workout=fallback, source=FALLBACK_SOURCE)

        logger.info(
            "Workout generated by %s | quality=%s segments=%d",
            self.client.provider,
            workout.quality_option.title,
            len(workout.quality_option.segments),
        )
        return WorkoutResponse(workout=sanitize(workout), source=self.client.provider)
