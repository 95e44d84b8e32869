"""Enforce structural rules on model-generated workout plans."""
from __future__ import annotations

import logging
import re

from run_planner.models.schemas import Segment, WorkoutOption, WorkoutPlan


logger = logging.getLogger(__name__)

WARM_UP_PATTERN = re.compile(r"warm[-\s]?up", re.IGNORECASE)
COOL_DOWN_PATTERN = re.compile(r"cool[-\s]?down", re.IGNORECASE)

# Words marking a session as hard when they appear anywhere in the title or details.
HARD_SESSION_WORDS = ("interval", "hill", "rep", "repetition", "vo2", "max", "speed")
HARD_SESSION_PATTERN = re.compile("|".join(HARD_SESSION_WORDS), re.IGNORECASE)
HARD_RPE_THRESHOLD = 7.0
NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?")

REST_PATTERN = re.compile(r"\brest|recover", re.IGNORECASE)
WALKING_REST_PATTERN = re.compile(r"walking\s+rest", re.IGNORECASE)
JOG_RECOVERY_PATTERN = re.compile(r"(?:easy\s+)?jog\s+recovery", re.IGNORECASE)
EASY_EFFORT_PATTERN = re.compile(r"easy|conversational", re.IGNORECASE)

WALKING_REST_SENTENCE = "Use walking rest recovery between hard repetitions."
EASY_EFFORT_SENTENCE = "Keep this easy and conversational."

DEFAULT_WARM_UP = Segment(
    name="Warm-up",
    instruction="10-15 min easy jog at conversational effort.",
    rpe="2-3",
)
DEFAULT_COOL_DOWN = Segment(
    name="Cool down",
    instruction="10 min easy jog or walk at conversational effort.",
    rpe="1-2",
)


def is_warm_up(segment: Segment) -> bool:
    return bool(WARM_UP_PATTERN.search(segment.name))


def is_cool_down(segment: Segment) -> bool:
    return bool(COOL_DOWN_PATTERN.search(segment.name))


def is_hard_session(option: WorkoutOption) -> bool:
    """Hard when the RPE reaches 7 or the title/details name a hard session type."""

    rpe_values = [float(token) for token in NUMBER_PATTERN.findall(option.rpe or "")]
    if any(value >= HARD_RPE_THRESHOLD for value in rpe_values):
        return True
    return bool(HARD_SESSION_PATTERN.search(f"{option.title} {option.details}"))


def _append_sentence(text: str, sentence: str) -> str:
    stripped = text.strip()
    if not stripped:
        return sentence
    if stripped[-1] not in ".!?":
        stripped += "."
    return f"{stripped} {sentence}"


def _enforce_walking_rest(instruction: str) -> str:
    if not REST_PATTERN.search(instruction) or WALKING_REST_PATTERN.search(instruction):
        return instruction
    if JOG_RECOVERY_PATTERN.search(instruction):
        return JOG_RECOVERY_PATTERN.sub("walking rest recovery", instruction)
    return _append_sentence(instruction, WALKING_REST_SENTENCE)


def ensure_bookends(segments: list[Segment]) -> list[Segment]:
    """Return a new list with a warm-up first and a cool-down last where missing."""

    result = list(segments)
    if not any(is_warm_up(segment) for segment in result):
        result.insert(0, DEFAULT_WARM_UP.model_copy())
    if not any(is_cool_down(segment) for segment in result):
        result.append(DEFAULT_COOL_DOWN.model_copy())
    return result


def sanitize(plan: WorkoutPlan) -> WorkoutPlan:
    """
    Normalise the quality option of a model-generated plan.

    Guarantees a warm-up and cool-down, walking-rest recoveries for hard
    sessions and easy effort wording on the bookend segments. Only the quality
    option's segment list is replaced; the input plan is left untouched and
    applying ``sanitize`` twice gives the same result as applying it once.
    """
    quality = plan.quality_option
    hard = is_hard_session(quality)

    segments = []
    changed = 0
    for segment in ensure_bookends(quality.segments):
        instruction = segment.instruction
        if hard:
            instruction = _enforce_walking_rest(instruction)
        if (is_warm_up(segment) or is_cool_down(segment)) and not EASY_EFFORT_PATTERN.search(instruction):
            instruction = _append_sentence(instruction, EASY_EFFORT_SENTENCE)
        if instruction != segment.instruction:
            changed += 1
            segment = segment.model_copy(update={"instruction": instruction})
        segments.append(segment)

    added = len(segments) - len(quality.segments)
    if added or changed:
        logger.debug("Sanitised quality option | hard=%s added=%d rewritten=%d", hard, added, changed)

    return plan.model_copy(
        update={"quality_option": quality.model_copy(update={"segments": segments})}
    )
