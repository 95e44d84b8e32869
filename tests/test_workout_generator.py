"""Tests for the model-or-fallback workout orchestration."""
from __future__ import annotations

import json
from typing import Any

import pytest

from run_planner.config import Settings
from run_planner.models.schemas import ActivitySummary
from run_planner.services import fallback_planner, workout_generator
from run_planner.services.llm_client import LLMClientError
from run_planner.services.workout_generator import WorkoutGenerator, parse_workout
from run_planner.services.workout_sanitizer import is_cool_down, is_warm_up


class StubClient:
    provider = "groq"

    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append((system_prompt, user_prompt))
        if self.error:
            raise self.error
        return self.content


@pytest.fixture
def summary(summary_fixture: dict[str, Any]) -> ActivitySummary:
    return ActivitySummary.model_validate(summary_fixture)


def make_generator(monkeypatch: pytest.MonkeyPatch, client: StubClient | None) -> WorkoutGenerator:
    monkeypatch.setattr(workout_generator, "build_llm_client", lambda config: client)
    return WorkoutGenerator(Settings(_env_file=None, groq_api_key="gsk-test"))


def test_missing_api_key_returns_fallback(summary):
    generator = WorkoutGenerator(Settings(_env_file=None, groq_api_key=None))

    response = generator.generate("Marathon", "Week 3", summary, preferred_quality_type="intervals")

    assert response.source == "fallback"
    assert response.workout == fallback_planner.derive(summary, "intervals")


def test_model_reply_is_parsed_and_sanitized(monkeypatch, summary, model_workout_fixture):
    client = StubClient(content=json.dumps(model_workout_fixture))
    generator = make_generator(monkeypatch, client)

    response = generator.generate("Marathon", "Week 3", summary, "Hilly routes", "intervals")

    assert response.source == "groq"
    assert response.workout.easy_option.title == "Easy aerobic run"
    segments = response.workout.quality_option.segments
    assert is_warm_up(segments[0])
    assert is_cool_down(segments[-1])
    assert "walking rest recovery" in segments[1].instruction

    system_prompt, user_prompt = client.calls[0]
    assert "running coach" in system_prompt
    assert "Preferences: Hilly routes" in user_prompt
    assert "Preferred quality type today: intervals" in user_prompt


def test_model_failure_returns_fallback(monkeypatch, summary):
    generator = make_generator(monkeypatch, StubClient(error=LLMClientError("groq returned HTTP 503")))

    response = generator.generate("Marathon", "Week 3", summary, preferred_quality_type="tempo")

    assert response.source == "fallback"
    assert response.workout == fallback_planner.derive(summary, "tempo")


@pytest.mark.parametrize(
    "content",
    [
        "Sorry, I can't help with that.",
        '{"easy_option": {"title": "Easy"',
        '{"easy_option": {"title": "Easy", "details": "8 km"}}',
    ],
)
def test_unusable_reply_returns_fallback(monkeypatch, summary, content):
    generator = make_generator(monkeypatch, StubClient(content=content))

    response = generator.generate("Marathon", "Week 3", summary)

    assert response.source == "fallback"


def test_parse_workout_tolerates_surrounding_text(model_workout_fixture):
    text = "Here is your workout:\n```json\n" + json.dumps(model_workout_fixture) + "\n```"

    plan = parse_workout(text)

    assert plan is not None
    assert plan.quality_option.title == "Hill repeats"


def test_parse_workout_accepts_camel_case(model_workout_fixture):
    plan = parse_workout(json.dumps(model_workout_fixture))

    assert plan is not None
    camel = plan.model_dump(by_alias=True)
    assert parse_workout(json.dumps(camel)) == plan
