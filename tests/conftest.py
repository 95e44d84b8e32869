"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from fastapi.testclient import TestClient

# Tests never reach a real model or Strava; blank keys force the fallback path.
os.environ["LLM_PROVIDER"] = "groq"
os.environ["GROQ_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["STRAVA_CLIENT_ID"] = os.environ.get("STRAVA_CLIENT_ID") or "12345"
os.environ["STRAVA_CLIENT_SECRET"] = os.environ.get("STRAVA_CLIENT_SECRET") or "test-strava-secret"
os.environ["STRAVA_REFRESH_TOKEN"] = os.environ.get("STRAVA_REFRESH_TOKEN") or "test-refresh-token"

from run_planner.config import get_settings
from run_planner.logging_config import configure_logging

get_settings.cache_clear()
configure_logging()

from run_planner.main import app

FIXTURES_DIR = Path(__file__).parent / "fixtures"
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_activity() -> Callable[..., Dict[str, Any]]:
    """Build a Strava-shaped activity relative to ``NOW``."""

    def _make(
        days_ago: float,
        distance_m: float = 10000,
        average_speed: float = 3.0,
        activity_type: str = "Run",
        workout_type: int | None = 0,
        elevation_m: float = 50,
    ) -> Dict[str, Any]:
        start = NOW - timedelta(days=days_ago)
        return {
            "id": int(days_ago * 1000 + distance_m),
            "type": activity_type,
            "sport_type": activity_type,
            "distance": distance_m,
            "moving_time": distance_m / average_speed if average_speed else 0,
            "total_elevation_gain": elevation_m,
            "start_date": start.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "average_speed": average_speed,
            "workout_type": workout_type,
        }

    return _make


@pytest.fixture(scope="session")
def model_workout_fixture() -> Dict[str, Any]:
    """Return a model-generated workout plan (snake_case, as the prompt requests)."""

    with (FIXTURES_DIR / "model_workout.json").open("r", encoding="utf-8") as fh:
        return json.load(fh)


@pytest.fixture(scope="session")
def summary_fixture() -> Dict[str, Any]:
    """Return a synced activity summary in its camelCase wire form."""

    with (FIXTURES_DIR / "activity_summary.json").open("r", encoding="utf-8") as fh:
        return json.load(fh)
