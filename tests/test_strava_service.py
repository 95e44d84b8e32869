"""Tests for the Strava history client."""
from __future__ import annotations

import time
from typing import Any

import pytest
import requests

from run_planner.config import Settings
from run_planner.services.strava_service import (
    STRAVA_ACTIVITIES_URL,
    STRAVA_TOKEN_URL,
    StravaError,
    StravaService,
)


class DummyResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.ok = 200 <= status_code < 300

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class DummySession:
    def __init__(self, token_response: DummyResponse, activities_response: DummyResponse | Exception | None = None):
        self.token_response = token_response
        self.activities_response = activities_response
        self.posts: list[dict[str, Any]] = []
        self.gets: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> DummyResponse:
        self.posts.append({"url": url, **kwargs})
        return self.token_response

    def get(self, url: str, **kwargs: Any) -> DummyResponse:
        self.gets.append({"url": url, **kwargs})
        if isinstance(self.activities_response, Exception):
            raise self.activities_response
        return self.activities_response


def make_settings(**overrides: Any) -> Settings:
    values = {
        "strava_client_id": "12345",
        "strava_client_secret": "secret",
        "strava_refresh_token": "refresh",
        "request_timeout_seconds": 9,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_fetch_recent_activities_refreshes_token_first():
    session = DummySession(
        DummyResponse(payload={"access_token": "access-abc"}),
        DummyResponse(payload=[{"id": 1}, {"id": 2}]),
    )
    service = StravaService(make_settings(), session=session)

    before = int(time.time())
    activities = service.fetch_recent_activities()

    assert activities == [{"id": 1}, {"id": 2}]
    token_call = session.posts[0]
    assert token_call["url"] == STRAVA_TOKEN_URL
    assert token_call["json"] == {
        "client_id": "12345",
        "client_secret": "secret",
        "refresh_token": "refresh",
        "grant_type": "refresh_token",
    }
    assert token_call["timeout"] == 9

    fetch_call = session.gets[0]
    assert fetch_call["url"] == STRAVA_ACTIVITIES_URL
    assert fetch_call["headers"] == {"Authorization": "Bearer access-abc"}
    assert fetch_call["params"]["per_page"] == 60
    after = fetch_call["params"]["after"]
    assert before - 42 * 86400 - 5 <= after <= int(time.time()) - 42 * 86400 + 5


def test_missing_credentials_raise():
    service = StravaService(make_settings(strava_refresh_token=""), session=DummySession(DummyResponse()))

    with pytest.raises(StravaError, match="Missing Strava credentials") as exc_info:
        service.fetch_recent_activities()

    assert exc_info.value.status_code == 500


def test_token_rejection_raises():
    session = DummySession(DummyResponse(status_code=401, text="Bad refresh token"))
    service = StravaService(make_settings(), session=session)

    with pytest.raises(StravaError, match="Strava token error: Bad refresh token"):
        service.fetch_recent_activities()

    assert session.gets == []


def test_activities_error_keeps_upstream_status():
    session = DummySession(
        DummyResponse(payload={"access_token": "access-abc"}),
        DummyResponse(status_code=429, text="Rate Limit Exceeded"),
    )
    service = StravaService(make_settings(), session=session)

    with pytest.raises(StravaError) as exc_info:
        service.fetch_recent_activities()

    assert exc_info.value.status_code == 429
    assert str(exc_info.value) == "Rate Limit Exceeded"


def test_network_failure_raises_strava_error():
    session = DummySession(
        DummyResponse(payload={"access_token": "access-abc"}),
        requests.Timeout("read timed out"),
    )
    service = StravaService(make_settings(), session=session)

    with pytest.raises(StravaError, match="read timed out"):
        service.fetch_recent_activities(lookback_days=7, per_page=10)

    assert session.gets[0]["params"]["per_page"] == 10


@pytest.mark.parametrize(
    "payload",
    [{"token_type": "Bearer"}, ValueError("Expecting value"), ["access-abc"]],
)
def test_malformed_token_response_raises(payload):
    session = DummySession(DummyResponse(payload=payload, text="<html>oops</html>"))
    service = StravaService(make_settings(), session=session)

    with pytest.raises(StravaError, match="Strava token error") as exc_info:
        service.fetch_recent_activities()

    assert exc_info.value.status_code == 500
    assert session.gets == []


@pytest.mark.parametrize(
    "payload",
    [{"message": "Authorization Error", "errors": []}, ValueError("Expecting value")],
)
def test_activities_body_must_be_a_list(payload):
    session = DummySession(
        DummyResponse(payload={"access_token": "access-abc"}),
        DummyResponse(payload=payload, text='{"message": "Authorization Error"}'),
    )
    service = StravaService(make_settings(), session=session)

    with pytest.raises(StravaError, match="Unexpected Strava response") as exc_info:
        service.fetch_recent_activities()

    assert exc_info.value.status_code == 502
