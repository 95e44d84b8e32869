"""Service for fetching recent activities from the Strava API."""
from __future__ import annotations

import logging
import time
from typing import Any

import requests

from run_planner.config import Settings, get_settings


logger = logging.getLogger(__name__)

STRAVA_TOKEN_URL = "https://www.strava.com/api/v3/oauth/token"
STRAVA_ACTIVITIES_URL = "https://www.strava.com/api/v3/athlete/activities"


class StravaError(RuntimeError):
    """Strava call failed; ``status_code`` is what the API layer should return."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code


class StravaService:
    """Refresh-token authentication plus a single recent-activities fetch."""

    def __init__(self, settings: Settings | None = None, session: requests.Session | None = None) -> None:
        self.settings = settings or get_settings()
        self._session = session or requests.Session()
        self._timeout = self.settings.request_timeout_seconds

    def get_access_token(self) -> str:
        """Exchange the configured refresh token for a short-lived access token."""

        if not self.settings.has_strava_credentials:
            raise StravaError("Missing Strava credentials.")

        try:
            response = self._session.post(
                STRAVA_TOKEN_URL,
                json={
                    "client_id": self.settings.strava_client_id,
                    "client_secret": self.settings.strava_client_secret,
                    "refresh_token": self.settings.strava_refresh_token,
                    "grant_type": "refresh_token",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as err:
            logger.exception("Strava token refresh failed")
            raise StravaError(f"Strava token error: {err}") from err

        if not response.ok:
            logger.warning("Strava token refresh rejected with HTTP %s", response.status_code)
            raise StravaError(f"Strava token error: {response.text}")

        try:
            return response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as err:
            logger.warning("Strava token response had no access token")
            raise StravaError(f"Strava token error: unexpected response {response.text}") from err

    def fetch_recent_activities(
        self,
        lookback_days: int | None = None,
        per_page: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch the athlete's activities from the trailing lookback window.

        Args:
            lookback_days: Window size in days (default from settings, 42)
            per_page: Maximum number of records (default from settings, 60)

        Returns:
            Raw Strava activity dicts, newest first as returned by the API.

        Raises:
            StravaError: Missing credentials, token refresh failure, or a
                non-success activities response (carrying its status code),
                or a 502 when the body is not a JSON list of activities.
        """
        lookback_days = lookback_days or self.settings.strava_lookback_days
        per_page = per_page or self.settings.strava_per_page
        access_token = self.get_access_token()
        after = int(time.time() - lookback_days * 24 * 60 * 60)

        logger.info("Fetching Strava activities | lookback=%dd per_page=%d", lookback_days, per_page)
        try:
            response = self._session.get(
                STRAVA_ACTIVITIES_URL,
                params={"per_page": per_page, "after": after},
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self._timeout,
            )
        except requests.RequestException as err:
            logger.exception("Strava activities request failed")
            raise StravaError(str(err)) from err

        if not response.ok:
            logger.warning("Strava activities request returned HTTP %s", response.status_code)
            raise StravaError(response.text, status_code=response.status_code)

        try:
            activities = response.json()
        except ValueError as err:
            logger.warning("Strava activities response is not JSON")
            raise StravaError(f"Unexpected Strava response: {response.text}", status_code=502) from err

        if not isinstance(activities, list):
            logger.warning("Strava activities response is a %s, not a list", type(activities).__name__)
            raise StravaError(f"Unexpected Strava response: {response.text}", status_code=502)

        logger.info("Fetched %d Strava activities", len(activities))
        return activities
