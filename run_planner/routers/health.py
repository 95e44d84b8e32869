"""Router exposing basic system endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter

from run_planner.config import get_settings


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
async def get_status() -> dict:
    """
    Report which integrations are configured.

    Returns:
        dict: {
            "status": "online",
            "llm_provider": configured provider name,
            "llm_configured": bool, False means workouts come from the fallback planner,
            "strava_configured": bool
        }
    """
    settings = get_settings()
    return {
        "status": "online",
        "llm_provider": settings.llm_provider,
        "llm_configured": settings.llm_config() is not None,
        "strava_configured": settings.has_strava_credentials,
    }
