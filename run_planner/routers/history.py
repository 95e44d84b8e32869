"""API endpoint that syncs recent Strava history into a training summary."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from run_planner.models.schemas import HistorySyncResponse
from run_planner.services.activity_summarizer import build_summary
from run_planner.services.strava_service import StravaError, StravaService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("/sync", response_model=HistorySyncResponse)
async def sync_history():
    """
    Fetch the last six weeks of Strava activities and summarise them.

    Returns:
        HistorySyncResponse: ``{"summary": ActivitySummary, "activitiesCount": int}``
    """

    try:
        service = StravaService()
        activities = await asyncio.to_thread(service.fetch_recent_activities)
        summary = build_summary(activities)
    except StravaError as err:
        logger.error("Strava sync failed (HTTP %s): %s", err.status_code, err)
        raise HTTPException(status_code=err.status_code, detail=str(err))
    except Exception as e:
        logger.exception("Unexpected failure during Strava sync")
        raise HTTPException(status_code=500, detail=str(e))

    return HistorySyncResponse(summary=summary, activities_count=len(activities))
