"""API endpoint describing today's position in the training plan."""
from __future__ import annotations

import logging

from fastapi import APIRouter

from run_planner.models.schemas import PlanOverview, PlanOverviewRequest
from run_planner.services.plan_calendar import build_overview


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plan", tags=["plan"])


@router.post("/overview", response_model=PlanOverview)
async def plan_overview(request: PlanOverviewRequest):
    """Return phase, week/day, focus and the strings used to request today's workout."""

    overview = build_overview(request.settings, request.summary, today=request.today)
    logger.info(
        "Plan overview | week=%d day=%d phase=%s preferred=%s",
        overview.week,
        overview.day,
        overview.phase,
        overview.preferred_quality_type,
    )
    return overview
