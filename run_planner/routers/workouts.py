"""API endpoints for daily workout generation."""
from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from run_planner.models.schemas import WorkoutRequest, WorkoutResponse
from run_planner.services.workout_generator import WorkoutGenerator


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workouts", tags=["workouts"])


@router.post("/generate", response_model=WorkoutResponse)
async def generate_workout(request: WorkoutRequest):
    """
    Generate today's easy and quality workout options.

    Uses the configured model when an API key is present; otherwise, or when
    the model call fails, returns the rule-based plan with ``source: "fallback"``.

    Returns:
        WorkoutResponse: ``{"workout": WorkoutPlan, "source": str}``
    """

    if not request.goal or not request.plan or request.summary is None:
        logger.warning("Rejected workout request with missing inputs")
        raise HTTPException(status_code=400, detail="Missing required inputs.")

    try:
        generator = WorkoutGenerator()
        return await asyncio.to_thread(
            generator.generate,
            request.goal,
            request.plan,
            request.summary,
            request.preferences,
            request.preferred_quality_type,
        )
    except Exception as e:
        logger.exception("Failed to generate workout")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate workout: {str(e)}"
        )
