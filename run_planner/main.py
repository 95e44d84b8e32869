"""FastAPI application entry point."""
from fastapi import FastAPI

from run_planner.logging_config import configure_logging
from run_planner.routers import health, history, plan, workouts


configure_logging()

app = FastAPI(title="Running Workout Planner API")


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(health.router)
app.include_router(history.router)
app.include_router(plan.router)
app.include_router(workouts.router)
