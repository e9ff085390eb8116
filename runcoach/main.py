"""FastAPI application entry point."""
from fastapi import FastAPI

from runcoach.logging_config import configure_logging
from runcoach.routers import athletes, goals, health, progress, run_logs, workouts


configure_logging()

app = FastAPI(title="Runcoach Training Planner API")


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(health.router)
app.include_router(athletes.router)
app.include_router(goals.router)
app.include_router(workouts.router)
app.include_router(run_logs.router)
app.include_router(progress.router)
