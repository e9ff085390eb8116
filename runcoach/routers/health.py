"""Router exposing basic system endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import func, select

from runcoach.models.database_models import Goal, TrainingPlan
from runcoach.routers.dependencies import DbSession


logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/status")
async def get_status() -> dict[str, str]:
    """Return a minimal status payload."""
    return {"status": "online"}


@router.get("/database")
async def get_database_status(db: DbSession) -> dict:
    """
    Check that the database answers and report plan counts.

    Returns:
        dict: {"status": "ok", "active_goals": int, "plans": int}
    """
    try:
        active_goals = db.scalar(select(func.count(Goal.id)).where(Goal.is_active.is_(True))) or 0
        plans = db.scalar(select(func.count(TrainingPlan.id))) or 0
        return {"status": "ok", "active_goals": active_goals, "plans": plans}
    except Exception as e:
        logger.exception("Database health check failed")
        raise HTTPException(status_code=503, detail=f"Database unavailable: {str(e)}")
