"""API endpoints for progress summaries and weekly plan adjustment."""
from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Query

from runcoach.models.schemas import AdjustmentCheckResponse, WeeklyAdjustmentResponse
from runcoach.routers.dependencies import CurrentAthlete, DbSession, Today
from runcoach.services.plan_adjuster import apply_weekly_adjustment, get_recent_adjustments
from runcoach.services.progress_tracker import ProgressTracker


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/athletes/{athlete_id}/progress", tags=["progress"])


@router.get("/overview")
async def get_overview(athlete: CurrentAthlete, db: DbSession):
    """Lifetime totals and active-plan completion."""
    return ProgressTracker().overview(db, athlete.id)


@router.get("/weekly")
async def get_weekly_trends(
    athlete: CurrentAthlete,
    db: DbSession,
    today: Today,
    weeks: int = Query(default=8, ge=1, le=52),
):
    """Week-by-week figures for the last ``weeks`` weeks."""
    return {"weeks": ProgressTracker().weekly_trends(db, athlete.id, today, weeks)}


@router.get("/long-runs")
async def get_long_runs(athlete: CurrentAthlete, db: DbSession):
    return {"long_runs": ProgressTracker().long_runs(db, athlete.id)}


@router.get("/workout-types")
async def get_workout_types(athlete: CurrentAthlete, db: DbSession):
    return {"breakdown": ProgressTracker().workout_type_breakdown(db, athlete.id)}


@router.get("/race-estimate")
async def get_race_estimate(athlete: CurrentAthlete, db: DbSession, today: Today):
    """Estimated finishing time for the active goal; null without recent runs."""
    return {"estimate": ProgressTracker().race_estimate(db, athlete.id, today)}


@router.post("/check-adjustment", response_model=AdjustmentCheckResponse)
async def check_adjustment(athlete: CurrentAthlete, db: DbSession, today: Today):
    """
    Review last week and scale upcoming workouts if needed.

    Meant to be triggered once per week; repeated calls compound the change.
    """
    try:
        result = apply_weekly_adjustment(db, athlete.id, today)
        db.commit()

        return {
            "adjustment_applied": result.applied,
            "recommendation": asdict(result.adjustment) if result.adjustment else None,
        }

    except Exception as e:
        logger.exception("Failed to check adjustment for athlete %s", athlete.id)
        raise HTTPException(status_code=500, detail=f"Failed to check for adjustments: {str(e)}")


@router.get("/adjustments", response_model=list[WeeklyAdjustmentResponse])
async def list_adjustments(
    athlete: CurrentAthlete,
    db: DbSession,
    limit: int = Query(default=5, ge=1, le=50),
):
    return get_recent_adjustments(db, athlete.id, limit)
