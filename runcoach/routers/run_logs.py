"""API endpoints for logging runs."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from runcoach.models.database_models import RunLog, Workout
from runcoach.models.schemas import RunLogCreate, RunLogPage, RunLogUpdate
from runcoach.routers.dependencies import CurrentAthlete, DbSession, Today


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/athletes/{athlete_id}/run-logs", tags=["run_logs"])


def _get_owned_log(db: DbSession, athlete_id: int, log_id: int) -> RunLog:
    log = db.scalar(select(RunLog).where(RunLog.id == log_id, RunLog.athlete_id == athlete_id))
    if log is None:
        raise HTTPException(status_code=404, detail="Log not found")
    return log


@router.post("", status_code=201)
async def log_run(payload: RunLogCreate, athlete: CurrentAthlete, db: DbSession, today: Today):
    """
    Record a run against a planned workout, or as an unplanned run.

    A planned workout can only be logged once; the workout counts as
    completed for as long as a completed log points at it.
    """
    try:
        if payload.workout_id is not None:
            workout = db.scalar(
                select(Workout).where(Workout.id == payload.workout_id, Workout.athlete_id == athlete.id)
            )
            if workout is None:
                raise HTTPException(status_code=404, detail="Workout not found")

            existing = db.scalar(select(RunLog.id).where(RunLog.workout_id == payload.workout_id))
            if existing is not None:
                raise HTTPException(status_code=400, detail="Workout already logged")

        log = RunLog(
            athlete_id=athlete.id,
            workout_id=payload.workout_id,
            date=payload.date or today,
            completed=payload.completed,
            duration_minutes=payload.duration_minutes,
            effort_level=payload.effort_level,
            pain_level=payload.pain_level,
            notes=payload.notes,
            is_unplanned=payload.workout_id is None,
        )
        db.add(log)
        db.commit()

        logger.info(
            "Logged run: id=%s, athlete=%s, workout=%s, minutes=%d",
            log.id,
            athlete.id,
            log.workout_id,
            log.duration_minutes,
        )
        return {"message": "Run logged successfully", "log_id": log.id}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to log run for athlete %s", athlete.id)
        raise HTTPException(status_code=500, detail=f"Failed to log run: {str(e)}")


@router.get("", response_model=RunLogPage)
async def list_run_logs(
    athlete: CurrentAthlete,
    db: DbSession,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    """Newest logs first, paginated."""
    logs = db.scalars(
        select(RunLog)
        .where(RunLog.athlete_id == athlete.id)
        .options(selectinload(RunLog.workout))
        .order_by(RunLog.date.desc(), RunLog.created_at.desc(), RunLog.id.desc())
        .limit(limit)
        .offset(offset)
    ).all()
    total = db.scalar(select(func.count(RunLog.id)).where(RunLog.athlete_id == athlete.id)) or 0

    return {
        "logs": [
            {
                "id": log.id,
                "workout_id": log.workout_id,
                "date": log.date,
                "completed": log.completed,
                "duration_minutes": log.duration_minutes,
                "effort_level": log.effort_level,
                "pain_level": log.pain_level,
                "notes": log.notes,
                "is_unplanned": log.is_unplanned,
                "workout_title": log.workout.title if log.workout else None,
                "workout_type": log.workout.workout_type if log.workout else None,
            }
            for log in logs
        ],
        "total": total,
        "has_more": offset + len(logs) < total,
    }


@router.put("/{log_id}")
async def update_run_log(log_id: int, payload: RunLogUpdate, athlete: CurrentAthlete, db: DbSession):
    """Edit a log; the linked workout's completion follows the log."""
    try:
        log = _get_owned_log(db, athlete.id, log_id)

        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise HTTPException(status_code=400, detail="No updates provided")

        for field, value in changes.items():
            if value is None and field != "notes":
                continue
            setattr(log, field, value)
        db.commit()

        logger.info("Updated run log %s (%s)", log_id, ", ".join(sorted(changes)))
        return {"message": "Log updated successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to update run log %s", log_id)
        raise HTTPException(status_code=500, detail=f"Failed to update log: {str(e)}")


@router.delete("/{log_id}")
async def delete_run_log(log_id: int, athlete: CurrentAthlete, db: DbSession):
    """Remove a log, which also un-completes its workout."""
    try:
        log = _get_owned_log(db, athlete.id, log_id)
        db.delete(log)
        db.commit()

        logger.info("Deleted run log %s", log_id)
        return {"message": "Log deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to delete run log %s", log_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete log: {str(e)}")
