"""API endpoints for viewing and rescheduling planned workouts."""
from __future__ import annotations

import logging
from datetime import timedelta
from itertools import groupby

from fastapi import APIRouter, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from runcoach.models.database_models import Workout
from runcoach.models.schemas import (
    PlanWithWeeks,
    RescheduleRequest,
    ThisWeekResponse,
    WeekResponse,
    WorkoutDetail,
)
from runcoach.routers.dependencies import CurrentAthlete, DbSession, Today
from runcoach.services.training_planner import get_active_plan, in_active_plan, week_start
from runcoach.services.week_rescheduler import WeekRescheduler


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/athletes/{athlete_id}/workouts", tags=["workouts"])


def _week_summary(week_number: int, workouts: list[Workout]) -> dict:
    return {
        "week_number": week_number,
        "workouts": workouts,
        "total_minutes": sum(w.duration_minutes for w in workouts),
        "completed_count": sum(1 for w in workouts if w.completed),
    }


@router.get("/this-week", response_model=ThisWeekResponse)
async def get_this_week(athlete: CurrentAthlete, db: DbSession, today: Today):
    """Workouts scheduled Monday through Sunday of the current week."""
    monday = week_start(today)
    sunday = monday + timedelta(days=6)

    workouts = db.scalars(
        select(Workout)
        .where(in_active_plan(athlete.id), Workout.date >= monday, Workout.date <= sunday)
        .options(selectinload(Workout.run_log))
        .order_by(Workout.date)
    ).all()

    return {
        "week_start": monday,
        "week_end": sunday,
        "week_number": workouts[0].week_number if workouts else 1,
        "workouts": workouts,
        "plan": get_active_plan(db, athlete.id),
    }


@router.get("/plan", response_model=PlanWithWeeks)
async def get_full_plan(athlete: CurrentAthlete, db: DbSession):
    """The active plan grouped by week."""
    plan = get_active_plan(db, athlete.id)
    if plan is None:
        return {"plan": None, "weeks": []}

    workouts = db.scalars(
        select(Workout)
        .where(Workout.plan_id == plan.id)
        .options(selectinload(Workout.run_log))
        .order_by(Workout.week_number, Workout.date)
    ).all()

    weeks = [
        _week_summary(week_number, list(group))
        for week_number, group in groupby(workouts, key=lambda w: w.week_number)
    ]

    return {
        "plan": plan,
        "race_distance": plan.goal.race_distance,
        "race_date": plan.goal.race_date,
        "available_days": plan.goal.available_days,
        "weeks": weeks,
    }


@router.get("/week/{week_number}", response_model=WeekResponse)
async def get_week(week_number: int, athlete: CurrentAthlete, db: DbSession):
    """Preview one week of the active plan."""
    plan = get_active_plan(db, athlete.id)
    if plan is None:
        raise HTTPException(status_code=404, detail="No active training plan")

    workouts = db.scalars(
        select(Workout)
        .where(Workout.plan_id == plan.id, Workout.week_number == week_number)
        .options(selectinload(Workout.run_log))
        .order_by(Workout.date)
    ).all()
    return _week_summary(week_number, list(workouts))


@router.post("/reschedule-week")
async def reschedule_current_week(
    payload: RescheduleRequest,
    athlete: CurrentAthlete,
    db: DbSession,
    today: Today,
):
    """
    Move this week's workouts onto new available days.

    The new days are also saved on the goal so later regenerations use them.
    Other weeks are left as they are.
    """
    try:
        plan = get_active_plan(db, athlete.id)
        if plan is None:
            raise HTTPException(status_code=404, detail="No active training plan")

        week_number = db.scalar(
            select(Workout.week_number)
            .where(Workout.plan_id == plan.id, Workout.date >= week_start(today))
            .order_by(Workout.date)
            .limit(1)
        )
        if week_number is None:
            raise HTTPException(status_code=404, detail="No workouts found for this week")

        rescheduled = WeekRescheduler().reschedule_week(
            db, plan.id, athlete.id, week_number, payload.available_days
        )
        plan.goal.available_days = payload.available_days
        db.commit()

        return {
            "message": "Week rescheduled successfully",
            "week_number": week_number,
            "workouts": len(rescheduled),
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to reschedule week for athlete %s", athlete.id)
        raise HTTPException(status_code=500, detail=f"Failed to reschedule week: {str(e)}")


@router.get("/{workout_id}", response_model=WorkoutDetail)
async def get_workout(workout_id: int, athlete: CurrentAthlete, db: DbSession):
    """Single workout with its run log, if logged."""
    workout = db.scalar(
        select(Workout)
        .where(Workout.id == workout_id, Workout.athlete_id == athlete.id)
        .options(selectinload(Workout.run_log))
    )
    if workout is None:
        raise HTTPException(status_code=404, detail="Workout not found")

    return {
        **{field: getattr(workout, field) for field in WorkoutDetail.model_fields if field != "log"},
        "log": workout.run_log,
    }
