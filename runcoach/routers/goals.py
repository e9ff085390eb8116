"""API endpoints for race goals and plan (re)generation."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from sqlalchemy import select, update

from runcoach.config import get_settings
from runcoach.models.database_models import Goal
from runcoach.models.schemas import GoalCreate, GoalUpdate, GoalWithPlan
from runcoach.routers.dependencies import CurrentAthlete, DbSession, Today
from runcoach.services.training_planner import TrainingPlanner


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/athletes/{athlete_id}/goals", tags=["goals"])


def _get_owned_goal(db: DbSession, athlete_id: int, goal_id: int) -> Goal:
    goal = db.scalar(select(Goal).where(Goal.id == goal_id, Goal.athlete_id == athlete_id))
    if goal is None:
        raise HTTPException(status_code=404, detail="Goal not found")
    return goal


@router.post("", response_model=GoalWithPlan, status_code=201)
async def create_goal(
    payload: GoalCreate,
    athlete: CurrentAthlete,
    db: DbSession,
    today: Today,
):
    """
    Create a goal, retire the previous one and generate its training plan.

    Args:
        payload: Race target, fitness snapshot and availability

    Returns:
        GoalWithPlan: The new goal and the id of its plan
    """
    try:
        if payload.race_date <= today:
            raise HTTPException(status_code=400, detail="Race date must be in the future")

        settings = get_settings()

        db.execute(
            update(Goal)
            .where(Goal.athlete_id == athlete.id, Goal.is_active.is_(True))
            .values(is_active=False)
        )

        goal = Goal(
            athlete_id=athlete.id,
            race_distance=payload.race_distance,
            race_date=payload.race_date,
            target_time=payload.target_time,
            experience_level=payload.experience_level,
            current_frequency=payload.current_frequency or settings.default_current_frequency,
            longest_recent_run=(
                payload.longest_recent_run
                if payload.longest_recent_run is not None
                else settings.default_longest_recent_run
            ),
            available_days=payload.available_days,
            max_weekday_time=payload.max_weekday_time or settings.default_max_weekday_time,
            max_weekend_time=payload.max_weekend_time or settings.default_max_weekend_time,
            is_active=True,
        )
        db.add(goal)
        db.flush()

        plan_id = TrainingPlanner().generate_plan(db, goal, today)
        db.commit()
        db.refresh(goal)

        logger.info("Created goal: id=%s, athlete=%s, plan=%s", goal.id, athlete.id, plan_id)
        return {
            "message": "Goal created and training plan generated",
            "goal": goal,
            "plan_id": plan_id,
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to create goal for athlete %s", athlete.id)
        raise HTTPException(status_code=500, detail=f"Failed to create goal: {str(e)}")


@router.get("/active", response_model=GoalWithPlan)
async def get_active_goal(athlete: CurrentAthlete, db: DbSession):
    """Return the athlete's active goal and plan, or nulls when there is none."""
    goal = db.scalar(select(Goal).where(Goal.athlete_id == athlete.id, Goal.is_active.is_(True)))
    if goal is None:
        return {"goal": None, "plan": None}

    return {
        "goal": goal,
        "plan": goal.plan,
        "plan_id": goal.plan.id if goal.plan else None,
    }


@router.put("/{goal_id}", response_model=GoalWithPlan)
async def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    athlete: CurrentAthlete,
    db: DbSession,
    today: Today,
):
    """
    Change a goal's availability and regenerate its whole plan.

    Args:
        goal_id: Goal to update
        payload: New available days and/or session ceilings

    Returns:
        GoalWithPlan: Updated goal and the id of the regenerated plan
    """
    try:
        goal = _get_owned_goal(db, athlete.id, goal_id)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise HTTPException(status_code=400, detail="No updates provided")

        for field, value in changes.items():
            setattr(goal, field, value)
        db.flush()

        plan_id = TrainingPlanner().regenerate_plan(db, goal.id, athlete.id, today)
        db.commit()
        db.refresh(goal)

        logger.info("Updated goal %s (%s); regenerated plan %s", goal.id, ", ".join(sorted(changes)), plan_id)
        return {
            "message": "Goal updated and plan regenerated",
            "goal": goal,
            "plan_id": plan_id,
        }

    except HTTPException:
        raise
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("Failed to update goal %s", goal_id)
        raise HTTPException(status_code=500, detail=f"Failed to update goal: {str(e)}")


@router.delete("/{goal_id}", status_code=200)
async def delete_goal(goal_id: int, athlete: CurrentAthlete, db: DbSession):
    """Delete a goal together with its plan and workouts; run logs are kept."""
    try:
        goal = _get_owned_goal(db, athlete.id, goal_id)
        db.delete(goal)
        db.commit()

        logger.info("Deleted goal: id=%s", goal_id)
        return {"message": "Goal deleted successfully"}

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Failed to delete goal %s", goal_id)
        raise HTTPException(status_code=500, detail=f"Failed to delete goal: {str(e)}")
