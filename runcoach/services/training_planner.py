"""Periodised training plan generation."""
from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy import ColumnElement, select
from sqlalchemy.orm import Session

from runcoach.models.database_models import Goal, TrainingPlan, Workout
from runcoach.models.workout_library import get_workout_templates
from runcoach.services.day_placer import parse_weekdays, place_week
from runcoach.services.volume_curve import (
    EXPERIENCE_MULTIPLIERS,
    RACE_CONFIGS,
    phase_for_week,
    weekly_volumes,
)


logger = logging.getLogger(__name__)


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def weeks_between(start: date, end: date) -> int:
    """Whole weeks from start to end, truncated."""
    return (end - start).days // 7


class TrainingPlanner:
    """Builds and rebuilds the workout calendar for a goal."""

    def generate_plan(self, session: Session, goal: Goal, now: date) -> int:
        """
        Create a plan spanning today to race day and fill it with workouts.

        The caller must have rejected race dates that are not in the future.
        Workouts are added to the session in one batch; nothing is committed.

        Args:
            session: Database session
            goal: Goal to plan for
            now: Today's date

        Returns:
            Identifier of the new TrainingPlan
        """
        total_weeks = max(1, weeks_between(now, goal.race_date))
        race_config = RACE_CONFIGS.get(goal.race_distance, RACE_CONFIGS["5k"])
        experience_multiplier = EXPERIENCE_MULTIPLIERS.get(goal.experience_level, 1.0)
        days = parse_weekdays(goal.available_days)

        plan = TrainingPlan(
            goal=goal,
            athlete_id=goal.athlete_id,
            start_date=now,
            end_date=goal.race_date,
        )
        session.add(plan)
        session.flush()

        volumes = weekly_volumes(
            total_weeks,
            race_config,
            experience_multiplier,
            goal.current_frequency,
            goal.longest_recent_run,
        )
        first_monday = week_start(now)

        workouts: list[Workout] = []
        for week_number, volume in enumerate(volumes, start=1):
            monday = first_monday + timedelta(weeks=week_number - 1)
            phase = phase_for_week(week_number, total_weeks)
            templates = get_workout_templates(goal.experience_level, phase)

            for placed in place_week(
                days,
                volume,
                templates,
                goal.max_weekday_time,
                goal.max_weekend_time,
                week_number=week_number,
            ):
                template = placed.template
                workouts.append(
                    Workout(
                        plan_id=plan.id,
                        athlete_id=goal.athlete_id,
                        date=monday + timedelta(days=placed.day.offset),
                        week_number=week_number,
                        workout_type=template.type,
                        title=template.title,
                        description=template.description,
                        duration_minutes=placed.duration_minutes,
                        intensity=template.intensity,
                        tired_alternative=template.tired_alternative,
                        is_key_workout=template.is_key_workout,
                        is_long_run=template.is_long_run,
                    )
                )

        session.add_all(workouts)
        session.flush()

        logger.info(
            "Generated training plan: id=%s, goal=%s, distance=%s, weeks=%d, workouts=%d",
            plan.id,
            goal.id,
            goal.race_distance,
            total_weeks,
            len(workouts),
        )
        return plan.id

    def regenerate_plan(self, session: Session, goal_id: int, athlete_id: int, now: date) -> int:
        """
        Throw away the goal's plan and build a fresh one.

        Deleting the plan removes all of its workouts; run logs that pointed at
        them keep existing with a null workout reference.

        Raises:
            LookupError: If the goal does not belong to the athlete
        """
        goal = session.scalar(select(Goal).where(Goal.id == goal_id, Goal.athlete_id == athlete_id))
        if goal is None:
            raise LookupError(f"Goal {goal_id} not found for athlete {athlete_id}")

        existing = session.scalars(select(TrainingPlan).where(TrainingPlan.goal_id == goal_id)).all()
        for plan in existing:
            logger.info("Deleting plan %s for regeneration of goal %s", plan.id, goal_id)
            session.delete(plan)
        session.flush()
        session.expire(goal, ["plan"])

        return self.generate_plan(session, goal, now)


def get_active_plan(session: Session, athlete_id: int) -> TrainingPlan | None:
    """Plan belonging to the athlete's active goal, if any."""
    return session.scalar(
        select(TrainingPlan)
        .join(Goal, TrainingPlan.goal_id == Goal.id)
        .where(TrainingPlan.athlete_id == athlete_id, Goal.is_active.is_(True))
    )


def in_active_plan(athlete_id: int) -> ColumnElement[bool]:
    """Filter for workouts of the athlete's active plan; superseded plans are ignored."""
    active_plan_ids = (
        select(TrainingPlan.id)
        .join(Goal, TrainingPlan.goal_id == Goal.id)
        .where(TrainingPlan.athlete_id == athlete_id, Goal.is_active.is_(True))
    )
    return Workout.plan_id.in_(active_plan_ids)
