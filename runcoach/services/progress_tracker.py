"""Aggregations behind the athlete progress views."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from runcoach.models.database_models import Goal, RunLog, Workout
from runcoach.services.training_planner import get_active_plan, in_active_plan, week_start
from runcoach.services.volume_curve import round_minutes


# Rough finishing time in minutes before fitness adjustments
RACE_BASE_MINUTES: dict[str, int] = {"5k": 30, "10k": 60, "half": 120, "marathon": 240}
RACE_ESTIMATE_WEEKS = 4


def _one_decimal(value: float | None) -> float:
    return round(float(value), 1) if value else 0.0


class ProgressTracker:
    """Read-only summaries of logged training."""

    def overview(self, session: Session, athlete_id: int) -> dict[str, Any]:
        """
        Lifetime totals plus completion of the active plan.

        Returns:
            dict with total_runs, total_minutes, average_effort, average_pain
            and plan_progress (None without an active plan)
        """
        totals = session.execute(
            select(
                func.count(RunLog.id),
                func.sum(RunLog.duration_minutes),
                func.avg(RunLog.effort_level),
                func.avg(RunLog.pain_level),
            ).where(RunLog.athlete_id == athlete_id)
        ).one()
        total_runs, total_minutes, avg_effort, avg_pain = totals

        plan_progress = None
        plan = get_active_plan(session, athlete_id)
        if plan is not None:
            total_workouts = session.scalar(
                select(func.count(Workout.id)).where(Workout.plan_id == plan.id)
            ) or 0
            completed_workouts = session.scalar(
                select(func.count(Workout.id)).where(Workout.plan_id == plan.id, Workout.completed)
            ) or 0
            plan_progress = {
                "race_distance": plan.goal.race_distance,
                "race_date": plan.goal.race_date,
                "total_workouts": total_workouts,
                "completed_workouts": completed_workouts,
                "completion_rate": round(completed_workouts / total_workouts * 100) if total_workouts else 0,
            }

        return {
            "total_runs": total_runs or 0,
            "total_minutes": round(total_minutes or 0),
            "average_effort": _one_decimal(avg_effort),
            "average_pain": _one_decimal(avg_pain),
            "plan_progress": plan_progress,
        }

    def weekly_trends(self, session: Session, athlete_id: int, now: date, weeks: int = 8) -> list[dict[str, Any]]:
        """Per-week log and completion figures for the last ``weeks`` weeks, oldest first."""
        trends: list[dict[str, Any]] = []

        for offset in range(weeks - 1, -1, -1):
            start = week_start(now - timedelta(weeks=offset))
            end = start + timedelta(days=6)

            run_count, total_minutes, avg_effort, longest_run = session.execute(
                select(
                    func.count(RunLog.id),
                    func.sum(RunLog.duration_minutes),
                    func.avg(RunLog.effort_level),
                    func.max(RunLog.duration_minutes),
                ).where(RunLog.athlete_id == athlete_id, RunLog.date >= start, RunLog.date <= end)
            ).one()

            in_week = (in_active_plan(athlete_id), Workout.date >= start, Workout.date <= end)
            planned = session.scalar(select(func.count(Workout.id)).where(*in_week)) or 0
            completed = session.scalar(select(func.count(Workout.id)).where(*in_week, Workout.completed)) or 0

            trends.append(
                {
                    "week_start": start,
                    "week_end": end,
                    "run_count": run_count or 0,
                    "total_minutes": total_minutes or 0,
                    "average_effort": _one_decimal(avg_effort),
                    "longest_run": longest_run or 0,
                    "planned_workouts": planned,
                    "completed_workouts": completed,
                }
            )

        return trends

    def long_runs(self, session: Session, athlete_id: int) -> list[dict[str, Any]]:
        """Logged long runs in date order."""
        rows = session.execute(
            select(RunLog.date, RunLog.duration_minutes, RunLog.effort_level, Workout.title)
            .select_from(RunLog)
            .join(Workout, RunLog.workout_id == Workout.id)
            .where(RunLog.athlete_id == athlete_id, Workout.is_long_run.is_(True))
            .order_by(RunLog.date)
        ).all()
        return [
            {
                "date": row.date,
                "duration_minutes": row.duration_minutes,
                "effort_level": row.effort_level,
                "title": row.title,
            }
            for row in rows
        ]

    def workout_type_breakdown(self, session: Session, athlete_id: int) -> list[dict[str, Any]]:
        rows = session.execute(
            select(Workout.workout_type, func.count(RunLog.id), func.sum(RunLog.duration_minutes))
            .select_from(RunLog)
            .join(Workout, RunLog.workout_id == Workout.id)
            .where(RunLog.athlete_id == athlete_id)
            .group_by(Workout.workout_type)
            .order_by(Workout.workout_type)
        ).all()
        return [
            {"type": workout_type, "count": count, "total_minutes": total or 0}
            for workout_type, count, total in rows
        ]

    def race_estimate(self, session: Session, athlete_id: int, now: date) -> dict[str, Any] | None:
        """
        Rough finishing-time estimate for the active goal from the last four weeks.

        Starts from a base time per distance, adds two minutes per point of
        average effort above 5 and subtracts one minute per hour of the longest
        run, never going below 70% of the base time.

        Returns:
            dict with race_distance, target_time, estimated_minutes, confidence
            and based_on_weeks, or None without an active goal or recent logs
        """
        goal = session.scalar(select(Goal).where(Goal.athlete_id == athlete_id, Goal.is_active.is_(True)))
        if goal is None:
            return None

        avg_duration, max_duration, avg_effort = session.execute(
            select(
                func.avg(RunLog.duration_minutes),
                func.max(RunLog.duration_minutes),
                func.avg(RunLog.effort_level),
            ).where(
                RunLog.athlete_id == athlete_id,
                RunLog.date >= now - timedelta(weeks=RACE_ESTIMATE_WEEKS),
            )
        ).one()
        if not avg_duration:
            return None

        base_time = RACE_BASE_MINUTES.get(goal.race_distance, 60)
        estimated = max(
            base_time * 0.7,
            base_time + (float(avg_effort) - 5) * 2 - max_duration / 60,
        )

        return {
            "race_distance": goal.race_distance,
            "target_time": goal.target_time,
            "estimated_minutes": round_minutes(estimated),
            "confidence": "moderate" if avg_duration > 30 else "low",
            "based_on_weeks": RACE_ESTIMATE_WEEKS,
        }
