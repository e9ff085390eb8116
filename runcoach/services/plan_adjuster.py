"""Feedback-driven volume adjustment of future workouts."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from runcoach.models.database_models import RunLog, WeeklyAdjustment, Workout
from runcoach.services.training_planner import get_active_plan, in_active_plan, week_start
from runcoach.services.volume_curve import round_minutes


logger = logging.getLogger(__name__)

# Key sessions and long runs are never cut by more than this
KEY_WORKOUT_MIN_MULTIPLIER = 0.85


@dataclass(frozen=True)
class WeeklyStats:
    """Performance summary of one Monday-first week."""

    total_runs: int
    completed_runs: int
    planned_runs: int
    average_effort: float
    average_pain: float
    total_minutes: int
    missed_key_workouts: int

    @property
    def completion_rate(self) -> float:
        if self.planned_runs == 0:
            return 0.0
        return self.completed_runs / self.planned_runs


@dataclass(frozen=True)
class AdjustmentRecommendation:
    """Classification of a week and the multiplier to apply."""

    type: str  # reduce, maintain, increase
    reason: str
    volume_multiplier: float
    intensity_adjustment: int


@dataclass(frozen=True)
class AdjustmentResult:
    applied: bool
    adjustment: AdjustmentRecommendation | None


def analyze_weekly_performance(
    session: Session,
    athlete_id: int,
    now: date,
    week_offset: int = 1,
) -> WeeklyStats | None:
    """
    Summarise the athlete's week ``week_offset`` weeks before ``now``.

    Planned workouts come from the active plan only, so a superseded goal's
    plan does not count; averages and totals cover all run logs, planned or not.

    Returns:
        WeeklyStats, or None when nothing was planned that week
    """
    start = week_start(now - timedelta(weeks=week_offset))
    end = start + timedelta(days=6)

    planned = session.scalars(
        select(Workout)
        .where(in_active_plan(athlete_id), Workout.date >= start, Workout.date <= end)
        .options(selectinload(Workout.run_log))
    ).all()

    if not planned:
        logger.debug("No planned workouts for athlete %s in week of %s", athlete_id, start)
        return None

    logs = session.scalars(
        select(RunLog).where(RunLog.athlete_id == athlete_id, RunLog.date >= start, RunLog.date <= end)
    ).all()

    completed = [w for w in planned if w.completed]
    missed_key = [w for w in planned if (w.is_key_workout or w.is_long_run) and not w.completed]

    log_count = len(logs)
    effort_sum = sum(log.effort_level or 0 for log in logs)
    pain_sum = sum(log.pain_level or 0 for log in logs)

    return WeeklyStats(
        total_runs=log_count,
        completed_runs=len(completed),
        planned_runs=len(planned),
        average_effort=effort_sum / log_count if log_count else 0.0,
        average_pain=pain_sum / log_count if log_count else 0.0,
        total_minutes=sum(log.duration_minutes or 0 for log in logs),
        missed_key_workouts=len(missed_key),
    )


def get_adjustment_recommendation(stats: WeeklyStats) -> AdjustmentRecommendation:
    """
    Classify a week. Rules are checked in order and the first match wins:

    1. Average pain >= 5: reduce to 70%, one step easier
    2. Completion below 50%: reduce to 80%
    3. Two or more missed key sessions: reduce to 85%
    4. Effort >= 8 with completion >= 80%: maintain
    5. Effort < 6, completion >= 90%, pain < 2: increase by 5%
    6. Otherwise maintain
    """
    if stats.average_pain >= 5:
        return AdjustmentRecommendation(
            type="reduce",
            reason="Pain levels are elevated. Reducing training to aid recovery.",
            volume_multiplier=0.7,
            intensity_adjustment=-1,
        )

    completion_rate = stats.completion_rate

    if completion_rate < 0.5:
        return AdjustmentRecommendation(
            type="reduce",
            reason="Low workout completion rate. Adjusting plan to be more achievable.",
            volume_multiplier=0.8,
            intensity_adjustment=0,
        )

    if stats.missed_key_workouts >= 2:
        return AdjustmentRecommendation(
            type="reduce",
            reason="Missing key workouts. Reducing volume to prioritize important sessions.",
            volume_multiplier=0.85,
            intensity_adjustment=0,
        )

    if stats.average_effort >= 8 and completion_rate >= 0.8:
        return AdjustmentRecommendation(
            type="maintain",
            reason="Training feels hard but manageable. Maintaining current level.",
            volume_multiplier=1.0,
            intensity_adjustment=0,
        )

    if stats.average_effort < 6 and completion_rate >= 0.9 and stats.average_pain < 2:
        return AdjustmentRecommendation(
            type="increase",
            reason="Consistent training with low perceived effort. Gradually increasing.",
            volume_multiplier=1.05,
            intensity_adjustment=0,
        )

    return AdjustmentRecommendation(
        type="maintain",
        reason="Training is progressing well. Maintaining current plan.",
        volume_multiplier=1.0,
        intensity_adjustment=0,
    )


def effective_multiplier(workout: Workout, recommendation: AdjustmentRecommendation) -> float:
    multiplier = recommendation.volume_multiplier
    if (workout.is_key_workout or workout.is_long_run) and recommendation.type == "reduce":
        multiplier = max(multiplier, KEY_WORKOUT_MIN_MULTIPLIER)
    return multiplier


def apply_weekly_adjustment(session: Session, athlete_id: int, now: date) -> AdjustmentResult:
    """
    Scale the athlete's uncompleted workouts from this week on.

    Uses last week's stats. Durations are multiplied in place, so running this
    twice in one week compounds the change; it is meant to run once a week.

    Returns:
        AdjustmentResult; ``applied`` is False for maintain recommendations
        and when there is no stats week, active plan, or upcoming workout
    """
    stats = analyze_weekly_performance(session, athlete_id, now)
    if stats is None:
        return AdjustmentResult(applied=False, adjustment=None)

    recommendation = get_adjustment_recommendation(stats)
    if recommendation.type == "maintain":
        logger.info("Athlete %s: %s", athlete_id, recommendation.reason)
        return AdjustmentResult(applied=False, adjustment=recommendation)

    plan = get_active_plan(session, athlete_id)
    if plan is None:
        logger.info("Athlete %s has no active plan; skipping %s adjustment", athlete_id, recommendation.type)
        return AdjustmentResult(applied=False, adjustment=recommendation)

    current_monday = week_start(now)
    current_week_number = session.scalar(
        select(Workout.week_number)
        .where(Workout.plan_id == plan.id, Workout.date >= current_monday)
        .order_by(Workout.date)
        .limit(1)
    )
    if current_week_number is None:
        logger.info("Plan %s has no workouts from %s on; nothing to adjust", plan.id, current_monday)
        return AdjustmentResult(applied=False, adjustment=recommendation)

    already_adjusted = session.scalar(
        select(WeeklyAdjustment.id).where(
            WeeklyAdjustment.plan_id == plan.id,
            WeeklyAdjustment.week_number == current_week_number,
        ).limit(1)
    )
    if already_adjusted is not None:
        logger.warning(
            "Plan %s week %s was already adjusted; multipliers will compound",
            plan.id,
            current_week_number,
        )

    future_workouts = session.scalars(
        select(Workout).where(
            Workout.plan_id == plan.id,
            Workout.date >= current_monday,
            ~Workout.completed,
        )
    ).all()

    for workout in future_workouts:
        workout.duration_minutes = round_minutes(workout.duration_minutes * effective_multiplier(workout, recommendation))

    session.add(
        WeeklyAdjustment(
            athlete_id=athlete_id,
            plan_id=plan.id,
            week_number=current_week_number,
            adjustment_type=recommendation.type,
            reason=recommendation.reason,
        )
    )
    session.flush()

    logger.info(
        "Applied %s adjustment (x%.2f) to %d workouts of plan %s from week %s",
        recommendation.type,
        recommendation.volume_multiplier,
        len(future_workouts),
        plan.id,
        current_week_number,
    )
    return AdjustmentResult(applied=True, adjustment=recommendation)


def get_recent_adjustments(session: Session, athlete_id: int, limit: int = 5) -> list[WeeklyAdjustment]:
    """Most recent adjustments for an athlete, newest first."""
    return list(
        session.scalars(
            select(WeeklyAdjustment)
            .where(WeeklyAdjustment.athlete_id == athlete_id)
            .order_by(WeeklyAdjustment.created_at.desc(), WeeklyAdjustment.id.desc())
            .limit(limit)
        ).all()
    )
