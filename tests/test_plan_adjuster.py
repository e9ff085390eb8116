"""Tests for weekly performance analysis and volume adjustment."""
from __future__ import annotations

import logging
from datetime import timedelta

import pytest
from sqlalchemy import select

from conftest import TODAY
from runcoach.models.database_models import RunLog, WeeklyAdjustment, Workout
from runcoach.services.plan_adjuster import (
    AdjustmentRecommendation,
    WeeklyStats,
    analyze_weekly_performance,
    apply_weekly_adjustment,
    effective_multiplier,
    get_adjustment_recommendation,
    get_recent_adjustments,
)
from runcoach.services.training_planner import TrainingPlanner

LAST_MONDAY = TODAY - timedelta(weeks=1)


def _stats(**overrides) -> WeeklyStats:
    values = {
        "total_runs": 4,
        "completed_runs": 4,
        "planned_runs": 4,
        "average_effort": 6.5,
        "average_pain": 0.0,
        "total_minutes": 200,
        "missed_key_workouts": 0,
    }
    values.update(overrides)
    return WeeklyStats(**values)


def _plan_started_last_week(db_session, make_goal):
    goal = make_goal(race_date=TODAY + timedelta(weeks=10))
    plan_id = TrainingPlanner().generate_plan(db_session, goal, LAST_MONDAY)
    db_session.commit()
    return plan_id


def _workouts(db_session, plan_id, week_number):
    return db_session.scalars(
        select(Workout)
        .where(Workout.plan_id == plan_id, Workout.week_number == week_number)
        .order_by(Workout.date)
    ).all()


def _log_week(db_session, athlete, workouts, effort=4, pain=0):
    for workout in workouts:
        db_session.add(
            RunLog(
                athlete_id=athlete.id,
                workout_id=workout.id,
                date=workout.date,
                duration_minutes=workout.duration_minutes,
                effort_level=effort,
                pain_level=pain,
            )
        )
    db_session.commit()


def test_low_completion_reduces_volume():
    stats = _stats(planned_runs=4, completed_runs=1, average_pain=1, average_effort=5, missed_key_workouts=1)

    recommendation = get_adjustment_recommendation(stats)

    assert stats.completion_rate == 0.25
    assert recommendation.type == "reduce"
    assert recommendation.volume_multiplier == 0.8
    assert recommendation.reason == "Low workout completion rate. Adjusting plan to be more achievable."


def test_pain_rule_wins_over_everything_else():
    recommendation = get_adjustment_recommendation(_stats(average_pain=6, completed_runs=4, planned_runs=4))

    assert recommendation.type == "reduce"
    assert recommendation.volume_multiplier == 0.7
    assert recommendation.intensity_adjustment == -1


def test_two_missed_key_sessions_reduce_volume():
    recommendation = get_adjustment_recommendation(_stats(completed_runs=3, missed_key_workouts=2))
    assert (recommendation.type, recommendation.volume_multiplier) == ("reduce", 0.85)


def test_hard_but_complete_week_is_maintained():
    recommendation = get_adjustment_recommendation(_stats(average_effort=8.5))
    assert (recommendation.type, recommendation.volume_multiplier) == ("maintain", 1.0)
    assert recommendation.reason.startswith("Training feels hard")


def test_easy_complete_week_increases_volume():
    recommendation = get_adjustment_recommendation(_stats(average_effort=4, average_pain=1))
    assert (recommendation.type, recommendation.volume_multiplier) == ("increase", 1.05)


def test_default_is_maintain():
    recommendation = get_adjustment_recommendation(_stats(average_effort=6.5))
    assert recommendation.type == "maintain"
    assert recommendation.reason == "Training is progressing well. Maintaining current plan."


def test_completion_rate_without_planned_runs_is_zero():
    assert _stats(planned_runs=0, completed_runs=0).completion_rate == 0.0


@pytest.mark.parametrize(
    "is_key, is_long, rec_type, multiplier, expected",
    [
        (False, False, "reduce", 0.7, 0.7),
        (True, False, "reduce", 0.7, 0.85),
        (False, True, "reduce", 0.8, 0.85),
        (True, True, "increase", 1.05, 1.05),
    ],
)
def test_key_sessions_are_protected_from_deep_cuts(is_key, is_long, rec_type, multiplier, expected):
    workout = Workout(is_key_workout=is_key, is_long_run=is_long)
    recommendation = AdjustmentRecommendation(type=rec_type, reason="", volume_multiplier=multiplier, intensity_adjustment=0)
    assert effective_multiplier(workout, recommendation) == expected


def test_analyze_counts_planned_and_unplanned_runs(db_session, athlete, make_goal):
    plan_id = _plan_started_last_week(db_session, make_goal)
    last_week = _workouts(db_session, plan_id, 1)
    easy_runs = [w for w in last_week if w.workout_type == "easy"]
    _log_week(db_session, athlete, easy_runs, effort=6, pain=2)
    db_session.add(
        RunLog(athlete_id=athlete.id, date=LAST_MONDAY, duration_minutes=20, effort_level=3, pain_level=0, is_unplanned=True)
    )
    db_session.commit()

    stats = analyze_weekly_performance(db_session, athlete.id, TODAY)

    assert stats.planned_runs == len(last_week)
    assert stats.completed_runs == len(easy_runs)
    assert stats.total_runs == len(easy_runs) + 1
    assert stats.missed_key_workouts == 2  # long run and tempo
    assert stats.average_pain == pytest.approx(2 * len(easy_runs) / (len(easy_runs) + 1))


def test_no_planned_week_means_no_adjustment(db_session, athlete, make_goal):
    TrainingPlanner().generate_plan(db_session, make_goal(), TODAY)
    db_session.commit()

    result = apply_weekly_adjustment(db_session, athlete.id, TODAY)

    assert result.applied is False
    assert result.adjustment is None


def test_maintain_leaves_workouts_untouched(db_session, athlete, make_goal):
    plan_id = _plan_started_last_week(db_session, make_goal)
    _log_week(db_session, athlete, _workouts(db_session, plan_id, 1), effort=7)
    durations = [w.duration_minutes for w in _workouts(db_session, plan_id, 2)]

    result = apply_weekly_adjustment(db_session, athlete.id, TODAY)
    db_session.commit()

    assert result.applied is False
    assert result.adjustment.type == "maintain"
    assert [w.duration_minutes for w in _workouts(db_session, plan_id, 2)] == durations
    assert db_session.scalars(select(WeeklyAdjustment)).all() == []


def test_missed_week_reduces_future_workouts_with_key_floor(db_session, athlete, make_goal):
    plan_id = _plan_started_last_week(db_session, make_goal)
    week_two = _workouts(db_session, plan_id, 2)
    easy = next(w for w in week_two if w.workout_type == "easy")
    long_run = next(w for w in week_two if w.is_long_run)
    easy.duration_minutes = 50
    long_run.duration_minutes = 100
    last_week_durations = [w.duration_minutes for w in _workouts(db_session, plan_id, 1)]
    db_session.commit()

    result = apply_weekly_adjustment(db_session, athlete.id, TODAY)
    db_session.commit()

    assert result.applied is True
    assert result.adjustment.type == "reduce"
    db_session.refresh(easy)
    db_session.refresh(long_run)
    assert easy.duration_minutes == 40
    assert long_run.duration_minutes == 85
    assert [w.duration_minutes for w in _workouts(db_session, plan_id, 1)] == last_week_durations

    adjustment = db_session.scalars(select(WeeklyAdjustment)).one()
    assert adjustment.week_number == 2
    assert adjustment.adjustment_type == "reduce"
    assert adjustment.plan_id == plan_id


def test_repeated_increase_compounds(db_session, athlete, make_goal, caplog):
    plan_id = _plan_started_last_week(db_session, make_goal)
    _log_week(db_session, athlete, _workouts(db_session, plan_id, 1), effort=4)
    easy = next(w for w in _workouts(db_session, plan_id, 2) if w.workout_type == "easy")
    easy.duration_minutes = 60
    db_session.commit()

    assert apply_weekly_adjustment(db_session, athlete.id, TODAY).adjustment.type == "increase"
    db_session.commit()
    db_session.refresh(easy)
    assert easy.duration_minutes == 63

    caplog.set_level(logging.WARNING)
    apply_weekly_adjustment(db_session, athlete.id, TODAY)
    db_session.commit()
    db_session.refresh(easy)
    assert easy.duration_minutes == 66
    assert "already adjusted" in caplog.text

    assert len(get_recent_adjustments(db_session, athlete.id)) == 2


def test_completed_workouts_keep_their_duration(db_session, athlete, make_goal):
    plan_id = _plan_started_last_week(db_session, make_goal)
    done = _workouts(db_session, plan_id, 2)[0]
    _log_week(db_session, athlete, [done], effort=5)
    original = done.duration_minutes

    result = apply_weekly_adjustment(db_session, athlete.id, TODAY)
    db_session.commit()

    assert result.applied is True
    db_session.refresh(done)
    assert done.duration_minutes == original


def test_recent_adjustments_newest_first(db_session, athlete, make_goal):
    plan_id = _plan_started_last_week(db_session, make_goal)
    for week_number, adjustment_type in ((2, "reduce"), (3, "increase"), (4, "reduce")):
        db_session.add(
            WeeklyAdjustment(
                athlete_id=athlete.id,
                plan_id=plan_id,
                week_number=week_number,
                adjustment_type=adjustment_type,
                reason="test",
            )
        )
    db_session.commit()

    recent = get_recent_adjustments(db_session, athlete.id, limit=2)
    assert [a.week_number for a in recent] == [4, 3]


def test_superseded_goal_plan_is_not_counted(db_session, athlete, make_goal):
    planner = TrainingPlanner()
    old_goal = make_goal()
    planner.generate_plan(db_session, old_goal, TODAY - timedelta(weeks=2))
    old_goal.is_active = False
    new_goal = make_goal()
    new_plan_id = planner.generate_plan(db_session, new_goal, TODAY)
    db_session.commit()

    week_one = _workouts(db_session, new_plan_id, 1)
    assert len(week_one) == 4
    _log_week(db_session, athlete, week_one, effort=4, pain=0)

    stats = analyze_weekly_performance(db_session, athlete.id, TODAY + timedelta(weeks=1))

    assert stats.planned_runs == 4
    assert stats.completed_runs == 4
    assert stats.missed_key_workouts == 0
    assert get_adjustment_recommendation(stats).type == "increase"
