"""Local repair of a single plan week after an availability change."""
from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from runcoach.models.database_models import Workout
from runcoach.services.day_placer import Weekday, parse_weekdays, pick_key_day, pick_long_run_day
from runcoach.services.training_planner import week_start


logger = logging.getLogger(__name__)


_COPIED_FIELDS = (
    "plan_id",
    "athlete_id",
    "week_number",
    "workout_type",
    "title",
    "description",
    "duration_minutes",
    "intensity",
    "tired_alternative",
)


class WeekRescheduler:
    """Moves an existing week's workouts onto a new set of weekdays."""

    @staticmethod
    def _copy_to(original: Workout, day: Weekday, monday: date, is_key: bool, is_long: bool) -> Workout:
        fields = {name: getattr(original, name) for name in _COPIED_FIELDS}
        return Workout(
            **fields,
            date=monday + timedelta(days=day.offset),
            is_key_workout=is_key,
            is_long_run=is_long,
        )

    def reschedule_week(
        self,
        session: Session,
        plan_id: int,
        athlete_id: int,
        week_number: int,
        new_available_days: Iterable[str],
    ) -> list[Workout]:
        """
        Re-date one week's workouts to fit new available days.

        Workout content (type, title, description, duration, intensity, tired
        alternative) is carried over unchanged; only dates move. The long run
        and the key session are placed with the same priorities as plan
        generation. Easy runs then fill the remaining days in their original
        order; easy runs left without a day are dropped. Other weeks are not
        touched.

        Args:
            session: Database session
            plan_id: Plan owning the week
            athlete_id: Owner of the plan
            week_number: 1-based week to repair
            new_available_days: Weekday names now available

        Returns:
            The newly scheduled workouts (empty if the week had none)
        """
        workouts = session.scalars(
            select(Workout)
            .where(
                Workout.plan_id == plan_id,
                Workout.athlete_id == athlete_id,
                Workout.week_number == week_number,
            )
            .order_by(Workout.id)
        ).all()

        if not workouts:
            logger.info("No workouts in plan %s week %s; nothing to reschedule", plan_id, week_number)
            return []

        long_run = next((w for w in workouts if w.is_long_run), None)
        key_workout = next((w for w in workouts if w.is_key_workout and not w.is_long_run), None)
        easy_runs = [w for w in workouts if not w.is_key_workout and not w.is_long_run]

        monday = week_start(workouts[0].date)

        for workout in workouts:
            session.delete(workout)
        session.flush()

        days = parse_weekdays(new_available_days)
        if not days:
            logger.warning("Week %s of plan %s cleared: no usable days supplied", week_number, plan_id)
            return []

        rescheduled: list[Workout] = []
        used: list[Weekday] = []
        long_run_day: Weekday | None = None

        if long_run is not None:
            long_run_day = pick_long_run_day(days)
            rescheduled.append(self._copy_to(long_run, long_run_day, monday, True, True))
            used.append(long_run_day)

        if key_workout is not None and len(days) > 1:
            key_day = pick_key_day([d for d in days if d not in used], long_run_day)
            if key_day is not None:
                rescheduled.append(self._copy_to(key_workout, key_day, monday, True, False))
                used.append(key_day)

        remaining_days = [d for d in days if d not in used]
        for easy_run, day in zip(easy_runs, remaining_days):
            rescheduled.append(self._copy_to(easy_run, day, monday, False, False))

        dropped = len(easy_runs) - min(len(easy_runs), len(remaining_days))
        if dropped:
            logger.info(
                "Dropped %d easy run(s) from plan %s week %s: only %d day(s) left",
                dropped,
                plan_id,
                week_number,
                len(remaining_days),
            )

        session.add_all(rescheduled)
        session.flush()

        logger.info(
            "Rescheduled plan %s week %s onto %s (%d workouts)",
            plan_id,
            week_number,
            ", ".join(d.name.lower() for d in days),
            len(rescheduled),
        )
        return rescheduled
