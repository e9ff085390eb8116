"""Weekday placement policy for a week of workouts."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

from runcoach.models.workout_library import WorkoutTemplate, key_templates
from runcoach.services.volume_curve import round_minutes


class Weekday(IntEnum):
    """Day numbers with Sunday as 0, matching the placement tie-breaks."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def is_weekend(self) -> bool:
        return self in (Weekday.SATURDAY, Weekday.SUNDAY)

    @property
    def offset(self) -> int:
        """Days after Monday in a Monday-first week."""
        return 6 if self is Weekday.SUNDAY else self.value - 1

    @classmethod
    def from_name(cls, name: str) -> "Weekday | None":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return None


WEEKDAY_NAMES = [day.name.lower() for day in Weekday]


def parse_weekdays(names: Iterable[str]) -> list[Weekday]:
    """Map weekday names to distinct Weekday values ordered Sunday..Saturday."""
    days = {day for day in (Weekday.from_name(n) for n in names) if day is not None}
    return sorted(days)


def circular_distance(a: int, b: int) -> int:
    """Days between two weekdays going whichever way round the week is shorter."""
    diff = abs(a - b)
    return min(diff, 7 - diff)


def is_adjacent(a: int, b: int) -> bool:
    return circular_distance(a, b) <= 1


def pick_long_run_day(days: list[Weekday]) -> Weekday:
    """Latest weekend day if any is available, otherwise the last day of the week."""
    weekend = [d for d in days if d.is_weekend]
    return max(weekend) if weekend else max(days)


def pick_key_day(available: list[Weekday], long_run_day: Weekday | None) -> Weekday | None:
    """
    Choose a day for the key session.

    Prefers days not adjacent to the long run, taking the middle one of those
    candidates; falls back to the first available day.
    """
    if not available:
        return None
    if long_run_day is None:
        return available[0]

    candidates = [d for d in available if not is_adjacent(d, long_run_day)]
    if candidates:
        return candidates[len(candidates) // 2]
    return available[0]


def day_ceiling(day: Weekday, max_weekday_time: int, max_weekend_time: int) -> int:
    return max_weekend_time if day.is_weekend else max_weekday_time


@dataclass(frozen=True)
class PlacedWorkout:
    """A template pinned to a weekday with its planned duration."""

    template: WorkoutTemplate
    day: Weekday
    duration_minutes: int


def place_week(
    days: list[Weekday],
    weekly_volume: float,
    templates: list[WorkoutTemplate],
    max_weekday_time: int,
    max_weekend_time: int,
    week_number: int = 1,
) -> list[PlacedWorkout]:
    """
    Assign one week's workouts to the permitted weekdays.

    The long run goes first (35% of volume), then a key session (30% of what
    is left) when the catalog offers one, then every remaining day gets an
    equal share of the rest as an easy run. Each duration is capped by the
    weekday or weekend ceiling of its day. When both tempo and intervals are
    on offer they alternate by week, tempo on odd weeks.

    Args:
        days: Permitted weekdays, ordered Sunday..Saturday
        weekly_volume: Target minutes for the week
        templates: Catalog for the week from get_workout_templates
        max_weekday_time: Ceiling for Monday-Friday sessions
        max_weekend_time: Ceiling for Saturday/Sunday sessions
        week_number: 1-based week, used to rotate key sessions

    Returns:
        Placed workouts: long run, optional key session, then easy runs
    """
    if not days:
        return []

    by_type = {t.type: t for t in templates}
    placed: list[PlacedWorkout] = []

    long_run_day = pick_long_run_day(days)
    long_run_duration = min(
        round_minutes(weekly_volume * 0.35),
        day_ceiling(long_run_day, max_weekday_time, max_weekend_time),
    )
    placed.append(PlacedWorkout(by_type["long"], long_run_day, long_run_duration))
    remaining_volume = weekly_volume - long_run_duration

    used = {long_run_day}
    key_options = key_templates(templates)
    if key_options:
        key_day = pick_key_day([d for d in days if d not in used], long_run_day)
        if key_day is not None:
            key_template = key_options[(week_number - 1) % len(key_options)]
            key_duration = min(
                round_minutes(remaining_volume * 0.3),
                day_ceiling(key_day, max_weekday_time, max_weekend_time),
            )
            placed.append(PlacedWorkout(key_template, key_day, key_duration))
            remaining_volume -= key_duration
            used.add(key_day)

    easy_days = [d for d in days if d not in used]
    if easy_days:
        easy_duration = round_minutes(remaining_volume / len(easy_days))
        for day in easy_days:
            duration = min(easy_duration, day_ceiling(day, max_weekday_time, max_weekend_time))
            placed.append(PlacedWorkout(by_type["easy"], day, duration))

    return placed
