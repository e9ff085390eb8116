"""Unit tests for weekday placement."""
from __future__ import annotations

from runcoach.models.workout_library import get_workout_templates
from runcoach.services.day_placer import (
    Weekday,
    circular_distance,
    is_adjacent,
    parse_weekdays,
    pick_key_day,
    pick_long_run_day,
    place_week,
)


def test_weekday_offsets_are_monday_first():
    assert Weekday.MONDAY.offset == 0
    assert Weekday.SATURDAY.offset == 5
    assert Weekday.SUNDAY.offset == 6


def test_adjacency_wraps_around_the_week():
    assert circular_distance(Weekday.SUNDAY, Weekday.SATURDAY) == 1
    assert is_adjacent(Weekday.SUNDAY, Weekday.SATURDAY)
    assert circular_distance(Weekday.TUESDAY, Weekday.SATURDAY) == 3
    assert not is_adjacent(Weekday.THURSDAY, Weekday.SATURDAY)


def test_parse_weekdays_dedupes_and_orders_from_sunday():
    days = parse_weekdays(["Saturday", "tuesday", "sunday", "tuesday", "someday"])
    assert days == [Weekday.SUNDAY, Weekday.TUESDAY, Weekday.SATURDAY]


def test_long_run_prefers_the_latest_weekend_day():
    days = parse_weekdays(["tuesday", "thursday", "saturday", "sunday"])
    assert pick_long_run_day(days) is Weekday.SATURDAY


def test_long_run_falls_back_to_the_last_day_without_weekend():
    assert pick_long_run_day(parse_weekdays(["monday", "wednesday"])) is Weekday.WEDNESDAY


def test_key_day_takes_middle_non_adjacent_candidate():
    remaining = parse_weekdays(["tuesday", "thursday", "sunday"])
    assert pick_key_day(remaining, Weekday.SATURDAY) is Weekday.THURSDAY


def test_key_day_falls_back_to_first_day_when_all_adjacent():
    remaining = parse_weekdays(["friday", "sunday"])
    assert pick_key_day(remaining, Weekday.SATURDAY) is Weekday.SUNDAY


def test_key_day_without_long_run_uses_first_day():
    assert pick_key_day(parse_weekdays(["wednesday", "friday"]), None) is Weekday.WEDNESDAY
    assert pick_key_day([], Weekday.SATURDAY) is None


def test_beginner_week_fills_every_day_with_easy_or_long():
    days = parse_weekdays(["monday", "wednesday"])
    placed = place_week(days, 100, get_workout_templates("beginner", "build"), 60, 90)

    assert [(p.template.type, p.day) for p in placed] == [
        ("long", Weekday.WEDNESDAY),
        ("easy", Weekday.MONDAY),
    ]
    assert placed[0].duration_minutes == 35
    # 65 minutes left, capped by the weekday ceiling
    assert placed[1].duration_minutes == 60


def test_intermediate_week_places_long_key_then_easy():
    days = parse_weekdays(["tuesday", "thursday", "saturday", "sunday"])
    placed = place_week(days, 200, get_workout_templates("intermediate", "build"), 60, 90)

    by_day = {p.day: p for p in placed}
    assert by_day[Weekday.SATURDAY].template.type == "long"
    assert by_day[Weekday.SATURDAY].duration_minutes == 70
    assert by_day[Weekday.THURSDAY].template.type == "tempo"
    assert by_day[Weekday.THURSDAY].duration_minutes == 39
    assert by_day[Weekday.SUNDAY].template.type == "easy"
    assert by_day[Weekday.TUESDAY].template.type == "easy"
    assert by_day[Weekday.SUNDAY].duration_minutes == 46


def test_durations_respect_weekday_and_weekend_ceilings():
    days = parse_weekdays(["monday", "saturday"])
    placed = place_week(days, 400, get_workout_templates("beginner", "peak"), 45, 90)

    assert placed[0].day is Weekday.SATURDAY
    assert placed[0].duration_minutes == 90
    assert placed[1].duration_minutes == 45


def test_key_session_alternates_when_intervals_are_available():
    days = parse_weekdays(["tuesday", "thursday", "saturday"])
    templates = get_workout_templates("advanced", "build")

    odd = place_week(days, 200, templates, 60, 90, week_number=1)
    even = place_week(days, 200, templates, 60, 90, week_number=2)

    assert [p.template.type for p in odd] == ["long", "tempo", "easy"]
    assert [p.template.type for p in even] == ["long", "interval", "easy"]


def test_no_days_means_no_workouts():
    assert place_week([], 100, get_workout_templates("advanced", "peak"), 60, 90) == []
