"""Weekly training volume curve and phase boundaries."""
from __future__ import annotations

import logging
import math
from typing import Any


logger = logging.getLogger(__name__)


# Peak weekly minutes per race distance
RACE_CONFIGS: dict[str, dict[str, Any]] = {
    "5k": {"base_weeks": 8, "peak_long_run": 45, "peak_weekly_minutes": 150},
    "10k": {"base_weeks": 10, "peak_long_run": 60, "peak_weekly_minutes": 200},
    "half": {"base_weeks": 12, "peak_long_run": 90, "peak_weekly_minutes": 280},
    "marathon": {"base_weeks": 16, "peak_long_run": 150, "peak_weekly_minutes": 360},
}

EXPERIENCE_MULTIPLIERS: dict[str, float] = {
    "beginner": 0.7,
    "intermediate": 1.0,
    "advanced": 1.3,
}

BUILD_FRACTION = 0.6
PEAK_FRACTION = 0.85
MAX_WEEKLY_INCREASE = 1.1


def round_minutes(value: float) -> int:
    """Round half up to whole minutes."""
    return int(math.floor(value + 0.5))


def phase_boundaries(total_weeks: int) -> tuple[int, int]:
    """Return the last build week and the last peak week."""
    return math.floor(total_weeks * BUILD_FRACTION), math.floor(total_weeks * PEAK_FRACTION)


def phase_for_week(week_number: int, total_weeks: int) -> str:
    """Classify a 1-based week as build, peak or taper."""
    build_end, peak_end = phase_boundaries(total_weeks)
    if week_number <= build_end:
        return "build"
    if week_number <= peak_end:
        return "peak"
    return "taper"


def _phase_volume(
    week_number: int,
    total_weeks: int,
    peak_weekly_minutes: float,
    current_frequency: int,
    longest_recent_run: int,
) -> float:
    build_end, peak_end = phase_boundaries(total_weeks)

    if week_number <= build_end:
        progress = week_number / build_end
        start_volume = max(current_frequency * 30, longest_recent_run * 2)
        return start_volume + (peak_weekly_minutes * 0.7 - start_volume) * progress

    if week_number <= peak_end:
        progress = (week_number - build_end) / (peak_end - build_end)
        return peak_weekly_minutes * (0.7 + 0.3 * progress)

    weeks_to_race = total_weeks - week_number
    taper_multiplier = 0.4 + (weeks_to_race / (total_weeks - peak_end)) * 0.4
    return peak_weekly_minutes * taper_multiplier


def weekly_volumes(
    total_weeks: int,
    race_config: dict[str, Any],
    experience_multiplier: float,
    current_frequency: int,
    longest_recent_run: int,
) -> list[float]:
    """
    Compute target minutes for every week of a plan.

    Each week's phase volume (build ramps from the athlete's current load to
    70% of peak, peak climbs to 100%, taper decays toward 40%) is scaled by the
    experience multiplier and then capped at 110% of the previous week. The
    week before the plan counts as ``current_frequency * 30`` minutes.

    Args:
        total_weeks: Number of weeks in the plan (>= 1)
        race_config: Row of RACE_CONFIGS for the goal distance
        experience_multiplier: Value from EXPERIENCE_MULTIPLIERS
        current_frequency: Runs per week the athlete does today
        longest_recent_run: Longest recent run in minutes

    Returns:
        List of unrounded weekly volumes, index 0 being week 1
    """
    peak_minutes = race_config["peak_weekly_minutes"]
    previous = float(current_frequency * 30)
    volumes: list[float] = []

    for week_number in range(1, total_weeks + 1):
        base = _phase_volume(week_number, total_weeks, peak_minutes, current_frequency, longest_recent_run)
        volume = min(base * experience_multiplier, previous * MAX_WEEKLY_INCREASE)
        volumes.append(volume)
        previous = volume

    return volumes


def calculate_weekly_volume(
    week_number: int,
    total_weeks: int,
    race_config: dict[str, Any],
    experience_multiplier: float,
    current_frequency: int,
    longest_recent_run: int,
) -> float:
    """Target minutes for a single 1-based week."""
    volumes = weekly_volumes(total_weeks, race_config, experience_multiplier, current_frequency, longest_recent_run)
    return volumes[week_number - 1]
