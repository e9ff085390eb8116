"""Static workout templates consumed by the training planner."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class WorkoutTemplate:
    """Archetype a scheduled workout is stamped from."""

    type: str
    title: str
    description: str
    duration_multiplier: float
    intensity: str
    is_key_workout: bool
    is_long_run: bool
    tired_alternative: str


WORKOUT_LIBRARY: Dict[str, WorkoutTemplate] = {
    "easy": WorkoutTemplate(
        type="easy",
        title="Easy Run",
        description=(
            "Run at a comfortable, conversational pace. "
            "You should be able to hold a conversation throughout."
        ),
        duration_multiplier=1.0,
        intensity="low",
        is_key_workout=False,
        is_long_run=False,
        tired_alternative="Take a complete rest day or do a 20-minute walk instead.",
    ),
    "long": WorkoutTemplate(
        type="long",
        title="Long Run",
        description=(
            "Your weekly long run. Start slow and maintain an easy, sustainable pace "
            "throughout. Focus on time on feet."
        ),
        duration_multiplier=1.5,
        intensity="low",
        is_key_workout=True,
        is_long_run=True,
        tired_alternative="Reduce duration by 20-30% but still complete the run at an easy effort.",
    ),
    "tempo": WorkoutTemplate(
        type="tempo",
        title="Tempo Run",
        description=(
            'Warm up for 10 minutes, then run at a "comfortably hard" pace for the main '
            "portion. Cool down for 10 minutes."
        ),
        duration_multiplier=1.1,
        intensity="moderate",
        is_key_workout=True,
        is_long_run=False,
        tired_alternative="Convert to an easy run at the same duration.",
    ),
    "interval": WorkoutTemplate(
        type="interval",
        title="Interval Training",
        description=(
            "Warm up 10 minutes. Run hard efforts with recovery jogs between. "
            "Intensity should be challenging but controlled."
        ),
        duration_multiplier=0.9,
        intensity="high",
        is_key_workout=True,
        is_long_run=False,
        tired_alternative="Reduce the number of intervals by half, or convert to a tempo run.",
    ),
}


def get_workout_templates(experience_level: str, phase: str) -> List[WorkoutTemplate]:
    """
    Return the workout vocabulary available for one week.

    Easy and long runs are always offered. Tempo runs are added for anyone
    past the beginner stage; intervals only for advanced athletes, or for
    intermediates during the peak phase.

    Args:
        experience_level: beginner, intermediate or advanced
        phase: build, peak or taper

    Returns:
        Ordered list of templates (easy, long, tempo, interval)
    """
    templates = [WORKOUT_LIBRARY["easy"], WORKOUT_LIBRARY["long"]]

    if experience_level != "beginner":
        templates.append(WORKOUT_LIBRARY["tempo"])

    if experience_level == "advanced" or (experience_level == "intermediate" and phase == "peak"):
        templates.append(WORKOUT_LIBRARY["interval"])

    return templates


def key_templates(templates: List[WorkoutTemplate]) -> List[WorkoutTemplate]:
    """Key sessions other than the long run, in catalog order."""
    return [t for t in templates if t.is_key_workout and not t.is_long_run]
