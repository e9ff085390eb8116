"""Pydantic models describing API payloads."""
from datetime import date, datetime
from datetime import date as date_type
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from runcoach.services.day_placer import WEEKDAY_NAMES


RaceDistance = Literal["5k", "10k", "half", "marathon"]
ExperienceLevel = Literal["beginner", "intermediate", "advanced"]


def _validate_available_days(value: list[str]) -> list[str]:
    """Lower-case weekday names; require at least two distinct days."""
    normalised: list[str] = []
    for name in value:
        day = name.strip().lower()
        if day not in WEEKDAY_NAMES:
            raise ValueError(f"Unknown weekday: {name}")
        if day not in normalised:
            normalised.append(day)
    if len(normalised) < 2:
        raise ValueError("At least 2 available days required")
    return normalised


# Athlete Schemas
class AthleteCreate(BaseModel):
    """Schema for registering an athlete."""

    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=320)


class AthleteResponse(AthleteCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


# Goal Schemas
class GoalCreate(BaseModel):
    """Schema for creating a goal; blank fitness fields fall back to settings."""

    race_distance: RaceDistance
    race_date: date
    target_time: int | None = Field(None, ge=1, description="Target finishing time in minutes")
    experience_level: ExperienceLevel
    current_frequency: int | None = Field(None, ge=1, le=14)
    longest_recent_run: int | None = Field(None, ge=0, le=600)
    available_days: list[str]
    max_weekday_time: int | None = Field(None, ge=10, le=300)
    max_weekend_time: int | None = Field(None, ge=10, le=400)

    @field_validator("available_days")
    @classmethod
    def validate_available_days(cls, value: list[str]) -> list[str]:
        return _validate_available_days(value)


class GoalUpdate(BaseModel):
    """Schema for availability changes to an existing goal."""

    available_days: list[str] | None = None
    max_weekday_time: int | None = Field(None, ge=10, le=300)
    max_weekend_time: int | None = Field(None, ge=10, le=400)

    @field_validator("available_days")
    @classmethod
    def validate_available_days(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _validate_available_days(value)


class GoalResponse(BaseModel):
    id: int
    race_distance: str
    race_date: date
    target_time: int | None = None
    experience_level: str
    current_frequency: int
    longest_recent_run: int
    available_days: list[str]
    max_weekday_time: int
    max_weekend_time: int
    is_active: bool

    class Config:
        from_attributes = True


class TrainingPlanSummary(BaseModel):
    id: int
    start_date: date
    end_date: date

    class Config:
        from_attributes = True


class GoalWithPlan(BaseModel):
    """Goal together with the id or summary of its plan."""

    goal: GoalResponse | None = None
    plan: TrainingPlanSummary | None = None
    plan_id: int | None = None
    message: str | None = None


# Workout Schemas
class RunLogSummary(BaseModel):
    id: int
    duration_minutes: int
    effort_level: int
    pain_level: int
    notes: str | None = None

    class Config:
        from_attributes = True


class WorkoutResponse(BaseModel):
    """Schema for scheduled workout API response."""

    id: int
    date: date
    week_number: int
    workout_type: str
    title: str
    description: str
    duration_minutes: int
    intensity: str
    tired_alternative: str | None = None
    is_key_workout: bool
    is_long_run: bool
    completed: bool

    class Config:
        from_attributes = True


class WorkoutDetail(WorkoutResponse):
    log: RunLogSummary | None = None


class WeekResponse(BaseModel):
    week_number: int
    workouts: list[WorkoutResponse] = []
    total_minutes: int = 0
    completed_count: int = 0


class ThisWeekResponse(BaseModel):
    week_start: date
    week_end: date
    week_number: int
    workouts: list[WorkoutResponse] = []
    plan: TrainingPlanSummary | None = None


class PlanWithWeeks(BaseModel):
    plan: TrainingPlanSummary | None = None
    race_distance: str | None = None
    race_date: date | None = None
    available_days: list[str] = []
    weeks: list[WeekResponse] = []


class RescheduleRequest(BaseModel):
    available_days: list[str]

    @field_validator("available_days")
    @classmethod
    def validate_available_days(cls, value: list[str]) -> list[str]:
        return _validate_available_days(value)


# Run Log Schemas
class RunLogCreate(BaseModel):
    """Schema for logging a run; omit workout_id for an unplanned run."""

    workout_id: int | None = None
    completed: bool = True
    duration_minutes: int = Field(ge=0, le=1440)
    effort_level: int = Field(ge=1, le=10)
    pain_level: int = Field(0, ge=0, le=10)
    notes: str | None = None
    date: date_type | None = None


class RunLogUpdate(BaseModel):
    completed: bool | None = None
    duration_minutes: int | None = Field(None, ge=0, le=1440)
    effort_level: int | None = Field(None, ge=1, le=10)
    pain_level: int | None = Field(None, ge=0, le=10)
    notes: str | None = None


class RunLogResponse(BaseModel):
    id: int
    workout_id: int | None = None
    date: date
    completed: bool
    duration_minutes: int
    effort_level: int
    pain_level: int
    notes: str | None = None
    is_unplanned: bool
    workout_title: str | None = None
    workout_type: str | None = None

    class Config:
        from_attributes = True


class RunLogPage(BaseModel):
    logs: list[RunLogResponse] = []
    total: int
    has_more: bool


# Adjustment Schemas
class RecommendationResponse(BaseModel):
    type: str
    reason: str
    volume_multiplier: float
    intensity_adjustment: int

    class Config:
        from_attributes = True


class AdjustmentCheckResponse(BaseModel):
    adjustment_applied: bool
    recommendation: RecommendationResponse | None = None


class WeeklyAdjustmentResponse(BaseModel):
    week_number: int
    adjustment_type: str
    reason: str
    created_at: datetime

    class Config:
        from_attributes = True
