"""SQLAlchemy ORM models for goals, plans, workouts and run logs."""
from datetime import date, datetime
from sqlalchemy import Integer, Date, DateTime, String, Boolean, Text, ForeignKey, JSON, Index, exists
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column, relationship

from runcoach.database import Base


class Athlete(Base):
    """Athlete identity record; authentication lives outside this service."""

    __tablename__ = "athletes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    goals: Mapped[list["Goal"]] = relationship("Goal", back_populates="athlete", cascade="all, delete-orphan")


class Goal(Base):
    """An athlete's race target and weekly availability."""

    __tablename__ = "goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    athlete_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    race_distance: Mapped[str] = mapped_column(String(20), nullable=False)  # 5k, 10k, half, marathon
    race_date: Mapped[date] = mapped_column(Date, nullable=False)
    target_time: Mapped[int | None] = mapped_column(Integer, nullable=True)  # minutes
    experience_level: Mapped[str] = mapped_column(String(20), nullable=False)  # beginner, intermediate, advanced

    # Current fitness snapshot
    current_frequency: Mapped[int] = mapped_column(Integer, nullable=False)  # runs per week
    longest_recent_run: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes

    # Availability
    available_days: Mapped[list] = mapped_column(JSON, nullable=False)  # weekday names
    max_weekday_time: Mapped[int] = mapped_column(Integer, nullable=False)
    max_weekend_time: Mapped[int] = mapped_column(Integer, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    athlete: Mapped["Athlete"] = relationship("Athlete", back_populates="goals")
    plan: Mapped["TrainingPlan | None"] = relationship(
        "TrainingPlan", back_populates="goal", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_goals_athlete_active", "athlete_id", "is_active"),
    )


class TrainingPlan(Base):
    """Materialised calendar of workouts for one goal."""

    __tablename__ = "training_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    goal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True
    )
    athlete_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)  # race day

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship
    goal: Mapped["Goal"] = relationship("Goal", back_populates="plan")
    workouts: Mapped[list["Workout"]] = relationship(
        "Workout", back_populates="plan", cascade="all, delete-orphan", order_by="Workout.date"
    )


class Workout(Base):
    """Individual scheduled session within a training plan."""

    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plan_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    athlete_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-based

    # Workout details
    workout_type: Mapped[str] = mapped_column(String(20), nullable=False)  # easy, tempo, interval, long
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    intensity: Mapped[str] = mapped_column(String(20), nullable=False)  # low, moderate, high
    tired_alternative: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_key_workout: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_long_run: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    plan: Mapped["TrainingPlan"] = relationship("TrainingPlan", back_populates="workouts")
    run_log: Mapped["RunLog | None"] = relationship("RunLog", back_populates="workout", uselist=False)

    __table_args__ = (
        Index("ix_workouts_plan_week", "plan_id", "week_number"),
        Index("ix_workouts_athlete_date", "athlete_id", "date"),
    )

    @hybrid_property
    def completed(self) -> bool:
        """True when a completing run log points at this workout."""
        return self.run_log is not None and bool(self.run_log.completed)

    @completed.expression
    def completed(cls):
        return exists().where(RunLog.workout_id == cls.id, RunLog.completed.is_(True))


class RunLog(Base):
    """An athlete's record of a planned or unplanned run."""

    __tablename__ = "run_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    athlete_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Back-reference only; deleting the workout keeps the log
    workout_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("workouts.id", ondelete="SET NULL"), unique=True, nullable=True
    )
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    effort_level: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-10
    pain_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # 0-10
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_unplanned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    workout: Mapped["Workout | None"] = relationship("Workout", back_populates="run_log")


class WeeklyAdjustment(Base):
    """Append-only audit trail of automatic volume changes."""

    __tablename__ = "weekly_adjustments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    athlete_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    plan_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    adjustment_type: Mapped[str] = mapped_column(String(20), nullable=False)  # reduce, increase
    reason: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
