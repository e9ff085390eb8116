"""Initial training planner schema."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261017_01"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "athletes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "goals",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("race_distance", sa.String(length=20), nullable=False),
        sa.Column("race_date", sa.Date(), nullable=False),
        sa.Column("target_time", sa.Integer(), nullable=True),
        sa.Column("experience_level", sa.String(length=20), nullable=False),
        sa.Column("current_frequency", sa.Integer(), nullable=False),
        sa.Column("longest_recent_run", sa.Integer(), nullable=False),
        sa.Column("available_days", sa.JSON(), nullable=False),
        sa.Column("max_weekday_time", sa.Integer(), nullable=False),
        sa.Column("max_weekend_time", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_goals_athlete_id", "goals", ["athlete_id"])
    op.create_index("ix_goals_athlete_active", "goals", ["athlete_id", "is_active"])

    op.create_table(
        "training_plans",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("goal_id", sa.Integer(), sa.ForeignKey("goals.id", ondelete="CASCADE"), nullable=False),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_training_plans_goal_id", "training_plans", ["goal_id"])
    op.create_index("ix_training_plans_athlete_id", "training_plans", ["athlete_id"])

    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("plan_id", sa.Integer(), sa.ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("workout_type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("intensity", sa.String(length=20), nullable=False),
        sa.Column("tired_alternative", sa.Text(), nullable=True),
        sa.Column("is_key_workout", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_long_run", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_workouts_plan_id", "workouts", ["plan_id"])
    op.create_index("ix_workouts_athlete_id", "workouts", ["athlete_id"])
    op.create_index("ix_workouts_date", "workouts", ["date"])
    op.create_index("ix_workouts_plan_week", "workouts", ["plan_id", "week_number"])
    op.create_index("ix_workouts_athlete_date", "workouts", ["athlete_id", "date"])

    op.create_table(
        "run_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "workout_id",
            sa.Integer(),
            sa.ForeignKey("workouts.id", ondelete="SET NULL"),
            nullable=True,
            unique=True,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("effort_level", sa.Integer(), nullable=False),
        sa.Column("pain_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_unplanned", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_run_logs_athlete_id", "run_logs", ["athlete_id"])
    op.create_index("ix_run_logs_date", "run_logs", ["date"])

    op.create_table(
        "weekly_adjustments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("athlete_id", sa.Integer(), sa.ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("plan_id", sa.Integer(), sa.ForeignKey("training_plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("adjustment_type", sa.String(length=20), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
    )
    op.create_index("ix_weekly_adjustments_athlete_id", "weekly_adjustments", ["athlete_id"])
    op.create_index("ix_weekly_adjustments_plan_id", "weekly_adjustments", ["plan_id"])
    op.create_index("ix_weekly_adjustments_created_at", "weekly_adjustments", ["created_at"])


def downgrade() -> None:
    op.drop_table("weekly_adjustments")
    op.drop_table("run_logs")
    op.drop_table("workouts")
    op.drop_table("training_plans")
    op.drop_table("goals")
    op.drop_table("athletes")
