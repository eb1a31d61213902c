from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all database models."""


class User(Base):
    """User table for authentication and ownership.

    Stores:
    - id: User ID (string UUID format)
    - username: Login name (unique)
    - email: User email (optional, unique when set)
    - password_hash: Hashed password (optional)
    - is_active: Inactive users are rejected by the auth dependency
    - created_at: Timestamp when user was created
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    username: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)
    password_hash: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))


class Exercise(Base):
    """Exercise catalog entry.

    Name and category are copied into executed exercises as a snapshot,
    so later edits here never rewrite training history.
    """

    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class TrainingPlan(Base):
    """Training plan grouping session templates."""

    __tablename__ = "training_plans"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    sessions: Mapped[list[TrainingSession]] = relationship(
        "TrainingSession",
        back_populates="plan",
        cascade="all, delete-orphan",
    )


class TrainingSession(Base):
    """Training session template - the planned workout an execution starts from.

    Owns its planned exercises. Training executions reference it through a
    nullable foreign key and are detached (never deleted) before a session
    is removed, see app.sessions.deletion.
    """

    __tablename__ = "training_sessions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    plan_id: Mapped[str] = mapped_column(String, ForeignKey("training_plans.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    order_in_plan: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    plan: Mapped[TrainingPlan] = relationship("TrainingPlan", back_populates="sessions")
    planned_exercises: Mapped[list[PlannedExercise]] = relationship(
        "PlannedExercise",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="PlannedExercise.order_index",
    )


class PlannedExercise(Base):
    """Planned exercise within a session template (sets/reps/weight targets)."""

    __tablename__ = "planned_exercises"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id, index=True)
    session_id: Mapped[str] = mapped_column(String, ForeignKey("training_sessions.id"), nullable=False, index=True)
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercises.id"), nullable=False, index=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    planned_sets: Mapped[int] = mapped_column(Integer, nullable=False)
    planned_reps: Mapped[int] = mapped_column(Integer, nullable=False)
    planned_weight_kg: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    session: Mapped[TrainingSession] = relationship("TrainingSession", back_populates="planned_exercises")
    exercise: Mapped[Exercise] = relationship("Exercise")

    __table_args__ = (
        UniqueConstraint("session_id", "order_index", name="uq_planned_exercise_session_order"),
        UniqueConstraint("session_id", "exercise_id", name="uq_planned_exercise_session_exercise"),
        CheckConstraint("planned_sets >= 1", name="ck_planned_exercise_sets"),
        CheckConstraint("planned_reps >= 1", name="ck_planned_exercise_reps"),
        CheckConstraint("planned_weight_kg >= 0", name="ck_planned_exercise_weight"),
    )
