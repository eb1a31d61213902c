"""Training execution database models.

A TrainingExecution records one performed workout. It is created from a
session template and owns one ExecutedExercise per planned exercise.
Execution and executed exercises form a single aggregate: the children are
created together with the parent, are only changed through the parent's
helpers, and are deleted with it.
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.models import Base, Exercise, TrainingSession

NOTES_MAX_LENGTH = 1000
# Upper bound of the INTEGER columns (int32 on PostgreSQL)
COUNT_MAX_VALUE = 2**31 - 1


class ExecutionStatus(enum.Enum):
    """Lifecycle status of a training execution."""

    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TrainingExecution(Base):
    """Training execution table - one performed workout.

    Schema:
    - id: UUID primary key
    - user_id: Owner (Foreign key to users.id, never reassigned)
    - session_id: Live reference to training_sessions.id (nullable, cleared on detach)
    - session_id_snapshot / session_name_snapshot / plan_name_snapshot:
      frozen copy of the template identity, used once the template is gone
    - status: IN_PROGRESS or COMPLETED
    - started_at: Set when the execution is started
    - completed_at: Set once, when the execution is completed

    Constraints:
    - completed_at is set if and only if status is COMPLETED
    - live reference and snapshot id are never both empty
    """

    __tablename__ = "training_executions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False, index=True)
    session_id: Mapped[str | None] = mapped_column(String, ForeignKey("training_sessions.id"), nullable=True, index=True)
    session_id_snapshot: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    session_name_snapshot: Mapped[str | None] = mapped_column(String, nullable=True)
    plan_name_snapshot: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[ExecutionStatus] = mapped_column(
        SQLEnum(ExecutionStatus, name="training_execution_status", create_constraint=True, native_enum=False),
        nullable=False,
        default=ExecutionStatus.IN_PROGRESS,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # One-way: deleting a template must never cascade into executions
    training_session: Mapped[TrainingSession | None] = relationship("TrainingSession", lazy="joined")
    executed_exercises: Mapped[list[ExecutedExercise]] = relationship(
        "ExecutedExercise",
        back_populates="training_execution",
        cascade="all, delete-orphan",
        order_by="ExecutedExercise.position",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "(status = 'COMPLETED' AND completed_at IS NOT NULL) OR (status = 'IN_PROGRESS' AND completed_at IS NULL)",
            name="ck_training_execution_completion",
        ),
        CheckConstraint(
            "session_id IS NOT NULL OR session_id_snapshot IS NOT NULL",
            name="ck_training_execution_session_source",
        ),
    )

    @property
    def is_editable(self) -> bool:
        return self.status == ExecutionStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self.status == ExecutionStatus.COMPLETED

    def find_executed_exercise(self, exercise_id: str) -> ExecutedExercise | None:
        """Return the executed exercise for an exercise id, if it belongs to this execution."""
        for executed in self.executed_exercises:
            if executed.exercise_id == exercise_id:
                return executed
        return None

    def mark_completed(self, completed_at: datetime) -> None:
        self.status = ExecutionStatus.COMPLETED
        self.completed_at = completed_at

    def detach_from_session(self) -> None:
        self.training_session = None
        self.session_id = None


class ExecutedExercise(Base):
    """Executed exercise table - actual values for one planned exercise.

    Planned values and the exercise name/category are copied when the
    execution starts and are never refreshed from the catalog afterwards
    (a blank snapshot is the only thing ever backfilled).
    """

    __tablename__ = "executed_exercises"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    training_execution_id: Mapped[str] = mapped_column(
        String, ForeignKey("training_executions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercises.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exercise_name_snapshot: Mapped[str | None] = mapped_column(String, nullable=True)
    exercise_category_snapshot: Mapped[str | None] = mapped_column(String, nullable=True)
    planned_sets: Mapped[int] = mapped_column(Integer, nullable=False)
    planned_reps: Mapped[int] = mapped_column(Integer, nullable=False)
    planned_weight_kg: Mapped[float] = mapped_column(Float, nullable=False)
    actual_sets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    actual_reps: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    actual_weight_kg: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    done: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str | None] = mapped_column(String(NOTES_MAX_LENGTH), nullable=True)

    training_execution: Mapped[TrainingExecution] = relationship("TrainingExecution", back_populates="executed_exercises")
    exercise: Mapped[Exercise] = relationship("Exercise", lazy="joined")

    __table_args__ = (
        UniqueConstraint("training_execution_id", "exercise_id", name="uq_executed_exercise_execution_exercise"),
        CheckConstraint("actual_sets >= 0", name="ck_executed_exercise_actual_sets"),
        CheckConstraint("actual_reps >= 0", name="ck_executed_exercise_actual_reps"),
        CheckConstraint("actual_weight_kg >= 0", name="ck_executed_exercise_actual_weight"),
    )

    @property
    def display_name(self) -> str | None:
        if self.exercise_name_snapshot and self.exercise_name_snapshot.strip():
            return self.exercise_name_snapshot
        return self.exercise.name if self.exercise is not None else None

    @property
    def display_category(self) -> str | None:
        if self.exercise_category_snapshot and self.exercise_category_snapshot.strip():
            return self.exercise_category_snapshot
        return self.exercise.category if self.exercise is not None else None

    def record_actuals(
        self,
        *,
        actual_sets: int,
        actual_reps: int,
        actual_weight_kg: float,
        done: bool,
        notes: str | None,
    ) -> None:
        self.actual_sets = actual_sets
        self.actual_reps = actual_reps
        self.actual_weight_kg = actual_weight_kg
        self.done = done
        self.notes = notes

    def backfill_snapshot(self, exercise: Exercise) -> None:
        """Fill blank name/category snapshots; populated snapshots are kept."""
        if not self.exercise_name_snapshot or not self.exercise_name_snapshot.strip():
            self.exercise_name_snapshot = exercise.name
        if not self.exercise_category_snapshot or not self.exercise_category_snapshot.strip():
            self.exercise_category_snapshot = exercise.category
