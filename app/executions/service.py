"""Training execution service.

Owns the lifecycle of a performed workout:

    start  -> IN_PROGRESS --upsert--> IN_PROGRESS
                          --complete--> COMPLETED (terminal)
                          --cancel--> deleted

All functions take the open database session and the explicit principal.
They flush but never commit; the caller's get_session() scope makes every
operation a single transaction.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone

from loguru import logger
from sqlalchemy.orm import Session

from app.core.errors import InvalidArgumentError, NotFoundError
from app.executions.models import (
    COUNT_MAX_VALUE,
    NOTES_MAX_LENGTH,
    ExecutedExercise,
    ExecutionStatus,
    TrainingExecution,
)
from app.executions.ownership import assert_owner, require_principal
from app.executions.repository import TrainingExecutionRepository
from app.sessions.catalog import get_exercise, get_session_with_planned_exercises


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_notes(notes: str | None) -> str | None:
    if notes is None:
        return None
    trimmed = notes.strip()
    return trimmed or None


def _require_count(field: str, value: int | None) -> None:
    if value is None or value < 0:
        raise InvalidArgumentError(f"{field} must be >= 0")
    if value > COUNT_MAX_VALUE:
        raise InvalidArgumentError(f"{field} must be <= {COUNT_MAX_VALUE}")


def _require_weight(field: str, value: float | None) -> None:
    if value is None or value < 0:
        raise InvalidArgumentError(f"{field} must be >= 0")
    if not math.isfinite(value):
        raise InvalidArgumentError(f"{field} must be a finite number")


def start_training(session: Session, session_id: str, principal: str | None) -> TrainingExecution:
    """Start a training execution from a session template.

    Copies planned values and exercise name/category into one executed
    exercise per planned exercise. The template's session id, session name
    and plan name are snapshotted so history survives template deletion.

    Args:
        session: Database session
        session_id: Session template ID
        principal: Current user ID, becomes the owner

    Returns:
        The persisted TrainingExecution (IN_PROGRESS)

    Raises:
        UnauthenticatedError: If there is no principal
        NotFoundError: If the session template does not exist
        InvalidArgumentError: If the template has no planned exercises
    """
    user_id = require_principal(principal)
    template = get_session_with_planned_exercises(session, session_id)

    if not template.planned_exercises:
        raise InvalidArgumentError("session must contain at least one exercise")

    execution = TrainingExecution(
        user_id=user_id,
        training_session=template,
        session_id=template.id,
        session_id_snapshot=template.id,
        session_name_snapshot=template.name,
        plan_name_snapshot=template.plan.name if template.plan is not None else None,
        status=ExecutionStatus.IN_PROGRESS,
        started_at=_now(),
        completed_at=None,
    )

    for planned in template.planned_exercises:
        exercise = planned.exercise
        execution.executed_exercises.append(
            ExecutedExercise(
                exercise_id=planned.exercise_id,
                position=planned.order_index,
                exercise_name_snapshot=exercise.name if exercise is not None else None,
                exercise_category_snapshot=exercise.category if exercise is not None else None,
                planned_sets=planned.planned_sets,
                planned_reps=planned.planned_reps,
                planned_weight_kg=planned.planned_weight_kg,
                actual_sets=0,
                actual_reps=0,
                actual_weight_kg=0.0,
                done=False,
                notes=None,
            )
        )

    TrainingExecutionRepository.save(session, execution)
    logger.info(
        "Training started",
        execution_id=execution.id,
        user_id=user_id,
        session_id=template.id,
        exercise_count=len(execution.executed_exercises),
    )
    return execution


def get_training(session: Session, execution_id: str, principal: str | None) -> TrainingExecution:
    """Load a training execution owned by the principal.

    Raises:
        UnauthenticatedError: If there is no principal
        NotFoundError: If the execution does not exist
        ForbiddenError: If the principal is not the owner
    """
    require_principal(principal)
    execution = TrainingExecutionRepository.load(session, execution_id)
    if execution is None:
        raise NotFoundError("training execution not found")
    assert_owner(execution, principal)
    return execution


def upsert_executed_exercise(
    session: Session,
    execution_id: str,
    exercise_id: str,
    actual_sets: int | None,
    actual_reps: int | None,
    actual_weight_kg: float | None,
    done: bool,
    notes: str | None,
    principal: str | None,
) -> TrainingExecution:
    """Record actual values for one exercise of an in-progress execution.

    This is a pure update: the exercise must already be part of the
    execution. Blank name/category snapshots are backfilled from the
    catalog; populated snapshots are never overwritten.

    Raises:
        InvalidArgumentError: If the execution is not IN_PROGRESS, a value is
            missing, negative, not finite or too large for its column, or
            notes are too long
        NotFoundError: If the execution or exercise does not exist, or the
            exercise is not part of the execution
        ForbiddenError: If the principal is not the owner
    """
    execution = get_training(session, execution_id, principal)

    if not execution.is_editable:
        raise InvalidArgumentError("training is not editable")

    _require_count("actual_sets", actual_sets)
    _require_count("actual_reps", actual_reps)
    _require_weight("actual_weight_kg", actual_weight_kg)

    normalized_notes = _normalize_notes(notes)
    if normalized_notes is not None and len(normalized_notes) > NOTES_MAX_LENGTH:
        raise InvalidArgumentError(f"notes must be at most {NOTES_MAX_LENGTH} characters")

    exercise = get_exercise(session, exercise_id)

    target = execution.find_executed_exercise(exercise_id)
    if target is None:
        raise NotFoundError("exercise not part of this execution")

    target.backfill_snapshot(exercise)
    target.record_actuals(
        actual_sets=actual_sets,
        actual_reps=actual_reps,
        actual_weight_kg=float(actual_weight_kg),
        done=done,
        notes=normalized_notes,
    )
    session.flush()

    logger.debug(
        "Executed exercise updated",
        execution_id=execution.id,
        exercise_id=exercise_id,
        done=done,
    )
    return execution


def complete_training(session: Session, execution_id: str, principal: str | None) -> TrainingExecution:
    """Complete an in-progress execution. Completion is terminal.

    Raises:
        InvalidArgumentError: If the execution is already completed
    """
    execution = get_training(session, execution_id, principal)

    if execution.is_completed:
        raise InvalidArgumentError("training already completed")

    execution.mark_completed(_now())
    session.flush()

    logger.info("Training completed", execution_id=execution.id, user_id=execution.user_id)
    return execution


def cancel_training(session: Session, execution_id: str, principal: str | None) -> None:
    """Delete an in-progress execution together with its executed exercises.

    Raises:
        InvalidArgumentError: If the execution is completed
    """
    execution = get_training(session, execution_id, principal)

    if execution.is_completed:
        raise InvalidArgumentError("completed trainings cannot be deleted")

    TrainingExecutionRepository.delete(session, execution)
    logger.info("Training cancelled", execution_id=execution_id, user_id=execution.user_id)


def list_trainings(session: Session, principal: str | None) -> list[TrainingExecution]:
    """All executions of the principal, newest first."""
    user_id = require_principal(principal)
    return TrainingExecutionRepository.find_by_owner(session, user_id)


def list_trainings_for_session(session: Session, session_id: str, principal: str | None) -> list[TrainingExecution]:
    """Executions of the principal produced by a session template.

    Includes executions detached from a deleted template through their
    session id snapshot.
    """
    user_id = require_principal(principal)
    return TrainingExecutionRepository.find_by_session_or_snapshot(session, session_id, user_id)
