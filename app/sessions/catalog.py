"""Read-only lookups for session templates and exercises.

These are the only ways the execution core reads template data.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.errors import NotFoundError
from app.db.models import Exercise, PlannedExercise, TrainingSession


def get_session_with_planned_exercises(session: Session, session_id: str) -> TrainingSession:
    """Load a session template together with its plan and planned exercises.

    Raises:
        NotFoundError: If the session template does not exist
    """
    stmt = (
        select(TrainingSession)
        .where(TrainingSession.id == session_id)
        .options(
            selectinload(TrainingSession.plan),
            selectinload(TrainingSession.planned_exercises).selectinload(PlannedExercise.exercise),
        )
    )
    template = session.execute(stmt).scalar_one_or_none()
    if template is None:
        raise NotFoundError("session not found")
    return template


def get_exercise(session: Session, exercise_id: str) -> Exercise:
    """Resolve an exercise by id.

    Raises:
        NotFoundError: If the exercise does not exist
    """
    exercise = session.get(Exercise, exercise_id)
    if exercise is None:
        raise NotFoundError("exercise not found")
    return exercise
