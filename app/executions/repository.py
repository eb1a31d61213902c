"""Repository for training execution aggregates.

Every method works on the whole aggregate (execution plus executed
exercises); callers never load or store executed exercises on their own.
Methods flush but never commit - the surrounding get_session() scope owns
the transaction.
"""

from __future__ import annotations

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from app.executions.models import ExecutionStatus, TrainingExecution


class TrainingExecutionRepository:
    """Persistence port for TrainingExecution aggregates."""

    @staticmethod
    def load(session: Session, execution_id: str) -> TrainingExecution | None:
        return session.get(TrainingExecution, execution_id)

    @staticmethod
    def save(session: Session, execution: TrainingExecution) -> TrainingExecution:
        session.add(execution)
        session.flush()
        return execution

    @staticmethod
    def save_all(session: Session, executions: list[TrainingExecution]) -> None:
        session.add_all(executions)
        session.flush()

    @staticmethod
    def delete(session: Session, execution: TrainingExecution) -> None:
        session.delete(execution)
        session.flush()

    @staticmethod
    def find_by_owner(session: Session, user_id: str) -> list[TrainingExecution]:
        """All executions of a user, newest first."""
        stmt = (
            select(TrainingExecution)
            .where(TrainingExecution.user_id == user_id)
            .order_by(TrainingExecution.started_at.desc())
        )
        return list(session.execute(stmt).unique().scalars().all())

    @staticmethod
    def find_completed_by_owner(session: Session, user_id: str) -> list[TrainingExecution]:
        """Completed executions of a user with a completion time, most recently completed first."""
        stmt = (
            select(TrainingExecution)
            .where(
                TrainingExecution.user_id == user_id,
                TrainingExecution.status == ExecutionStatus.COMPLETED,
                TrainingExecution.completed_at.is_not(None),
            )
            .order_by(TrainingExecution.completed_at.desc())
        )
        return list(session.execute(stmt).unique().scalars().all())

    @staticmethod
    def find_by_template(session: Session, session_id: str) -> list[TrainingExecution]:
        """Executions still linked to a session template by foreign key (all owners)."""
        stmt = select(TrainingExecution).where(TrainingExecution.session_id == session_id)
        return list(session.execute(stmt).unique().scalars().all())

    @staticmethod
    def find_by_session_or_snapshot(session: Session, session_id: str, user_id: str) -> list[TrainingExecution]:
        """Executions of a user produced by a session, whether still linked or detached."""
        stmt = (
            select(TrainingExecution)
            .where(
                TrainingExecution.user_id == user_id,
                or_(
                    TrainingExecution.session_id == session_id,
                    and_(
                        TrainingExecution.session_id.is_(None),
                        TrainingExecution.session_id_snapshot == session_id,
                    ),
                ),
            )
            .order_by(TrainingExecution.started_at.desc())
        )
        return list(session.execute(stmt).unique().scalars().all())
