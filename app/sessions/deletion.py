"""Session template deletion with history preservation.

Deleting a session template never deletes the trainings performed from it.
Inside one transaction, and strictly in this order:

1. load every execution still linked to the template
2. backfill blank snapshot fields (session id, session name, plan name)
3. detach the executions from the template
4. flush the detached executions
5. delete the template row

If anything fails before step 5 the transaction rolls back and the template
stays, which is safe. The template is never deleted before its executions
are backfilled.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.db.models import TrainingSession
from app.executions.models import TrainingExecution
from app.executions.repository import TrainingExecutionRepository


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def detach_executions(executions: list[TrainingExecution], template: TrainingSession) -> None:
    """Freeze template identity into each execution and drop the live reference.

    Populated snapshots are kept as they are, so running this again (or on
    executions detached earlier) never rewrites history.
    """
    plan_name = template.plan.name if template.plan is not None else None

    for execution in executions:
        if execution.session_id_snapshot is None:
            execution.session_id_snapshot = template.id
        if _is_blank(execution.session_name_snapshot):
            execution.session_name_snapshot = template.name
        if _is_blank(execution.plan_name_snapshot):
            execution.plan_name_snapshot = plan_name
        execution.detach_from_session()


def delete_session_template(session: Session, session_id: str) -> int:
    """Delete a session template after detaching its executions.

    Args:
        session: Database session (one transaction for the whole sequence)
        session_id: Session template ID

    Returns:
        Number of executions that were detached

    Raises:
        NotFoundError: If the session template does not exist
    """
    template = session.get(TrainingSession, session_id)
    if template is None:
        raise NotFoundError("session not found")

    executions = TrainingExecutionRepository.find_by_template(session, session_id)
    if executions:
        detach_executions(executions, template)
        TrainingExecutionRepository.save_all(session, executions)

    session.delete(template)
    session.flush()

    logger.info(
        "Session template deleted",
        session_id=session_id,
        detached_executions=len(executions),
    )
    return len(executions)
