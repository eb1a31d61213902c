"""Which session template produced an execution.

An execution either still points at its live template, or it was detached
when the template was deleted and only the frozen snapshot triple remains.
Read paths go through resolve_session_display() and never look at the raw
columns, so both cases render the same way.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.db.models import TrainingSession
from app.executions.models import TrainingExecution


@dataclass(frozen=True)
class LiveSession:
    """Execution still linked to an existing session template."""

    session: TrainingSession


@dataclass(frozen=True)
class DetachedSession:
    """Execution whose template is gone; only snapshot values remain."""

    session_id: str | None
    session_name: str | None
    plan_name: str | None


SessionSource = LiveSession | DetachedSession


@dataclass(frozen=True)
class SessionDisplay:
    session_id: str | None
    session_name: str | None
    plan_name: str | None
    detached: bool


def _first_non_blank(*values: str | None) -> str | None:
    for value in values:
        if value is not None and value.strip():
            return value
    return None


def session_source(execution: TrainingExecution) -> SessionSource:
    if execution.training_session is not None:
        return LiveSession(session=execution.training_session)
    return DetachedSession(
        session_id=execution.session_id_snapshot,
        session_name=execution.session_name_snapshot,
        plan_name=execution.plan_name_snapshot,
    )


def resolve_session_display(execution: TrainingExecution) -> SessionDisplay:
    """Resolve display values, preferring live template data over snapshots."""
    source = session_source(execution)
    match source:
        case LiveSession(session=session):
            plan_name = session.plan.name if session.plan is not None else None
            return SessionDisplay(
                session_id=session.id,
                session_name=_first_non_blank(session.name, execution.session_name_snapshot),
                plan_name=_first_non_blank(plan_name, execution.plan_name_snapshot),
                detached=False,
            )
        case DetachedSession(session_id=session_id, session_name=session_name, plan_name=plan_name):
            return SessionDisplay(
                session_id=session_id,
                session_name=session_name,
                plan_name=plan_name,
                detached=True,
            )
    raise TypeError(f"Unknown session source: {source!r}")
