"""Training execution API schemas (Pydantic).

API contract schemas for training execution endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.executions.models import ExecutedExercise, TrainingExecution
from app.executions.source import resolve_session_display


class StartTrainingRequest(BaseModel):
    """Request schema for starting a training from a session template."""

    session_id: str = Field(min_length=1)


class UpsertExecutedExerciseRequest(BaseModel):
    """Request schema for recording actual values of one exercise.

    Value ranges are checked by the service so that state errors take
    precedence and all violations map to the same error type.
    """

    exercise_id: str = Field(min_length=1)
    actual_sets: int
    actual_reps: int
    actual_weight_kg: float
    done: bool = False
    notes: str | None = None


class ExecutedExerciseResponse(BaseModel):
    """Executed exercise schema for API responses."""

    id: str
    exercise_id: str
    exercise_name: str | None
    exercise_category: str | None
    planned_sets: int
    planned_reps: int
    planned_weight_kg: float
    actual_sets: int
    actual_reps: int
    actual_weight_kg: float
    done: bool
    notes: str | None

    @classmethod
    def from_model(cls, executed: ExecutedExercise) -> ExecutedExerciseResponse:
        return cls(
            id=executed.id,
            exercise_id=executed.exercise_id,
            exercise_name=executed.display_name,
            exercise_category=executed.display_category,
            planned_sets=executed.planned_sets,
            planned_reps=executed.planned_reps,
            planned_weight_kg=executed.planned_weight_kg,
            actual_sets=executed.actual_sets,
            actual_reps=executed.actual_reps,
            actual_weight_kg=executed.actual_weight_kg,
            done=executed.done,
            notes=executed.notes,
        )


class TrainingExecutionResponse(BaseModel):
    """Training execution schema for API responses.

    session_id / session_name / plan_name come from the live template when
    it still exists and from the snapshot otherwise (detached=True).
    """

    id: str
    session_id: str | None
    session_name: str | None
    plan_name: str | None
    detached: bool
    status: str
    started_at: datetime
    completed_at: datetime | None
    executed_exercises: list[ExecutedExerciseResponse]

    @classmethod
    def from_model(cls, execution: TrainingExecution) -> TrainingExecutionResponse:
        display = resolve_session_display(execution)
        return cls(
            id=execution.id,
            session_id=display.session_id,
            session_name=display.session_name,
            plan_name=display.plan_name,
            detached=display.detached,
            status=execution.status.value,
            started_at=execution.started_at,
            completed_at=execution.completed_at,
            executed_exercises=[ExecutedExerciseResponse.from_model(e) for e in execution.executed_exercises],
        )


class StreakResponse(BaseModel):
    """Current completed-training streak."""

    streak_days: int
