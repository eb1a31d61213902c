"""Training execution API routes.

Each endpoint runs inside one get_session() scope, so every operation
commits as a single transaction or not at all. Domain errors propagate to
the exception handler registered in app.main.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from loguru import logger

from app.api.dependencies.auth import get_current_user_id
from app.db.session import get_session
from app.executions.schemas import (
    ExecutedExerciseResponse,
    StartTrainingRequest,
    StreakResponse,
    TrainingExecutionResponse,
    UpsertExecutedExerciseRequest,
)
from app.executions.service import (
    cancel_training,
    complete_training,
    get_training,
    list_trainings,
    list_trainings_for_session,
    start_training,
    upsert_executed_exercise,
)
from app.executions.streak import calculate_completed_streak_days

router = APIRouter(prefix="/api/v1/training-executions", tags=["training-executions"])


@router.post("", response_model=TrainingExecutionResponse, status_code=status.HTTP_201_CREATED)
def start(
    body: StartTrainingRequest,
    request: Request,
    response: Response,
    user_id: str = Depends(get_current_user_id),
) -> TrainingExecutionResponse:
    """Start a training from a session template.

    Status codes:
        - 201: Training started, Location header points to the new execution
        - 400: Session has no planned exercises
        - 404: Session not found
    """
    logger.info("Training start requested", user_id=user_id, session_id=body.session_id)
    with get_session() as session:
        execution = start_training(session, body.session_id, user_id)
        result = TrainingExecutionResponse.from_model(execution)

    response.headers["Location"] = str(request.url_for("get_execution", execution_id=result.id))
    return result


@router.get("", response_model=list[TrainingExecutionResponse])
def list_executions(
    session_id: str | None = Query(default=None, description="Only executions produced by this session template"),
    user_id: str = Depends(get_current_user_id),
) -> list[TrainingExecutionResponse]:
    """List the caller's trainings, newest first."""
    with get_session() as session:
        if session_id:
            executions = list_trainings_for_session(session, session_id, user_id)
        else:
            executions = list_trainings(session, user_id)
        return [TrainingExecutionResponse.from_model(e) for e in executions]


@router.get("/stats/streak", response_model=StreakResponse)
def streak(user_id: str = Depends(get_current_user_id)) -> StreakResponse:
    """Current streak of consecutive days with a completed training."""
    with get_session() as session:
        return StreakResponse(streak_days=calculate_completed_streak_days(session, user_id))


@router.get("/{execution_id}", response_model=TrainingExecutionResponse, name="get_execution")
def get_execution(execution_id: str, user_id: str = Depends(get_current_user_id)) -> TrainingExecutionResponse:
    with get_session() as session:
        return TrainingExecutionResponse.from_model(get_training(session, execution_id, user_id))


@router.get("/{execution_id}/exercises", response_model=list[ExecutedExerciseResponse])
def list_executed_exercises(
    execution_id: str,
    user_id: str = Depends(get_current_user_id),
) -> list[ExecutedExerciseResponse]:
    with get_session() as session:
        execution = get_training(session, execution_id, user_id)
        return [ExecutedExerciseResponse.from_model(e) for e in execution.executed_exercises]


@router.put("/{execution_id}/exercises", response_model=TrainingExecutionResponse)
def upsert_exercise(
    execution_id: str,
    body: UpsertExecutedExerciseRequest,
    user_id: str = Depends(get_current_user_id),
) -> TrainingExecutionResponse:
    """Record actual sets/reps/weight for one exercise of an in-progress training."""
    with get_session() as session:
        execution = upsert_executed_exercise(
            session,
            execution_id,
            body.exercise_id,
            body.actual_sets,
            body.actual_reps,
            body.actual_weight_kg,
            body.done,
            body.notes,
            user_id,
        )
        return TrainingExecutionResponse.from_model(execution)


@router.post("/{execution_id}/complete", response_model=TrainingExecutionResponse)
def complete(execution_id: str, user_id: str = Depends(get_current_user_id)) -> TrainingExecutionResponse:
    with get_session() as session:
        return TrainingExecutionResponse.from_model(complete_training(session, execution_id, user_id))


@router.delete("/{execution_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel(execution_id: str, user_id: str = Depends(get_current_user_id)) -> Response:
    """Cancel (delete) an in-progress training. Completed trainings are kept."""
    with get_session() as session:
        cancel_training(session, execution_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
