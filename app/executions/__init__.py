"""Training executions - performed workouts.

This module provides:
- The TrainingExecution / ExecutedExercise aggregate
- The execution lifecycle (start, upsert, complete, cancel)
- Ownership checks for every access
- The completed-training streak
"""

from app.executions.models import ExecutedExercise, ExecutionStatus, TrainingExecution
from app.executions.service import (
    cancel_training,
    complete_training,
    get_training,
    list_trainings,
    list_trainings_for_session,
    start_training,
    upsert_executed_exercise,
)
from app.executions.streak import calculate_completed_streak_days, count_streak_days

__all__ = [
    "ExecutedExercise",
    "ExecutionStatus",
    "TrainingExecution",
    "calculate_completed_streak_days",
    "cancel_training",
    "complete_training",
    "count_streak_days",
    "get_training",
    "list_trainings",
    "list_trainings_for_session",
    "start_training",
    "upsert_executed_exercise",
]
