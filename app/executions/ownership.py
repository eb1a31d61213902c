"""Ownership guard for training executions.

Every read or write of an existing execution passes through
assert_owner(); start_training() stamps the owner once and nothing
reassigns it afterwards.
"""

from __future__ import annotations

from loguru import logger

from app.core.errors import ForbiddenError, UnauthenticatedError
from app.executions.models import TrainingExecution

ANONYMOUS_PRINCIPAL = "anonymous"


def require_principal(principal: str | None) -> str:
    """Return the principal, rejecting missing or anonymous callers.

    Raises:
        UnauthenticatedError: If principal is None, blank or anonymous
    """
    if principal is None or not principal.strip() or principal == ANONYMOUS_PRINCIPAL:
        raise UnauthenticatedError("not authenticated")
    return principal


def assert_owner(execution: TrainingExecution, principal: str | None) -> None:
    """Ensure the principal owns the execution.

    Raises:
        UnauthenticatedError: If there is no principal
        ForbiddenError: If the execution has no owner or belongs to someone else
    """
    user_id = require_principal(principal)
    if not execution.user_id:
        logger.error("Training execution without owner", execution_id=execution.id)
        raise ForbiddenError("owner missing")
    if execution.user_id != user_id:
        logger.warning(
            "Access to foreign training execution denied",
            execution_id=execution.id,
            user_id=user_id,
        )
        raise ForbiddenError("not your training")
