"""Session template routes.

Only deletion lives here: it is the trigger for preserving the history of
trainings performed from the template.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from loguru import logger

from app.api.dependencies.auth import get_current_user_id
from app.db.session import get_session
from app.sessions.deletion import delete_session_template

router = APIRouter(prefix="/api/v1/training-sessions", tags=["training-sessions"])


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(session_id: str, user_id: str = Depends(get_current_user_id)) -> Response:
    """Delete a session template; its trainings are detached and kept.

    Status codes:
        - 204: Template deleted
        - 404: Template not found
    """
    logger.info("Session template delete requested", user_id=user_id, session_id=session_id)
    with get_session() as session:
        delete_session_template(session, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
