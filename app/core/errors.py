"""Domain errors for training executions.

Every failure of the execution core is raised as one of these types.
The HTTP layer maps them to status codes; nothing in the core retries
or swallows them.
"""


class TrainingError(Exception):
    """Base exception for all training execution errors."""

    code = "training_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(TrainingError):
    """Raised when an execution, session template or exercise does not exist."""

    code = "not_found"


class ForbiddenError(TrainingError):
    """Raised when the principal is authenticated but does not own the execution."""

    code = "forbidden"


class UnauthenticatedError(TrainingError):
    """Raised when no principal (or the anonymous principal) is present."""

    code = "unauthenticated"


class InvalidArgumentError(TrainingError):
    """Raised for invalid values or operations not allowed in the current state."""

    code = "invalid_argument"
