"""Domain errors shared by every service.

Each error carries the HTTP status and machine-readable code the API layer
uses when translating it into a response. Services raise them unchanged;
nothing below the API layer catches them.
"""

from typing import Any


class VocabTrainerError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str = "Internal error"):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message}


class AuthenticationError(VocabTrainerError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class ForbiddenError(VocabTrainerError):
    """Caller is not the owning or authorized party."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(VocabTrainerError):
    """Referenced entity does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ValidationError(VocabTrainerError):
    """Structurally invalid input.

    Args:
        message: Summary message.
        errors: Field-level problems as ``{"path": ..., "message": ...}`` dicts.
    """

    status_code = 400
    code = "BAD_USER_INPUT"

    def __init__(self, message: str = "Validation failed", errors: list[dict[str, str]] | None = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.errors:
            data["details"] = self.errors
        return data


class InvalidStateError(VocabTrainerError):
    """Illegal lifecycle transition."""

    status_code = 409
    code = "INVALID_STATE"

    def __init__(self, message: str = "Invalid state transition"):
        super().__init__(message)


class ConflictError(VocabTrainerError):
    """Write rejected because it would duplicate or overwrite existing data."""

    status_code = 409
    code = "CONFLICT"

    def __init__(self, message: str = "Conflict"):
        super().__init__(message)
