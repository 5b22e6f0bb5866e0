"""Domain exceptions for the CodeHunt backend."""

from fastapi import HTTPException, status


class CodeHuntError(Exception):
    """Base exception for CodeHunt errors."""

    def __init__(self, message: str, error_type: str = "codehunt_error"):
        self.message = message
        self.error_type = error_type
        super().__init__(message)


class ValidationError(CodeHuntError):
    """Raised for malformed, missing or out-of-range input. Nothing is written."""

    def __init__(self, message: str, error_type: str = "validation_error"):
        super().__init__(message, error_type)


class DuplicateTeamError(ValidationError):
    """Raised when a team name (or id) is already registered."""

    def __init__(self, team_name: str):
        super().__init__(
            f"Team name '{team_name}' already exists",
            "duplicate_team",
        )
        self.team_name = team_name


class NotFoundError(CodeHuntError):
    """Raised for an unknown team or an unknown phase item."""

    def __init__(self, message: str):
        super().__init__(message, "not_found")


class StateConflictError(CodeHuntError):
    """Raised when a team is not on the phase it submits to, or already passed it."""

    def __init__(self, message: str):
        super().__init__(message, "state_conflict")


class StorageError(CodeHuntError):
    """Raised when the storage backend is unavailable or a write fails."""

    def __init__(self, message: str = "Storage backend unavailable, please retry"):
        super().__init__(message, "storage_error")


STATUS_MAP = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "duplicate_team": status.HTTP_409_CONFLICT,
    "not_found": status.HTTP_404_NOT_FOUND,
    "state_conflict": status.HTTP_409_CONFLICT,
    "storage_error": status.HTTP_503_SERVICE_UNAVAILABLE,
    "codehunt_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_http_exception(error: CodeHuntError) -> None:
    """Convert CodeHuntError to HTTPException."""
    status_code = STATUS_MAP.get(error.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)

    raise HTTPException(
        status_code=status_code,
        detail={
            "type": error.error_type,
            "title": error.error_type.replace("_", " ").title(),
            "status": status_code,
            "detail": error.message,
        },
    )
