"""Application errors, rendered as `{"detail": ...}` by the app exception handler."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base for errors with a fixed HTTP status."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Input is missing or not acceptable (400)."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(AppException):
    """Booking, profile or other record does not exist (404)."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Identity token missing, expired or invalid (401)."""

    def __init__(self, detail: str = "Invalid identity token") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Caller is not allowed to act on the resource (403)."""

    def __init__(self, detail: str = "Not authorized") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(AppException):
    """Write rejected because the record changed or is in the wrong state."""

    def __init__(self, detail: str = "The resource was modified by another request") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidTransition(ConflictError):
    """Requested booking status is not reachable from the current one."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(detail=f"Invalid booking transition: {current} → {target}")


class BookingAlreadyAccepted(ConflictError):
    """Another staff member won the accept race."""

    def __init__(self, detail: str = "This booking has already been accepted") -> None:
        super().__init__(detail=detail)


class ExternalServiceError(AppException):
    """Payment or push provider failed (503)."""

    def __init__(self, service: str, detail: str | None = None) -> None:
        message = f"External service '{service}' is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=message)
