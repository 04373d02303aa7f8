from fastapi import status


class DomainError(Exception):
    """Base class for errors surfaced to the caller with a status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "domain_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class ValidationError(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT
    error = "conflict"
