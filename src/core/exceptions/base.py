from typing import Any


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id={identifier} not found"
        super().__init__(message=message, status_code=404)


class ValidationError(AppException):
    """Validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message=message, status_code=422, details=details)


class DuplicateError(AppException):
    """Duplicate resource."""

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} with {field}={value} already exists"
        super().__init__(message=message, status_code=409, details={"field": field, "value": value})


class StorageError(AppException):
    """Attachment bytes could not be read from or written to storage."""

    def __init__(self, message: str = "File not found"):
        super().__init__(message=message, status_code=404)


class ApiRequestError(AppException):
    """Non-2xx response received by the dashboard API client.

    ``message`` is the server-provided text, kept verbatim for display.
    """

    def __init__(self, message: str, status_code: int, details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status_code, details=details)


class ApiConnectionError(ApiRequestError):
    """The request never produced a response (DNS, refused connection, timeout)."""

    def __init__(self, message: str = "Could not reach the server"):
        super().__init__(message=message, status_code=503)


class MutationInProgressError(AppException):
    """A mutation was started again while its previous run is still pending."""

    def __init__(self, name: str = "mutation"):
        super().__init__(message=f"{name} is already in progress", status_code=409)
