from src.core.exceptions.base import (
    AppException,
    NotFoundError,
    ValidationError,
    DuplicateError,
    StorageError,
    ApiRequestError,
    ApiConnectionError,
    MutationInProgressError,
)

__all__ = [
    "AppException",
    "NotFoundError",
    "ValidationError",
    "DuplicateError",
    "StorageError",
    "ApiRequestError",
    "ApiConnectionError",
    "MutationInProgressError",
]
