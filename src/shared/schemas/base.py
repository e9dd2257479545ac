"""Response envelopes shared by the API and the dashboard client."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseSchema(BaseModel):
    """Base Pydantic schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ErrorDetail(BaseSchema):
    """Error detail for a specific field (null for request-level errors)."""

    field: str | None = None
    message: str


class SuccessResponse(BaseSchema, Generic[T]):
    """
    Envelope of every successful API response.

    The dashboard ApiClient unwraps ``data``; ``message`` is shown as-is in
    notifications (e.g. "Attachment deleted successfully").
    """

    success: bool = True
    data: T
    message: str | None = None


ApiResponse = SuccessResponse


class ErrorResponse(BaseSchema):
    """Envelope of every failed API response; ``message`` is the user-facing text."""

    success: bool = False
    data: None = None
    message: str
    errors: list[ErrorDetail] = []


class PaginatedResponse(BaseSchema, Generic[T]):
    """One page of an already filtered, in-memory result."""

    items: list[T]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def from_list(cls, rows: list[T], page: int, limit: int) -> "PaginatedResponse[T]":
        """Slice page ``page`` (1-based) out of the full list."""
        start = (page - 1) * limit
        pages = (len(rows) + limit - 1) // limit if limit > 0 else 0
        return cls(items=rows[start : start + limit], total=len(rows), page=page, limit=limit, pages=pages)
