from datetime import datetime

from pydantic import field_validator

from src.shared.schemas import BaseSchema


class ClientCreate(BaseSchema):
    """Schema for creating a client."""

    name: str
    short_name: str | None = None
    contact_email: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Client name is required")
        return v


class ClientResponse(BaseSchema):
    id: int
    name: str
    short_name: str | None
    contact_email: str | None
    notes: str | None
    active: bool
    created_at: datetime
    updated_at: datetime
