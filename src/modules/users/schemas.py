from datetime import datetime

from pydantic import EmailStr, field_validator

from src.shared.schemas import BaseSchema


class UserCreate(BaseSchema):
    """Schema for creating a team member."""

    name: str
    email: EmailStr
    role: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v


class UserResponse(BaseSchema):
    """Schema for user response."""

    id: int
    name: str
    email: str
    role: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
