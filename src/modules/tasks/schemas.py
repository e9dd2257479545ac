from datetime import datetime

from pydantic import field_validator

from src.shared.schemas import BaseSchema


class TaskCreate(BaseSchema):
    """Schema for creating a task."""

    title: str
    project_id: int | None = None
    description: str | None = None
    assigned_to: int | None = None
    priority: str = "medium"

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title is required")
        return v


class TaskUpdate(BaseSchema):
    """Partial update. Only provided fields change."""

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    completed: bool | None = None


class TaskResponse(BaseSchema):
    id: int
    title: str
    project_id: int | None
    description: str | None
    assigned_to: int | None
    priority: str
    completed: bool
    completion_date: datetime | None
    created_at: datetime
    updated_at: datetime
