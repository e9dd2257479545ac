from datetime import datetime

from pydantic import field_validator

from src.modules.projects.models import ProjectStatus
from src.shared.schemas import BaseSchema


class ProjectCreate(BaseSchema):
    """Schema for creating a project."""

    name: str
    client_id: int
    description: str | None = None
    status: ProjectStatus = ProjectStatus.PROPOSAL

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name is required")
        return v


class ProjectResponse(BaseSchema):
    id: int
    name: str
    client_id: int
    description: str | None
    status: str
    created_at: datetime
    updated_at: datetime
