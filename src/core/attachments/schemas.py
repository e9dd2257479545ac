"""Pydantic schemas for attachments."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class OwnerType(StrEnum):
    """Entity category an attachment belongs to."""

    CLIENT = "client"
    PROJECT = "project"
    TASK = "task"

    @property
    def segment(self) -> str:
        """URL segment used by the attachment endpoints ("clients", "projects", "tasks")."""
        return f"{self.value}s"

    @property
    def foreign_key(self) -> str:
        return f"{self.value}_id"


class OwnerSegment(StrEnum):
    """Path segment accepted by the attachment endpoints."""

    CLIENTS = "clients"
    PROJECTS = "projects"
    TASKS = "tasks"

    @property
    def owner_type(self) -> OwnerType:
        return OwnerType(self.value[:-1])


class AttachmentResponse(BaseModel):
    """Attachment as stored, without the owner column."""

    id: int
    file_name: str
    file_size: int | None = None
    file_type: str | None = None
    file_url: str
    uploaded_by: int | None = None
    upload_date: datetime | None = None
    description: str | None = None
    tags: list[str] | None = None

    model_config = {"from_attributes": True}


class ClientAttachmentResponse(AttachmentResponse):
    client_id: int


class ProjectAttachmentResponse(AttachmentResponse):
    project_id: int


class TaskAttachmentResponse(AttachmentResponse):
    task_id: int


class GroupedAttachments(BaseModel):
    """Every attachment in the system, grouped by owner type."""

    clients: list[ClientAttachmentResponse] = Field(default_factory=list)
    projects: list[ProjectAttachmentResponse] = Field(default_factory=list)
    tasks: list[TaskAttachmentResponse] = Field(default_factory=list)
