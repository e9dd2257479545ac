"""Attachment models: files attached to clients, projects and tasks."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import Base, BigIntPK


class AttachmentBase(Base):
    """Columns shared by the three attachment tables."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_type: Mapped[str | None] = mapped_column(String(150), nullable=True)
    file_url: Mapped[str] = mapped_column(String(512), nullable=False)  # relative path or S3 key
    uploaded_by: Mapped[int | None] = mapped_column(
        BigIntPK, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    upload_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)


class ClientAttachment(AttachmentBase):
    """File attached directly to a client (contracts, briefs, logos)."""

    __tablename__ = "client_attachments"

    client_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )


class ProjectAttachment(AttachmentBase):
    """File attached to a project (scripts, cuts, deliverables)."""

    __tablename__ = "project_attachments"

    project_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )


class TaskAttachment(AttachmentBase):
    """File attached to a task."""

    __tablename__ = "task_attachments"

    task_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
