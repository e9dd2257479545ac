"""Task model."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import BaseModel, BigIntPK


class Task(BaseModel):
    """Unit of work, usually inside a project (project_id may be empty for loose tasks)."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    project_id: Mapped[int | None] = mapped_column(
        BigIntPK, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True
    )
    assigned_to: Mapped[int | None] = mapped_column(
        BigIntPK, ForeignKey("users.id"), nullable=True, index=True
    )
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completion_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
