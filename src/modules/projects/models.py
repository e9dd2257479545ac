"""Project model."""

from enum import StrEnum

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import BaseModel, BigIntPK


class ProjectStatus(StrEnum):
    """Production pipeline stage."""

    PROPOSAL = "proposta"
    PROPOSAL_ACCEPTED = "proposta_aceita"
    PRE_PRODUCTION = "pre_producao"
    PRODUCTION = "producao"
    POST_PRODUCTION = "pos_producao"
    DELIVERED = "entregue"
    CLOSED = "concluido"


class Project(BaseModel):
    """Production job for a client."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_id: Mapped[int] = mapped_column(
        BigIntPK, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=ProjectStatus.PROPOSAL.value
    )
