"""Declarative base shared by every dashboard table."""

import importlib
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# BigInteger for PostgreSQL, Integer for SQLite (required for autoincrement)
BigIntPK = BigInteger().with_variant(Integer, "sqlite")

# Every module that defines tables. Alembic and the test suite load them all.
MODEL_MODULES = (
    "src.modules.users.models",
    "src.modules.clients.models",
    "src.modules.projects.models",
    "src.modules.tasks.models",
    "src.core.attachments.models",
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={getattr(self, 'id', None)}>"


class BaseModel(Base):
    """Entity table: id, created_at, updated_at."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


def load_models() -> MetaData:
    """Import every model module and return the populated metadata."""
    for module in MODEL_MODULES:
        importlib.import_module(module)
    return Base.metadata
