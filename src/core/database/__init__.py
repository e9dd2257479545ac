from src.core.database.base import Base, BaseModel, BigIntPK, load_models
from src.core.database.session import async_session, engine, get_db

__all__ = ["Base", "BaseModel", "BigIntPK", "load_models", "async_session", "engine", "get_db"]
