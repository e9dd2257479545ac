from collections.abc import AsyncGenerator
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.core.config import settings

logger = logging.getLogger(__name__)


def _safe_url(url: str) -> str:
    """Database URL without credentials, for logs."""
    return url.split("@", 1)[1] if "@" in url else url.split("://", 1)[0]


def build_engine(url: str | None = None):
    url = url or settings.database_url
    logger.info("Connecting to database ...@%s", _safe_url(url))
    options = {}
    if not url.startswith("sqlite"):
        options.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
    return create_async_engine(url, echo=settings.debug and not settings.is_production, **options)


engine = build_engine()

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request: committed when the handler returns, rolled back on error."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
