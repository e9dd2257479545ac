from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from src.core.config import settings
from src.core.database import get_db
from src.core.database.base import load_models
from src.dashboard.client import ApiClient
from src.main import app

API_BASE_URL = "http://test/api/v1"


@pytest.fixture
async def test_engine(tmp_path):
    """File-backed SQLite per test, so concurrent requests get their own connection."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(load_models().create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def storage_tmp_path(tmp_path, monkeypatch):
    """Use tmp_path for attachment storage and never talk to S3."""
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "storage_path", str(path))
    monkeypatch.setattr(settings, "s3_bucket", None)
    return path


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Get test HTTP client with overridden database dependency (one session per request)."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def api(client: AsyncClient) -> AsyncGenerator[ApiClient, None]:
    """Dashboard API client wired to the app in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url=API_BASE_URL) as http:
        yield ApiClient(base_url=API_BASE_URL, http=http)
