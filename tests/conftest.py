import os

os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("AUTH_RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ADMIN_INVITE_CODE", "test-invite")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import httpx

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

# Import Base + all models so metadata is complete
from app.models import Base

from app.main import app
from app.core.db import get_db, json_dumps

pytest_plugins = ["fixtures_seed"]


def _test_db_url() -> str:
    return os.getenv("DATABASE_URL_TEST", "sqlite+aiosqlite://")


@pytest.fixture
async def async_engine():
    url = _test_db_url()
    kwargs = {"json_serializer": json_dumps}
    if url.startswith("sqlite"):
        # one shared in-memory database for every connection of the test
        kwargs.update(connect_args={"check_same_thread": False}, poolclass=StaticPool)
    engine = create_async_engine(url, **kwargs)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest.fixture
async def db_session(async_engine):
    session_factory = async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession):
    """
    HTTP client that uses the test DB session via dependency override.
    """
    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
