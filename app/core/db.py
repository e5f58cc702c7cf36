import json
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings


def json_dumps(value) -> str:
    # keep CJK tags readable in the column so LIKE filters match raw text
    return json.dumps(value, ensure_ascii=False)


engine = create_async_engine(settings.database_url, pool_pre_ping=True, json_serializer=json_dumps)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session
