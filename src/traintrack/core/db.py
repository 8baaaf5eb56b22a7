"""Engine, session factory and the per-request session dependency."""

import os
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

DEV_DATABASE_URL = "postgresql+asyncpg://traintrack:dev_password_change_in_prod@db:5432/traintrack_dev"


def normalize_database_url(url: str | None) -> str:
    """Point plain postgres URLs at the asyncpg driver; empty means the dev database."""
    if not url:
        return DEV_DATABASE_URL
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL"))

engine = create_async_engine(
    DATABASE_URL,
    echo=os.getenv("SQL_ECHO", "").lower() in ("1", "true"),
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    Committed when the endpoint returns, rolled back when it raises. Endpoints
    that need generated ids or a refreshed row commit explicitly first.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
