"""
Async engine, session factory and the request-scoped session dependency.

One session per request: every read and the final write of a booking
operation share a transaction, committed only if the handler returns.
"""

from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from lodging.core.config import get_settings

settings = get_settings()


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **settings.engine_options(),
)

SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def ping_database() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
