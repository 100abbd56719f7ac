from typing import AsyncGenerator

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from taskboard.core.config import settings


def make_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Build the async engine; SQLite URLs skip the server-side pool options.
    """
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, future=True)
    return create_async_engine(url, echo=echo, future=True, pool_pre_ping=True)


engine = make_engine(settings.DATABASE_URI, echo=settings.DEBUG)

SessionLocal = sessionmaker(
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    Services commit their own units of work; anything left uncommitted when
    the request fails is rolled back here.
    """
    async with SessionLocal() as session:
        try:
            yield session
        except Exception:
            logger.debug("Rolling back request session after error")
            await session.rollback()
            raise
