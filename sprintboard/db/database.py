from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from sprintboard.core import get_settings
from sprintboard.logs import debug_logger

settings = get_settings()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Async engine without pooling; every session opens its own connection"""
    return create_async_engine(
        database_url,
        echo=echo,
        future=True,
        poolclass=NullPool,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

async_session_factory = async_sessionmaker(
    engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: committed when the route returns, rolled back on error"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            debug_logger.warning(f"Rolling back session: {e!r}")
            await session.rollback()
            raise


async def init_db():
    # Registers users, kanban_cards and tasks on the metadata
    from sprintboard.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    debug_logger.info(f"Tables ready: {sorted(Base.metadata.tables)}")


async def dispose_db():
    await engine.dispose()
