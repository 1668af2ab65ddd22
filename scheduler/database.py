import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from scheduler.config import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Integer columns are 32-bit on PostgreSQL and 64-bit on SQLite; keep to the smaller.
MAX_INTEGER = 2**31 - 1


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine; SQLite connections get foreign key enforcement."""
    engine = create_async_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    logger.info("Database engine created for dialect %s", engine.dialect.name)
    return engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, expire_on_commit=False)


async def create_tables(bind: AsyncEngine) -> None:
    import scheduler.models  # noqa: F401  registers every table on Base.metadata

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.database_echo)
async_session = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed on success."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
