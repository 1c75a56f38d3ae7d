"""Database configuration and session management."""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import Settings, get_settings

settings = get_settings()


def engine_options(settings: Settings) -> dict:
    """Pool and driver options; only Postgres gets a sized pool and SSL mode."""
    options = {
        "echo": settings.environment == "development",
        "pool_pre_ping": True,
    }
    if settings.is_postgres:
        options["pool_size"] = settings.db_max_connections
        options["max_overflow"] = 0
        options["connect_args"] = {"ssl": settings.db_ssl_mode}
    return options


# Async engine for application use; owns the process-wide connection pool
engine = create_async_engine(settings.database_url, **engine_options(settings))

# Session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close every pooled connection."""
    await engine.dispose()
