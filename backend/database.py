"""
Database connection management for Blueprint Factory.

Provides an async SQLAlchemy engine and session factory backed by the hosted
PostgreSQL database. Falls back to SQLite for development/testing if
DATABASE_URL is not set.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from config import ADMIN_DATABASE_URL, DATABASE_URL


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    connect_args=_connect_args(DATABASE_URL),
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

if ADMIN_DATABASE_URL == DATABASE_URL:
    admin_engine = engine
else:
    admin_engine = create_async_engine(
        ADMIN_DATABASE_URL,
        echo=False,
        connect_args=_connect_args(ADMIN_DATABASE_URL),
    )

admin_session = async_sessionmaker(admin_engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:
    """Dependency that yields an async database session."""
    async with async_session() as session:
        yield session


async def get_admin_session() -> AsyncSession:
    """Dependency that yields a session on the elevated admin connection."""
    async with admin_session() as session:
        yield session


async def init_db() -> None:
    """Create all tables. Used at application startup."""
    from models.blueprint import Base
    import models.goal  # noqa: F401  registers goal tables
    import models.user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine connection pools."""
    await engine.dispose()
    if admin_engine is not engine:
        await admin_engine.dispose()
