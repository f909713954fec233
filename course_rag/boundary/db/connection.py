"""
Database connection management.

Provides the async SQLAlchemy engine, session factory and a session context
used by the pgvector index store.

Dependencies: sqlalchemy, asyncpg, course_rag.configs
System role: Database connection lifecycle management
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from course_rag.configs import get_settings
from course_rag.configs.database import DatabaseSettings


def get_async_engine(db_config: DatabaseSettings | None = None) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect stale or
    broken connections early.

    Args:
        db_config: Database settings (defaults to the application settings)

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    db_config = db_config or get_settings().database

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Sessions do not autoflush and keep attributes loaded after commit.

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine or get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


@asynccontextmanager
async def session_scope(factory: async_sessionmaker) -> AsyncIterator[AsyncSession]:
    """
    Transactional scope: commit on success, roll back on any error.

    Usage:
        async with session_scope(factory) as session:
            await material_crud.create(session, ...)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except BaseException:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine) -> None:
    """Create the pgvector extension and all index tables if missing."""
    from course_rag.boundary.db.base import Base
    from course_rag.boundary.db import models  # noqa: F401  (registers tables)

    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
