"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and schema bootstrap.
Engines are created once at application startup and handed to the
components that need them; nothing here caches a global instance.

Dependencies: sqlalchemy, linkdrop.configs
System role: Database connection lifecycle management
"""

import json

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from linkdrop.boundary.db.base import Base
from linkdrop.configs import DatabaseSettings


def _json_serializer(value) -> str:
    # Keep non-ASCII tags readable so text search over JSON columns matches them
    return json.dumps(value, ensure_ascii=False)


def get_async_engine(db_config: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early. SQLite URLs skip the pool sizing
    arguments, which the SQLite dialect does not accept.

    Args:
        db_config: Database settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Usage:
        engine = get_async_engine(settings.database)
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    if db_config.is_sqlite:
        return create_async_engine(
            db_config.async_database_url,
            echo=db_config.echo_sql,
            json_serializer=_json_serializer,
        )

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        json_serializer=_json_serializer,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """
    Create async session factory for database operations.

    Returns async_sessionmaker bound to engine with autoflush=False for
    explicit transaction control and expire_on_commit=False so records
    stay readable after the commit that makes them visible.

    Args:
        engine: Async engine to bind

    Returns:
        async_sessionmaker: Async session factory

    Usage:
        SessionFactory = get_async_session_factory(engine)
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all registered tables if they do not exist.

    Args:
        engine: Async engine to run DDL on
    """
    # Register models with the metadata before create_all
    from linkdrop.boundary.db.models import FileModel  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
