from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.orm import DeclarativeBase

from boxtrack.infrastructure.config.settings import get_settings

settings = get_settings()


def enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy own BEGIN on SQLite so SAVEPOINT works.

    The sqlite3/aiosqlite drivers otherwise start and end transactions on
    their own, which silently breaks begin_nested(). Also turns on
    foreign key enforcement and WAL, so an open read transaction on one
    connection does not block a commit on another.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create the async engine; pool tuning only applies to server databases"""
    kwargs: dict[str, Any] = {"echo": echo}
    if database_url.startswith("postgresql"):
        kwargs.update(
            pool_pre_ping=True,
            pool_size=20,
            max_overflow=30,
            pool_recycle=3600,
            connect_args={"server_settings": {"jit": "off"}, "command_timeout": 60},
        )

    engine = create_async_engine(database_url, **kwargs)
    if database_url.startswith("sqlite"):
        enable_sqlite_savepoints(engine)
    return engine


# Create engine once at module level
engine = build_engine(settings.database_url, echo=settings.database_echo)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False,
)


# Modern SQLAlchemy 2.0 pattern
class Base(DeclarativeBase):
    """Base class for all database models"""

    pass


async def get_db():
    """
    Database session dependency for read operations.
    Does not commit - read-only operations don't need commits.
    Write operations should use get_db_transactional().
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_db_transactional():
    """
    Database session dependency for write operations with automatic transaction management.
    - Begins transaction automatically
    - Commits on success
    - Rolls back on exception
    - Closes session automatically

    Use this for POST, PUT, PATCH, DELETE endpoints.
    """
    async with AsyncSessionLocal() as session:
        try:
            async with session.begin():
                yield session
        except Exception:
            await session.rollback()
            raise


async def get_db_autocommit():
    """
    Session dependency for multi-step writes where every step commits on its own.

    Each unit_of_work() opened on this session starts and commits its own
    transaction, so a failure partway keeps the steps already committed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a block atomically.

    Inside an open transaction this is a SAVEPOINT, so a failure rolls back
    only the block and leaves the caller's transaction usable. Otherwise the
    block gets its own transaction, committed on exit.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield session
    else:
        async with session.begin():
            yield session
