"""Relational store access — async SQLAlchemy engine, pool and transactions.

One Database instance is created per process in the app lifespan, stored on
app.state and injected into services. It owns the connection pool:
connect() on startup, dispose() on shutdown drains it.

transaction() is the only way services touch the store: it yields an
AsyncSession inside BEGIN, commits when the block exits normally and rolls
back when it raises.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from config import DatabaseSettings
from schemas.models.base import Base
from shared.logging import get_logger

# Table modules register themselves on Base.metadata when imported
import schemas.models.note  # noqa: F401
import schemas.models.otp  # noqa: F401
import schemas.models.user  # noqa: F401

log = get_logger(__name__)


def _engine_kwargs(settings: DatabaseSettings) -> dict[str, Any]:
    if settings.is_sqlite:
        # A single shared connection keeps in-memory databases alive
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout_seconds,
        "pool_recycle": settings.db_pool_recycle_seconds,
        "pool_pre_ping": True,
    }


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    def __init__(self, settings: DatabaseSettings) -> None:
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database.connect() has not been called")
        return self._engine

    async def connect(self) -> None:
        if self._engine is not None:
            return
        engine = create_async_engine(
            self._settings.database_url,
            echo=self._settings.db_echo,
            **_engine_kwargs(self._settings),
        )
        if self._settings.is_sqlite:
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._engine = engine
        self._sessionmaker = async_sessionmaker(engine, expire_on_commit=False)
        log.info("database_connected", dialect=engine.dialect.name)

    async def create_schema(self) -> None:
        """Create missing tables (CREATE TABLE IF NOT EXISTS semantics)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("database_schema_ready", tables=sorted(Base.metadata.tables))

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("Database.connect() has not been called")
        async with self._sessionmaker() as session:
            async with session.begin():
                yield session

    async def dispose(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        log.info("database_disposed")
