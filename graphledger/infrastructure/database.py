"""Database Session Manager: async engine, per-request sessions, transaction scoping.

Invariants:
    - A session that raises is rolled back before the error leaves session()
    - IntegrityError surfaces as ConflictError; any other SQLAlchemyError as DatabaseError
    - transaction_scope joins an open transaction or owns a new one, so a use case that
      calls another use case never commits halfway
    - Nothing connects at import time: db_manager is built by init_db in the lifespan

Design Decisions:
    - expire_on_commit=False: rows stay readable after commit without lazy loads
    - SQLite has no SELECT ... FOR UPDATE, so its transactions open with BEGIN IMMEDIATE
      and writers queue on the database lock (busy timeout 30s)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from graphledger.core.errors import ConflictError, DatabaseError, GraphLedgerError

logger = logging.getLogger(__name__)

# Most specific first
_ERROR_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def translate_db_error(exc: SQLAlchemyError) -> GraphLedgerError:
    if isinstance(exc, IntegrityError):
        return ConflictError("Integrity constraint violated")
    for kind, message, operation in _ERROR_MAP:
        if isinstance(exc, kind):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


def _use_begin_immediate(engine: AsyncEngine) -> None:
    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _driver_autocommit(dbapi_connection, connection_record):
        # hand BEGIN/COMMIT control to SQLAlchemy
        dbapi_connection.isolation_level = None

    @event.listens_for(sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_for(
    database_url: str, pool_size: int = 20, max_overflow: int = 10,
) -> AsyncEngine:
    if not database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
    engine = create_async_engine(database_url, connect_args={"timeout": 30})
    _use_begin_immediate(engine)
    return engine


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that roll back on failure."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_engine_for(database_url, pool_size, max_overflow)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            await db.rollback()
            translated = translate_db_error(exc)
            logger.error(
                f"{type(exc).__name__}: {exc}", extra={"error_code": translated.code},
            )
            raise translated from exc
        finally:
            await db.close()

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.error(f"DB health check failed: {exc}")
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()


@asynccontextmanager
async def transaction_scope(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Join the caller's open transaction, or begin (and commit) one."""
    if db.in_transaction():
        yield db
        return
    async with db.begin():
        yield db


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.close()
    db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
