"""Async SQLAlchemy engine and session factory helpers."""

from __future__ import annotations

from typing import Any

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


def create_session_factory(database_url: str) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory for the provided database URL.

    SQLite connections get foreign key enforcement switched on, matching the
    referential guarantees Postgres gives by default.
    """

    engine = create_async_engine(database_url)
    if engine.dialect.name == "sqlite":
        sa.event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return async_sessionmaker(engine, expire_on_commit=False)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()
