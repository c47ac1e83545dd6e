"""SQLAlchemy adapter for user persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from prompt_registry.application.ports.user_repository_port import (
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from prompt_registry.domain.errors import DuplicateEmailError
from prompt_registry.infrastructure.db.metadata import users
from prompt_registry.infrastructure.db.ownership_resolver import as_uuid


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id, including inactive users."""

        statement = sa.select(*users.c).where(users.c.id == user_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email, including inactive users."""

        statement = sa.select(*users.c).where(users.c.email == email).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user row, mapping email uniqueness violations."""

        now = datetime.now(tz=UTC)
        statement = (
            sa.insert(users)
            .values(
                id=payload.user_id,
                email=payload.email,
                password_hash=payload.password_hash,
                display_name=payload.display_name,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            .returning(*users.c)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().one()
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                raise DuplicateEmailError() from error

        return _to_user_record(row)

    async def set_active(self, *, user_id: UUID, is_active: bool) -> UserRecord | None:
        """Set the account active flag and return the updated row, or None."""

        statement = (
            sa.update(users)
            .where(users.c.id == user_id)
            .values(is_active=is_active, updated_at=datetime.now(tz=UTC))
            .returning(*users.c)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)
            row = result.mappings().first()
            await session.commit()

        if row is None:
            return None
        return _to_user_record(row)


def _to_user_record(row: sa.RowMapping) -> UserRecord:
    return UserRecord(
        user_id=as_uuid(row["id"]),
        email=cast(str, row["email"]),
        password_hash=cast(str, row["password_hash"]),
        display_name=cast(str | None, row["display_name"]),
        is_active=bool(row["is_active"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
