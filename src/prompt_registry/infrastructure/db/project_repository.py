"""SQLAlchemy adapter for owner-scoped project persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from prompt_registry.application.ports.project_repository_port import (
    ProjectChanges,
    ProjectCreateInput,
    ProjectRecord,
    ProjectRepositoryPort,
)
from prompt_registry.domain.entity_kind import EntityKind
from prompt_registry.domain.errors import AccountDeactivatedError
from prompt_registry.infrastructure.db.metadata import projects, users
from prompt_registry.infrastructure.db.ownership_resolver import OwnershipResolver, as_uuid


class SqlAlchemyProjectRepository(ProjectRepositoryPort):
    """Project repository backed by SQLAlchemy async sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        resolver: OwnershipResolver | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._resolver = resolver or OwnershipResolver()

    async def create_project(self, payload: ProjectCreateInput) -> ProjectRecord:
        """Insert a project after confirming the owner account is still active."""

        now = datetime.now(tz=UTC)
        async with self._session_factory() as session, session.begin():
            owner_active = await session.scalar(
                sa.select(users.c.is_active).where(users.c.id == payload.owner_id)
            )
            if not owner_active:
                raise AccountDeactivatedError()
            result = await session.execute(
                sa.insert(projects)
                .values(
                    id=payload.project_id,
                    owner_id=payload.owner_id,
                    name=payload.name,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
                .returning(*projects.c)
            )
            row = result.mappings().one()

        return _to_project_record(row)

    async def list_projects(
        self,
        *,
        owner_id: UUID,
        include_inactive: bool = False,
    ) -> list[ProjectRecord]:
        """Return owner projects ordered by creation time descending."""

        statement = sa.select(*projects.c).where(projects.c.owner_id == owner_id)
        if not include_inactive:
            statement = statement.where(projects.c.is_active.is_(True))
        statement = statement.order_by(projects.c.created_at.desc())

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_project_record(row) for row in result.mappings().all()]

    async def get_project(self, *, owner_id: UUID, project_id: UUID) -> ProjectRecord:
        """Return one live project owned by owner."""

        async with self._session_factory() as session:
            await self._resolver.resolve(
                session,
                kind=EntityKind.PROJECT,
                entity_id=project_id,
                owner_id=owner_id,
            )
            row = await _select_project(session, project_id=project_id)

        return _to_project_record(row)

    async def update_project(
        self,
        *,
        owner_id: UUID,
        project_id: UUID,
        changes: ProjectChanges,
    ) -> ProjectRecord:
        """Apply non-empty changes to one live project in a single transaction."""

        values: dict[str, Any] = {}
        if changes.name is not None:
            values["name"] = changes.name
        if changes.is_active is not None:
            values["is_active"] = changes.is_active
        values["updated_at"] = datetime.now(tz=UTC)

        async with self._session_factory() as session, session.begin():
            await self._resolver.resolve(
                session,
                kind=EntityKind.PROJECT,
                entity_id=project_id,
                owner_id=owner_id,
                for_update=True,
            )
            await session.execute(
                sa.update(projects).where(projects.c.id == project_id).values(**values)
            )
            row = await _select_project(session, project_id=project_id)

        return _to_project_record(row)

    async def soft_delete_project(self, *, owner_id: UUID, project_id: UUID) -> ProjectRecord:
        """Flip is_active to false on one live project."""

        return await self.update_project(
            owner_id=owner_id,
            project_id=project_id,
            changes=ProjectChanges(is_active=False),
        )


async def _select_project(session: AsyncSession, *, project_id: UUID) -> sa.RowMapping:
    result = await session.execute(sa.select(*projects.c).where(projects.c.id == project_id))
    return result.mappings().one()


def _to_project_record(row: sa.RowMapping) -> ProjectRecord:
    return ProjectRecord(
        project_id=as_uuid(row["id"]),
        owner_id=as_uuid(row["owner_id"]),
        name=cast(str, row["name"]),
        is_active=bool(row["is_active"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
