"""SQLAlchemy adapter for owner-scoped prompt persistence."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from prompt_registry.application.ports.prompt_repository_port import (
    PromptChanges,
    PromptCreateInput,
    PromptRecord,
    PromptRepositoryPort,
)
from prompt_registry.domain.entity_kind import EntityKind
from prompt_registry.infrastructure.db.metadata import prompts
from prompt_registry.infrastructure.db.ownership_resolver import OwnershipResolver, as_uuid


class SqlAlchemyPromptRepository(PromptRepositoryPort):
    """Prompt repository backed by SQLAlchemy async sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        resolver: OwnershipResolver | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._resolver = resolver or OwnershipResolver()

    async def create_prompt(self, payload: PromptCreateInput) -> PromptRecord:
        """Insert a prompt under a live project, copying the project's owner."""

        now = datetime.now(tz=UTC)
        async with self._session_factory() as session, session.begin():
            project = await self._resolver.resolve(
                session,
                kind=EntityKind.PROJECT,
                entity_id=payload.project_id,
                owner_id=payload.owner_id,
                for_update=True,
            )
            result = await session.execute(
                sa.insert(prompts)
                .values(
                    id=payload.prompt_id,
                    owner_id=project.owner_id,
                    project_id=project.entity_id,
                    name=payload.name,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
                .returning(*prompts.c)
            )
            row = result.mappings().one()

        return _to_prompt_record(row)

    async def list_prompts(
        self,
        *,
        owner_id: UUID,
        project_id: UUID,
        include_inactive: bool = False,
    ) -> list[PromptRecord]:
        """Return prompts of one live project ordered by creation time descending."""

        statement = sa.select(*prompts.c).where(
            prompts.c.project_id == project_id,
            prompts.c.owner_id == owner_id,
        )
        if not include_inactive:
            statement = statement.where(prompts.c.is_active.is_(True))
        statement = statement.order_by(prompts.c.created_at.desc())

        async with self._session_factory() as session:
            await self._resolver.resolve(
                session,
                kind=EntityKind.PROJECT,
                entity_id=project_id,
                owner_id=owner_id,
            )
            result = await session.execute(statement)

        return [_to_prompt_record(row) for row in result.mappings().all()]

    async def get_prompt(self, *, owner_id: UUID, prompt_id: UUID) -> PromptRecord:
        """Return one live prompt owned by owner."""

        async with self._session_factory() as session:
            await self._resolver.resolve(
                session,
                kind=EntityKind.PROMPT,
                entity_id=prompt_id,
                owner_id=owner_id,
            )
            row = await _select_prompt(session, prompt_id=prompt_id)

        return _to_prompt_record(row)

    async def update_prompt(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        changes: PromptChanges,
    ) -> PromptRecord:
        """Apply non-empty changes to one live prompt in a single transaction."""

        values: dict[str, Any] = {}
        if changes.name is not None:
            values["name"] = changes.name
        if changes.is_active is not None:
            values["is_active"] = changes.is_active
        values["updated_at"] = datetime.now(tz=UTC)

        async with self._session_factory() as session, session.begin():
            await self._resolver.resolve(
                session,
                kind=EntityKind.PROMPT,
                entity_id=prompt_id,
                owner_id=owner_id,
                for_update=True,
            )
            await session.execute(
                sa.update(prompts).where(prompts.c.id == prompt_id).values(**values)
            )
            row = await _select_prompt(session, prompt_id=prompt_id)

        return _to_prompt_record(row)

    async def soft_delete_prompt(self, *, owner_id: UUID, prompt_id: UUID) -> PromptRecord:
        """Flip is_active to false on one live prompt."""

        return await self.update_prompt(
            owner_id=owner_id,
            prompt_id=prompt_id,
            changes=PromptChanges(is_active=False),
        )


async def _select_prompt(session: AsyncSession, *, prompt_id: UUID) -> sa.RowMapping:
    result = await session.execute(sa.select(*prompts.c).where(prompts.c.id == prompt_id))
    return result.mappings().one()


def _to_prompt_record(row: sa.RowMapping) -> PromptRecord:
    return PromptRecord(
        prompt_id=as_uuid(row["id"]),
        owner_id=as_uuid(row["owner_id"]),
        project_id=as_uuid(row["project_id"]),
        name=cast(str, row["name"]),
        is_active=bool(row["is_active"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
