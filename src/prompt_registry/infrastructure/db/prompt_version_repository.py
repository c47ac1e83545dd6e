"""SQLAlchemy adapter for prompt versions and exclusive activation.

All writers touching the versions of one prompt lock that prompt's row first,
then deactivate sibling versions before activating the target. The partial
unique index ``ux_prompt_versions_prompt_id_active_version`` stays the source
of truth: if two writers still race past each other, the loser's transaction
fails on the index and is reported as a retryable conflict.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from prompt_registry.application.ports.prompt_version_repository_port import (
    PromptVersionChanges,
    PromptVersionCreateInput,
    PromptVersionRecord,
    PromptVersionRepositoryPort,
)
from prompt_registry.domain.entity_kind import EntityKind
from prompt_registry.domain.errors import (
    ActiveVersionConflictError,
    ConflictError,
    SequenceConflictError,
)
from prompt_registry.domain.ownership import ResolvedEntity
from prompt_registry.domain.version_sequence import next_version_sequence
from prompt_registry.infrastructure.db.metadata import prompt_versions
from prompt_registry.infrastructure.db.ownership_resolver import OwnershipResolver, as_uuid

logger = logging.getLogger(__name__)


class SqlAlchemyPromptVersionRepository(PromptVersionRepositoryPort):
    """Prompt version repository backed by SQLAlchemy async sessions."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        resolver: OwnershipResolver | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._resolver = resolver or OwnershipResolver()

    async def create_version(self, payload: PromptVersionCreateInput) -> PromptVersionRecord:
        """Number and insert one version under a live prompt.

        The sequence number comes from a count of every prior version of the
        prompt, soft-deleted ones included, taken in the inserting transaction.
        """

        now = datetime.now(tz=UTC)
        async with self._session_factory() as session:
            try:
                async with session.begin():
                    prompt = await self._resolver.resolve(
                        session,
                        kind=EntityKind.PROMPT,
                        entity_id=payload.prompt_id,
                        owner_id=payload.owner_id,
                        for_update=True,
                    )
                    existing_count = await session.scalar(
                        sa.select(sa.func.count())
                        .select_from(prompt_versions)
                        .where(prompt_versions.c.prompt_id == prompt.entity_id)
                    )
                    sequence = next_version_sequence(
                        existing_version_count=int(existing_count or 0)
                    )

                    if payload.make_active:
                        await _deactivate_siblings(session, prompt_id=prompt.entity_id, now=now)

                    result = await session.execute(
                        sa.insert(prompt_versions)
                        .values(
                            id=payload.version_id,
                            owner_id=prompt.owner_id,
                            prompt_id=prompt.entity_id,
                            text=payload.text,
                            sequence_number=sequence.number,
                            sequence_label=sequence.label,
                            display_name=sequence.display_name,
                            is_active_version=payload.make_active,
                            is_active=True,
                            created_at=now,
                            updated_at=now,
                        )
                        .returning(*prompt_versions.c)
                    )
                    row = result.mappings().one()
            except IntegrityError as error:
                conflict = _to_conflict_error(error, prompt_id=payload.prompt_id)
                if conflict is None:
                    raise
                raise conflict from error

        return _to_version_record(row)

    async def list_versions(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        include_inactive: bool = False,
    ) -> list[PromptVersionRecord]:
        """Return versions of one live prompt ordered newest first."""

        statement = sa.select(*prompt_versions.c).where(
            prompt_versions.c.prompt_id == prompt_id,
            prompt_versions.c.owner_id == owner_id,
        )
        if not include_inactive:
            statement = statement.where(prompt_versions.c.is_active.is_(True))
        statement = statement.order_by(
            prompt_versions.c.created_at.desc(),
            prompt_versions.c.sequence_number.desc(),
        )

        async with self._session_factory() as session:
            await self._resolver.resolve(
                session,
                kind=EntityKind.PROMPT,
                entity_id=prompt_id,
                owner_id=owner_id,
            )
            result = await session.execute(statement)

        return [_to_version_record(row) for row in result.mappings().all()]

    async def get_version(self, *, owner_id: UUID, version_id: UUID) -> PromptVersionRecord:
        """Return one live version owned by owner."""

        async with self._session_factory() as session:
            await self._resolver.resolve(
                session,
                kind=EntityKind.PROMPT_VERSION,
                entity_id=version_id,
                owner_id=owner_id,
            )
            row = await _select_version(session, version_id=version_id)

        return _to_version_record(row)

    async def update_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
        changes: PromptVersionChanges,
    ) -> PromptVersionRecord:
        """Apply non-empty changes to one live version.

        ``is_active=False`` soft-deletes the version and clears its active flag;
        it takes precedence over ``is_active_version``. Activating deactivates
        every sibling first. Soft-deleting never promotes another version.
        """

        now = datetime.now(tz=UTC)
        values: dict[str, Any] = {"updated_at": now}
        if changes.text is not None:
            values["text"] = changes.text

        async with self._session_factory() as session:
            prompt_id: UUID | None = None
            try:
                async with session.begin():
                    version = await self._lock_version(
                        session,
                        owner_id=owner_id,
                        version_id=version_id,
                    )
                    prompt_id = version.parent_id
                    if changes.is_active is False:
                        values["is_active"] = False
                        values["is_active_version"] = False
                    elif changes.is_active_version is not None:
                        if changes.is_active_version:
                            assert prompt_id is not None
                            await _deactivate_siblings(
                                session,
                                prompt_id=prompt_id,
                                now=now,
                                exclude_version_id=version_id,
                            )
                        values["is_active_version"] = changes.is_active_version

                    await session.execute(
                        sa.update(prompt_versions)
                        .where(prompt_versions.c.id == version_id)
                        .values(**values)
                    )
                    row = await _select_version(session, version_id=version_id)
            except IntegrityError as error:
                conflict = _to_conflict_error(error, prompt_id=prompt_id or version_id)
                if conflict is None:
                    raise
                raise conflict from error

        return _to_version_record(row)

    async def soft_delete_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
    ) -> PromptVersionRecord:
        """Soft-delete one live version without promoting another."""

        return await self.update_version(
            owner_id=owner_id,
            version_id=version_id,
            changes=PromptVersionChanges(is_active=False),
        )

    async def get_active_for_prompt(self, *, prompt_id: UUID) -> PromptVersionRecord | None:
        """Return the live active version of a live prompt, without owner scoping."""

        statement = (
            sa.select(*prompt_versions.c)
            .where(
                prompt_versions.c.prompt_id == prompt_id,
                prompt_versions.c.is_active_version.is_(True),
                prompt_versions.c.is_active.is_(True),
            )
            .limit(1)
        )

        async with self._session_factory() as session:
            await self._resolver.resolve(session, kind=EntityKind.PROMPT, entity_id=prompt_id)
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_version_record(row)

    async def _lock_version(
        self,
        session: AsyncSession,
        *,
        owner_id: UUID,
        version_id: UUID,
    ) -> ResolvedEntity:
        """Lock the parent prompt row, then re-resolve the version under that lock.

        Taking the prompt lock before the version keeps one lock order for
        every writer of the same prompt, including ``create_version``.
        """

        version = await self._resolver.resolve(
            session,
            kind=EntityKind.PROMPT_VERSION,
            entity_id=version_id,
            owner_id=owner_id,
        )
        assert version.parent_id is not None
        await self._resolver.resolve(
            session,
            kind=EntityKind.PROMPT,
            entity_id=version.parent_id,
            owner_id=owner_id,
            for_update=True,
        )
        return await self._resolver.resolve(
            session,
            kind=EntityKind.PROMPT_VERSION,
            entity_id=version_id,
            owner_id=owner_id,
            for_update=True,
        )


async def _deactivate_siblings(
    session: AsyncSession,
    *,
    prompt_id: UUID,
    now: datetime,
    exclude_version_id: UUID | None = None,
) -> int:
    """Clear the active flag on every live active version of one prompt."""

    statement = sa.update(prompt_versions).where(
        prompt_versions.c.prompt_id == prompt_id,
        prompt_versions.c.is_active_version.is_(True),
        prompt_versions.c.is_active.is_(True),
    )
    if exclude_version_id is not None:
        statement = statement.where(prompt_versions.c.id != exclude_version_id)

    result = await session.execute(statement.values(is_active_version=False, updated_at=now))
    deactivated = int(getattr(result, "rowcount", 0) or 0)
    if deactivated:
        logger.info(
            "prompt_versions_deactivated prompt_id=%s count=%s",
            prompt_id,
            deactivated,
        )
    return deactivated


def _to_conflict_error(error: IntegrityError, *, prompt_id: UUID) -> ConflictError | None:
    """Map uniqueness violations on prompt_versions to retryable conflicts."""

    message = str(error.orig).lower()
    conflict: ConflictError | None = None
    if "sequence_number" in message:
        conflict = SequenceConflictError(prompt_id=prompt_id)
    elif "active_version" in message or "prompt_versions.prompt_id" in message:
        conflict = ActiveVersionConflictError(prompt_id=prompt_id)

    if conflict is not None:
        logger.warning(
            "prompt_version_write_conflict prompt_id=%s conflict=%s",
            prompt_id,
            type(conflict).__name__,
        )
    return conflict


async def _select_version(session: AsyncSession, *, version_id: UUID) -> sa.RowMapping:
    result = await session.execute(
        sa.select(*prompt_versions.c).where(prompt_versions.c.id == version_id)
    )
    return result.mappings().one()


def _to_version_record(row: sa.RowMapping) -> PromptVersionRecord:
    return PromptVersionRecord(
        version_id=as_uuid(row["id"]),
        owner_id=as_uuid(row["owner_id"]),
        prompt_id=as_uuid(row["prompt_id"]),
        text=cast(str, row["text"]),
        sequence_number=int(row["sequence_number"]),
        sequence_label=cast(str, row["sequence_label"]),
        display_name=cast(str, row["display_name"]),
        is_active_version=bool(row["is_active_version"]),
        is_active=bool(row["is_active"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )
