"""Transaction-scoped existence, liveness and ownership resolution.

Every repository mutation calls the resolver with the session of its own
transaction, so the check and the write observe the same snapshot. A caller
that does not own an entity gets the same failure as for an absent one.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from prompt_registry.domain.entity_kind import EntityKind
from prompt_registry.domain.errors import EntityNotFoundError, NotFoundReason
from prompt_registry.domain.ownership import ResolvedEntity
from prompt_registry.infrastructure.db.metadata import projects, prompt_versions, prompts, users

logger = logging.getLogger(__name__)


def as_uuid(value: Any) -> UUID:
    """Coerce driver-returned identifiers to UUID."""

    return value if isinstance(value, UUID) else UUID(str(value))


class OwnershipResolver:
    """Resolve one entity and its parent chain inside a caller's session."""

    async def resolve(
        self,
        session: AsyncSession,
        *,
        kind: EntityKind,
        entity_id: UUID,
        owner_id: UUID | None = None,
        for_update: bool = False,
    ) -> ResolvedEntity:
        """Return the live entity or raise EntityNotFoundError.

        With ``owner_id`` set, a foreign entity or a deactivated owner is
        reported as missing. A soft-deleted entity, or one under a soft-deleted
        parent, is reported as deleted. ``for_update`` row-locks the entity on
        backends that support ``SELECT ... FOR UPDATE``.
        """

        statement = _build_statement(kind=kind, entity_id=entity_id)
        if for_update:
            statement = statement.with_for_update(of=_LOCK_TARGETS[kind])

        result = await session.execute(statement)
        row = result.mappings().first()
        if row is None:
            raise _not_found(kind=kind, entity_id=entity_id, reason=NotFoundReason.MISSING)

        row_owner_id = as_uuid(row["owner_id"])
        if owner_id is not None and (row_owner_id != owner_id or not bool(row["owner_is_active"])):
            raise _not_found(kind=kind, entity_id=entity_id, reason=NotFoundReason.MISSING)

        lineage = [row["is_active"], row["project_is_active"], row["prompt_is_active"]]
        if not all(bool(flag) for flag in lineage if flag is not None):
            raise _not_found(kind=kind, entity_id=entity_id, reason=NotFoundReason.DELETED)

        raw_parent_id = row["parent_id"]
        return ResolvedEntity(
            kind=kind,
            entity_id=entity_id,
            owner_id=row_owner_id,
            parent_id=as_uuid(raw_parent_id) if raw_parent_id is not None else None,
        )


_LOCK_TARGETS = {
    EntityKind.PROJECT: projects,
    EntityKind.PROMPT: prompts,
    EntityKind.PROMPT_VERSION: prompt_versions,
}


def _build_statement(*, kind: EntityKind, entity_id: UUID) -> sa.Select[Any]:
    if kind is EntityKind.PROJECT:
        return (
            sa.select(
                projects.c.owner_id,
                projects.c.is_active,
                sa.null().label("parent_id"),
                sa.null().label("project_is_active"),
                sa.null().label("prompt_is_active"),
                users.c.is_active.label("owner_is_active"),
            )
            .select_from(projects.join(users, users.c.id == projects.c.owner_id))
            .where(projects.c.id == entity_id)
        )

    if kind is EntityKind.PROMPT:
        return (
            sa.select(
                prompts.c.owner_id,
                prompts.c.is_active,
                prompts.c.project_id.label("parent_id"),
                projects.c.is_active.label("project_is_active"),
                sa.null().label("prompt_is_active"),
                users.c.is_active.label("owner_is_active"),
            )
            .select_from(
                prompts.join(
                    projects,
                    sa.and_(
                        projects.c.id == prompts.c.project_id,
                        projects.c.owner_id == prompts.c.owner_id,
                    ),
                ).join(users, users.c.id == prompts.c.owner_id)
            )
            .where(prompts.c.id == entity_id)
        )

    return (
        sa.select(
            prompt_versions.c.owner_id,
            prompt_versions.c.is_active,
            prompt_versions.c.prompt_id.label("parent_id"),
            projects.c.is_active.label("project_is_active"),
            prompts.c.is_active.label("prompt_is_active"),
            users.c.is_active.label("owner_is_active"),
        )
        .select_from(
            prompt_versions.join(
                prompts,
                sa.and_(
                    prompts.c.id == prompt_versions.c.prompt_id,
                    prompts.c.owner_id == prompt_versions.c.owner_id,
                ),
            )
            .join(
                projects,
                sa.and_(
                    projects.c.id == prompts.c.project_id,
                    projects.c.owner_id == prompts.c.owner_id,
                ),
            )
            .join(users, users.c.id == prompt_versions.c.owner_id)
        )
        .where(prompt_versions.c.id == entity_id)
    )


def _not_found(
    *,
    kind: EntityKind,
    entity_id: UUID,
    reason: NotFoundReason,
) -> EntityNotFoundError:
    logger.debug(
        "ownership_resolution_failed kind=%s entity_id=%s reason=%s",
        kind.value,
        entity_id,
        reason.value,
    )
    return EntityNotFoundError(kind=kind, entity_id=entity_id, reason=reason)
