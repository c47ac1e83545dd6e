"""Application service for prompt versions and their single active version."""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID, uuid4

from prompt_registry.application.ports.prompt_version_repository_port import (
    PromptVersionChanges,
    PromptVersionCreateInput,
    PromptVersionRecord,
    PromptVersionRepositoryPort,
)
from prompt_registry.domain.errors import NoActiveVersionError, NoFieldsProvidedError
from prompt_registry.domain.validation import validate_version_text

logger = logging.getLogger(__name__)


class PromptVersionService:
    """Create, activate and retire prompt versions.

    Exclusivity of the active version is enforced by the repository inside
    the writing transaction; conflicts surface as ConflictError and are safe
    for the caller to retry.
    """

    def __init__(
        self,
        *,
        versions: PromptVersionRepositoryPort,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._versions = versions
        self._id_factory = id_factory

    async def create_version(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        text: str,
        make_active: bool = False,
    ) -> PromptVersionRecord:
        version = await self._versions.create_version(
            PromptVersionCreateInput(
                version_id=self._id_factory(),
                owner_id=owner_id,
                prompt_id=prompt_id,
                text=validate_version_text(text=text),
                make_active=make_active,
            )
        )
        logger.info(
            "prompt_version_created prompt_id=%s version_id=%s label=%s active=%s",
            prompt_id,
            version.version_id,
            version.sequence_label,
            version.is_active_version,
        )
        return version

    async def list_versions(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        include_inactive: bool = False,
    ) -> list[PromptVersionRecord]:
        return await self._versions.list_versions(
            owner_id=owner_id,
            prompt_id=prompt_id,
            include_inactive=include_inactive,
        )

    async def get_version(self, *, owner_id: UUID, version_id: UUID) -> PromptVersionRecord:
        return await self._versions.get_version(owner_id=owner_id, version_id=version_id)

    async def activate_version(self, *, owner_id: UUID, version_id: UUID) -> PromptVersionRecord:
        """Make one version the prompt's only active version."""

        return await self.update_version(
            owner_id=owner_id,
            version_id=version_id,
            is_active_version=True,
        )

    async def update_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
        text: str | None = None,
        is_active_version: bool | None = None,
        is_active: bool | None = None,
    ) -> PromptVersionRecord:
        changes = PromptVersionChanges(
            text=validate_version_text(text=text) if text is not None else None,
            is_active_version=is_active_version,
            is_active=is_active,
        )
        if changes.is_empty:
            raise NoFieldsProvidedError()

        version = await self._versions.update_version(
            owner_id=owner_id,
            version_id=version_id,
            changes=changes,
        )
        logger.info(
            "prompt_version_updated version_id=%s active_version=%s live=%s",
            version_id,
            version.is_active_version,
            version.is_active,
        )
        return version

    async def soft_delete_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
    ) -> PromptVersionRecord:
        """Soft-delete one version; no other version is promoted in its place."""

        version = await self._versions.soft_delete_version(
            owner_id=owner_id,
            version_id=version_id,
        )
        logger.info("prompt_version_soft_deleted version_id=%s", version_id)
        return version

    async def get_active_for_prompt(self, *, prompt_id: UUID) -> PromptVersionRecord:
        """Return the live prompt's active version without any ownership filter."""

        version = await self._versions.get_active_for_prompt(prompt_id=prompt_id)
        if version is None:
            raise NoActiveVersionError(prompt_id=prompt_id)
        return version
