"""Application service for prompts nested under projects."""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID, uuid4

from prompt_registry.application.ports.prompt_repository_port import (
    PromptChanges,
    PromptCreateInput,
    PromptRecord,
    PromptRepositoryPort,
)
from prompt_registry.domain.errors import NoFieldsProvidedError
from prompt_registry.domain.validation import validate_entity_name

logger = logging.getLogger(__name__)


class PromptService:
    """Manage prompts; the parent project must be live and owned by the caller."""

    def __init__(
        self,
        *,
        prompts: PromptRepositoryPort,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._prompts = prompts
        self._id_factory = id_factory

    async def create_prompt(self, *, owner_id: UUID, project_id: UUID, name: str) -> PromptRecord:
        prompt = await self._prompts.create_prompt(
            PromptCreateInput(
                prompt_id=self._id_factory(),
                owner_id=owner_id,
                project_id=project_id,
                name=validate_entity_name(name=name),
            )
        )
        logger.info("prompt_created prompt_id=%s project_id=%s", prompt.prompt_id, project_id)
        return prompt

    async def list_prompts(
        self,
        *,
        owner_id: UUID,
        project_id: UUID,
        include_inactive: bool = False,
    ) -> list[PromptRecord]:
        return await self._prompts.list_prompts(
            owner_id=owner_id,
            project_id=project_id,
            include_inactive=include_inactive,
        )

    async def get_prompt(self, *, owner_id: UUID, prompt_id: UUID) -> PromptRecord:
        return await self._prompts.get_prompt(owner_id=owner_id, prompt_id=prompt_id)

    async def update_prompt(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> PromptRecord:
        changes = PromptChanges(
            name=validate_entity_name(name=name) if name is not None else None,
            is_active=is_active,
        )
        if changes.is_empty:
            raise NoFieldsProvidedError()

        prompt = await self._prompts.update_prompt(
            owner_id=owner_id,
            prompt_id=prompt_id,
            changes=changes,
        )
        logger.info("prompt_updated prompt_id=%s", prompt_id)
        return prompt

    async def soft_delete_prompt(self, *, owner_id: UUID, prompt_id: UUID) -> PromptRecord:
        prompt = await self._prompts.soft_delete_prompt(owner_id=owner_id, prompt_id=prompt_id)
        logger.info("prompt_soft_deleted prompt_id=%s", prompt_id)
        return prompt
