"""Port for owner-scoped prompt persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class PromptRecord:
    """Prompt persistence model."""

    prompt_id: UUID
    owner_id: UUID
    project_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PromptCreateInput:
    """Validated input for inserting one prompt under a project."""

    prompt_id: UUID
    owner_id: UUID
    project_id: UUID
    name: str


@dataclass(frozen=True)
class PromptChanges:
    """Fields eligible for partial prompt update; None means untouched."""

    name: str | None = None
    is_active: bool | None = None

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.is_active is None


class PromptRepositoryPort(Protocol):
    """Prompt repository contract."""

    async def create_prompt(self, payload: PromptCreateInput) -> PromptRecord:
        """Insert a prompt under a live project owned by the same owner."""

    async def list_prompts(
        self,
        *,
        owner_id: UUID,
        project_id: UUID,
        include_inactive: bool = False,
    ) -> list[PromptRecord]:
        """Return prompts of one live project newest first."""

    async def get_prompt(self, *, owner_id: UUID, prompt_id: UUID) -> PromptRecord:
        """Return one live prompt owned by owner."""

    async def update_prompt(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        changes: PromptChanges,
    ) -> PromptRecord:
        """Apply non-empty changes to one live prompt."""

    async def soft_delete_prompt(self, *, owner_id: UUID, prompt_id: UUID) -> PromptRecord:
        """Flip is_active to false on one live prompt."""
