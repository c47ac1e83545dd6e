"""Port for prompt version persistence and exclusive activation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class PromptVersionRecord:
    """Prompt version persistence model."""

    version_id: UUID
    owner_id: UUID
    prompt_id: UUID
    text: str
    sequence_number: int
    sequence_label: str
    display_name: str
    is_active_version: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class PromptVersionCreateInput:
    """Validated input for inserting one prompt version."""

    version_id: UUID
    owner_id: UUID
    prompt_id: UUID
    text: str
    make_active: bool = False


@dataclass(frozen=True)
class PromptVersionChanges:
    """Fields eligible for partial version update; None means untouched."""

    text: str | None = None
    is_active_version: bool | None = None
    is_active: bool | None = None

    @property
    def is_empty(self) -> bool:
        return self.text is None and self.is_active_version is None and self.is_active is None


class PromptVersionRepositoryPort(Protocol):
    """Prompt version repository contract.

    Implementations keep at most one live active version per prompt and raise
    ConflictError subclasses when a concurrent writer wins a uniqueness race.
    """

    async def create_version(self, payload: PromptVersionCreateInput) -> PromptVersionRecord:
        """Number and insert a version, deactivating siblings first when activating."""

    async def list_versions(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        include_inactive: bool = False,
    ) -> list[PromptVersionRecord]:
        """Return versions of one live prompt newest first."""

    async def get_version(self, *, owner_id: UUID, version_id: UUID) -> PromptVersionRecord:
        """Return one live version owned by owner."""

    async def update_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
        changes: PromptVersionChanges,
    ) -> PromptVersionRecord:
        """Apply non-empty changes, running exclusive activation when requested."""

    async def soft_delete_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
    ) -> PromptVersionRecord:
        """Soft-delete one live version without promoting another."""

    async def get_active_for_prompt(self, *, prompt_id: UUID) -> PromptVersionRecord | None:
        """Return the live active version of a live prompt, or None when absent.

        Raises EntityNotFoundError when the prompt itself is absent or deleted.
        """
