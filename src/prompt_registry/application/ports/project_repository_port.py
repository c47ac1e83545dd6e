"""Port for owner-scoped project persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class ProjectRecord:
    """Project persistence model."""

    project_id: UUID
    owner_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProjectCreateInput:
    """Validated input for inserting one project."""

    project_id: UUID
    owner_id: UUID
    name: str


@dataclass(frozen=True)
class ProjectChanges:
    """Fields eligible for partial project update; None means untouched."""

    name: str | None = None
    is_active: bool | None = None

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.is_active is None


class ProjectRepositoryPort(Protocol):
    """Project repository contract.

    Lookups and mutations raise EntityNotFoundError for absent, soft-deleted,
    or foreign projects.
    """

    async def create_project(self, payload: ProjectCreateInput) -> ProjectRecord:
        """Insert a project for an existing, active owner."""

    async def list_projects(
        self,
        *,
        owner_id: UUID,
        include_inactive: bool = False,
    ) -> list[ProjectRecord]:
        """Return owner projects newest first."""

    async def get_project(self, *, owner_id: UUID, project_id: UUID) -> ProjectRecord:
        """Return one live project owned by owner."""

    async def update_project(
        self,
        *,
        owner_id: UUID,
        project_id: UUID,
        changes: ProjectChanges,
    ) -> ProjectRecord:
        """Apply non-empty changes to one live project."""

    async def soft_delete_project(self, *, owner_id: UUID, project_id: UUID) -> ProjectRecord:
        """Flip is_active to false on one live project."""
