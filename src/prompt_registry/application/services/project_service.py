"""Application service for owner-scoped project lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID, uuid4

from prompt_registry.application.ports.project_repository_port import (
    ProjectChanges,
    ProjectCreateInput,
    ProjectRecord,
    ProjectRepositoryPort,
)
from prompt_registry.domain.errors import NoFieldsProvidedError
from prompt_registry.domain.validation import validate_entity_name

logger = logging.getLogger(__name__)


class ProjectService:
    """Create, read, update and soft-delete projects for one owner."""

    def __init__(
        self,
        *,
        projects: ProjectRepositoryPort,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._projects = projects
        self._id_factory = id_factory

    async def create_project(self, *, owner_id: UUID, name: str) -> ProjectRecord:
        project = await self._projects.create_project(
            ProjectCreateInput(
                project_id=self._id_factory(),
                owner_id=owner_id,
                name=validate_entity_name(name=name),
            )
        )
        logger.info("project_created project_id=%s owner_id=%s", project.project_id, owner_id)
        return project

    async def list_projects(
        self,
        *,
        owner_id: UUID,
        include_inactive: bool = False,
    ) -> list[ProjectRecord]:
        return await self._projects.list_projects(
            owner_id=owner_id,
            include_inactive=include_inactive,
        )

    async def get_project(self, *, owner_id: UUID, project_id: UUID) -> ProjectRecord:
        return await self._projects.get_project(owner_id=owner_id, project_id=project_id)

    async def update_project(
        self,
        *,
        owner_id: UUID,
        project_id: UUID,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> ProjectRecord:
        """Apply a partial update; at least one field must be provided."""

        changes = ProjectChanges(
            name=validate_entity_name(name=name) if name is not None else None,
            is_active=is_active,
        )
        if changes.is_empty:
            raise NoFieldsProvidedError()

        project = await self._projects.update_project(
            owner_id=owner_id,
            project_id=project_id,
            changes=changes,
        )
        logger.info("project_updated project_id=%s", project_id)
        return project

    async def soft_delete_project(self, *, owner_id: UUID, project_id: UUID) -> ProjectRecord:
        project = await self._projects.soft_delete_project(
            owner_id=owner_id,
            project_id=project_id,
        )
        logger.info("project_soft_deleted project_id=%s", project_id)
        return project
