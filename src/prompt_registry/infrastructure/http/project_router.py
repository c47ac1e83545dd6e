"""FastAPI router for owner-scoped project endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Request

from prompt_registry.application.dto.envelope_models import MessageEnvelope
from prompt_registry.application.dto.hierarchy_models import (
    ProjectCreateRequest,
    ProjectEnvelope,
    ProjectListEnvelope,
    ProjectResponse,
    ProjectUpdateRequest,
)
from prompt_registry.application.ports.project_repository_port import ProjectRecord
from prompt_registry.application.services.project_service import ProjectService
from prompt_registry.infrastructure.http.auth_guard import BearerAuthGuard


def build_project_router(
    *,
    project_service: ProjectService,
    auth_guard: BearerAuthGuard,
) -> APIRouter:
    """Build router exposing project CRUD for the authenticated owner."""

    router = APIRouter(tags=["projects"])

    @router.post("/projects", response_model=ProjectEnvelope, status_code=201)
    async def create_project(request: Request, payload: ProjectCreateRequest) -> ProjectEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        project = await project_service.create_project(owner_id=user.user_id, name=payload.name)
        return ProjectEnvelope(data=to_project_response(project))

    @router.get("/projects", response_model=ProjectListEnvelope)
    async def list_projects(
        request: Request,
        include_inactive: bool = Query(default=False),
    ) -> ProjectListEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        projects = await project_service.list_projects(
            owner_id=user.user_id,
            include_inactive=include_inactive,
        )
        return ProjectListEnvelope(
            count=len(projects),
            data=[to_project_response(project) for project in projects],
        )

    @router.get("/projects/{project_id}", response_model=ProjectEnvelope)
    async def get_project(request: Request, project_id: UUID) -> ProjectEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        project = await project_service.get_project(owner_id=user.user_id, project_id=project_id)
        return ProjectEnvelope(data=to_project_response(project))

    @router.put("/projects/{project_id}", response_model=ProjectEnvelope)
    async def update_project(
        request: Request,
        project_id: UUID,
        payload: ProjectUpdateRequest,
    ) -> ProjectEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        project = await project_service.update_project(
            owner_id=user.user_id,
            project_id=project_id,
            name=payload.name,
            is_active=payload.is_active,
        )
        return ProjectEnvelope(data=to_project_response(project))

    @router.delete("/projects/{project_id}", response_model=MessageEnvelope)
    async def delete_project(request: Request, project_id: UUID) -> MessageEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        await project_service.soft_delete_project(owner_id=user.user_id, project_id=project_id)
        return MessageEnvelope(message="Project deleted successfully")

    return router


def to_project_response(project: ProjectRecord) -> ProjectResponse:
    return ProjectResponse(
        id=project.project_id,
        owner_id=project.owner_id,
        name=project.name,
        is_active=project.is_active,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )
