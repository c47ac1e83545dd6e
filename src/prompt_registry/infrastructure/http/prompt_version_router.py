"""FastAPI router for prompt versions, including the public active-version read."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Request

from prompt_registry.application.dto.envelope_models import MessageEnvelope
from prompt_registry.application.dto.version_models import (
    PromptVersionCreateRequest,
    PromptVersionEnvelope,
    PromptVersionListEnvelope,
    PromptVersionResponse,
    PromptVersionUpdateRequest,
)
from prompt_registry.application.ports.prompt_version_repository_port import (
    PromptVersionRecord,
)
from prompt_registry.application.services.prompt_version_service import PromptVersionService
from prompt_registry.infrastructure.http.auth_guard import BearerAuthGuard


def build_prompt_version_router(
    *,
    version_service: PromptVersionService,
    auth_guard: BearerAuthGuard,
) -> APIRouter:
    """Build router exposing version management for the authenticated owner."""

    router = APIRouter(tags=["prompt-versions"])

    @router.post(
        "/prompts/{prompt_id}/versions",
        response_model=PromptVersionEnvelope,
        status_code=201,
    )
    async def create_version(
        request: Request,
        prompt_id: UUID,
        payload: PromptVersionCreateRequest,
    ) -> PromptVersionEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        version = await version_service.create_version(
            owner_id=user.user_id,
            prompt_id=prompt_id,
            text=payload.text,
            make_active=payload.make_active,
        )
        return PromptVersionEnvelope(data=to_version_response(version))

    @router.get("/prompts/{prompt_id}/versions", response_model=PromptVersionListEnvelope)
    async def list_versions(
        request: Request,
        prompt_id: UUID,
        include_inactive: bool = Query(default=False),
    ) -> PromptVersionListEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        versions = await version_service.list_versions(
            owner_id=user.user_id,
            prompt_id=prompt_id,
            include_inactive=include_inactive,
        )
        return PromptVersionListEnvelope(
            count=len(versions),
            data=[to_version_response(version) for version in versions],
        )

    @router.get("/prompt-versions/{version_id}", response_model=PromptVersionEnvelope)
    async def get_version(request: Request, version_id: UUID) -> PromptVersionEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        version = await version_service.get_version(owner_id=user.user_id, version_id=version_id)
        return PromptVersionEnvelope(data=to_version_response(version))

    @router.put("/prompt-versions/{version_id}", response_model=PromptVersionEnvelope)
    async def update_version(
        request: Request,
        version_id: UUID,
        payload: PromptVersionUpdateRequest,
    ) -> PromptVersionEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        version = await version_service.update_version(
            owner_id=user.user_id,
            version_id=version_id,
            text=payload.text,
            is_active_version=payload.is_active_version,
            is_active=payload.is_active,
        )
        return PromptVersionEnvelope(data=to_version_response(version))

    @router.post(
        "/prompt-versions/{version_id}/activate",
        response_model=PromptVersionEnvelope,
    )
    async def activate_version(request: Request, version_id: UUID) -> PromptVersionEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        version = await version_service.activate_version(
            owner_id=user.user_id,
            version_id=version_id,
        )
        return PromptVersionEnvelope(data=to_version_response(version))

    @router.delete("/prompt-versions/{version_id}", response_model=MessageEnvelope)
    async def delete_version(request: Request, version_id: UUID) -> MessageEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        await version_service.soft_delete_version(owner_id=user.user_id, version_id=version_id)
        return MessageEnvelope(message="Prompt version deleted successfully")

    return router


def build_public_router(*, version_service: PromptVersionService) -> APIRouter:
    """Build router for reads that must stay reachable without a token."""

    router = APIRouter(tags=["public"])

    @router.get("/prompts/{prompt_id}/active-version", response_model=PromptVersionEnvelope)
    async def get_active_version(prompt_id: UUID) -> PromptVersionEnvelope:
        version = await version_service.get_active_for_prompt(prompt_id=prompt_id)
        return PromptVersionEnvelope(data=to_version_response(version))

    return router


def to_version_response(version: PromptVersionRecord) -> PromptVersionResponse:
    return PromptVersionResponse(
        id=version.version_id,
        owner_id=version.owner_id,
        prompt_id=version.prompt_id,
        text=version.text,
        sequence_number=version.sequence_number,
        sequence_label=version.sequence_label,
        display_name=version.display_name,
        is_active_version=version.is_active_version,
        is_active=version.is_active,
        created_at=version.created_at,
        updated_at=version.updated_at,
    )
