"""FastAPI router for prompts nested under projects."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Request

from prompt_registry.application.dto.envelope_models import MessageEnvelope
from prompt_registry.application.dto.hierarchy_models import (
    PromptCreateRequest,
    PromptEnvelope,
    PromptListEnvelope,
    PromptResponse,
    PromptUpdateRequest,
)
from prompt_registry.application.ports.prompt_repository_port import PromptRecord
from prompt_registry.application.services.prompt_service import PromptService
from prompt_registry.infrastructure.http.auth_guard import BearerAuthGuard


def build_prompt_router(
    *,
    prompt_service: PromptService,
    auth_guard: BearerAuthGuard,
) -> APIRouter:
    """Build router exposing prompt CRUD for the authenticated owner."""

    router = APIRouter(tags=["prompts"])

    @router.post(
        "/projects/{project_id}/prompts",
        response_model=PromptEnvelope,
        status_code=201,
    )
    async def create_prompt(
        request: Request,
        project_id: UUID,
        payload: PromptCreateRequest,
    ) -> PromptEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        prompt = await prompt_service.create_prompt(
            owner_id=user.user_id,
            project_id=project_id,
            name=payload.name,
        )
        return PromptEnvelope(data=to_prompt_response(prompt))

    @router.get("/projects/{project_id}/prompts", response_model=PromptListEnvelope)
    async def list_prompts(
        request: Request,
        project_id: UUID,
        include_inactive: bool = Query(default=False),
    ) -> PromptListEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        prompts = await prompt_service.list_prompts(
            owner_id=user.user_id,
            project_id=project_id,
            include_inactive=include_inactive,
        )
        return PromptListEnvelope(
            count=len(prompts),
            data=[to_prompt_response(prompt) for prompt in prompts],
        )

    @router.get("/prompts/{prompt_id}", response_model=PromptEnvelope)
    async def get_prompt(request: Request, prompt_id: UUID) -> PromptEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        prompt = await prompt_service.get_prompt(owner_id=user.user_id, prompt_id=prompt_id)
        return PromptEnvelope(data=to_prompt_response(prompt))

    @router.put("/prompts/{prompt_id}", response_model=PromptEnvelope)
    async def update_prompt(
        request: Request,
        prompt_id: UUID,
        payload: PromptUpdateRequest,
    ) -> PromptEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        prompt = await prompt_service.update_prompt(
            owner_id=user.user_id,
            prompt_id=prompt_id,
            name=payload.name,
            is_active=payload.is_active,
        )
        return PromptEnvelope(data=to_prompt_response(prompt))

    @router.delete("/prompts/{prompt_id}", response_model=MessageEnvelope)
    async def delete_prompt(request: Request, prompt_id: UUID) -> MessageEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        await prompt_service.soft_delete_prompt(owner_id=user.user_id, prompt_id=prompt_id)
        return MessageEnvelope(message="Prompt deleted successfully")

    return router


def to_prompt_response(prompt: PromptRecord) -> PromptResponse:
    return PromptResponse(
        id=prompt.prompt_id,
        owner_id=prompt.owner_id,
        project_id=prompt.project_id,
        name=prompt.name,
        is_active=prompt.is_active,
        created_at=prompt.created_at,
        updated_at=prompt.updated_at,
    )
