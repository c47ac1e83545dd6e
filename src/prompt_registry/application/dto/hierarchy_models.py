"""Pydantic models for project and prompt endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr

from prompt_registry.application.dto.envelope_models import StrictModel


class PartialUpdateModel(BaseModel):
    """Partial update body; unknown fields are dropped, not rejected."""

    model_config = ConfigDict(extra="ignore")


class ProjectCreateRequest(StrictModel):
    name: StrictStr


class ProjectUpdateRequest(PartialUpdateModel):
    """Project update body; ``is_active=false`` soft-deletes the project."""

    name: StrictStr | None = None
    is_active: StrictBool | None = None


class ProjectResponse(StrictModel):
    id: UUID
    owner_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ProjectEnvelope(StrictModel):
    success: bool = True
    data: ProjectResponse
    message: str | None = None


class ProjectListEnvelope(StrictModel):
    success: bool = True
    count: int
    data: list[ProjectResponse]


class PromptCreateRequest(StrictModel):
    name: StrictStr


class PromptUpdateRequest(PartialUpdateModel):
    """Prompt update body; ``is_active=false`` soft-deletes the prompt."""

    name: StrictStr | None = None
    is_active: StrictBool | None = None


class PromptResponse(StrictModel):
    id: UUID
    owner_id: UUID
    project_id: UUID
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PromptEnvelope(StrictModel):
    success: bool = True
    data: PromptResponse
    message: str | None = None


class PromptListEnvelope(StrictModel):
    success: bool = True
    count: int
    data: list[PromptResponse]
