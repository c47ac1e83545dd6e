"""Pydantic models for prompt version endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import StrictBool, StrictStr

from prompt_registry.application.dto.envelope_models import StrictModel
from prompt_registry.application.dto.hierarchy_models import PartialUpdateModel


class PromptVersionCreateRequest(StrictModel):
    text: StrictStr
    make_active: StrictBool = False


class PromptVersionUpdateRequest(PartialUpdateModel):
    """Version update body.

    ``is_active_version=true`` activates the version and deactivates its
    siblings. ``is_active=false`` soft-deletes it and wins over any other flag.
    """

    text: StrictStr | None = None
    is_active_version: StrictBool | None = None
    is_active: StrictBool | None = None


class PromptVersionResponse(StrictModel):
    id: UUID
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


class PromptVersionEnvelope(StrictModel):
    success: bool = True
    data: PromptVersionResponse
    message: str | None = None


class PromptVersionListEnvelope(StrictModel):
    success: bool = True
    count: int
    data: list[PromptVersionResponse]
