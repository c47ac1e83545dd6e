"""Pydantic models for signup, login and current-user endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import StrictStr

from prompt_registry.application.dto.envelope_models import StrictModel


class SignupRequest(StrictModel):
    """Signup request body; format rules are applied by the identity service."""

    email: StrictStr
    password: StrictStr
    display_name: StrictStr | None = None


class LoginRequest(StrictModel):
    """Login request body."""

    email: StrictStr
    password: StrictStr


class UserResponse(StrictModel):
    """Public user projection; never carries the password hash."""

    id: UUID
    email: str
    display_name: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SessionResponse(StrictModel):
    """Authenticated user with a freshly issued session token."""

    user: UserResponse
    token: str
    expires_at: datetime


class SessionEnvelope(StrictModel):
    success: bool = True
    data: SessionResponse
    message: str | None = None


class UserEnvelope(StrictModel):
    success: bool = True
    data: UserResponse
