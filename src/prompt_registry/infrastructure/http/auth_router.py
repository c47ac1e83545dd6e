"""FastAPI router for signup, login and current-account endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

from prompt_registry.application.dto.auth_models import (
    LoginRequest,
    SessionEnvelope,
    SessionResponse,
    SignupRequest,
    UserEnvelope,
    UserResponse,
)
from prompt_registry.application.dto.envelope_models import MessageEnvelope
from prompt_registry.application.ports.user_repository_port import UserRecord
from prompt_registry.application.services.identity_service import (
    AuthenticatedSession,
    IdentityService,
)
from prompt_registry.infrastructure.http.auth_guard import BearerAuthGuard


def build_auth_router(
    *,
    identity_service: IdentityService,
    auth_guard: BearerAuthGuard,
) -> APIRouter:
    """Build router exposing account and session endpoints."""

    router = APIRouter(tags=["auth"])

    @router.post("/auth/signup", response_model=SessionEnvelope, status_code=201)
    async def signup(payload: SignupRequest) -> SessionEnvelope:
        authenticated = await identity_service.register(
            email=payload.email,
            password=payload.password,
            display_name=payload.display_name,
        )
        return SessionEnvelope(
            data=to_session_response(authenticated),
            message="User registered successfully",
        )

    @router.post("/auth/login", response_model=SessionEnvelope)
    async def login(payload: LoginRequest) -> SessionEnvelope:
        authenticated = await identity_service.authenticate(
            email=payload.email,
            password=payload.password,
        )
        return SessionEnvelope(
            data=to_session_response(authenticated),
            message="Login successful",
        )

    @router.get("/auth/me", response_model=UserEnvelope)
    async def current_user(request: Request) -> UserEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        return UserEnvelope(data=to_user_response(user))

    @router.delete("/auth/me", response_model=MessageEnvelope)
    async def deactivate_current_user(request: Request) -> MessageEnvelope:
        user = await auth_guard.require_user(
            authorization_header=request.headers.get("authorization")
        )
        await identity_service.deactivate_account(user_id=user.user_id)
        return MessageEnvelope(message="Account deactivated successfully")

    return router


def to_user_response(user: UserRecord) -> UserResponse:
    return UserResponse(
        id=user.user_id,
        email=user.email,
        display_name=user.display_name,
        is_active=user.is_active,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def to_session_response(authenticated: AuthenticatedSession) -> SessionResponse:
    return SessionResponse(
        user=to_user_response(authenticated.user),
        token=authenticated.session.token,
        expires_at=authenticated.session.expires_at,
    )
