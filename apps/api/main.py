"""API entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from datetime import timedelta

import uvicorn
from fastapi import FastAPI

from prompt_registry.application.ports.password_hasher_port import PasswordHasherPort
from prompt_registry.application.ports.session_token_port import SessionTokenPort
from prompt_registry.application.services.identity_service import (
    DEFAULT_MIN_PASSWORD_LENGTH,
    IdentityService,
)
from prompt_registry.application.services.project_service import ProjectService
from prompt_registry.application.services.prompt_service import PromptService
from prompt_registry.application.services.prompt_version_service import PromptVersionService
from prompt_registry.config.settings import load_settings
from prompt_registry.infrastructure.db.ownership_resolver import OwnershipResolver
from prompt_registry.infrastructure.db.project_repository import SqlAlchemyProjectRepository
from prompt_registry.infrastructure.db.prompt_repository import SqlAlchemyPromptRepository
from prompt_registry.infrastructure.db.prompt_version_repository import (
    SqlAlchemyPromptVersionRepository,
)
from prompt_registry.infrastructure.db.session import create_session_factory
from prompt_registry.infrastructure.db.user_repository import SqlAlchemyUserRepository
from prompt_registry.infrastructure.http.auth_guard import BearerAuthGuard
from prompt_registry.infrastructure.http.auth_router import build_auth_router
from prompt_registry.infrastructure.http.error_envelope import install_error_handlers
from prompt_registry.infrastructure.http.project_router import build_project_router
from prompt_registry.infrastructure.http.prompt_router import build_prompt_router
from prompt_registry.infrastructure.http.prompt_version_router import (
    build_prompt_version_router,
    build_public_router,
)
from prompt_registry.infrastructure.http.request_logging import RequestLoggingMiddleware
from prompt_registry.infrastructure.logging import configure_logging
from prompt_registry.infrastructure.security.password_hasher import BcryptPasswordHasher
from prompt_registry.infrastructure.security.token_service import JwtSessionTokenService

API_HOST = "0.0.0.0"
API_PORT = 8000
logger = logging.getLogger(__name__)


def create_app(
    *,
    database_url: str | None = None,
    token_service: SessionTokenPort | None = None,
    password_hasher: PasswordHasherPort | None = None,
    min_password_length: int | None = None,
    expose_error_stack: bool | None = None,
) -> FastAPI:
    """Create FastAPI app serving the prompt registry HTTP surface.

    Settings are loaded from the environment only when an argument is
    left unset, so tests can build a fully injected app.
    """

    should_load_settings = (
        database_url is None
        or token_service is None
        or password_hasher is None
        or expose_error_stack is None
    )
    if should_load_settings:
        settings = load_settings()
        configure_logging(level=settings.log_level)
        if database_url is None:
            database_url = settings.database_url
        if token_service is None:
            token_service = JwtSessionTokenService(
                secret=settings.jwt_secret,
                token_ttl=timedelta(days=settings.jwt_expires_in_days),
            )
        if password_hasher is None:
            password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_salt_rounds)
        if min_password_length is None:
            min_password_length = settings.min_password_length
        if expose_error_stack is None:
            expose_error_stack = settings.expose_error_stack

    assert database_url is not None
    assert token_service is not None
    assert password_hasher is not None
    assert expose_error_stack is not None

    session_factory = create_session_factory(database_url)
    resolver = OwnershipResolver()
    identity_service = IdentityService(
        users=SqlAlchemyUserRepository(session_factory),
        password_hasher=password_hasher,
        token_service=token_service,
        min_password_length=min_password_length or DEFAULT_MIN_PASSWORD_LENGTH,
    )
    version_service = PromptVersionService(
        versions=SqlAlchemyPromptVersionRepository(session_factory, resolver=resolver),
    )
    auth_guard = BearerAuthGuard(identity_service=identity_service)

    app = FastAPI(title="Prompt Registry")
    app.add_middleware(RequestLoggingMiddleware)
    install_error_handlers(app, expose_error_stack=expose_error_stack)

    @app.get("/health")
    async def health() -> dict[str, object]:
        return {"success": True, "message": "Server is running"}

    app.include_router(build_public_router(version_service=version_service))
    app.include_router(
        build_auth_router(identity_service=identity_service, auth_guard=auth_guard)
    )
    app.include_router(
        build_project_router(
            project_service=ProjectService(
                projects=SqlAlchemyProjectRepository(session_factory, resolver=resolver),
            ),
            auth_guard=auth_guard,
        )
    )
    app.include_router(
        build_prompt_router(
            prompt_service=PromptService(
                prompts=SqlAlchemyPromptRepository(session_factory, resolver=resolver),
            ),
            auth_guard=auth_guard,
        )
    )
    app.include_router(
        build_prompt_version_router(version_service=version_service, auth_guard=auth_guard)
    )
    logger.info("api_app_created")
    return app


def run_asgi_server(*, host: str = API_HOST, port: int = API_PORT) -> None:
    """Run the API as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run API runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
