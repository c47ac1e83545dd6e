"""Bearer header parsing and session guard for authenticated routes."""

from __future__ import annotations

from prompt_registry.application.ports.user_repository_port import UserRecord
from prompt_registry.application.services.identity_service import IdentityService
from prompt_registry.domain.errors import InvalidAuthTokenError, MissingAuthTokenError


def extract_bearer_token(authorization_header: str | None) -> str:
    """Extract session token from standard `Authorization: Bearer <token>` header."""

    if authorization_header is None or not authorization_header.strip():
        raise MissingAuthTokenError()

    parts = authorization_header.strip().split()
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise InvalidAuthTokenError()

    return parts[1]


class BearerAuthGuard:
    """Resolve the authenticated caller of one request."""

    def __init__(self, *, identity_service: IdentityService) -> None:
        self._identity_service = identity_service

    async def require_user(self, *, authorization_header: str | None) -> UserRecord:
        """Verify the bearer token and return its still-active account."""

        token = extract_bearer_token(authorization_header)
        claims = self._identity_service.resolve_session(token=token)
        return await self._identity_service.get_active_user(user_id=claims.user_id)
