"""Signed, stateless session tokens backed by python-jose JWTs."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from prompt_registry.application.ports.session_token_port import (
    IssuedSessionToken,
    SessionClaims,
    SessionTokenPort,
)
from prompt_registry.domain.errors import (
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
)

DEFAULT_TOKEN_TTL = timedelta(days=30)
_ALGORITHM = "HS256"


class JwtSessionTokenService(SessionTokenPort):
    """Issue and verify HS256 session tokens.

    There is no server-side revocation list; a token stays valid until it
    expires.
    """

    def __init__(
        self,
        *,
        secret: str,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret is not configured")
        self._secret = secret
        self._token_ttl = token_ttl
        self._now = now or (lambda: datetime.now(tz=UTC))

    def issue(self, *, user_id: UUID, email: str) -> IssuedSessionToken:
        issued_at = self._now()
        expires_at = issued_at + self._token_ttl
        claims = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._secret, algorithm=_ALGORITHM)
        return IssuedSessionToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> SessionClaims:
        if token.count(".") != 2:
            raise TokenMalformedError()

        try:
            jwt.get_unverified_header(token)
        except JWTError as exc:
            raise TokenMalformedError() from exc

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise TokenInvalidError() from exc

        expires_at = payload.get("exp")
        if not isinstance(expires_at, int):
            raise TokenMalformedError()
        if self._now().timestamp() >= expires_at:
            raise TokenExpiredError()

        try:
            user_id = UUID(str(payload["sub"]))
            email = str(payload["email"])
        except (KeyError, ValueError) as exc:
            raise TokenMalformedError() from exc

        return SessionClaims(user_id=user_id, email=email)
