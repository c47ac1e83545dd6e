"""Port for issuing and verifying stateless session tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class IssuedSessionToken:
    """Signed token handed to a caller after signup or login."""

    token: str
    expires_at: datetime


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried by a verified session token."""

    user_id: UUID
    email: str


class SessionTokenPort(Protocol):
    """Session token contract; expiry is the only invalidation mechanism."""

    def issue(self, *, user_id: UUID, email: str) -> IssuedSessionToken:
        """Sign a new token for the given identity."""

    def verify(self, token: str) -> SessionClaims:
        """Return claims or raise TokenExpired/TokenInvalid/TokenMalformed errors."""
