"""Port for user persistence used by the identity service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """User persistence model."""

    user_id: UUID
    email: str
    password_hash: str
    display_name: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class UserCreateInput:
    """Input payload for inserting one user row."""

    user_id: UUID
    email: str
    password_hash: str
    display_name: str | None


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        """Return user by id, including inactive users."""

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        """Return user by normalized email, including inactive users."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert user or raise DuplicateEmailError when the email is taken."""

    async def set_active(self, *, user_id: UUID, is_active: bool) -> UserRecord | None:
        """Set the account active flag and return the updated row, or None."""
