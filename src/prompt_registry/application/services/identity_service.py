"""Application identity service for signup, login and session resolution."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID, uuid4

from prompt_registry.application.ports.password_hasher_port import PasswordHasherPort
from prompt_registry.application.ports.session_token_port import (
    IssuedSessionToken,
    SessionClaims,
    SessionTokenPort,
)
from prompt_registry.application.ports.user_repository_port import (
    UserCreateInput,
    UserRecord,
    UserRepositoryPort,
)
from prompt_registry.domain.auth.credentials import normalize_user_email, validate_user_password
from prompt_registry.domain.errors import (
    AccountDeactivatedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    TokenInvalidError,
)
from prompt_registry.domain.validation import validate_display_name

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class AuthenticatedSession:
    """User together with the session token issued for them."""

    user: UserRecord
    session: IssuedSessionToken


class IdentityService:
    """Register accounts, verify credentials and resolve session tokens."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
        token_service: SessionTokenPort,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._token_service = token_service
        self._min_password_length = min_password_length
        self._id_factory = id_factory

    async def register(
        self,
        *,
        email: str,
        password: str,
        display_name: str | None = None,
    ) -> AuthenticatedSession:
        """Create one account and issue its first session token.

        A taken email fails with the same generic message as any other
        signup failure the caller could use to probe for accounts.
        """

        normalized_email = normalize_user_email(email=email)
        validated_password = validate_user_password(
            password=password,
            min_length=self._min_password_length,
        )
        normalized_display_name = validate_display_name(display_name=display_name)

        if await self._users.get_by_email(email=normalized_email) is not None:
            logger.info("identity_signup_rejected reason=duplicate_email")
            raise DuplicateEmailError()

        password_hash = await asyncio.to_thread(
            self._password_hasher.hash_password,
            validated_password,
        )
        user = await self._users.create_user(
            UserCreateInput(
                user_id=self._id_factory(),
                email=normalized_email,
                password_hash=password_hash,
                display_name=normalized_display_name,
            )
        )
        logger.info("identity_signup_succeeded user_id=%s", user.user_id)
        return AuthenticatedSession(user=user, session=self.issue_session(user))

    async def authenticate(self, *, email: str, password: str) -> AuthenticatedSession:
        """Verify credentials and issue a session token.

        Unknown email and wrong password raise the same error. Deactivation is
        only revealed to a caller who supplied the correct password. The email
        is only trimmed and lowercased here, not run through
        ``normalize_user_email``, so a malformed address fails as bad credentials
        instead of as a validation error.
        """

        normalized_email = email.strip().lower()
        user = await self._users.get_by_email(email=normalized_email) if normalized_email else None
        if user is None:
            logger.info("identity_login_failed reason=invalid_credentials")
            raise InvalidCredentialsError()

        is_valid = await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=password,
            password_hash=user.password_hash,
        )
        if not is_valid:
            logger.info("identity_login_failed user_id=%s reason=invalid_credentials", user.user_id)
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.info("identity_login_blocked user_id=%s reason=inactive_user", user.user_id)
            raise AccountDeactivatedError()

        logger.info("identity_login_succeeded user_id=%s", user.user_id)
        return AuthenticatedSession(user=user, session=self.issue_session(user))

    def issue_session(self, user: UserRecord) -> IssuedSessionToken:
        """Sign a new session token for one user."""

        return self._token_service.issue(user_id=user.user_id, email=user.email)

    def resolve_session(self, *, token: str) -> SessionClaims:
        """Return verified token claims; expiry is the only invalidation."""

        return self._token_service.verify(token)

    async def get_active_user(self, *, user_id: UUID) -> UserRecord:
        """Return the account behind a session, rejecting deactivated ones."""

        user = await self._users.get_by_id(user_id=user_id)
        if user is None:
            raise TokenInvalidError()
        if not user.is_active:
            raise AccountDeactivatedError()
        return user

    async def deactivate_account(self, *, user_id: UUID) -> UserRecord:
        """Mark one account inactive, blocking logins and ownership checks."""

        user = await self._users.set_active(user_id=user_id, is_active=False)
        if user is None:
            raise TokenInvalidError()
        logger.info("identity_account_deactivated user_id=%s", user_id)
        return user
