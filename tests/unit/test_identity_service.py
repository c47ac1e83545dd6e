from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from prompt_registry.application.ports.session_token_port import IssuedSessionToken, SessionClaims
from prompt_registry.application.ports.user_repository_port import UserCreateInput, UserRecord
from prompt_registry.application.services.identity_service import IdentityService
from prompt_registry.domain.errors import (
    AccountDeactivatedError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidEmailError,
    TokenInvalidError,
    WeakPasswordError,
)

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


class FakeUserRepository:
    def __init__(self) -> None:
        self.users: dict[UUID, UserRecord] = {}

    async def get_by_id(self, *, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    async def get_by_email(self, *, email: str) -> UserRecord | None:
        return next((user for user in self.users.values() if user.email == email), None)

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        if await self.get_by_email(email=payload.email) is not None:
            raise DuplicateEmailError()
        record = UserRecord(
            user_id=payload.user_id,
            email=payload.email,
            password_hash=payload.password_hash,
            display_name=payload.display_name,
            is_active=True,
            created_at=FIXED_NOW,
            updated_at=FIXED_NOW,
        )
        self.users[record.user_id] = record
        return record

    async def set_active(self, *, user_id: UUID, is_active: bool) -> UserRecord | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        updated = replace(user, is_active=is_active)
        self.users[user_id] = updated
        return updated


class FakePasswordHasher:
    def __init__(self) -> None:
        self.verify_calls: list[tuple[str, str]] = []

    def hash_password(self, password: str) -> str:
        return f"hashed::{password}"

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        self.verify_calls.append((password, password_hash))
        return password_hash == f"hashed::{password}"


class FakeTokenService:
    def __init__(self) -> None:
        self.issued: list[tuple[UUID, str]] = []

    def issue(self, *, user_id: UUID, email: str) -> IssuedSessionToken:
        self.issued.append((user_id, email))
        return IssuedSessionToken(
            token=f"token-for-{user_id}",
            expires_at=FIXED_NOW + timedelta(days=30),
        )

    def verify(self, token: str) -> SessionClaims:
        for user_id, email in self.issued:
            if token == f"token-for-{user_id}":
                return SessionClaims(user_id=user_id, email=email)
        raise TokenInvalidError()


def _service(
    users: FakeUserRepository | None = None,
    hasher: FakePasswordHasher | None = None,
    tokens: FakeTokenService | None = None,
) -> IdentityService:
    return IdentityService(
        users=users or FakeUserRepository(),
        password_hasher=hasher or FakePasswordHasher(),
        token_service=tokens or FakeTokenService(),
        min_password_length=6,
    )


@pytest.mark.asyncio
async def test_register_normalizes_email_hashes_password_and_issues_token() -> None:
    users = FakeUserRepository()
    tokens = FakeTokenService()
    service = _service(users=users, tokens=tokens)

    result = await service.register(
        email="  Alice@Example.COM ",
        password="secret-pw",
        display_name=" Alice ",
    )

    assert result.user.email == "alice@example.com"
    assert result.user.display_name == "Alice"
    assert result.user.password_hash == "hashed::secret-pw"
    assert result.session.token == f"token-for-{result.user.user_id}"
    assert tokens.issued == [(result.user.user_id, "alice@example.com")]


@pytest.mark.asyncio
async def test_register_duplicate_email_is_case_insensitive_and_generic() -> None:
    service = _service()
    await service.register(email="bob@example.com", password="secret-pw")

    with pytest.raises(DuplicateEmailError) as exc_info:
        await service.register(email="BOB@example.com", password="another-pw")

    assert str(exc_info.value) == "Unable to create account. Please try again."


@pytest.mark.asyncio
async def test_register_rejects_malformed_email() -> None:
    service = _service()

    with pytest.raises(InvalidEmailError):
        await service.register(email="not-an-email", password="secret-pw")


@pytest.mark.asyncio
async def test_register_rejects_short_password() -> None:
    service = _service()

    with pytest.raises(WeakPasswordError):
        await service.register(email="carol@example.com", password="123")


@pytest.mark.asyncio
async def test_authenticate_success_returns_user_and_token() -> None:
    hasher = FakePasswordHasher()
    service = _service(hasher=hasher)
    registered = await service.register(email="dave@example.com", password="secret-pw")

    result = await service.authenticate(email="DAVE@example.com ", password="secret-pw")

    assert result.user.user_id == registered.user.user_id
    assert result.session.token == f"token-for-{registered.user.user_id}"
    assert hasher.verify_calls == [("secret-pw", "hashed::secret-pw")]


@pytest.mark.asyncio
async def test_authenticate_unknown_email_and_wrong_password_fail_identically() -> None:
    service = _service()
    await service.register(email="erin@example.com", password="secret-pw")

    with pytest.raises(InvalidCredentialsError) as unknown:
        await service.authenticate(email="nobody@example.com", password="secret-pw")
    with pytest.raises(InvalidCredentialsError) as wrong:
        await service.authenticate(email="erin@example.com", password="wrong-pw")

    assert str(unknown.value) == str(wrong.value) == "Invalid email or password"


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["not-an-email", "   "])
async def test_authenticate_malformed_email_fails_as_invalid_credentials(email: str) -> None:
    service = _service()

    with pytest.raises(InvalidCredentialsError) as exc_info:
        await service.authenticate(email=email, password="secret-pw")

    assert str(exc_info.value) == "Invalid email or password"


@pytest.mark.asyncio
async def test_authenticate_deactivated_account_is_reported_only_with_correct_password() -> None:
    users = FakeUserRepository()
    service = _service(users=users)
    registered = await service.register(email="frank@example.com", password="secret-pw")
    await service.deactivate_account(user_id=registered.user.user_id)

    with pytest.raises(InvalidCredentialsError):
        await service.authenticate(email="frank@example.com", password="wrong-pw")
    with pytest.raises(AccountDeactivatedError):
        await service.authenticate(email="frank@example.com", password="secret-pw")


@pytest.mark.asyncio
async def test_get_active_user_rejects_deactivated_and_unknown_accounts() -> None:
    service = _service()
    registered = await service.register(email="gina@example.com", password="secret-pw")

    user = await service.get_active_user(user_id=registered.user.user_id)
    assert user.email == "gina@example.com"

    await service.deactivate_account(user_id=registered.user.user_id)
    with pytest.raises(AccountDeactivatedError):
        await service.get_active_user(user_id=registered.user.user_id)
    with pytest.raises(TokenInvalidError):
        await service.get_active_user(user_id=uuid4())


@pytest.mark.asyncio
async def test_resolve_session_returns_claims_from_token_service() -> None:
    service = _service()
    registered = await service.register(email="hank@example.com", password="secret-pw")

    claims = service.resolve_session(token=registered.session.token)

    assert claims == SessionClaims(user_id=registered.user.user_id, email="hank@example.com")
