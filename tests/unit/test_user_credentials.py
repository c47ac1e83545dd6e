from __future__ import annotations

import pytest

from prompt_registry.domain.auth.credentials import normalize_user_email, validate_user_password
from prompt_registry.domain.errors import InvalidEmailError, WeakPasswordError


def test_normalize_user_email_trims_and_lowercases() -> None:
    assert normalize_user_email(email="  Jane.Doe+cms@Example.ORG ") == "jane.doe+cms@example.org"


@pytest.mark.parametrize("email", ["", "   ", "plainaddress", "user@", "@example.com", "a@b"])
def test_normalize_user_email_rejects_malformed_values(email: str) -> None:
    with pytest.raises(InvalidEmailError):
        normalize_user_email(email=email)


def test_validate_user_password_enforces_min_length() -> None:
    assert validate_user_password(password="abcdef", min_length=6) == "abcdef"
    with pytest.raises(WeakPasswordError) as exc_info:
        validate_user_password(password="abc", min_length=6)

    assert str(exc_info.value) == "Password must be at least 6 characters"


def test_validate_user_password_rejects_whitespace_only() -> None:
    with pytest.raises(WeakPasswordError):
        validate_user_password(password="        ", min_length=6)
