"""Shared normalization helpers for user credential inputs."""

from __future__ import annotations

import re

from prompt_registry.domain.errors import InvalidEmailError, WeakPasswordError

_EMAIL_RE = re.compile(r"^\w+([.+-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,})+$")


def normalize_user_email(*, email: str) -> str:
    """Normalize one user email and reject blank or malformed values."""

    normalized = email.strip().lower()
    if not normalized:
        raise InvalidEmailError("Email is required and must be a non-empty string")
    if _EMAIL_RE.match(normalized) is None:
        raise InvalidEmailError("Please provide a valid email address")
    return normalized


def validate_user_password(*, password: str, min_length: int) -> str:
    """Return password unchanged when it satisfies the length policy."""

    if not password.strip():
        raise WeakPasswordError("Password is required")
    if len(password) < min_length:
        raise WeakPasswordError(f"Password must be at least {min_length} characters")
    return password
