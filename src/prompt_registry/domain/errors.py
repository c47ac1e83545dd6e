"""Typed failures shared by services, repositories and HTTP adapters."""

from __future__ import annotations

from enum import StrEnum
from uuid import UUID

from prompt_registry.domain.entity_kind import EntityKind


class ValidationFailedError(ValueError):
    """Raised when caller input is malformed or missing."""


class NoFieldsProvidedError(ValidationFailedError):
    """Raised when a partial update carries no recognized field."""

    def __init__(self) -> None:
        super().__init__("No valid fields to update")


class InvalidEmailError(ValidationFailedError):
    """Raised when an email address does not match the accepted format."""


class WeakPasswordError(ValidationFailedError):
    """Raised when a password does not satisfy the configured policy."""


class DuplicateEmailError(ValueError):
    """Raised when signup targets an email that already has an account.

    The message is deliberately generic so signup cannot be used to probe
    which addresses are registered.
    """

    def __init__(self) -> None:
        super().__init__("Unable to create account. Please try again.")


class AuthenticationError(PermissionError):
    """Base class for failures that must be reported as unauthenticated."""


class InvalidCredentialsError(AuthenticationError):
    """Raised for unknown email or wrong password, without telling which."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class TokenExpiredError(AuthenticationError):
    """Raised when a session token is past its expiry."""

    def __init__(self) -> None:
        super().__init__("Token has expired. Please login again.")


class TokenInvalidError(AuthenticationError):
    """Raised when a session token signature or claims do not verify."""

    def __init__(self) -> None:
        super().__init__("Invalid token. Please login again.")


class TokenMalformedError(AuthenticationError):
    """Raised when a session token is not a structurally valid token."""

    def __init__(self) -> None:
        super().__init__("Token verification failed")


class MissingAuthTokenError(AuthenticationError):
    """Raised when a bearer token is required but not provided."""

    def __init__(self) -> None:
        super().__init__("Not authorized to access this route")


class InvalidAuthTokenError(AuthenticationError):
    """Raised when the Authorization header is not a well-formed bearer header."""

    def __init__(self) -> None:
        super().__init__("Not authorized to access this route")


class AccountDeactivatedError(PermissionError):
    """Raised when a deactivated account attempts to log in or act."""

    def __init__(self) -> None:
        super().__init__("Account has been deactivated")


class ForbiddenError(PermissionError):
    """Reserved for access denials that must be distinguished from not-found."""


class NotFoundReason(StrEnum):
    """Internal diagnostic reason behind a not-found failure."""

    MISSING = "missing"
    DELETED = "deleted"


class EntityNotFoundError(LookupError):
    """Raised when an entity is absent, soft-deleted, or owned by someone else.

    Callers always see the same message for every reason; ``reason`` only
    feeds operator logs.
    """

    def __init__(self, *, kind: EntityKind, entity_id: UUID, reason: NotFoundReason) -> None:
        self.kind = kind
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(f"{kind.label} not found")


class NoActiveVersionError(LookupError):
    """Raised when a live prompt currently has no active version."""

    def __init__(self, *, prompt_id: UUID) -> None:
        self.prompt_id = prompt_id
        super().__init__("No active version found for this prompt")


class ConflictError(RuntimeError):
    """Raised when a write loses a uniqueness race and may be retried."""


class ActiveVersionConflictError(ConflictError):
    """Raised when another writer activated a version of the same prompt first."""

    def __init__(self, *, prompt_id: UUID) -> None:
        self.prompt_id = prompt_id
        super().__init__("Another version of this prompt was activated concurrently; retry")


class SequenceConflictError(ConflictError):
    """Raised when another writer took the same version sequence number first."""

    def __init__(self, *, prompt_id: UUID) -> None:
        self.prompt_id = prompt_id
        super().__init__("Another version of this prompt was created concurrently; retry")
