"""Pure validation helpers turning raw input into normalized values."""

from __future__ import annotations

from prompt_registry.domain.errors import ValidationFailedError

NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 200


def validate_entity_name(*, name: str) -> str:
    """Return trimmed project/prompt name or raise when empty or too long."""

    normalized = name.strip()
    if len(normalized) < NAME_MIN_LENGTH:
        raise ValidationFailedError("Name is required and must be a non-empty string")
    if len(normalized) > NAME_MAX_LENGTH:
        raise ValidationFailedError(f"Name must not exceed {NAME_MAX_LENGTH} characters")
    return normalized


def validate_version_text(*, text: str) -> str:
    """Return trimmed prompt version text or raise when blank."""

    normalized = text.strip()
    if not normalized:
        raise ValidationFailedError("Prompt text is required and must be a non-empty string")
    return normalized


def validate_display_name(*, display_name: str | None) -> str | None:
    """Return trimmed optional user display name, collapsing blanks to None."""

    if display_name is None:
        return None
    normalized = display_name.strip()
    if len(normalized) > NAME_MAX_LENGTH:
        raise ValidationFailedError(f"Name must not exceed {NAME_MAX_LENGTH} characters")
    return normalized or None
