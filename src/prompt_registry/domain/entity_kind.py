"""Entity kinds addressed by ownership resolution."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Owner-scoped entity kinds, parent before child."""

    PROJECT = "project"
    PROMPT = "prompt"
    PROMPT_VERSION = "prompt_version"

    @property
    def label(self) -> str:
        """Return the human-facing name used in error messages."""

        return _LABELS[self]


_LABELS = {
    EntityKind.PROJECT: "Project",
    EntityKind.PROMPT: "Prompt",
    EntityKind.PROMPT_VERSION: "Prompt version",
}
