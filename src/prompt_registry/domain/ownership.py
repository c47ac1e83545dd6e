"""Resolved ownership snapshot returned by the ownership resolver."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from prompt_registry.domain.entity_kind import EntityKind


@dataclass(frozen=True)
class ResolvedEntity:
    """Existing, live entity together with its owner and direct parent."""

    kind: EntityKind
    entity_id: UUID
    owner_id: UUID
    parent_id: UUID | None
