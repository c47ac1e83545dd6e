from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from prompt_registry.application.ports.prompt_version_repository_port import (
    PromptVersionChanges,
    PromptVersionCreateInput,
    PromptVersionRecord,
)
from prompt_registry.application.services.prompt_version_service import PromptVersionService
from prompt_registry.domain.entity_kind import EntityKind
from prompt_registry.domain.errors import (
    EntityNotFoundError,
    NoActiveVersionError,
    NoFieldsProvidedError,
    NotFoundReason,
    ValidationFailedError,
)
from prompt_registry.domain.version_sequence import next_version_sequence


class InMemoryPromptVersionRepository:
    def __init__(self, *, known_prompt_ids: set[UUID]) -> None:
        self.known_prompt_ids = known_prompt_ids
        self.versions: dict[UUID, PromptVersionRecord] = {}
        self.update_calls: list[PromptVersionChanges] = []

    async def create_version(self, payload: PromptVersionCreateInput) -> PromptVersionRecord:
        self._require_prompt(payload.prompt_id)
        siblings = [v for v in self.versions.values() if v.prompt_id == payload.prompt_id]
        sequence = next_version_sequence(existing_version_count=len(siblings))
        if payload.make_active:
            self._deactivate_siblings(prompt_id=payload.prompt_id, keep_id=None)
        now = datetime.now(tz=UTC)
        record = PromptVersionRecord(
            version_id=payload.version_id,
            owner_id=payload.owner_id,
            prompt_id=payload.prompt_id,
            text=payload.text,
            sequence_number=sequence.number,
            sequence_label=sequence.label,
            display_name=sequence.display_name,
            is_active_version=payload.make_active,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self.versions[record.version_id] = record
        return record

    async def list_versions(
        self,
        *,
        owner_id: UUID,
        prompt_id: UUID,
        include_inactive: bool = False,
    ) -> list[PromptVersionRecord]:
        self._require_prompt(prompt_id)
        return sorted(
            (
                v
                for v in self.versions.values()
                if v.prompt_id == prompt_id and v.owner_id == owner_id
                and (include_inactive or v.is_active)
            ),
            key=lambda v: v.sequence_number,
            reverse=True,
        )

    async def get_version(self, *, owner_id: UUID, version_id: UUID) -> PromptVersionRecord:
        version = self.versions.get(version_id)
        if version is None or version.owner_id != owner_id:
            raise EntityNotFoundError(
                kind=EntityKind.PROMPT_VERSION,
                entity_id=version_id,
                reason=NotFoundReason.MISSING,
            )
        if not version.is_active:
            raise EntityNotFoundError(
                kind=EntityKind.PROMPT_VERSION,
                entity_id=version_id,
                reason=NotFoundReason.DELETED,
            )
        return version

    async def update_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
        changes: PromptVersionChanges,
    ) -> PromptVersionRecord:
        version = await self.get_version(owner_id=owner_id, version_id=version_id)
        self.update_calls.append(changes)
        if changes.is_active is False:
            updated = replace(version, is_active=False, is_active_version=False)
        else:
            if changes.is_active_version:
                self._deactivate_siblings(prompt_id=version.prompt_id, keep_id=version_id)
            updated = replace(
                version,
                text=changes.text if changes.text is not None else version.text,
                is_active_version=(
                    changes.is_active_version
                    if changes.is_active_version is not None
                    else version.is_active_version
                ),
            )
        self.versions[version_id] = updated
        return updated

    async def soft_delete_version(
        self,
        *,
        owner_id: UUID,
        version_id: UUID,
    ) -> PromptVersionRecord:
        return await self.update_version(
            owner_id=owner_id,
            version_id=version_id,
            changes=PromptVersionChanges(is_active=False),
        )

    async def get_active_for_prompt(self, *, prompt_id: UUID) -> PromptVersionRecord | None:
        self._require_prompt(prompt_id)
        return next(
            (
                v
                for v in self.versions.values()
                if v.prompt_id == prompt_id and v.is_active and v.is_active_version
            ),
            None,
        )

    def active_count(self, prompt_id: UUID) -> int:
        return sum(
            1
            for v in self.versions.values()
            if v.prompt_id == prompt_id and v.is_active and v.is_active_version
        )

    def _require_prompt(self, prompt_id: UUID) -> None:
        if prompt_id not in self.known_prompt_ids:
            raise EntityNotFoundError(
                kind=EntityKind.PROMPT,
                entity_id=prompt_id,
                reason=NotFoundReason.MISSING,
            )

    def _deactivate_siblings(self, *, prompt_id: UUID, keep_id: UUID | None) -> None:
        for version_id, version in list(self.versions.items()):
            if version.prompt_id == prompt_id and version_id != keep_id:
                self.versions[version_id] = replace(version, is_active_version=False)


def _setup() -> tuple[PromptVersionService, InMemoryPromptVersionRepository, UUID, UUID]:
    owner_id = uuid4()
    prompt_id = uuid4()
    repository = InMemoryPromptVersionRepository(known_prompt_ids={prompt_id})
    return PromptVersionService(versions=repository), repository, owner_id, prompt_id


@pytest.mark.asyncio
async def test_create_version_trims_text_and_numbers_sequentially() -> None:
    service, _, owner_id, prompt_id = _setup()

    first = await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="  hi  ")
    second = await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="hello")

    assert first.text == "hi"
    assert (first.sequence_label, first.display_name) == ("v1", "Version 1")
    assert (second.sequence_label, second.display_name) == ("v2", "Version 2")
    assert first.is_active_version is False


@pytest.mark.asyncio
async def test_create_version_rejects_blank_text() -> None:
    service, _, owner_id, prompt_id = _setup()

    with pytest.raises(ValidationFailedError):
        await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="   ")


@pytest.mark.asyncio
async def test_make_active_leaves_exactly_one_active_version() -> None:
    service, repository, owner_id, prompt_id = _setup()

    v1 = await service.create_version(
        owner_id=owner_id, prompt_id=prompt_id, text="one", make_active=True
    )
    v2 = await service.create_version(
        owner_id=owner_id, prompt_id=prompt_id, text="two", make_active=True
    )

    active = await service.get_active_for_prompt(prompt_id=prompt_id)
    assert active.version_id == v2.version_id
    refreshed_v1 = await service.get_version(owner_id=owner_id, version_id=v1.version_id)
    assert refreshed_v1.is_active_version is False
    assert repository.active_count(prompt_id) == 1


@pytest.mark.asyncio
async def test_activate_version_requests_active_flag_and_swaps_active() -> None:
    service, repository, owner_id, prompt_id = _setup()
    v1 = await service.create_version(
        owner_id=owner_id, prompt_id=prompt_id, text="one", make_active=True
    )
    v2 = await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="two")

    activated = await service.activate_version(owner_id=owner_id, version_id=v2.version_id)

    assert activated.is_active_version is True
    assert repository.update_calls == [PromptVersionChanges(is_active_version=True)]
    refreshed_v1 = await service.get_version(owner_id=owner_id, version_id=v1.version_id)
    assert refreshed_v1.is_active_version is False


@pytest.mark.asyncio
async def test_update_version_without_fields_raises_no_fields_provided() -> None:
    service, repository, owner_id, prompt_id = _setup()
    version = await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="one")

    with pytest.raises(NoFieldsProvidedError):
        await service.update_version(owner_id=owner_id, version_id=version.version_id)

    assert repository.update_calls == []


@pytest.mark.asyncio
async def test_deleting_active_version_does_not_promote_another() -> None:
    service, _, owner_id, prompt_id = _setup()
    await service.create_version(
        owner_id=owner_id, prompt_id=prompt_id, text="one", make_active=True
    )
    v2 = await service.create_version(
        owner_id=owner_id, prompt_id=prompt_id, text="two", make_active=True
    )

    deleted = await service.soft_delete_version(owner_id=owner_id, version_id=v2.version_id)

    assert deleted.is_active is False
    assert deleted.is_active_version is False
    with pytest.raises(NoActiveVersionError) as exc_info:
        await service.get_active_for_prompt(prompt_id=prompt_id)
    assert str(exc_info.value) == "No active version found for this prompt"


@pytest.mark.asyncio
async def test_numbering_survives_soft_deletes() -> None:
    service, _, owner_id, prompt_id = _setup()
    v1 = await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="one")
    v2 = await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="two")
    await service.soft_delete_version(owner_id=owner_id, version_id=v1.version_id)
    await service.soft_delete_version(owner_id=owner_id, version_id=v2.version_id)

    v3 = await service.create_version(owner_id=owner_id, prompt_id=prompt_id, text="three")

    assert v3.sequence_label == "v3"
    assert v3.display_name == "Version 3"


@pytest.mark.asyncio
async def test_get_active_for_unknown_prompt_is_not_found() -> None:
    service, _, _, _ = _setup()

    with pytest.raises(EntityNotFoundError) as exc_info:
        await service.get_active_for_prompt(prompt_id=uuid4())

    assert str(exc_info.value) == "Prompt not found"
