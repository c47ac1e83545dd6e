"""Derived labels for monotonically numbered prompt versions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class VersionSequence:
    """Sequence number and the labels derived from it at creation time."""

    number: int
    label: str
    display_name: str


def next_version_sequence(*, existing_version_count: int) -> VersionSequence:
    """Return the sequence following ``existing_version_count`` prior versions.

    The count must include soft-deleted versions so numbers are never reused.
    """

    if existing_version_count < 0:
        raise ValueError("existing_version_count cannot be negative")
    number = existing_version_count + 1
    return VersionSequence(number=number, label=f"v{number}", display_name=f"Version {number}")
