"""Port for hashing account passwords at signup and checking them at login."""

from __future__ import annotations

from typing import Protocol


class PasswordHasherPort(Protocol):
    """Salted one-way password hashing.

    Implementations fix their cost factor at construction. Hashes produced under
    an older cost factor must still verify, since stored hashes are never rehashed.
    """

    def hash_password(self, password: str) -> str:
        """Return a self-describing hash (salt and cost included) for storage."""

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        """Return whether password matches a stored hash; malformed hashes never match."""
