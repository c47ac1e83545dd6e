from __future__ import annotations

from prompt_registry.infrastructure.security.password_hasher import BcryptPasswordHasher


def test_hash_password_never_stores_plaintext_and_verifies() -> None:
    hasher = BcryptPasswordHasher(rounds=4)
    password = "super-secret-password"

    password_hash = hasher.hash_password(password)

    assert password_hash != password
    assert password not in password_hash
    assert hasher.verify_password(password=password, password_hash=password_hash) is True


def test_wrong_password_fails_verification() -> None:
    hasher = BcryptPasswordHasher(rounds=4)
    password_hash = hasher.hash_password("correct")

    assert hasher.verify_password(password="wrong", password_hash=password_hash) is False


def test_default_rounds_are_embedded_in_hash() -> None:
    password_hash = BcryptPasswordHasher().hash_password("correct")

    assert password_hash.startswith("$2b$10$")


def test_malformed_stored_hash_fails_verification() -> None:
    hasher = BcryptPasswordHasher(rounds=4)

    assert hasher.verify_password(password="correct", password_hash="not-a-bcrypt-hash") is False


def test_hash_from_other_cost_factor_still_verifies() -> None:
    legacy_hash = BcryptPasswordHasher(rounds=4).hash_password("correct")

    hasher = BcryptPasswordHasher(rounds=5)

    assert hasher.verify_password(password="correct", password_hash=legacy_hash) is True
