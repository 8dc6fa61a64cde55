"""Password hashing and verification using Argon2id."""

import argon2

_hasher = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
)


def hash_password(password: str) -> str:
    """Hash a password using Argon2id with a random salt."""
    return _hasher.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plaintext password against its Argon2 hash.

    Malformed hashes count as a mismatch.
    """
    try:
        return _hasher.verify(hashed, plain)
    except (
        argon2.exceptions.InvalidHashError,
        argon2.exceptions.VerificationError,
    ):
        return False


def password_needs_rehash(hashed: str) -> bool:
    """True when a stored hash predates the current Argon2 parameters."""
    try:
        return _hasher.check_needs_rehash(hashed)
    except argon2.exceptions.InvalidHashError:
        return True
