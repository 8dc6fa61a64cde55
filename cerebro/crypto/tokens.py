"""Opaque identifiers and bearer secrets."""

import hashlib
import secrets

import uuid_utils

TOKEN_BYTES = 32


def generate_token() -> str:
    """Generate a 256-bit URL-safe secret (codes, access and refresh tokens)."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(token: str) -> str:
    """SHA-256 hash a token for database storage."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_id() -> str:
    """Generate a time-ordered UUID for primary keys."""
    return str(uuid_utils.uuid7())
