"""PKCE (RFC 7636) S256 verification."""

import hashlib
import logging
from base64 import urlsafe_b64encode

logger = logging.getLogger(__name__)


def compute_code_challenge(code_verifier: str) -> str:
    """Return base64url(SHA256(verifier)) without padding."""
    digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    return urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def verify_code_challenge(code_verifier: str, code_challenge: str) -> bool:
    """Check a verifier against its stored challenge. Never raises."""
    try:
        if not code_verifier or not code_challenge:
            return False
        return compute_code_challenge(code_verifier) == code_challenge
    except (AttributeError, TypeError, UnicodeError):
        logger.debug("PKCE verification failed on malformed input", exc_info=True)
        return False
