"""Allow-list for OAuth redirect targets."""

from collections.abc import Iterable
from urllib.parse import urlsplit


def is_allowed_redirect_uri(uri: str, allowed_domains: Iterable[str]) -> bool:
    """HTTPS only, host equal to an allowed domain or one of its subdomains."""
    try:
        parts = urlsplit(uri)
        hostname = parts.hostname
    except (ValueError, TypeError, AttributeError):
        return False
    if parts.scheme != "https" or not hostname:
        return False
    for domain in allowed_domains:
        if hostname == domain or hostname.endswith(f".{domain}"):
            return True
    return False
