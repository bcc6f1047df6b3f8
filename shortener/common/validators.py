"""Validation utilities for URL shortener."""

from urllib.parse import urlparse
from typing import Tuple


ALLOWED_SCHEMES = ("http", "https")

# Characters no host name may contain
INVALID_HOST_CHARS = frozenset(' <>"{}|\\^`')


def _check_host(hostname: str) -> None:
    for c in hostname:
        if c in INVALID_HOST_CHARS or not c.isprintable():
            raise ValueError(f"invalid character {c!r} in host name")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL submitted for shortening.

    The URL must parse (including port and host characters), use the http
    or https scheme and name a host.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    try:
        result = urlparse(url)
        hostname = result.hostname
        # urlparse checks the port lazily
        result.port
        if hostname:
            _check_host(hostname)
    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"

    if result.scheme.lower() not in ALLOWED_SCHEMES:
        return False, "URL must include scheme (http:// or https://)"

    if not hostname:
        return False, "invalid URL: missing host"

    return True, ""
