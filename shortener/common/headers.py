"""Work out the public origin short links are served under."""

from typing import Mapping, Optional


def _first_hop(value: Optional[str]) -> Optional[str]:
    # Chained proxies append to the list: "https, http"
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def extract_forwarded_headers(headers: Mapping[str, str]) -> dict:
    """Read the client-facing scheme and host a reverse proxy reports.

    Args:
        headers: Request headers (any case)

    Returns:
        Dictionary with ``proto`` and ``host`` (None when absent)
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    return {
        "proto": _first_hop(lowered.get("x-forwarded-proto")),
        "host": _first_hop(lowered.get("x-forwarded-host")),
    }


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Origin for displayed short links.

    Proxy headers win over the request's own scheme and host; each part
    falls back independently. Without a host the configured base URL is used.
    """
    forwarded = extract_forwarded_headers(headers)
    scheme = forwarded["proto"] or request_scheme
    host = forwarded["host"] or request_host

    if scheme and host:
        return f"{scheme}://{host}"
    return fallback_base_url.rstrip("/")
