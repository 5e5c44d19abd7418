"""Canonical-origin normalization for candidate URLs."""

import re
from urllib.parse import urlsplit

SCHEME_PREFIX_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


def get_domain_url(raw_url: str) -> str:
    """Reduce a URL to its origin with a single trailing slash.

    ``https://www.example.com/path/page?q=1`` becomes
    ``https://www.example.com/``. A missing scheme is treated as https.
    Input that cannot be parsed into an http(s) origin is returned trimmed.

    Args:
        raw_url: URL as returned by a search provider.

    Returns:
        Canonical origin string, ``""`` for empty input.
    """
    if not raw_url:
        return ""

    trimmed = raw_url.strip()
    if not trimmed:
        return ""

    candidate = trimmed if SCHEME_PREFIX_RE.match(trimmed) else f"https://{trimmed}"

    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError:
        return trimmed

    scheme = parts.scheme.lower()
    host = parts.hostname
    if scheme not in DEFAULT_PORTS or not host or any(ch.isspace() for ch in host):
        return trimmed

    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != DEFAULT_PORTS[scheme]:
        host = f"{host}:{port}"

    return f"{scheme}://{host}/"
