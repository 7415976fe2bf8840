# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""URL helpers shared by rules and signals.

Every function here is total: malformed input yields ``False``/``None``
instead of raising.
"""

from __future__ import annotations

from urllib.parse import urlparse

_WEB_SCHEMES = frozenset({"http", "https"})


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host (rejects about:, javascript:, relative)."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urlparse(url.strip())
        return parsed.scheme.lower() in _WEB_SCHEMES and bool(parsed.hostname)
    except ValueError:
        return False


def hostname_of(url: str) -> str | None:
    """Lower-cased hostname without trailing dot, or None for non-web URLs."""
    if not is_http_url(url):
        return None
    try:
        host = urlparse(url.strip()).hostname
    except ValueError:
        return None
    if not host:
        return None
    return host.rstrip(".")


def host_matches(host: str, domain: str) -> bool:
    """Exact or subdomain match, anchored on a dot boundary."""
    domain = domain.lower().rstrip(".")
    return host == domain or host.endswith("." + domain)


def normalized_path(url: str) -> str | None:
    """Path with trailing slashes removed (root is ``/``), or None if unparsable."""
    try:
        path = urlparse(url.strip()).path
    except (ValueError, AttributeError):
        return None
    return path.rstrip("/") or "/"
