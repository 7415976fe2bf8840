# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Login Wall: site-aware login-redirect detection for crawled pages.

Decides whether a crawler that asked for a specific piece of content was
silently diverted to a login page instead:
- rules: per-site URL matcher + weighted signals + combination policy
- detector: resolves the rule, parses the HTML once, reduces to a verdict
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True, slots=True)
class PageMetadata:
    """Metadata extracted from the crawled page (all fields optional)."""

    title: str | None = None
    description: str | None = None
    image: str | None = None
    url: str | None = None  # og:url / canonical, the self-declared page URL
    author: str | None = None
    publisher: str | None = None
    logo: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> PageMetadata:
        """Build from an extractor dict. Unknown keys dropped, blanks become None."""
        if not data:
            return cls()
        kwargs: dict[str, str | None] = {}
        for f in fields(cls):
            value = data.get(f.name)
            if isinstance(value, str) and value.strip():
                kwargs[f.name] = value
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Verdict for one page. ``site_name``/``reason`` are set iff positive."""

    is_login_redirect: bool
    site_name: str | None = None
    reason: str | None = None

    @classmethod
    def negative(cls) -> DetectionResult:
        return cls(is_login_redirect=False)

    def __bool__(self) -> bool:
        return self.is_login_redirect

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"isLoginRedirect": self.is_login_redirect}
        if self.site_name is not None:
            out["siteName"] = self.site_name
        if self.reason is not None:
            out["reason"] = self.reason
        return out
