# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Detection context: the immutable evidence bundle signals evaluate against."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loginwall import PageMetadata
from loginwall.dom import DomView


@dataclass(frozen=True, slots=True)
class DetectionContext:
    """Everything known about one crawled page. Built once per detection call."""

    original_url: str  # URL the crawler was asked to fetch
    browser_url: str  # URL actually reached after redirects
    metadata: PageMetadata
    html_content: str
    dom: DomView  # single parse shared by every signal


def build_context(
    original_url: str,
    browser_url: str,
    metadata: PageMetadata | Mapping[str, Any] | None,
    html_content: str,
) -> DetectionContext:
    """Parse *html_content* once and bundle it with the page evidence."""
    if not isinstance(metadata, PageMetadata):
        metadata = PageMetadata.from_mapping(metadata)
    html_content = html_content or ""
    return DetectionContext(
        original_url=original_url or "",
        browser_url=browser_url or "",
        metadata=metadata,
        html_content=html_content,
        dom=DomView(html_content),
    )
