# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Public entry points called by the crawler after metadata extraction.

``detect_login_redirect`` returns a verdict and never raises for bad input
shape; ``assert_no_login_redirect`` turns a positive verdict into
LoginRedirectDetectedError so the crawler can abort the attempt from a
single except clause.  Retry policy stays with the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from loginwall import DetectionResult, PageMetadata
from loginwall.context import build_context
from loginwall.errors import LoginRedirectDetectedError
from loginwall.evaluator import evaluate_rule
from loginwall.registry import RuleRegistry, default_registry
from loginwall.rules import SiteRule
from loginwall.urls import is_http_url

logger = logging.getLogger(__name__)

MetadataInput = PageMetadata | Mapping[str, Any] | None


class LoginRedirectDetector:
    """Detector bound to one registry. Stateless across calls; safe to share between threads."""

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self._registry = registry

    @property
    def registry(self) -> RuleRegistry:
        return self._registry if self._registry is not None else default_registry()

    def resolve_rule(self, original_url: str, browser_url: str) -> SiteRule | None:
        """Rule for *original_url*, else for *browser_url* when it is a usable web URL."""
        registry = self.registry
        rule = registry.find_rule_for_url(original_url or "")
        if rule is None and is_http_url(browser_url):
            rule = registry.find_rule_for_url(browser_url)
        return rule

    def detect(
        self,
        original_url: str,
        browser_url: str,
        metadata: MetadataInput,
        html_content: str,
    ) -> DetectionResult:
        rule = self.resolve_rule(original_url, browser_url)
        if rule is None:
            return DetectionResult.negative()

        context = build_context(original_url, browser_url, metadata, html_content)
        result = evaluate_rule(rule, context)
        if result.is_login_redirect:
            logger.info(
                "%s login redirect detected for %s (landed on %s): %s",
                result.site_name,
                original_url,
                browser_url or "-",
                result.reason,
            )
        return result

    def assert_no_redirect(
        self,
        original_url: str,
        browser_url: str,
        metadata: MetadataInput,
        html_content: str,
    ) -> None:
        """Raise LoginRedirectDetectedError when the page is a login wall."""
        result = self.detect(original_url, browser_url, metadata, html_content)
        if result.is_login_redirect:
            raise LoginRedirectDetectedError(
                result.site_name or "Unknown",
                result.reason or "Login redirect detected",
                original_url,
            )


# Bound at import: configuration errors surface at startup, never inside detect.
_default_detector = LoginRedirectDetector(default_registry())


def detect_login_redirect(
    original_url: str,
    browser_url: str,
    metadata: MetadataInput,
    html_content: str,
) -> DetectionResult:
    """Check whether a crawled page is a login redirect.

    Args:
        original_url: URL the crawler was asked to fetch.
        browser_url: final URL after redirects (``about:blank`` etc. are ignored).
        metadata: extractor output, PageMetadata or a plain dict.
        html_content: raw page HTML.

    Returns:
        DetectionResult; negative when no site rule applies.
    """
    return _default_detector.detect(original_url, browser_url, metadata, html_content)


def assert_no_login_redirect(
    original_url: str,
    browser_url: str,
    metadata: MetadataInput,
    html_content: str,
) -> None:
    """Raise LoginRedirectDetectedError if ``detect_login_redirect`` is positive."""
    _default_detector.assert_no_redirect(original_url, browser_url, metadata, html_content)
