# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Login Wall exception hierarchy.

All loginwall-specific errors inherit from LoginWallError, allowing callers
to catch the base class for any failure or specific subclasses for targeted
handling.
"""

from __future__ import annotations


class LoginWallError(Exception):
    """Base exception for all loginwall errors."""


class LoginRedirectDetectedError(LoginWallError):
    """The crawled page is a login wall instead of the requested content.

    Raised only by the asserting entry points. Refetching the same URL will
    hit the same wall, so callers usually record the crawl as failed.
    """

    def __init__(self, site_name: str, reason: str, original_url: str) -> None:
        super().__init__(f"{site_name} login redirect detected: {reason}")
        self.site_name = site_name
        self.reason = reason
        self.original_url = original_url


class RuleDefinitionError(LoginWallError):
    """Invalid signal, site rule, or registry definition."""


class ConfigError(LoginWallError):
    """Invalid environment configuration."""
