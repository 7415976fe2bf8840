# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import loginwall  # noqa: F401
except ImportError:
    raise ImportError("loginwall is not installed. Run: pip install -e '.[dev]'") from None

import pytest

from tests._pages import LOGIN_PAGE_HTML, VALID_POST_HTML


@pytest.fixture
def login_page_html() -> str:
    return LOGIN_PAGE_HTML


@pytest.fixture
def valid_post_html() -> str:
    return VALID_POST_HTML


@pytest.fixture(autouse=True)
def _reset_default_registry(monkeypatch):
    """Build the process-wide registry from a clean environment for every test."""
    from loginwall.registry import default_registry

    for var in ("LOGINWALL_ENABLED_RULES", "LOGINWALL_DISABLED_RULES", "LOGINWALL_LOG_LEVEL", "LOGINWALL_LOG_JSON"):
        monkeypatch.delenv(var, raising=False)
    default_registry.cache_clear()
    yield
    default_registry.cache_clear()
