# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Instagram: logged-out visitors asking for a post get bounced to /accounts/login/.

The login page still returns 200 with a generic title, so no single signal
is trusted; threshold mode needs at least 3 points of evidence.
"""

from __future__ import annotations

from loginwall.rules import DetectionMode, SiteRule, site_rule
from loginwall.signals import (
    canonical_mismatch,
    login_form_present,
    missing_structure,
    title_matches,
    visible_keywords,
)

# Paths that address a single piece of content
CONTENT_SEGMENTS: tuple[str, ...] = ("/p/", "/reel/", "/stories/")

# Generic / login titles, including common translations
LOGIN_TITLE_PATTERNS: tuple[str, ...] = (
    r"^Instagram$",  # exactly "Instagram" (post pages carry the caption)
    r"^Log\s*in",
    r"^Sign\s*in",
    r"^Iniciar\s*sesi[oó]n",  # es
    r"^Connexion",  # fr
    r"^Anmelden",  # de
)

INSTAGRAM_RULE: SiteRule = site_rule(
    "instagram",
    "Instagram",
    ("instagram.com",),
    (
        title_matches(
            LOGIN_TITLE_PATTERNS,
            id="generic-title",
            description="Page title is generic 'Instagram' instead of post-specific",
            weight=2,
        ),
        canonical_mismatch(
            CONTENT_SEGMENTS,
            id="og-url-mismatch",
            description="og:url points to homepage instead of requested URL",
            weight=2,
        ),
        login_form_present(
            ("login", "accounts"),
            id="password-form-present",
            description="Page contains password input field (login form)",
        ),
        # Login pages show all three; a post page shows at most the first two
        visible_keywords(
            ("log in", "sign up", "forgot password"),
            id="login-button-present",
            description="Page contains prominent login/signup buttons",
        ),
        missing_structure(
            CONTENT_SEGMENTS,
            ("//article", "//time[@datetime]"),
            id="no-post-content",
            description="Page lacks expected post content structure",
        ),
    ),
    detection_mode=DetectionMode.THRESHOLD,
    threshold_weight=3,
)
