# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared HTML/URL fixtures for detection tests."""

from __future__ import annotations

POST_URL = "https://www.instagram.com/p/ABC123/"
LOGIN_URL = "https://www.instagram.com/accounts/login/"

LOGIN_PAGE_HTML = """
<html>
  <head><title>Instagram</title></head>
  <body>
    <input type="password" />
    <span>Log in</span><span>Sign up</span><span>Forgot password</span>
  </body>
</html>
"""

VALID_POST_HTML = """
<html>
  <head><title>@user on Instagram: "Post caption"</title></head>
  <body>
    <article><time datetime="2024-01-01"></time></article>
  </body>
</html>
"""

LOGIN_METADATA = {"title": "Instagram", "url": "https://www.instagram.com/"}
POST_METADATA = {"title": '@user on Instagram: "Post caption"', "url": POST_URL}
