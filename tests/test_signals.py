# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for signal factories and the Instagram signal set."""

from __future__ import annotations

import pytest

from loginwall.context import build_context
from loginwall.errors import RuleDefinitionError
from loginwall.signals import (
    canonical_mismatch,
    login_form_present,
    missing_structure,
    title_matches,
    visible_keywords,
)
from loginwall.sites.instagram import CONTENT_SEGMENTS, INSTAGRAM_RULE, LOGIN_TITLE_PATTERNS
from tests._pages import POST_URL


def _ctx(html: str = "<html><body></body></html>", *, original_url: str = POST_URL, **metadata):
    return build_context(original_url, original_url, metadata, html)


def _instagram_signal(sig_id: str):
    return next(s for s in INSTAGRAM_RULE.signals if s.id == sig_id)


class TestTitleMatches:
    signal = title_matches(LOGIN_TITLE_PATTERNS)

    @pytest.mark.parametrize(
        "title",
        ["Instagram", "  instagram  ", "Log in • Instagram", "Login", "Sign in", "Iniciar sesión", "Connexion", "Anmelden"],
    )
    def test_login_titles(self, title):
        assert self.signal.check(_ctx(title=title)) is True

    @pytest.mark.parametrize("title", ['@user on Instagram: "Post caption"', "Instagram photos", "Blog"])
    def test_content_titles(self, title):
        assert self.signal.check(_ctx(title=title)) is False

    def test_missing_title(self):
        assert self.signal.check(_ctx()) is False

    def test_falls_back_to_document_title(self):
        assert self.signal.check(_ctx("<html><head><title>Instagram</title></head></html>")) is True

    def test_metadata_title_wins_over_document(self):
        ctx = _ctx("<html><head><title>Instagram</title></head></html>", title="A caption")
        assert self.signal.check(ctx) is False


class TestCanonicalMismatch:
    signal = canonical_mismatch(CONTENT_SEGMENTS)

    def test_root_canonical(self):
        assert self.signal.check(_ctx(url="https://www.instagram.com/")) is True

    def test_canonical_without_content_segment(self):
        assert self.signal.check(_ctx(url="https://www.instagram.com/accounts/login")) is True

    def test_matching_canonical(self):
        assert self.signal.check(_ctx(url=POST_URL)) is False

    def test_requested_root(self):
        ctx = _ctx(original_url="https://www.instagram.com/", url="https://www.instagram.com/")
        assert self.signal.check(ctx) is False

    def test_profile_path_to_other_profile(self):
        ctx = _ctx(original_url="https://www.instagram.com/someone/", url="https://www.instagram.com/other/")
        assert self.signal.check(ctx) is False

    @pytest.mark.parametrize("og", [None, "", "/", "not a url", "https://[::1"])
    def test_unusable_canonical(self, og):
        assert self.signal.check(_ctx(url=og)) is False

    def test_malformed_original(self):
        assert self.signal.check(_ctx(original_url="::::", url="https://www.instagram.com/")) is False


class TestLoginFormPresent:
    signal = login_form_present(("login", "accounts"))

    @pytest.mark.parametrize(
        "html",
        [
            '<form><input type="password" name="pw"></form>',
            '<input type="PASSWORD">',
            '<form action="/accounts/login/ajax/"></form>',
            '<form action="https://x.test/Login"></form>',
        ],
    )
    def test_detects(self, html):
        assert self.signal.check(_ctx(f"<html><body>{html}</body></html>")) is True

    @pytest.mark.parametrize(
        "html",
        ['<input type="text">', '<form action="/search"></form>', '<a href="/accounts/login/">Log in</a>'],
    )
    def test_ignores(self, html):
        assert self.signal.check(_ctx(f"<html><body>{html}</body></html>")) is False


class TestVisibleKeywords:
    signal = _instagram_signal("login-button-present")

    def test_visible_text_triggers(self):
        html = "<html><body><button>Log in</button><a>Sign up</a><a>Forgot password?</a></body></html>"
        assert self.signal.check(_ctx(html)) is True

    def test_adjacent_inline_elements(self):
        html = "<html><body><span>Log in</span><span>Sign up</span><span>Forgot password</span></body></html>"
        assert self.signal.check(_ctx(html)) is True

    @pytest.mark.parametrize("tag", ["script", "style", "noscript", "template"])
    def test_hidden_containers_ignored(self, tag):
        html = f"<html><body><p>Welcome</p><{tag}>log in sign up forgot password</{tag}></body></html>"
        assert self.signal.check(_ctx(html)) is False

    def test_partial_set_does_not_trigger(self):
        html = "<html><body><a>Log in</a><a>Sign up</a></body></html>"
        assert self.signal.check(_ctx(html)) is False

    def test_head_title_not_visible_text(self):
        html = "<html><head><title>log in sign up forgot password</title></head><body></body></html>"
        assert self.signal.check(_ctx(html)) is False

    def test_localised_alternatives(self):
        signal = visible_keywords([("log in", "anmelden"), ("sign up", "registrieren")])
        assert signal.check(_ctx("<html><body>Anmelden oder Registrieren</body></html>")) is True

    def test_requires_groups(self):
        with pytest.raises(RuleDefinitionError):
            visible_keywords([])


class TestMissingStructure:
    signal = missing_structure(CONTENT_SEGMENTS, ("//article", "//time[@datetime]"))

    def test_post_url_without_markers(self):
        assert self.signal.check(_ctx("<html><body><div>hi</div></body></html>")) is True

    @pytest.mark.parametrize(
        "html",
        ["<article>post</article>", '<time datetime="2024-01-01">Jan 1</time>'],
    )
    def test_marker_present(self, html):
        assert self.signal.check(_ctx(f"<html><body>{html}</body></html>")) is False

    def test_time_without_datetime_is_not_a_marker(self):
        assert self.signal.check(_ctx("<html><body><time>Jan 1</time></body></html>")) is True

    def test_non_content_url(self):
        ctx = _ctx("<html><body></body></html>", original_url="https://www.instagram.com/someone/")
        assert self.signal.check(ctx) is False

    def test_requires_segments_and_markers(self):
        with pytest.raises(RuleDefinitionError):
            missing_structure((), ("//article",))
        with pytest.raises(RuleDefinitionError):
            missing_structure(("/p/",), ())


class TestInstagramRule:
    def test_signal_order_and_weights(self):
        assert [(s.id, s.weight) for s in INSTAGRAM_RULE.signals] == [
            ("generic-title", 2),
            ("og-url-mismatch", 2),
            ("password-form-present", 1),
            ("login-button-present", 1),
            ("no-post-content", 1),
        ]

    def test_threshold_config(self):
        assert INSTAGRAM_RULE.detection_mode.value == "threshold"
        assert INSTAGRAM_RULE.threshold_weight == 3
        assert INSTAGRAM_RULE.site_name == "Instagram"
