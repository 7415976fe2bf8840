# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Detection signals: atomic weighted predicates over page evidence.

A signal inspects one narrow slice of the DetectionContext and answers
"does this look like a login wall?".  Checks must be pure, deterministic
and total: absent metadata or malformed URLs return ``False``; a check
that raises is a defect in the signal, and the evaluator lets it propagate.

The factories below cover the common signal shapes so a site rule can be
written declaratively:

  title_matches        : generic / login-page title instead of content title
  canonical_mismatch   : og:url points somewhere less specific than requested
  login_form_present   : password input or login-flavoured form action
  visible_keywords     : login-flow phrases in rendered text only
  missing_structure    : content URL but none of the content markers in DOM
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loginwall.errors import RuleDefinitionError
from loginwall.urls import is_http_url, normalized_path

if TYPE_CHECKING:
    from loginwall.context import DetectionContext

SignalCheck = Callable[["DetectionContext"], bool]


@dataclass(frozen=True, slots=True)
class Signal:
    """A named boolean predicate carrying a weight."""

    id: str
    description: str
    check: SignalCheck
    weight: int = 1

    def __post_init__(self) -> None:
        if not self.id:
            raise RuleDefinitionError("Signal id must be non-empty")
        # bool is an int subclass; True is not a weight
        if isinstance(self.weight, bool) or not isinstance(self.weight, int) or self.weight < 1:
            raise RuleDefinitionError(f"Signal {self.id!r}: weight must be a positive integer, got {self.weight!r}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _page_title(ctx: DetectionContext) -> str:
    title = (ctx.metadata.title or "").strip()
    return title or ctx.dom.title()


def _has_segment(path: str, segments: Iterable[str]) -> bool:
    return any(seg in path for seg in segments)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def title_matches(
    patterns: Sequence[str | re.Pattern[str]],
    *,
    id: str = "generic-title",
    description: str = "Page title is generic instead of content-specific",
    weight: int = 1,
) -> Signal:
    """Title (metadata first, then ``<title>``) matches any of *patterns*.

    String patterns are compiled case-insensitively.
    """
    compiled = tuple(p if isinstance(p, re.Pattern) else re.compile(p, re.IGNORECASE) for p in patterns)

    def check(ctx: DetectionContext) -> bool:
        title = _page_title(ctx)
        if not title:
            return False
        return any(p.search(title) for p in compiled)

    return Signal(id=id, description=description, check=check, weight=weight)


def canonical_mismatch(
    content_segments: Sequence[str] = (),
    *,
    id: str = "og-url-mismatch",
    description: str = "og:url points to homepage instead of requested URL",
    weight: int = 1,
) -> Signal:
    """The page's self-declared URL is less specific than the requested one.

    Fires when the requested path is specific but og:url is the site root,
    or when the requested path contains one of *content_segments* (``/p/``)
    and the og:url path contains none of them.
    """
    segments = tuple(content_segments)

    def check(ctx: DetectionContext) -> bool:
        og_url = ctx.metadata.url
        if not og_url or not is_http_url(og_url) or not is_http_url(ctx.original_url):
            return False
        og_path = normalized_path(og_url)
        original_path = normalized_path(ctx.original_url)
        if og_path is None or original_path is None:
            return False

        if original_path != "/" and og_path == "/":
            return True
        if segments and _has_segment(original_path, segments):
            return not _has_segment(og_path, segments)
        return False

    return Signal(id=id, description=description, check=check, weight=weight)


def login_form_present(
    form_action_terms: Sequence[str] = ("login",),
    *,
    id: str = "password-form-present",
    description: str = "Page contains password input field (login form)",
    weight: int = 1,
) -> Signal:
    """Password input, or a ``<form>`` whose action contains a login term."""
    terms = tuple(t.lower() for t in form_action_terms)

    def check(ctx: DetectionContext) -> bool:
        if ctx.dom.exists('//input[translate(@type, "PASSWORD", "password")="password"]'):
            return True
        for action in ctx.dom.xpath("//form/@action"):
            action = str(action).lower()
            if any(term in action for term in terms):
                return True
        return False

    return Signal(id=id, description=description, check=check, weight=weight)


def visible_keywords(
    phrase_groups: Sequence[str | Sequence[str]],
    *,
    id: str = "login-button-present",
    description: str = "Page contains prominent login/signup buttons",
    weight: int = 1,
) -> Signal:
    """Every phrase group has a member in the rendered text.

    A group is a single phrase or a tuple of alternatives (localised
    variants).  Text inside script/style/noscript/template never counts.
    """
    groups: tuple[tuple[str, ...], ...] = tuple(
        (g.lower(),) if isinstance(g, str) else tuple(p.lower() for p in g) for g in phrase_groups
    )
    if not groups:
        raise RuleDefinitionError(f"Signal {id!r}: at least one phrase group is required")

    def check(ctx: DetectionContext) -> bool:
        text = ctx.dom.visible_text()
        if not text:
            return False
        return all(any(phrase in text for phrase in group) for group in groups)

    return Signal(id=id, description=description, check=check, weight=weight)


def missing_structure(
    content_segments: Sequence[str],
    markers: Sequence[str],
    *,
    id: str = "no-post-content",
    description: str = "Page lacks expected post content structure",
    weight: int = 1,
) -> Signal:
    """Requested URL implies content but none of the XPath *markers* exist."""
    segments = tuple(content_segments)
    marker_exprs = tuple(markers)
    if not segments or not marker_exprs:
        raise RuleDefinitionError(f"Signal {id!r}: content segments and markers are required")

    def check(ctx: DetectionContext) -> bool:
        if not _has_segment(ctx.original_url, segments):
            return False
        return not any(ctx.dom.exists(expr) for expr in marker_exprs)

    return Signal(id=id, description=description, check=check, weight=weight)
