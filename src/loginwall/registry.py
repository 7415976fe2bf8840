# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Rule registry: ordered, immutable, first match wins.

Rules are expected to be mutually exclusive by hostname; when two could
match the same URL, the earlier one takes priority.  Add new sites to
``DEFAULT_RULES``; nothing else needs to change.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Iterator

from loginwall.config import Settings
from loginwall.errors import ConfigError, RuleDefinitionError
from loginwall.rules import SiteRule
from loginwall.sites.instagram import INSTAGRAM_RULE

logger = logging.getLogger(__name__)

DEFAULT_RULES: tuple[SiteRule, ...] = (INSTAGRAM_RULE,)


class RuleRegistry:
    """Read-only ordered collection of site rules."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[SiteRule] = ()) -> None:
        frozen = tuple(rules)
        seen: set[str] = set()
        for rule in frozen:
            if not isinstance(rule, SiteRule):
                raise RuleDefinitionError(f"{rule!r} is not a SiteRule")
            if rule.id in seen:
                raise RuleDefinitionError(f"duplicate rule id {rule.id!r}")
            seen.add(rule.id)
        self._rules = frozen

    @property
    def rules(self) -> tuple[SiteRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[SiteRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return any(rule.id == rule_id for rule in self._rules)

    def __repr__(self) -> str:
        return f"RuleRegistry({[r.id for r in self._rules]!r})"

    def get(self, rule_id: str) -> SiteRule | None:
        return next((r for r in self._rules if r.id == rule_id), None)

    def find_rule_for_url(self, url: str) -> SiteRule | None:
        """First rule whose matcher accepts *url*, or None."""
        return next((r for r in self._rules if r.matches(url)), None)

    def with_rules(self, *rules: SiteRule) -> RuleRegistry:
        """New registry with *rules* appended (lowest priority)."""
        return RuleRegistry(self._rules + rules)

    def without(self, *rule_ids: str) -> RuleRegistry:
        """New registry without the given rule ids."""
        drop = set(rule_ids)
        return RuleRegistry(r for r in self._rules if r.id not in drop)


def build_registry(settings: Settings | None = None, rules: Iterable[SiteRule] = DEFAULT_RULES) -> RuleRegistry:
    """Apply enabled/disabled filters from *settings* to *rules*."""
    settings = settings or Settings()
    rules = tuple(rules)
    known = {r.id for r in rules}
    unknown = (settings.enabled_rules | settings.disabled_rules) - known
    if unknown:
        raise ConfigError(f"unknown rule id(s): {', '.join(sorted(unknown))}")

    registry = RuleRegistry(r for r in rules if settings.is_rule_enabled(r.id))
    skipped = known - {r.id for r in registry}
    if skipped:
        logger.info("login redirect rules disabled by configuration: %s", ", ".join(sorted(skipped)))
    return registry


@functools.cache
def default_registry() -> RuleRegistry:
    """Process-wide registry built from the rule filters in the environment.

    Built when ``loginwall.detector`` is imported, so a bad rule id surfaces
    at startup; later calls return the cached instance.
    """
    return build_registry(Settings.rules_from_env())


def find_rule_for_url(url: str) -> SiteRule | None:
    return default_registry().find_rule_for_url(url)
