# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Site rules: URL matcher + ordered signals + combination policy."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from loginwall.errors import RuleDefinitionError
from loginwall.signals import Signal
from loginwall.urls import host_matches, hostname_of

logger = logging.getLogger(__name__)

UrlTest = Callable[[str], bool]


class DetectionMode(str, Enum):
    """How matched signals combine into a verdict."""

    ANY = "any"  # at least one signal matched
    ALL = "all"  # every signal matched
    THRESHOLD = "threshold"  # summed weight of matched signals >= threshold_weight


@dataclass(frozen=True, slots=True)
class SiteRule:
    """Login-wall detection rule for one site. Immutable once built."""

    id: str
    site_name: str
    test: UrlTest
    signals: tuple[Signal, ...]
    detection_mode: DetectionMode = DetectionMode.ANY
    threshold_weight: int | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise RuleDefinitionError("SiteRule id must be non-empty")
        # Freeze list input so the rule cannot be mutated through the caller's reference
        object.__setattr__(self, "signals", tuple(self.signals))
        try:
            object.__setattr__(self, "detection_mode", DetectionMode(self.detection_mode))
        except ValueError:
            raise RuleDefinitionError(
                f"Rule {self.id!r}: unknown detection mode {self.detection_mode!r}"
            ) from None

        if not self.signals:
            raise RuleDefinitionError(f"Rule {self.id!r}: at least one signal is required")
        seen: set[str] = set()
        for sig in self.signals:
            if not isinstance(sig, Signal):
                raise RuleDefinitionError(f"Rule {self.id!r}: {sig!r} is not a Signal")
            if sig.id in seen:
                raise RuleDefinitionError(f"Rule {self.id!r}: duplicate signal id {sig.id!r}")
            seen.add(sig.id)

        if self.detection_mode is DetectionMode.THRESHOLD:
            tw = self.threshold_weight
            if isinstance(tw, bool) or not isinstance(tw, int) or tw < 1:
                raise RuleDefinitionError(
                    f"Rule {self.id!r}: threshold mode requires a positive integer threshold_weight, got {tw!r}"
                )
        elif self.threshold_weight is not None:
            raise RuleDefinitionError(
                f"Rule {self.id!r}: threshold_weight only applies to threshold mode"
            )

    def matches(self, url: str) -> bool:
        """Apply ``test``; any exception from a hand-written matcher counts as no match."""
        try:
            return bool(self.test(url))
        except Exception:
            logger.warning("URL matcher for rule %r raised on %r", self.id, url, exc_info=True)
            return False


def hostname_matcher(*domains: str) -> UrlTest:
    """Build a ``test`` predicate matching *domains* and their subdomains.

    Only absolute http(s) URLs can match; ``example.com`` matches
    ``www.example.com`` but never ``notexample.com`` or ``example.com.evil.tld``.
    """
    if not domains:
        raise RuleDefinitionError("hostname_matcher needs at least one domain")
    normalized = tuple(d.lower().strip().rstrip(".") for d in domains)

    def test(url: str) -> bool:
        host = hostname_of(url)
        if host is None:
            return False
        return any(host_matches(host, d) for d in normalized)

    return test


def site_rule(
    id: str,
    site_name: str,
    domains: Sequence[str],
    signals: Sequence[Signal],
    *,
    detection_mode: DetectionMode | str = DetectionMode.ANY,
    threshold_weight: int | None = None,
) -> SiteRule:
    """Declarative shorthand: a rule whose ``test`` is a hostname matcher."""
    return SiteRule(
        id=id,
        site_name=site_name,
        test=hostname_matcher(*domains),
        signals=tuple(signals),
        detection_mode=detection_mode,  # type: ignore[arg-type]
        threshold_weight=threshold_weight,
    )
