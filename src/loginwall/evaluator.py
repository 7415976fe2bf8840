# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Rule evaluation: run every signal, reduce by the rule's detection mode.

All signals always run (no short-circuit) so the verdict's ``reason``
lists the complete matched set.  The reduction is a plain weighted sum;
every positive verdict is traceable to the exact signals that fired.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from loginwall import DetectionResult
from loginwall.context import DetectionContext
from loginwall.rules import DetectionMode, SiteRule

logger = logging.getLogger(__name__)

REASON_SEPARATOR = "; "


@dataclass(frozen=True, slots=True)
class SignalOutcome:
    signal_id: str
    matched: bool
    weight: int


def run_signals(rule: SiteRule, context: DetectionContext) -> list[SignalOutcome]:
    """Evaluate every signal of *rule* in declaration order.

    A signal that raises is a bug in its definition; the exception propagates.
    """
    return [SignalOutcome(sig.id, bool(sig.check(context)), sig.weight) for sig in rule.signals]


def is_positive(rule: SiteRule, outcomes: list[SignalOutcome]) -> bool:
    matched = [o for o in outcomes if o.matched]
    if rule.detection_mode is DetectionMode.ANY:
        return len(matched) > 0
    if rule.detection_mode is DetectionMode.ALL:
        return len(matched) == len(rule.signals)
    # THRESHOLD: threshold_weight validated at rule construction
    total = sum(o.weight for o in matched)
    return total >= rule.threshold_weight  # type: ignore[operator]


def evaluate_rule(rule: SiteRule, context: DetectionContext) -> DetectionResult:
    """Apply *rule* to *context* and build the verdict."""
    outcomes = run_signals(rule, context)
    positive = is_positive(rule, outcomes)

    matched_ids = {o.signal_id for o in outcomes if o.matched}
    logger.debug(
        "rule=%s mode=%s matched=%s weight=%d verdict=%s",
        rule.id,
        rule.detection_mode.value,
        ",".join(o.signal_id for o in outcomes if o.matched) or "-",
        sum(o.weight for o in outcomes if o.matched),
        positive,
    )

    if not positive:
        return DetectionResult.negative()

    reason = REASON_SEPARATOR.join(sig.description for sig in rule.signals if sig.id in matched_ids)
    return DetectionResult(is_login_redirect=True, site_name=rule.site_name, reason=reason)
