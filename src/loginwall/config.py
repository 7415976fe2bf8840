# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Environment-driven settings.

  LOGINWALL_ENABLED_RULES   comma-separated rule ids; when set, only these run
  LOGINWALL_DISABLED_RULES  comma-separated rule ids removed after the enabled filter
  LOGINWALL_LOG_LEVEL       root log level for ``configure_logging`` (default INFO)
  LOGINWALL_LOG_JSON        1/true/yes/on → JSON log lines

The rule variables are consumed when the default registry is built; the log
variables only by ``configure_logging``, which is also where a bad level is
rejected.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from loginwall.errors import ConfigError
from loginwall.logging_config import configure

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


def _split_ids(raw: str) -> frozenset[str]:
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    enabled_rules: frozenset[str] = frozenset()
    disabled_rules: frozenset[str] = frozenset()
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def rules_from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Settings carrying only the rule filters; log variables are not read."""
        env = os.environ if environ is None else environ
        return cls(
            enabled_rules=_split_ids(env.get("LOGINWALL_ENABLED_RULES", "")),
            disabled_rules=_split_ids(env.get("LOGINWALL_DISABLED_RULES", "")),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        rules = cls.rules_from_env(env)
        return cls(
            enabled_rules=rules.enabled_rules,
            disabled_rules=rules.disabled_rules,
            log_level=env.get("LOGINWALL_LOG_LEVEL", "").strip().upper() or "INFO",
            log_json=env.get("LOGINWALL_LOG_JSON", "").strip().lower() in _TRUTHY,
        )

    def is_rule_enabled(self, rule_id: str) -> bool:
        if self.enabled_rules and rule_id not in self.enabled_rules:
            return False
        return rule_id not in self.disabled_rules


def configure_logging(settings: Settings | None = None, *, library_only: bool = False) -> None:
    """Apply *settings* (default: environment) to the structlog bridge.

    Raises:
        ConfigError: LOGINWALL_LOG_LEVEL names no known level.
    """
    settings = settings or Settings.from_env()
    if settings.log_level not in _LOG_LEVELS:
        raise ConfigError(f"LOGINWALL_LOG_LEVEL: unknown level {settings.log_level!r}")
    configure(json_output=settings.log_json, level=settings.log_level, library_only=library_only)
    logging.getLogger(__name__).debug("logging configured: level=%s json=%s", settings.log_level, settings.log_json)
