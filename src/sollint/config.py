"""
Configuration for sollint.

Settings are layered: built-in defaults, then a JSON project file
(``sollint.json`` in the working directory, or an explicit path), then
command-line overrides. A project file looks like::

    {
        "disable": ["unused-variable"],
        "guard_functions": ["require", "_checkOwner"],
        "report_all_destructive_calls": true,
        "fail_on": "high"
    }

Per-file ``// @sollint:`` directives are handled separately by
``sollint.runtime.file_flags``.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from .error_reporter import ConfigError
from .findings import RuleKind, Severity

logger = logging.getLogger("sollint.config")

DEFAULT_CONFIG_FILE = "sollint.json"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_rule(name: Any) -> RuleKind:
    if isinstance(name, RuleKind):
        return name
    try:
        return RuleKind(str(name).strip().lower())
    except ValueError:
        valid = ", ".join(r.value for r in RuleKind)
        raise ConfigError(f"Unknown rule '{name}' (expected one of: {valid})") from None


def parse_severity(name: Any) -> Severity:
    if isinstance(name, Severity):
        return name
    try:
        return Severity(str(name).strip().lower())
    except ValueError:
        valid = ", ".join(s.value for s in Severity)
        raise ConfigError(f"Unknown severity '{name}' (expected one of: {valid})") from None


def _names(value: Any, key: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"'{key}' must be a list of names")
    return tuple(value)


@dataclass(frozen=True)
class LintConfig:
    enabled_rules: Optional[FrozenSet[RuleKind]] = None  # None means every rule
    disabled_rules: FrozenSet[RuleKind] = frozenset()
    guard_functions: Tuple[str, ...] = ("require",)
    destructive_functions: Tuple[str, ...] = ("selfdestruct", "suicide")
    # Keep scanning a function after its first unprotected destructive call
    report_all_destructive_calls: bool = False
    # Count identifiers inside larger expressions as uses, not only `x;`
    count_nested_references: bool = False
    fail_on: Optional[Severity] = None
    log_level: str = "WARNING"
    source: Optional[str] = field(default=None, compare=False)

    def is_enabled(self, rule: RuleKind) -> bool:
        if rule in self.disabled_rules:
            return False
        return self.enabled_rules is None or rule in self.enabled_rules

    def with_overrides(self, **overrides: Any) -> "LintConfig":
        """Return a copy with the given (already typed) fields replaced; None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)

    def disable(self, rules: Iterable[Any]) -> "LintConfig":
        extra = frozenset(parse_rule(r) for r in rules)
        if not extra:
            return self
        return dataclasses.replace(self, disabled_rules=self.disabled_rules | extra)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "LintConfig":
        if not isinstance(data, dict):
            raise ConfigError(f"{source or 'config'}: expected a JSON object at top level")

        kwargs: Dict[str, Any] = {"source": source}
        for key, value in data.items():
            if key in ("rules", "enable", "enabled_rules"):
                kwargs["enabled_rules"] = frozenset(parse_rule(r) for r in _names(value, key))
            elif key in ("disable", "disabled_rules"):
                kwargs["disabled_rules"] = frozenset(parse_rule(r) for r in _names(value, key))
            elif key == "guard_functions":
                kwargs["guard_functions"] = _names(value, key)
            elif key == "destructive_functions":
                kwargs["destructive_functions"] = _names(value, key)
            elif key in ("report_all_destructive_calls", "count_nested_references"):
                if not isinstance(value, bool):
                    raise ConfigError(f"'{key}' must be true or false")
                kwargs[key] = value
            elif key == "fail_on":
                kwargs["fail_on"] = None if value is None else parse_severity(value)
            elif key == "log_level":
                level = str(value).upper()
                if level not in _LOG_LEVELS:
                    raise ConfigError(f"'log_level' must be one of {', '.join(_LOG_LEVELS)}")
                kwargs["log_level"] = level
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, source or "config")
        return cls(**kwargs)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "LintConfig":
        """Load ``path``, or ``sollint.json`` from the working directory if present."""
        if path is None:
            if not os.path.isfile(DEFAULT_CONFIG_FILE):
                return cls()
            path = DEFAULT_CONFIG_FILE

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e

        logger.info("Loaded configuration from %s", path)
        return cls.from_dict(data, source=path)

