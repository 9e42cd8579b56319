"""Parse and apply inline file flags for sollint analysis.

Supported directive formats (first 25 lines):
- // @sollint: {"disable": ["unused-variable"], "report_all_destructive_calls": true}
- // @sollint: disable=unused-variable,division-before-multiplication; count_nested_references=true

Values accept booleans, ints, strings, or comma-separated lists.
"""

from __future__ import annotations

from typing import Any, Dict
import json
import logging
import re

from ..config import LintConfig, parse_rule
from ..error_reporter import ConfigError

logger = logging.getLogger("sollint.runtime.file_flags")

_MAX_SCAN_LINES = 25


def parse_file_flags(source: str) -> Dict[str, Any]:
    flags: Dict[str, Any] = {}
    if not source:
        return flags

    lines = source.splitlines()[:_MAX_SCAN_LINES]
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if "@sollint" not in stripped:
            continue

        # Strip leading comment markers
        directive = stripped
        for prefix in ("///", "//", "/*", "*"):
            if directive.startswith(prefix):
                directive = directive[len(prefix):].strip()
        if directive.endswith("*/"):
            directive = directive[:-2].strip()
        # Remove leading @sollint marker
        if not directive.lower().startswith("@sollint"):
            continue
        directive = directive[len("@sollint"):].strip()
        if directive.startswith(":"):
            directive = directive[1:].strip()

        # JSON object form
        if "{" in directive:
            json_part = directive[directive.find("{"):].strip()
            try:
                parsed = json.loads(json_part)
            except json.JSONDecodeError as e:
                logger.warning("Ignoring malformed @sollint directive %r: %s", json_part, e)
                continue
            if isinstance(parsed, dict):
                flags.update(parsed)
            continue

        # key=value form (semicolon separated)
        for part in re.split(r";", directive):
            part = part.strip()
            if not part:
                continue
            if "=" not in part:
                continue
            key, raw_val = part.split("=", 1)
            key = key.strip()
            raw_val = raw_val.strip()
            flags[key] = _parse_value(raw_val)

    return flags


def _parse_value(raw: str) -> Any:
    if not raw:
        return raw
    if "," in raw:
        return [_parse_value(item.strip()) for item in raw.split(",") if item.strip()]
    lowered = raw.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    if raw.isdigit():
        return int(raw)
    # quoted string
    if (raw.startswith("\"") and raw.endswith("\"")) or (raw.startswith("'") and raw.endswith("'")):
        return raw[1:-1]
    return raw


def _as_list(value: Any):
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def apply_file_flags(config: LintConfig, flags: Dict[str, Any]) -> LintConfig:
    """Return ``config`` adjusted by the directives of one file."""
    if not flags:
        return config

    for key, value in flags.items():
        if key == "disable":
            for rule in _as_list(value):
                try:
                    config = config.disable([rule])
                except ConfigError as e:
                    logger.warning("Ignoring @sollint flag disable=%r: %s", rule, e)
        elif key in ("report_all_destructive_calls", "count_nested_references"):
            if isinstance(value, bool):
                config = config.with_overrides(**{key: value})
            else:
                logger.warning("Ignoring @sollint flag %s=%r: expected true or false", key, value)
        elif key == "enable":
            for rule in _as_list(value):
                try:
                    kind = parse_rule(rule)
                except ConfigError as e:
                    logger.warning("Ignoring @sollint flag enable=%r: %s", rule, e)
                    continue
                config = config.with_overrides(disabled_rules=config.disabled_rules - {kind})
        else:
            logger.warning("Ignoring unknown @sollint flag '%s'", key)
    return config
