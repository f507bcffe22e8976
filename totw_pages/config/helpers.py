"""Utility helpers shared by the lint configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from totw_pages.checks.models import Severity

from .models import LintConfigError, RuleSetting

RULE_OFF_VALUES = frozenset({"off", "false", "disabled", "ignore"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_path(value: object | None, *, base: Path | None = None) -> Path | None:
    """Return ``value`` as a Path resolved against ``base`` when relative."""
    text = _optional_str(value)
    if text is None:
        return None
    path = Path(text).expanduser()
    if base is not None and not path.is_absolute():
        return base / path
    return path


def _string_tuple(
    value: object | None, *, key: str, default: tuple[str, ...]
) -> tuple[str, ...]:
    """Normalize a string or list of strings into a tuple of non-empty strings."""
    match value:
        case None:
            return default
        case str():
            text = value.strip()
            return (text,) if text else ()
        case list() | tuple():
            normalized: list[str] = []
            for segment in value:
                text = str(segment).strip()
                if text:
                    normalized.append(text)
            return tuple(normalized)
        case _:
            msg = f"Configuration key '{key}' must be a string or a list of strings."
            raise LintConfigError(msg)


def _parse_severity(value: object, *, key: str) -> Severity:
    """Return the Severity named by ``value``."""
    text = str(value).strip().lower()
    try:
        return Severity(text)
    except ValueError as exc:
        known = ", ".join(level.value for level in Severity)
        msg = f"Invalid severity '{value}' for '{key}'. Expected one of: {known}"
        raise LintConfigError(msg) from exc


def _build_rule_setting(rule_id: str, value: object) -> RuleSetting:
    """Build a RuleSetting from ``off``/``false`` or a severity name."""
    match value:
        case False:
            return RuleSetting(enabled=False)
        case True:
            return RuleSetting()
        case str() if value.strip().lower() in RULE_OFF_VALUES:
            return RuleSetting(enabled=False)
        case str():
            return RuleSetting(severity=_parse_severity(value, key=f"rules.{rule_id}"))
        case dict():
            enabled = value.get("enabled", True)
            if not isinstance(enabled, bool):
                msg = f"'rules.{rule_id}.enabled' must be true or false."
                raise LintConfigError(msg)
            severity = value.get("severity")
            return RuleSetting(
                enabled=enabled,
                severity=(
                    _parse_severity(severity, key=f"rules.{rule_id}.severity")
                    if severity is not None
                    else None
                ),
            )
        case _:
            msg = (
                f"Rule '{rule_id}' must be 'off', a severity name, or a mapping "
                "with 'enabled'/'severity'."
            )
            raise LintConfigError(msg)


def _build_rules(
    payload: typ.Mapping[str, typ.Any] | None, known_rules: typ.Collection[str]
) -> dict[str, RuleSetting]:
    """Validate the ``rules`` table against registered rule ids."""
    if not payload:
        return {}
    if not isinstance(payload, dict):
        msg = "Configuration key 'rules' must be a mapping."
        raise LintConfigError(msg)
    result: dict[str, RuleSetting] = {}
    for rule_id, value in payload.items():
        key = str(rule_id)
        if key not in known_rules:
            available = ", ".join(sorted(known_rules))
            msg = f"Unknown rule '{key}'. Known rules: {available}"
            raise LintConfigError(msg)
        result[key] = _build_rule_setting(key, value)
    return result


__all__ = [
    "RULE_OFF_VALUES",
    "_build_rule_setting",
    "_build_rules",
    "_optional_path",
    "_optional_str",
    "_parse_severity",
    "_string_tuple",
]
