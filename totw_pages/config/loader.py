"""Load lint configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import structlog
from ruamel.yaml import YAML

from totw_pages.checks.registry import RULE_IDS

from .helpers import (
    _build_rules,
    _optional_path,
    _optional_str,
    _parse_severity,
    _string_tuple,
)
from .models import (
    DEFAULT_CONTENT_DIR,
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    DEFAULT_PLACEHOLDERS,
    LintConfig,
    LintConfigError,
)

logger = structlog.get_logger(__name__)

KNOWN_KEYS = frozenset(
    {
        "content_dir",
        "sidenav_dir",
        "include",
        "exclude",
        "site_prefixes",
        "placeholder_patterns",
        "pygments_style",
        "rules",
        "fail_on",
    }
)


def load_lint_config(path: Path | None, *, required: bool = True) -> LintConfig:
    """Load the YAML file describing how the corpus is linted.

    Parameters
    ----------
    path : Path or None
        Filesystem path to the YAML configuration (for example
        ``config/lint.yaml``). ``None`` returns the defaults.
    required : bool, optional
        When ``False`` a missing file yields the defaults instead of raising.

    Returns
    -------
    LintConfig
        Parsed configuration. Relative ``content_dir`` and ``sidenav_dir``
        values are resolved against the directory containing ``path``.

    Raises
    ------
    FileNotFoundError
        If ``required`` is true and the configuration file does not exist.
    LintConfigError
        If the top-level YAML is not a mapping, contains unknown keys or
        rules, or carries values of the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from totw_pages.config import load_lint_config
    >>> config = load_lint_config(Path("config/lint.yaml"))  # doctest: +SKIP
    >>> config.fail_on  # doctest: +SKIP
    <Severity.ERROR: 'error'>
    """
    if path is None:
        return LintConfig()
    if not path.exists():
        if required:
            msg = f"Configuration file '{path}' not found."
            raise FileNotFoundError(msg)
        logger.debug("config.defaults", path=str(path))
        return LintConfig()

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise LintConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    unknown = sorted(str(key) for key in raw if key not in KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}"
        raise LintConfigError(msg)

    base = path.parent
    content_dir = _optional_path(raw.get("content_dir"), base=base) or (
        base / DEFAULT_CONTENT_DIR
    )
    fail_on = raw.get("fail_on")
    config = LintConfig(
        content_dir=content_dir,
        sidenav_dir=_optional_path(raw.get("sidenav_dir"), base=base),
        include=_string_tuple(
            raw.get("include"), key="include", default=DEFAULT_INCLUDE
        ),
        exclude=_string_tuple(
            raw.get("exclude"), key="exclude", default=DEFAULT_EXCLUDE
        ),
        site_prefixes=tuple(
            prefix.rstrip("/")
            for prefix in _string_tuple(
                raw.get("site_prefixes"), key="site_prefixes", default=()
            )
        ),
        placeholder_patterns=_string_tuple(
            raw.get("placeholder_patterns"),
            key="placeholder_patterns",
            default=DEFAULT_PLACEHOLDERS,
        ),
        pygments_style=_optional_str(raw.get("pygments_style")) or "default",
        rules=_build_rules(raw.get("rules"), RULE_IDS),
    )
    if fail_on is not None:
        config.fail_on = _parse_severity(fail_on, key="fail_on")
    logger.debug("config.loaded", path=str(path), rules=sorted(config.rules))
    return config


__all__ = ["KNOWN_KEYS", "load_lint_config"]
