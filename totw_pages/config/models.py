"""Typed dataclasses describing corpus lint configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from totw_pages.checks.models import Severity

DEFAULT_CONTENT_DIR = Path("content")
DEFAULT_INCLUDE = ("**/*.md",)
DEFAULT_EXCLUDE = ("README.md", "**/README.md")
DEFAULT_PLACEHOLDERS = ("TODO", "TBD", "XXX", "FIXME")


class LintConfigError(ValueError):
    """Raised when the lint configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class RuleSetting:
    """Per-rule override from the ``rules`` table.

    Attributes
    ----------
    enabled : bool
        ``False`` when the rule is set to ``off``.
    severity : Severity or None
        Severity replacing the rule's default; ``None`` keeps the default.
    """

    enabled: bool = True
    severity: Severity | None = None


@dc.dataclass(slots=True)
class LintConfig:
    """A fully resolved lint configuration.

    Attributes
    ----------
    content_dir : Path
        Directory holding the Markdown corpus.
    sidenav_dir : Path or None
        Directory holding sidebar navigation files; ``None`` skips the
        sidenav existence rule.
    include : tuple[str, ...]
        Glob patterns selecting content files.
    exclude : tuple[str, ...]
        Root-relative patterns for files to skip.
    site_prefixes : tuple[str, ...]
        Absolute URL prefixes that point back into the site and are treated as
        internal links.
    placeholder_patterns : tuple[str, ...]
        Link targets (matched case-sensitively as whole words) that mark a
        link as an unfinished placeholder.
    pygments_style : str
        Pygments style passed to the render smoke test.
    rules : dict[str, RuleSetting]
        Overrides keyed by rule id.
    fail_on : Severity
        Lowest severity that makes ``lint`` exit non-zero.
    """

    content_dir: Path = DEFAULT_CONTENT_DIR
    sidenav_dir: Path | None = None
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    site_prefixes: tuple[str, ...] = ()
    placeholder_patterns: tuple[str, ...] = DEFAULT_PLACEHOLDERS
    pygments_style: str = "default"
    rules: dict[str, RuleSetting] = dc.field(default_factory=dict)
    fail_on: Severity = Severity.ERROR

    def rule(self, rule_id: str) -> RuleSetting:
        """Return the override for ``rule_id`` or an enabled default."""
        return self.rules.get(rule_id, RuleSetting())


__all__ = [
    "DEFAULT_CONTENT_DIR",
    "DEFAULT_EXCLUDE",
    "DEFAULT_INCLUDE",
    "DEFAULT_PLACEHOLDERS",
    "LintConfig",
    "LintConfigError",
    "RuleSetting",
]
