"""Shared dataclasses used by the corpus checks."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
import typing as typ
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus


class Severity(enum.StrEnum):
    """How serious a finding is; ``error`` outranks ``warning`` outranks ``info``."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Return a sortable rank where larger means more severe."""
        return {"info": 0, "warning": 1, "error": 2}[self.value]

    def at_least(self, threshold: Severity) -> bool:
        """Return ``True`` when this severity meets ``threshold``."""
        return self.rank >= threshold.rank


class UnknownRuleError(KeyError):
    """Raised when a rule id is not registered."""


@dc.dataclass(slots=True)
class Finding:
    """One rule violation.

    Attributes
    ----------
    rule : str
        Stable rule identifier, for example ``"permalink-unique"``.
    severity : Severity
        Effective severity after configuration overrides.
    message : str
        Human-readable description of the problem.
    path : Path
        File the problem was found in.
    line : int or None
        1-based line within ``path``, when the problem has a position.
    """

    rule: str
    severity: Severity
    message: str
    path: Path
    line: int | None = None

    def sort_key(self) -> tuple[str, int, str, str]:
        """Return a key ordering findings by path, line, then rule."""
        return (self.path.as_posix(), self.line or 0, self.rule, self.message)


CheckFunction = cabc.Callable[
    ["Corpus", "LintConfig", Severity], cabc.Iterable[Finding]
]


@dc.dataclass(slots=True)
class Check:
    """A named corpus check and its default severity.

    Attributes
    ----------
    rule : str
        Identifier used in configuration and reports.
    summary : str
        One-line description of the property the rule verifies.
    severity : Severity
        Severity used when configuration does not override it.
    function : CheckFunction
        Callable yielding findings for a corpus.
    """

    rule: str
    summary: str
    severity: Severity
    function: CheckFunction

    def run(
        self, corpus: Corpus, config: LintConfig, severity: Severity | None = None
    ) -> list[Finding]:
        """Run the check, stamping findings with the effective severity."""
        return list(self.function(corpus, config, severity or self.severity))


__all__ = ["Check", "CheckFunction", "Finding", "Severity", "UnknownRuleError"]
