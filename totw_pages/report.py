"""Collect lint findings and render them as text, JSON, or HTML.

The text format is meant for terminals and CI logs, one finding per line in
``path:line: severity [rule] message`` form. JSON is encoded with msgspec for
tooling, and the HTML report is rendered through the ``lint_report.jinja``
template with autoescaping enabled.

Examples
--------
>>> from totw_pages.report import LintReport, ReportWriter
>>> report = LintReport(findings=[], documents_checked=3)
>>> ReportWriter().render(report, "text")
'3 documents checked: 0 errors, 0 warnings, 0 info\\n'
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import typing as typ
from pathlib import Path

import msgspec.json as msgspec_json
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .checks.models import Finding, Severity


class ReportFormat(enum.StrEnum):
    """Output formats understood by :class:`ReportWriter`."""

    TEXT = "text"
    JSON = "json"
    HTML = "html"


@dc.dataclass(slots=True)
class LintReport:
    """Findings from one lint run and the size of the corpus checked.

    Attributes
    ----------
    findings : list[Finding]
        Findings sorted by path, line, then rule.
    documents_checked : int
        Number of documents that loaded successfully.
    load_errors : int
        Number of content files that failed to load.
    root : Path or None
        Content directory; finding paths are shown relative to it.
    """

    findings: list[Finding]
    documents_checked: int
    load_errors: int = 0
    root: Path | None = None

    def counts(self) -> dict[Severity, int]:
        """Return the number of findings per severity, including zeros."""
        totals = dict.fromkeys(Severity, 0)
        for finding in self.findings:
            totals[finding.severity] += 1
        return totals

    def exceeds(self, threshold: Severity) -> bool:
        """Return ``True`` when any finding is at or above ``threshold``."""
        return any(finding.severity.at_least(threshold) for finding in self.findings)

    def display_path(self, path: Path) -> str:
        """Return ``path`` relative to the content root when possible."""
        if self.root is not None:
            try:
                return path.relative_to(self.root).as_posix()
            except ValueError:
                return path.as_posix()
        return path.as_posix()

    def summary(self) -> str:
        """Return the one-line tally printed after text findings."""
        counts = self.counts()
        errors = counts[Severity.ERROR]
        warnings = counts[Severity.WARNING]
        noun = "document" if self.documents_checked == 1 else "documents"
        return (
            f"{self.documents_checked} {noun} checked: "
            f"{errors} error{'' if errors == 1 else 's'}, "
            f"{warnings} warning{'' if warnings == 1 else 's'}, "
            f"{counts[Severity.INFO]} info"
        )


def _finding_rows(report: LintReport) -> list[dict[str, typ.Any]]:
    return [
        {
            "rule": finding.rule,
            "severity": finding.severity.value,
            "message": finding.message,
            "path": report.display_path(finding.path),
            "line": finding.line,
        }
        for finding in report.findings
    ]


class ReportWriter:
    """Render a :class:`LintReport` in one of the supported formats."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the writer.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing ``lint_report.jinja``. Defaults to the
            ``totw_pages/templates`` directory when ``None``.
        """
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, report: LintReport, fmt: ReportFormat | str) -> str:
        """Return ``report`` rendered as ``fmt``.

        Raises
        ------
        ValueError
            If ``fmt`` is not a known :class:`ReportFormat`.
        """
        match ReportFormat(fmt):
            case ReportFormat.TEXT:
                return self.render_text(report)
            case ReportFormat.JSON:
                return self.render_json(report)
            case ReportFormat.HTML:
                return self.render_html(report)

    def write(self, report: LintReport, fmt: ReportFormat | str, output: Path) -> Path:
        """Render ``report`` to ``output``, creating parent directories."""
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(self.render(report, fmt), encoding="utf-8")
        return output

    def render_text(self, report: LintReport) -> str:
        """Return one ``path:line: severity [rule] message`` line per finding.

        Paths are shown relative to the report root; the summary line comes
        last and the text ends with a newline.
        """
        lines = []
        for finding in report.findings:
            location = report.display_path(finding.path)
            if finding.line is not None:
                location = f"{location}:{finding.line}"
            lines.append(
                f"{location}: {finding.severity} [{finding.rule}] {finding.message}"
            )
        lines.append(report.summary())
        return "\n".join(lines) + "\n"

    def render_json(self, report: LintReport) -> str:
        """Return a JSON object with ``summary`` counts and ``findings`` rows.

        The summary carries ``documents_checked``, ``load_errors`` and one
        count per severity. Encoded with msgspec.
        """
        counts = report.counts()
        payload = {
            "summary": {
                "documents_checked": report.documents_checked,
                "load_errors": report.load_errors,
                **{severity.value: total for severity, total in counts.items()},
            },
            "findings": _finding_rows(report),
        }
        return msgspec_json.encode(payload).decode("utf-8") + "\n"

    def render_html(self, report: LintReport) -> str:
        """Return a standalone HTML page rendered from ``lint_report.jinja``.

        Finding text is autoescaped by Jinja2.
        """
        template = self.env.get_template("lint_report.jinja")
        return template.render(
            report=report,
            counts={severity.value: total for severity, total in report.counts().items()},
            findings=_finding_rows(report),
            generated_at=dt.datetime.now(dt.UTC),
        )


__all__ = ["LintReport", "ReportFormat", "ReportWriter"]
