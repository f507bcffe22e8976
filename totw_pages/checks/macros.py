"""Proofreading rules for compiler pre-defined macro reference tables."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from totw_pages.content import parse_macro_tables
from totw_pages.content.macro_tables import MACRO_COLUMNS

from .models import Finding, Severity

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus

MACRO_TABLE = "macro-table"
MACRO_DUPLICATE = "macro-duplicate"


def check_macro_table(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report macro rows with missing cells or an empty macro name."""
    for document in corpus.documents:
        for row in parse_macro_tables(document.body):
            if row.cell_count < MACRO_COLUMNS:
                yield Finding(
                    rule=MACRO_TABLE,
                    severity=severity,
                    message=(
                        f"Macro table row has {row.cell_count} cells; "
                        f"expected {MACRO_COLUMNS}."
                    ),
                    path=document.path,
                    line=document.file_line(row.line),
                )
            if not row.macro:
                yield Finding(
                    rule=MACRO_TABLE,
                    severity=severity,
                    message="Macro table row has an empty macro name.",
                    path=document.path,
                    line=document.file_line(row.line),
                )


def check_macro_duplicate(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report a macro listed twice for the same target within one section."""
    for document in corpus.documents:
        seen: dict[tuple[str, str, str], int] = {}
        for row in parse_macro_tables(document.body):
            if not row.macro:
                continue
            key = (row.section, row.macro, row.target.lower())
            if key in seen:
                section = f" in section '{row.section}'" if row.section else ""
                yield Finding(
                    rule=MACRO_DUPLICATE,
                    severity=severity,
                    message=(
                        f"Macro '{row.macro}' for '{row.target}' is already listed"
                        f"{section} on line {document.file_line(seen[key])}."
                    ),
                    path=document.path,
                    line=document.file_line(row.line),
                )
            else:
                seen[key] = row.line


__all__ = [
    "MACRO_DUPLICATE",
    "MACRO_TABLE",
    "check_macro_duplicate",
    "check_macro_table",
]
