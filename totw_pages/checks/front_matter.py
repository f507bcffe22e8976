"""Rules covering the front-matter schema consumed by the site generator."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from totw_pages._constants import CONTENT_TYPE, SIDENAV_SUFFIXES

from .models import Finding, Severity

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus, Document

LOAD_ERROR = "load-error"
FRONT_MATTER_SCHEMA = "front-matter-schema"
SIDENAV_EXISTS = "sidenav-exists"


def check_load_errors(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report content files whose front-matter could not be parsed."""
    for error in corpus.errors:
        yield Finding(
            rule=LOAD_ERROR,
            severity=severity,
            message=error.message,
            path=error.path,
            line=error.line,
        )


def _schema_problems(document: Document) -> cabc.Iterator[str]:
    if not document.title.strip():
        yield "Field 'title' is empty."
    if document.type is not None and document.type != CONTENT_TYPE:
        yield f"Field 'type' must be '{CONTENT_TYPE}', got '{document.type}'."
    if document.sidenav is not None and not document.sidenav.strip():
        yield "Field 'sidenav' is empty."
    permalink = document.permalink.strip()
    if permalink != document.permalink:
        yield "Field 'permalink' has leading or trailing whitespace."
    if any(char.isspace() for char in permalink):
        yield f"Permalink '{permalink}' contains whitespace."
    if "://" in permalink or permalink.startswith("//"):
        yield f"Permalink '{permalink}' must be a site path, not a URL."
    if "#" in permalink or "?" in permalink:
        yield f"Permalink '{permalink}' must not contain a fragment or query."


def check_front_matter_schema(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report documents whose front-matter values break the schema."""
    for document in corpus.documents:
        for message in _schema_problems(document):
            yield Finding(
                rule=FRONT_MATTER_SCHEMA,
                severity=severity,
                message=message,
                path=document.path,
                line=1,
            )


def check_sidenav_exists(
    corpus: Corpus, config: LintConfig, severity: Severity
) -> cabc.Iterator[Finding]:
    """Report ``sidenav`` values with no navigation file in ``sidenav_dir``."""
    sidenav_dir = config.sidenav_dir
    if sidenav_dir is None:
        return
    if not sidenav_dir.is_dir():
        yield Finding(
            rule=SIDENAV_EXISTS,
            severity=severity,
            message=f"Sidenav directory '{sidenav_dir}' not found.",
            path=sidenav_dir,
        )
        return

    for document in corpus.documents:
        name = (document.sidenav or "").strip()
        if not name:
            continue
        suffixes = ("", *SIDENAV_SUFFIXES)
        if not any((sidenav_dir / f"{name}{suffix}").is_file() for suffix in suffixes):
            yield Finding(
                rule=SIDENAV_EXISTS,
                severity=severity,
                message=(
                    f"Sidenav '{name}' has no navigation file in '{sidenav_dir}'."
                ),
                path=document.path,
                line=1,
            )


__all__ = [
    "FRONT_MATTER_SCHEMA",
    "LOAD_ERROR",
    "SIDENAV_EXISTS",
    "check_front_matter_schema",
    "check_load_errors",
    "check_sidenav_exists",
]
