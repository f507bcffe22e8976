"""Cyclopts CLI entrypoint for checking and inspecting the Tips of the Week corpus.

The ``totw-pages`` console script defined here loads the Markdown content
directory, runs the content-integrity rules, and prints or writes a report.
It also lists the published pages in listing order and dumps the compiler
macro reference tables as JSON. Typical usage is ``totw-pages lint`` in CI,
where every option can also be supplied through an ``INPUT_<NAME>``
environment variable.

Examples
--------
Lint the default content directory:

>>> from totw_pages.cli import main
>>> main()  # doctest: +SKIP

Write an HTML report and fail on warnings:

>>> from totw_pages.cli import app
>>> app(
...     ["lint", "--format", "html", "--output", "lint.html", "--fail-on", "warning"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json as msgspec_json
import structlog
from cyclopts import App, Parameter

from .checks import Severity, run_checks
from .config import LintConfig, load_lint_config
from .content import Corpus, Layout, load_corpus, parse_macro_tables
from .logging_config import configure_logging
from .render import normalize_permalink
from .report import LintReport, ReportFormat, ReportWriter

DEFAULT_CONFIG = Path("config/lint.yaml")

logger = structlog.get_logger(__name__)

app = App(name="totw-pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _load(config_path: Path, content_dir: Path | None) -> tuple[LintConfig, Corpus]:
    """Load configuration and the corpus it points at.

    The default configuration path is optional; an explicitly chosen path
    must exist.
    """
    lint_config = load_lint_config(config_path, required=config_path != DEFAULT_CONFIG)
    if content_dir is not None:
        lint_config.content_dir = content_dir
    corpus = load_corpus(
        lint_config.content_dir,
        include=lint_config.include,
        exclude=lint_config.exclude,
    )
    return lint_config, corpus


@app.command(help="Run the content-integrity checks over the corpus.")
def lint(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to lint config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    content_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the content directory", env_var="INPUT_CONTENT_DIR"),
    ] = None,
    format: typ.Annotated[  # noqa: A002 - mirrors the --format option
        ReportFormat, Parameter(help="Report format", env_var="INPUT_FORMAT")
    ] = ReportFormat.TEXT,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Write the report to this file", env_var="INPUT_OUTPUT"),
    ] = None,
    fail_on: typ.Annotated[
        Severity | None,
        Parameter(
            help="Lowest severity that fails the run", env_var="INPUT_FAIL_ON"
        ),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log debug events to stderr", env_var="INPUT_VERBOSE")
    ] = False,
    json_logs: typ.Annotated[
        bool,
        Parameter(help="Render log events as JSON lines", env_var="INPUT_JSON_LOGS"),
    ] = False,
) -> None:
    """Lint the corpus and report findings.

    Parameters
    ----------
    config : Path, optional
        Path to the ``lint.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``). The default path may be absent.
    content_dir : Path or None, optional
        Content directory replacing the configured ``content_dir``.
    format : ReportFormat, optional
        ``text`` (default), ``json`` or ``html``.
    output : Path or None, optional
        File to write the report to; the report is printed when ``None``.
    fail_on : Severity or None, optional
        Severity threshold for a failing exit status. Defaults to the
        configured ``fail_on``, which itself defaults to ``error``.
    verbose : bool, optional
        Enable debug logging.
    json_logs : bool, optional
        Render log events as JSON lines instead of the console format.

    Returns
    -------
    None
        Prints the report or the path it was written to.

    Raises
    ------
    SystemExit
        With status 1 when any finding is at or above the threshold.
    """
    configure_logging(verbose=verbose, json_logs=json_logs)
    lint_config, corpus = _load(config, content_dir)
    findings = run_checks(corpus, lint_config)
    report = LintReport(
        findings=findings,
        documents_checked=len(corpus.documents),
        load_errors=len(corpus.errors),
        root=corpus.root,
    )
    writer = ReportWriter()
    if output is not None:
        written = writer.write(report, format, output)
        print(f"wrote {_format_path(written)}")
        print(report.summary())
    else:
        print(writer.render(report, format), end="")

    threshold = fail_on or lint_config.fail_on
    if report.exceeds(threshold):
        logger.debug("lint.failed", threshold=str(threshold))
        raise SystemExit(1)


@app.command(name="list", help="Print the published listing for a layout.")
def list_documents(
    *,
    layout: typ.Annotated[
        Layout, Parameter(help="Layout to list", env_var="INPUT_LAYOUT")
    ] = Layout.TIPS,
    config: typ.Annotated[
        Path, Parameter(help="Path to lint config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    content_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the content directory", env_var="INPUT_CONTENT_DIR"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log debug events to stderr", env_var="INPUT_VERBOSE")
    ] = False,
    json_logs: typ.Annotated[
        bool,
        Parameter(help="Render log events as JSON lines", env_var="INPUT_JSON_LOGS"),
    ] = False,
) -> None:
    """Print one ``order  permalink  title`` line per published page.

    Unpublished pages are excluded, matching the listing pages the site
    generator builds.
    """
    configure_logging(verbose=verbose, json_logs=json_logs)
    _lint_config, corpus = _load(config, content_dir)
    for document in corpus.listing(layout):
        order = document.order or "-"
        print(f"{order:>4}  {document.permalink}  {document.title}")


@app.command(help="Dump compiler macro reference rows as JSON.")
def macros(
    *,
    permalink: typ.Annotated[
        str | None,
        Parameter(help="Only this page's tables", env_var="INPUT_PERMALINK"),
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to lint config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    content_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the content directory", env_var="INPUT_CONTENT_DIR"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log debug events to stderr", env_var="INPUT_VERBOSE")
    ] = False,
    json_logs: typ.Annotated[
        bool,
        Parameter(help="Render log events as JSON lines", env_var="INPUT_JSON_LOGS"),
    ] = False,
) -> None:
    """Print every macro table row in the corpus as a JSON array.

    Parameters
    ----------
    permalink : str or None, optional
        Restrict output to the page with this permalink (compared after
        normalization, so ``/docs/macros/`` matches ``docs/macros``).
    config : Path, optional
        Path to the lint configuration file.
    content_dir : Path or None, optional
        Content directory replacing the configured one.
    verbose : bool, optional
        Enable debug logging.
    json_logs : bool, optional
        Render log events as JSON lines instead of the console format.
    """
    configure_logging(verbose=verbose, json_logs=json_logs)
    _lint_config, corpus = _load(config, content_dir)
    wanted = normalize_permalink(permalink) if permalink is not None else None
    rows: list[dict[str, typ.Any]] = []
    for document in corpus.documents:
        if wanted is not None and normalize_permalink(document.permalink) != wanted:
            continue
        rows.extend(
            {
                "permalink": document.permalink,
                "section": row.section,
                "macro": row.macro,
                "target": row.target,
                "defined_by": row.defined_by,
                "note": row.note,
                "line": document.file_line(row.line),
            }
            for row in parse_macro_tables(document.body)
        )
    print(msgspec_json.format(msgspec_json.encode(rows), indent=2).decode("utf-8"))


def main() -> None:
    """Invoke the Cyclopts application that powers the `totw-pages` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
