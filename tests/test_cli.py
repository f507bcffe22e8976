"""Tests for the ``totw-pages`` command functions.

The command functions are called directly with keyword arguments, the same
values Cyclopts would pass after parsing. Each test runs from ``tmp_path`` so
the default ``config/lint.yaml`` is absent and defaults apply.

Usage
-----
Run ``pytest tests/test_cli.py -v``.
"""

from __future__ import annotations

import logging
import typing as typ

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from totw_pages import cli
from totw_pages.checks import Severity
from totw_pages.content import Layout
from totw_pages.report import ReportFormat

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


@pytest.fixture(autouse=True)
def _run_in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_log_level() -> cabc.Iterator[None]:
    """Return the root logger to warnings after commands run with ``--verbose``."""
    yield
    logging.getLogger().setLevel(logging.WARNING)


def test_lint_clean_corpus_exits_normally(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """A clean corpus prints only the summary line."""
    write_tip(1)
    cli.lint(content_dir=content_dir)
    assert capsys.readouterr().out == (
        "1 document checked: 0 errors, 0 warnings, 0 info\n"
    )


def test_lint_fails_on_errors(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Error findings print and exit with status 1."""
    write_tip(1, order="'2'")
    with pytest.raises(SystemExit) as excinfo:
        cli.lint(content_dir=content_dir)
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "tips/001.md:1: error [tip-order]" in out


def test_fail_on_threshold_controls_exit(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
) -> None:
    """Warnings fail the run only when the threshold is lowered."""
    write_tip(1, "Text.\n\n[^spare]: Unused.\n")
    cli.lint(content_dir=content_dir)
    with pytest.raises(SystemExit):
        cli.lint(content_dir=content_dir, fail_on=Severity.WARNING)


def test_lint_reads_config_file(
    tmp_path: Path,
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Rules disabled in the config file do not report."""
    write_tip(1, order="'2'")
    config = tmp_path / "lint.yaml"
    config.write_text(
        "content_dir: content\nrules:\n  tip-order: off\n", encoding="utf-8"
    )
    cli.lint(config=config)
    assert "[tip-order]" not in capsys.readouterr().out


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    """A config path given on purpose must exist."""
    with pytest.raises(FileNotFoundError):
        cli.lint(config=tmp_path / "nope.yaml")


def test_lint_writes_html_report(
    tmp_path: Path,
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """``--output`` writes the report and prints where it went."""
    write_tip(1, "[later](TODO)\n")
    output = tmp_path / "reports" / "lint.html"
    with pytest.raises(SystemExit):
        cli.lint(content_dir=content_dir, format=ReportFormat.HTML, output=output)
    assert capsys.readouterr().out.startswith("wrote reports/lint.html\n")
    soup = BeautifulSoup(output.read_text(encoding="utf-8"), "html.parser")
    assert [row["data-rule"] for row in soup.select("tr.finding")] == [
        "internal-links"
    ]


def test_json_logs_write_structured_events_to_stderr(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Log events are JSON lines on stderr; stdout keeps the report."""
    write_tip(1)
    cli.lint(content_dir=content_dir, verbose=True, json_logs=True)
    captured = capsys.readouterr()
    assert captured.out == "1 document checked: 0 errors, 0 warnings, 0 info\n"
    events = [
        msgspec_json.decode(line) for line in captured.err.splitlines() if line.strip()
    ]
    loaded = [event for event in events if event.get("event") == "corpus.loaded"]
    assert loaded
    assert loaded[0]["documents"] == 1
    assert loaded[0]["level"] == "info"


def test_list_prints_published_listing(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Unpublished tips are left out of the listing."""
    write_tip(2)
    write_tip(1)
    write_tip(3, published=False)
    cli.list_documents(layout=Layout.TIPS, content_dir=content_dir)
    assert capsys.readouterr().out.splitlines() == [
        " 001  tips/1  Tip of the Week #1",
        " 002  tips/2  Tip of the Week #2",
    ]


def test_macros_prints_rows_as_json(
    content_dir: Path,
    write_page: cabc.Callable[..., Path],
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Macro rows are exported with their page, section, and file line."""
    write_page(
        "macros.md",
        "title: Macros\nlayout: docs\npermalink: docs/macros",
        "## Compilers\n\n| Macro | Target | Defined by | Notes |\n"
        "|---|---|---|---|\n| `__clang__` | Clang | Clang | |\n",
    )
    write_page("other.md", "title: Other\nlayout: docs\npermalink: docs/other")
    cli.macros(content_dir=content_dir, permalink="/docs/macros/")
    rows = msgspec_json.decode(capsys.readouterr().out)
    assert rows == [
        {
            "permalink": "docs/macros",
            "section": "Compilers",
            "macro": "__clang__",
            "target": "Clang",
            "defined_by": "Clang",
            "note": "",
            "line": 10,
        }
    ]
