"""Shared state and steps for the pytest-bdd scenarios."""

from __future__ import annotations

import typing as typ

import pytest
from pytest_bdd import when

from totw_pages.checks import run_checks
from totw_pages.config import LintConfig
from totw_pages.content import load_corpus
from totw_pages.report import LintReport

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


@when("I lint the corpus")
def when_lint_corpus(content_dir: Path, scenario_state: dict[str, object]) -> None:
    """Run every enabled rule over the scenario's content directory."""
    corpus = load_corpus(content_dir)
    findings = run_checks(corpus, LintConfig(content_dir=content_dir))
    scenario_state["report"] = LintReport(
        findings=findings,
        documents_checked=len(corpus.documents),
        load_errors=len(corpus.errors),
        root=content_dir,
    )
