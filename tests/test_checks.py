"""Unit tests for the content-integrity rules and the rule runner.

Each test writes a small corpus, runs one rule through the registry, and
inspects the findings. The runner tests cover configuration overrides
(disabling a rule, changing its severity) and the ordering of findings.

Usage
-----
Run ``pytest tests/test_checks.py -v``. Corpora are written to ``tmp_path``
with the ``write_tip`` and ``write_page`` fixtures from ``conftest.py``.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from totw_pages.checks import (
    RULE_IDS,
    Finding,
    Severity,
    UnknownRuleError,
    get_check,
    run_checks,
)
from totw_pages.checks._support import clear_render_cache
from totw_pages.config import LintConfig, RuleSetting
from totw_pages.content import load_corpus

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from pytest_mock import MockerFixture

MACROS_FRONT_MATTER = (
    "title: Pre-defined macros\nlayout: docs\nsidenav: side-nav-docs.html\n"
    "type: markdown\npermalink: docs/macros"
)


@pytest.fixture(autouse=True)
def _fresh_render_cache() -> cabc.Iterator[None]:
    """Keep cached renders from leaking between tests."""
    clear_render_cache()
    yield
    clear_render_cache()


def _run(rule: str, content_dir: Path, **overrides: typ.Any) -> list[Finding]:
    config = LintConfig(content_dir=content_dir, **overrides)
    corpus = load_corpus(content_dir)
    return get_check(rule).run(corpus, config)


def test_registry_exposes_every_rule() -> None:
    """Each documented rule id is registered exactly once."""
    assert RULE_IDS == {
        "load-error",
        "front-matter-schema",
        "permalink-unique",
        "tip-order",
        "tip-order-sequence",
        "sidenav-exists",
        "internal-links",
        "footnotes",
        "footnotes-unused",
        "markdown-render",
        "code-fence-language",
        "macro-table",
        "macro-duplicate",
        "tip-provenance",
    }
    with pytest.raises(UnknownRuleError):
        get_check("no-such-rule")


def test_clean_corpus_has_no_findings(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """A well-formed tip passes every rule."""
    write_tip(
        1,
        dedent(
            """
            Originally posted as TotW #1 on August 20, 2012

            *By [Titus Winters](mailto:titus@example.com)*

            Updated 2017-09-18

            Quicklink: [abseil.io/tips/1](https://abseil.io/tips/1)

            Use `absl::StrCat()`.[^1] See [tip 2](/tips/2).

            ```cpp
            std::string s = absl::StrCat("a", "b");
            ```

            [^1]: It avoids temporaries.
            """
        ),
    )
    write_tip(2, "Originally posted as TotW #2 on August 24, 2012\n")
    config = LintConfig(content_dir=content_dir, site_prefixes=("https://abseil.io",))
    assert run_checks(load_corpus(content_dir), config) == []


def test_load_errors_are_reported(content_dir: Path) -> None:
    """Unparseable files surface as ``load-error`` findings."""
    (content_dir / "bad.md").write_text("---\ntitle: [x\n---\n", encoding="utf-8")
    findings = _run("load-error", content_dir)
    assert [finding.rule for finding in findings] == ["load-error"]
    assert findings[0].severity is Severity.ERROR


def test_front_matter_schema(
    content_dir: Path, write_page: cabc.Callable[..., Path]
) -> None:
    """Wrong type, blank sidenav, and URL permalinks are flagged."""
    write_page(
        "a.md",
        "title: A\nlayout: docs\ntype: html\nsidenav: ''\n"
        "permalink: https://abseil.io/docs/a",
    )
    messages = [finding.message for finding in _run("front-matter-schema", content_dir)]
    assert any("'type' must be 'markdown'" in message for message in messages)
    assert any("'sidenav' is empty" in message for message in messages)
    assert any("must be a site path" in message for message in messages)


def test_permalink_unique_reports_each_member(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    write_page: cabc.Callable[..., Path],
) -> None:
    """Every file in a collision group gets its own finding."""
    write_tip(3)
    write_page("dupe.md", "title: Dupe\nlayout: docs\npermalink: /tips/3/")
    findings = _run("permalink-unique", content_dir)
    assert sorted(finding.path.name for finding in findings) == ["003.md", "dupe.md"]
    assert "tips/003.md" in next(f.message for f in findings if f.path.name == "dupe.md")


@pytest.mark.parametrize(
    ("order", "fragment"),
    [
        ("'017'", "does not match permalink"),
        ("'seven'", "is not an integer"),
        ("7", "bare YAML integer"),
    ],
    ids=["mismatch", "not-integer", "unquoted"],
)
def test_tip_order_problems(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    order: str,
    fragment: str,
) -> None:
    """Order values must be quoted integers equal to the tip number."""
    write_tip(7, order=order)
    findings = _run("tip-order", content_dir)
    assert len(findings) == 1
    assert fragment in findings[0].message


def test_tip_order_accepts_padding(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Zero padding does not change the order's number."""
    write_tip(7, order="'0007'")
    assert _run("tip-order", content_dir) == []


def test_tip_order_sequence_flags_out_of_order_dates(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """A later tip posted before an earlier one is a warning."""
    write_tip(1, "Originally posted as TotW #1 on August 20, 2012\n")
    write_tip(2, "Originally posted as TotW #2 on August 10, 2012\n")
    write_tip(3, "Originally posted as TotW #3 on August 30, 2012\n")
    findings = _run("tip-order-sequence", content_dir)
    assert [finding.path.name for finding in findings] == ["002.md"]
    assert findings[0].severity is Severity.WARNING


def test_tip_order_sequence_flags_repeated_orders(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Two published tips sharing one order compete for a slot."""
    write_tip(4)
    write_tip(5, order="'004'")
    findings = _run("tip-order-sequence", content_dir)
    assert len(findings) == 1
    assert "repeats the order" in findings[0].message


def test_sidenav_exists(
    tmp_path: Path, content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Sidenav names resolve to files in the configured directory."""
    write_tip(1)
    sidenav_dir = tmp_path / "sidenav"
    sidenav_dir.mkdir()
    assert len(_run("sidenav-exists", content_dir, sidenav_dir=sidenav_dir)) == 1
    (sidenav_dir / "side-nav-tips.html.yml").write_text("- tips\n", encoding="utf-8")
    assert _run("sidenav-exists", content_dir, sidenav_dir=sidenav_dir) == []
    assert _run("sidenav-exists", content_dir) == []


def test_internal_links(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Placeholders and dangling links on published pages are errors."""
    write_tip(
        1,
        dedent(
            """
            See [tip 2](/tips/2), [tip 9](/tips/9), [later](TODO),
            [draft](../tips/3), and [the guide][guide].

            [Download](files/sample.zip) stays unchecked.
            """
        ),
    )
    write_tip(2)
    write_tip(3, published=False)
    write_tip(4, "Unpublished pages may link to [anything](TODO).\n", published=False)
    findings = _run("internal-links", content_dir)
    messages = sorted(finding.message for finding in findings)
    assert messages == [
        "Link '../tips/3' points at unpublished page 'tips/3'.",
        "Link '/tips/9' does not match any permalink.",
        "Reference link label 'guide' is never defined.",
        "Unresolved link placeholder 'TODO'.",
    ]
    assert all(finding.path.name == "001.md" for finding in findings)


def test_internal_links_written_as_raw_html(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Inline HTML links and images are checked like Markdown links."""
    write_tip(
        1,
        'See <a href="TODO">this</a> and <a href="/tips/999">that</a>.\n\n'
        '<div><a href="/tips/2">fine</a><img src=""></div>\n',
    )
    write_tip(2)
    findings = _run("internal-links", content_dir)
    assert sorted(finding.message for finding in findings) == [
        "Link '/tips/999' does not match any permalink.",
        "Unresolved link placeholder '(empty)'.",
        "Unresolved link placeholder 'TODO'.",
    ]
    by_message = {finding.message: finding.line for finding in findings}
    assert by_message["Unresolved link placeholder 'TODO'."] == 9


def test_footnote_rules(content_dir: Path, write_tip: cabc.Callable[..., Path]) -> None:
    """Missing and duplicate definitions are errors; unused ones warnings."""
    write_tip(
        1,
        "Claim.[^a] Another.[^missing]\n\n[^a]: One.\n[^a]: Two.\n[^spare]: Unused.\n",
    )
    errors = _run("footnotes", content_dir)
    assert sorted(finding.message for finding in errors) == [
        "Footnote '[^a]' is defined more than once.",
        "Footnote '[^a]' is defined more than once.",
        "Footnote '[^missing]' has no definition.",
    ]
    unused = _run("footnotes-unused", content_dir)
    assert [finding.message for finding in unused] == [
        "Footnote '[^spare]' is never referenced."
    ]
    assert unused[0].severity is Severity.WARNING


def test_markdown_render_reports_unclosed_fence_with_file_line(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """The finding points at the fence's line in the source file."""
    path = write_tip(1, "Intro\n\n```cpp\nint x;\n")
    findings = _run("markdown-render", content_dir)
    assert len(findings) == 1
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[findings[0].line - 1] == "```cpp"


def test_markdown_render_reports_renderer_exceptions(
    content_dir: Path,
    write_tip: cabc.Callable[..., Path],
    mocker: MockerFixture,
) -> None:
    """Any exception raised while rendering becomes a finding."""
    write_tip(1, "Body\n")
    mocker.patch(
        "totw_pages.checks._support.HtmlContentRenderer.render",
        side_effect=RuntimeError("boom"),
    )
    findings = _run("markdown-render", content_dir)
    assert [finding.message for finding in findings] == [
        "Markdown failed to render: RuntimeError: boom"
    ]


def test_code_fence_language(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Languages Pygments cannot lex are warnings."""
    write_tip(1, "```klingon\nQapla'\n```\n\n```c++\nint x;\n```\n")
    findings = _run("code-fence-language", content_dir)
    assert [finding.message for finding in findings] == [
        "No syntax highlighter for fence language 'klingon'."
    ]


def test_code_fence_language_reports_the_fence_line(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Prose mentioning the label earlier does not move the finding."""
    path = write_tip(1, "Cats like foods.\n\n```foo\nbar\n```\n")
    findings = _run("code-fence-language", content_dir)
    assert len(findings) == 1
    lines = path.read_text(encoding="utf-8").splitlines()
    assert findings[0].line == 11
    assert lines[findings[0].line - 1] == "```foo"


def test_macro_rules(content_dir: Path, write_page: cabc.Callable[..., Path]) -> None:
    """Short rows and empty names are errors; repeats are warnings."""
    write_page(
        "macros.md",
        MACROS_FRONT_MATTER,
        dedent(
            """\
            ## Compilers

            | Macro | Target | Defined by | Notes |
            |---|---|---|---|
            | `__clang__` | Clang | Clang | |
            | `__clang__` | clang | Clang | again |
            | | GCC | GCC | |
            | `__GNUC__` | GCC |
            """
        ),
    )
    table = _run("macro-table", content_dir)
    assert sorted(finding.message for finding in table) == [
        "Macro table row has 2 cells; expected 4.",
        "Macro table row has an empty macro name.",
    ]
    duplicates = _run("macro-duplicate", content_dir)
    assert len(duplicates) == 1
    assert "already listed in section 'Compilers'" in duplicates[0].message


def test_tip_provenance(content_dir: Path, write_tip: cabc.Callable[..., Path]) -> None:
    """The preamble must agree with the permalink and its own dates."""
    write_tip(
        5,
        dedent(
            """
            Originally posted as TotW #6 on May 1, 2013

            Updated 2012-01-01

            Quicklink: [abseil.io/tips/4](https://abseil.io/tips/4)
            """
        ),
    )
    findings = _run("tip-provenance", content_dir)
    lines = {finding.message.split()[0]: finding.line for finding in findings}
    assert len(findings) == 3
    assert lines == {"Body": 10, "Updated": 12, "Quicklink": 14}
    assert any("TotW #6" in finding.message for finding in findings)
    assert any("Quicklink points at tip 4" in finding.message for finding in findings)
    assert any("before the posted date" in finding.message for finding in findings)


def test_run_checks_applies_overrides_and_sorts(
    content_dir: Path, write_tip: cabc.Callable[..., Path]
) -> None:
    """Disabled rules are skipped and overridden severities are stamped."""
    write_tip(2, order="'3'")
    write_tip(1, "Text[^x]\n")
    config = LintConfig(
        content_dir=content_dir,
        rules={
            "tip-order": RuleSetting(severity=Severity.INFO),
            "footnotes": RuleSetting(enabled=False),
        },
    )
    findings = run_checks(load_corpus(content_dir), config)
    assert [(finding.rule, finding.severity) for finding in findings] == [
        ("tip-order", Severity.INFO)
    ]
    assert findings[0].path.name == "002.md"
