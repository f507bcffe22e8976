"""The rule catalogue and the runner that applies configuration to it."""

from __future__ import annotations

import typing as typ

import structlog

from ._support import clear_render_cache
from .front_matter import (
    FRONT_MATTER_SCHEMA,
    LOAD_ERROR,
    SIDENAV_EXISTS,
    check_front_matter_schema,
    check_load_errors,
    check_sidenav_exists,
)
from .links import INTERNAL_LINKS, check_internal_links
from .macros import (
    MACRO_DUPLICATE,
    MACRO_TABLE,
    check_macro_duplicate,
    check_macro_table,
)
from .markdown import (
    CODE_FENCE_LANGUAGE,
    FOOTNOTES,
    FOOTNOTES_UNUSED,
    MARKDOWN_RENDER,
    check_code_fence_language,
    check_footnotes,
    check_footnotes_unused,
    check_markdown_render,
)
from .models import Check, Finding, Severity, UnknownRuleError
from .ordering import (
    TIP_ORDER,
    TIP_ORDER_SEQUENCE,
    TIP_PROVENANCE,
    check_tip_order,
    check_tip_order_sequence,
    check_tip_provenance,
)
from .permalinks import PERMALINK_UNIQUE, check_permalink_unique

if typ.TYPE_CHECKING:
    from totw_pages.config import LintConfig
    from totw_pages.content import Corpus

logger = structlog.get_logger(__name__)

CHECKS: tuple[Check, ...] = (
    Check(
        LOAD_ERROR,
        "Every content file has parseable front-matter.",
        Severity.ERROR,
        check_load_errors,
    ),
    Check(
        FRONT_MATTER_SCHEMA,
        "Front-matter values match the schema the site generator reads.",
        Severity.ERROR,
        check_front_matter_schema,
    ),
    Check(
        PERMALINK_UNIQUE,
        "Permalinks are unique across the corpus.",
        Severity.ERROR,
        check_permalink_unique,
    ),
    Check(
        TIP_ORDER,
        "Tip order is a quoted integer matching the permalink's tip number.",
        Severity.ERROR,
        check_tip_order,
    ),
    Check(
        TIP_ORDER_SEQUENCE,
        "Published tips follow their order in publication sequence.",
        Severity.WARNING,
        check_tip_order_sequence,
    ),
    Check(
        SIDENAV_EXISTS,
        "Every sidenav names an existing navigation file.",
        Severity.ERROR,
        check_sidenav_exists,
    ),
    Check(
        INTERNAL_LINKS,
        "Published pages have no link placeholders or dangling internal links.",
        Severity.ERROR,
        check_internal_links,
    ),
    Check(
        FOOTNOTES,
        "Footnote markers have exactly one definition.",
        Severity.ERROR,
        check_footnotes,
    ),
    Check(
        FOOTNOTES_UNUSED,
        "Footnote definitions are referenced.",
        Severity.WARNING,
        check_footnotes_unused,
    ),
    Check(
        MARKDOWN_RENDER,
        "Bodies render without error and close every code fence.",
        Severity.ERROR,
        check_markdown_render,
    ),
    Check(
        CODE_FENCE_LANGUAGE,
        "Code fence languages have a Pygments lexer.",
        Severity.WARNING,
        check_code_fence_language,
    ),
    Check(
        MACRO_TABLE,
        "Macro reference rows have four cells and a macro name.",
        Severity.ERROR,
        check_macro_table,
    ),
    Check(
        MACRO_DUPLICATE,
        "A macro is listed once per target within a section.",
        Severity.WARNING,
        check_macro_duplicate,
    ),
    Check(
        TIP_PROVENANCE,
        "A tip's preamble agrees with its permalink and dates.",
        Severity.ERROR,
        check_tip_provenance,
    ),
)

RULE_IDS: frozenset[str] = frozenset(check.rule for check in CHECKS)


def get_check(rule_id: str) -> Check:
    """Return the registered check for ``rule_id``.

    Raises
    ------
    UnknownRuleError
        If no check is registered under ``rule_id``.
    """
    for check in CHECKS:
        if check.rule == rule_id:
            return check
    msg = f"Unknown rule '{rule_id}'."
    raise UnknownRuleError(msg)


def run_checks(corpus: Corpus, config: LintConfig) -> list[Finding]:
    """Run every enabled rule over ``corpus``.

    Parameters
    ----------
    corpus : Corpus
        Loaded documents plus per-file load errors.
    config : LintConfig
        Configuration supplying rule overrides and link settings.

    Returns
    -------
    list[Finding]
        Findings from all enabled rules ordered by path, line, then rule.
    """
    findings: list[Finding] = []
    try:
        for check in CHECKS:
            setting = config.rule(check.rule)
            if not setting.enabled:
                logger.debug("check.skipped", rule=check.rule)
                continue
            found = check.run(corpus, config, setting.severity)
            logger.debug("check.ran", rule=check.rule, findings=len(found))
            findings.extend(found)
    finally:
        clear_render_cache()
    return sorted(findings, key=Finding.sort_key)


__all__ = ["CHECKS", "RULE_IDS", "get_check", "run_checks"]
