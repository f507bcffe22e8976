"""Content-integrity rules run over a loaded corpus.

Each rule is a function yielding :class:`Finding` records. The registry wraps
them as :class:`Check` objects with a stable rule id and default severity, and
:func:`run_checks` applies the ``rules`` overrides from the lint configuration.
"""

from .models import Check, CheckFunction, Finding, Severity, UnknownRuleError
from .registry import CHECKS, RULE_IDS, get_check, run_checks

__all__ = [
    "CHECKS",
    "RULE_IDS",
    "Check",
    "CheckFunction",
    "Finding",
    "Severity",
    "UnknownRuleError",
    "get_check",
    "run_checks",
]
