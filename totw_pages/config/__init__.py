"""Load and validate lint configuration YAML for the tips corpus.

This subpackage parses the project's ``lint.yaml`` file, applies defaults for
absent keys, resolves directories relative to the file, validates per-rule
overrides against the check registry, and produces a :class:`LintConfig`
dataclass that the corpus loader and checks consume. The primary entry point
is :func:`load_lint_config`.

Examples
--------
>>> from pathlib import Path
>>> from totw_pages.config import load_lint_config
>>> config = load_lint_config(Path("config/lint.yaml"))  # doctest: +SKIP
>>> config.content_dir  # doctest: +SKIP
PosixPath('config/../content')
"""

from .loader import load_lint_config
from .models import LintConfig, LintConfigError, RuleSetting

__all__ = ["LintConfig", "LintConfigError", "RuleSetting", "load_lint_config"]
