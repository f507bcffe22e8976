"""Content tooling for the Tips of the Week and compiler macro reference corpus.

This package loads the Markdown documents the static-site generator renders,
checks the front-matter and body conventions they rely on, and exposes the
``totw-pages`` console command used locally and in CI.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from totw_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
