"""Render document bodies to HTML for the Markdown smoke test."""

from __future__ import annotations

import re
import typing as typ
from html import escape

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .links import LinkCollectorExtension
from .models import RenderResult

if typ.TYPE_CHECKING:
    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

FENCE_OPEN_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^\n`]*)$", re.MULTILINE
)
FENCE_INFO_PATTERN = re.compile(r"\{?\s*\.?([A-Za-z0-9_+#.-]+)")
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
LANGUAGE_ALIASES = {"c++": "cpp", "cc": "cpp", "h": "c", "shell": "bash"}


class LabelledHtmlFormatter(HtmlFormatter):
    """Pygments HTML formatter that tags its wrapper ``div`` with a language.

    Codehilite hands formatter classes a ``lang_str``: the fence label for
    fenced blocks, or the lexer alias (``text``) for unlabelled fences and
    indented code blocks.
    """

    def __init__(self, lang_str: str = "", **options: typ.Any) -> None:
        super().__init__(**options)
        self.lang_str = lang_str

    def _wrap_div(
        self, inner: typ.Iterator[tuple[int, str]]
    ) -> typ.Iterator[tuple[int, str]]:
        wrapped = super()._wrap_div(inner)
        _token, opening = next(wrapped)
        label = escape(self.lang_str, quote=True)
        yield 0, f'{opening[:-1]} data-language="{label}">'
        yield from wrapped


class HtmlContentRenderer:
    """Render markdown bodies with the extensions the site generator enables."""

    def __init__(
        self, pygments_style: str = "default", link_extension: Extension | None = None
    ) -> None:
        """Initialize a renderer with optional pygments style and link extension.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"default"``.
        link_extension : Extension, optional
            Extra Markdown extension to run alongside the link collector.
        """
        self.pygments_style = pygments_style
        self._link_extension = link_extension

    def render(self, text: str) -> RenderResult:
        """Convert ``text`` to HTML, collecting link targets and code languages.

        Parameters
        ----------
        text : str
            Markdown body, possibly containing inline HTML and footnotes.

        Returns
        -------
        RenderResult
            Rendered HTML, the ``href``/``src`` targets seen in the output tree,
            and the info-string language of every fenced code block.

        Raises
        ------
        Exception
            Whatever Python-Markdown or Pygments raise on malformed input is
            propagated; the render check reports it as a finding.
        """
        languages = fence_languages(text)
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return RenderResult(html="", anchors=[], code_languages=languages)
        collector = LinkCollectorExtension()
        extensions: list[Extension | str] = [
            "fenced_code",
            "codehilite",
            "tables",
            "footnotes",
            "sane_lists",
            "attr_list",
            "md_in_html",
            collector,
        ]
        if self._link_extension:
            extensions.append(self._link_extension)
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                    "pygments_formatter": LabelledHtmlFormatter,
                    "lang_prefix": "",
                }
            },
        )
        html = md.convert(normalized)
        return RenderResult(
            html=html,
            anchors=[target for tag, target in collector.links if tag == "a"],
            code_languages=languages,
            images=[target for tag, target in collector.links if tag == "img"],
        )

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            label = language or ""
            return f"{fence}{label}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


def fence_labels(text: str) -> list[tuple[str | None, int]]:
    """Return ``(language, line)`` for each fenced block opener in ``text``.

    Only opening fences are reported; a fence closes on a marker of the same
    character at least as long as the opener. ``line`` is 1-based.

    >>> fence_labels("Intro\\n\\n```c++\\nint x;\\n```\\n")
    [('c++', 3)]
    """
    labels: list[tuple[str | None, int]] = []
    open_fence: str | None = None
    for match in FENCE_OPEN_PATTERN.finditer(text):
        fence = match.group("fence")
        info = match.group("info").strip()
        if open_fence is None:
            open_fence = fence[0] * len(fence)
            label = FENCE_INFO_PATTERN.match(info)
            line = text.count("\n", 0, match.start()) + 1
            labels.append((label.group(1) if label else None, line))
        elif fence.startswith(open_fence) and not info:
            open_fence = None
    return labels


def fence_languages(text: str) -> list[str | None]:
    """Return the info-string language of each fenced block opener in ``text``.

    >>> fence_languages("```c++\\nint x;\\n```\\n")
    ['c++']
    """
    return [language for language, _line in fence_labels(text)]


def unbalanced_fence_line(text: str) -> int | None:
    """Return the 1-based line of a fence that is never closed, or ``None``."""
    open_fence: str | None = None
    open_line: int | None = None
    for match in FENCE_OPEN_PATTERN.finditer(text):
        fence = match.group("fence")
        info = match.group("info").strip()
        if open_fence is None:
            open_fence = fence[0] * len(fence)
            open_line = text.count("\n", 0, match.start()) + 1
        elif fence.startswith(open_fence) and not info:
            open_fence = None
            open_line = None
    return open_line


def unknown_languages(languages: typ.Iterable[str | None]) -> list[str]:
    """Return fence languages Pygments has no lexer for, in first-seen order."""
    unknown: list[str] = []
    for language in languages:
        if not language or language in unknown:
            continue
        lexer_name = LANGUAGE_ALIASES.get(language.lower(), language)
        try:
            get_lexer_by_name(lexer_name)
        except ClassNotFound:
            unknown.append(language)
    return unknown


__all__ = [
    "HtmlContentRenderer",
    "LabelledHtmlFormatter",
    "fence_labels",
    "fence_languages",
    "unbalanced_fence_line",
    "unknown_languages",
]
