"""Render section prose and code samples into HTML fragments."""

from __future__ import annotations

from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")


class HtmlContentRenderer:
    """Render markdown and syntax-highlighted code with one Pygments style."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render markdown into HTML; blank input yields an empty string."""
        if not text.strip():
            return ""
        md = Markdown(
            extensions=list(MARKDOWN_EXTENSIONS),
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return md.convert(text)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML tagged with its language.

        Parameters
        ----------
        code : str
            Literal sample to highlight.
        language : str, optional
            Pygments lexer name; unknown or missing names fall back to plain
            text.

        Returns
        -------
        str
            ``<div class="codehilite" data-language="...">`` markup.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lang = "text"
            lexer = get_lexer_by_name(lang)
        html = highlight(code, lexer, self._formatter)
        safe_lang = escape(lang, quote=True)
        return html.replace(
            '<div class="codehilite">',
            f'<div class="codehilite" data-language="{safe_lang}">',
            1,
        )


__all__ = ["HtmlContentRenderer"]
