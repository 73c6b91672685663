r"""Filter the section catalog and mark query matches for display.

Both helpers are pure: they never mutate their inputs and can be recomputed on
every keystroke. Queries are treated as literal text, so characters such as
``(`` or ``*`` are matched verbatim rather than interpreted as pattern syntax.

Example
-------
>>> from cicd_guide.registry import Section
>>> from cicd_guide.search import filter_sections, highlight_matches
>>> sections = [
...     Section("overview", "Project Overview"),
...     Section("k8s-basics", "Kubernetes Basics"),
... ]
>>> [section.id for section in filter_sections(sections, "over")]
['overview']
>>> [(s.content, s.is_match) for s in highlight_matches("Project Overview", "over")]
[('Project ', False), ('Over', True), ('view', False)]
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .registry import Section


@dc.dataclass(frozen=True, slots=True)
class Segment:
    """A slice of display text flagged as a query match or not."""

    content: str
    is_match: bool = False


def is_blank(query: str) -> bool:
    """Return ``True`` when ``query`` holds nothing but whitespace."""
    return not query.strip()


def filter_sections(
    sections: cabc.Iterable[Section], query: str
) -> list[Section]:
    """Return the sections whose title or id contains ``query``.

    Parameters
    ----------
    sections : Iterable[Section]
        Catalog entries in display order.
    query : str
        Raw search box text. A blank query disables filtering.

    Returns
    -------
    list[Section]
        Matching sections in their original relative order. The comparison is
        a case-insensitive substring test against both ``title`` and ``id``.
    """
    ordered = list(sections)
    if is_blank(query):
        return ordered
    term = query.lower()
    return [
        section
        for section in ordered
        if term in section.title.lower() or term in section.id.lower()
    ]


def _literal_pattern(query: str) -> re.Pattern[str]:
    """Compile a capturing, case-insensitive pattern for the literal ``query``."""
    return re.compile(f"({re.escape(query)})", re.IGNORECASE)


def highlight_matches(text: str, query: str) -> list[Segment]:
    """Split ``text`` into matched and unmatched segments for ``query``.

    Parameters
    ----------
    text : str
        Display text to project; it is never modified.
    query : str
        Raw search box text.

    Returns
    -------
    list[Segment]
        A single unmatched segment when ``query`` is blank. Otherwise the
        segments alternate unmatched/matched, starting and ending with an
        unmatched segment that may be empty; two adjacent matches are
        separated by an empty unmatched segment. Matched segments keep the
        casing found in ``text``, and joining every ``content`` yields
        ``text`` again.
    """
    if is_blank(query):
        return [Segment(text)]
    parts = _literal_pattern(query).split(text)
    return [
        Segment(part, is_match=index % 2 == 1) for index, part in enumerate(parts)
    ]


def count_label(count: int) -> str:
    """Return the sidebar result counter text, e.g. ``"1 result"``."""
    suffix = "" if count == 1 else "s"
    return f"{count} result{suffix}"


__all__ = [
    "Segment",
    "count_label",
    "filter_sections",
    "highlight_matches",
    "is_blank",
]
