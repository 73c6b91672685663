"""Ordered catalog of the guide's topic sections.

The registry is built once, when the content file is loaded, and never changes
afterwards. It is the substrate that the sidebar search filters and that the
navigation controller validates section ids against.

Example
-------
>>> from cicd_guide.registry import Section, SectionRegistry
>>> registry = SectionRegistry([Section("overview", "Project Overview", "🚀")])
>>> "overview" in registry
True
>>> registry.get("missing") is None
True
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dc.dataclass(frozen=True, slots=True)
class Section:
    """One topic entry in the documentation catalog.

    Attributes
    ----------
    id : str
        Stable identifier, also used as the on-page anchor.
    title : str
        Label shown in the sidebar.
    icon : str
        Short glyph rendered before the title.
    """

    id: str
    title: str
    icon: str = ""


class SectionRegistry:
    """Immutable, ordered collection of :class:`Section` entries."""

    def __init__(self, sections: cabc.Iterable[Section]) -> None:
        """Store ``sections`` in order, rejecting blank or duplicate ids.

        Raises
        ------
        ValueError
            If a section id is empty or appears more than once.
        """
        ordered = tuple(sections)
        index: dict[str, Section] = {}
        for section in ordered:
            if not section.id:
                msg = f"Section {section.title!r} has an empty id."
                raise ValueError(msg)
            if section.id in index:
                msg = f"Duplicate section id '{section.id}'."
                raise ValueError(msg)
            index[section.id] = section
        self._sections = ordered
        self._index = index

    @property
    def sections(self) -> tuple[Section, ...]:
        """Return every section in catalog order."""
        return self._sections

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(section.id for section in self._sections)

    def get(self, section_id: str) -> Section | None:
        """Return the section registered under ``section_id``, if any."""
        return self._index.get(section_id)

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._index

    def __iter__(self) -> cabc.Iterator[Section]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)


__all__ = ["Section", "SectionRegistry"]
