"""Load the guide content YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from cicd_guide.registry import Section, SectionRegistry

from .helpers import _build_block, _build_settings, _optional_str
from .models import ContentError, GuideContent, SectionContent


def load_guide_content(path: Path) -> GuideContent:
    """Load the YAML file describing the guide's sections and settings.

    Parameters
    ----------
    path : Path
        Filesystem path to the content file (for example,
        ``config/guide.yaml``).

    Returns
    -------
    GuideContent
        Viewer settings, ordered section content, and the section registry
        derived from it.

    Raises
    ------
    FileNotFoundError
        If the content file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ContentError
        If ``defaults`` is not a mapping or holds a mistyped setting, no
        sections are defined, a section lacks an id or title, ids are
        duplicated, or a block is malformed.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> content = load_guide_content(Path("config/guide.yaml"))  # doctest: +SKIP
    >>> content.registry.ids[:2]  # doctest: +SKIP
    ('overview', 'structure')
    """
    if not path.exists():
        msg = f"Content file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    settings = _build_settings(raw.get("defaults"))
    sections_raw = raw.get("sections") or []
    if not isinstance(sections_raw, list) or not sections_raw:
        msg = "No sections defined in guide content."
        raise ContentError(msg)

    sections = [
        _build_section_content(index, payload)
        for index, payload in enumerate(sections_raw, start=1)
    ]
    _ensure_unique_code_ids(sections)
    try:
        registry = SectionRegistry(content.section for content in sections)
    except ValueError as exc:
        raise ContentError(str(exc)) from exc
    return GuideContent(settings=settings, sections=sections, registry=registry)


def _build_section_content(index: int, payload: object) -> SectionContent:
    """Build a SectionContent for one entry of the ``sections`` list."""
    if not isinstance(payload, dict):
        msg = f"Section {index} must be a mapping."
        raise ContentError(msg)
    section_id = _optional_str(payload.get("id"))
    title = _optional_str(payload.get("title"))
    if not section_id or not title:
        msg = f"Section {index} requires both 'id' and 'title'."
        raise ContentError(msg)
    icon = _optional_str(payload.get("icon")) or ""
    heading = _optional_str(payload.get("heading")) or title
    blocks_raw = payload.get("blocks") or []
    if not isinstance(blocks_raw, list):
        msg = f"Section '{section_id}' blocks must be a list."
        raise ContentError(msg)
    blocks = [
        _build_block(section_id, block_index, block)
        for block_index, block in enumerate(blocks_raw, start=1)
    ]
    return SectionContent(
        section=Section(id=section_id, title=title, icon=icon),
        heading=heading,
        blocks=blocks,
    )


def _ensure_unique_code_ids(sections: list[SectionContent]) -> None:
    seen: set[str] = set()
    for content in sections:
        for block in content.code_blocks:
            if block.code_id in seen:
                msg = f"Duplicate code block id '{block.code_id}'."
                raise ContentError(msg)
            seen.add(block.code_id)


__all__ = ["load_guide_content"]
