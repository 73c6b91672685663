"""Utility helpers shared by the guide content loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import (
    CodeBlock,
    ContentBlock,
    ContentError,
    MarkdownBlock,
    ResourceLink,
    ViewerSettings,
)


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _seconds_from_ms(value: object | None, default: float) -> float:
    """Convert a millisecond setting into seconds, keeping ``default`` if unset."""
    match value:
        case None:
            return default
        case bool():
            msg = "Durations must be numbers of milliseconds."
            raise ContentError(msg)
        case int() | float() if value >= 0:
            return float(value) / 1000
        case _:
            msg = f"Invalid duration {value!r}; expected non-negative milliseconds."
            raise ContentError(msg)


def _str_setting(
    payload: typ.Mapping[str, typ.Any], key: str, default: str
) -> str:
    """Return the string stored under ``key``, or ``default`` when absent."""
    if key not in payload:
        return default
    value = payload[key]
    if not isinstance(value, str):
        msg = f"Setting '{key}' must be a string, got {value!r}."
        raise ContentError(msg)
    return value


def _build_settings(payload: object) -> ViewerSettings:
    """Build ViewerSettings from the ``defaults`` mapping."""
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        msg = "'defaults' must be a mapping."
        raise ContentError(msg)
    base = ViewerSettings()
    return ViewerSettings(
        load_delay=_seconds_from_ms(payload.get("load_delay_ms"), base.load_delay),
        copy_ack_window=_seconds_from_ms(
            payload.get("copy_ack_ms"), base.copy_ack_window
        ),
        pygments_style=_str_setting(payload, "pygments_style", base.pygments_style),
        output=Path(_str_setting(payload, "output", str(base.output))),
        title=_str_setting(payload, "title", base.title),
        subtitle=_str_setting(payload, "subtitle", base.subtitle),
        sidebar_heading=_str_setting(payload, "sidebar_heading", base.sidebar_heading),
        sidebar_tagline=_str_setting(payload, "sidebar_tagline", base.sidebar_tagline),
        search_placeholder=_str_setting(
            payload, "search_placeholder", base.search_placeholder
        ),
        loading_message=_str_setting(payload, "loading_message", base.loading_message),
        footer_heading=_str_setting(payload, "footer_heading", base.footer_heading),
        footer_tagline=_str_setting(payload, "footer_tagline", base.footer_tagline),
        resources=_build_resources(payload.get("resources")),
    )


def _build_resources(value: object | None) -> list[ResourceLink]:
    """Build footer links, skipping entries without a label or href."""
    if not isinstance(value, list):
        return []
    links: list[ResourceLink] = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        label = _optional_str(entry.get("label"))
        href = _optional_str(entry.get("href"))
        if label and href:
            links.append(ResourceLink(label=label, href=href))
    return links


def _build_block(
    section_id: str, index: int, payload: object
) -> ContentBlock:
    """Build a markdown or code block from one ``blocks`` entry."""
    match payload:
        case str():
            return MarkdownBlock(markdown=payload)
        case {"markdown": str() as text}:
            return MarkdownBlock(markdown=text)
        case {"code": str() as code}:
            code_id = _optional_str(payload.get("id")) or f"{section_id}-code-{index}"
            return CodeBlock(
                code_id=code_id,
                code=code.rstrip("\n"),
                header=_optional_str(payload.get("header")),
                language=_optional_str(payload.get("language")),
            )
        case _:
            msg = (
                f"Block {index} of section '{section_id}' must be a string or a "
                "mapping with 'markdown' or 'code'."
            )
            raise ContentError(msg)


__all__ = [
    "_build_block",
    "_build_resources",
    "_build_settings",
    "_optional_str",
    "_seconds_from_ms",
    "_str_setting",
]
