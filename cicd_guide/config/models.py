"""Typed dataclasses describing the guide content and viewer settings."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from cicd_guide._constants import DEFAULT_COPY_ACK_WINDOW, DEFAULT_LOAD_DELAY
from cicd_guide.registry import Section, SectionRegistry


class ContentError(ValueError):
    """Raised when the guide content file is invalid or incomplete."""


@dc.dataclass(slots=True)
class ResourceLink:
    """External reference listed in the page footer."""

    label: str
    href: str


@dc.dataclass(slots=True)
class ViewerSettings:
    """Timings, styling, and page copy applied to the viewer."""

    load_delay: float = DEFAULT_LOAD_DELAY
    copy_ack_window: float = DEFAULT_COPY_ACK_WINDOW
    pygments_style: str = "monokai"
    output: Path = Path("public/index.html")
    title: str = "Complete Guide to CI/CD and Kubernetes Deployment"
    subtitle: str = ""
    sidebar_heading: str = "CI/CD Guide"
    sidebar_tagline: str = "Kubernetes & DevOps"
    search_placeholder: str = "Search sections..."
    loading_message: str = "Loading documentation..."
    footer_heading: str = "Additional Resources"
    footer_tagline: str = ""
    resources: list[ResourceLink] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class MarkdownBlock:
    """Prose rendered through Markdown."""

    markdown: str


@dc.dataclass(slots=True)
class CodeBlock:
    """Literal code sample with a copy button."""

    code_id: str
    code: str
    header: str | None = None
    language: str | None = None


ContentBlock = MarkdownBlock | CodeBlock


@dc.dataclass(slots=True)
class SectionContent:
    """Catalog entry together with the blocks rendered in its body."""

    section: Section
    heading: str
    blocks: list[ContentBlock] = dc.field(default_factory=list)

    @property
    def code_blocks(self) -> list[CodeBlock]:
        return [block for block in self.blocks if isinstance(block, CodeBlock)]


@dc.dataclass(slots=True)
class GuideContent:
    """The whole guide: settings, ordered sections, and code samples."""

    settings: ViewerSettings
    sections: list[SectionContent]
    registry: SectionRegistry

    @property
    def code_samples(self) -> dict[str, str]:
        """Return the ``{code_id: code}`` mapping used by copy buttons."""
        return {
            block.code_id: block.code
            for content in self.sections
            for block in content.code_blocks
        }

    def get_code(self, code_id: str) -> str | None:
        return self.code_samples.get(code_id)


__all__ = [
    "CodeBlock",
    "ContentBlock",
    "ContentError",
    "GuideContent",
    "MarkdownBlock",
    "ResourceLink",
    "SectionContent",
    "ViewerSettings",
]
