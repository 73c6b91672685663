"""Load and validate the guide content YAML.

This subpackage parses ``config/guide.yaml``, applies defaults for the viewer
timings and page copy, and produces typed dataclasses (:class:`GuideContent`,
:class:`ViewerSettings`, :class:`SectionContent`, ...) that the viewer and the
page builder consume. The primary entry point is :func:`load_guide_content`.

Examples
--------
>>> from pathlib import Path
>>> from cicd_guide.config import load_guide_content
>>> content = load_guide_content(Path("config/guide.yaml"))  # doctest: +SKIP
>>> content.settings.load_delay  # doctest: +SKIP
1.0
"""

from .loader import load_guide_content
from .models import (
    CodeBlock,
    ContentBlock,
    ContentError,
    GuideContent,
    MarkdownBlock,
    ResourceLink,
    SectionContent,
    ViewerSettings,
)

__all__ = [
    "CodeBlock",
    "ContentBlock",
    "ContentError",
    "GuideContent",
    "MarkdownBlock",
    "ResourceLink",
    "SectionContent",
    "ViewerSettings",
    "load_guide_content",
]
