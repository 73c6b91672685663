"""Guide page rendering pipeline.

This module turns the loaded :class:`~cicd_guide.config.GuideContent` and the
current viewer state into HTML. Section bodies are static, so
:class:`GuidePageBuilder` renders their Markdown and code samples once; every
call to :meth:`GuidePageBuilder.render` then only re-evaluates the Jinja
templates against the state (sidebar filter, highlights, active entry, mobile
drawer, and copy acknowledgements).

The template depends on the load phase: ``loading.jinja`` while loading,
``error.jinja`` with a Retry action after a failed load, and
``guide_page.jinja`` once ready. :meth:`GuidePageBuilder.render_guarded` is
the supervisor used by the CLI: when a template fails it logs the failure and
renders ``fallback.jinja`` instead of propagating the error.

Typical usage mirrors the CLI:

>>> from cicd_guide.state import UIState
>>> builder = GuidePageBuilder(content)  # doctest: +SKIP
>>> html = builder.render(UIState(is_loading=False), nav_items=[])  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from .config import CodeBlock
from .renderer import HtmlContentRenderer
from .state import LoadPhase

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import GuideContent, SectionContent
    from .search import Segment
    from .state import UIState

logger = logging.getLogger(__name__)

PHASE_TEMPLATES: dict[LoadPhase, str] = {
    LoadPhase.LOADING: "loading.jinja",
    LoadPhase.ERROR: "error.jinja",
    LoadPhase.READY: "guide_page.jinja",
}
FALLBACK_TEMPLATE = "fallback.jinja"


@dc.dataclass(slots=True)
class NavItem:
    """Sidebar entry for one visible section.

    Attributes
    ----------
    id : str
        Section id and anchor target.
    icon : str
        Glyph shown before the label.
    segments : list[Segment]
        Title split into highlighted and plain parts.
    is_active : bool
        Whether the section is the active one.
    """

    id: str
    icon: str
    segments: list[Segment]
    is_active: bool = False


@dc.dataclass(slots=True)
class SectionModel:
    """Pre-rendered section passed to the page template.

    Attributes
    ----------
    id : str
        Anchor id of the ``<section>`` element.
    icon : str
        Glyph shown before the heading.
    heading : str
        Section heading text.
    blocks : list[dict[str, str]]
        Ordered body blocks. Prose blocks carry ``kind="markdown"`` and
        ``html``; code blocks carry ``kind="code"``, ``code_id``, ``header``,
        ``language``, and ``html``.
    """

    id: str
    icon: str
    heading: str
    blocks: list[dict[str, str]]


class GuidePageBuilder:
    """Render the guide page for a given viewer state."""

    def __init__(
        self, content: GuideContent, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the builder, Jinja environment, and static sections.

        Parameters
        ----------
        content : GuideContent
            Loaded guide content and viewer settings.
        templates_dir : Path, optional
            Directory containing Jinja templates. Defaults to the templates
            shipped inside the package.
        """
        self.content = content
        self.settings = content.settings
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.renderer = HtmlContentRenderer(self.settings.pygments_style)
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.sections = [self._build_section_model(item) for item in content.sections]

    @property
    def anchor_ids(self) -> list[str]:
        """Return the ids of every ``<section>`` anchor on the ready page."""
        return [model.id for model in self.sections]

    def render(
        self,
        state: UIState,
        *,
        nav_items: cabc.Sequence[NavItem],
        result_label: str | None = None,
    ) -> str:
        """Render the template matching ``state.phase``.

        Raises
        ------
        jinja2.TemplateError
            If a template is missing or fails while rendering.
        """
        template = self.env.get_template(PHASE_TEMPLATES[state.phase])
        context = {
            "state": state,
            "settings": self.settings,
            "nav_items": list(nav_items),
            "result_label": result_label,
            "sections": self.sections,
            "pygments_css": self.renderer.stylesheet,
            "generated_at": dt.datetime.now(dt.UTC),
        }
        return template.render(**context)

    def render_guarded(
        self,
        state: UIState,
        *,
        nav_items: cabc.Sequence[NavItem],
        result_label: str | None = None,
    ) -> str:
        """Render like :meth:`render`, falling back to a static error page."""
        try:
            return self.render(state, nav_items=nav_items, result_label=result_label)
        except TemplateError:
            logger.exception("Rendering the guide failed; showing fallback page")
            fallback = self.env.get_template(FALLBACK_TEMPLATE)
            return fallback.render(settings=self.settings)

    @staticmethod
    def write(html: str, output_path: Path) -> Path:
        """Write ``html`` to ``output_path``, creating parent directories."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if not html.endswith("\n"):
            html += "\n"
        output_path.write_text(html, encoding="utf-8")
        return output_path

    def _build_section_model(self, content: SectionContent) -> SectionModel:
        blocks: list[dict[str, str]] = []
        for block in content.blocks:
            if isinstance(block, CodeBlock):
                blocks.append(
                    {
                        "kind": "code",
                        "code_id": block.code_id,
                        "header": block.header or "",
                        "language": block.language or "text",
                        "html": self.renderer.code_block(block.code, block.language),
                    }
                )
            else:
                blocks.append(
                    {"kind": "markdown", "html": self.renderer.markdown(block.markdown)}
                )
        return SectionModel(
            id=content.section.id,
            icon=content.section.icon,
            heading=content.heading,
            blocks=blocks,
        )


__all__ = ["FALLBACK_TEMPLATE", "GuidePageBuilder", "NavItem", "SectionModel"]
