"""Cyclopts CLI entrypoint for rendering and browsing the CI/CD guide.

The ``guide`` console script defined here renders the guide page to static
HTML, searches the section catalog from the terminal, and runs an interactive
session that drives a mounted viewer with real timers (load phase, copy
acknowledgements). Options can also be supplied through ``GUIDE_*``
environment variables.

Examples
--------
Render the default page:

>>> from cicd_guide.cli import main
>>> main()  # doctest: +SKIP

Render with a pre-filled sidebar search into a custom file:

>>> from cicd_guide.cli import app
>>> app(
...     ["generate", "--search", "yaml", "--output", "dist/index.html"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import logging
import typing as typ
from pathlib import Path

import cyclopts
import msgspec.json as msgspec_json
from cyclopts import App, Parameter

from .config import load_guide_content
from .host import CommandClipboard, MemoryClipboard
from .page import GuidePageBuilder
from .search import count_label, filter_sections, highlight_matches
from .viewer import DocumentationViewer

if typ.TYPE_CHECKING:
    from .config import GuideContent
    from .host import Clipboard
    from .search import Segment
    from .state import UIState

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("config/guide.yaml")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
BROWSE_HELP = """\
commands:
  search TEXT   filter the sidebar
  clear         clear the search box
  go ID         navigate to a section
  menu          toggle the mobile menu
  close         close the mobile menu
  copy CODE_ID  copy a code sample
  list          show the sidebar
  state         print the UI state as JSON
  render PATH   write the current page to PATH
  quit          leave the session"""

app = App(name="guide", config=cyclopts.config.Env("GUIDE_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to the guide content file", env_var="GUIDE_CONFIG")
]
LogLevelOption = typ.Annotated[
    str, Parameter(help="Logging level", env_var="GUIDE_LOG_LEVEL")
]


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _mark(segments: list[Segment]) -> str:
    """Join segments, wrapping matches in square brackets."""
    return "".join(
        f"[{segment.content}]" if segment.is_match else segment.content
        for segment in segments
    )


def _encode_state(state: UIState) -> str:
    return msgspec_json.encode(state.snapshot()).decode("utf-8")


async def render_snapshot(
    content: GuideContent,
    *,
    search: str = "",
    active: str | None = None,
    clipboard: Clipboard | None = None,
) -> str:
    """Mount a viewer, wait for the load phase, apply inputs, and render.

    Parameters
    ----------
    content : GuideContent
        Loaded guide content.
    search : str, optional
        Sidebar query applied before rendering.
    active : str, optional
        Section to navigate to before rendering.
    clipboard : Clipboard, optional
        Clipboard handed to the viewer; defaults to an in-memory one.

    Returns
    -------
    str
        HTML for the ready page.
    """
    viewer = DocumentationViewer(
        content,
        scheduler=asyncio.get_running_loop(),
        clipboard=clipboard or MemoryClipboard(),
    )
    viewer.mount()
    try:
        await viewer.wait_until_ready()
        if search:
            viewer.set_search_term(search)
        if active and not viewer.navigate_to(active):
            logger.warning("Unknown section '%s'", active)
        return viewer.render()
    finally:
        viewer.unmount()


@app.command(help="Render the guide page to static HTML.")
def generate(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    output: typ.Annotated[
        Path | None,
        Parameter(help="Override the output file", env_var="GUIDE_OUTPUT"),
    ] = None,
    search: typ.Annotated[
        str, Parameter(help="Pre-fill the sidebar search box")
    ] = "",
    active: typ.Annotated[
        str | None, Parameter(help="Section to mark as active")
    ] = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Render the ready guide page and write it to disk.

    Parameters
    ----------
    config : Path, optional
        Guide content file (overridable via ``GUIDE_CONFIG``).
    output : Path or None, optional
        Output HTML file; defaults to ``defaults.output`` from the content
        file.
    search : str, optional
        Sidebar query applied before rendering.
    active : str or None, optional
        Section id navigated to before rendering.
    log_level : str, optional
        Logging level name.

    Returns
    -------
    None
        Writes the page and prints its path.
    """
    _configure_logging(log_level)
    content = load_guide_content(config)
    html = asyncio.run(render_snapshot(content, search=search, active=active))
    path = GuidePageBuilder.write(html, output or content.settings.output)
    print(f"wrote {_format_path(path)}")


@app.command(help="Search the section catalog.")
def search(
    query: typ.Annotated[str, Parameter(help="Text to look for")],
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    as_json: typ.Annotated[
        bool, Parameter(name="--json", help="Emit matches as JSON")
    ] = False,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print the sections matching ``query`` with highlighted titles."""
    _configure_logging(log_level)
    content = load_guide_content(config)
    matches = filter_sections(content.registry, query)
    if as_json:
        payload = [
            {"section": section, "segments": highlight_matches(section.title, query)}
            for section in matches
        ]
        print(msgspec_json.encode(payload).decode("utf-8"))
        return
    for section in matches:
        title = _mark(highlight_matches(section.title, query))
        print(f"{section.icon} {section.id}: {title}")
    if not matches:
        print("No sections found")
    print(count_label(len(matches)))


@app.command(help="List the sections of the guide.")
def sections(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Print every registered section in catalog order."""
    _configure_logging(log_level)
    content = load_guide_content(config)
    for section in content.registry:
        print(f"{section.icon} {section.id:<16} {section.title}")


@app.command(help="Browse the guide interactively.")
def browse(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    clipboard: typ.Annotated[
        typ.Literal["system", "memory"],
        Parameter(help="Clipboard backend for copy buttons"),
    ] = "system",
    log_level: LogLevelOption = "INFO",
) -> None:
    """Run an interactive session against a mounted viewer."""
    _configure_logging(log_level)
    content = load_guide_content(config)
    backend: Clipboard = CommandClipboard() if clipboard == "system" else MemoryClipboard()
    asyncio.run(_browse(content, backend))


async def _browse(content: GuideContent, clipboard: Clipboard) -> None:
    viewer = DocumentationViewer(
        content, scheduler=asyncio.get_running_loop(), clipboard=clipboard
    )
    last_copied: list[str | None] = [None]

    def _report_copy(state: UIState) -> None:
        if state.copied_code_id != last_copied[0]:
            last_copied[0] = state.copied_code_id
            label = state.copied_code_id or "-"
            print(f"\ncopied: {label}")

    viewer.subscribe(_report_copy)
    viewer.mount()
    print(content.settings.loading_message)
    try:
        await viewer.wait_until_ready()
        print(BROWSE_HELP)
        _print_sidebar(viewer)
        while True:
            try:
                line = await asyncio.to_thread(input, "guide> ")
            except EOFError:
                break
            if not _dispatch(viewer, line):
                break
    finally:
        viewer.unmount()


def _dispatch(viewer: DocumentationViewer, line: str) -> bool:
    """Apply one browse command; return ``False`` to end the session."""
    command, _, argument = line.strip().partition(" ")
    argument = argument.strip()
    match command:
        case "quit" | "exit":
            return False
        case "search":
            viewer.set_search_term(argument)
            _print_sidebar(viewer)
        case "clear":
            viewer.clear_search()
            _print_sidebar(viewer)
        case "go":
            if viewer.navigate_to(argument):
                print(f"-> #{argument}")
            else:
                print(f"no section '{argument}'")
        case "menu":
            state = "open" if viewer.toggle_mobile_menu() else "closed"
            print(f"menu {state}")
        case "close":
            viewer.close_mobile_menu()
            print("menu closed")
        case "copy":
            if viewer.request_copy(argument) is None:
                print(f"no code sample '{argument}'")
        case "list":
            _print_sidebar(viewer)
        case "state":
            print(_encode_state(viewer.state))
        case "render":
            target = Path(argument) if argument else viewer.settings.output
            path = GuidePageBuilder.write(viewer.render(), target)
            print(f"wrote {_format_path(path)}")
        case "":
            pass
        case _:
            print(BROWSE_HELP)
    return True


def _print_sidebar(viewer: DocumentationViewer) -> None:
    for item in viewer.nav_items():
        marker = ">" if item.is_active else " "
        print(f"{marker} {item.icon} {_mark(item.segments)}")
    if not viewer.filtered_sections:
        print("  No sections found")
    label = viewer.result_label()
    if label:
        print(f"  {label}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``guide`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
