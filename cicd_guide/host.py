"""Host services consumed by the viewer: the clipboard and page scrolling.

Both services are external and fallible. The viewer only depends on the
:class:`Clipboard` and :class:`DocumentHost` protocols; this module also ships
the implementations used by the CLI:

* :class:`CommandClipboard` pipes text into the first clipboard utility found
  on ``PATH`` (``wl-copy``, ``xclip``, ``xsel``, ``pbcopy`` or ``clip``).
* :class:`MemoryClipboard` keeps the last copied text in memory for headless
  sessions.
* :class:`PageAnchors` knows which anchors exist on the rendered page and
  records the scroll requests it receives.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
    ("pbcopy",),
    ("clip",),
)


class ClipboardError(RuntimeError):
    """Raised when text cannot be written to the clipboard."""


class ScrollError(RuntimeError):
    """Raised when the host page cannot scroll to an anchor."""


class Clipboard(typ.Protocol):
    """Asynchronous clipboard write primitive."""

    async def write_text(self, text: str) -> None: ...


class DocumentHost(typ.Protocol):
    """Scroll-to-element primitive of the page hosting the viewer."""

    def has_anchor(self, anchor_id: str) -> bool: ...

    def scroll_into_view(self, anchor_id: str, *, smooth: bool = True) -> None: ...


async def _reap(process: asyncio.subprocess.Process) -> None:
    """Kill ``process`` if it is still running and wait for it to exit."""
    if process.returncode is None:
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


class CommandClipboard:
    """Write to the system clipboard through a platform utility."""

    def __init__(
        self, commands: cabc.Sequence[cabc.Sequence[str]] = CLIPBOARD_COMMANDS
    ) -> None:
        self.commands = tuple(tuple(command) for command in commands)

    def resolve_command(self) -> list[str] | None:
        """Return the first configured command whose executable is on ``PATH``."""
        for command in self.commands:
            executable = shutil.which(command[0])
            if executable:
                return [executable, *command[1:]]
        return None

    async def write_text(self, text: str) -> None:
        """Pipe ``text`` into the clipboard utility.

        Cancelling the write kills the utility and waits for it to exit.

        Raises
        ------
        ClipboardError
            If no utility is available, it cannot be started, or it exits with
            a non-zero status.
        """
        command = self.resolve_command()
        if command is None:
            names = ", ".join(cmd[0] for cmd in self.commands)
            msg = f"No clipboard utility found on PATH (tried {names})."
            raise ClipboardError(msg)
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            msg = f"Unable to run '{command[0]}': {exc}"
            raise ClipboardError(msg) from exc
        try:
            _stdout, stderr = await process.communicate(text.encode("utf-8"))
        except asyncio.CancelledError:
            await _reap(process)
            raise
        except OSError as exc:
            await _reap(process)
            msg = f"Unable to write to '{command[0]}': {exc}"
            raise ClipboardError(msg) from exc
        if process.returncode != 0:
            detail = stderr.decode("utf-8", "replace").strip() if stderr else ""
            msg = f"'{command[0]}' exited with status {process.returncode}"
            if detail:
                msg = f"{msg}: {detail}"
            raise ClipboardError(msg)


class MemoryClipboard:
    """In-process clipboard that remembers every written text."""

    def __init__(self) -> None:
        self.history: list[str] = []

    @property
    def text(self) -> str | None:
        return self.history[-1] if self.history else None

    async def write_text(self, text: str) -> None:
        self.history.append(text)


class PageAnchors:
    """Document host backed by the set of anchors present on the page."""

    def __init__(self, anchor_ids: cabc.Iterable[str]) -> None:
        self.anchor_ids = frozenset(anchor_ids)
        self.scroll_requests: list[tuple[str, str]] = []

    def has_anchor(self, anchor_id: str) -> bool:
        return anchor_id in self.anchor_ids

    def scroll_into_view(self, anchor_id: str, *, smooth: bool = True) -> None:
        """Record a scroll request for ``anchor_id``.

        Raises
        ------
        ScrollError
            If the anchor is not present on the page.
        """
        if anchor_id not in self.anchor_ids:
            msg = f"No element with id '{anchor_id}' on the page."
            raise ScrollError(msg)
        behavior = "smooth" if smooth else "auto"
        self.scroll_requests.append((anchor_id, behavior))
        logger.debug("Scrolling to #%s (%s)", anchor_id, behavior)


__all__ = [
    "CLIPBOARD_COMMANDS",
    "Clipboard",
    "ClipboardError",
    "CommandClipboard",
    "DocumentHost",
    "MemoryClipboard",
    "PageAnchors",
    "ScrollError",
]
