"""Transient "copied" acknowledgement for code block copy buttons.

A successful copy marks the code block as copied and schedules a single
acknowledgement timer. Scheduling goes through the mount cycle's
:class:`~cicd_guide.timers.TimerSet` under one key, so a newer copy cancels
the pending timer instead of letting it fire and clear the newer
acknowledgement. Clipboard failures are logged and otherwise ignored; the user
simply sees no acknowledgement.
"""

from __future__ import annotations

import functools
import logging
import typing as typ

from cicd_guide._constants import COPY_ACK_TIMER, DEFAULT_COPY_ACK_WINDOW
from cicd_guide.host import ClipboardError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from cicd_guide.host import Clipboard
    from cicd_guide.state import UIState
    from cicd_guide.timers import TimerSet

logger = logging.getLogger(__name__)


class ClipboardFeedbackController:
    """Copy code samples and manage the ``copied_code_id`` acknowledgement."""

    def __init__(
        self,
        state: UIState,
        timers: TimerSet,
        clipboard: Clipboard,
        *,
        window: float = DEFAULT_COPY_ACK_WINDOW,
        on_change: cabc.Callable[[], None] | None = None,
    ) -> None:
        """Bind the controller to a mount cycle.

        Parameters
        ----------
        state : UIState
            State record owned by the mounted viewer.
        timers : TimerSet
            Timer set of the same mount cycle.
        clipboard : Clipboard
            Host clipboard used for the asynchronous write.
        window : float, optional
            Seconds the acknowledgement stays visible.
        on_change : Callable[[], None], optional
            Invoked after every state mutation made by this controller.
        """
        self._state = state
        self._timers = timers
        self._clipboard = clipboard
        self.window = window
        self._on_change = on_change or (lambda: None)

    def is_copied(self, code_id: str) -> bool:
        return self._state.copied_code_id == code_id

    async def copy(self, text: str, code_id: str) -> bool:
        """Write ``text`` to the clipboard and acknowledge ``code_id``.

        Parameters
        ----------
        text : str
            Literal code sample to copy.
        code_id : str
            Identifier of the code block whose button was pressed.

        Returns
        -------
        bool
            ``True`` when the acknowledgement was shown. ``False`` when the
            clipboard write failed or the viewer was unmounted while the write
            was in flight.
        """
        try:
            await self._clipboard.write_text(text)
        except ClipboardError as exc:
            logger.warning("Failed to copy text for '%s': %s", code_id, exc)
            return False
        if self._timers.closed:
            return False
        self._state.copied_code_id = code_id
        self._timers.schedule(
            COPY_ACK_TIMER, self.window, functools.partial(self._expire, code_id)
        )
        self._on_change()
        return True

    def _expire(self, code_id: str) -> None:
        if self._state.copied_code_id != code_id:
            return
        self._state.copied_code_id = None
        self._on_change()


__all__ = ["ClipboardFeedbackController"]
