"""Loading to ready transition shown before the guide becomes usable.

The load phase is a fixed-delay simulation: :meth:`LoadPhaseController.start`
schedules one timer and the guide becomes ready when it fires. The error path
(:meth:`LoadPhaseController.fail` and :meth:`LoadPhaseController.retry`) is
kept for a future real fetch and is never triggered by the controller itself.

Phases move ``LOADING -> READY`` or ``LOADING -> ERROR -> LOADING -> READY``.
Nothing leaves ``READY`` short of remounting the viewer.
"""

from __future__ import annotations

import logging
import typing as typ

from cicd_guide._constants import DEFAULT_LOAD_DELAY, LOAD_TIMER
from cicd_guide.state import LoadPhase

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from cicd_guide.state import UIState
    from cicd_guide.timers import TimerSet

logger = logging.getLogger(__name__)


class LoadPhaseController:
    """Drive the ``is_loading``/``loading_error`` flags of a :class:`UIState`."""

    def __init__(
        self,
        state: UIState,
        timers: TimerSet,
        *,
        delay: float = DEFAULT_LOAD_DELAY,
        on_change: cabc.Callable[[], None] | None = None,
    ) -> None:
        """Bind the controller to a mount cycle.

        Parameters
        ----------
        state : UIState
            State record owned by the mounted viewer.
        timers : TimerSet
            Timer set of the same mount cycle; closing it cancels the load
            timer.
        delay : float, optional
            Seconds between :meth:`start` and the ready transition.
        on_change : Callable[[], None], optional
            Invoked after every state mutation made by this controller.
        """
        self._state = state
        self._timers = timers
        self.delay = delay
        self._on_change = on_change or (lambda: None)

    @property
    def phase(self) -> LoadPhase:
        return self._state.phase

    @property
    def is_ready(self) -> bool:
        """Return ``True`` only when loading finished without an error."""
        return self._state.phase is LoadPhase.READY

    def start(self) -> None:
        """Schedule the ready transition after :attr:`delay` seconds."""
        self._timers.schedule(LOAD_TIMER, self.delay, self._finish)

    def _finish(self) -> None:
        self._state.is_loading = False
        logger.debug("Load phase complete")
        self._on_change()

    def fail(self, message: str) -> bool:
        """Move a loading guide into the error phase.

        Returns
        -------
        bool
            ``False`` when the guide was not loading, in which case nothing
            changes.
        """
        if self._state.phase is not LoadPhase.LOADING:
            return False
        self._timers.cancel(LOAD_TIMER)
        self._state.is_loading = False
        self._state.loading_error = message
        logger.warning("Failed to load documentation: %s", message)
        self._on_change()
        return True

    def retry(self) -> bool:
        """Leave the error phase and restart the load timer.

        Returns
        -------
        bool
            ``False`` outside the error phase; a ready guide stays ready.
        """
        if self._state.phase is not LoadPhase.ERROR:
            return False
        self._state.is_loading = True
        self._state.loading_error = None
        self.start()
        self._on_change()
        return True


__all__ = ["LoadPhaseController"]
