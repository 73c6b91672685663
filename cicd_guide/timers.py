"""Keyed, cancellable one-shot timers owned by a viewer mount cycle.

Controllers never call the event loop directly. They schedule through a
:class:`TimerSet`, which keeps exactly one live handle per key, cancels the
previous handle when a key is rescheduled, and cancels everything on
:meth:`TimerSet.close`. Once closed, the set also refuses to run callbacks, so
a timer can never mutate state after the viewer has been torn down, even if
the backing scheduler delivers a callback late.

Any object with ``call_later(delay, callback)`` returning a handle that has a
``cancel()`` method satisfies :class:`Scheduler`; ``asyncio`` event loops do.

Example
-------
>>> import asyncio
>>> async def demo() -> list[str]:
...     fired: list[str] = []
...     timers = TimerSet(asyncio.get_running_loop())
...     timers.schedule("ping", 0.01, lambda: fired.append("ping"))
...     await asyncio.sleep(0.05)
...     timers.close()
...     return fired
>>> asyncio.run(demo())
['ping']
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class TimerHandle(typ.Protocol):
    """Handle returned by a scheduler for a pending callback."""

    def cancel(self) -> None: ...


class Scheduler(typ.Protocol):
    """Timer facility consumed by :class:`TimerSet`."""

    def call_later(
        self, delay: float, callback: cabc.Callable[[], object]
    ) -> TimerHandle: ...


class TimerSet:
    """Own the pending timers of one mount cycle."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._handles: dict[str, tuple[object, TimerHandle]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        """Return ``True`` once :meth:`close` has run."""
        return self._closed

    @property
    def pending(self) -> frozenset[str]:
        """Return the keys of timers that have neither fired nor been cancelled."""
        return frozenset(self._handles)

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def schedule(
        self, key: str, delay: float, callback: cabc.Callable[[], None]
    ) -> None:
        """Run ``callback`` after ``delay`` seconds under ``key``.

        A pending timer registered under the same key is cancelled first, so
        at most one handle per key is ever live.

        Raises
        ------
        RuntimeError
            If the set has already been closed.
        """
        if self._closed:
            msg = f"Cannot schedule '{key}' on a closed timer set."
            raise RuntimeError(msg)
        self.cancel(key)
        token = object()

        def _fire() -> None:
            entry = self._handles.get(key)
            if self._closed or entry is None or entry[0] is not token:
                return
            del self._handles[key]
            callback()

        handle = self._scheduler.call_later(delay, _fire)
        self._handles[key] = (token, handle)

    def cancel(self, key: str) -> bool:
        """Cancel the timer registered under ``key``; return whether one existed."""
        entry = self._handles.pop(key, None)
        if entry is None:
            return False
        entry[1].cancel()
        return True

    def close(self) -> int:
        """Cancel every outstanding timer and refuse further scheduling.

        Returns
        -------
        int
            Number of handles that were still pending.
        """
        self._closed = True
        entries = list(self._handles.values())
        self._handles.clear()
        for _token, handle in entries:
            handle.cancel()
        return len(entries)


__all__ = ["Scheduler", "TimerHandle", "TimerSet"]
