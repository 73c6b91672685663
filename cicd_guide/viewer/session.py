"""Documentation viewer owning the UI state of one mount cycle.

:class:`DocumentationViewer` is the only component that creates or discards a
:class:`~cicd_guide.state.UIState`. :meth:`DocumentationViewer.mount` builds
the state, a :class:`~cicd_guide.timers.TimerSet`, and the load, navigation,
and clipboard controllers bound to them, then starts the load phase.
:meth:`DocumentationViewer.unmount` closes the timer set and cancels pending
copy tasks, and fails any pending :meth:`DocumentationViewer.wait_until_ready`
call, after which no timer or clipboard completion can touch the state.

Every state mutation notifies the subscribers registered with
:meth:`DocumentationViewer.subscribe`; the CLI uses this to re-render or to
wait for the ready transition.

Example
-------
>>> import asyncio
>>> from cicd_guide.host import MemoryClipboard
>>> async def demo(content) -> str:
...     viewer = DocumentationViewer(
...         content, scheduler=asyncio.get_running_loop(), clipboard=MemoryClipboard()
...     )
...     viewer.mount()
...     await viewer.wait_until_ready()
...     viewer.set_search_term("kube")
...     html = viewer.render()
...     viewer.unmount()
...     return html
>>> asyncio.run(demo(content))  # doctest: +SKIP
"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import logging
import typing as typ

from cicd_guide.host import PageAnchors
from cicd_guide.page import GuidePageBuilder, NavItem
from cicd_guide.search import count_label, filter_sections, highlight_matches
from cicd_guide.state import LoadPhase, UIState
from cicd_guide.timers import TimerSet

from .clipboard import ClipboardFeedbackController
from .load_phase import LoadPhaseController
from .navigation import NavigationController

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from cicd_guide.config import GuideContent
    from cicd_guide.host import Clipboard, DocumentHost
    from cicd_guide.registry import Section
    from cicd_guide.search import Segment
    from cicd_guide.timers import Scheduler

logger = logging.getLogger(__name__)

Listener = typ.Callable[[UIState], None]


@dc.dataclass(slots=True)
class _MountCycle:
    """State and controllers that live between mount and unmount."""

    state: UIState
    timers: TimerSet
    load: LoadPhaseController
    navigation: NavigationController
    clipboard: ClipboardFeedbackController
    tasks: set[asyncio.Task[bool]] = dc.field(default_factory=set)
    waiters: set[asyncio.Future[UIState]] = dc.field(default_factory=set)


class DocumentationViewer:
    """Own the UI state and route user operations to the controllers."""

    def __init__(
        self,
        content: GuideContent,
        *,
        scheduler: Scheduler,
        clipboard: Clipboard,
        host: DocumentHost | None = None,
        page_builder: GuidePageBuilder | None = None,
    ) -> None:
        """Prepare a viewer; nothing runs until :meth:`mount`.

        Parameters
        ----------
        content : GuideContent
            Loaded guide content; its registry is the navigation catalog.
        scheduler : Scheduler
            Timer facility, usually the running ``asyncio`` loop.
        clipboard : Clipboard
            Host clipboard used by copy buttons.
        host : DocumentHost, optional
            Scroll primitive of the page. Defaults to :class:`PageAnchors`
            over the rendered section anchors.
        page_builder : GuidePageBuilder, optional
            Renderer for :meth:`render`; built from ``content`` when omitted.
        """
        self.content = content
        self.registry = content.registry
        self.settings = content.settings
        self._scheduler = scheduler
        self._clipboard = clipboard
        self.page_builder = page_builder or GuidePageBuilder(content)
        self.host: DocumentHost = host or PageAnchors(self.page_builder.anchor_ids)
        self._listeners: list[Listener] = []
        self._cycle: _MountCycle | None = None
        self._filtered: list[Section] = []

    # -- lifecycle ---------------------------------------------------------

    @property
    def is_mounted(self) -> bool:
        return self._cycle is not None

    @property
    def state(self) -> UIState:
        """Return the state of the current mount cycle.

        Raises
        ------
        RuntimeError
            If the viewer is not mounted.
        """
        return self._require_cycle().state

    @property
    def pending_timers(self) -> frozenset[str]:
        return self._require_cycle().timers.pending

    def mount(self) -> UIState:
        """Create a fresh state and start the load phase.

        Raises
        ------
        RuntimeError
            If the viewer is already mounted.
        """
        if self._cycle is not None:
            msg = "Viewer is already mounted."
            raise RuntimeError(msg)
        state = UIState()
        timers = TimerSet(self._scheduler)
        self._cycle = _MountCycle(
            state=state,
            timers=timers,
            load=LoadPhaseController(
                state, timers, delay=self.settings.load_delay, on_change=self._notify
            ),
            navigation=NavigationController(
                state, self.registry, self.host, on_change=self._notify
            ),
            clipboard=ClipboardFeedbackController(
                state,
                timers,
                self._clipboard,
                window=self.settings.copy_ack_window,
                on_change=self._notify,
            ),
        )
        self._refilter()
        self._cycle.load.start()
        return state

    def unmount(self) -> None:
        """Cancel timers, pending copies and ready waiters, then drop the state."""
        cycle = self._cycle
        if cycle is None:
            return
        self._cycle = None
        cancelled = cycle.timers.close()
        for task in list(cycle.tasks):
            task.cancel()
        msg = "Viewer is not mounted."
        for waiter in list(cycle.waiters):
            if not waiter.done():
                waiter.set_exception(RuntimeError(msg))
        logger.debug(
            "Viewer unmounted; cancelled %d timer(s) and %d copy task(s)",
            cancelled,
            len(cycle.tasks),
        )

    def subscribe(self, listener: Listener) -> cabc.Callable[[], None]:
        """Call ``listener`` after every state change; return an unsubscriber."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def wait_until_ready(self) -> UIState:
        """Suspend until the load phase reaches ``READY``.

        Must be awaited on the event loop that drives the scheduler.

        Raises
        ------
        RuntimeError
            If the viewer is not mounted, or is unmounted while waiting.
        """
        cycle = self._require_cycle()
        if cycle.state.phase is LoadPhase.READY:
            return cycle.state
        ready: asyncio.Future[UIState] = asyncio.get_running_loop().create_future()

        def _on_change(current: UIState) -> None:
            if current.phase is LoadPhase.READY and not ready.done():
                ready.set_result(current)

        cycle.waiters.add(ready)
        unsubscribe = self.subscribe(_on_change)
        try:
            return await ready
        finally:
            unsubscribe()
            cycle.waiters.discard(ready)

    # -- load phase --------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return self._require_cycle().load.is_ready

    def fail_loading(self, message: str) -> bool:
        return self._require_cycle().load.fail(message)

    def retry(self) -> bool:
        return self._require_cycle().load.retry()

    # -- search ------------------------------------------------------------

    @property
    def filtered_sections(self) -> list[Section]:
        """Return the sections visible for the current search term."""
        self._require_cycle()
        return list(self._filtered)

    def set_search_term(self, term: str) -> list[Section]:
        """Update the query and recompute the visible sections immediately."""
        self.state.search_term = term
        self._refilter()
        self._notify()
        return self.filtered_sections

    def clear_search(self) -> list[Section]:
        return self.set_search_term("")

    def highlight(self, text: str) -> list[Segment]:
        """Split ``text`` around occurrences of the current search term."""
        return highlight_matches(text, self.state.search_term)

    def nav_items(self) -> list[NavItem]:
        """Return the sidebar entries for the visible sections."""
        state = self.state
        return [
            NavItem(
                id=section.id,
                icon=section.icon,
                segments=highlight_matches(section.title, state.search_term),
                is_active=section.id == state.active_section_id,
            )
            for section in self._filtered
        ]

    def result_label(self) -> str | None:
        """Return the result counter, or ``None`` while the search box is empty."""
        if not self.state.search_term:
            return None
        return count_label(len(self._filtered))

    def _refilter(self) -> None:
        self._filtered = filter_sections(self.registry, self.state.search_term)

    # -- navigation --------------------------------------------------------

    def navigate_to(self, section_id: str) -> bool:
        return self._require_cycle().navigation.navigate_to(section_id)

    def toggle_mobile_menu(self) -> bool:
        return self._require_cycle().navigation.toggle_mobile_menu()

    def close_mobile_menu(self) -> None:
        self._require_cycle().navigation.close_mobile_menu()

    # -- clipboard ---------------------------------------------------------

    async def copy(self, text: str, code_id: str) -> bool:
        """Copy ``text`` and acknowledge ``code_id``; see the clipboard controller."""
        return await self._require_cycle().clipboard.copy(text, code_id)

    def request_copy(self, code_id: str) -> asyncio.Task[bool] | None:
        """Start copying the sample registered as ``code_id`` in the background.

        The returned task is owned by the current mount cycle and is cancelled
        by :meth:`unmount`. Unknown code ids are logged and ignored.

        Must be called from a running event loop.
        """
        cycle = self._require_cycle()
        code = self.content.get_code(code_id)
        if code is None:
            logger.warning("No code sample registered as '%s'", code_id)
            return None
        task = asyncio.get_running_loop().create_task(
            cycle.clipboard.copy(code, code_id)
        )
        cycle.tasks.add(task)
        task.add_done_callback(cycle.tasks.discard)
        return task

    def is_copied(self, code_id: str) -> bool:
        return self._require_cycle().clipboard.is_copied(code_id)

    # -- rendering ---------------------------------------------------------

    def render(self) -> str:
        """Render the page for the current state through the fallback guard."""
        return self.page_builder.render_guarded(
            self.state, nav_items=self.nav_items(), result_label=self.result_label()
        )

    # -- internals ---------------------------------------------------------

    def _require_cycle(self) -> _MountCycle:
        if self._cycle is None:
            msg = "Viewer is not mounted."
            raise RuntimeError(msg)
        return self._cycle

    def _notify(self) -> None:
        cycle = self._cycle
        if cycle is None:
            return
        for listener in list(self._listeners):
            listener(cycle.state)


__all__ = ["DocumentationViewer"]
