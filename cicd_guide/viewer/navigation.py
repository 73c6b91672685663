"""Active-section tracking, scroll requests, and the mobile drawer."""

from __future__ import annotations

import logging
import typing as typ

from cicd_guide.host import ScrollError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from cicd_guide.host import DocumentHost
    from cicd_guide.registry import SectionRegistry
    from cicd_guide.state import UIState

logger = logging.getLogger(__name__)


class NavigationController:
    """Handle sidebar clicks and the mobile menu toggle.

    The active section only changes through :meth:`navigate_to`; scrolling the
    page by other means does not update it.
    """

    def __init__(
        self,
        state: UIState,
        registry: SectionRegistry,
        host: DocumentHost,
        *,
        on_change: cabc.Callable[[], None] | None = None,
    ) -> None:
        self._state = state
        self._registry = registry
        self._host = host
        self._on_change = on_change or (lambda: None)

    def navigate_to(self, section_id: str) -> bool:
        """Scroll to ``section_id`` and mark it active.

        Unknown ids, missing anchors, and scroll failures leave the state
        untouched.

        Parameters
        ----------
        section_id : str
            Registry id, which doubles as the anchor id on the page.

        Returns
        -------
        bool
            ``True`` when the scroll was requested and the state updated.
        """
        if section_id not in self._registry or not self._host.has_anchor(section_id):
            logger.debug("Ignoring navigation to unknown section '%s'", section_id)
            return False
        try:
            self._host.scroll_into_view(section_id, smooth=True)
        except ScrollError as exc:
            logger.warning("Could not scroll to '%s': %s", section_id, exc)
            return False
        self._state.active_section_id = section_id
        self._state.is_mobile_menu_open = False
        self._on_change()
        return True

    def toggle_mobile_menu(self) -> bool:
        """Flip the drawer and return its new visibility."""
        self._state.is_mobile_menu_open = not self._state.is_mobile_menu_open
        self._on_change()
        return self._state.is_mobile_menu_open

    def close_mobile_menu(self) -> None:
        """Hide the drawer, as the overlay click does."""
        self._state.is_mobile_menu_open = False
        self._on_change()


__all__ = ["NavigationController"]
