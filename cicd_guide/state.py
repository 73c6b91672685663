"""The single mutable UI state record owned by a mounted viewer."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ


class LoadPhase(enum.Enum):
    """Mutually exclusive load phases derived from the state flags."""

    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


@dc.dataclass(slots=True)
class UIState:
    """Viewer state shared by every controller of one mount cycle.

    Attributes
    ----------
    active_section_id : str or None
        Section most recently reached through explicit navigation.
    search_term : str
        Current sidebar query; an empty string disables filtering.
    is_loading : bool
        ``True`` until the load phase completes or fails.
    loading_error : str or None
        Message describing a failed load; ``None`` otherwise.
    is_mobile_menu_open : bool
        Whether the sidebar drawer is expanded on small screens.
    copied_code_id : str or None
        Code block currently showing the "copied" acknowledgement.
    """

    active_section_id: str | None = None
    search_term: str = ""
    is_loading: bool = True
    loading_error: str | None = None
    is_mobile_menu_open: bool = False
    copied_code_id: str | None = None

    @property
    def phase(self) -> LoadPhase:
        """Return the load phase; ready only when not loading and error-free."""
        if self.is_loading:
            return LoadPhase.LOADING
        if self.loading_error is not None:
            return LoadPhase.ERROR
        return LoadPhase.READY

    def snapshot(self) -> dict[str, typ.Any]:
        """Return a plain mapping of the state, including the derived phase."""
        payload = dc.asdict(self)
        payload["phase"] = self.phase.value
        return payload


__all__ = ["LoadPhase", "UIState"]
