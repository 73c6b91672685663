"""Stateful documentation viewer and the controllers it composes."""

from .clipboard import ClipboardFeedbackController
from .load_phase import LoadPhaseController
from .navigation import NavigationController
from .session import DocumentationViewer

__all__ = [
    "ClipboardFeedbackController",
    "DocumentationViewer",
    "LoadPhaseController",
    "NavigationController",
]
