"""Shared fixtures for the guide viewer tests.

The viewer schedules every timer through a ``Scheduler``; tests substitute
``FakeScheduler``, a virtual clock whose ``advance`` method fires due callbacks
in order, so timing scenarios run instantly and deterministically. Clipboard
writes go through ``FakeClipboard`` and scroll requests through ``FakeHost``.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import pytest

from cicd_guide.config import load_guide_content
from cicd_guide.host import ClipboardError, ScrollError
from cicd_guide.viewer import DocumentationViewer

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from cicd_guide.config import GuideContent

REPO_ROOT = Path(__file__).resolve().parents[1]
GUIDE_CONFIG = REPO_ROOT / "config" / "guide.yaml"

SAMPLE_CONTENT = """
defaults:
  load_delay_ms: 1000
  copy_ack_ms: 2000
  title: Sample Guide
  loading_message: Loading sample...
sections:
  - id: overview
    title: Project Overview
    icon: "🚀"
    blocks:
      - markdown: Intro text for the **overview**.
  - id: k8s-basics
    title: Kubernetes Basics
    icon: "☸️"
    blocks:
      - id: c1
        header: pods.sh
        language: bash
        code: kubectl get pods
      - id: c2
        language: yaml
        code: |
          apiVersion: v1
          kind: Service
"""


@dc.dataclass
class _FakeHandle:
    due: float
    order: int
    callback: cabc.Callable[[], object]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Virtual-clock scheduler driven by :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._handles: list[_FakeHandle] = []
        self._counter = 0

    def call_later(
        self, delay: float, callback: cabc.Callable[[], object]
    ) -> _FakeHandle:
        self._counter += 1
        handle = _FakeHandle(self.now + delay, self._counter, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[_FakeHandle]:
        return [handle for handle in self._handles if not handle.cancelled]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing callbacks as they become due."""
        target = self.now + seconds
        while True:
            due = sorted(
                (h for h in self.pending if h.due <= target),
                key=lambda h: (h.due, h.order),
            )
            if not due:
                break
            handle = due[0]
            self._handles.remove(handle)
            self.now = handle.due
            handle.callback()
        self.now = target


class FakeClipboard:
    """Clipboard double that records writes and can be told to fail."""

    def __init__(self) -> None:
        self.writes: list[str] = []
        self.fail = False

    async def write_text(self, text: str) -> None:
        if self.fail:
            msg = "clipboard permission denied"
            raise ClipboardError(msg)
        self.writes.append(text)


class FakeHost:
    """Document host with a fixed anchor set and recorded scroll requests."""

    def __init__(self, anchors: cabc.Iterable[str]) -> None:
        self.anchors = set(anchors)
        self.scrolls: list[tuple[str, bool]] = []
        self.broken = False

    def has_anchor(self, anchor_id: str) -> bool:
        return anchor_id in self.anchors

    def scroll_into_view(self, anchor_id: str, *, smooth: bool = True) -> None:
        if self.broken:
            msg = "element detached"
            raise ScrollError(msg)
        self.scrolls.append((anchor_id, smooth))


@pytest.fixture
def sample_config(tmp_path: Path) -> Path:
    """Write the small two-section guide used by most tests."""
    path = tmp_path / "guide.yaml"
    path.write_text(SAMPLE_CONTENT.strip() + "\n", encoding="utf-8")
    return path


@pytest.fixture
def sample_content(sample_config: Path) -> GuideContent:
    return load_guide_content(sample_config)


@pytest.fixture(scope="session")
def guide_content() -> GuideContent:
    """Return the real guide shipped in ``config/guide.yaml``."""
    return load_guide_content(GUIDE_CONFIG)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def host(sample_content: GuideContent) -> FakeHost:
    return FakeHost(sample_content.registry.ids)


@pytest.fixture
def viewer(
    sample_content: GuideContent,
    scheduler: FakeScheduler,
    clipboard: FakeClipboard,
    host: FakeHost,
) -> cabc.Iterator[DocumentationViewer]:
    """Yield a mounted viewer, unmounting it afterwards."""
    instance = DocumentationViewer(
        sample_content, scheduler=scheduler, clipboard=clipboard, host=host
    )
    instance.mount()
    yield instance
    instance.unmount()


@pytest.fixture
def ready_viewer(
    viewer: DocumentationViewer, scheduler: FakeScheduler
) -> DocumentationViewer:
    """Return a mounted viewer whose load phase has completed."""
    scheduler.advance(1.0)
    assert viewer.is_ready, "expected the load phase to finish after 1000 ms"
    return viewer
