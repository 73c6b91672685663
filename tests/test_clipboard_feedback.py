"""Tests for copy acknowledgements and their timers."""

from __future__ import annotations

import asyncio
import logging
import typing as typ

import pytest

from cicd_guide.state import UIState
from cicd_guide.timers import TimerSet
from cicd_guide.viewer import ClipboardFeedbackController

if typ.TYPE_CHECKING:
    from cicd_guide.viewer import DocumentationViewer

    from .conftest import FakeClipboard, FakeScheduler


def test_copy_acknowledges_then_expires(
    ready_viewer: DocumentationViewer,
    scheduler: FakeScheduler,
    clipboard: FakeClipboard,
) -> None:
    assert asyncio.run(ready_viewer.copy("kubectl get pods", "c1")) is True
    assert clipboard.writes == ["kubectl get pods"]
    assert ready_viewer.state.copied_code_id == "c1"
    assert ready_viewer.is_copied("c1")
    scheduler.advance(1.75)
    assert ready_viewer.state.copied_code_id == "c1"
    scheduler.advance(0.25)
    assert ready_viewer.state.copied_code_id is None


def test_second_copy_supersedes_first_timer(
    ready_viewer: DocumentationViewer, scheduler: FakeScheduler
) -> None:
    asyncio.run(ready_viewer.copy("t1", "c1"))
    scheduler.advance(0.5)
    asyncio.run(ready_viewer.copy("t2", "c2"))
    assert ready_viewer.pending_timers == frozenset({"copy-ack"})
    scheduler.advance(1.5)  # 2000 ms after the first copy
    assert ready_viewer.state.copied_code_id == "c2"
    scheduler.advance(0.25)
    assert ready_viewer.state.copied_code_id == "c2"
    scheduler.advance(0.25)  # 2000 ms after the second copy
    assert ready_viewer.state.copied_code_id is None


def test_recopying_same_block_restarts_window(
    ready_viewer: DocumentationViewer, scheduler: FakeScheduler
) -> None:
    asyncio.run(ready_viewer.copy("t1", "c1"))
    scheduler.advance(1.5)
    asyncio.run(ready_viewer.copy("t1", "c1"))
    scheduler.advance(1.5)
    assert ready_viewer.state.copied_code_id == "c1"
    scheduler.advance(0.5)
    assert ready_viewer.state.copied_code_id is None


def test_clipboard_failure_is_logged_not_shown(
    ready_viewer: DocumentationViewer,
    clipboard: FakeClipboard,
    caplog: pytest.LogCaptureFixture,
) -> None:
    clipboard.fail = True
    with caplog.at_level(logging.WARNING, logger="cicd_guide.viewer.clipboard"):
        assert asyncio.run(ready_viewer.copy("kubectl get pods", "c1")) is False
    assert ready_viewer.state.copied_code_id is None
    assert ready_viewer.pending_timers == frozenset()
    assert "Failed to copy text for 'c1'" in caplog.text


def test_failed_copy_keeps_previous_acknowledgement(
    ready_viewer: DocumentationViewer,
    scheduler: FakeScheduler,
    clipboard: FakeClipboard,
) -> None:
    asyncio.run(ready_viewer.copy("t1", "c1"))
    clipboard.fail = True
    asyncio.run(ready_viewer.copy("t2", "c2"))
    assert ready_viewer.state.copied_code_id == "c1"
    scheduler.advance(2.0)
    assert ready_viewer.state.copied_code_id is None


def test_unmount_cancels_pending_acknowledgement(
    ready_viewer: DocumentationViewer, scheduler: FakeScheduler
) -> None:
    asyncio.run(ready_viewer.copy("t1", "c1"))
    state = ready_viewer.state
    ready_viewer.unmount()
    assert scheduler.pending == []
    scheduler.advance(5.0)
    assert state.copied_code_id == "c1", "discarded state must not be touched"


def test_write_completing_after_teardown_is_discarded(
    scheduler: FakeScheduler, clipboard: FakeClipboard
) -> None:
    state = UIState(is_loading=False)
    timers = TimerSet(scheduler)
    controller = ClipboardFeedbackController(state, timers, clipboard, window=2.0)

    async def _copy_then_close() -> bool:
        task = asyncio.create_task(controller.copy("late", "c9"))
        timers.close()
        return await task

    assert asyncio.run(_copy_then_close()) is False
    assert state.copied_code_id is None
    assert scheduler.pending == []


def test_request_copy_uses_registered_sample(
    ready_viewer: DocumentationViewer, clipboard: FakeClipboard
) -> None:
    async def _request() -> bool | None:
        task = ready_viewer.request_copy("c1")
        assert task is not None
        return await task

    assert asyncio.run(_request()) is True
    assert clipboard.writes == ["kubectl get pods"]
    assert ready_viewer.state.copied_code_id == "c1"


def test_request_copy_ignores_unknown_sample(
    ready_viewer: DocumentationViewer,
    clipboard: FakeClipboard,
    caplog: pytest.LogCaptureFixture,
) -> None:
    async def _request() -> object:
        return ready_viewer.request_copy("missing")

    with caplog.at_level(logging.WARNING, logger="cicd_guide.viewer.session"):
        assert asyncio.run(_request()) is None
    assert clipboard.writes == []
    assert "missing" in caplog.text


def test_unmount_cancels_copy_tasks_in_flight(
    ready_viewer: DocumentationViewer, clipboard: FakeClipboard
) -> None:
    async def _scenario() -> bool:
        release = asyncio.Event()

        async def _slow_write(text: str) -> None:
            await release.wait()
            clipboard.writes.append(text)

        clipboard.write_text = _slow_write  # type: ignore[method-assign]
        task = ready_viewer.request_copy("c1")
        assert task is not None
        await asyncio.sleep(0)
        ready_viewer.unmount()
        try:
            await task
        except asyncio.CancelledError:
            return True
        return False

    assert asyncio.run(_scenario()) is True
    assert clipboard.writes == []
