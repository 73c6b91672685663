"""Steps shared by the guide behaviour scenarios."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, then

if typ.TYPE_CHECKING:
    from cicd_guide.viewer import DocumentationViewer

    from ..conftest import FakeScheduler


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def rendered_page(scenario_state: dict[str, object]) -> BeautifulSoup:
    """Render the scenario's viewer and parse the resulting HTML."""
    viewer: DocumentationViewer = scenario_state["viewer"]  # type: ignore[assignment]
    return BeautifulSoup(viewer.render(), "html.parser")


@given("a guide with the overview and Kubernetes basics sections")
def given_sample_guide(
    viewer: DocumentationViewer, scenario_state: dict[str, object]
) -> None:
    """Register the mounted sample viewer in ``scenario_state``."""
    scenario_state["viewer"] = viewer


@given("the guide has finished loading")
def given_guide_loaded(
    scheduler: FakeScheduler, scenario_state: dict[str, object]
) -> None:
    """Advance the virtual clock past the load delay."""
    viewer: DocumentationViewer = scenario_state["viewer"]  # type: ignore[assignment]
    scheduler.advance(viewer.settings.load_delay)
    assert viewer.is_ready, "expected the guide to be ready after the load delay"


@then(parsers.parse('the result counter reads "{label}"'))
def then_result_counter(scenario_state: dict[str, object], label: str) -> None:
    """Verify the counter below the search box."""
    counter = rendered_page(scenario_state).select_one(".search-results-count")
    assert counter is not None, "expected a result counter below the search box"
    assert counter.get_text(strip=True) == label, (
        f"expected counter {label!r}, got {counter.get_text(strip=True)!r}"
    )
