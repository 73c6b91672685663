"""Tests for loading guide content from YAML."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from cicd_guide.config import (
    CodeBlock,
    ContentError,
    MarkdownBlock,
    load_guide_content,
)

if typ.TYPE_CHECKING:
    from cicd_guide.config import GuideContent

EXPECTED_SECTION_IDS = (
    "overview",
    "structure",
    "k8s-basics",
    "deployment",
    "service",
    "ingress",
    "certificate",
    "backend-config",
    "kustomize",
    "cicd",
    "commands",
    "troubleshooting",
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "guide.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_shipped_guide_registers_sections_in_order(
    guide_content: GuideContent,
) -> None:
    assert guide_content.registry.ids == EXPECTED_SECTION_IDS
    assert guide_content.registry.get("overview") is not None
    assert guide_content.registry.get("overview").title == "Project Overview"


def test_shipped_guide_code_samples_are_unique_and_copyable(
    guide_content: GuideContent,
) -> None:
    samples = guide_content.code_samples
    assert "deployment-yaml" in samples
    assert "kubectl-commands" in samples
    assert all(code and not code.endswith("\n") for code in samples.values())
    assert guide_content.get_code("deployment-yaml") == samples["deployment-yaml"]
    assert guide_content.get_code("missing") is None


def test_shipped_guide_timings(guide_content: GuideContent) -> None:
    assert guide_content.settings.load_delay == pytest.approx(1.0)
    assert guide_content.settings.copy_ack_window == pytest.approx(2.0)
    assert len(guide_content.settings.resources) == 4


def test_sample_content_blocks(sample_content: GuideContent) -> None:
    overview, basics = sample_content.sections
    assert overview.heading == "Project Overview"
    assert isinstance(overview.blocks[0], MarkdownBlock)
    assert basics.code_blocks == [
        CodeBlock("c1", "kubectl get pods", "pods.sh", "bash"),
        CodeBlock("c2", "apiVersion: v1\nkind: Service", None, "yaml"),
    ]
    assert sample_content.settings.title == "Sample Guide"


def test_defaults_apply_when_settings_missing(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "sections:\n"
        "  - id: only\n"
        "    title: Only Section\n"
        "    heading: A Longer Heading\n"
        "    blocks:\n"
        "      - Plain paragraph.\n"
        "      - code: echo hi\n",
    )
    content = load_guide_content(path)
    assert content.settings.load_delay == pytest.approx(1.0)
    assert content.settings.copy_ack_window == pytest.approx(2.0)
    assert content.settings.output == Path("public/index.html")
    (section,) = content.sections
    assert section.heading == "A Longer Heading"
    assert section.blocks[0] == MarkdownBlock("Plain paragraph.")
    assert section.code_blocks[0].code_id == "only-code-2"


def test_millisecond_settings_are_converted(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "defaults:\n"
        "  load_delay_ms: 250\n"
        "  copy_ack_ms: 1500\n"
        "sections:\n"
        "  - id: a\n"
        "    title: A\n",
    )
    settings = load_guide_content(path).settings
    assert settings.load_delay == pytest.approx(0.25)
    assert settings.copy_ack_window == pytest.approx(1.5)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_guide_content(tmp_path / "absent.yaml")


def test_non_mapping_document_raises(tmp_path: Path) -> None:
    with pytest.raises(TypeError, match="must be a mapping"):
        load_guide_content(_write(tmp_path, "- just\n- a list\n"))


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("defaults: {}\n", "No sections defined"),
        ("sections: []\n", "No sections defined"),
        ("sections:\n  - id: a\n", "requires both 'id' and 'title'"),
        ("sections:\n  - just text\n", "must be a mapping"),
        (
            "sections:\n  - {id: a, title: A}\n  - {id: a, title: B}\n",
            "Duplicate section id",
        ),
        (
            "sections:\n  - id: a\n    title: A\n    blocks: nope\n",
            "blocks must be a list",
        ),
        (
            "sections:\n  - id: a\n    title: A\n    blocks:\n      - {image: x}\n",
            "Block 1 of section 'a'",
        ),
        (
            "sections:\n"
            "  - id: a\n    title: A\n    blocks:\n      - {id: x, code: one}\n"
            "  - id: b\n    title: B\n    blocks:\n      - {id: x, code: two}\n",
            "Duplicate code block id 'x'",
        ),
        (
            "defaults:\n  load_delay_ms: -5\nsections:\n  - {id: a, title: A}\n",
            "Invalid duration",
        ),
        (
            "defaults:\n  copy_ack_ms: true\nsections:\n  - {id: a, title: A}\n",
            "milliseconds",
        ),
        (
            "defaults:\n  - load_delay_ms\nsections:\n  - {id: a, title: A}\n",
            "'defaults' must be a mapping",
        ),
        (
            "defaults:\n  output: null\nsections:\n  - {id: a, title: A}\n",
            "Setting 'output' must be a string",
        ),
        (
            "defaults:\n  title: [Guide]\nsections:\n  - {id: a, title: A}\n",
            "Setting 'title' must be a string",
        ),
    ],
)
def test_invalid_content_is_rejected(
    tmp_path: Path, text: str, message: str
) -> None:
    with pytest.raises(ContentError, match=message):
        load_guide_content(_write(tmp_path, text))
