"""
Tests for builder.controller

Test Coverage:
- build_booklet(): PDF + metadata written, filename collisions
- Required template fields
- preview_booklet(): in-memory PDF
- capture_from_manifest(): manifest -> questions
- BuilderConfig validation
"""

import datetime
import json
from dataclasses import replace
from pathlib import Path

import pytest
from pypdf import PdfReader

from booklet_toolkit.builder import BuildError, BuilderConfig, build_booklet, capture_from_manifest, preview_booklet
from booklet_toolkit.builder.controller import metadata_path_for
from booklet_toolkit.builder.layout import InputError, LayoutConfig
from booklet_toolkit.core.models import SelectionRect, Template
from booklet_toolkit.core.utils.serialization import Manifest, ManifestEntry

DAY = datetime.date(2024, 3, 9)


@pytest.fixture
def config(tmp_path: Path) -> BuilderConfig:
    return BuilderConfig(output_dir=tmp_path / "output", build_date=DAY)


class TestBuildBooklet:
    """Tests for build_booklet()."""

    def test_writes_pdf_and_metadata(self, scenario_questions, full_template, config):
        # Act
        result = build_booklet(scenario_questions, full_template, config)

        # Assert
        assert result.pdf_path == config.output_dir / "Unit 3 Quiz_2024-03-09.pdf"
        assert result.pdf_path.exists()
        assert result.page_count == 2
        assert result.placed_count == 7
        assert result.skipped == ()
        assert len(PdfReader(result.pdf_path).pages) == 2

        assert result.metadata_path == config.output_dir / "Unit 3 Quiz_2024-03-09_metadata.json"
        metadata = json.loads(result.metadata_path.read_text(encoding="utf-8"))
        assert metadata["pdf"] == result.pdf_path.name
        assert metadata["page_count"] == 2
        assert metadata["placed_count"] == 7
        assert metadata["policy"] == "two-column"
        assert metadata["template"]["title"] == "Unit 3 Quiz"
        assert [m["page"] for m in metadata["manifest"]] == [1, 1, 1, 1, 2, 2, 2]
        assert [m["column"] for m in metadata["manifest"]][:4] == ["left", "right", "left", "right"]
        assert metadata["manifest"][0]["label"] == "1."

    def test_existing_file_gets_numbered_suffix(self, scenario_questions, full_template, config):
        first = build_booklet(scenario_questions, full_template, config)
        second = build_booklet(scenario_questions, full_template, config)
        third = build_booklet(scenario_questions, full_template, config)

        assert first.pdf_path.name == "Unit 3 Quiz_2024-03-09.pdf"
        assert second.pdf_path.name == "Unit 3 Quiz_2024-03-09 (1).pdf"
        assert third.pdf_path.name == "Unit 3 Quiz_2024-03-09 (2).pdf"

    def test_repeated_builds_keep_their_own_metadata(self, scenario_questions, make_question, full_template, config):
        # Arrange
        first = build_booklet(scenario_questions, full_template, config)

        # Act
        second = build_booklet([make_question(1), make_question(2)], full_template, config)

        # Assert
        assert first.metadata_path != second.metadata_path
        first_metadata = json.loads(first.metadata_path.read_text(encoding="utf-8"))
        second_metadata = json.loads(second.metadata_path.read_text(encoding="utf-8"))
        assert first_metadata["pdf"] == first.pdf_path.name
        assert first_metadata["placed_count"] == 7
        assert second_metadata["pdf"] == second.pdf_path.name
        assert second_metadata["placed_count"] == 2
        assert second.metadata_path.name == "Unit 3 Quiz_2024-03-09 (1)_metadata.json"

    def test_metadata_can_be_disabled(self, scenario_questions, full_template, config):
        result = build_booklet(scenario_questions, full_template, replace(config, write_metadata=False))

        assert result.pdf_path.exists()
        assert result.metadata_path is None
        assert not metadata_path_for(result.pdf_path).exists()
        assert result.metadata["page_count"] == 2

    @pytest.mark.parametrize("blank_field", ["title", "instructor_name"])
    def test_required_field_blank_then_raises(self, scenario_questions, full_template, config, blank_field):
        template = replace(full_template, **{blank_field: "   "})

        with pytest.raises(InputError, match=blank_field):
            build_booklet(scenario_questions, template, config)

        assert not config.output_dir.exists()

    def test_required_fields_can_be_relaxed(self, scenario_questions, config):
        result = build_booklet(scenario_questions, Template(), replace(config, required_template_fields=()))

        # Untitled booklets fall back to the default stem
        assert result.pdf_path.name == "booklet_2024-03-09.pdf"

    def test_skipped_question_reported(self, make_question, full_template, config):
        questions = [make_question(1), make_question(2, width=0, height=50), make_question(3)]

        result = build_booklet(questions, full_template, config)

        assert result.placed_count == 2
        assert [s.question_id for s in result.skipped] == ["q2"]
        assert result.metadata["skipped_count"] == 1
        assert result.metadata["skipped"][0]["reason"] == "invalid_geometry"

    def test_single_column_policy(self, make_question, full_template, config):
        questions = [make_question(i) for i in range(1, 4)]

        result = build_booklet(questions, full_template, replace(config, policy="single-column"))

        assert result.metadata["policy"] == "single-column"
        assert {m["column"] for m in result.metadata["manifest"]} == {"left"}

    def test_output_dir_is_a_file_then_build_error(self, scenario_questions, full_template, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(BuildError):
            build_booklet(scenario_questions, full_template, BuilderConfig(output_dir=blocker, build_date=DAY))

    def test_empty_question_list_then_raises(self, full_template, config):
        with pytest.raises(InputError):
            build_booklet([], full_template, config)


def test_preview_booklet_returns_pdf_bytes(scenario_questions, full_template, config):
    data = preview_booklet(scenario_questions, full_template, config)

    assert data.startswith(b"%PDF-")
    assert not config.output_dir.exists()


def test_capture_from_manifest(sample_image):
    # Arrange
    manifest = Manifest(
        template=Template(title="Quiz"),
        entries=(
            ManifestEntry(source=sample_image, page=1, selection=SelectionRect(0, 0, 100, 50)),
            ManifestEntry(source=sample_image, page=1, selection=SelectionRect(100, 0, 100, 100), scale=2.0, id="zoomed"),
        ),
    )

    # Act
    questions = capture_from_manifest(manifest)

    # Assert
    assert [q.order for q in questions] == [1, 2]
    assert questions[0].image.size == (100, 50)
    assert questions[0].source_document_name == "sample.png"
    assert questions[1].id == "zoomed"
    assert questions[1].selection == SelectionRect(50, 0, 50, 50)


class TestBuilderConfig:
    """Tests for BuilderConfig validation."""

    def test_defaults(self, tmp_path):
        config = BuilderConfig(output_dir=tmp_path)

        assert config.policy == "two-column"
        assert config.required_template_fields == ("title", "instructor_name")
        assert config.layout == LayoutConfig()
        assert config.layout_policy().column_count == 2

    def test_unknown_policy_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="policy"):
            BuilderConfig(output_dir=tmp_path, policy="three-column")

    def test_unknown_required_field_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown template field"):
            BuilderConfig(output_dir=tmp_path, required_template_fields=("subtitle",))
