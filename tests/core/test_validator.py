"""
Unit Tests for Schema Validation

Tests for the manifest and question set validators.
"""

import pytest

from booklet_toolkit.core.schemas.validator import (
    MANIFEST_SCHEMA_VERSION,
    QUESTION_SET_VERSION,
    ValidationError,
    validate_manifest,
    validate_question_set,
)


class TestValidateManifest:
    """Tests for validate_manifest function."""

    @pytest.fixture
    def valid_manifest_data(self) -> dict:
        """Create valid manifest data for testing."""
        return {
            "schema_version": MANIFEST_SCHEMA_VERSION,
            "template": {
                "title": "Unit 3 Quiz",
                "instructor_name": "A. Teacher",
                "date": "2024-03-09",
                "duration_minutes": 40,
                "numbering_style": "alphabetic",
            },
            "questions": [
                {
                    "source": "paper.pdf",
                    "page": 2,
                    "selection": {"x": 10, "y": 20, "width": 300, "height": 150},
                    "scale": 1.2,
                },
                {
                    "id": "clip-2",
                    "source": "scan.png",
                    "selection": {"width": 100, "height": 100},
                },
            ],
        }

    def test_valid_manifest_passes(self, valid_manifest_data):
        """Valid data should not raise."""
        validate_manifest(valid_manifest_data)

    def test_when_not_object_then_raises(self):
        with pytest.raises(ValidationError, match="JSON object"):
            validate_manifest([])

    def test_when_wrong_version_then_raises(self, valid_manifest_data):
        valid_manifest_data["schema_version"] = 99

        with pytest.raises(ValidationError) as exc_info:
            validate_manifest(valid_manifest_data)

        assert exc_info.value.path == "schema_version"

    def test_when_no_questions_then_raises(self, valid_manifest_data):
        valid_manifest_data["questions"] = []
        with pytest.raises(ValidationError, match="Schema validation failed"):
            validate_manifest(valid_manifest_data)

    def test_when_selection_missing_height_then_reports_path(self, valid_manifest_data):
        del valid_manifest_data["questions"][0]["selection"]["height"]

        with pytest.raises(ValidationError) as exc_info:
            validate_manifest(valid_manifest_data)

        assert exc_info.value.path == "questions.0.selection"
        assert exc_info.value.errors

    def test_when_unknown_numbering_style_then_raises(self, valid_manifest_data):
        valid_manifest_data["template"]["numbering_style"] = "roman"
        with pytest.raises(ValidationError):
            validate_manifest(valid_manifest_data)

    def test_when_unknown_property_then_raises(self, valid_manifest_data):
        valid_manifest_data["questions"][1]["marks"] = 5
        with pytest.raises(ValidationError):
            validate_manifest(valid_manifest_data)

    def test_when_bad_date_then_raises(self, valid_manifest_data):
        valid_manifest_data["template"]["date"] = "09.03.2024"
        with pytest.raises(ValidationError):
            validate_manifest(valid_manifest_data)


class TestValidateQuestionSet:
    """Tests for validate_question_set function."""

    @pytest.fixture
    def question_set_data(self, make_question) -> dict:
        return {
            "version": QUESTION_SET_VERSION,
            "questions": [make_question(1).to_dict(), make_question(2, ratio=3.0).to_dict()],
        }

    def test_saved_questions_pass(self, question_set_data):
        validate_question_set(question_set_data)

    def test_degenerate_selection_passes(self, make_question):
        """Zero-width selections are skipped at layout time, not rejected on load."""
        data = {"version": QUESTION_SET_VERSION, "questions": [make_question(1, width=0, height=50).to_dict()]}
        validate_question_set(data)

    def test_when_wrong_version_then_raises(self, question_set_data):
        question_set_data["version"] = 7

        with pytest.raises(ValidationError) as exc_info:
            validate_question_set(question_set_data)

        assert exc_info.value.path == "version"

    def test_when_order_not_positive_then_reports_path(self, question_set_data):
        question_set_data["questions"][1]["order"] = 0

        with pytest.raises(ValidationError) as exc_info:
            validate_question_set(question_set_data)

        assert exc_info.value.path == "questions.1.order"

    def test_when_image_not_data_url_then_raises(self, question_set_data):
        question_set_data["questions"][0]["image"] = "question.png"

        with pytest.raises(ValidationError, match="Schema validation failed"):
            validate_question_set(question_set_data)

    @pytest.mark.parametrize("key", ["id", "image", "selection", "order"])
    def test_when_required_key_missing_then_raises(self, question_set_data, key):
        del question_set_data["questions"][0][key]

        with pytest.raises(ValidationError) as exc_info:
            validate_question_set(question_set_data)

        assert exc_info.value.path == "questions.0"

    def test_when_not_object_then_raises(self):
        with pytest.raises(ValidationError, match="JSON object"):
            validate_question_set([])
