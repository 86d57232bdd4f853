"""
Unit tests for the placement reducer.

Geometry on A4 two-column: page 1 content starts at 64mm, later pages at
30mm, usable bottom 279mm. Square clips place at 70x70 (slot 82mm), 3:1
clips at 45x135 (slot 147mm).
"""

from dataclasses import replace

import pytest
from unittest.mock import MagicMock

from booklet_toolkit.builder.images.provider import ImageDecodeError
from booklet_toolkit.builder.layout import (
    DEFAULT_POLICY,
    LayoutConfig,
    LayoutContext,
    SingleColumnPolicy,
    initial_state,
    paginate,
    place_question,
    stamp_footers,
)
from booklet_toolkit.core.models.template import NumberingStyle, Template


@pytest.fixture
def mock_decoder():
    """Decoder returning a mock image, so tests focus on geometry."""
    return MagicMock(return_value=MagicMock(width=100, height=100))


@pytest.fixture
def context(mock_decoder):
    return LayoutContext(
        template=Template(),
        config=LayoutConfig(),
        policy=DEFAULT_POLICY,
        decoder=mock_decoder,
    )


class TestInitialState:
    """Tests for initial_state()."""

    def test_starts_on_page_one_left_column(self, context):
        state = initial_state(context)

        assert state.page_index == 1
        assert state.column == 0
        assert state.cursors == (64.0, 64.0)
        assert state.number == 1
        assert len(state.headers) == 1


class TestPlaceQuestion:
    """Tests for a single reducer step."""

    def test_first_question_placed_at_left_column_top(self, context, make_question):
        # Act
        state = place_question(initial_state(context), make_question(1), context)

        # Assert
        placed = state.placed[0]
        assert (placed.page_index, placed.column) == (1, 0)
        assert (placed.x, placed.y) == (22.0, 65.0)
        assert (placed.width, placed.height) == (70.0, 70.0)
        assert (placed.label_x, placed.label_y) == (12.0, 70.0)
        assert placed.number_label == "1."

    def test_step_advances_cursor_and_toggles_column(self, context, make_question):
        state = place_question(initial_state(context), make_question(1), context)

        assert state.cursors == (146.0, 64.0)
        assert state.column == 1
        assert state.number == 2
        assert state.page_used is True

    def test_step_does_not_mutate_previous_state(self, context, make_question):
        before = initial_state(context)

        place_question(before, make_question(1), context)

        assert before.placed == ()
        assert before.cursors == (64.0, 64.0)

    def test_second_question_goes_to_right_column(self, context, make_question):
        state = initial_state(context)
        for order in (1, 2):
            state = place_question(state, make_question(order), context)

        right = state.placed[1]
        assert right.column == 1
        assert (right.x, right.y) == (118.0, 65.0)

    def test_overflowing_left_column_switches_right_when_room(self, context, make_question):
        """Left cursor near the bottom, right column still has room."""
        state = initial_state(context)
        state = replace(state, cursors=(250.0, 64.0), page_used=True)

        state = place_question(state, make_question(1), context)

        assert state.placed[0].column == 1
        assert state.placed[0].page_index == 1
        # Toggle after placing on the right returns to the left
        assert state.column == 0

    def test_overflowing_both_columns_opens_new_page(self, context, make_question):
        state = initial_state(context)
        state = replace(state, cursors=(250.0, 250.0), page_used=True)

        state = place_question(state, make_question(1), context)

        placed = state.placed[0]
        assert (placed.page_index, placed.column, placed.y) == (2, 0, 31.0)
        assert len(state.headers) == 2
        assert state.cursors == (112.0, 30.0)

    def test_decode_failure_records_skip_and_reserves_fallback(self, context, make_question, mock_decoder):
        # Arrange
        mock_decoder.side_effect = ImageDecodeError("corrupt payload")

        # Act
        state = place_question(initial_state(context), make_question(1), context)

        # Assert
        assert state.placed == ()
        skipped = state.skipped[0]
        assert (skipped.question_id, skipped.reason) == ("q1", "decode_failed")
        assert "corrupt payload" in skipped.detail
        assert state.cursors == (104.0, 64.0)
        assert state.column == 1
        assert state.number == 1

    def test_invalid_geometry_skips_without_decoding(self, context, make_question, mock_decoder):
        question = make_question(1, width=0, height=100)

        state = place_question(initial_state(context), question, context)

        assert state.skipped[0].reason == "invalid_geometry"
        mock_decoder.assert_not_called()

    def test_alphabetic_labels(self, mock_decoder, make_question):
        context = LayoutContext(
            template=Template(numbering_style=NumberingStyle.ALPHABETIC),
            config=LayoutConfig(),
            policy=DEFAULT_POLICY,
            decoder=mock_decoder,
        )
        state = initial_state(context)
        for order in (1, 2, 3):
            state = place_question(state, make_question(order), context)

        assert [p.number_label for p in state.placed] == ["a)", "b)", "c)"]


class TestOversizeQuestions:
    """A question taller than a whole page never produces a blank page."""

    def test_oversize_first_question_stays_on_page_one(self, context, make_question):
        # Ratio 10: 45 x 450mm, taller than the usable area
        state = place_question(initial_state(context), make_question(1, 10.0), context)

        assert state.placed[0].page_index == 1
        assert len(state.headers) == 1
        assert len(state.warnings) == 1
        assert "q1" in state.warnings[0]

    def test_oversize_on_fresh_page_does_not_open_another(self, context, make_question):
        state = initial_state(context)
        for order, ratio in ((1, 1.0), (2, 1.0), (3, 1.0), (4, 1.0), (5, 1.0), (6, 10.0)):
            state = place_question(state, make_question(order, ratio), context)

        pages = [p.page_index for p in state.placed]
        assert pages == [1, 1, 1, 1, 2, 3]
        assert len(state.headers) == 3
        assert len(state.warnings) == 1


class TestPaginate:
    """Tests for paginate() and stamp_footers()."""

    def test_groups_placements_by_page_in_reading_order(self, context, scenario_questions):
        document = paginate(scenario_questions, context)

        assert document.page_count == 2
        assert [p.question_id for p in document.pages[0].placements] == ["q1", "q2", "q3", "q4"]
        assert [p.question_id for p in document.pages[1].placements] == ["q5", "q6", "q7"]

    def test_footers_absent_until_stamped(self, context, scenario_questions):
        document = paginate(scenario_questions, context)

        assert all(page.footer is None for page in document.pages)

        stamped = stamp_footers(document, context.config)
        assert [page.footer.text for page in stamped.pages] == ["1/2", "2/2"]

    def test_single_column_policy_uses_same_reducer(self, mock_decoder, make_question):
        context = LayoutContext(
            template=Template(),
            config=LayoutConfig(),
            policy=SingleColumnPolicy(),
            decoder=mock_decoder,
        )
        questions = [make_question(i) for i in (1, 2, 3)]

        document = paginate(questions, context)

        placements = list(document.placements)
        assert all(p.column == 0 for p in placements)
        assert all(p.x == 22.0 for p in placements)
        assert (placements[0].width, placements[0].height) == (120.0, 120.0)
        # One 132mm slot per page: 64 + 132 and 30 + 132 leave no room for another
        assert [p.page_index for p in placements] == [1, 2, 3]
        assert document.policy_name == "single-column"
