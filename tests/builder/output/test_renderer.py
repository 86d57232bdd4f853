"""
Tests for builder.output.renderer

Generated PDFs are read back with pypdf.
"""

import io
from dataclasses import replace

import pytest
from pypdf import PdfReader

from booklet_toolkit.builder.layout import layout
from booklet_toolkit.builder.output.renderer import _transform_y, render_to_bytes, render_to_pdf
from booklet_toolkit.core.models import NumberingStyle


@pytest.fixture
def document(scenario_questions, full_template):
    return layout(scenario_questions, replace(full_template, numbering_style=NumberingStyle.ALPHABETIC))


def _page_text(reader, index):
    return reader.pages[index].extract_text()


class TestRenderToPdf:
    """Tests for render_to_pdf()."""

    def test_writes_one_pdf_page_per_layout_page(self, tmp_path, document):
        # Arrange
        output = tmp_path / "out" / "booklet.pdf"

        # Act
        render_to_pdf(document, output)

        # Assert
        reader = PdfReader(output)
        assert len(reader.pages) == document.page_count == 2

    def test_page_size_is_a4(self, tmp_path, document):
        output = tmp_path / "booklet.pdf"
        render_to_pdf(document, output)

        box = PdfReader(output).pages[0].mediabox
        assert float(box.width) == pytest.approx(595.28, abs=0.1)
        assert float(box.height) == pytest.approx(841.89, abs=0.1)

    def test_header_labels_and_footer_are_drawn(self, tmp_path, document):
        output = tmp_path / "booklet.pdf"
        render_to_pdf(document, output, title="Unit 3 Quiz")

        reader = PdfReader(output)
        first = _page_text(reader, 0)
        second = _page_text(reader, 1)
        assert "Unit 3 Quiz" in first
        assert "Riverside High School" in first
        assert "a)" in first and "d)" in first
        assert "1/2" in first
        assert "e)" in second and "g)" in second
        assert "2/2" in second
        assert "Unit 3 Quiz" not in second
        assert reader.metadata.title == "Unit 3 Quiz"

    def test_footer_can_be_disabled(self, tmp_path, document):
        output = tmp_path / "booklet.pdf"
        render_to_pdf(document, output, show_footer=False)

        assert "2/2" not in _page_text(PdfReader(output), 1)

    def test_every_page_embeds_images(self, tmp_path, document):
        output = tmp_path / "booklet.pdf"
        render_to_pdf(document, output)

        reader = PdfReader(output)
        assert all(len(page.images) >= 1 for page in reader.pages)


def test_render_to_bytes_returns_pdf(document):
    data = render_to_bytes(document)

    assert data.startswith(b"%PDF-")
    assert len(PdfReader(io.BytesIO(data)).pages) == 2


def test_transform_y_flips_axis():
    page_height_pt = 841.89
    assert _transform_y(page_height_pt, 0.0) == pytest.approx(page_height_pt)
    # 10mm image whose top is 20mm from the page top: bottom edge 30mm from top
    assert _transform_y(page_height_pt, 20.0, 10.0) == pytest.approx(page_height_pt - 30.0 * 72 / 25.4)
