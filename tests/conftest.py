import datetime

import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import booklet_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from booklet_toolkit.core.models import CapturedQuestion, QuestionImage, SelectionRect, Template


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def make_question():
    """
    Factory for captured questions with a real PNG payload.

    ratio is selection height / width; the payload matches the selection
    unless the selection is degenerate.
    """
    def _create(
        order: int,
        ratio: float = 1.0,
        *,
        question_id: str | None = None,
        width: float = 100,
        height: float | None = None,
        image: QuestionImage | None = None,
    ) -> CapturedQuestion:
        height = width * ratio if height is None else height
        if image is None:
            pixel_size = (max(int(width), 1), max(int(height), 1))
            image = QuestionImage.from_pil(Image.new("RGB", pixel_size, color="white"))
        return CapturedQuestion(
            id=question_id or f"q{order}",
            image=image,
            source_page=1,
            source_document_ref="doc-1",
            selection=SelectionRect(0, 0, width, height),
            order=order,
            source_document_name="paper.pdf",
        )
    return _create


@pytest.fixture
def scenario_questions(make_question):
    """Five square clips followed by two tall (3:1) clips."""
    ratios = [1.0] * 5 + [3.0] * 2
    return [make_question(i, ratio) for i, ratio in enumerate(ratios, start=1)]


@pytest.fixture
def full_template():
    """Template with every field set."""
    return Template(
        title="Unit 3 Quiz",
        institution_name="Riverside High School",
        group_label="10-B",
        instructor_name="A. Teacher",
        date=datetime.date(2024, 3, 9),
        duration_minutes=40,
    )
