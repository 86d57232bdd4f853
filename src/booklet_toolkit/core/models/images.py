"""
Module: images

Purpose:
    Provides the QuestionImage dataclass - the encoded raster payload of a
    captured question. The payload stays encoded until the layout engine
    decodes it, so a corrupt capture surfaces as a per-question skip rather
    than a failure at capture time.

Key Functions:
    - QuestionImage.from_pil(): Encode a PIL image
    - QuestionImage.from_data_url(): Parse a "data:image/png;base64,..." URL
    - QuestionImage.to_data_url(): Inverse of from_data_url

Dependencies:
    - PIL.Image: Encoding only
    - base64 (std)

Used By:
    - core.models.questions.CapturedQuestion
    - builder.images.provider: decode_image()
"""

from __future__ import annotations

import base64
import binascii
import io
import re
from dataclasses import dataclass

from PIL import Image

DEFAULT_FORMAT = "PNG"

_DATA_URL_RE = re.compile(r"^data:image/(?P<fmt>[a-zA-Z0-9.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


@dataclass(frozen=True)
class QuestionImage:
    """
    Encoded raster payload (immutable).

    Attributes:
        data: Encoded image bytes
        width: Width in source pixels
        height: Height in source pixels
        format: Encoding format name ("PNG", "JPEG", ...)
    """

    data: bytes
    width: int
    height: int
    format: str = DEFAULT_FORMAT

    def __post_init__(self) -> None:
        """Validate on construction."""
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Image size must be non-negative: {self.width}x{self.height}")

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_pil(cls, image: Image.Image, format: str = DEFAULT_FORMAT) -> "QuestionImage":
        """
        Encode a PIL image into a payload.

        Example:
            >>> payload = QuestionImage.from_pil(Image.new("RGB", (40, 20)))
            >>> payload.size
            (40, 20)
        """
        buf = io.BytesIO()
        image.save(buf, format=format)
        return cls(data=buf.getvalue(), width=image.width, height=image.height, format=format.upper())

    @classmethod
    def from_data_url(cls, url: str, *, width: int = 0, height: int = 0) -> "QuestionImage":
        """
        Parse a base64 data URL.

        Width and height are taken from the caller because the payload is not
        decoded here.

        Raises:
            ValueError: If the URL is not a base64 image data URL
        """
        match = _DATA_URL_RE.match(url.strip())
        if match is None:
            raise ValueError("Not a base64 image data URL")
        try:
            data = base64.b64decode(match.group("payload"), validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
        fmt = match.group("fmt").upper()
        if fmt == "JPG":
            fmt = "JPEG"
        return cls(data=data, width=int(width), height=int(height), format=fmt)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:image/{self.format.lower()};base64,{encoded}"
