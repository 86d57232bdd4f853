"""
Module: builder.images.provider

Purpose:
    Decode encoded question payloads into PIL images for placement.
    Decoding happens inside the layout step so a corrupt payload skips
    only its own question.

Key Functions:
    - decode_image(): QuestionImage -> PIL Image

Key Classes:
    - ImageDecodeError: Payload cannot be decoded (recoverable per question)

Dependencies:
    - PIL: Image decoding
    - booklet_toolkit.core.models: QuestionImage, PlacementError

Used By:
    - builder.layout.engine: Default decoder
"""

from __future__ import annotations

import io
import logging
import struct

from PIL import Image

from booklet_toolkit.core.models import PlacementError, QuestionImage

logger = logging.getLogger(__name__)


class ImageDecodeError(PlacementError):
    """Question payload is empty, truncated or not an image."""

    reason = "decode_failed"


def decode_image(payload: QuestionImage) -> Image.Image:
    """
    Decode a question payload.

    The payload is verified first, then reopened and fully loaded so the
    returned image no longer depends on the buffer.

    Args:
        payload: Encoded question image

    Returns:
        Loaded PIL image

    Raises:
        ImageDecodeError: If the bytes cannot be decoded

    Example:
        >>> img = decode_image(QuestionImage.from_pil(Image.new("RGB", (40, 20))))
        >>> img.size
        (40, 20)
    """
    if not payload.data:
        raise ImageDecodeError("Image payload is empty")

    try:
        with Image.open(io.BytesIO(payload.data)) as probe:
            probe.verify()
        image = Image.open(io.BytesIO(payload.data))
        image.load()
    except (OSError, SyntaxError, ValueError, EOFError, struct.error, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Cannot decode {payload.format} payload: {e}") from e

    if payload.width and payload.height and image.size != payload.size:
        logger.debug(f"Decoded size {image.size} differs from recorded {payload.size}")
    return image
