"""Abstract base class for OCR backends."""

import io
from abc import ABC, abstractmethod

from PIL import Image

from ..models import Fragment
from ..orientation import ImageOrientation, upright


class OCRError(RuntimeError):
    """Raised when a backend cannot produce fragments for an image."""


class OCRBackend(ABC):
    """Abstract base class for OCR backends. Backends process SINGLE images only.

    Fragments come back with normalized, bottom-left origin boxes relative to
    the image as displayed (after applying orientation).
    """

    name: str = "base"

    @abstractmethod
    def recognize(
        self, image_bytes: bytes, orientation: ImageOrientation, language: str
    ) -> list[Fragment]:
        """Recognize text in a single image.

        Raises:
            OCRError: If recognition fails
        """
        ...


def open_upright(image_bytes: bytes, orientation: ImageOrientation) -> Image.Image:
    """Decode image bytes and rotate the pixels upright.

    Raises:
        OCRError: If the bytes are not a readable image
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (OSError, SyntaxError, ValueError) as e:
        raise OCRError(f"Failed to read image: {e}") from e

    return upright(image, orientation)
