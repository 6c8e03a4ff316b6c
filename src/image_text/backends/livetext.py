"""macOS LiveText OCR backend using ocrmac."""

import logging
import os
import tempfile
from pathlib import Path

from ..models import Fragment
from ..orientation import ImageOrientation
from .base import OCRBackend, OCRError, open_upright
from .conversion import annotation_to_fragment

logger = logging.getLogger(__name__)

# Import ocrmac only on macOS
try:
    from ocrmac import ocrmac

    OCRMAC_AVAILABLE = True
except ImportError:
    ocrmac = None
    OCRMAC_AVAILABLE = False


class LiveTextBackend(OCRBackend):
    """macOS LiveText backend using ocrmac library.

    The ocrmac library returns annotations in a specific format:
    - Coordinates are fractional (0.0-1.0)
    - Y-axis is bottom-referenced (0 = bottom, 1 = top)
    - Format: [text, confidence, [x, y, width, height]]

    That is already the normalized box fragments carry; boxes only get
    clipped to the image.
    """

    name = "livetext"

    def __init__(
        self, recognition_level: str = "accurate", language_correction: bool = True
    ):
        if not OCRMAC_AVAILABLE:
            raise RuntimeError(
                "ocrmac is not available. "
                "This backend requires macOS with ocrmac installed."
            )
        self.recognition_level = recognition_level
        self.language_correction = language_correction

    def recognize(
        self, image_bytes: bytes, orientation: ImageOrientation, language: str
    ) -> list[Fragment]:
        """Recognize text with macOS LiveText.

        Args:
            image_bytes: Image data as bytes
            orientation: Canonical orientation of the image
            language: Language preference (e.g., "en-US")

        Returns:
            Fragments with normalized, bottom-left boxes

        Raises:
            OCRError: If the image cannot be read or OCR fails
        """
        image = open_upright(image_bytes, orientation)

        # ocrmac.OCR works from a file path, so write the upright image to a temp file
        temp_fd, temp_path = tempfile.mkstemp(suffix=".png")
        try:
            image.convert("RGB").save(temp_path, format="PNG")

            try:
                annotations = ocrmac.OCR(
                    temp_path,
                    framework="livetext",
                    recognition_level=self.recognition_level,
                    language_preference=[language],
                    confidence_threshold=0.0,
                ).recognize()
            except Exception as e:
                raise OCRError(f"OCR processing failed: {e}") from e

        finally:
            os.close(temp_fd)
            Path(temp_path).unlink(missing_ok=True)

        fragments = [annotation_to_fragment(annotation) for annotation in annotations]
        logger.debug("LiveText recognized %d fragments", len(fragments))
        return fragments
