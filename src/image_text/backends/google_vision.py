"""Google Cloud Vision API backend for OCR processing."""

import io
import json
import logging
import os

from google.cloud import vision
from google.oauth2 import service_account

from ..coordinates import Size
from ..models import Fragment
from ..orientation import ImageOrientation
from .base import OCRBackend, OCRError, open_upright
from .conversion import word_to_fragment

logger = logging.getLogger(__name__)


class GoogleVisionBackend(OCRBackend):
    """Google Vision API backend using service account JSON for credentials."""

    name = "google_vision"

    def __init__(self, credentials_json: str | None = None):
        """Initialize with credentials.

        Args:
            credentials_json: JSON string with service account credentials.
                            If not provided, reads from SERVICE_ACCOUNT_JSON env var.
        """
        if credentials_json is None:
            credentials_json = os.environ.get("SERVICE_ACCOUNT_JSON")

        if credentials_json:
            service_account_info = json.loads(credentials_json)
            credentials = service_account.Credentials.from_service_account_info(
                service_account_info
            )
            self.client = vision.ImageAnnotatorClient(credentials=credentials)
        else:
            # Fall back to default credentials (GOOGLE_APPLICATION_CREDENTIALS)
            self.client = vision.ImageAnnotatorClient()

    def recognize(
        self, image_bytes: bytes, orientation: ImageOrientation, language: str
    ) -> list[Fragment]:
        """Recognize words with document_text_detection.

        Vision reports pixel vertices with a top-left origin; each word is
        converted to a normalized, bottom-left box.

        Raises:
            OCRError: If the image cannot be read or the API reports an error
        """
        image = open_upright(image_bytes, orientation)
        image_size = Size(width=image.width, height=image.height)

        buffer = io.BytesIO()
        image.convert("RGB").save(buffer, format="PNG")

        # Vision wants bare language codes ("en", not "en-US")
        image_context = {"language_hints": [language.split("-")[0]]}
        try:
            response = self.client.document_text_detection(
                image=vision.Image(content=buffer.getvalue()),
                image_context=image_context,
            )
        except Exception as e:
            raise OCRError(f"Google Vision request failed: {e}") from e

        if response.error.message:
            raise OCRError(f"Google Vision API error: {response.error.message}")

        fragments = []
        if response.full_text_annotation:
            for page in response.full_text_annotation.pages:
                for block in page.blocks:
                    for paragraph in block.paragraphs:
                        for word in paragraph.words:
                            fragment = word_to_fragment(word, image_size)
                            if fragment is not None:
                                fragments.append(fragment)

        logger.debug("Google Vision recognized %d words", len(fragments))
        return fragments
