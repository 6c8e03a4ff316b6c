"""Scan session: the current image, its OCR result, and derived groups.

OCR runs on a worker thread and delivers exactly one ScanResult per scan.
A newer scan supersedes older ones: results from a superseded scan are still
returned through their own future but are never applied to the session
(last result wins). Groups are recomputed from the current fragments on
every access, never patched in place.
"""

import io
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Union

from PIL import Image

from .backends.base import OCRBackend
from .coordinates import Point, Size
from .grouping import DEFAULT_CONFIG, GroupingConfig, copy_all_text, group_fragments
from .models import FragmentGroup, ScanResult
from .orientation import (
    DisplayOrientation,
    ImageOrientation,
    normalize_orientation,
    orientation_from_exif,
)
from .overlay import OverlayLayout, build_overlay

logger = logging.getLogger(__name__)


class ScanSession:
    """State for one user scanning one image at a time."""

    def __init__(
        self,
        backend: OCRBackend,
        executor: Optional[ThreadPoolExecutor] = None,
        config: GroupingConfig = DEFAULT_CONFIG,
        language: str = "en-US",
    ):
        self.backend = backend
        self.config = config
        self.language = language
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="ocr"
        )
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._generation = 0
        self._image_bytes: Optional[bytes] = None
        self._image_size: Optional[Size] = None
        self._orientation = ImageOrientation.UP
        self._result: Optional[ScanResult] = None

    def __enter__(self) -> "ScanSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    @property
    def image_size(self) -> Optional[Size]:
        """Size of the current image as displayed (orientation applied)."""
        return self._image_size

    @property
    def result(self) -> Optional[ScanResult]:
        """Result of the latest applied scan, None before the first scan completes."""
        return self._result

    @property
    def groups(self) -> list[FragmentGroup]:
        """Groups of the current result, recomputed on every access."""
        result = self._result
        if result is None:
            return []
        return group_fragments(result.fragments, self.config)

    def select_image(
        self,
        image_bytes: bytes,
        orientation: Union[DisplayOrientation, int, str, None] = None,
    ) -> None:
        """Replace the current image and discard the previous scan.

        Args:
            image_bytes: Encoded image
            orientation: Display orientation tag; if omitted, read from EXIF

        Raises:
            ValueError: If the bytes are not a readable image
        """
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                if orientation is None:
                    canonical = orientation_from_exif(image)
                else:
                    canonical = normalize_orientation(orientation)
                width, height = image.size
        except (OSError, SyntaxError) as e:
            raise ValueError(f"Failed to read image: {e}") from e

        # Rotations by 90 degrees swap the displayed width and height
        if canonical >= ImageOrientation.LEFT_MIRRORED:
            width, height = height, width

        with self._lock:
            self._generation += 1
            self._image_bytes = image_bytes
            self._image_size = Size(width=width, height=height)
            self._orientation = canonical
            self._result = None

    def start_scan(self) -> "Future[ScanResult]":
        """Run OCR on the current image in the background.

        Returns:
            Future resolving to the ScanResult of this scan. It never raises
            for OCR failures; those resolve to an empty result.

        Raises:
            RuntimeError: If no image has been selected
        """
        with self._lock:
            if self._image_bytes is None or self._image_size is None:
                raise RuntimeError("No image selected")
            self._generation += 1
            generation = self._generation
            image_bytes = self._image_bytes
            image_size = self._image_size
            orientation = self._orientation
            self._result = None

        return self._executor.submit(
            self._run_scan, generation, image_bytes, image_size, orientation
        )

    def scan(self) -> ScanResult:
        """Run OCR on the current image and wait for the result."""
        return self.start_scan().result()

    def layout(self, container_size: Size) -> Optional[OverlayLayout]:
        """Overlay layout for the current groups.

        None without an image or when either size is degenerate.
        """
        if self._image_size is None:
            return None
        return build_overlay(self.groups, self._image_size, container_size)

    def hit_test(self, point: Point, container_size: Size) -> Optional[FragmentGroup]:
        """Group under a tap at point, if any."""
        layout = self.layout(container_size)
        if layout is None:
            return None
        return layout.hit_test(point)

    def copy_all_text(self) -> str:
        """Combined text of every group, one per line."""
        return copy_all_text(self.groups)

    def _run_scan(
        self,
        generation: int,
        image_bytes: bytes,
        image_size: Size,
        orientation: ImageOrientation,
    ) -> ScanResult:
        try:
            fragments = self.backend.recognize(image_bytes, orientation, self.language)
            result = ScanResult(
                fragments=tuple(fragments),
                image_size=image_size,
                orientation=orientation,
            )
        except Exception as e:
            logger.warning("OCR failed with %s backend: %s", self.backend.name, e)
            result = ScanResult.empty(image_size, orientation, error=str(e))

        if result.is_empty and result.error is None:
            logger.info("No text detected")

        with self._lock:
            if generation == self._generation:
                self._result = result
            else:
                logger.debug("Discarding result of superseded scan %d", generation)

        return result
