"""Image orientation handling.

Two tag families are involved:
- DisplayOrientation: how a picked or captured image is meant to be shown
  (0-7, the order cameras and photo pickers report it in)
- ImageOrientation: the canonical EXIF orientation (1-8) OCR engines expect

Mapping between them is total: anything unrecognized is treated as upright.
"""

import logging
from enum import IntEnum
from typing import Union

from PIL import Image

logger = logging.getLogger(__name__)

EXIF_ORIENTATION_TAG = 274


class DisplayOrientation(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    UP_MIRRORED = 4
    DOWN_MIRRORED = 5
    LEFT_MIRRORED = 6
    RIGHT_MIRRORED = 7


class ImageOrientation(IntEnum):
    """EXIF orientation values."""

    UP = 1
    UP_MIRRORED = 2
    DOWN = 3
    DOWN_MIRRORED = 4
    LEFT_MIRRORED = 5
    RIGHT = 6
    RIGHT_MIRRORED = 7
    LEFT = 8


_CANONICAL = {
    DisplayOrientation.UP: ImageOrientation.UP,
    DisplayOrientation.DOWN: ImageOrientation.DOWN,
    DisplayOrientation.LEFT: ImageOrientation.LEFT,
    DisplayOrientation.RIGHT: ImageOrientation.RIGHT,
    DisplayOrientation.UP_MIRRORED: ImageOrientation.UP_MIRRORED,
    DisplayOrientation.DOWN_MIRRORED: ImageOrientation.DOWN_MIRRORED,
    DisplayOrientation.LEFT_MIRRORED: ImageOrientation.LEFT_MIRRORED,
    DisplayOrientation.RIGHT_MIRRORED: ImageOrientation.RIGHT_MIRRORED,
}

# Same table Pillow's ImageOps.exif_transpose uses
_TRANSPOSE = {
    ImageOrientation.UP_MIRRORED: Image.Transpose.FLIP_LEFT_RIGHT,
    ImageOrientation.DOWN: Image.Transpose.ROTATE_180,
    ImageOrientation.DOWN_MIRRORED: Image.Transpose.FLIP_TOP_BOTTOM,
    ImageOrientation.LEFT_MIRRORED: Image.Transpose.TRANSPOSE,
    ImageOrientation.RIGHT: Image.Transpose.ROTATE_270,
    ImageOrientation.RIGHT_MIRRORED: Image.Transpose.TRANSVERSE,
    ImageOrientation.LEFT: Image.Transpose.ROTATE_90,
}


def normalize_orientation(
    tag: Union[DisplayOrientation, int, str, None],
) -> ImageOrientation:
    """Map a display orientation tag to the canonical orientation.

    Accepts a DisplayOrientation, its integer value, or its name
    (case-insensitive, "up_mirrored" or "up-mirrored"). Anything else maps
    to ImageOrientation.UP.
    """
    display: DisplayOrientation | None = None

    if isinstance(tag, DisplayOrientation):
        display = tag
    elif isinstance(tag, str):
        key = tag.strip().upper().replace("-", "_")
        display = DisplayOrientation.__members__.get(key)
    elif isinstance(tag, int) and not isinstance(tag, bool):
        try:
            display = DisplayOrientation(tag)
        except ValueError:
            display = None

    if display is None:
        logger.debug("Unrecognized orientation %r, treating as upright", tag)
        return ImageOrientation.UP

    return _CANONICAL[display]


def orientation_from_exif(image: Image.Image) -> ImageOrientation:
    """Read the EXIF orientation of an image, UP if missing or invalid."""
    try:
        value = image.getexif().get(EXIF_ORIENTATION_TAG)
    except (AttributeError, OSError, SyntaxError) as e:
        logger.debug("Could not read EXIF orientation: %s", e)
        return ImageOrientation.UP

    try:
        return ImageOrientation(value)
    except (TypeError, ValueError):
        return ImageOrientation.UP


def upright(image: Image.Image, orientation: ImageOrientation) -> Image.Image:
    """Return the image with pixels rotated/flipped into upright orientation."""
    method = _TRANSPOSE.get(orientation)
    if method is None:
        return image
    return image.transpose(method)
