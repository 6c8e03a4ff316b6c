"""Conversion of raw OCR engine output to fragments.

Kept free of engine imports so the conversions work (and are testable)
without ocrmac or google-cloud-vision installed.
"""

from typing import Optional

from ..coordinates import NormalizedRect, Size, pixel_box_to_normalized
from ..models import Fragment


def annotation_to_fragment(annotation) -> Fragment:
    """Convert an ocrmac annotation [text, confidence, [x, y, w, h]] to a Fragment."""
    text, confidence, coords = annotation[0], annotation[1], annotation[2]
    x, y, width, height = coords

    box = NormalizedRect(
        x=float(x), y=float(y), width=float(width), height=float(height)
    )
    return Fragment(text=text, box=box.clamped(), confidence=float(confidence))


def word_to_fragment(word, image_size: Size) -> Optional[Fragment]:
    """Convert a Vision word annotation to a Fragment.

    Vision reports pixel vertices with a top-left origin, which may fall
    outside the image; the box is clipped to it.

    Returns:
        Fragment, or None if the word has no usable box
    """
    vertices = word.bounding_box.vertices
    if not vertices:
        return None

    left = min(v.x for v in vertices)
    top = min(v.y for v in vertices)
    width = max(v.x for v in vertices) - left
    height = max(v.y for v in vertices) - top

    box = pixel_box_to_normalized(left, top, width, height, image_size)
    if box is None:
        return None

    # Vision leaves confidence unset for some responses
    confidence = getattr(word, "confidence", None)
    text = "".join(symbol.text for symbol in word.symbols)
    return Fragment(
        text=text,
        box=box.clamped(),
        confidence=1.0 if confidence is None else float(confidence),
    )
