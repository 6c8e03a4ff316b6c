"""Coordinate system conversions for OCR bounding boxes.

This module converts between the normalized coordinates reported by OCR
engines and the pixel coordinates of an image drawn aspect-fit inside a
container (a window, a view, a rendered PNG).

Coordinate System Notes:
- Normalized: fractions [0-1] of the image size, origin at the BOTTOM-left
  (increasing y moves toward the top of the image)
- Display: pixels relative to the container, origin at the TOP-left
- Pixel: pixels relative to the image itself, origin at the top-left
  (what pixel-space OCR engines such as Google Vision report)

Degenerate (zero-sized) inputs never raise; the affected conversions return
None so callers can skip rendering.
"""

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class Size:
    """Width and height in pixels."""

    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        """True if either side is zero or negative."""
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Point:
    """A position in display pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class NormalizedRect:
    """Rectangle in normalized image coordinates.

    Origin is bottom-left (0,0). All values are fractions of the image size
    and independent of pixel density.

    Attributes:
        x: Left edge fraction
        y: Bottom edge fraction
        width: Width fraction
        height: Height fraction
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_normalized(self) -> bool:
        """True if origin and size all lie in [0, 1]."""
        return all(0.0 <= value <= 1.0 for value in self.as_list())

    @classmethod
    def from_edges(
        cls, min_x: float, min_y: float, max_x: float, max_y: float
    ) -> "NormalizedRect":
        """Create a rect from its edges."""
        return cls(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    def clamped(self) -> "NormalizedRect":
        """Rect clipped to the unit square.

        OCR engines occasionally report boxes that poke past the image edge.
        """
        min_x = min(max(self.min_x, 0.0), 1.0)
        min_y = min(max(self.min_y, 0.0), 1.0)
        max_x = min(max(self.max_x, min_x), 1.0)
        max_y = min(max(self.max_y, min_y), 1.0)
        return NormalizedRect.from_edges(min_x, min_y, max_x, max_y)

    def as_list(self) -> list[float]:
        """Return [x, y, width, height], the ocrmac annotation layout."""
        return [self.x, self.y, self.width, self.height]


@dataclass(frozen=True)
class DisplayRect:
    """Rectangle in display pixel coordinates.

    Origin is top-left (0,0) of the container.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2.0

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2.0

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        """Check if a point lies inside this rect (edges included)."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def expanded(self, dx: float, dy: float) -> "DisplayRect":
        """Grow by dx on the left and right and by dy on the top and bottom."""
        return DisplayRect(
            x=self.x - dx,
            y=self.y - dy,
            width=self.width + 2 * dx,
            height=self.height + 2 * dy,
        )

    def with_min_size(self, min_width: float, min_height: float) -> "DisplayRect":
        """Grow around the same centre until at least min_width x min_height."""
        width = max(self.width, min_width)
        height = max(self.height, min_height)
        return DisplayRect(
            x=self.mid_x - width / 2.0,
            y=self.mid_y - height / 2.0,
            width=width,
            height=height,
        )

    def as_box(self) -> tuple[float, float, float, float]:
        """Return (left, top, right, bottom), the layout Pillow draws with."""
        return (self.left, self.top, self.right, self.bottom)


def aspect_fit(content: Size, container: Size) -> Optional[Size]:
    """Largest size with content's aspect ratio that fits inside container.

    Args:
        content: Size of the content (usually the image in pixels)
        container: Size of the area to draw into

    Returns:
        Fitted size, or None if either size is degenerate

    Example:
        >>> aspect_fit(Size(100, 100), Size(300, 600))
        Size(width=300.0, height=300.0)
    """
    if content.is_degenerate or container.is_degenerate:
        return None

    scale = min(container.width / content.width, container.height / content.height)
    return Size(width=content.width * scale, height=content.height * scale)


def centering_offset(container: Size, fit: Size) -> Point:
    """Offset that centres a fitted size inside its container."""
    return Point(
        x=(container.width - fit.width) / 2.0,
        y=(container.height - fit.height) / 2.0,
    )


def to_display_rect(
    box: NormalizedRect, image_size: Size, fit_size: Size, offset: Point
) -> DisplayRect:
    """Convert a normalized (bottom-left origin) box to display pixels.

    The vertical axis is flipped: the top edge of the box in display space is
    (1 - y - height) of the fitted height below the top of the image.

    image_size is accepted so callers pass the same triple to both directions
    of the conversion; normalized coordinates do not depend on it.

    Args:
        box: Normalized box from the OCR engine
        image_size: Original image size in pixels
        fit_size: Aspect-fit size of the image inside the container
        offset: Top-left corner of the fitted image inside the container

    Returns:
        DisplayRect in container pixel coordinates
    """
    return DisplayRect(
        x=box.x * fit_size.width + offset.x,
        y=(1.0 - box.y - box.height) * fit_size.height + offset.y,
        width=box.width * fit_size.width,
        height=box.height * fit_size.height,
    )


def from_display_rect(
    rect: DisplayRect, image_size: Size, fit_size: Size, offset: Point
) -> Optional[NormalizedRect]:
    """Inverse of to_display_rect.

    Returns:
        NormalizedRect, or None if fit_size is degenerate
    """
    if fit_size.is_degenerate:
        return None

    width = rect.width / fit_size.width
    height = rect.height / fit_size.height
    return NormalizedRect(
        x=(rect.x - offset.x) / fit_size.width,
        y=1.0 - (rect.y - offset.y) / fit_size.height - height,
        width=width,
        height=height,
    )


def pixel_box_to_normalized(
    left: float, top: float, width: float, height: float, image_size: Size
) -> Optional[NormalizedRect]:
    """Convert a top-left pixel box to a bottom-left normalized rect.

    Args:
        left: Left edge in image pixels
        top: Top edge in image pixels (0 = top of image)
        width: Box width in pixels
        height: Box height in pixels
        image_size: Image size in pixels

    Returns:
        NormalizedRect, or None if image_size is degenerate
    """
    if image_size.is_degenerate:
        return None

    return NormalizedRect(
        x=left / image_size.width,
        y=1.0 - (top + height) / image_size.height,
        width=width / image_size.width,
        height=height / image_size.height,
    )


def union(a: NormalizedRect, b: NormalizedRect) -> NormalizedRect:
    """Smallest rect containing both a and b."""
    return NormalizedRect.from_edges(
        min_x=min(a.min_x, b.min_x),
        min_y=min(a.min_y, b.min_y),
        max_x=max(a.max_x, b.max_x),
        max_y=max(a.max_y, b.max_y),
    )


def union_all(rects: Iterable[NormalizedRect]) -> Optional[NormalizedRect]:
    """Union of every rect, or None for an empty iterable."""
    result: Optional[NormalizedRect] = None
    for rect in rects:
        result = rect if result is None else union(result, rect)
    return result


def vertical_overlap(a: NormalizedRect, b: NormalizedRect) -> float:
    """Length of the shared vertical extent, 0 if the boxes do not overlap."""
    return max(0.0, min(a.max_y, b.max_y) - max(a.min_y, b.min_y))


def horizontal_gap(a: NormalizedRect, b: NormalizedRect) -> float:
    """Distance between the horizontal extents, 0 if they overlap."""
    if a.max_x < b.min_x:
        return b.min_x - a.max_x
    if b.max_x < a.min_x:
        return a.min_x - b.max_x
    return 0.0
