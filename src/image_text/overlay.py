"""Overlay layout and rendering for grouped text.

Given the groups of a scan and the size of the area the image is drawn
into (aspect-fit, centred), build_overlay() computes for every group:
- rect: the group box in display pixels
- highlight: rect padded so the cut-out in the dimmed mask does not clip glyphs
- tap_target: rect padded and grown to a minimum touch size
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from PIL import Image, ImageDraw

from .coordinates import (
    DisplayRect,
    Point,
    Size,
    aspect_fit,
    centering_offset,
    to_display_rect,
)
from .models import FragmentGroup

HIGHLIGHT_PADDING_X = 4
HIGHLIGHT_PADDING_Y = 2
HIGHLIGHT_CORNER_RADIUS = 6
MIN_TAP_WIDTH = 30
MIN_TAP_HEIGHT = 18


@dataclass(frozen=True)
class OverlayItem:
    group: FragmentGroup
    rect: DisplayRect
    highlight: DisplayRect
    tap_target: DisplayRect


@dataclass(frozen=True)
class OverlayLayout:
    """Display-space geometry for every group of a scan."""

    container_size: Size
    fit_size: Size
    offset: Point
    items: tuple[OverlayItem, ...]

    @property
    def image_rect(self) -> DisplayRect:
        """Where the fitted image sits inside the container."""
        return DisplayRect(
            x=self.offset.x,
            y=self.offset.y,
            width=self.fit_size.width,
            height=self.fit_size.height,
        )

    def hit_test(self, point: Point) -> Optional[FragmentGroup]:
        """Group whose tap target contains point.

        Tap targets can overlap once grown to the minimum size. Items are
        drawn in order, so the topmost (last) containing target wins.
        """
        for item in reversed(self.items):
            if item.tap_target.contains(point):
                return item.group
        return None


def build_overlay(
    groups: Iterable[FragmentGroup], image_size: Size, container_size: Size
) -> Optional[OverlayLayout]:
    """Lay out groups over an image drawn aspect-fit inside a container.

    Args:
        groups: Groups of the current scan
        image_size: Image size in pixels
        container_size: Size of the drawing area

    Returns:
        OverlayLayout, or None if either size is degenerate
    """
    fit_size = aspect_fit(image_size, container_size)
    if fit_size is None:
        return None

    offset = centering_offset(container_size, fit_size)

    items = []
    for group in groups:
        rect = to_display_rect(group.box, image_size, fit_size, offset)
        highlight = rect.expanded(HIGHLIGHT_PADDING_X, HIGHLIGHT_PADDING_Y)
        items.append(
            OverlayItem(
                group=group,
                rect=rect,
                highlight=highlight,
                tap_target=highlight.with_min_size(MIN_TAP_WIDTH, MIN_TAP_HEIGHT),
            )
        )

    return OverlayLayout(
        container_size=container_size,
        fit_size=fit_size,
        offset=offset,
        items=tuple(items),
    )


def render_overlay(
    image: Image.Image, layout: OverlayLayout, dim_opacity: float = 0.5
) -> Image.Image:
    """Draw the image into its container and dim everything except the highlights.

    Args:
        image: Source image (upright)
        layout: Layout built for this image
        dim_opacity: Opacity [0-1] of the black mask

    Returns:
        New RGB image of the container size
    """
    width = max(1, round(layout.container_size.width))
    height = max(1, round(layout.container_size.height))

    canvas = Image.new("RGB", (width, height), "white")
    fitted = image.convert("RGB").resize(
        (max(1, round(layout.fit_size.width)), max(1, round(layout.fit_size.height)))
    )
    canvas.paste(fitted, (round(layout.offset.x), round(layout.offset.y)))

    alpha = max(0, min(255, round(dim_opacity * 255)))
    mask = Image.new("L", (width, height), alpha)
    draw = ImageDraw.Draw(mask)
    for item in layout.items:
        # Cut a hole in the mask over each text area
        draw.rounded_rectangle(
            item.highlight.as_box(), radius=HIGHLIGHT_CORNER_RADIUS, fill=0
        )

    black = Image.new("RGB", (width, height), "black")
    return Image.composite(black, canvas, mask)
