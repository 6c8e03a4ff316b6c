"""Extract text from images and group OCR fragments into tappable regions.

Usage:
    from image_text import ScanSession, get_backend, Size, Point

    with ScanSession(get_backend()) as session:
        session.select_image(image_bytes)
        session.scan()
        for group in session.groups:
            print(group.combined_text)

        tapped = session.hit_test(Point(120, 340), Size(390, 844))

Grouping works without any OCR backend installed:
    from image_text import Fragment, NormalizedRect, group_fragments

    groups = group_fragments(fragments)
"""

from importlib.metadata import PackageNotFoundError, version

from .backends import OCRBackend, OCRError, get_backend
from .coordinates import (
    DisplayRect,
    NormalizedRect,
    Point,
    Size,
    aspect_fit,
    centering_offset,
    from_display_rect,
    horizontal_gap,
    pixel_box_to_normalized,
    to_display_rect,
    union,
    union_all,
    vertical_overlap,
)
from .grouping import (
    GroupingConfig,
    assemble_group,
    cluster,
    copy_all_text,
    group_fragments,
    should_group,
)
from .history import HistoryItem, HistoryStore
from .models import Fragment, FragmentGroup, ScanResult
from .orientation import (
    DisplayOrientation,
    ImageOrientation,
    normalize_orientation,
    orientation_from_exif,
)
from .overlay import OverlayItem, OverlayLayout, build_overlay, render_overlay
from .session import ScanSession

try:
    __version__ = version("image-text-extractor")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

__all__ = [
    "__version__",
    # Geometry
    "Size",
    "Point",
    "NormalizedRect",
    "DisplayRect",
    "aspect_fit",
    "centering_offset",
    "to_display_rect",
    "from_display_rect",
    "pixel_box_to_normalized",
    "union",
    "union_all",
    "vertical_overlap",
    "horizontal_gap",
    # Models
    "Fragment",
    "FragmentGroup",
    "ScanResult",
    # Grouping
    "GroupingConfig",
    "should_group",
    "cluster",
    "assemble_group",
    "group_fragments",
    "copy_all_text",
    # Orientation
    "DisplayOrientation",
    "ImageOrientation",
    "normalize_orientation",
    "orientation_from_exif",
    # Backends
    "OCRBackend",
    "OCRError",
    "get_backend",
    # Presentation
    "OverlayItem",
    "OverlayLayout",
    "build_overlay",
    "render_overlay",
    "ScanSession",
    # History
    "HistoryItem",
    "HistoryStore",
]
