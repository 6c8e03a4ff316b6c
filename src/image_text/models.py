"""Data models for OCR fragments and their groups."""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .coordinates import NormalizedRect, Size
from .orientation import ImageOrientation


def new_id() -> str:
    """Random identifier for fragments and history items."""
    return uuid.uuid4().hex


class Fragment(BaseModel):
    """One OCR-recognized text unit with its normalized bounding box."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    text: str
    box: NormalizedRect
    confidence: float = 1.0

    @field_validator("box")
    @classmethod
    def box_must_be_normalized(cls, box: NormalizedRect) -> NormalizedRect:
        """Validate that origin and size lie in [0, 1]."""
        if not box.is_normalized:
            raise ValueError(f"box values must lie in [0, 1], got {box.as_list()}")
        return box


class FragmentGroup(BaseModel):
    """Fragments merged into one user-facing text unit.

    ordered_texts holds member strings left to right; box is the union of
    the member boxes.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    ordered_texts: tuple[str, ...]
    box: NormalizedRect
    fragment_ids: tuple[str, ...]

    @property
    def combined_text(self) -> str:
        """Member texts joined with a single space."""
        return " ".join(self.ordered_texts)


class ScanResult(BaseModel):
    """Fragments produced by one OCR invocation on one image."""

    model_config = ConfigDict(frozen=True)

    fragments: tuple[Fragment, ...] = ()
    image_size: Size
    orientation: ImageOrientation = ImageOrientation.UP
    error: Optional[str] = None

    @classmethod
    def empty(
        cls,
        image_size: Size,
        orientation: ImageOrientation = ImageOrientation.UP,
        error: Optional[str] = None,
    ) -> "ScanResult":
        """Result with no fragments, used for failed or blank scans."""
        return cls(
            fragments=(), image_size=image_size, orientation=orientation, error=error
        )

    @property
    def is_empty(self) -> bool:
        return not self.fragments

    def copy_all_text(self) -> str:
        """Every fragment's text in OCR order, one per line."""
        return "\n".join(fragment.text for fragment in self.fragments)
