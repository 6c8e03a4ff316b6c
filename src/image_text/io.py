"""I/O functions for loading fragments and exporting groups."""

import json
from collections import Counter
from pathlib import Path

from .coordinates import NormalizedRect
from .models import Fragment, FragmentGroup


def load_fragments(fragments_file: Path) -> list[Fragment]:
    """Load fragments from a JSON file.

    Two layouts are accepted:
    - a JSON list of {"text": ..., "box": [x, y, w, h]} objects
      (optional "id", "confidence")
    - an ocrmac-style record {"annotations": [[text, confidence, [x, y, w, h]], ...]}

    Boxes are normalized with a bottom-left origin.

    Args:
        fragments_file: Path to the JSON file

    Returns:
        List of fragments in file order

    Raises:
        ValueError: If the file does not match either layout, a box is not
            normalized, or two fragments share an id
    """
    with fragments_file.open("r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "annotations" in data:
        return [
            Fragment(text=text, box=_rect(coords), confidence=float(confidence))
            for text, confidence, coords in data["annotations"]
        ]

    if not isinstance(data, list):
        raise ValueError(f"Invalid fragments file format: {fragments_file}")

    fragments = []
    for entry in data:
        fields = {"text": entry["text"], "box": _rect(entry["box"])}
        if "id" in entry:
            fields["id"] = str(entry["id"])
        if "confidence" in entry:
            fields["confidence"] = float(entry["confidence"])
        fragments.append(Fragment(**fields))

    counts = Counter(fragment.id for fragment in fragments)
    duplicates = [id for id, count in counts.items() if count > 1]
    if duplicates:
        raise ValueError(f"Duplicate fragment id: {', '.join(duplicates)}")
    return fragments


def group_to_dict(group: FragmentGroup) -> dict:
    """JSON-ready representation of a group."""
    return {
        "id": group.id,
        "text": group.combined_text,
        "ordered_texts": list(group.ordered_texts),
        "box": group.box.as_list(),
        "fragment_ids": list(group.fragment_ids),
    }


def _rect(coords) -> NormalizedRect:
    if isinstance(coords, dict):
        coords = [coords["x"], coords["y"], coords["width"], coords["height"]]
    x, y, width, height = coords
    return NormalizedRect(
        x=float(x), y=float(y), width=float(width), height=float(height)
    )
