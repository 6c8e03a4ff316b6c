"""Spatial grouping of OCR fragments into copyable text units.

OCR engines report one box per word or line. Words printed on the same line
are merged here so a user can tap and copy the whole phrase:

1. should_group() decides whether two fragments sit on the same visual line
   and close enough to read as one phrase.
2. cluster() takes the connected components of the graph whose edges are
   the pairs accepted by should_group(). The predicate is not transitive;
   connectivity supplies the transitivity.
3. assemble_group() orders each component left to right and unions the
   member boxes.

All functions here are pure and safe to call from any thread.
"""

import uuid
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Sequence

from .coordinates import horizontal_gap, union_all, vertical_overlap
from .models import Fragment, FragmentGroup

# Namespace for group ids derived from member fragment ids
GROUP_ID_NAMESPACE = uuid.UUID("6f1c3a52-4d0e-4b8a-9f57-2b1f0c9e7d31")


@dataclass(frozen=True)
class GroupingConfig:
    """Thresholds for the proximity predicate, as multiples of the average box height.

    Attributes:
        same_line_overlap_ratio: Vertical overlap must exceed this to count as one line
        max_gap_ratio: Horizontal gap must stay below this to count as one phrase
    """

    same_line_overlap_ratio: float = 0.5
    max_gap_ratio: float = 1.5


DEFAULT_CONFIG = GroupingConfig()


def should_group(
    a: Fragment, b: Fragment, config: GroupingConfig = DEFAULT_CONFIG
) -> bool:
    """Check if two fragments belong in the same group.

    Symmetric in a and b. Biased toward over-grouping so that words on one
    printed line merge even when box detection is imperfect.
    """
    avg_height = (a.box.height + b.box.height) / 2.0

    overlap = vertical_overlap(a.box, b.box)
    gap = horizontal_gap(a.box, b.box)

    on_same_line = overlap > avg_height * config.same_line_overlap_ratio
    close_enough = gap < avg_height * config.max_gap_ratio

    return on_same_line and close_enough


def cluster(
    fragments: Iterable[Fragment], config: GroupingConfig = DEFAULT_CONFIG
) -> list[list[Fragment]]:
    """Partition fragments into connected components under should_group().

    Each component is grown by frontier expansion: every fragment taken from
    the frontier is compared against all fragments not yet assigned, and the
    joinable ones are assigned and queued. A component is complete when its
    frontier is empty.

    The set of components does not depend on input order. Components are
    returned in order of their first member's input position; members are in
    discovery order.

    Args:
        fragments: Fragments of one scan, with unique ids
        config: Grouping thresholds

    Returns:
        List of components, each a non-empty list of fragments

    Raises:
        ValueError: If two fragments share an id
    """
    items = list(fragments)
    _check_unique_ids(items)

    unassigned = list(range(len(items)))
    components: list[list[Fragment]] = []

    while unassigned:
        seed = unassigned.pop(0)
        component = [items[seed]]
        frontier = deque([seed])

        while frontier:
            current = items[frontier.popleft()]
            remaining = []
            for index in unassigned:
                if should_group(current, items[index], config):
                    component.append(items[index])
                    frontier.append(index)
                else:
                    remaining.append(index)
            unassigned = remaining

        components.append(component)

    return components


def assemble_group(component: Sequence[Fragment]) -> FragmentGroup:
    """Build a FragmentGroup from one component.

    Members are sorted by their left edge (stable, so ties keep component
    order). The group id is derived from the member ids, so assembling the
    same component again gives an identical group.

    Raises:
        ValueError: If the component is empty
    """
    if not component:
        raise ValueError("Cannot assemble an empty group")

    ordered = sorted(component, key=lambda fragment: fragment.box.x)
    box = union_all(fragment.box for fragment in ordered)

    member_key = "\x1f".join(sorted(fragment.id for fragment in ordered))
    group_id = uuid.uuid5(GROUP_ID_NAMESPACE, member_key).hex

    return FragmentGroup(
        id=group_id,
        ordered_texts=tuple(fragment.text for fragment in ordered),
        box=box,
        fragment_ids=tuple(fragment.id for fragment in ordered),
    )


def group_fragments(
    fragments: Iterable[Fragment], config: GroupingConfig = DEFAULT_CONFIG
) -> list[FragmentGroup]:
    """Cluster fragments and assemble every component into a group."""
    return [assemble_group(component) for component in cluster(fragments, config)]


def copy_all_text(groups: Iterable[FragmentGroup]) -> str:
    """Combined text of every group, one group per line."""
    return "\n".join(group.combined_text for group in groups)


def _check_unique_ids(fragments: Sequence[Fragment]) -> None:
    seen: set[str] = set()
    for fragment in fragments:
        if fragment.id in seen:
            raise ValueError(f"Duplicate fragment id: {fragment.id}")
        seen.add(fragment.id)
