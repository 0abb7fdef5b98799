"""Frame geometry utilities: overlap, gaps, containment, alignment, ordering."""

from .lib import (
    FrameLike,
    aligned,
    are_horizontally_aligned,
    are_vertically_aligned,
    bounding_frame,
    calculate_padding,
    can_arrange_in_column,
    can_arrange_in_row,
    frame_contains,
    frames_overlap,
    frames_overlap_horizontally,
    frames_overlap_vertically,
    get_node_frame,
    horizontal_gap,
    horizontal_overlap,
    is_valid_frame,
    normalize_frame,
    ranges_overlap,
    relative_frame,
    sort_by_position,
    vertical_gap,
    vertical_overlap,
)

__all__ = [
    "FrameLike",
    # Normalization
    "normalize_frame",
    "is_valid_frame",
    "get_node_frame",
    # Overlap and distance
    "ranges_overlap",
    "frames_overlap_horizontally",
    "frames_overlap_vertically",
    "frames_overlap",
    "horizontal_overlap",
    "vertical_overlap",
    "horizontal_gap",
    "vertical_gap",
    # Composition
    "bounding_frame",
    "relative_frame",
    "calculate_padding",
    # Predicates
    "frame_contains",
    "are_horizontally_aligned",
    "are_vertically_aligned",
    "aligned",
    # Ordering
    "sort_by_position",
    "can_arrange_in_row",
    "can_arrange_in_column",
]
