"""Frame geometry utilities.

Pure functions over axis-aligned boxes. Every function accepts a `Frame`
or a plain mapping with frame keys, normalized or raw, and never raises:
degenerate input (zero-area frames) simply measures as zero overlap.

Tolerances are in pixels. A positive tolerance grows the compared ranges,
a negative one shrinks them, which is how "touching" is told apart from
"meaningfully overlapping".
"""

from collections.abc import Iterable, Mapping, Sequence
from numbers import Real
from typing import Any

from flexinfer.schema import Frame, LayoutType, NodeSchema

FrameLike = Frame | Mapping[str, Any]


def _num(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and value == value


def normalize_frame(frame: FrameLike) -> Frame:
    """Fill in `right`/`bottom`; missing left/top/width/height default to 0."""
    if isinstance(frame, Frame):
        left, top, width, height = frame.left, frame.top, frame.width, frame.height
    else:
        left, top, width, height = (
            frame.get(k) if _num(frame.get(k)) else 0
            for k in ("left", "top", "width", "height")
        )

    return Frame(
        left=left,
        top=top,
        width=width,
        height=height,
        right=left + width,
        bottom=top + height,
    )


def is_valid_frame(frame: FrameLike | None) -> bool:
    """Check that a frame has numeric edges and non-negative dimensions."""
    if frame is None:
        return False
    if isinstance(frame, Frame):
        values = (frame.left, frame.top, frame.width, frame.height)
    else:
        values = tuple(frame.get(k) for k in ("left", "top", "width", "height"))
    if not all(_num(v) for v in values):
        return False
    return values[2] >= 0 and values[3] >= 0


def get_node_frame(node: NodeSchema) -> Frame | None:
    """Return the node's normalized frame, or None when absent or invalid."""
    if not is_valid_frame(node.frame):
        return None
    return normalize_frame(node.frame)


def ranges_overlap(
    start1: float, end1: float, start2: float, end2: float, tolerance: float = 0
) -> bool:
    """Open-interval overlap test with the ranges grown by `tolerance`."""
    return start1 - tolerance < end2 and end1 + tolerance > start2


def _range_overlap(start1: float, end1: float, start2: float, end2: float) -> float:
    return max(0.0, min(end1, end2) - max(start1, start2))


def frames_overlap_horizontally(
    frame1: FrameLike, frame2: FrameLike, tolerance: float = 0
) -> bool:
    """Check whether the horizontal extents of two frames overlap."""
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    return ranges_overlap(f1.left, f1.right, f2.left, f2.right, tolerance)


def frames_overlap_vertically(
    frame1: FrameLike, frame2: FrameLike, tolerance: float = 0
) -> bool:
    """Check whether the vertical extents of two frames overlap."""
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    return ranges_overlap(f1.top, f1.bottom, f2.top, f2.bottom, tolerance)


def frames_overlap(frame1: FrameLike, frame2: FrameLike, tolerance: float = 0) -> bool:
    """Check whether two frames intersect on both axes."""
    return frames_overlap_horizontally(
        frame1, frame2, tolerance
    ) and frames_overlap_vertically(frame1, frame2, tolerance)


def horizontal_overlap(frame1: FrameLike, frame2: FrameLike) -> float:
    """Width of the shared horizontal extent (0 when disjoint)."""
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    return _range_overlap(f1.left, f1.right, f2.left, f2.right)


def vertical_overlap(frame1: FrameLike, frame2: FrameLike) -> float:
    """Height of the shared vertical extent (0 when disjoint)."""
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    return _range_overlap(f1.top, f1.bottom, f2.top, f2.bottom)


def horizontal_gap(frame1: FrameLike, frame2: FrameLike) -> float:
    """Signed horizontal distance between two frames.

    Positive values are whitespace; negative values are the overlap depth.
    """
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    if f1.right <= f2.left:
        return f2.left - f1.right
    if f2.right <= f1.left:
        return f1.left - f2.right
    return -horizontal_overlap(f1, f2)


def vertical_gap(frame1: FrameLike, frame2: FrameLike) -> float:
    """Signed vertical distance between two frames.

    Positive values are whitespace; negative values are the overlap depth.
    """
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    if f1.bottom <= f2.top:
        return f2.top - f1.bottom
    if f2.bottom <= f1.top:
        return f1.top - f2.bottom
    return -vertical_overlap(f1, f2)


def bounding_frame(frames: Iterable[FrameLike]) -> Frame | None:
    """Axis-aligned union of frames; None for an empty input."""
    normalized = [normalize_frame(f) for f in frames]
    if not normalized:
        return None

    left = min(f.left for f in normalized)
    top = min(f.top for f in normalized)
    right = max(f.right for f in normalized)
    bottom = max(f.bottom for f in normalized)

    return Frame(
        left=left,
        top=top,
        width=right - left,
        height=bottom - top,
        right=right,
        bottom=bottom,
    )


def relative_frame(child: FrameLike, parent: FrameLike) -> Frame:
    """Express `child` in the parent's local coordinate space."""
    c, p = normalize_frame(child), normalize_frame(parent)
    return Frame(
        left=c.left - p.left,
        top=c.top - p.top,
        width=c.width,
        height=c.height,
        right=c.right - p.left,
        bottom=c.bottom - p.top,
    )


def frame_contains(parent: FrameLike, child: FrameLike, tolerance: float = 0) -> bool:
    """Check that `child` lies within `parent`, edges widened by `tolerance`."""
    p, c = normalize_frame(parent), normalize_frame(child)
    return (
        c.left >= p.left - tolerance
        and c.top >= p.top - tolerance
        and c.right <= p.right + tolerance
        and c.bottom <= p.bottom + tolerance
    )


def are_horizontally_aligned(
    frame1: FrameLike, frame2: FrameLike, tolerance: float = 2
) -> bool:
    """Same top and height, within tolerance (frames sit on one row line)."""
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    return abs(f1.top - f2.top) <= tolerance and abs(f1.height - f2.height) <= tolerance


def are_vertically_aligned(
    frame1: FrameLike, frame2: FrameLike, tolerance: float = 2
) -> bool:
    """Same left and width, within tolerance (frames sit on one column line)."""
    f1, f2 = normalize_frame(frame1), normalize_frame(frame2)
    return abs(f1.left - f2.left) <= tolerance and abs(f1.width - f2.width) <= tolerance


def aligned(frame1: FrameLike, frame2: FrameLike, tolerance: float = 2) -> bool:
    """Frames share a row line or a column line."""
    return are_horizontally_aligned(
        frame1, frame2, tolerance
    ) or are_vertically_aligned(frame1, frame2, tolerance)


def calculate_padding(container: FrameLike, content: FrameLike) -> dict[str, float]:
    """Non-negative insets from the container edges to the content box."""
    outer, inner = normalize_frame(container), normalize_frame(content)
    return {
        "top": max(0.0, inner.top - outer.top),
        "right": max(0.0, outer.right - inner.right),
        "bottom": max(0.0, outer.bottom - inner.bottom),
        "left": max(0.0, inner.left - outer.left),
    }


def sort_by_position(
    nodes: Sequence[NodeSchema], axis: LayoutType | str = LayoutType.ROW
) -> list[NodeSchema]:
    """Stable sort by primary axis, then secondary axis.

    `row` orders by left then top; `column` orders by top then left.
    Nodes without a usable frame go last, keeping their input order.
    """

    def key(node: NodeSchema) -> tuple[int, float, float]:
        frame = get_node_frame(node)
        if frame is None:
            return (1, 0.0, 0.0)
        if axis == LayoutType.COLUMN:
            return (0, frame.top, frame.left)
        return (0, frame.left, frame.top)

    return sorted(nodes, key=key)


def can_arrange_in_row(nodes: Sequence[NodeSchema], tolerance: float = 0) -> bool:
    """Check that nodes read as one left-to-right sequence.

    After sorting by left edge, a node that starts before its predecessor
    ends must not also share vertical space with it.
    """
    if len(nodes) <= 1:
        return True

    ordered = sort_by_position(nodes, LayoutType.ROW)
    for prev_node, node in zip(ordered, ordered[1:]):
        prev, curr = get_node_frame(prev_node), get_node_frame(node)
        if prev is None or curr is None:
            continue
        if curr.left < prev.right - tolerance and frames_overlap_vertically(
            prev, curr, -tolerance
        ):
            return False
    return True


def can_arrange_in_column(nodes: Sequence[NodeSchema], tolerance: float = 0) -> bool:
    """Check that nodes read as one top-to-bottom sequence.

    After sorting by top edge, a node that starts before its predecessor
    ends must not also share horizontal space with it.
    """
    if len(nodes) <= 1:
        return True

    ordered = sort_by_position(nodes, LayoutType.COLUMN)
    for prev_node, node in zip(ordered, ordered[1:]):
        prev, curr = get_node_frame(prev_node), get_node_frame(node)
        if prev is None or curr is None:
            continue
        if curr.top < prev.bottom - tolerance and frames_overlap_horizontally(
            prev, curr, -tolerance
        ):
            return False
    return True


__all__ = [
    "FrameLike",
    "normalize_frame",
    "is_valid_frame",
    "get_node_frame",
    "ranges_overlap",
    "frames_overlap_horizontally",
    "frames_overlap_vertically",
    "frames_overlap",
    "horizontal_overlap",
    "vertical_overlap",
    "horizontal_gap",
    "vertical_gap",
    "bounding_frame",
    "relative_frame",
    "frame_contains",
    "are_horizontally_aligned",
    "are_vertically_aligned",
    "aligned",
    "calculate_padding",
    "sort_by_position",
    "can_arrange_in_row",
    "can_arrange_in_column",
]
