"""Alignment, gap and overlap detection for a container's children."""

import math
from collections.abc import Sequence
from itertools import combinations

import numpy as np

from flexinfer.geometry import (
    bounding_frame,
    frames_overlap,
    get_node_frame,
    normalize_frame,
    sort_by_position,
)
from flexinfer.schema import (
    AlignHorizontal,
    AlignVertical,
    Frame,
    LayoutType,
    NodeSchema,
)

from .adaptive import resolve_overlap_tolerances
from .scored_alignment import detect_scored_alignment
from .split import split_to_column
from .tolerance import DEFAULT_TOLERANCES, LayoutTolerances
from .types import AlignmentResult


def _margin_tolerance(dimension: float, tol: LayoutTolerances) -> float:
    return max(tol.align_min, dimension * tol.align_ratio)


def _is_space_between(
    children: Sequence[NodeSchema],
    left_margin: float,
    right_margin: float,
    tolerance: float,
    tol: LayoutTolerances,
) -> bool:
    """Evenly spaced columns whose outer edges hug the container.

    Both outer margins must be strictly below the margin tolerance; evenly
    spread content with wider margins stays `center`.
    """
    if len(children) <= 2:
        return False
    if not (left_margin < tolerance and right_margin < tolerance):
        return False

    split = split_to_column(sort_by_position(children, LayoutType.ROW), tol)
    if not split.success or not split.gaps:
        return False

    mean_gap = float(np.mean(split.gaps))
    return all(abs(g - mean_gap) < tol.space_between_gap_spread for g in split.gaps)


def detect_alignment(
    parent_frame: Frame | None,
    children: Sequence[NodeSchema],
    tolerances: LayoutTolerances | None = None,
) -> AlignmentResult:
    """Detect how the children's bounding box sits inside the parent.

    Horizontal: margins within tolerance of each other read as `center`,
    a larger left margin as `right`, otherwise `left`. `space-between`
    overrides these for more than two evenly spaced columns touching both
    edges, meaning both outer margins are strictly below the tolerance.
    Vertical: `stretch` when every child is as tall as the parent, then the
    same margin rule yields `middle`, `bottom` or `top`.

    With `tolerances.scored_alignment` the scored analysis decides instead
    (`detect_scored_alignment`).

    Args:
        parent_frame: Container frame; `left`/`top` when missing.
        children: Children to align; frameless ones are ignored.
        tolerances: Thresholds; built-in defaults when omitted.

    Returns:
        AlignmentResult with the horizontal and vertical alignment.
    """
    tol = tolerances or DEFAULT_TOLERANCES
    if tol.scored_alignment:
        return detect_scored_alignment(parent_frame, children)

    frames = [f for f in map(get_node_frame, children) if f is not None]
    if parent_frame is None or not frames:
        return AlignmentResult(AlignHorizontal.LEFT, AlignVertical.TOP)

    parent = normalize_frame(parent_frame)
    content = bounding_frame(frames)

    left_margin = content.left - parent.left
    right_margin = parent.right - content.right
    top_margin = content.top - parent.top
    bottom_margin = parent.bottom - content.bottom

    h_tolerance = _margin_tolerance(parent.width, tol)
    if abs(left_margin - right_margin) <= h_tolerance:
        horizontal = AlignHorizontal.CENTER
    elif left_margin > right_margin:
        horizontal = AlignHorizontal.RIGHT
    else:
        horizontal = AlignHorizontal.LEFT

    if _is_space_between(children, left_margin, right_margin, h_tolerance, tol):
        horizontal = AlignHorizontal.SPACE_BETWEEN

    v_tolerance = _margin_tolerance(parent.height, tol)
    if all(abs(f.height - parent.height) <= v_tolerance for f in frames):
        vertical = AlignVertical.STRETCH
    elif abs(top_margin - bottom_margin) <= v_tolerance:
        vertical = AlignVertical.MIDDLE
    elif top_margin > bottom_margin:
        vertical = AlignVertical.BOTTOM
    else:
        vertical = AlignVertical.TOP

    return AlignmentResult(horizontal, vertical)


def calculate_optimal_gap(gaps: Sequence[float]) -> int:
    """Rounded minimum of the positive gaps; 0 when there are none."""
    positive = [g for g in gaps if g > 0]
    if not positive:
        return 0
    return math.floor(min(positive) + 0.5)


def needs_absolute_positioning(
    children: Sequence[NodeSchema],
    tolerances: LayoutTolerances | None = None,
) -> bool:
    """Check whether any two framed children overlap at the confirmation tolerance."""
    frames = [f for f in map(get_node_frame, children) if f is not None]
    _, confirm = resolve_overlap_tolerances(frames, tolerances)
    return any(frames_overlap(a, b, confirm) for a, b in combinations(frames, 2))


__all__ = [
    "detect_alignment",
    "calculate_optimal_gap",
    "needs_absolute_positioning",
]
