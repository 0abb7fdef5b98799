"""Scored alignment analysis.

Every candidate alignment on an axis receives a 0-1 score from the margins,
gaps and fill of the children inside their container. The best candidate
wins, and its lead over the runner-up sets the confidence.

The analysis distinguishes alignments the layout annotation cannot carry
(`space-around`, `space-evenly`, `baseline`); the `normalize_*` functions
fold them into the annotation vocabulary.
"""

from collections.abc import Sequence

import numpy as np

from flexinfer.geometry import bounding_frame, get_node_frame, normalize_frame
from flexinfer.schema import (
    AlignHorizontal,
    AlignVertical,
    ExtendedAlignHorizontal,
    ExtendedAlignVertical,
    Frame,
    NodeSchema,
)

from .stats import calculate_cv
from .types import AlignmentAnalysis, AlignmentResult, ScoredAlignment

_EPSILON = 0.001


def _edges(horizontal: bool) -> tuple[str, str, str]:
    return ("left", "right", "width") if horizontal else ("top", "bottom", "height")


def _spacing(
    parent: Frame, frames: Sequence[Frame], horizontal: bool
) -> tuple[float, list[float], float]:
    """Leading margin, inner gaps and trailing margin of frames sorted by start."""
    start, end, _ = _edges(horizontal)
    ordered = sorted(frames, key=lambda f: getattr(f, start))
    leading = getattr(ordered[0], start) - getattr(parent, start)
    trailing = getattr(parent, end) - getattr(ordered[-1], end)
    gaps = [getattr(b, start) - getattr(a, end) for a, b in zip(ordered, ordered[1:])]
    return leading, gaps, trailing


# =============================================================================
# Candidate scores
# =============================================================================


def _edge_hug_score(near: float, far: float, size: float) -> float:
    """Content sitting against the edge with margin `near`."""
    near_ratio, far_ratio = near / size, far / size
    if near_ratio < 0.1 and far_ratio > 0.2:
        return 0.9 + 0.1 * (1 - near_ratio / 0.1)
    if far > near * 2:
        return 0.5 + 0.4 * (1 - near / (near + far + _EPSILON))
    if far > near:
        return 0.3 * (far - near) / size
    return 0.0


def _center_score(parent: Frame, content: Frame, horizontal: bool) -> float:
    start, _, size = _edges(horizontal)
    parent_size = getattr(parent, size)
    offset = abs(
        (getattr(parent, start) + parent_size / 2)
        - (getattr(content, start) + getattr(content, size) / 2)
    )
    normalized = offset / (parent_size / 2 + _EPSILON)
    if normalized < 0.05:
        return 0.95
    if normalized < 0.15:
        return 0.7 + 0.25 * (1 - normalized / 0.15)
    return max(0.0, 0.5 * (1 - normalized))


def _justify_score(parent: Frame, content: Frame, frames: Sequence[Frame]) -> float:
    """Children that fill the width themselves, with little whitespace."""
    fill = content.width / parent.width
    if fill < 0.95:
        return 0.0
    _, gaps, _ = _spacing(parent, frames, horizontal=True)
    if sum(g for g in gaps if g > 0) / parent.width > 0.1:
        return 0.3
    margins = (content.left - parent.left) + (parent.right - content.right)
    if margins / parent.width > 0.05:
        return 0.5
    return 0.85 + 0.15 * fill


def _space_between_score(
    parent: Frame, frames: Sequence[Frame], horizontal: bool
) -> float:
    """Equal gaps with the outer children at the container edges."""
    if len(frames) < 2:
        return 0.0
    leading, gaps, trailing = _spacing(parent, frames, horizontal)
    max_edge = getattr(parent, _edges(horizontal)[2]) * 0.05
    if leading > max_edge or trailing > max_edge:
        return 0.0
    cv = calculate_cv(gaps)
    if cv > 0.3:
        return 0.3
    if any(g <= 0 for g in gaps):
        return 0.2
    edge_score = 1 - (leading + trailing) / (2 * max_edge)
    return 0.7 + 0.3 * min(edge_score, 1 - cv)


def _space_around_score(
    parent: Frame, frames: Sequence[Frame], horizontal: bool
) -> float:
    """Equal gaps with half-gap margins at both edges."""
    if len(frames) < 2:
        return 0.0
    leading, gaps, trailing = _spacing(parent, frames, horizontal)
    if any(g <= 0 for g in gaps) or leading <= 0 or trailing <= 0:
        return 0.0
    expected = float(np.mean(gaps)) / 2
    allowed = expected * 0.3
    if abs(leading - expected) > allowed or abs(trailing - expected) > allowed:
        return 0.0
    cv = calculate_cv(gaps)
    if cv > 0.2:
        return 0.3
    if min(leading, trailing) / max(leading, trailing) < 0.7:
        return 0.4
    return 0.7 + 0.3 * (1 - cv)


def _space_evenly_score(
    parent: Frame, frames: Sequence[Frame], horizontal: bool
) -> float:
    """Margins and gaps all within 15% of their common mean."""
    if len(frames) < 2:
        return 0.0
    leading, gaps, trailing = _spacing(parent, frames, horizontal)
    spaces = [leading, *gaps, trailing]
    if any(s <= 0 for s in spaces):
        return 0.0
    mean = float(np.mean(spaces))
    if any(abs(s - mean) > mean * 0.15 for s in spaces):
        return 0.0
    return 0.8 + 0.2 * (1 - calculate_cv(spaces))


def _stretch_score(parent: Frame, frames: Sequence[Frame]) -> float:
    """Children spanning the container height, flush with both edges."""
    ratios = [f.height / parent.height for f in frames]
    lowest = min(ratios)
    if lowest < 0.9:
        return lowest * 0.3
    tolerance = max(2.0, parent.height * 0.05)
    flush = all(
        f.top - parent.top <= tolerance and parent.bottom - f.bottom <= tolerance
        for f in frames
    )
    if not flush:
        return lowest * 0.6
    return 0.95 + 0.05 * float(np.mean(ratios))


def _pick(scores: dict) -> ScoredAlignment:
    # Stable on ties: the earlier candidate wins
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    (best, best_score), (_, runner_up) = ranked[0], ranked[1]
    return ScoredAlignment(
        alignment=best,
        confidence=min(1.0, best_score * (1 + best_score - runner_up)),
        scores={key.value: value for key, value in scores.items()},
    )


# =============================================================================
# Analysis
# =============================================================================


def _framed(
    parent_frame: Frame | None, children: Sequence[NodeSchema], size: str
) -> tuple[Frame, list[Frame]] | None:
    frames = [f for f in map(get_node_frame, children) if f is not None]
    if parent_frame is None or not frames:
        return None
    parent = normalize_frame(parent_frame)
    if getattr(parent, size) <= 0:
        return None
    return parent, frames


def analyze_horizontal_alignment(
    parent_frame: Frame | None, children: Sequence[NodeSchema]
) -> ScoredAlignment:
    """Score left, center, right, justify and the distributed alignments.

    No parent, no framed children or a zero-width parent yields `left`
    with confidence 1.
    """
    framed = _framed(parent_frame, children, "width")
    if framed is None:
        return ScoredAlignment(ExtendedAlignHorizontal.LEFT, 1.0)
    parent, frames = framed
    content = bounding_frame(frames)
    left = content.left - parent.left
    right = parent.right - content.right

    h = ExtendedAlignHorizontal
    return _pick(
        {
            h.LEFT: _edge_hug_score(left, right, parent.width),
            h.CENTER: _center_score(parent, content, True),
            h.RIGHT: _edge_hug_score(right, left, parent.width),
            h.JUSTIFY: _justify_score(parent, content, frames),
            h.SPACE_BETWEEN: _space_between_score(parent, frames, True),
            h.SPACE_AROUND: _space_around_score(parent, frames, True),
            h.SPACE_EVENLY: _space_evenly_score(parent, frames, True),
        }
    )


def analyze_vertical_alignment(
    parent_frame: Frame | None, children: Sequence[NodeSchema]
) -> ScoredAlignment:
    """Score top, middle, bottom, stretch and the distributed alignments.

    Content filling over 90% of the height caps top, middle and bottom at
    0.3 so that `stretch` can win. No parent, no framed children or a
    zero-height parent yields `top` with confidence 1.
    """
    framed = _framed(parent_frame, children, "height")
    if framed is None:
        return ScoredAlignment(ExtendedAlignVertical.TOP, 1.0)
    parent, frames = framed
    content = bounding_frame(frames)
    top = content.top - parent.top
    bottom = parent.bottom - content.bottom
    filled = content.height / parent.height > 0.9

    def positional(score: float) -> float:
        return 0.3 if filled else score

    v = ExtendedAlignVertical
    return _pick(
        {
            v.TOP: positional(_edge_hug_score(top, bottom, parent.height)),
            v.MIDDLE: positional(_center_score(parent, content, False)),
            v.BOTTOM: positional(_edge_hug_score(bottom, top, parent.height)),
            v.STRETCH: _stretch_score(parent, frames),
            v.SPACE_BETWEEN: _space_between_score(parent, frames, False),
            v.SPACE_AROUND: _space_around_score(parent, frames, False),
            v.SPACE_EVENLY: _space_evenly_score(parent, frames, False),
        }
    )


def analyze_alignment(
    parent_frame: Frame | None, children: Sequence[NodeSchema]
) -> AlignmentAnalysis:
    return AlignmentAnalysis(
        horizontal=analyze_horizontal_alignment(parent_frame, children),
        vertical=analyze_vertical_alignment(parent_frame, children),
    )


def normalize_horizontal_alignment(
    alignment: ExtendedAlignHorizontal | str,
) -> AlignHorizontal:
    """Fold `space-around` and `space-evenly` into `space-between`."""
    alignment = ExtendedAlignHorizontal(alignment)
    if alignment in (
        ExtendedAlignHorizontal.SPACE_AROUND,
        ExtendedAlignHorizontal.SPACE_EVENLY,
    ):
        return AlignHorizontal.SPACE_BETWEEN
    return AlignHorizontal(alignment.value)


def normalize_vertical_alignment(alignment: ExtendedAlignVertical | str) -> AlignVertical:
    """Fold `baseline` and the distributed alignments into `top`."""
    alignment = ExtendedAlignVertical(alignment)
    try:
        return AlignVertical(alignment.value)
    except ValueError:
        return AlignVertical.TOP


def detect_scored_alignment(
    parent_frame: Frame | None, children: Sequence[NodeSchema]
) -> AlignmentResult:
    """Scored analysis normalized to the annotation vocabulary."""
    analysis = analyze_alignment(parent_frame, children)
    return AlignmentResult(
        normalize_horizontal_alignment(analysis.horizontal.alignment),
        normalize_vertical_alignment(analysis.vertical.alignment),
    )


__all__ = [
    "analyze_horizontal_alignment",
    "analyze_vertical_alignment",
    "analyze_alignment",
    "normalize_horizontal_alignment",
    "normalize_vertical_alignment",
    "detect_scored_alignment",
]
