"""Row/column split analysis.

A split sweeps the children along one axis and cuts them into bands:

- `split_to_row` sweeps top to bottom and produces horizontal bands
  stacked vertically, the groups of a `column` layout.
- `split_to_column` sweeps left to right and produces vertical bands
  side by side, the groups of a `row` layout.

A child joins the running band while it overlaps the band's far edge by
more than a size-relative tolerance; otherwise it opens a new band and the
distance to the band edge is recorded as a gap.

A successful split never reorders its input, so children must arrive in
visual order along the swept axis: `sort_by_position(children, "column")`
before `split_to_row`, `sort_by_position(children, "row")` before
`split_to_column`. `determine_layout_type` does this itself.
"""

from collections.abc import Sequence

import numpy as np

from flexinfer.geometry import get_node_frame
from flexinfer.schema import Frame, LayoutType, NodeSchema

from .adaptive import get_overlap_tolerance
from .tolerance import DEFAULT_TOLERANCES, LayoutTolerances
from .types import SplitResult


def axis_split_tolerance(
    children: Sequence[NodeSchema],
    layout_type: LayoutType | str,
    tolerances: LayoutTolerances | None = None,
    parent_frame: Frame | None = None,
) -> float:
    """Overlap (negative px) allowed between bands of a `layout_type` split.

    `column` bands are measured by height, `row` bands by width. With
    `tolerances.adaptive` the value comes from `get_overlap_tolerance`;
    otherwise it is the configured ratio of the mean positive size, or
    `split_fallback` when no child has one.
    """
    tol = tolerances or DEFAULT_TOLERANCES
    if tol.adaptive:
        return get_overlap_tolerance(children, layout_type, parent_frame)

    frames = [f for f in map(get_node_frame, children) if f is not None]
    if layout_type == LayoutType.COLUMN:
        sizes, ratio = [f.height for f in frames], tol.row_split_gap_ratio
    else:
        sizes, ratio = [f.width for f in frames], tol.column_split_gap_ratio

    positive = [s for s in sizes if s > 0]
    if not positive:
        return tol.split_fallback
    return -(float(np.mean(positive)) * ratio)


def _sweep_order(children: Sequence[NodeSchema], edge: str) -> list[int]:
    """Indices ordered by the given far edge.

    Frameless children take the key of their nearest framed predecessor,
    so they travel with it through the sweep.
    """
    keys: list[float] = []
    last = float("-inf")
    for child in children:
        frame = get_node_frame(child)
        if frame is not None:
            last = getattr(frame, edge)
        keys.append(last)
    return sorted(range(len(children)), key=keys.__getitem__)


def _split(
    children: Sequence[NodeSchema],
    start_edge: str,
    end_edge: str,
    tolerance: float,
) -> SplitResult:
    if len(children) < 2:
        return SplitResult(success=False, groups=[list(children)] if children else [])

    bands: list[list[int]] = []
    gaps: list[float] = []
    current: list[int] = []
    band_end: float | None = None

    for index in _sweep_order(children, end_edge):
        frame = get_node_frame(children[index])
        if frame is None:
            current.append(index)
            continue

        if band_end is not None:
            gap = getattr(frame, start_edge) - band_end
            if gap > tolerance:
                bands.append(current)
                gaps.append(gap)
                current = []
                band_end = None

        current.append(index)
        end = getattr(frame, end_edge)
        band_end = end if band_end is None else max(band_end, end)

    bands.append(current)
    bands = [sorted(band) for band in bands]

    flattened = [index for band in bands for index in band]
    degenerate = all(len(band) == 1 for band in bands) and all(g < 0 for g in gaps)
    success = (
        len(bands) > 1
        and not degenerate
        and flattened == list(range(len(children)))
    )

    return SplitResult(
        success=success,
        groups=[[children[i] for i in band] for band in bands],
        gaps=gaps,
    )


def split_to_row(
    children: Sequence[NodeSchema],
    tolerances: LayoutTolerances | None = None,
    parent_frame: Frame | None = None,
) -> SplitResult:
    """Split children into horizontal bands stacked top to bottom.

    Children are swept by bottom edge. The allowed overlap between bands is
    a ratio of the mean child height (see `axis_split_tolerance`).

    The input must already be in top-to-bottom order. A bottom-first list
    such as `[below, above]` bands correctly but fails the order check,
    so sort with `sort_by_position(children, "column")` first.

    Args:
        children: Children to split, sorted top to bottom.
        tolerances: Thresholds; built-in defaults when omitted.
        parent_frame: Container frame; only read by adaptive tolerances.

    Returns:
        SplitResult whose groups are the bands, top first. `success` is
        False for fewer than two children, a single band, a degenerate
        banding, or bands that would reorder the input.
    """
    tolerance = axis_split_tolerance(children, LayoutType.COLUMN, tolerances, parent_frame)
    return _split(children, "top", "bottom", tolerance)


def split_to_column(
    children: Sequence[NodeSchema],
    tolerances: LayoutTolerances | None = None,
    parent_frame: Frame | None = None,
) -> SplitResult:
    """Split children into vertical bands placed left to right.

    Children are swept by right edge. The allowed overlap between bands is
    a ratio of the mean child width. The input must already be in
    left-to-right order (`sort_by_position(children, "row")`). See
    `split_to_row` for the result.
    """
    tolerance = axis_split_tolerance(children, LayoutType.ROW, tolerances, parent_frame)
    return _split(children, "left", "right", tolerance)


def _gap_variance(gaps: list[float]) -> float:
    return float(np.var(gaps)) if gaps else 0.0


def analyze_split(
    row_split: SplitResult, column_split: SplitResult
) -> tuple[LayoutType, SplitResult]:
    """Pick the layout direction from the two candidate splits.

    The successful split with fewer groups wins. Equal counts go to the
    split with the more uniform gaps, and an exact tie goes to the row
    bands. Row bands make a `column` layout; column bands make a `row`
    layout.

    Returns:
        (direction, result): `mix` with an empty failed result when neither
        split succeeds.
    """
    column = (LayoutType.COLUMN, row_split)
    row = (LayoutType.ROW, column_split)

    if row_split.success and column_split.success:
        row_groups, column_groups = len(row_split.groups), len(column_split.groups)
        if row_groups != column_groups:
            return column if row_groups < column_groups else row
        if _gap_variance(column_split.gaps) < _gap_variance(row_split.gaps):
            return row
        return column

    if row_split.success:
        return column
    if column_split.success:
        return row

    return LayoutType.MIX, SplitResult(success=False)


def calculate_average_gap(gaps: Sequence[float]) -> float:
    """Mean of the positive gaps; 0 when there are none."""
    positive = [g for g in gaps if g > 0]
    if not positive:
        return 0.0
    return float(np.mean(positive))


def are_gaps_equal(gaps: Sequence[float], tolerance: float = 5) -> bool:
    """Check that every gap is within `tolerance` of the average positive gap."""
    if len(gaps) <= 1:
        return True
    average = calculate_average_gap(gaps)
    return all(abs(g - average) <= tolerance for g in gaps)


__all__ = [
    "axis_split_tolerance",
    "split_to_row",
    "split_to_column",
    "analyze_split",
    "calculate_average_gap",
    "are_gaps_equal",
]
