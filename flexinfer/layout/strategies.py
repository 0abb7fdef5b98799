"""Scored split strategies.

Each strategy partitions children into bands along one axis and scores the
result; `MultiStrategySplitExecutor` keeps the best one. Unlike the band
sweep in `split`, a scored split may reorder children: bands come out in
visual order and members in the order the strategy visits them.

Strategies:
    - GreedyEdgeSplitStrategy: far-edge sweep, cutting wherever the rest of
      the children start beyond the tolerance
    - CenterLineSplitStrategy: cuts at unusually wide gaps between centers
    - GridAlignedSplitStrategy: merges overlapping extents into tracks
    - ClusteringSplitStrategy: single-linkage clustering on axis distance

Direction follows `LayoutType`: `column` stacks bands vertically, `row`
places them side by side.

Example:
    >>> from flexinfer.layout.strategies import scored_split
    >>> result = scored_split(children, LayoutType.COLUMN, parent_frame)
    >>> result.strategy_name, result.score
    ('grid-aligned', 92.5)
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from flexinfer.core.log import get_logger
from flexinfer.geometry import bounding_frame, get_node_frame, normalize_frame
from flexinfer.schema import Frame, LayoutType, NodeSchema

from .adaptive import is_valid_split_gap
from .split import axis_split_tolerance
from .stats import calculate_cv, calculate_variance
from .tolerance import DEFAULT_TOLERANCES, LayoutTolerances
from .types import ScoredSplitResult, SplitResult

logger = get_logger(__name__)

_EMPTY_FRAME = normalize_frame({"left": 0, "top": 0, "width": 0, "height": 0})


@dataclass(frozen=True)
class SplitContext:
    """Inputs shared by every strategy of one split.

    Attributes:
        direction: `column` for vertically stacked bands, `row` for bands
            side by side.
        tolerance: Gap (px) at or above which two bands separate; negative
            values admit overlap.
        parent_frame: Container frame, when known.
        merge_distance: Distance (px) within which grid tracks merge.
    """

    direction: LayoutType
    tolerance: float
    parent_frame: Frame | None = None
    merge_distance: float = 5.0

    @property
    def axis(self) -> tuple[str, str]:
        """(start, end) edge names along the split axis."""
        if self.direction == LayoutType.COLUMN:
            return "top", "bottom"
        return "left", "right"

    @property
    def cross_axis(self) -> tuple[str, str]:
        if self.direction == LayoutType.COLUMN:
            return "left", "right"
        return "top", "bottom"


def calculate_split_score(
    groups: Sequence[Sequence[NodeSchema]],
    gaps: Sequence[float],
    min_margin: float | None,
    align_deviation: float,
) -> float:
    """Score a split out of 100.

    - Balance (50): even band sizes, `50 / (1 + var / mean)` of the sizes.
    - Gap consistency (30): `30 * (1 - min(CV, 1))` of the positive gaps.
    - Separation (10): `min(10, min_margin / 5)` for a positive margin.
    - Cross-axis alignment (10): `10 * max(0, 1 - deviation / 50)`.

    A single band scores 0.
    """
    if len(groups) <= 1:
        return 0.0

    sizes = [len(group) for group in groups]
    score = 50 / (1 + calculate_variance(sizes) / float(np.mean(sizes)))

    positive = [g for g in gaps if g > 0]
    if positive:
        score += 30 * (1 - min(calculate_cv(positive), 1))

    if min_margin is not None and min_margin > 0:
        score += min(10, min_margin / 5)

    if math.isfinite(align_deviation) and align_deviation >= 0:
        score += 10 * max(0, 1 - align_deviation / 50)

    return score


class SplitStrategy(ABC):
    """Abstract interface for one way of cutting children into bands."""

    name = "strategy"

    @abstractmethod
    def execute(
        self, nodes: Sequence[NodeSchema], context: SplitContext
    ) -> ScoredSplitResult:
        """Split `nodes` along `context.direction`.

        Args:
            nodes: Children to split, in any order.
            context: Direction, tolerance and container.

        Returns:
            ScoredSplitResult; `success` is True for more than one band.
        """

    def empty_result(
        self, nodes: Sequence[NodeSchema], context: SplitContext
    ) -> ScoredSplitResult:
        return ScoredSplitResult(
            success=False,
            groups=[list(nodes)],
            layout_type=context.direction,
            strategy_name=self.name,
        )

    def scored_result(
        self,
        groups: list[list[NodeSchema]],
        gaps: list[float],
        min_margin: float | None,
        context: SplitContext,
        bonus: float = 0.0,
    ) -> ScoredSplitResult:
        deviation = align_deviation(groups, context)
        return ScoredSplitResult(
            success=len(groups) > 1,
            groups=groups,
            gaps=gaps,
            layout_type=context.direction,
            score=calculate_split_score(groups, gaps, min_margin, deviation) + bonus,
            strategy_name=self.name,
            min_margin=min_margin,
            align_deviation=deviation,
        )


def prepared_frames(nodes: Sequence[NodeSchema]) -> list[Frame]:
    """Normalized frames; frameless nodes get an empty frame at the origin."""
    return [get_node_frame(node) or _EMPTY_FRAME for node in nodes]


def align_deviation(
    groups: Sequence[Sequence[NodeSchema]], context: SplitContext
) -> float:
    """Mean cross-axis edge offset between consecutive framed bands."""
    start, end = context.cross_axis
    boxes = [
        bounding_frame(frames)
        for frames in (
            [f for f in map(get_node_frame, group) if f is not None] for group in groups
        )
        if frames
    ]
    offsets = [
        abs(getattr(a, edge) - getattr(b, edge))
        for a, b in zip(boxes, boxes[1:])
        for edge in (start, end)
    ]
    if not offsets:
        return math.inf
    return float(np.mean(offsets))


def _min_positive(gaps: Sequence[float]) -> float | None:
    positive = [g for g in gaps if g > 0]
    return min(positive) if positive else None


def _band_gap(
    frames: Sequence[Frame],
    current: Sequence[int],
    following: Sequence[int],
    context: SplitContext,
) -> float:
    start, end = context.axis
    before = bounding_frame(frames[i] for i in current)
    after = bounding_frame(frames[i] for i in following)
    return getattr(after, start) - getattr(before, end)


class GreedyEdgeSplitStrategy(SplitStrategy):
    """Sweep by far edge and cut where the remaining children start.

    After each child, the gap from the running band edge to the nearest
    start among the children not yet visited decides the cut.
    """

    name = "greedy-edge"

    def execute(self, nodes, context):
        if len(nodes) <= 1:
            return self.empty_result(nodes, context)

        start, end = context.axis
        frames = prepared_frames(nodes)
        ends = np.array([getattr(f, end) for f in frames], dtype=float)
        order = np.argsort(ends, kind="stable")
        starts = np.array([getattr(frames[i], start) for i in order], dtype=float)
        # Nearest start among the children after each sweep position
        rest_start = np.minimum.accumulate(starts[::-1])[::-1]

        bands: list[list[int]] = []
        gaps: list[float] = []
        band_start = 0
        band_end = ends[order[0]]

        for pos in range(len(order) - 1):
            band_end = max(band_end, ends[order[pos]])
            gap = float(rest_start[pos + 1] - band_end)
            if is_valid_split_gap(gap, context.tolerance):
                bands.append([int(i) for i in order[band_start : pos + 1]])
                gaps.append(gap)
                band_start = pos + 1
                band_end = ends[order[pos + 1]]
        bands.append([int(i) for i in order[band_start:]])

        groups = [[nodes[i] for i in band] for band in bands]
        return self.scored_result(groups, gaps, min(gaps) if gaps else None, context)


class CenterLineSplitStrategy(SplitStrategy):
    """Cut between centers whose spacing is well above the average.

    A cut needs a center gap over 1.5x the mean center gap and at least
    twice the magnitude of the tolerance. Suited to centered designs whose
    edges are ragged.
    """

    name = "center-line"

    def execute(self, nodes, context):
        if len(nodes) <= 1:
            return self.empty_result(nodes, context)

        start, _ = context.axis
        size = "height" if context.direction == LayoutType.COLUMN else "width"
        frames = prepared_frames(nodes)
        centers = np.array([getattr(f, start) + getattr(f, size) / 2 for f in frames])
        order = np.argsort(centers, kind="stable")
        center_gaps = np.diff(centers[order])

        threshold = float(np.mean(center_gaps)) * 1.5
        cuts = [
            int(i)
            for i in np.flatnonzero(
                (center_gaps > threshold) & (center_gaps >= abs(context.tolerance) * 2)
            )
        ]
        if not cuts:
            return self.empty_result(nodes, context)

        bands: list[list[int]] = []
        gaps: list[float] = []
        previous = 0
        for cut in cuts:
            band = [int(i) for i in order[previous : cut + 1]]
            rest = [int(i) for i in order[cut + 1 :]]
            bands.append(band)
            gaps.append(_band_gap(frames, band, rest, context))
            previous = cut + 1
        bands.append([int(i) for i in order[previous:]])

        groups = [[nodes[i] for i in band] for band in bands]
        return self.scored_result(groups, gaps, _min_positive(gaps), context)


class GridAlignedSplitStrategy(SplitStrategy):
    """Merge overlapping extents into tracks.

    Extents sorted by start join the running track when they begin within
    `context.merge_distance` of its end. Evenly spaced track starts earn
    up to 10 bonus points.
    """

    name = "grid-aligned"

    def execute(self, nodes, context):
        if len(nodes) <= 1:
            return self.empty_result(nodes, context)

        start, end = context.axis
        frames = prepared_frames(nodes)
        order = sorted(range(len(nodes)), key=lambda i: getattr(frames[i], start))

        tracks: list[tuple[float, float, list[int]]] = []
        for i in order:
            lo, hi = getattr(frames[i], start), getattr(frames[i], end)
            if tracks and lo <= tracks[-1][1] + context.merge_distance:
                t_lo, t_hi, members = tracks[-1]
                tracks[-1] = (t_lo, max(t_hi, hi), members + [i])
            else:
                tracks.append((lo, hi, [i]))

        if len(tracks) < 2:
            return self.empty_result(nodes, context)

        gaps = [nxt[0] - cur[1] for cur, nxt in zip(tracks, tracks[1:])]
        groups = [[nodes[i] for i in members] for _, _, members in tracks]
        bonus = 10 * (1 - min(calculate_cv(np.diff([t[0] for t in tracks])), 1))
        return self.scored_result(groups, gaps, _min_positive(gaps), context, bonus)


class ClusteringSplitStrategy(SplitStrategy):
    """Single-linkage clustering on signed distance along the axis.

    Children closer than twice the tolerance magnitude (overlap counts as
    negative distance) share a cluster. Clusters are ordered by their
    nearest start and keep input order inside.
    """

    name = "clustering"

    def execute(self, nodes, context):
        if len(nodes) <= 1:
            return self.empty_result(nodes, context)

        start, end = context.axis
        frames = prepared_frames(nodes)
        starts = np.array([getattr(f, start) for f in frames], dtype=float)
        ends = np.array([getattr(f, end) for f in frames], dtype=float)

        # Whitespace between disjoint extents, minus the overlap depth otherwise
        distances = np.maximum(
            starts[None, :] - ends[:, None], starts[:, None] - ends[None, :]
        )
        linked = distances <= abs(context.tolerance) * 2

        clusters = _connected_components(linked)
        if len(clusters) <= 1:
            return self.empty_result(nodes, context)

        clusters.sort(key=lambda members: min(starts[i] for i in members))
        gaps = [
            _band_gap(frames, cur, nxt, context)
            for cur, nxt in zip(clusters, clusters[1:])
        ]
        groups = [[nodes[i] for i in members] for members in clusters]
        return self.scored_result(groups, gaps, _min_positive(gaps), context)


def _connected_components(linked: np.ndarray) -> list[list[int]]:
    seen: set[int] = set()
    components: list[list[int]] = []
    for root in range(len(linked)):
        if root in seen:
            continue
        stack, members = [root], []
        seen.add(root)
        while stack:
            i = stack.pop()
            members.append(i)
            for j in np.flatnonzero(linked[i]):
                if int(j) not in seen:
                    seen.add(int(j))
                    stack.append(int(j))
        components.append(sorted(members))
    return components


class MultiStrategySplitExecutor:
    """Run several strategies and keep the highest scoring split.

    A successful split always beats a failed one; among failed splits the
    highest score is still returned. Ties go to the earlier strategy.
    """

    def __init__(self, strategies: Sequence[SplitStrategy] | None = None):
        if strategies is None:
            strategies = [
                GreedyEdgeSplitStrategy(),
                CenterLineSplitStrategy(),
                GridAlignedSplitStrategy(),
                ClusteringSplitStrategy(),
            ]
        self.strategies = list(strategies)

    def execute(
        self, nodes: Sequence[NodeSchema], context: SplitContext
    ) -> ScoredSplitResult:
        if len(nodes) <= 1:
            return ScoredSplitResult(
                success=False, groups=[list(nodes)], layout_type=context.direction
            )

        results = self.execute_all(nodes, context)
        successful = [r for r in results if r.success]
        return max(successful or results, key=lambda r: r.score)

    def execute_all(
        self, nodes: Sequence[NodeSchema], context: SplitContext
    ) -> list[ScoredSplitResult]:
        """Every strategy's result, in strategy order."""
        return [strategy.execute(nodes, context) for strategy in self.strategies]


def scored_split(
    children: Sequence[NodeSchema],
    direction: LayoutType,
    parent_frame: Frame | None = None,
    tolerances: LayoutTolerances | None = None,
    executor: MultiStrategySplitExecutor | None = None,
) -> ScoredSplitResult:
    """Best scored split of the children along one axis.

    The tolerance is the same one the band sweep uses for that axis
    (`axis_split_tolerance`, adaptive when enabled); grid tracks merge
    within `grid_cluster`.
    """
    tol = tolerances or DEFAULT_TOLERANCES
    context = SplitContext(
        direction=LayoutType(direction),
        tolerance=axis_split_tolerance(children, direction, tol, parent_frame),
        parent_frame=parent_frame,
        merge_distance=tol.grid_cluster,
    )
    result = (executor or MultiStrategySplitExecutor()).execute(children, context)
    logger.debug(
        "Scored %s split: %s, %d band(s), score %.1f",
        context.direction.value,
        result.strategy_name,
        len(result.groups),
        result.score,
    )
    return result


def _usable(result: ScoredSplitResult) -> bool:
    if not result.success:
        return False
    # Every child alone with every band overlapping the next is stacking
    degenerate = all(len(g) == 1 for g in result.groups) and all(
        g < 0 for g in result.gaps
    )
    return not degenerate


def analyze_scored_split(
    column_split: ScoredSplitResult, row_split: ScoredSplitResult
) -> tuple[LayoutType, SplitResult]:
    """Pick the layout direction from two scored splits.

    `column_split` holds vertically stacked bands, `row_split` bands side
    by side. The usable split with the higher score wins and an exact tie
    goes to `column`. A split is unusable when it failed or when every
    child sits alone in a band overlapping the next.

    Returns:
        (direction, result): `mix` with an empty failed result when neither
        split is usable.
    """
    column_ok, row_ok = _usable(column_split), _usable(row_split)
    if column_ok and (not row_ok or column_split.score >= row_split.score):
        return LayoutType.COLUMN, column_split
    if row_ok:
        return LayoutType.ROW, row_split
    return LayoutType.MIX, SplitResult(success=False)


__all__ = [
    "SplitContext",
    "SplitStrategy",
    "GreedyEdgeSplitStrategy",
    "CenterLineSplitStrategy",
    "GridAlignedSplitStrategy",
    "ClusteringSplitStrategy",
    "MultiStrategySplitExecutor",
    "calculate_split_score",
    "prepared_frames",
    "align_deviation",
    "scored_split",
    "analyze_scored_split",
]
