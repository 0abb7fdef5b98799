"""Intermediate results passed between the layout detectors."""

import math
from dataclasses import dataclass, field
from typing import Any

from flexinfer.schema import (
    AlignHorizontal,
    AlignVertical,
    ExtendedAlignHorizontal,
    ExtendedAlignVertical,
    LayoutType,
    NodeSchema,
)


@dataclass
class ChildClassification:
    """Disjoint buckets of a container's children.

    Attributes:
        normal: Children that participate in the flex flow.
        absolute: Stacked or explicitly fixed children.
        hidden: Children that are not rendered.
        slot: Placeholder children arranged by the consumer.
    """

    normal: list[NodeSchema] = field(default_factory=list)
    absolute: list[NodeSchema] = field(default_factory=list)
    hidden: list[NodeSchema] = field(default_factory=list)
    slot: list[NodeSchema] = field(default_factory=list)


@dataclass
class SplitResult:
    """Candidate partition of children into sequential bands along one axis.

    Attributes:
        success: Whether the bands form a usable flex arrangement.
        groups: Bands in flow order; members keep their input order.
        gaps: Distance between consecutive bands (negative = overlap).
    """

    success: bool
    groups: list[list[NodeSchema]] = field(default_factory=list)
    gaps: list[float] = field(default_factory=list)


@dataclass
class ScoredSplitResult(SplitResult):
    """Split produced by one scored strategy.

    Attributes:
        layout_type: `column` for bands stacked vertically, `row` for bands
            placed side by side.
        score: Quality score; higher is better, 0 for a failed split.
        strategy_name: Strategy that produced the split ("none" when no
            strategy ran).
        min_margin: Smallest gap between bands, None when there is none.
        align_deviation: Mean cross-axis edge offset between consecutive
            bands (px); infinite with fewer than two framed bands.
    """

    layout_type: LayoutType = LayoutType.ROW
    score: float = 0.0
    strategy_name: str = "none"
    min_margin: float | None = None
    align_deviation: float = math.inf


@dataclass
class LayoutDecision:
    """Layout type chosen for a set of children, with its groups and gaps."""

    layout_type: LayoutType
    groups: list[list[NodeSchema]] = field(default_factory=list)
    gaps: list[float] = field(default_factory=list)


@dataclass
class AlignmentResult:
    align_horizontal: AlignHorizontal
    align_vertical: AlignVertical


@dataclass
class ScoredAlignment:
    """Best-scoring alignment on one axis.

    Attributes:
        alignment: Winning `ExtendedAlignHorizontal` or `ExtendedAlignVertical`.
        confidence: 0-1; high when the winner clearly beats the runner-up.
        scores: Score of every candidate alignment, keyed by value.
    """

    alignment: ExtendedAlignHorizontal | ExtendedAlignVertical
    confidence: float
    scores: dict[str, float] = field(default_factory=dict)


@dataclass
class AlignmentAnalysis:
    horizontal: ScoredAlignment
    vertical: ScoredAlignment


@dataclass
class ProcessedChildren:
    """Children laid out without annotating their container.

    Attributes:
        layout_type: Layout type determined for the children.
        children: Processed copies, in input order.
        gaps: Gaps between the groups of the chosen split.
    """

    layout_type: LayoutType
    children: list[NodeSchema] = field(default_factory=list)
    gaps: list[float] = field(default_factory=list)


@dataclass
class LayoutStats:
    """Summary of the layout types a tree would receive.

    Attributes:
        total_nodes: Number of nodes in the tree.
        layout_types: Count of containers per layout type.
        max_depth: Deepest level reached (root = 0).
    """

    total_nodes: int = 0
    layout_types: dict[str, int] = field(
        default_factory=lambda: {t.value: 0 for t in LayoutType}
    )
    max_depth: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_nodes": self.total_nodes,
            "layout_types": dict(self.layout_types),
            "max_depth": self.max_depth,
        }


__all__ = [
    "ChildClassification",
    "SplitResult",
    "ScoredSplitResult",
    "LayoutDecision",
    "AlignmentResult",
    "ScoredAlignment",
    "AlignmentAnalysis",
    "ProcessedChildren",
    "LayoutStats",
]
