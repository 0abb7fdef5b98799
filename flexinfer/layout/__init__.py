"""Layout inference: turn absolutely positioned children into flex layout.

Example usage:
    >>> from flexinfer.layout import layout_parser
    >>> annotated = layout_parser(tree)
    >>> annotated.layout.layout_type
    'column'
    >>> [child.placement for child in annotated.children]
    ['normal', 'normal', 'absolute']

The individual detectors are exposed for callers that need a single signal:
    >>> from flexinfer.layout import detect_grid_pattern, split_to_column

The scored strategies are opt-in alternatives to the default sweep split
and margin rules:
    >>> from flexinfer.layout import LayoutTolerances, SplitMode
    >>> layout_parser(tree, LayoutTolerances(split_mode=SplitMode.SCORED))
"""

from .adaptive import (
    DEFAULT_ADAPTIVE_CONFIG,
    AdaptiveToleranceConfig,
    OverlapTolerances,
    ToleranceFactors,
    analyze_layout_factors,
    calculate_adaptive_tolerance,
    calculate_column_split_tolerance,
    calculate_overlap_detection_tolerance,
    calculate_row_split_tolerance,
    get_overlap_tolerance,
    is_valid_split_gap,
    resolve_overlap_tolerances,
)
from .alignment import calculate_optimal_gap, detect_alignment, needs_absolute_positioning
from .classify import classify_children
from .determine import determine_layout_type
from .grid import detect_grid_pattern
from .lib import (
    LayoutError,
    analyze_layout,
    doc_layout_parser,
    layout_parser,
    process_children,
)
from .scored_alignment import (
    analyze_alignment,
    analyze_horizontal_alignment,
    analyze_vertical_alignment,
    detect_scored_alignment,
    normalize_horizontal_alignment,
    normalize_vertical_alignment,
)
from .split import (
    analyze_split,
    are_gaps_equal,
    axis_split_tolerance,
    calculate_average_gap,
    split_to_column,
    split_to_row,
)
from .stats import calculate_cv, calculate_std_dev, calculate_variance
from .strategies import (
    CenterLineSplitStrategy,
    ClusteringSplitStrategy,
    GreedyEdgeSplitStrategy,
    GridAlignedSplitStrategy,
    MultiStrategySplitExecutor,
    SplitContext,
    SplitStrategy,
    analyze_scored_split,
    calculate_split_score,
    scored_split,
)
from .tolerance import DEFAULT_TOLERANCES, LayoutTolerances, SplitMode
from .types import (
    AlignmentAnalysis,
    AlignmentResult,
    ChildClassification,
    LayoutDecision,
    LayoutStats,
    ProcessedChildren,
    ScoredAlignment,
    ScoredSplitResult,
    SplitResult,
)

__all__ = [
    # Parser
    "layout_parser",
    "doc_layout_parser",
    "process_children",
    "analyze_layout",
    "LayoutError",
    # Detectors
    "classify_children",
    "split_to_row",
    "split_to_column",
    "axis_split_tolerance",
    "analyze_split",
    "calculate_average_gap",
    "are_gaps_equal",
    "determine_layout_type",
    "detect_alignment",
    "calculate_optimal_gap",
    "needs_absolute_positioning",
    "detect_grid_pattern",
    # Scored split strategies
    "SplitContext",
    "SplitStrategy",
    "GreedyEdgeSplitStrategy",
    "CenterLineSplitStrategy",
    "GridAlignedSplitStrategy",
    "ClusteringSplitStrategy",
    "MultiStrategySplitExecutor",
    "calculate_split_score",
    "scored_split",
    "analyze_scored_split",
    # Scored alignment
    "analyze_horizontal_alignment",
    "analyze_vertical_alignment",
    "analyze_alignment",
    "normalize_horizontal_alignment",
    "normalize_vertical_alignment",
    "detect_scored_alignment",
    # Tolerances
    "LayoutTolerances",
    "SplitMode",
    "DEFAULT_TOLERANCES",
    "AdaptiveToleranceConfig",
    "DEFAULT_ADAPTIVE_CONFIG",
    "ToleranceFactors",
    "OverlapTolerances",
    "analyze_layout_factors",
    "calculate_adaptive_tolerance",
    "calculate_row_split_tolerance",
    "calculate_column_split_tolerance",
    "get_overlap_tolerance",
    "is_valid_split_gap",
    "calculate_overlap_detection_tolerance",
    "resolve_overlap_tolerances",
    # Statistics
    "calculate_variance",
    "calculate_std_dev",
    "calculate_cv",
    # Result types
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
