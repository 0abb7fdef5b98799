"""Context-aware tolerances derived from the children being laid out.

The fixed ratios in `LayoutTolerances` scale only with the mean child size.
The adaptive tolerance also tightens for many children, uniform sizes and
regular spacing, and loosens for densely packed containers.

Direction follows `LayoutType`: `column` measures heights and vertical
gaps (stacked bands), `row` measures widths and horizontal gaps.

Example:
    >>> from flexinfer.layout.adaptive import calculate_row_split_tolerance
    >>> calculate_row_split_tolerance(children, parent_frame)
    4.2
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from flexinfer.geometry import get_node_frame, normalize_frame
from flexinfer.schema import Frame, LayoutType, NodeSchema

from .stats import calculate_cv
from .tolerance import DEFAULT_TOLERANCES, LayoutTolerances


@dataclass(frozen=True)
class AdaptiveToleranceConfig:
    """Weights of the adaptive tolerance.

    Attributes:
        base_size_ratio: Starting tolerance as a ratio of the mean size.
        min_tolerance: Lower bound (px).
        max_size_ratio: Upper bound as a ratio of the mean size.
        count_decay_factor: Per-child decay applied beyond two children.
        high_density_multiplier: Applied when children cover > 60% of the parent.
        high_uniformity_multiplier: Applied when sizes are uniform.
        high_regularity_multiplier: Applied when spacing is regular.
    """

    base_size_ratio: float = 0.15
    min_tolerance: float = 2.0
    max_size_ratio: float = 0.3
    count_decay_factor: float = 0.92
    high_density_multiplier: float = 1.4
    high_uniformity_multiplier: float = 0.6
    high_regularity_multiplier: float = 0.7


DEFAULT_ADAPTIVE_CONFIG = AdaptiveToleranceConfig()


@dataclass
class ToleranceFactors:
    """Measurements of a set of children along one axis.

    Attributes:
        avg_size: Mean child size along the axis (px).
        element_count: Number of children, framed or not.
        layout_density: Summed child area over parent area; 0 without a parent.
        size_uniformity: 1 - CV of the sizes, clamped to [0, 1].
        position_regularity: 1 - CV of the non-negative gaps, clamped to [0, 1].
    """

    avg_size: float = 0.0
    element_count: int = 0
    layout_density: float = 0.0
    size_uniformity: float = 1.0
    position_regularity: float = 1.0


@dataclass
class OverlapTolerances:
    """Overlap depths (px, positive) for the two-stage stacking test."""

    light: float = 5.0
    significant: float = 10.0


def _axis_edges(direction: LayoutType | str) -> tuple[str, str, str]:
    if direction == LayoutType.COLUMN:
        return "top", "bottom", "height"
    return "left", "right", "width"


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def _position_regularity(frames: list[Frame], direction: LayoutType | str) -> float:
    if len(frames) < 2:
        return 1.0
    start, end, _ = _axis_edges(direction)
    ordered = sorted(frames, key=lambda f: getattr(f, start))
    gaps = [
        getattr(curr, start) - getattr(prev, end)
        for prev, curr in zip(ordered, ordered[1:])
    ]
    return _clamp_unit(1 - calculate_cv([g for g in gaps if g >= 0]))


def analyze_layout_factors(
    nodes: Sequence[NodeSchema],
    direction: LayoutType | str,
    parent_frame: Frame | None = None,
) -> ToleranceFactors:
    """Measure the children that feed the adaptive tolerance."""
    if not nodes:
        return ToleranceFactors()

    frames = [f for f in map(get_node_frame, nodes) if f is not None]
    if not frames:
        return ToleranceFactors(element_count=len(nodes))

    _, _, size = _axis_edges(direction)
    sizes = [getattr(f, size) for f in frames]

    density = 0.0
    if parent_frame is not None:
        parent = normalize_frame(parent_frame)
        parent_area = parent.width * parent.height
        if parent_area > 0:
            density = float(np.sum([f.width * f.height for f in frames])) / parent_area

    return ToleranceFactors(
        avg_size=float(np.mean(sizes)),
        element_count=len(nodes),
        layout_density=density,
        size_uniformity=_clamp_unit(1 - calculate_cv(sizes)),
        position_regularity=_position_regularity(frames, direction),
    )


def calculate_adaptive_tolerance(
    nodes: Sequence[NodeSchema],
    direction: LayoutType | str,
    parent_frame: Frame | None = None,
    config: AdaptiveToleranceConfig | None = None,
) -> float:
    """Positive split tolerance (px) for the children along one axis.

    Starts at `base_size_ratio` of the mean size, decays by
    `count_decay_factor` per child beyond two, is scaled by the density,
    uniformity and regularity multipliers, then clamped to
    `[min_tolerance, avg_size * max_size_ratio]`.
    """
    cfg = config or DEFAULT_ADAPTIVE_CONFIG
    factors = analyze_layout_factors(nodes, direction, parent_frame)
    if factors.avg_size == 0:
        return cfg.min_tolerance

    tolerance = factors.avg_size * cfg.base_size_ratio
    if factors.element_count > 2:
        tolerance *= cfg.count_decay_factor ** (factors.element_count - 2)
    if factors.layout_density > 0.6:
        tolerance *= cfg.high_density_multiplier
    if factors.size_uniformity > 0.8:
        tolerance *= cfg.high_uniformity_multiplier
    if factors.position_regularity > 0.8:
        tolerance *= cfg.high_regularity_multiplier

    upper = factors.avg_size * cfg.max_size_ratio
    return max(cfg.min_tolerance, min(tolerance, upper))


def calculate_row_split_tolerance(
    nodes: Sequence[NodeSchema],
    parent_frame: Frame | None = None,
    config: AdaptiveToleranceConfig | None = None,
) -> float:
    """Tolerance for cutting children into horizontal bands (height based)."""
    return calculate_adaptive_tolerance(nodes, LayoutType.COLUMN, parent_frame, config)


def calculate_column_split_tolerance(
    nodes: Sequence[NodeSchema],
    parent_frame: Frame | None = None,
    config: AdaptiveToleranceConfig | None = None,
) -> float:
    """Tolerance for cutting children into vertical bands (width based)."""
    return calculate_adaptive_tolerance(nodes, LayoutType.ROW, parent_frame, config)


def get_overlap_tolerance(
    nodes: Sequence[NodeSchema],
    direction: LayoutType | str,
    parent_frame: Frame | None = None,
    config: AdaptiveToleranceConfig | None = None,
) -> float:
    """Negated adaptive tolerance: the overlap allowed between two bands."""
    return -calculate_adaptive_tolerance(nodes, direction, parent_frame, config)


def is_valid_split_gap(gap: float, tolerance: float, strict: bool = False) -> bool:
    """Whether `gap` separates two bands.

    Strict mode demands whitespace; otherwise any gap at or above the
    (possibly negative) tolerance qualifies.
    """
    if strict:
        return gap > 0
    return gap >= tolerance


def calculate_overlap_detection_tolerance(frames: Sequence[Frame]) -> OverlapTolerances:
    """Overlap depths scaled to the mean smaller side of the frames.

    `light` is 5% of it (at least 3px) and `significant` 10% (at least 8px).
    No frames yields the fixed 5px / 10px pair.
    """
    if not frames:
        return OverlapTolerances()
    avg_min_side = float(np.mean([min(f.width, f.height) for f in frames]))
    return OverlapTolerances(
        light=max(3.0, avg_min_side * 0.05),
        significant=max(8.0, avg_min_side * 0.1),
    )


def resolve_overlap_tolerances(
    frames: Sequence[Frame], tolerances: LayoutTolerances | None = None
) -> tuple[float, float]:
    """(light, confirm) overlap tolerances for the stacking test.

    With `tolerances.adaptive` these are the negated `light` and
    `significant` depths of `calculate_overlap_detection_tolerance`;
    otherwise the configured `overlap_light` and `overlap_confirm`.
    """
    tol = tolerances or DEFAULT_TOLERANCES
    if not tol.adaptive:
        return tol.overlap_light, tol.overlap_confirm
    depths = calculate_overlap_detection_tolerance(frames)
    return -depths.light, -depths.significant


__all__ = [
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
]
