"""Unit tests for adaptive tolerances and the dispersion helpers."""

import pytest

from flexinfer.layout import (
    AdaptiveToleranceConfig,
    LayoutTolerances,
    OverlapTolerances,
    analyze_layout_factors,
    calculate_adaptive_tolerance,
    calculate_column_split_tolerance,
    calculate_cv,
    calculate_overlap_detection_tolerance,
    calculate_row_split_tolerance,
    calculate_std_dev,
    calculate_variance,
    classify_children,
    get_overlap_tolerance,
    is_valid_split_gap,
    needs_absolute_positioning,
    resolve_overlap_tolerances,
    split_to_row,
)
from flexinfer.schema import Frame, LayoutType

ADAPTIVE = LayoutTolerances(adaptive=True)


def ids(groups):
    return [[n.id for n in group] for group in groups]


class TestStats:
    """Tests for the dispersion helpers."""

    @pytest.mark.unit
    def test_variance_and_std_dev(self):
        assert calculate_variance([2, 4, 4, 4, 5, 5, 7, 9]) == 4
        assert calculate_std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == 2

    @pytest.mark.unit
    def test_cv(self):
        assert calculate_cv([10, 10, 10]) == 0
        assert calculate_cv([5, 15]) == pytest.approx(0.5)

    @pytest.mark.unit
    @pytest.mark.parametrize("values", [[], [0, 0], [-1, 1]])
    def test_cv_without_mean(self, values):
        assert calculate_cv(values) == 0


class TestLayoutFactors:
    """Tests for analyze_layout_factors."""

    @pytest.mark.unit
    def test_column_container(self, column_container):
        factors = analyze_layout_factors(
            column_container.children, LayoutType.COLUMN, column_container.frame
        )
        assert factors.avg_size == 50
        assert factors.element_count == 3
        assert factors.layout_density == pytest.approx(0.4)
        assert factors.size_uniformity == 1
        assert factors.position_regularity == 1

    @pytest.mark.unit
    def test_no_nodes(self):
        factors = analyze_layout_factors([], LayoutType.ROW)
        assert factors.avg_size == 0
        assert factors.element_count == 0

    @pytest.mark.unit
    def test_frameless_nodes_still_counted(self, make_node):
        factors = analyze_layout_factors([make_node("a"), make_node("b")], LayoutType.ROW)
        assert factors.element_count == 2
        assert factors.avg_size == 0

    @pytest.mark.unit
    def test_uneven_sizes_lower_uniformity(self, make_node):
        children = [make_node("a", 0, 0, 50, 10), make_node("b", 60, 0, 150, 10)]
        factors = analyze_layout_factors(children, LayoutType.ROW)
        assert factors.size_uniformity == pytest.approx(0.5)


class TestAdaptiveTolerance:
    """Tests for calculate_adaptive_tolerance."""

    @pytest.mark.unit
    def test_uniform_regular_stack(self, column_container):
        # 50 * 0.15, one extra child (0.92), uniform (0.6), regular (0.7)
        tolerance = calculate_adaptive_tolerance(
            column_container.children, LayoutType.COLUMN, column_container.frame
        )
        assert tolerance == pytest.approx(50 * 0.15 * 0.92 * 0.6 * 0.7)

    @pytest.mark.unit
    def test_no_sizes_gives_minimum(self, make_node):
        assert calculate_adaptive_tolerance([], LayoutType.ROW) == 2
        assert calculate_adaptive_tolerance([make_node("a")], LayoutType.ROW) == 2

    @pytest.mark.unit
    def test_small_children_clamp_to_minimum(self, make_node):
        children = [make_node(str(i), 0, i * 20, 10, 10) for i in range(3)]
        assert calculate_adaptive_tolerance(children, LayoutType.COLUMN) == 2

    @pytest.mark.unit
    def test_dense_container_loosens(self, make_node):
        children = [make_node("a", 0, 0, 100, 100), make_node("b", 100, 0, 100, 100)]
        parent = Frame(left=0, top=0, width=200, height=100)
        sparse = calculate_adaptive_tolerance(children, LayoutType.ROW)
        dense = calculate_adaptive_tolerance(children, LayoutType.ROW, parent)
        assert dense / sparse == pytest.approx(1.4)

    @pytest.mark.unit
    def test_upper_bound(self, make_node):
        children = [make_node("a", 0, 0, 100, 10), make_node("b", 120, 0, 100, 10)]
        config = AdaptiveToleranceConfig(
            base_size_ratio=1.0,
            high_uniformity_multiplier=1.0,
            high_regularity_multiplier=1.0,
        )
        assert calculate_adaptive_tolerance(children, LayoutType.ROW, config=config) == 30

    @pytest.mark.unit
    def test_more_children_tighten(self, make_node):
        def stack(count):
            return [make_node(str(i), 0, i * 60, 100, 50) for i in range(count)]

        few = calculate_row_split_tolerance(stack(3))
        many = calculate_row_split_tolerance(stack(5))
        assert many == pytest.approx(few * 0.92**2)

    @pytest.mark.unit
    def test_axis_wrappers(self, row_container):
        children = row_container.children
        assert calculate_row_split_tolerance(children) == calculate_adaptive_tolerance(
            children, LayoutType.COLUMN
        )
        assert calculate_column_split_tolerance(
            children
        ) == calculate_adaptive_tolerance(children, LayoutType.ROW)
        assert get_overlap_tolerance(
            children, LayoutType.ROW
        ) == -calculate_column_split_tolerance(children)


class TestSplitGap:
    """Tests for is_valid_split_gap."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "gap, tolerance, strict, expected",
        [
            (-2, -3, False, True),
            (-3, -3, False, True),
            (-4, -3, False, False),
            (0, -3, True, False),
            (1, -3, True, True),
        ],
    )
    def test_gap(self, gap, tolerance, strict, expected):
        assert is_valid_split_gap(gap, tolerance, strict) is expected


class TestOverlapTolerances:
    """Tests for the size-scaled overlap depths."""

    @pytest.mark.unit
    def test_no_frames(self):
        assert calculate_overlap_detection_tolerance([]) == OverlapTolerances(5, 10)

    @pytest.mark.unit
    def test_large_frames(self):
        frames = [Frame(left=0, top=0, width=300, height=400)] * 2
        depths = calculate_overlap_detection_tolerance(frames)
        assert depths.light == pytest.approx(15)
        assert depths.significant == pytest.approx(30)

    @pytest.mark.unit
    def test_small_frames_use_floors(self):
        frames = [Frame(left=0, top=0, width=20, height=20)]
        assert calculate_overlap_detection_tolerance(frames) == OverlapTolerances(3, 8)

    @pytest.mark.unit
    def test_resolve(self):
        frames = [Frame(left=0, top=0, width=300, height=300)]
        assert resolve_overlap_tolerances(frames) == (-5, -10)
        light, confirm = resolve_overlap_tolerances(frames, ADAPTIVE)
        assert light == pytest.approx(-15)
        assert confirm == pytest.approx(-30)


class TestAdaptiveDetectors:
    """Adaptive tolerances flowing through the detectors."""

    @pytest.mark.unit
    def test_split_keeps_overlapping_rows_together(self, make_node):
        children = [
            make_node("a", 0, 0, 100, 50),
            make_node("b", 0, 45, 100, 50),
            make_node("c", 0, 120, 100, 50),
        ]
        fixed = split_to_row(children)
        assert ids(fixed.groups) == [["a"], ["b"], ["c"]]
        assert fixed.gaps == [-5, 25]

        adaptive = split_to_row(children, ADAPTIVE)
        assert adaptive.success is True
        assert ids(adaptive.groups) == [["a", "b"], ["c"]]
        assert adaptive.gaps == [25]

    @pytest.mark.unit
    def test_large_children_need_deeper_overlap(self, make_node):
        """A 20px overlap is stacking for 100px cards but not for 300px ones."""
        a = make_node("a", 0, 0, 300, 300)
        b = make_node("b", 280, 0, 300, 300)
        parent = Frame(left=0, top=0, width=600, height=300)

        assert [n.id for n in classify_children(parent, [a, b]).absolute] == ["a", "b"]
        assert needs_absolute_positioning([a, b]) is True

        result = classify_children(parent, [a, b], ADAPTIVE)
        assert result.absolute == []
        assert [n.id for n in result.normal] == ["a", "b"]
        assert needs_absolute_positioning([a, b], ADAPTIVE) is False
