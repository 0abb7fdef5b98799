"""Unit tests for frame geometry utilities."""

import pytest

from flexinfer.geometry import (
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
    relative_frame,
    sort_by_position,
    vertical_gap,
    vertical_overlap,
)
from flexinfer.schema import Frame, LayoutType


class TestNormalizeFrame:
    """Tests for frame normalization."""

    @pytest.mark.unit
    def test_derives_right_and_bottom(self):
        """right/bottom are computed from left/top + width/height."""
        frame = normalize_frame({"left": 10, "top": 20, "width": 100, "height": 50})
        assert frame.right == 110
        assert frame.bottom == 70

    @pytest.mark.unit
    def test_missing_fields_default_to_zero(self):
        """Omitted coordinates default to 0."""
        frame = normalize_frame({"width": 40})
        assert (frame.left, frame.top, frame.height) == (0, 0, 0)
        assert frame.right == 40
        assert frame.bottom == 0

    @pytest.mark.unit
    def test_recomputes_stale_derived_fields(self):
        """Stale right/bottom values are replaced."""
        frame = normalize_frame(
            Frame(left=0, top=0, width=10, height=10, right=99, bottom=99)
        )
        assert frame.right == 10
        assert frame.bottom == 10

    @pytest.mark.unit
    def test_non_numeric_values_default_to_zero(self):
        """Garbage values normalize to 0 instead of raising."""
        frame = normalize_frame({"left": "x", "top": None, "width": 5, "height": 5})
        assert frame.left == 0
        assert frame.top == 0


class TestFrameValidity:
    """Tests for is_valid_frame and get_node_frame."""

    @pytest.mark.unit
    def test_valid_frame(self):
        assert is_valid_frame(Frame(left=0, top=0, width=0, height=0))

    @pytest.mark.unit
    def test_negative_dimensions_invalid(self):
        assert not is_valid_frame({"left": 0, "top": 0, "width": -1, "height": 5})

    @pytest.mark.unit
    def test_missing_frame_invalid(self):
        assert not is_valid_frame(None)
        assert not is_valid_frame({"left": 0, "top": 0})

    @pytest.mark.unit
    def test_node_frame_is_normalized(self, make_node):
        frame = get_node_frame(make_node("a", 5, 5, 10, 20))
        assert frame.right == 15
        assert frame.bottom == 25

    @pytest.mark.unit
    def test_frameless_node(self, make_node):
        assert get_node_frame(make_node("a")) is None


class TestOverlap:
    """Tests for overlap predicates and amounts."""

    @pytest.mark.unit
    def test_touching_frames_do_not_overlap(self):
        a = {"left": 0, "top": 0, "width": 50, "height": 50}
        b = {"left": 50, "top": 0, "width": 50, "height": 50}
        assert not frames_overlap(a, b)
        assert frames_overlap(a, b, tolerance=1)

    @pytest.mark.unit
    def test_negative_tolerance_ignores_shallow_overlap(self):
        a = {"left": 0, "top": 0, "width": 50, "height": 50}
        b = {"left": 45, "top": 0, "width": 50, "height": 50}
        assert frames_overlap(a, b)
        assert not frames_overlap(a, b, tolerance=-5)

    @pytest.mark.unit
    def test_axis_specific_overlap(self):
        a = {"left": 0, "top": 0, "width": 50, "height": 50}
        b = {"left": 100, "top": 10, "width": 50, "height": 50}
        assert frames_overlap_vertically(a, b)
        assert not frames_overlap_horizontally(a, b)
        assert not frames_overlap(a, b)

    @pytest.mark.unit
    def test_overlap_amounts(self):
        a = {"left": 0, "top": 0, "width": 50, "height": 50}
        b = {"left": 30, "top": 40, "width": 50, "height": 50}
        assert horizontal_overlap(a, b) == 20
        assert vertical_overlap(a, b) == 10

    @pytest.mark.unit
    def test_zero_area_frames_have_no_overlap(self):
        a = {"left": 10, "top": 10, "width": 0, "height": 0}
        b = {"left": 10, "top": 10, "width": 0, "height": 0}
        assert horizontal_overlap(a, b) == 0
        assert not frames_overlap(a, b)

    @pytest.mark.unit
    @pytest.mark.parametrize("offset", [0, 3, 8, 15, 40, 49, 50, 60])
    def test_tolerance_monotonicity(self, offset):
        """Growing tolerance never turns an overlapping pair into a disjoint one."""
        a = {"left": 0, "top": 0, "width": 50, "height": 50}
        b = {"left": offset, "top": offset // 2, "width": 50, "height": 50}
        tolerances = [-20, -10, -5, -1, 0, 1, 5, 10, 20]
        results = [frames_overlap(a, b, tol) for tol in tolerances]
        first_true = results.index(True) if True in results else len(results)
        assert all(results[first_true:])
        assert not any(results[:first_true])


class TestGaps:
    """Tests for signed gap measurements."""

    @pytest.mark.unit
    def test_horizontal_gap_is_symmetric(self):
        a = {"left": 0, "top": 0, "width": 50, "height": 10}
        b = {"left": 70, "top": 0, "width": 50, "height": 10}
        assert horizontal_gap(a, b) == 20
        assert horizontal_gap(b, a) == 20

    @pytest.mark.unit
    def test_horizontal_gap_negative_on_overlap(self):
        a = {"left": 0, "top": 0, "width": 50, "height": 10}
        b = {"left": 35, "top": 0, "width": 50, "height": 10}
        assert horizontal_gap(a, b) == -15

    @pytest.mark.unit
    def test_vertical_gap(self):
        a = {"left": 0, "top": 0, "width": 10, "height": 30}
        b = {"left": 0, "top": 42, "width": 10, "height": 30}
        assert vertical_gap(a, b) == 12
        c = {"left": 0, "top": 20, "width": 10, "height": 30}
        assert vertical_gap(a, c) == -10


class TestComposition:
    """Tests for bounding boxes, relative frames and padding."""

    @pytest.mark.unit
    def test_bounding_frame(self):
        box = bounding_frame(
            [
                {"left": 10, "top": 20, "width": 30, "height": 30},
                {"left": 100, "top": 5, "width": 20, "height": 10},
            ]
        )
        assert (box.left, box.top, box.right, box.bottom) == (10, 5, 120, 50)
        assert box.width == 110
        assert box.height == 45

    @pytest.mark.unit
    def test_bounding_frame_empty(self):
        assert bounding_frame([]) is None

    @pytest.mark.unit
    def test_relative_frame(self):
        rel = relative_frame(
            {"left": 110, "top": 60, "width": 20, "height": 10},
            {"left": 100, "top": 50, "width": 200, "height": 200},
        )
        assert (rel.left, rel.top, rel.right, rel.bottom) == (10, 10, 30, 20)

    @pytest.mark.unit
    def test_calculate_padding_clamps_negative(self):
        padding = calculate_padding(
            {"left": 0, "top": 0, "width": 200, "height": 100},
            {"left": 20, "top": -5, "width": 160, "height": 60},
        )
        assert padding == {"top": 0, "right": 20, "bottom": 45, "left": 20}


class TestPredicates:
    """Tests for containment and alignment predicates."""

    @pytest.mark.unit
    def test_contains_with_tolerance(self):
        parent = {"left": 0, "top": 0, "width": 100, "height": 100}
        child = {"left": -2, "top": 10, "width": 50, "height": 50}
        assert not frame_contains(parent, child)
        assert frame_contains(parent, child, tolerance=2)

    @pytest.mark.unit
    def test_horizontal_alignment(self):
        a = {"left": 0, "top": 10, "width": 40, "height": 30}
        b = {"left": 60, "top": 11, "width": 80, "height": 31}
        assert are_horizontally_aligned(a, b)
        assert not are_vertically_aligned(a, b)
        assert aligned(a, b)

    @pytest.mark.unit
    def test_vertical_alignment(self):
        a = {"left": 10, "top": 0, "width": 40, "height": 30}
        b = {"left": 10, "top": 50, "width": 40, "height": 10}
        assert are_vertically_aligned(a, b)
        assert not are_horizontally_aligned(a, b)

    @pytest.mark.unit
    def test_unaligned(self):
        a = {"left": 0, "top": 0, "width": 40, "height": 30}
        b = {"left": 60, "top": 50, "width": 10, "height": 10}
        assert not aligned(a, b)


class TestOrdering:
    """Tests for positional sorting and sequential arrangement checks."""

    @pytest.mark.unit
    def test_sort_row_axis(self, make_node):
        nodes = [
            make_node("c", 200, 0, 10, 10),
            make_node("a", 0, 50, 10, 10),
            make_node("b", 0, 10, 10, 10),
        ]
        ordered = sort_by_position(nodes, LayoutType.ROW)
        assert [n.id for n in ordered] == ["b", "a", "c"]

    @pytest.mark.unit
    def test_sort_column_axis(self, make_node):
        nodes = [
            make_node("c", 0, 100, 10, 10),
            make_node("b", 50, 0, 10, 10),
            make_node("a", 0, 0, 10, 10),
        ]
        ordered = sort_by_position(nodes, "column")
        assert [n.id for n in ordered] == ["a", "b", "c"]

    @pytest.mark.unit
    def test_sort_is_stable_and_frameless_last(self, make_node):
        nodes = [
            make_node("x"),
            make_node("a", 0, 0, 10, 10),
            make_node("b", 0, 0, 10, 10),
            make_node("y"),
        ]
        ordered = sort_by_position(nodes)
        assert [n.id for n in ordered] == ["a", "b", "x", "y"]

    @pytest.mark.unit
    def test_sort_does_not_mutate_input(self, make_node):
        nodes = [make_node("b", 50, 0, 10, 10), make_node("a", 0, 0, 10, 10)]
        sort_by_position(nodes)
        assert [n.id for n in nodes] == ["b", "a"]

    @pytest.mark.unit
    def test_disjoint_nodes_arrange_both_ways(self, make_node):
        nodes = [
            make_node("a", 0, 0, 50, 50),
            make_node("b", 60, 0, 50, 50),
            make_node("c", 120, 0, 50, 50),
        ]
        assert can_arrange_in_row(nodes)
        assert can_arrange_in_column(nodes)

    @pytest.mark.unit
    def test_only_sequential_pairs_are_checked(self, make_node):
        """The row sweep never compares `a` with `c`; the column sweep does."""
        nodes = [
            make_node("a", 0, 0, 100, 20),
            make_node("b", 10, 30, 20, 100),
            make_node("c", 50, 5, 20, 20),
        ]
        assert can_arrange_in_row(nodes)
        assert not can_arrange_in_column(nodes)

    @pytest.mark.unit
    def test_stacked_nodes_fit_neither(self, make_node):
        nodes = [make_node("a", 0, 0, 100, 100), make_node("b", 20, 20, 100, 100)]
        assert not can_arrange_in_row(nodes)
        assert not can_arrange_in_column(nodes)

    @pytest.mark.unit
    def test_single_node_always_arranges(self, make_node):
        nodes = [make_node("a", 0, 0, 10, 10)]
        assert can_arrange_in_row(nodes)
        assert can_arrange_in_column(nodes)
