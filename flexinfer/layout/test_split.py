"""Unit tests for row/column split analysis."""

import random

import pytest

from flexinfer.geometry import sort_by_position
from flexinfer.layout import (
    LayoutTolerances,
    SplitResult,
    analyze_split,
    are_gaps_equal,
    calculate_average_gap,
    split_to_column,
    split_to_row,
)
from flexinfer.schema import LayoutType


def ids(groups):
    return [[n.id for n in group] for group in groups]


class TestSplitToRow:
    """Tests for split_to_row (horizontal bands)."""

    @pytest.mark.unit
    def test_stacked_children(self, column_container):
        result = split_to_row(column_container.children)
        assert result.success is True
        assert ids(result.groups) == [["a"], ["b"], ["c"]]
        assert result.gaps == [20, 20]

    @pytest.mark.unit
    def test_side_by_side_children_form_one_band(self, row_container):
        result = split_to_row(row_container.children)
        assert result.success is False
        assert ids(result.groups) == [["a", "b", "c"]]
        assert result.gaps == []

    @pytest.mark.unit
    def test_unsorted_input_must_be_sorted_first(self, make_node):
        """A bottom-first list bands correctly but fails the order check."""
        above = make_node("a", 0, 0, 100, 50)
        below = make_node("b", 0, 100, 100, 50)

        unsorted = split_to_row([below, above])
        assert unsorted.success is False
        assert ids(unsorted.groups) == [["a"], ["b"]]

        result = split_to_row(sort_by_position([below, above], LayoutType.COLUMN))
        assert result.success is True
        assert ids(result.groups) == [["a"], ["b"]]
        assert result.gaps == [50]

    @pytest.mark.unit
    def test_fewer_than_two_children(self, make_node):
        single = make_node("a", 0, 0, 10, 10)
        assert split_to_row([single]) == SplitResult(success=False, groups=[[single]])
        assert split_to_row([]) == SplitResult(success=False, groups=[])

    @pytest.mark.unit
    def test_band_members_keep_input_order(self, make_node):
        """A short element ending first still follows its taller band mate."""
        tall = make_node("tall", 0, 0, 100, 100)
        short = make_node("short", 120, 10, 50, 20)
        below = make_node("below", 0, 130, 100, 20)
        result = split_to_row([tall, short, below])
        assert result.success is True
        assert ids(result.groups) == [["tall", "short"], ["below"]]
        assert result.gaps == [30]

    @pytest.mark.unit
    def test_reordering_split_fails(self, column_container):
        a, b, c = column_container.children
        result = split_to_row([c, a, b])
        assert result.success is False
        assert ids(result.groups) == [["a"], ["b"], ["c"]]

    @pytest.mark.unit
    def test_overlapping_singletons_are_degenerate(self, make_node):
        a = make_node("a", 0, 0, 100, 50)
        b = make_node("b", 0, 45, 100, 50)
        result = split_to_row([a, b])
        assert len(result.groups) == 2
        assert result.gaps == [-5]
        assert result.success is False

    @pytest.mark.unit
    def test_gap_ratio_controls_banding(self, make_node):
        children = [
            make_node("a", 0, 0, 100, 50),
            make_node("b", 0, 40, 100, 50),
            make_node("c", 0, 120, 100, 50),
        ]
        default = split_to_row(children)
        assert ids(default.groups) == [["a", "b"], ["c"]]
        assert default.gaps == [30]

        loose = split_to_row(children, LayoutTolerances(row_split_gap_ratio=0.3))
        assert ids(loose.groups) == [["a"], ["b"], ["c"]]
        assert loose.gaps == [-10, 30]
        assert loose.success is True

    @pytest.mark.unit
    def test_frameless_child_travels_with_predecessor(self, make_node):
        children = [
            make_node("a", 0, 0, 100, 50),
            make_node("loose"),
            make_node("b", 0, 100, 100, 50),
        ]
        result = split_to_row(children)
        assert result.success is True
        assert ids(result.groups) == [["a", "loose"], ["b"]]

    @pytest.mark.unit
    def test_leading_frameless_child_joins_first_band(self, make_node):
        children = [
            make_node("loose"),
            make_node("a", 0, 0, 100, 50),
            make_node("b", 0, 100, 100, 50),
        ]
        result = split_to_row(children)
        assert ids(result.groups) == [["loose", "a"], ["b"]]
        assert result.gaps == [50]


class TestSplitToColumn:
    """Tests for split_to_column (vertical bands)."""

    @pytest.mark.unit
    def test_side_by_side_children(self, row_container):
        result = split_to_column(row_container.children)
        assert result.success is True
        assert ids(result.groups) == [["a"], ["b"], ["c"]]
        assert result.gaps == [20, 20]

    @pytest.mark.unit
    def test_stacked_children_form_one_band(self, column_container):
        result = split_to_column(column_container.children)
        assert result.success is False
        assert len(result.groups) == 1

    @pytest.mark.unit
    def test_columns_of_stacked_items(self, make_node):
        children = [
            make_node("nav-1", 0, 0, 60, 20),
            make_node("nav-2", 0, 30, 60, 20),
            make_node("body", 80, 0, 200, 200),
        ]
        result = split_to_column(children)
        assert result.success is True
        assert ids(result.groups) == [["nav-1", "nav-2"], ["body"]]
        assert result.gaps == [20]


class TestSplitInvariant:
    """Successful splits are order-preserving partitions of their input."""

    @staticmethod
    def _random_children(make_node, seed):
        rng = random.Random(seed)
        return [
            make_node(
                f"n{i}",
                rng.randint(0, 400),
                rng.randint(0, 400),
                rng.randint(10, 120),
                rng.randint(10, 120),
            )
            for i in range(rng.randint(2, 9))
        ]

    @pytest.mark.unit
    @pytest.mark.parametrize("seed", range(20))
    @pytest.mark.parametrize(
        "split, axis",
        [(split_to_row, LayoutType.COLUMN), (split_to_column, LayoutType.ROW)],
    )
    def test_partition(self, make_node, seed, split, axis):
        children = sort_by_position(self._random_children(make_node, seed), axis)
        result = split(children)

        flat = [n for group in result.groups for n in group]
        assert sorted(n.id for n in flat) == sorted(n.id for n in children)
        assert len(result.gaps) == max(len(result.groups) - 1, 0)
        if result.success:
            assert [n.id for n in flat] == [n.id for n in children]
            assert len(result.groups) >= 2


class TestAnalyzeSplit:
    """Tests for analyze_split tie-breaking."""

    @staticmethod
    def _split(success, gaps, make_node):
        groups = [[make_node(f"g{i}")] for i in range(len(gaps) + 1)]
        return SplitResult(success=success, groups=groups, gaps=gaps)

    @pytest.mark.unit
    def test_neither_succeeds(self, make_node):
        direction, result = analyze_split(
            self._split(False, [], make_node), self._split(False, [], make_node)
        )
        assert direction == LayoutType.MIX
        assert result == SplitResult(success=False)

    @pytest.mark.unit
    def test_only_row_split_succeeds(self, make_node):
        row_split = self._split(True, [10], make_node)
        direction, result = analyze_split(row_split, self._split(False, [], make_node))
        assert direction == LayoutType.COLUMN
        assert result is row_split

    @pytest.mark.unit
    def test_only_column_split_succeeds(self, make_node):
        column_split = self._split(True, [10], make_node)
        direction, result = analyze_split(
            self._split(False, [], make_node), column_split
        )
        assert direction == LayoutType.ROW
        assert result is column_split

    @pytest.mark.unit
    def test_fewer_groups_wins(self, make_node):
        row_split = self._split(True, [10, 10, 10], make_node)
        column_split = self._split(True, [40], make_node)
        direction, result = analyze_split(row_split, column_split)
        assert direction == LayoutType.ROW
        assert result is column_split

    @pytest.mark.unit
    def test_equal_groups_prefer_uniform_gaps(self, make_node):
        uneven = self._split(True, [10, 30], make_node)
        even = self._split(True, [20, 20], make_node)

        direction, result = analyze_split(uneven, even)
        assert direction == LayoutType.ROW
        assert result is even

        direction, result = analyze_split(even, uneven)
        assert direction == LayoutType.COLUMN
        assert result is even

    @pytest.mark.unit
    def test_exact_tie_prefers_row_bands(self, make_node):
        row_split = self._split(True, [12], make_node)
        column_split = self._split(True, [30], make_node)
        direction, result = analyze_split(row_split, column_split)
        assert direction == LayoutType.COLUMN
        assert result is row_split


class TestGapHelpers:
    """Tests for calculate_average_gap and are_gaps_equal."""

    @pytest.mark.unit
    def test_average_ignores_overlaps(self):
        assert calculate_average_gap([10, 20, -5]) == 15

    @pytest.mark.unit
    @pytest.mark.parametrize("gaps", [[], [-1, 0]])
    def test_average_without_positive_gaps(self, gaps):
        assert calculate_average_gap(gaps) == 0

    @pytest.mark.unit
    def test_equal_gaps(self):
        assert are_gaps_equal([20, 22, 18])
        assert are_gaps_equal([7])
        assert not are_gaps_equal([10, 30])
        assert are_gaps_equal([10, 30], tolerance=10)
