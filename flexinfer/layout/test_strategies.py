"""Unit tests for the scored split strategies."""

import math

import pytest

from flexinfer.layout import (
    CenterLineSplitStrategy,
    ClusteringSplitStrategy,
    GreedyEdgeSplitStrategy,
    GridAlignedSplitStrategy,
    LayoutTolerances,
    MultiStrategySplitExecutor,
    ScoredSplitResult,
    SplitContext,
    SplitMode,
    SplitResult,
    analyze_scored_split,
    calculate_split_score,
    determine_layout_type,
    scored_split,
)
from flexinfer.schema import LayoutType

SCORED = LayoutTolerances(split_mode=SplitMode.SCORED)


def ids(groups):
    return [[n.id for n in group] for group in groups]


def column_context(tolerance=-10.0, merge_distance=5.0):
    return SplitContext(LayoutType.COLUMN, tolerance, merge_distance=merge_distance)


def row_context(tolerance=-10.0, merge_distance=5.0):
    return SplitContext(LayoutType.ROW, tolerance, merge_distance=merge_distance)


class TestSplitScore:
    """Tests for calculate_split_score."""

    @pytest.mark.unit
    def test_single_band_scores_zero(self, make_node):
        assert calculate_split_score([[make_node("a")]], [], 10, 0) == 0

    @pytest.mark.unit
    def test_balanced_even_aligned_split(self, make_node):
        groups = [[make_node("a")], [make_node("b")]]
        # balance 50, gaps 30, margin 10 / 5, alignment 10
        assert calculate_split_score(groups, [10], 10, 0) == pytest.approx(92)

    @pytest.mark.unit
    def test_unbalanced_split_without_gaps(self, make_node):
        groups = [[make_node("a")], [make_node(c) for c in "bcd"]]
        assert calculate_split_score(groups, [], None, math.inf) == pytest.approx(
            50 / 1.5
        )

    @pytest.mark.unit
    def test_alignment_deviation_and_margin_cap(self, make_node):
        groups = [[make_node("a")], [make_node("b")]]
        assert calculate_split_score(groups, [100], 100, 25) == pytest.approx(95)


class TestGreedyEdgeSplit:
    """Tests for GreedyEdgeSplitStrategy."""

    @pytest.mark.unit
    def test_stacked_children(self, column_container):
        result = GreedyEdgeSplitStrategy().execute(
            column_container.children, column_context()
        )
        assert result.success is True
        assert result.strategy_name == "greedy-edge"
        assert ids(result.groups) == [["a"], ["b"], ["c"]]
        assert result.gaps == [20, 20]
        assert result.min_margin == 20
        assert result.align_deviation == 0
        assert result.score == pytest.approx(94)

    @pytest.mark.unit
    def test_unsorted_input_comes_out_in_visual_order(self, column_container):
        a, b, c = column_container.children
        result = GreedyEdgeSplitStrategy().execute([c, a, b], column_context())
        assert result.success is True
        assert ids(result.groups) == [["a"], ["b"], ["c"]]

    @pytest.mark.unit
    def test_side_by_side_children_form_one_band(self, row_container):
        result = GreedyEdgeSplitStrategy().execute(
            row_container.children, column_context()
        )
        assert result.success is False
        assert len(result.groups) == 1
        assert result.score == 0

    @pytest.mark.unit
    def test_single_node(self, make_node):
        result = GreedyEdgeSplitStrategy().execute(
            [make_node("a", 0, 0, 10, 10)], column_context()
        )
        assert result.success is False
        assert result.layout_type == LayoutType.COLUMN


class TestCenterLineSplit:
    """Tests for CenterLineSplitStrategy."""

    @pytest.mark.unit
    def test_cuts_at_wide_center_gap(self, make_node):
        children = [
            make_node("a", 0, 0, 100, 50),
            make_node("b", 0, 20, 100, 30),
            make_node("c", 0, 130, 100, 40),
        ]
        result = CenterLineSplitStrategy().execute(children, column_context(-8))
        assert result.success is True
        assert ids(result.groups) == [["a", "b"], ["c"]]
        assert result.gaps == [80]

    @pytest.mark.unit
    def test_even_centers_do_not_split(self, column_container):
        result = CenterLineSplitStrategy().execute(
            column_container.children, column_context()
        )
        assert result.success is False
        assert result.strategy_name == "center-line"


class TestGridAlignedSplit:
    """Tests for GridAlignedSplitStrategy."""

    @pytest.mark.unit
    def test_tracks_merge_within_distance(self, make_node):
        children = [
            make_node("a", 0, 0, 50, 20),
            make_node("b", 52, 0, 50, 20),
            make_node("c", 200, 0, 50, 20),
        ]
        result = GridAlignedSplitStrategy().execute(children, row_context())
        assert ids(result.groups) == [["a", "b"], ["c"]]
        assert result.gaps == [98]

    @pytest.mark.unit
    def test_regular_tracks_earn_bonus(self, row_container):
        result = GridAlignedSplitStrategy().execute(
            row_container.children, row_context(-20)
        )
        assert ids(result.groups) == [["a"], ["b"], ["c"]]
        assert result.score == pytest.approx(104)


class TestClusteringSplit:
    """Tests for ClusteringSplitStrategy."""

    @pytest.mark.unit
    def test_close_children_share_cluster(self, make_node):
        children = [
            make_node("c", 300, 0, 50, 20),
            make_node("a", 0, 0, 50, 20),
            make_node("b", 60, 0, 50, 20),
        ]
        result = ClusteringSplitStrategy().execute(children, row_context(-5))
        assert result.success is True
        assert ids(result.groups) == [["a", "b"], ["c"]]
        assert result.gaps == [190]

    @pytest.mark.unit
    def test_everything_linked(self, row_container):
        result = ClusteringSplitStrategy().execute(
            row_container.children, row_context(-20)
        )
        assert result.success is False


class TestMultiStrategySplitExecutor:
    """Tests for MultiStrategySplitExecutor."""

    @pytest.mark.unit
    def test_picks_highest_score(self, column_container):
        executor = MultiStrategySplitExecutor()
        results = executor.execute_all(column_container.children, column_context())
        assert [r.strategy_name for r in results] == [
            "greedy-edge",
            "center-line",
            "grid-aligned",
            "clustering",
        ]

        best = executor.execute(column_container.children, column_context())
        assert best.strategy_name == "grid-aligned"
        assert best.score == max(r.score for r in results)

    @pytest.mark.unit
    def test_custom_strategies(self, column_container):
        executor = MultiStrategySplitExecutor([CenterLineSplitStrategy()])
        result = executor.execute(column_container.children, column_context())
        assert result.success is False
        assert result.strategy_name == "center-line"

    @pytest.mark.unit
    def test_single_node(self, make_node):
        result = MultiStrategySplitExecutor().execute(
            [make_node("a", 0, 0, 10, 10)], row_context()
        )
        assert result.success is False
        assert result.strategy_name == "none"
        assert result.layout_type == LayoutType.ROW


class TestScoredSplit:
    """Tests for scored_split and analyze_scored_split."""

    @pytest.mark.unit
    def test_scored_split_uses_axis_tolerance(self, row_container):
        result = scored_split(row_container.children, LayoutType.ROW, row_container.frame)
        assert result.success is True
        assert result.strategy_name == "grid-aligned"
        assert result.gaps == [20, 20]

    @staticmethod
    def _result(make_node, score, gaps, layout_type):
        groups = [[make_node(f"g{i}")] for i in range(len(gaps) + 1)]
        return ScoredSplitResult(
            success=True, groups=groups, gaps=gaps, layout_type=layout_type, score=score
        )

    @pytest.mark.unit
    def test_tie_prefers_column(self, make_node):
        column = self._result(make_node, 80, [10], LayoutType.COLUMN)
        row = self._result(make_node, 80, [10], LayoutType.ROW)
        assert analyze_scored_split(column, row) == (LayoutType.COLUMN, column)

    @pytest.mark.unit
    def test_higher_score_wins(self, make_node):
        column = self._result(make_node, 60, [10], LayoutType.COLUMN)
        row = self._result(make_node, 90, [10], LayoutType.ROW)
        direction, result = analyze_scored_split(column, row)
        assert direction == LayoutType.ROW
        assert result is row

    @pytest.mark.unit
    def test_degenerate_split_is_unusable(self, make_node):
        stacked = self._result(make_node, 99, [-5, -5], LayoutType.COLUMN)
        row = self._result(make_node, 40, [10], LayoutType.ROW)
        direction, result = analyze_scored_split(stacked, row)
        assert direction == LayoutType.ROW
        assert result is row

    @pytest.mark.unit
    def test_neither_usable(self):
        failed = ScoredSplitResult(success=False)
        assert analyze_scored_split(failed, failed) == (
            LayoutType.MIX,
            SplitResult(success=False),
        )


class TestScoredLayoutType:
    """determine_layout_type with the scored split mode."""

    @pytest.mark.unit
    def test_column(self, column_container):
        decision = determine_layout_type(
            column_container.frame, column_container.children, SCORED
        )
        assert decision.layout_type == LayoutType.COLUMN
        assert ids(decision.groups) == [["a"], ["b"], ["c"]]
        assert decision.gaps == [20, 20]

    @pytest.mark.unit
    def test_row(self, row_container):
        decision = determine_layout_type(
            row_container.frame, row_container.children, SCORED
        )
        assert decision.layout_type == LayoutType.ROW
        assert ids(decision.groups) == [["a"], ["b"], ["c"]]

    @pytest.mark.unit
    def test_stacked_overlap_is_mix(self, make_node):
        children = [make_node("a", 0, 0, 100, 100), make_node("b", 10, 10, 100, 100)]
        decision = determine_layout_type(None, children, SCORED)
        assert decision.layout_type == LayoutType.MIX
        assert ids(decision.groups) == [["a", "b"]]
