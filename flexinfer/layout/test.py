"""Unit tests for child classification, layout determination and grids."""

import dataclasses
import random

import pytest

from flexinfer.layout import (
    DEFAULT_TOLERANCES,
    LayoutTolerances,
    SplitMode,
    classify_children,
    detect_grid_pattern,
    determine_layout_type,
)
from flexinfer.schema import Frame, LayoutType

PARENT = Frame(left=0, top=0, width=300, height=200)


def ids(nodes):
    return [n.id for n in nodes]


# =============================================================================
# Tolerances
# =============================================================================


class TestLayoutTolerances:
    """Tests for LayoutTolerances resolution."""

    @pytest.mark.unit
    def test_environment_defaults_match_builtins(self):
        assert LayoutTolerances.from_environment() == DEFAULT_TOLERANCES

    @pytest.mark.unit
    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("FLEXINFER_OVERLAP_CONFIRM_TOLERANCE", "-20")
        monkeypatch.setenv("FLEXINFER_GRID_MIN_CHILDREN", "6")
        tol = LayoutTolerances.from_environment()
        assert tol.overlap_confirm == -20.0
        assert tol.grid_min_children == 6
        assert tol.overlap_light == DEFAULT_TOLERANCES.overlap_light

    @pytest.mark.unit
    def test_strategy_switches_from_environment(self, monkeypatch):
        monkeypatch.setenv("FLEXINFER_SPLIT_STRATEGY", "Scored")
        monkeypatch.setenv("FLEXINFER_ADAPTIVE_TOLERANCE", "on")
        monkeypatch.setenv("FLEXINFER_SCORED_ALIGNMENT", "1")
        tol = LayoutTolerances.from_environment()
        assert tol.split_mode == SplitMode.SCORED
        assert tol.adaptive is True
        assert tol.scored_alignment is True

    @pytest.mark.unit
    def test_unknown_split_strategy_falls_back_to_sweep(self, monkeypatch):
        monkeypatch.setenv("FLEXINFER_SPLIT_STRATEGY", "quantum")
        assert LayoutTolerances.from_environment().split_mode == SplitMode.SWEEP

    @pytest.mark.unit
    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_TOLERANCES.overlap_light = 0


# =============================================================================
# Classification
# =============================================================================


class TestClassifyChildren:
    """Tests for classify_children."""

    @pytest.mark.unit
    def test_overlapping_pair_is_absolute(self, make_node):
        """Two children overlapping by 15px are both stacked."""
        a = make_node("a", 0, 0, 100, 100)
        b = make_node("b", 85, 0, 100, 100)
        result = classify_children(PARENT, [a, b])
        assert ids(result.absolute) == ["a", "b"]
        assert result.normal == []

    @pytest.mark.unit
    def test_adjacent_children_stay_normal(self, make_node):
        a = make_node("a", 0, 0, 100, 100)
        b = make_node("b", 97, 0, 100, 100)
        result = classify_children(PARENT, [a, b])
        assert ids(result.normal) == ["a", "b"]

    @pytest.mark.unit
    def test_shallow_overlap_not_confirmed(self, make_node):
        """An 8px overlap passes the light test but not the confirmation."""
        a = make_node("a", 0, 0, 100, 100)
        b = make_node("b", 92, 0, 100, 100)
        result = classify_children(PARENT, [a, b])
        assert ids(result.normal) == ["a", "b"]
        assert result.absolute == []

    @pytest.mark.unit
    def test_hidden_siblings_do_not_stack(self, make_node):
        a = make_node("a", 0, 0, 100, 100)
        ghost = make_node("ghost", 0, 0, 100, 100, hidden=True)
        result = classify_children(PARENT, [a, ghost])
        assert ids(result.normal) == ["a"]
        assert ids(result.hidden) == ["ghost"]

    @pytest.mark.unit
    def test_fixed_position_is_absolute(self, make_node):
        fab = make_node("fab", 250, 150, 40, 40, **{"x-layout": {"fixed": True}})
        result = classify_children(PARENT, [fab])
        assert ids(result.absolute) == ["fab"]

    @pytest.mark.unit
    def test_frameless_child_never_absolute_by_overlap(self, make_node):
        a = make_node("a", 0, 0, 100, 100)
        loose = make_node("loose")
        result = classify_children(PARENT, [a, loose])
        assert ids(result.normal) == ["a", "loose"]

    @pytest.mark.unit
    def test_precedence(self, make_node):
        """hidden beats slot, slot beats fixed."""
        both = make_node("both", hidden=True, slot="header")
        slot_fixed = make_node("slot_fixed", slot="footer", fixedPosition=True)
        result = classify_children(PARENT, [both, slot_fixed])
        assert ids(result.hidden) == ["both"]
        assert ids(result.slot) == ["slot_fixed"]
        assert result.absolute == []

    @pytest.mark.unit
    def test_custom_confirm_tolerance(self, make_node):
        a = make_node("a", 0, 0, 100, 100)
        b = make_node("b", 85, 0, 100, 100)
        tol = LayoutTolerances(overlap_confirm=-20)
        result = classify_children(PARENT, [a, b], tol)
        assert ids(result.normal) == ["a", "b"]

    @pytest.mark.unit
    @pytest.mark.parametrize("seed", range(8))
    def test_buckets_partition_children(self, make_node, seed):
        """Buckets are disjoint and together hold every child exactly once."""
        rng = random.Random(seed)
        children = []
        for i in range(12):
            extra = {}
            roll = rng.random()
            if roll < 0.1:
                extra["hidden"] = True
            elif roll < 0.2:
                extra["slot"] = "s"
            elif roll < 0.25:
                extra["fixedPosition"] = True
            if rng.random() < 0.1:
                children.append(make_node(f"n{i}", **extra))
            else:
                children.append(
                    make_node(
                        f"n{i}",
                        rng.randint(0, 250),
                        rng.randint(0, 150),
                        rng.randint(0, 80),
                        rng.randint(0, 80),
                        **extra,
                    )
                )

        result = classify_children(PARENT, children)
        buckets = [result.normal, result.absolute, result.hidden, result.slot]
        flat = [n.id for bucket in buckets for n in bucket]
        assert sorted(flat) == sorted(ids(children))
        assert len(flat) == len(set(flat))


# =============================================================================
# Layout Type Determination
# =============================================================================


class TestDetermineLayoutType:
    """Tests for determine_layout_type decision rules."""

    @pytest.mark.unit
    def test_no_children(self):
        decision = determine_layout_type(PARENT, [])
        assert decision.layout_type == LayoutType.ROW
        assert decision.groups == []
        assert decision.gaps == []

    @pytest.mark.unit
    def test_single_wide_loop_child_is_column(self, make_node):
        item = make_node("item", 0, 0, 300, 50, loop="{{ items }}")
        decision = determine_layout_type(PARENT, [item])
        assert decision.layout_type == LayoutType.COLUMN
        assert decision.groups == [[item]]

    @pytest.mark.unit
    def test_tall_loop_child_is_row(self, make_node):
        item = make_node("item", 0, 0, 50, 120, loop="items")
        other = make_node("other", 100, 0, 50, 120)
        decision = determine_layout_type(PARENT, [item, other])
        assert decision.layout_type == LayoutType.ROW
        assert decision.groups == [[item, other]]

    @pytest.mark.unit
    def test_single_child(self, make_node):
        child = make_node("only", 10, 10, 50, 50)
        decision = determine_layout_type(PARENT, [child])
        assert decision.layout_type == LayoutType.ROW
        assert decision.groups == [[child]]

    @pytest.mark.unit
    def test_only_slots(self, make_node):
        slots = [make_node("s1", slot="a"), make_node("s2", component_name="Slot")]
        decision = determine_layout_type(PARENT, slots)
        assert decision.layout_type == LayoutType.ROW
        assert decision.groups == [slots]

    @pytest.mark.unit
    def test_side_by_side_is_row(self, row_container):
        decision = determine_layout_type(row_container.frame, row_container.children)
        assert decision.layout_type == LayoutType.ROW
        assert [ids(g) for g in decision.groups] == [["a"], ["b"], ["c"]]
        assert decision.gaps == [20, 20]

    @pytest.mark.unit
    def test_stacked_is_column(self, column_container):
        decision = determine_layout_type(
            column_container.frame, column_container.children
        )
        assert decision.layout_type == LayoutType.COLUMN
        assert [ids(g) for g in decision.groups] == [["a"], ["b"], ["c"]]
        assert decision.gaps == [20, 20]

    @pytest.mark.unit
    def test_groups_follow_visual_order(self, row_container):
        c, a, b = row_container.children[2], *row_container.children[:2]
        decision = determine_layout_type(row_container.frame, [c, a, b])
        assert [ids(g) for g in decision.groups] == [["a"], ["b"], ["c"]]

    @pytest.mark.unit
    def test_grid_prefers_fewer_bands(self, make_node):
        """A 3x2 card grid becomes two rows stacked in a column."""
        cards = [
            make_node(f"{r}{c}", 10 + c * 130, 10 + r * 100, 120, 80)
            for r in range(2)
            for c in range(3)
        ]
        decision = determine_layout_type(PARENT, cards)
        assert decision.layout_type == LayoutType.COLUMN
        assert [ids(g) for g in decision.groups] == [
            ["00", "01", "02"],
            ["10", "11", "12"],
        ]
        assert decision.gaps == [20]

    @pytest.mark.unit
    def test_stacked_overlap_is_mix(self, make_node):
        a = make_node("a", 0, 0, 100, 100)
        b = make_node("b", 20, 20, 100, 100)
        decision = determine_layout_type(PARENT, [b, a])
        assert decision.layout_type == LayoutType.MIX
        assert decision.groups == [[b, a]]
        assert decision.gaps == []


# =============================================================================
# Grid Detection
# =============================================================================


class TestDetectGridPattern:
    """Tests for detect_grid_pattern."""

    @pytest.mark.unit
    def test_three_by_two(self, make_node):
        children = [
            make_node(f"{x}-{y}", x, y, 80, 40) for y in (0, 50) for x in (0, 100, 200)
        ]
        grid = detect_grid_pattern(children)
        assert grid.is_grid is True
        assert (grid.columns, grid.rows) == (3, 2)

    @pytest.mark.unit
    def test_short_last_row(self, make_node):
        children = [
            make_node(f"{x}-{y}", x, y, 80, 40) for y in (0, 50) for x in (0, 100, 200)
        ][:5]
        grid = detect_grid_pattern(children)
        assert grid.is_grid is True

    @pytest.mark.unit
    def test_jitter_within_tolerance(self, make_node):
        children = [
            make_node("a", 0, 0, 40, 40),
            make_node("b", 103, 2, 40, 40),
            make_node("c", 2, 51, 40, 40),
            make_node("d", 100, 48, 40, 40),
        ]
        grid = detect_grid_pattern(children)
        assert grid.is_grid is True
        assert (grid.columns, grid.rows) == (2, 2)

    @pytest.mark.unit
    def test_single_row_is_not_grid(self, make_node):
        children = [make_node(str(i), i * 50, 0, 40, 40) for i in range(4)]
        grid = detect_grid_pattern(children)
        assert grid.is_grid is False
        assert (grid.columns, grid.rows) == (4, 1)

    @pytest.mark.unit
    def test_too_few_framed_children(self, make_node):
        children = [
            make_node("a", 0, 0, 40, 40),
            make_node("b", 50, 0, 40, 40),
            make_node("c", 0, 50, 40, 40),
            make_node("d"),
        ]
        grid = detect_grid_pattern(children)
        assert grid.is_grid is False
        assert (grid.columns, grid.rows) == (0, 0)

    @pytest.mark.unit
    def test_first_fit_clustering(self, make_node):
        """8 is more than 5px from the first representative (0), so it starts a new column."""
        children = [
            make_node("a", 0, 0, 10, 10),
            make_node("b", 4, 50, 10, 10),
            make_node("c", 8, 0, 10, 10),
            make_node("d", 8, 50, 10, 10),
        ]
        grid = detect_grid_pattern(children)
        assert grid.columns == 2
        assert grid.rows == 2
