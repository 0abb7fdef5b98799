"""Unit tests for the scored alignment analysis."""

import pytest

from flexinfer.layout import (
    LayoutTolerances,
    analyze_alignment,
    analyze_horizontal_alignment,
    analyze_vertical_alignment,
    detect_alignment,
    detect_scored_alignment,
    normalize_horizontal_alignment,
    normalize_vertical_alignment,
)
from flexinfer.schema import (
    AlignHorizontal,
    AlignVertical,
    ExtendedAlignHorizontal,
    ExtendedAlignVertical,
    Frame,
)


def container(width, height):
    return Frame(left=0, top=0, width=width, height=height)


class TestHorizontalScores:
    """Tests for analyze_horizontal_alignment."""

    @pytest.mark.unit
    def test_left(self, make_node):
        children = [make_node("a", 5, 10, 80, 30), make_node("b", 95, 10, 80, 30)]
        result = analyze_horizontal_alignment(container(300, 50), children)
        assert result.alignment == ExtendedAlignHorizontal.LEFT
        assert result.confidence == 1
        assert result.scores["right"] == 0

    @pytest.mark.unit
    def test_right(self, make_node):
        children = [make_node("a", 125, 10, 80, 30), make_node("b", 215, 10, 80, 30)]
        result = analyze_horizontal_alignment(container(300, 50), children)
        assert result.alignment == ExtendedAlignHorizontal.RIGHT

    @pytest.mark.unit
    def test_center(self, make_node):
        result = analyze_horizontal_alignment(
            container(300, 50), [make_node("a", 100, 10, 100, 30)]
        )
        assert result.alignment == ExtendedAlignHorizontal.CENTER
        assert result.scores["center"] == pytest.approx(0.95)

    @pytest.mark.unit
    def test_justify(self, make_node):
        children = [make_node("a", 0, 0, 150, 50), make_node("b", 150, 0, 150, 50)]
        result = analyze_horizontal_alignment(container(300, 50), children)
        assert result.alignment == ExtendedAlignHorizontal.JUSTIFY

    @pytest.mark.unit
    def test_space_between_flush_with_edges(self, make_node):
        children = [make_node(str(i), i * 110, 0, 80, 30) for i in range(3)]
        result = analyze_horizontal_alignment(container(300, 30), children)
        assert result.alignment == ExtendedAlignHorizontal.SPACE_BETWEEN
        assert result.scores["space-between"] == pytest.approx(1)

    @pytest.mark.unit
    def test_space_around(self, make_node):
        """Half-gap margins: 50 | 100 | 100 | 100 | 50."""
        children = [make_node("a", 50, 0, 100, 30), make_node("b", 250, 0, 100, 30)]
        result = analyze_horizontal_alignment(container(400, 30), children)
        assert result.alignment == ExtendedAlignHorizontal.SPACE_AROUND
        assert result.scores["space-evenly"] == 0

    @pytest.mark.unit
    def test_space_evenly(self, make_node):
        lefts = (175, 450, 725)
        children = [make_node(str(i), left, 0, 100, 30) for i, left in enumerate(lefts)]
        result = analyze_horizontal_alignment(container(1000, 30), children)
        assert result.alignment == ExtendedAlignHorizontal.SPACE_EVENLY
        assert result.scores["space-evenly"] == pytest.approx(1)

    @pytest.mark.unit
    @pytest.mark.parametrize("parent", [None, container(0, 30)])
    def test_fallback(self, make_node, parent):
        result = analyze_horizontal_alignment(parent, [make_node("a", 0, 0, 10, 10)])
        assert result.alignment == ExtendedAlignHorizontal.LEFT
        assert result.confidence == 1
        assert result.scores == {}

    @pytest.mark.unit
    def test_frameless_children_fall_back(self, make_node):
        result = analyze_horizontal_alignment(container(300, 30), [make_node("a")])
        assert result.alignment == ExtendedAlignHorizontal.LEFT


class TestVerticalScores:
    """Tests for analyze_vertical_alignment."""

    @pytest.mark.unit
    def test_top(self, make_node):
        result = analyze_vertical_alignment(
            container(100, 100), [make_node("a", 0, 5, 50, 20)]
        )
        assert result.alignment == ExtendedAlignVertical.TOP

    @pytest.mark.unit
    def test_bottom(self, make_node):
        result = analyze_vertical_alignment(
            container(100, 100), [make_node("a", 0, 75, 50, 20)]
        )
        assert result.alignment == ExtendedAlignVertical.BOTTOM

    @pytest.mark.unit
    def test_middle(self, make_node):
        result = analyze_vertical_alignment(
            container(100, 100), [make_node("a", 0, 40, 50, 20)]
        )
        assert result.alignment == ExtendedAlignVertical.MIDDLE

    @pytest.mark.unit
    def test_full_height_children_stretch(self, make_node):
        children = [make_node("a", 0, 0, 50, 50), make_node("b", 60, 0, 50, 50)]
        result = analyze_vertical_alignment(container(200, 50), children)
        assert result.alignment == ExtendedAlignVertical.STRETCH
        assert result.scores["top"] == pytest.approx(0.3)
        assert result.scores["middle"] == pytest.approx(0.3)

    @pytest.mark.unit
    def test_analyze_both_axes(self, make_node):
        analysis = analyze_alignment(container(300, 100), [make_node("a", 5, 5, 50, 20)])
        assert analysis.horizontal.alignment == ExtendedAlignHorizontal.LEFT
        assert analysis.vertical.alignment == ExtendedAlignVertical.TOP


class TestNormalization:
    """Tests for folding extended alignments into the annotation values."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "extended, expected",
        [
            ("space-around", AlignHorizontal.SPACE_BETWEEN),
            ("space-evenly", AlignHorizontal.SPACE_BETWEEN),
            ("justify", AlignHorizontal.JUSTIFY),
            (ExtendedAlignHorizontal.RIGHT, AlignHorizontal.RIGHT),
        ],
    )
    def test_horizontal(self, extended, expected):
        assert normalize_horizontal_alignment(extended) == expected

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "extended, expected",
        [
            ("baseline", AlignVertical.TOP),
            ("space-between", AlignVertical.TOP),
            ("stretch", AlignVertical.STRETCH),
            (ExtendedAlignVertical.BOTTOM, AlignVertical.BOTTOM),
        ],
    )
    def test_vertical(self, extended, expected):
        assert normalize_vertical_alignment(extended) == expected


class TestScoredDetection:
    """detect_alignment with scored alignment switched on."""

    @pytest.mark.unit
    def test_evenly_spread_content_normalizes_to_space_between(self, make_node):
        """Margin rules read wide even margins as center; scoring as space-evenly."""
        lefts = (175, 450, 725)
        children = [make_node(str(i), left, 0, 100, 30) for i, left in enumerate(lefts)]
        parent = container(1000, 30)

        assert detect_alignment(parent, children).align_horizontal == "center"

        tolerances = LayoutTolerances(scored_alignment=True)
        scored = detect_alignment(parent, children, tolerances)
        assert scored.align_horizontal == AlignHorizontal.SPACE_BETWEEN
        assert scored.align_vertical == AlignVertical.STRETCH
        assert scored == detect_scored_alignment(parent, children)

    @pytest.mark.unit
    def test_no_parent(self, make_node):
        result = detect_scored_alignment(None, [make_node("a", 0, 0, 10, 10)])
        assert result.align_horizontal == AlignHorizontal.LEFT
        assert result.align_vertical == AlignVertical.TOP
