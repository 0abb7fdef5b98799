"""Layout type determination for a container's normal-flow children."""

from collections.abc import Sequence

from flexinfer.geometry import get_node_frame, sort_by_position
from flexinfer.schema import Frame, LayoutType, NodeSchema
from flexinfer.tree import has_loop, is_slot_node

from .split import analyze_split, split_to_column, split_to_row
from .strategies import analyze_scored_split, scored_split
from .tolerance import DEFAULT_TOLERANCES, LayoutTolerances, SplitMode
from .types import LayoutDecision


def determine_layout_type(
    parent_frame: Frame | None,
    children: Sequence[NodeSchema],
    tolerances: LayoutTolerances | None = None,
) -> LayoutDecision:
    """Decide between row, column and mix for a set of children.

    Rules, first match wins:
        1. No children: `row` with no groups.
        2. A framed child with a loop marker: `column` when that child is
           wider than tall, else `row`; one group.
        3. One child: `row`, one group.
        4. Only slots: `row`, one group.
        5. Split analysis. Each split runs on the children sorted along its
           own axis, so the returned groups follow visual order. With
           `split_mode=scored` the best scored strategy per axis competes
           instead (`analyze_scored_split`).
        6. No split resolves: `mix`, one group in input order.

    Args:
        parent_frame: Container frame; read by adaptive tolerances.
        children: Normal-flow children.
        tolerances: Thresholds; built-in defaults when omitted.

    Returns:
        LayoutDecision with the layout type, groups and inter-group gaps.
    """
    tol = tolerances or DEFAULT_TOLERANCES
    children = list(children)

    if not children:
        return LayoutDecision(LayoutType.ROW)

    for child in children:
        if not has_loop(child):
            continue
        frame = get_node_frame(child)
        if frame is not None:
            direction = LayoutType.COLUMN if frame.width > frame.height else LayoutType.ROW
            return LayoutDecision(direction, [children])
        break

    if len(children) == 1 or all(is_slot_node(c) for c in children):
        return LayoutDecision(LayoutType.ROW, [children])

    if tol.split_mode == SplitMode.SCORED:
        direction, result = analyze_scored_split(
            scored_split(children, LayoutType.COLUMN, parent_frame, tol),
            scored_split(children, LayoutType.ROW, parent_frame, tol),
        )
    else:
        direction, result = analyze_split(
            split_to_row(
                sort_by_position(children, LayoutType.COLUMN), tol, parent_frame
            ),
            split_to_column(
                sort_by_position(children, LayoutType.ROW), tol, parent_frame
            ),
        )

    if direction == LayoutType.MIX:
        return LayoutDecision(LayoutType.MIX, [children])

    return LayoutDecision(direction, result.groups, result.gaps)


__all__ = ["determine_layout_type"]
