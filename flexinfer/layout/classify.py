"""Child classification: sort children into normal/absolute/hidden/slot."""

from collections.abc import Sequence

from flexinfer.geometry import frames_overlap, get_node_frame
from flexinfer.schema import Frame, NodeSchema
from flexinfer.tree import is_hidden_node, is_slot_node

from .adaptive import resolve_overlap_tolerances
from .tolerance import LayoutTolerances
from .types import ChildClassification


def _overlaps_any(
    child: NodeSchema,
    frame: Frame,
    siblings: Sequence[tuple[NodeSchema, Frame | None]],
    tolerance: float,
) -> bool:
    for other, other_frame in siblings:
        if other is child or other_frame is None:
            continue
        if frames_overlap(frame, other_frame, tolerance):
            return True
    return False


def classify_children(
    parent_frame: Frame | None,
    children: Sequence[NodeSchema],
    tolerances: LayoutTolerances | None = None,
) -> ChildClassification:
    """Partition children into classification buckets.

    Precedence per child, first match wins: hidden, slot, absolute, normal.
    A child is absolute when it carries an explicit fixed-position override,
    or when its frame overlaps a non-hidden sibling at the light tolerance
    and the overlap still holds at the deeper confirmation tolerance.
    Frameless children are never absolute by overlap. Adaptive tolerances
    scale both overlap depths to the children's size.

    Args:
        parent_frame: Frame of the container (not consulted by the overlap test).
        children: Children in input order.
        tolerances: Thresholds; built-in defaults when omitted.

    Returns:
        ChildClassification whose buckets keep input order.
    """
    result = ChildClassification()

    visible = [
        (child, get_node_frame(child))
        for child in children
        if not is_hidden_node(child)
    ]
    light, confirm = resolve_overlap_tolerances(
        [frame for _, frame in visible if frame is not None], tolerances
    )

    for child in children:
        if is_hidden_node(child):
            result.hidden.append(child)
            continue

        if is_slot_node(child):
            result.slot.append(child)
            continue

        if child.fixed_position:
            result.absolute.append(child)
            continue

        frame = get_node_frame(child)
        if (
            frame is not None
            and _overlaps_any(child, frame, visible, light)
            and _overlaps_any(child, frame, visible, confirm)
        ):
            result.absolute.append(child)
            continue

        result.normal.append(child)

    return result


__all__ = ["classify_children"]
