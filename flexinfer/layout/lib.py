"""Layout parser: annotate a design tree with flex-equivalent layout.

The parser copies the input tree and walks it top-down. For every container
it classifies the children, determines the layout type of the normal-flow
children, recurses into them, then records alignment, gap, padding and
grid signals in a `LayoutAnnotation`.

Output child order is: normal children in group order, then absolute,
slot and hidden children, each bucket in input order.
"""

import logging
from typing import Any

from flexinfer.config import EnvVar, get_environment
from flexinfer.core.log import get_logger
from flexinfer.geometry import (
    bounding_frame,
    calculate_padding,
    get_node_frame,
    is_valid_frame,
    normalize_frame,
    relative_frame,
)
from flexinfer.schema import (
    Frame,
    LayoutAnnotation,
    LayoutType,
    NodeSchema,
    Padding,
    Placement,
)
from flexinfer.tree import traverse_tree

from .alignment import calculate_optimal_gap, detect_alignment, needs_absolute_positioning
from .classify import classify_children
from .determine import determine_layout_type
from .grid import detect_grid_pattern
from .tolerance import LayoutTolerances
from .types import ChildClassification, LayoutDecision, LayoutStats, ProcessedChildren

logger = get_logger(__name__)


class LayoutError(ValueError):
    """Raised when input cannot be handed to the layout parser."""


def _as_node(tree: NodeSchema | dict[str, Any] | None) -> NodeSchema:
    if tree is None:
        raise LayoutError("Input tree is required")
    if isinstance(tree, NodeSchema):
        return tree
    return NodeSchema.model_validate(tree)


def _decision_level() -> int:
    return logging.INFO if get_environment(EnvVar.LOG_DECISIONS) else logging.DEBUG


def _copy_normalized(node: NodeSchema) -> NodeSchema:
    copy = node.model_copy(deep=True)
    if is_valid_frame(copy.frame):
        copy.frame = normalize_frame(copy.frame)
    return copy


def _padding(parent: Frame, content: Frame, threshold: float) -> Padding:
    insets = calculate_padding(parent, content)
    return Padding(**{side: v if v > threshold else 0 for side, v in insets.items()})


class _Parser:
    """Single parse run; holds the resolved tolerances and log level."""

    def __init__(self, tolerances: LayoutTolerances):
        self.tolerances = tolerances
        self.level = _decision_level()

    def process(self, node: NodeSchema, depth: int = 0) -> NodeSchema:
        result = _copy_normalized(node)
        if not result.children:
            return result

        children = [_copy_normalized(child) for child in result.children]
        parent_frame = get_node_frame(result)

        if parent_frame is not None:
            buckets = classify_children(parent_frame, children, self.tolerances)
        else:
            buckets = ChildClassification(normal=children)

        decision = self._decide(parent_frame, buckets.normal)
        normal = [child for group in decision.groups for child in group]
        if decision.layout_type == LayoutType.MIX:
            normal = list(buckets.normal)

        out: list[NodeSchema] = []
        for child in normal:
            processed = self.process(child, depth + 1)
            processed.placement = Placement.NORMAL
            if decision.layout_type == LayoutType.MIX:
                processed.offset = self._offset(child, parent_frame)
            out.append(processed)

        for child in buckets.absolute:
            processed = self.process(child, depth + 1)
            processed.placement = Placement.ABSOLUTE
            processed.offset = self._offset(child, parent_frame)
            out.append(processed)

        for child in buckets.slot:
            processed = self.process(child, depth + 1)
            processed.placement = Placement.SLOT
            out.append(processed)

        for child in buckets.hidden:
            child.placement = Placement.HIDDEN
            out.append(child)

        result.children = out
        result.layout = self._annotate(parent_frame, buckets, decision)

        logger.log(
            self.level,
            "%s%s: %s, %d group(s), %d absolute",
            "  " * depth,
            result.id or result.component_name,
            result.layout.layout_type,
            len(result.layout.groups),
            len(buckets.absolute),
        )
        return result

    def _decide(
        self, parent_frame: Frame | None, normal: list[NodeSchema]
    ) -> LayoutDecision:
        # Without a parent frame nothing was classified, so stacked children
        # are still among the normal ones
        if parent_frame is None and needs_absolute_positioning(normal, self.tolerances):
            return LayoutDecision(LayoutType.MIX, [normal])
        return determine_layout_type(parent_frame, normal, self.tolerances)

    @staticmethod
    def _offset(child: NodeSchema, parent_frame: Frame | None) -> Frame | None:
        child_frame = get_node_frame(child)
        if child_frame is None or parent_frame is None:
            return None
        return relative_frame(child_frame, parent_frame)

    def _annotate(
        self,
        parent_frame: Frame | None,
        buckets: ChildClassification,
        decision: LayoutDecision,
    ) -> LayoutAnnotation:
        groups: list[list[int]] = []
        start = 0
        for group in decision.groups:
            groups.append(list(range(start, start + len(group))))
            start += len(group)

        fields: dict[str, Any] = {}
        frames = [f for f in map(get_node_frame, buckets.normal) if f is not None]
        if parent_frame is not None and frames:
            if decision.layout_type != LayoutType.MIX:
                alignment = detect_alignment(
                    parent_frame, buckets.normal, self.tolerances
                )
                fields["align_horizontal"] = alignment.align_horizontal
                fields["align_vertical"] = alignment.align_vertical

            fields["padding"] = _padding(
                parent_frame, bounding_frame(frames), self.tolerances.padding_threshold
            )

            grid = detect_grid_pattern(buckets.normal, self.tolerances)
            if grid.is_grid:
                fields["grid"] = grid

        return LayoutAnnotation(
            layout_type=decision.layout_type,
            groups=groups,
            gaps=decision.gaps,
            gap=calculate_optimal_gap(decision.gaps),
            has_absolute_children=bool(buckets.absolute),
            **fields,
        )


def layout_parser(
    tree: NodeSchema | dict[str, Any] | None,
    tolerances: LayoutTolerances | None = None,
) -> NodeSchema:
    """Annotate a design tree with inferred flex layout.

    The input is never modified; the result is a new tree in which every
    container carries a `layout` annotation and every child a `placement`.

    Args:
        tree: Root node, or its raw JSON-compatible dict.
        tolerances: Thresholds; resolved from the environment when omitted.

    Returns:
        The annotated copy of the tree.

    Raises:
        LayoutError: If `tree` is None.
        pydantic.ValidationError: If a raw dict is not a valid design tree.
    """
    root = _as_node(tree)
    parser = _Parser(tolerances or LayoutTolerances.from_environment())
    return parser.process(root)


def doc_layout_parser(
    doc: NodeSchema | dict[str, Any] | None,
    tolerances: LayoutTolerances | None = None,
) -> NodeSchema:
    """Annotate each page or modal of a `Document` independently.

    Raises:
        LayoutError: If `doc` is None or its root is not a Document.
    """
    root = _as_node(doc)
    if root.component_name != "Document":
        raise LayoutError(
            f"Input must be a Document node, got '{root.component_name}'"
        )

    result = root.model_copy(deep=True)
    result.children = [layout_parser(page, tolerances) for page in root.children]
    return result


def process_children(
    children: list[NodeSchema],
    parent_frame: Frame | None = None,
    tolerances: LayoutTolerances | None = None,
) -> ProcessedChildren:
    """Lay out a list of children without annotating a container.

    Each child is processed as its own subtree; the layout type and gaps
    describe how the children would be arranged together.
    """
    if not children:
        return ProcessedChildren(LayoutType.ROW)

    parser = _Parser(tolerances or LayoutTolerances.from_environment())
    normalized = [_copy_normalized(child) for child in children]
    decision = determine_layout_type(parent_frame, normalized, parser.tolerances)

    return ProcessedChildren(
        layout_type=decision.layout_type,
        children=[parser.process(child) for child in normalized],
        gaps=decision.gaps,
    )


def analyze_layout(
    tree: NodeSchema | dict[str, Any], tolerances: LayoutTolerances | None = None
) -> LayoutStats:
    """Count the layout types a tree would receive, without annotating it.

    Every node with children counts once, using all of its children.

    Raises:
        LayoutError: If `tree` is None.
    """
    tol = tolerances or LayoutTolerances.from_environment()
    stats = LayoutStats()

    def count(node: NodeSchema, _parent, _index: int, depth: int) -> None:
        stats.total_nodes += 1
        stats.max_depth = max(stats.max_depth, depth)
        if node.children:
            decision = determine_layout_type(get_node_frame(node), node.children, tol)
            stats.layout_types[LayoutType(decision.layout_type).value] += 1

    traverse_tree(_as_node(tree), count)
    return stats


__all__ = [
    "LayoutError",
    "layout_parser",
    "doc_layout_parser",
    "process_children",
    "analyze_layout",
]
