"""Design tree traversal, search and node predicates.

Trees are `NodeSchema` instances. Traversal is depth-first; the read-only
helpers never modify the tree, and `map_tree` builds a new one.
"""

from collections.abc import Callable, Iterator

from flexinfer.schema import NodeSchema

# Components that host children even when the exported node has none yet
CONTAINER_COMPONENTS = frozenset(
    {"Document", "Page", "Modal", "Container", "Div", "View", "Block"}
)

NodePredicate = Callable[[NodeSchema], bool]

# (node, parent, index in parent, depth) -> False to skip the subtree
TraverseCallback = Callable[[NodeSchema, NodeSchema | None, int, int], bool | None]


def traverse_tree(
    node: NodeSchema,
    callback: TraverseCallback,
    parent: NodeSchema | None = None,
    index: int = 0,
    depth: int = 0,
) -> None:
    """Visit every node depth-first, parents before children.

    Args:
        node: Root of the (sub)tree to visit.
        callback: Called as `callback(node, parent, index, depth)`. Returning
            False skips the node's children.
        parent: Parent of `node`, None for the root.
        index: Position of `node` within its parent's children.
        depth: Depth of `node` (root = 0).
    """
    if callback(node, parent, index, depth) is False:
        return
    for child_index, child in enumerate(node.children):
        traverse_tree(child, callback, node, child_index, depth + 1)


def traverse_tree_post_order(
    node: NodeSchema,
    callback: TraverseCallback,
    parent: NodeSchema | None = None,
    index: int = 0,
    depth: int = 0,
) -> None:
    """Visit every node depth-first, children before parents."""
    for child_index, child in enumerate(node.children):
        traverse_tree_post_order(child, callback, node, child_index, depth + 1)
    callback(node, parent, index, depth)


def iter_nodes(node: NodeSchema) -> Iterator[NodeSchema]:
    """Yield nodes in pre-order."""
    yield node
    for child in node.children:
        yield from iter_nodes(child)


def map_tree(
    node: NodeSchema,
    mapper: Callable[[NodeSchema, int], NodeSchema],
    depth: int = 0,
) -> NodeSchema:
    """Build a new tree by applying `mapper` top-down.

    Each node is deep-copied before it reaches `mapper`, so the mapper may
    mutate its argument freely. The children of the mapped node are mapped
    in turn.

    Args:
        node: Root of the source tree.
        mapper: Called as `mapper(node_copy, depth)`; returns the node to keep.
        depth: Depth of `node` (root = 0).

    Returns:
        The mapped tree.
    """
    mapped = mapper(node.model_copy(deep=True), depth)
    mapped.children = [map_tree(child, mapper, depth + 1) for child in mapped.children]
    return mapped


def find_node(node: NodeSchema, predicate: NodePredicate) -> NodeSchema | None:
    """Return the first node in pre-order matching `predicate`."""
    return next((n for n in iter_nodes(node) if predicate(n)), None)


def find_all_nodes(node: NodeSchema, predicate: NodePredicate) -> list[NodeSchema]:
    """Return every node matching `predicate`, in pre-order."""
    return [n for n in iter_nodes(node) if predicate(n)]


def find_node_by_id(node: NodeSchema, node_id: str) -> NodeSchema | None:
    return find_node(node, lambda n: n.id == node_id)


def find_node_by_component_name(
    node: NodeSchema, component_name: str
) -> NodeSchema | None:
    return find_node(node, lambda n: n.component_name == component_name)


def get_leaf_nodes(node: NodeSchema) -> list[NodeSchema]:
    return find_all_nodes(node, lambda n: not n.children)


def get_node_path(root: NodeSchema, node_id: str) -> list[NodeSchema] | None:
    """Nodes from `root` down to the node with `node_id`, or None if absent."""
    if root.id == node_id:
        return [root]
    for child in root.children:
        path = get_node_path(child, node_id)
        if path is not None:
            return [root, *path]
    return None


def tree_depth(node: NodeSchema) -> int:
    """Calculate the depth of a design tree.

    Args:
        node: The root node.

    Returns:
        Maximum depth (root = 1).
    """
    if not node.children:
        return 1
    return 1 + max(tree_depth(child) for child in node.children)


def count_nodes(node: NodeSchema) -> int:
    """Count total nodes in a design tree, the root included."""
    return 1 + sum(count_nodes(child) for child in node.children)


def is_container(node: NodeSchema) -> bool:
    """Node has children or is a component that hosts children."""
    return bool(node.children) or node.component_name in CONTAINER_COMPONENTS


def is_slot_node(node: NodeSchema) -> bool:
    return node.component_name == "Slot" or node.slot is not None


def is_hidden_node(node: NodeSchema) -> bool:
    if node.hidden:
        return True
    style = node.props.get("style")
    return isinstance(style, dict) and style.get("display") == "none"


def has_loop(node: NodeSchema) -> bool:
    return node.loop is not None


def has_condition(node: NodeSchema) -> bool:
    return node.condition is not None


__all__ = [
    "CONTAINER_COMPONENTS",
    "NodePredicate",
    "TraverseCallback",
    "traverse_tree",
    "traverse_tree_post_order",
    "iter_nodes",
    "map_tree",
    "find_node",
    "find_all_nodes",
    "find_node_by_id",
    "find_node_by_component_name",
    "get_leaf_nodes",
    "get_node_path",
    "tree_depth",
    "count_nodes",
    "is_container",
    "is_slot_node",
    "is_hidden_node",
    "has_loop",
    "has_condition",
]
