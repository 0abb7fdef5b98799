"""Design tree traversal, search and node predicates.

Example:
    >>> from flexinfer.tree import count_nodes, find_node_by_id
    >>> header = find_node_by_id(tree, "header")
    >>> count_nodes(tree)
"""

from .lib import (
    CONTAINER_COMPONENTS,
    NodePredicate,
    TraverseCallback,
    count_nodes,
    find_all_nodes,
    find_node,
    find_node_by_component_name,
    find_node_by_id,
    get_leaf_nodes,
    get_node_path,
    has_condition,
    has_loop,
    is_container,
    is_hidden_node,
    is_slot_node,
    iter_nodes,
    map_tree,
    traverse_tree,
    traverse_tree_post_order,
    tree_depth,
)

__all__ = [
    # Types
    "NodePredicate",
    "TraverseCallback",
    "CONTAINER_COMPONENTS",
    # Traversal
    "traverse_tree",
    "traverse_tree_post_order",
    "iter_nodes",
    "map_tree",
    # Search
    "find_node",
    "find_all_nodes",
    "find_node_by_id",
    "find_node_by_component_name",
    "get_leaf_nodes",
    "get_node_path",
    # Metrics
    "tree_depth",
    "count_nodes",
    # Predicates
    "is_container",
    "is_slot_node",
    "is_hidden_node",
    "has_loop",
    "has_condition",
]
